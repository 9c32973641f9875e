"""Core engine: graph boundary, domain filter, tree builder, progression, storage."""
