"""Snapshot persistence for trees, progressions and learning paths."""

from skilltrees.core.store.snapshot import (
    JsonSnapshotStore,
    MemorySnapshotStore,
    SnapshotState,
    SnapshotStore,
)
from skilltrees.core.store.serialization import (
    path_from_dict,
    path_to_dict,
    tree_from_dict,
    tree_to_dict,
)

__all__ = [
    "JsonSnapshotStore",
    "MemorySnapshotStore",
    "SnapshotState",
    "SnapshotStore",
    "path_from_dict",
    "path_to_dict",
    "tree_from_dict",
    "tree_to_dict",
]
