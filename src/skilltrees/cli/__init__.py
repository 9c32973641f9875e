"""Command-line interface for SkillTrees."""
