"""SkillTrees: skill dependency graphs, domain trees, and learning progression."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
