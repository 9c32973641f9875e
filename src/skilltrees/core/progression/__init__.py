"""Progression tracking and learning path synthesis.

Submodules:
    models  -- ProgressionStatus, ProgressionThresholds, SkillProgression,
               Difficulty, LearningPath
    status  -- derive_status, the pure status function
    paths   -- prerequisite closure, subset ordering, path synthesis
"""

from skilltrees.core.progression.models import (
    Difficulty,
    LearningPath,
    ProgressionStatus,
    ProgressionThresholds,
    SkillProgression,
)
from skilltrees.core.progression.status import derive_status
from skilltrees.core.progression.paths import (
    build_learning_path,
    classify_difficulty,
    collect_prerequisites,
    estimate_effort,
    order_for_learning,
)

__all__ = [
    "Difficulty",
    "LearningPath",
    "ProgressionStatus",
    "ProgressionThresholds",
    "SkillProgression",
    "build_learning_path",
    "classify_difficulty",
    "collect_prerequisites",
    "derive_status",
    "estimate_effort",
    "order_for_learning",
]
