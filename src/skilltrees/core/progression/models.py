"""Progression data models: statuses, thresholds, records, and learning paths.

- ``ProgressionStatus`` -- the five-step familiarity ladder.
- ``ProgressionThresholds`` -- counter thresholds driving status derivation.
- ``SkillProgression`` -- one mutable record per skill ever interacted with.
- ``Difficulty`` / ``LearningPath`` -- a disposable learning-path snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# ProgressionStatus
# ---------------------------------------------------------------------------


class ProgressionStatus(str, Enum):
    """Where a user stands with a skill.

    The declaration order is the ladder order: LOCKED < AVAILABLE <
    IN_PROGRESS < FAMILIAR < MASTERED. ``rank`` exposes it numerically.
    """

    LOCKED = "locked"
    AVAILABLE = "available"
    IN_PROGRESS = "in-progress"
    FAMILIAR = "familiar"
    MASTERED = "mastered"

    @property
    def rank(self) -> int:
        """Position on the ladder, 0 (locked) to 4 (mastered)."""
        return _STATUS_ORDER.index(self)

    @property
    def is_learned(self) -> bool:
        """True for statuses that count as already learned."""
        return self in (ProgressionStatus.FAMILIAR, ProgressionStatus.MASTERED)


_STATUS_ORDER: tuple[ProgressionStatus, ...] = tuple(ProgressionStatus)


# ---------------------------------------------------------------------------
# ProgressionThresholds
# ---------------------------------------------------------------------------


@dataclass
class ProgressionThresholds:
    """Counter thresholds for status derivation.

    Attributes:
        mastered_uses: Loop uses required (together with outputs) for mastery.
        mastered_outputs: Outputs seen required (together with uses) for mastery.
        familiar_uses: Loop uses sufficient on their own for familiarity.
        familiar_outputs: Outputs seen sufficient on their own for familiarity.
        in_progress_outputs: Outputs seen that mark a skill as in progress.
    """

    mastered_uses: int = 5
    mastered_outputs: int = 10
    familiar_uses: int = 2
    familiar_outputs: int = 5
    in_progress_outputs: int = 1

    def validate(self) -> None:
        """Raise ValueError unless every threshold is an integer >= 1.

        A zero threshold would let a brand-new record with all-zero counters
        skip past ``locked``.

        Raises:
            ValueError: If any threshold is not an int or is below 1.
        """
        for name in (
            "mastered_uses", "mastered_outputs", "familiar_uses",
            "familiar_outputs", "in_progress_outputs",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(
                    f"Threshold '{name}' must be an integer, got {type(value).__name__}"
                )
            if value < 1:
                raise ValueError(f"Threshold '{name}' must be >= 1, got {value}")


# ---------------------------------------------------------------------------
# SkillProgression
# ---------------------------------------------------------------------------


@dataclass
class SkillProgression:
    """Per-skill progression record.

    Counters only ever increase. ``status`` is recomputed from the counters
    on every update, except when a caller sets it explicitly as an override.

    Attributes:
        status: Current progression status.
        prerequisites_met: Whether the skill's prerequisites are satisfied.
        outputs_seen: Times the user has seen this skill's output.
        used_in_loop: Times the user has used this skill in a workflow.
        last_interaction: ISO-8601 UTC timestamp of the last update.
        notes: Optional free text.
    """

    status: ProgressionStatus = ProgressionStatus.LOCKED
    prerequisites_met: bool = False
    outputs_seen: int = 0
    used_in_loop: int = 0
    last_interaction: str | None = None
    notes: str | None = None

    def copy(self) -> SkillProgression:
        """Return an independent copy (records are plain values)."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "prerequisites_met": self.prerequisites_met,
            "outputs_seen": self.outputs_seen,
            "used_in_loop": self.used_in_loop,
        }
        if self.last_interaction is not None:
            data["last_interaction"] = self.last_interaction
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkillProgression:
        return cls(
            status=ProgressionStatus(data.get("status", ProgressionStatus.LOCKED.value)),
            prerequisites_met=bool(data.get("prerequisites_met", False)),
            outputs_seen=int(data.get("outputs_seen", 0)),
            used_in_loop=int(data.get("used_in_loop", 0)),
            last_interaction=data.get("last_interaction"),
            notes=data.get("notes"),
        )


# ---------------------------------------------------------------------------
# LearningPath
# ---------------------------------------------------------------------------


class Difficulty(str, Enum):
    """Learning path difficulty, classified by how many skills remain."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass
class LearningPath:
    """An ordered list of skills still to learn on the way to a target.

    A snapshot: it is not refreshed when progression changes afterwards.

    Attributes:
        id: Unique path id.
        name: Display name ("Path to <target name>").
        description: One-line description.
        target: The target skill id.
        skills: Skills left to learn, prerequisites first. Ends with the
            target unless the target is already learned.
        estimated_effort: Effort estimate, e.g. "2 sessions".
        difficulty: Classification by ``len(skills)``.
        prerequisites: Prerequisites of the target that are already learned.
        outcomes: Human-readable outcome statements.
        generated_at: ISO-8601 UTC generation timestamp.
    """

    id: str
    name: str
    description: str
    target: str
    skills: list[str] = field(default_factory=list)
    estimated_effort: str = "0 sessions"
    difficulty: Difficulty = Difficulty.BEGINNER
    prerequisites: list[str] = field(default_factory=list)
    outcomes: list[str] = field(default_factory=list)
    generated_at: str = ""
