"""Progression status derivation.

Status is never transitioned event by event. It is recomputed from the
current counters on every update with a fixed precedence:

1. uses >= mastered_uses AND outputs >= mastered_outputs  -> mastered
2. uses >= familiar_uses OR outputs >= familiar_outputs   -> familiar
3. outputs >= in_progress_outputs                         -> in-progress
4. prerequisites met                                      -> available
5. otherwise the previous status is kept

Monotonicity: each condition is monotone in the counters, and the result is
the first condition that holds. Raising a counter can only make more
conditions hold, so the derived status never moves down the ladder while
counters grow.

The service also never lets derivation lower a stored status: only an
explicit override moves a skill down. An override to ``mastered`` followed
by one recorded output therefore stays ``mastered`` instead of re-deriving
to ``in-progress``.
"""

from __future__ import annotations

from skilltrees.core.progression.models import (
    ProgressionStatus,
    ProgressionThresholds,
)

_DEFAULT_THRESHOLDS = ProgressionThresholds()


def derive_status(
    outputs_seen: int,
    used_in_loop: int,
    prerequisites_met: bool,
    previous_status: ProgressionStatus = ProgressionStatus.LOCKED,
    thresholds: ProgressionThresholds | None = None,
) -> ProgressionStatus:
    """Compute a skill's status from its interaction counters.

    Args:
        outputs_seen: Times the skill's output was observed.
        used_in_loop: Times the skill was used in a workflow.
        prerequisites_met: Whether prerequisites are satisfied.
        previous_status: Returned unchanged when no rule applies.
        thresholds: Custom thresholds. Defaults to (5, 10, 2, 5, 1).

    Returns:
        The derived ``ProgressionStatus``.
    """
    t = thresholds or _DEFAULT_THRESHOLDS
    if used_in_loop >= t.mastered_uses and outputs_seen >= t.mastered_outputs:
        return ProgressionStatus.MASTERED
    if used_in_loop >= t.familiar_uses or outputs_seen >= t.familiar_outputs:
        return ProgressionStatus.FAMILIAR
    if outputs_seen >= t.in_progress_outputs:
        return ProgressionStatus.IN_PROGRESS
    if prerequisites_met:
        return ProgressionStatus.AVAILABLE
    return previous_status
