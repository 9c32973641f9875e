"""Learning path synthesis over the global skill graph.

A learning path walks the *global* graph, never a filtered tree: a target's
prerequisites may live in any phase, tag or category.

1. Collect the transitive prerequisite closure of the target by depth-first
   pre-order over ``depends_on``. An id already visited is not expanded
   again, which bounds the walk on cyclic data. Ids the graph does not know
   are kept as leaf prerequisites.
2. Keep only the skills (closure plus target) not yet familiar or mastered.
3. Order them with Kahn's algorithm restricted to that subset, FIFO in
   closure order. Ids left over by a cycle are appended at the end.
4. Classify difficulty and estimate effort by the number of skills left.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Iterator

from skilltrees.core.graph.models import GraphAccessor
from skilltrees.core.progression.models import (
    Difficulty,
    LearningPath,
    SkillProgression,
)
from skilltrees.exceptions import SkillNotFoundError

logger = logging.getLogger(__name__)

BEGINNER_MAX_SKILLS: int = 5
INTERMEDIATE_MAX_SKILLS: int = 10
SKILLS_PER_SESSION: int = 3


def collect_prerequisites(graph: GraphAccessor, target: str) -> list[str]:
    """Return every transitive prerequisite of ``target`` in pre-order.

    The target itself is never part of the result, even when a cycle leads
    back to it.

    Args:
        graph: The global graph.
        target: Skill id whose prerequisites are collected.

    Returns:
        Unique prerequisite ids, each listed where the walk first met it.
    """
    root = graph.get_node(target)
    if root is None:
        return []

    visited: set[str] = {target}
    on_path: list[str] = [target]
    stack: list[Iterator[str]] = [iter(root.depends_on)]
    seen: set[str] = set()
    order: list[str] = []

    while stack:
        dep_id = next(stack[-1], None)
        if dep_id is None:
            stack.pop()
            on_path.pop()
            continue

        if dep_id not in seen and dep_id != target:
            seen.add(dep_id)
            order.append(dep_id)

        if dep_id in visited:
            if dep_id in on_path:
                logger.warning(
                    "Prerequisite cycle: %s depends back on %s; not expanding further",
                    on_path[-1], dep_id,
                )
            continue
        visited.add(dep_id)

        node = graph.get_node(dep_id)
        if node is not None:
            on_path.append(dep_id)
            stack.append(iter(node.depends_on))

    return order


def order_for_learning(graph: GraphAccessor, skill_ids: list[str]) -> list[str]:
    """Topologically order a subset of skills, prerequisites first.

    Only edges between members of ``skill_ids`` count. Zero in-degree skills
    are taken in their input order (no leverage tie-break). Skills never
    freed because of a cycle are appended in input order and logged.

    Args:
        graph: The global graph (for ``depends_on`` lookups).
        skill_ids: The skills to order. Duplicates are ignored.

    Returns:
        Every input id exactly once.
    """
    ids = list(dict.fromkeys(skill_ids))
    members = set(ids)

    in_degree: dict[str, int] = {}
    dependents: dict[str, list[str]] = {skill_id: [] for skill_id in ids}
    for skill_id in ids:
        node = graph.get_node(skill_id)
        deps = set(node.depends_on) & members if node else set()
        deps.discard(skill_id)
        in_degree[skill_id] = len(deps)
        for dep_id in deps:
            dependents[dep_id].append(skill_id)

    queue = deque(skill_id for skill_id in ids if in_degree[skill_id] == 0)
    result: list[str] = []
    while queue:
        skill_id = queue.popleft()
        result.append(skill_id)
        for child_id in dependents[skill_id]:
            in_degree[child_id] -= 1
            if in_degree[child_id] == 0:
                queue.append(child_id)

    if len(result) < len(ids):
        placed = set(result)
        leftovers = [skill_id for skill_id in ids if skill_id not in placed]
        logger.warning(
            "Cycle among learning path skills; appending unordered: %s",
            ", ".join(leftovers),
        )
        result.extend(leftovers)
    return result


def classify_difficulty(skill_count: int) -> Difficulty:
    """Map the number of skills left to learn to a difficulty."""
    if skill_count > INTERMEDIATE_MAX_SKILLS:
        return Difficulty.ADVANCED
    if skill_count > BEGINNER_MAX_SKILLS:
        return Difficulty.INTERMEDIATE
    return Difficulty.BEGINNER


def estimate_effort(skill_count: int) -> str:
    """Estimate effort as sessions of three skills each, rounded up."""
    return f"{math.ceil(skill_count / SKILLS_PER_SESSION)} sessions"


def build_learning_path(
    graph: GraphAccessor,
    target: str,
    progression_of: Callable[[str], SkillProgression],
) -> LearningPath:
    """Synthesize a learning path toward ``target``.

    Args:
        graph: The global graph.
        target: Skill id to learn.
        progression_of: Returns the current progression of a skill id.

    Returns:
        A new ``LearningPath``.

    Raises:
        SkillNotFoundError: If the target is not in the graph.
    """
    target_node = graph.get_node(target)
    if target_node is None:
        raise SkillNotFoundError(target)

    prerequisites = collect_prerequisites(graph, target)
    to_learn = [
        skill_id for skill_id in prerequisites
        if not progression_of(skill_id).status.is_learned
    ]
    if not progression_of(target).status.is_learned:
        to_learn.append(target)

    ordered = order_for_learning(graph, to_learn)
    remaining = set(to_learn)

    return LearningPath(
        id=f"path-to-{target}-{uuid.uuid4().hex[:12]}",
        name=f"Path to {target_node.name}",
        description=f"Learn {target_node.name} and its prerequisites",
        target=target,
        skills=ordered,
        estimated_effort=estimate_effort(len(ordered)),
        difficulty=classify_difficulty(len(ordered)),
        prerequisites=[p for p in prerequisites if p not in remaining],
        outcomes=[f"Understand and use {target_node.name}"]
        + [f"Familiarity with {tag} skills" for tag in target_node.tags],
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
