"""Skill graph data model and the read-only accessor protocols.

The canonical skill graph is owned elsewhere (a knowledge-graph builder); this
engine only reads it. Two narrow protocols describe what the engine consumes:

- ``GraphAccessor`` -- node lookup plus a version marker for provenance.
- ``WorkflowSource`` -- named workflows resolved to skill-id sets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# SkillNode: A vertex in the global skill graph
# ---------------------------------------------------------------------------


@dataclass
class SkillNode:
    """A skill in the global graph.

    Degrees are counted over the *entire* graph, never over a filtered
    subset, so they stay meaningful when a node is copied into a domain tree.

    Attributes:
        id: Unique skill identifier.
        name: Display name.
        description: Free-text description.
        version: Skill version string.
        phase: Optional phase classifier (e.g., "INIT", "SCAFFOLD").
        category: Optional category classifier.
        tags: Free-form tags.
        depends_on: Identifiers of prerequisite skills.
        leverage_score: Downstream-value weight, used only for tie-breaking.
        usage_count: Execution count observed by the graph builder.
        in_degree: Number of skills that declare this one as a prerequisite.
        out_degree: Number of prerequisites this skill declares.
    """

    id: str
    name: str = ""
    description: str = ""
    version: str = "1.0.0"
    phase: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    depends_on: list[str] = field(default_factory=list)
    leverage_score: float = 0.0
    usage_count: int = 0
    in_degree: int = 0
    out_degree: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.id


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class GraphAccessor(Protocol):
    """Read-only provider of the canonical skill graph."""

    def get_all_nodes(self) -> list[SkillNode]:
        """Return every node in the graph."""
        ...

    def get_node(self, skill_id: str) -> SkillNode | None:
        """Return one node, or None if the id is unknown."""
        ...

    def get_graph_version_marker(self) -> str:
        """Return a marker identifying the graph snapshot (for provenance)."""
        ...


@runtime_checkable
class WorkflowSource(Protocol):
    """Read-only provider of named workflows (sequences of skills)."""

    def get_skill_ids_for_workflow(self, workflow_id: str) -> set[str] | None:
        """Return the skill ids in a workflow, or None if it is unknown."""
        ...

    def list_workflows(self) -> list[str]:
        """Return all known workflow ids."""
        ...
