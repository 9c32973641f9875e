"""In-memory skill graph and workflow source.

``SkillGraph`` is the default ``GraphAccessor``: a dict-indexed node store
with global degree computation. ``StaticWorkflows`` is the default
``WorkflowSource``, built from a plain mapping.

Thread safety: neither class is thread-safe for mutation. Both are meant to
be populated once and then read.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from skilltrees.core.graph.models import SkillNode


class SkillGraph:
    """The global skill graph, indexed by skill id.

    Args:
        version_marker: Provenance marker stamped on generated trees. When
            omitted, the UTC time of construction is used.
    """

    def __init__(self, version_marker: str | None = None) -> None:
        self._nodes: dict[str, SkillNode] = {}
        self._version_marker = (
            version_marker or datetime.now(timezone.utc).isoformat()
        )

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[SkillNode],
        version_marker: str | None = None,
        compute_degrees: bool = True,
    ) -> SkillGraph:
        """Build a graph from nodes, optionally recomputing global degrees.

        Args:
            nodes: Skill nodes to add. Later duplicates replace earlier ones.
            version_marker: Provenance marker for the graph.
            compute_degrees: When True, overwrite ``in_degree`` and
                ``out_degree`` from the ``depends_on`` relation.

        Returns:
            A populated ``SkillGraph``.
        """
        graph = cls(version_marker=version_marker)
        for node in nodes:
            graph.add_skill(node)
        if compute_degrees:
            graph.compute_degrees()
        return graph

    # -- Mutation (graph owner side) -----------------------------------------

    def add_skill(self, node: SkillNode) -> None:
        """Add a skill node, replacing any node with the same id."""
        self._nodes[node.id] = node

    def compute_degrees(self) -> None:
        """Recompute global in/out degrees for every node.

        Out-degree counts every declared prerequisite. In-degree counts the
        nodes that declare this node as a prerequisite; references to ids not
        in the graph add to the declaring node's out-degree only.
        """
        incoming: dict[str, int] = defaultdict(int)
        for node in self._nodes.values():
            for dep_id in node.depends_on:
                if dep_id in self._nodes:
                    incoming[dep_id] += 1

        for skill_id, node in list(self._nodes.items()):
            self._nodes[skill_id] = replace(
                node,
                in_degree=incoming.get(skill_id, 0),
                out_degree=len(node.depends_on),
            )

    # -- GraphAccessor -------------------------------------------------------

    def get_all_nodes(self) -> list[SkillNode]:
        return list(self._nodes.values())

    def get_node(self, skill_id: str) -> SkillNode | None:
        return self._nodes.get(skill_id)

    def get_graph_version_marker(self) -> str:
        return self._version_marker

    # -- Queries -------------------------------------------------------------

    @property
    def skills(self) -> set[str]:
        """Return the set of all skill ids in the graph."""
        return set(self._nodes)

    @property
    def node_count(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


class StaticWorkflows:
    """Workflow source backed by a mapping of workflow id to skills.

    Each value is either a flat list of skill ids or a list of phases, each
    phase a mapping with a ``skills`` list whose items are skill ids or
    mappings carrying a ``skill_id``/``skillId`` key.
    """

    def __init__(self, workflows: Mapping[str, Any] | None = None) -> None:
        self._workflows: dict[str, set[str]] = {}
        for workflow_id, definition in (workflows or {}).items():
            self._workflows[workflow_id] = _collect_workflow_skills(definition)

    def get_skill_ids_for_workflow(self, workflow_id: str) -> set[str] | None:
        skills = self._workflows.get(workflow_id)
        return set(skills) if skills is not None else None

    def list_workflows(self) -> list[str]:
        return sorted(self._workflows)


def _collect_workflow_skills(definition: Any) -> set[str]:
    """Flatten one workflow definition into a skill-id set."""
    if isinstance(definition, Mapping):
        definition = definition.get("phases", [])

    skill_ids: set[str] = set()
    for item in definition or []:
        if isinstance(item, str):
            skill_ids.add(item)
        elif isinstance(item, Mapping) and "skills" in item:
            for skill in item["skills"] or []:
                if isinstance(skill, str):
                    skill_ids.add(skill)
                elif isinstance(skill, Mapping):
                    ref = skill.get("skill_id") or skill.get("skillId")
                    if ref:
                        skill_ids.add(str(ref))
    return skill_ids
