"""Skill tree data models.

A ``SkillTree`` is a derived, immutable-once-generated view of one domain of
the global skill graph. ``parents``/``children``/``depth`` are computed over
the filtered subset only; ``in_degree``/``out_degree``/``is_hub`` keep the
global values copied from the graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from skilltrees.core.domain.filter import TreeDomain
from skilltrees.core.progression.models import SkillProgression

EDGE_TYPE_PREREQUISITE: str = "prerequisite"


@dataclass
class TreeNode:
    """A skill inside one generated tree.

    Attributes:
        id: Skill id.
        name, description, phase, category, tags: Copied from the graph node.
        leverage_score, usage_count, in_degree, out_degree: Copied global
            metrics.
        parents: Prerequisites that are also in the tree.
        children: Tree members that list this skill as a prerequisite.
        depth: Breadth-first layer; every parent sits on a shallower layer.
        is_root: No parents in the tree.
        is_leaf: No children in the tree.
        is_hub: Global in-degree + out-degree reaches the hub threshold.
        critical_path: On the tree's greedy critical path.
        progression: Progression snapshot taken at generation time.
    """

    id: str
    name: str
    description: str = ""
    phase: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    depth: int = 0
    parents: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    leverage_score: float = 0.0
    usage_count: int = 0
    in_degree: int = 0
    out_degree: int = 0
    progression: SkillProgression = field(default_factory=SkillProgression)
    is_root: bool = False
    is_leaf: bool = False
    is_hub: bool = False
    critical_path: bool = False


@dataclass
class TreeEdge:
    """A prerequisite edge: ``source`` must be learned before ``target``.

    ``type`` is reserved for "recommended"/"related" edges; generated trees
    only contain "prerequisite" edges.
    """

    source: str
    target: str
    type: str = EDGE_TYPE_PREREQUISITE
    weight: float = 1.0

    @property
    def id(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass
class TreeStats:
    """Summary statistics of a generated tree."""

    total_nodes: int = 0
    total_edges: int = 0
    max_depth: int = 0
    avg_branching: float = 0.0
    root_count: int = 0
    leaf_count: int = 0
    hub_count: int = 0


@dataclass
class SkillTree:
    """A generated skill tree for one domain.

    Attributes:
        id: Unique per generation; regenerating a domain yields a new id.
        name: "<kind>: <value>".
        description: One-line description.
        domain: The domain the tree was filtered by.
        nodes: All tree nodes, in graph order.
        edges: One edge per parent/child pair inside the tree.
        roots: Ids of nodes without parents.
        leaves: Ids of nodes without children.
        stats: Summary statistics.
        suggested_order: Complete topological learning order.
        critical_path: Greedy highest-leverage path from a root.
        generated_at: ISO-8601 UTC generation time.
        based_on_graph: Version marker of the source graph.
    """

    id: str
    name: str
    description: str
    domain: TreeDomain
    nodes: list[TreeNode] = field(default_factory=list)
    edges: list[TreeEdge] = field(default_factory=list)
    roots: list[str] = field(default_factory=list)
    leaves: list[str] = field(default_factory=list)
    stats: TreeStats = field(default_factory=TreeStats)
    suggested_order: list[str] = field(default_factory=list)
    critical_path: list[str] = field(default_factory=list)
    generated_at: str = ""
    based_on_graph: str = "unknown"

    def node(self, skill_id: str) -> TreeNode | None:
        """Return the tree node with the given id, or None."""
        for node in self.nodes:
            if node.id == skill_id:
                return node
        return None
