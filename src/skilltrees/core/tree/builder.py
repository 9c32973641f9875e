"""Tree construction from a filtered node subset.

Construction indexes the subset by id first, so parent and child discovery is
linear in the number of nodes plus declared prerequisites:

1. ``parents`` = ``depends_on`` restricted to the subset (out-of-domain
   prerequisites are dropped, not represented as edges).
2. ``children`` = the inverse relation over the subset.
3. One ``TreeEdge`` per parent/child pair.
4. Flags, depths, critical path, suggested order and statistics.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Sequence

from skilltrees.core.domain.filter import TreeDomain
from skilltrees.core.graph.models import SkillNode
from skilltrees.core.progression.models import SkillProgression
from skilltrees.core.tree.algorithms import (
    compute_depths,
    compute_stats,
    greedy_critical_path,
    leverage_topological_order,
)
from skilltrees.core.tree.models import SkillTree, TreeEdge, TreeNode
from skilltrees.exceptions import NoMatchingSkillsError

HUB_DEGREE_THRESHOLD: int = 5


def _default_progression(_skill_id: str) -> SkillProgression:
    return SkillProgression()


def build_tree(
    nodes: Sequence[SkillNode],
    domain: TreeDomain,
    progression_of: Callable[[str], SkillProgression] | None = None,
    graph_marker: str = "unknown",
    hub_threshold: int = HUB_DEGREE_THRESHOLD,
) -> SkillTree:
    """Build a ``SkillTree`` from the nodes selected for a domain.

    Args:
        nodes: The filtered subset, in graph order.
        domain: The domain the subset was selected by.
        progression_of: Returns the current progression of a skill id. The
            tree stores a copy, not a live reference.
        graph_marker: Version marker of the source graph.
        hub_threshold: Minimum global in+out degree for a hub.

    Returns:
        A new tree with a fresh id.

    Raises:
        NoMatchingSkillsError: If ``nodes`` is empty.
    """
    if not nodes:
        raise NoMatchingSkillsError(domain.label)

    progression_of = progression_of or _default_progression
    index = {node.id: node for node in nodes}

    parents_of: dict[str, list[str]] = {}
    children_of: dict[str, list[str]] = {skill_id: [] for skill_id in index}
    edges: list[TreeEdge] = []
    for node in index.values():
        parents = [d for d in dict.fromkeys(node.depends_on) if d in index]
        parents_of[node.id] = parents
        for parent_id in parents:
            children_of[parent_id].append(node.id)
            edges.append(TreeEdge(source=parent_id, target=node.id))

    tree_nodes = [
        TreeNode(
            id=node.id,
            name=node.name,
            description=node.description,
            phase=node.phase,
            category=node.category,
            tags=list(node.tags),
            parents=parents_of[node.id],
            children=children_of[node.id],
            leverage_score=node.leverage_score,
            usage_count=node.usage_count,
            in_degree=node.in_degree,
            out_degree=node.out_degree,
            progression=progression_of(node.id).copy(),
            is_root=not parents_of[node.id],
            is_leaf=not children_of[node.id],
            is_hub=(node.in_degree + node.out_degree) >= hub_threshold,
        )
        for node in index.values()
    ]

    depths = compute_depths(tree_nodes)
    for tree_node in tree_nodes:
        tree_node.depth = depths[tree_node.id]

    critical_path = greedy_critical_path(tree_nodes)
    on_path = set(critical_path)
    for tree_node in tree_nodes:
        tree_node.critical_path = tree_node.id in on_path

    return SkillTree(
        id=f"tree-{domain.kind.value}-{domain.value}-{uuid.uuid4().hex[:12]}",
        name=f"{domain.kind.value}: {domain.value}",
        description=f'Skill tree for {domain.kind.value} "{domain.value}"',
        domain=domain,
        nodes=tree_nodes,
        edges=edges,
        roots=[n.id for n in tree_nodes if n.is_root],
        leaves=[n.id for n in tree_nodes if n.is_leaf],
        stats=compute_stats(tree_nodes, edges),
        suggested_order=leverage_topological_order(tree_nodes),
        critical_path=critical_path,
        generated_at=datetime.now(timezone.utc).isoformat(),
        based_on_graph=graph_marker,
    )
