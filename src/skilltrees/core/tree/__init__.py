"""Skill tree generation.

Submodules:
    models      -- TreeNode, TreeEdge, TreeStats, SkillTree
    algorithms  -- depth layering, critical path, topological order, stats
    builder     -- build_tree, from filtered nodes to a SkillTree
"""

from skilltrees.core.tree.models import (
    EDGE_TYPE_PREREQUISITE,
    SkillTree,
    TreeEdge,
    TreeNode,
    TreeStats,
)
from skilltrees.core.tree.algorithms import (
    compute_depths,
    compute_stats,
    greedy_critical_path,
    leverage_topological_order,
)
from skilltrees.core.tree.builder import HUB_DEGREE_THRESHOLD, build_tree

__all__ = [
    "EDGE_TYPE_PREREQUISITE",
    "HUB_DEGREE_THRESHOLD",
    "SkillTree",
    "TreeEdge",
    "TreeNode",
    "TreeStats",
    "build_tree",
    "compute_depths",
    "compute_stats",
    "greedy_critical_path",
    "leverage_topological_order",
]
