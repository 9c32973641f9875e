"""Snapshot (de)serialization for trees, progressions and learning paths.

``to_dict`` output is plain JSON data with snake_case keys. ``from_dict``
accepts missing optional keys and fills defaults, so snapshots written by
older versions still load. Custom domain predicates are not serializable:
a reloaded custom domain keeps its kind and label only.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from skilltrees.core.domain.filter import TreeDomain
from skilltrees.core.progression.models import (
    Difficulty,
    LearningPath,
    SkillProgression,
)
from skilltrees.core.tree.models import (
    EDGE_TYPE_PREREQUISITE,
    SkillTree,
    TreeEdge,
    TreeNode,
    TreeStats,
)


# ---------------------------------------------------------------------------
# Trees
# ---------------------------------------------------------------------------


def _node_to_dict(node: TreeNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "name": node.name,
        "description": node.description,
        "phase": node.phase,
        "category": node.category,
        "tags": list(node.tags),
        "depth": node.depth,
        "parents": list(node.parents),
        "children": list(node.children),
        "leverage_score": node.leverage_score,
        "usage_count": node.usage_count,
        "in_degree": node.in_degree,
        "out_degree": node.out_degree,
        "progression": node.progression.to_dict(),
        "is_root": node.is_root,
        "is_leaf": node.is_leaf,
        "is_hub": node.is_hub,
        "critical_path": node.critical_path,
    }


def _node_from_dict(data: dict[str, Any]) -> TreeNode:
    parents = list(data.get("parents", []))
    children = list(data.get("children", []))
    return TreeNode(
        id=data["id"],
        name=data.get("name", data["id"]),
        description=data.get("description", ""),
        phase=data.get("phase"),
        category=data.get("category"),
        tags=list(data.get("tags", [])),
        depth=int(data.get("depth", 0)),
        parents=parents,
        children=children,
        leverage_score=float(data.get("leverage_score", 0.0)),
        usage_count=int(data.get("usage_count", 0)),
        in_degree=int(data.get("in_degree", 0)),
        out_degree=int(data.get("out_degree", 0)),
        progression=SkillProgression.from_dict(data.get("progression", {})),
        is_root=bool(data.get("is_root", not parents)),
        is_leaf=bool(data.get("is_leaf", not children)),
        is_hub=bool(data.get("is_hub", False)),
        critical_path=bool(data.get("critical_path", False)),
    )


def tree_to_dict(tree: SkillTree) -> dict[str, Any]:
    """Serialize a tree to JSON-ready data."""
    return {
        "id": tree.id,
        "name": tree.name,
        "description": tree.description,
        "domain": tree.domain.to_dict(),
        "nodes": [_node_to_dict(n) for n in tree.nodes],
        "edges": [
            {
                "id": e.id,
                "source": e.source,
                "target": e.target,
                "type": e.type,
                "weight": e.weight,
            }
            for e in tree.edges
        ],
        "roots": list(tree.roots),
        "leaves": list(tree.leaves),
        "stats": asdict(tree.stats),
        "suggested_order": list(tree.suggested_order),
        "critical_path": list(tree.critical_path),
        "generated_at": tree.generated_at,
        "based_on_graph": tree.based_on_graph,
    }


def tree_from_dict(data: dict[str, Any]) -> SkillTree:
    """Deserialize a tree written by ``tree_to_dict``."""
    stats = data.get("stats", {})
    return SkillTree(
        id=data["id"],
        name=data.get("name", ""),
        description=data.get("description", ""),
        domain=TreeDomain.from_dict(data["domain"]),
        nodes=[_node_from_dict(n) for n in data.get("nodes", [])],
        edges=[
            TreeEdge(
                source=e["source"],
                target=e["target"],
                type=e.get("type", EDGE_TYPE_PREREQUISITE),
                weight=float(e.get("weight", 1.0)),
            )
            for e in data.get("edges", [])
        ],
        roots=list(data.get("roots", [])),
        leaves=list(data.get("leaves", [])),
        stats=TreeStats(**{k: v for k, v in stats.items() if k in TreeStats.__dataclass_fields__}),
        suggested_order=list(data.get("suggested_order", [])),
        critical_path=list(data.get("critical_path", [])),
        generated_at=data.get("generated_at", ""),
        based_on_graph=data.get("based_on_graph", "unknown"),
    )


# ---------------------------------------------------------------------------
# Learning paths
# ---------------------------------------------------------------------------


def path_to_dict(path: LearningPath) -> dict[str, Any]:
    """Serialize a learning path to JSON-ready data."""
    data = asdict(path)
    data["difficulty"] = path.difficulty.value
    return data


def path_from_dict(data: dict[str, Any]) -> LearningPath:
    """Deserialize a learning path written by ``path_to_dict``."""
    return LearningPath(
        id=data["id"],
        name=data.get("name", ""),
        description=data.get("description", ""),
        target=data.get("target", ""),
        skills=list(data.get("skills", [])),
        estimated_effort=data.get("estimated_effort", "0 sessions"),
        difficulty=Difficulty(data.get("difficulty", Difficulty.BEGINNER.value)),
        prerequisites=list(data.get("prerequisites", [])),
        outcomes=list(data.get("outcomes", [])),
        generated_at=data.get("generated_at", ""),
    )
