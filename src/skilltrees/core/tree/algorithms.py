"""Structural algorithms over a tree's filtered node set.

All functions are pure: they read ``TreeNode.parents``/``children``/
``leverage_score`` and return new values without touching the nodes.

- ``compute_depths`` -- multi-source breadth-first layering from the roots.
- ``greedy_critical_path`` -- highest-leverage walk from the best root.
- ``leverage_topological_order`` -- Kahn's algorithm, leverage tie-break.
- ``compute_stats`` -- node/edge tallies, max depth, average branching.

Depth is the layer index, not the shortest-path breadth-first distance: with
A -> B -> C plus A -> C, C sits at depth 2, not 1, so every edge still goes
from a shallower to a deeper node.

Cycle tolerance: the filtered graph is expected to be acyclic but is never
validated. Nodes on a cycle are never freed by the layering or by Kahn's
algorithm; they get depth 0 and are appended to the order, with a warning.
"""

from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Sequence

from skilltrees.core.tree.models import TreeEdge, TreeNode, TreeStats

logger = logging.getLogger(__name__)


def compute_depths(nodes: Sequence[TreeNode]) -> dict[str, int]:
    """Assign each node a breadth-first layer, seeded by all roots at 0.

    A node is enqueued once every one of its parents has been dequeued, at
    ``max(parent depth) + 1``. Every edge therefore goes from a shallower to
    a strictly deeper layer, and depth equals the longest prerequisite chain
    from any root. Nodes never reached (cycles) default to depth 0.

    Args:
        nodes: Tree nodes with ``parents``/``children`` already computed.

    Returns:
        Mapping of node id to depth, covering every node.
    """
    by_id = {node.id: node for node in nodes}
    pending = {node.id: len(node.parents) for node in nodes}
    depth_floor: dict[str, int] = {}
    depths: dict[str, int] = {}

    queue: deque[tuple[str, int]] = deque(
        (node.id, 0) for node in nodes if not node.parents
    )
    while queue:
        node_id, depth = queue.popleft()
        depths[node_id] = depth
        for child_id in by_id[node_id].children:
            depth_floor[child_id] = max(depth_floor.get(child_id, 0), depth + 1)
            pending[child_id] -= 1
            if pending[child_id] == 0:
                queue.append((child_id, depth_floor[child_id]))

    for node in nodes:
        depths.setdefault(node.id, 0)
    return depths


def greedy_critical_path(nodes: Sequence[TreeNode]) -> list[str]:
    """Follow the highest-leverage children from the highest-leverage root.

    This is a heuristic, not an optimal path search: it never revisits a
    branch, so a path with greater total leverage can be missed when the
    best local choice leads elsewhere. Ties go to the node listed first.

    Returns:
        Node ids from a root outward; empty if the tree has no root.
    """
    roots = [node for node in nodes if not node.parents]
    if not roots:
        return []

    by_id = {node.id: node for node in nodes}
    current = max(roots, key=lambda n: n.leverage_score)
    path = [current.id]
    visited = {current.id}

    while True:
        candidates = [
            by_id[child_id] for child_id in current.children
            if child_id in by_id and child_id not in visited
        ]
        if not candidates:
            return path
        current = max(candidates, key=lambda n: n.leverage_score)
        path.append(current.id)
        visited.add(current.id)


def leverage_topological_order(nodes: Sequence[TreeNode]) -> list[str]:
    """Topologically sort the tree, preferring higher leverage among ties.

    Kahn's algorithm over the filtered parents. Whenever several nodes are
    eligible, the highest ``leverage_score`` goes first; equal scores keep
    input order. Nodes stuck on a cycle are appended at the end in input
    order rather than dropped, and a warning is logged.

    Returns:
        Every node id exactly once.
    """
    position = {node.id: index for index, node in enumerate(nodes)}
    by_id = {node.id: node for node in nodes}
    pending = {node.id: len(node.parents) for node in nodes}

    heap: list[tuple[float, int, str]] = [
        (-node.leverage_score, position[node.id], node.id)
        for node in nodes if pending[node.id] == 0
    ]
    heapq.heapify(heap)

    order: list[str] = []
    while heap:
        _, _, node_id = heapq.heappop(heap)
        order.append(node_id)
        for child_id in by_id[node_id].children:
            pending[child_id] -= 1
            if pending[child_id] == 0:
                child = by_id[child_id]
                heapq.heappush(
                    heap, (-child.leverage_score, position[child_id], child_id)
                )

    if len(order) < len(nodes):
        placed = set(order)
        leftovers = [node.id for node in nodes if node.id not in placed]
        logger.warning(
            "Cycle in skill tree; appending %d skills in graph order: %s",
            len(leftovers), ", ".join(leftovers),
        )
        order.extend(leftovers)
    return order


def compute_stats(
    nodes: Sequence[TreeNode],
    edges: Sequence[TreeEdge],
) -> TreeStats:
    """Summarize a tree.

    ``avg_branching`` divides the total child count by the number of
    non-leaf nodes, with a floor of 1 to avoid dividing by zero.
    """
    total_children = sum(len(node.children) for node in nodes)
    non_leaf = sum(1 for node in nodes if node.children) or 1
    return TreeStats(
        total_nodes=len(nodes),
        total_edges=len(edges),
        max_depth=max((node.depth for node in nodes), default=0),
        avg_branching=total_children / non_leaf,
        root_count=sum(1 for node in nodes if node.is_root),
        leaf_count=sum(1 for node in nodes if node.is_leaf),
        hub_count=sum(1 for node in nodes if node.is_hub),
    )
