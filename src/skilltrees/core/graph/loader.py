"""Load a skill graph document from JSON or YAML.

Document shape::

    version: "2025-01-01T00:00:00Z"     # optional, becomes the version marker
    nodes:
      - id: scaffold
        name: Scaffold
        phase: SCAFFOLD
        tags: [engineering]
        depends_on: [requirements]
        leverage_score: 0.8
    workflows:                           # optional
      engineering-loop: [requirements, scaffold]

Node keys are accepted in snake_case or in the camelCase used by the graph
builder's own export (``dependsOn``, ``leverageScore``, ``usageCount``,
``inDegree``, ``outDegree``). When every node carries explicit degrees they are
kept; otherwise degrees are recomputed over the whole graph.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from skilltrees.core.graph.graph import SkillGraph, StaticWorkflows
from skilltrees.core.graph.models import SkillNode
from skilltrees.exceptions import GraphLoadError

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})

_KEY_ALIASES: dict[str, str] = {
    "dependsOn": "depends_on",
    "leverageScore": "leverage_score",
    "usageCount": "usage_count",
    "inDegree": "in_degree",
    "outDegree": "out_degree",
}

_NODE_FIELDS = frozenset({
    "id", "name", "description", "version", "phase", "category", "tags",
    "depends_on", "leverage_score", "usage_count", "in_degree", "out_degree",
})


def node_from_dict(data: dict[str, Any]) -> SkillNode:
    """Build a ``SkillNode`` from a mapping, ignoring unknown keys.

    Raises:
        GraphLoadError: If the mapping has no ``id``.
    """
    normalized = {_KEY_ALIASES.get(k, k): v for k, v in data.items()}
    if not normalized.get("id"):
        raise GraphLoadError(f"Skill node without an id: {data!r}")

    kwargs = {k: v for k, v in normalized.items() if k in _NODE_FIELDS}
    kwargs["id"] = str(kwargs["id"])
    kwargs["tags"] = [str(t) for t in kwargs.get("tags") or []]
    kwargs["depends_on"] = [str(d) for d in kwargs.get("depends_on") or []]
    if kwargs.get("leverage_score") is not None:
        kwargs["leverage_score"] = float(kwargs["leverage_score"])
    return SkillNode(**kwargs)


def graph_from_dict(data: dict[str, Any]) -> tuple[SkillGraph, StaticWorkflows]:
    """Build a graph and workflow source from a parsed document.

    Raises:
        GraphLoadError: If the document is not a mapping with a node list.
    """
    if not isinstance(data, dict):
        raise GraphLoadError("Graph document must be a mapping")
    raw_nodes = data.get("nodes")
    if not isinstance(raw_nodes, list):
        raise GraphLoadError("Graph document must contain a 'nodes' list")

    nodes: list[SkillNode] = []
    for entry in raw_nodes:
        if not isinstance(entry, dict):
            raise GraphLoadError(f"Skill node must be a mapping: {entry!r}")
        try:
            nodes.append(node_from_dict(entry))
        except (TypeError, ValueError) as exc:
            raise GraphLoadError(f"Invalid skill node {entry!r}: {exc}") from exc

    has_degrees = bool(raw_nodes) and all(
        ("in_degree" in n or "inDegree" in n)
        and ("out_degree" in n or "outDegree" in n)
        for n in raw_nodes
    )
    marker = data.get("version") or data.get("updated_at") or data.get("updatedAt")
    graph = SkillGraph.from_nodes(
        nodes,
        version_marker=str(marker) if marker else None,
        compute_degrees=not has_degrees,
    )
    workflows = data.get("workflows") or {}
    if not isinstance(workflows, dict):
        raise GraphLoadError("'workflows' must be a mapping of id to skills")
    return graph, StaticWorkflows(workflows)


def load_graph(path: Path) -> tuple[SkillGraph, StaticWorkflows]:
    """Read a graph document from disk.

    Args:
        path: JSON file, or YAML file with a ``.yaml``/``.yml`` suffix.

    Returns:
        The graph and its workflow source.

    Raises:
        FileNotFoundError: If the file does not exist.
        GraphLoadError: If the document cannot be parsed.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise GraphLoadError(f"Cannot parse graph document {path}: {exc}") from exc
    return graph_from_dict(data)
