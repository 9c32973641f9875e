"""Global skill graph boundary.

The engine reads the canonical skill graph through ``GraphAccessor`` and
resolves named workflows through ``WorkflowSource``. ``SkillGraph`` and
``StaticWorkflows`` are the in-memory implementations; ``load_graph`` builds
both from a JSON or YAML document.
"""

from skilltrees.core.graph.models import (
    GraphAccessor,
    SkillNode,
    WorkflowSource,
)
from skilltrees.core.graph.graph import SkillGraph, StaticWorkflows
from skilltrees.core.graph.loader import graph_from_dict, load_graph, node_from_dict

__all__ = [
    "GraphAccessor",
    "SkillGraph",
    "SkillNode",
    "StaticWorkflows",
    "WorkflowSource",
    "graph_from_dict",
    "load_graph",
    "node_from_dict",
]
