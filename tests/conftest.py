"""Shared fixtures for skilltrees tests.

The sample graph is the four-skill diamond used throughout::

    A (INIT) --> B (INIT)
      \\
       --> C (INIT) --> D (BUILD)

Every skill carries the ``core`` tag; B also carries ``testing``. The
``loop`` workflow covers A, C and D.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from skilltrees.config import EngineSettings
from skilltrees.core.graph import SkillGraph, SkillNode, StaticWorkflows
from skilltrees.core.store import MemorySnapshotStore
from skilltrees.service import SkillTreeService

SAMPLE_GRAPH_DOCUMENT: dict = {
    "version": "graph-v1",
    "nodes": [
        {
            "id": "A", "name": "Requirements", "phase": "INIT",
            "category": "foundation", "tags": ["core"], "leverage_score": 0.5,
        },
        {
            "id": "B", "name": "Unit Tests", "phase": "INIT",
            "category": "engineering", "tags": ["core", "testing"],
            "depends_on": ["A"], "leverage_score": 0.2,
        },
        {
            "id": "C", "name": "Scaffold", "phase": "INIT",
            "category": "engineering", "tags": ["core"],
            "depends_on": ["A"], "leverage_score": 0.9,
        },
        {
            "id": "D", "name": "Deploy", "phase": "BUILD",
            "category": "engineering", "tags": ["core"],
            "depends_on": ["C"], "leverage_score": 0.4,
        },
    ],
    "workflows": {"loop": ["A", "C", "D"]},
}


@pytest.fixture
def sample_nodes() -> list[SkillNode]:
    """The four sample skills, in declaration order, without degrees."""
    nodes = []
    for raw in SAMPLE_GRAPH_DOCUMENT["nodes"]:
        nodes.append(SkillNode(
            id=raw["id"],
            name=raw["name"],
            phase=raw["phase"],
            category=raw["category"],
            tags=list(raw["tags"]),
            depends_on=list(raw.get("depends_on", [])),
            leverage_score=raw["leverage_score"],
        ))
    return nodes


@pytest.fixture
def sample_graph(sample_nodes: list[SkillNode]) -> SkillGraph:
    """The sample skills as a graph with global degrees computed."""
    return SkillGraph.from_nodes(sample_nodes, version_marker="graph-v1")


@pytest.fixture
def sample_workflows() -> StaticWorkflows:
    return StaticWorkflows(SAMPLE_GRAPH_DOCUMENT["workflows"])


@pytest.fixture
def memory_store() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def service(
    memory_store: MemorySnapshotStore,
    sample_graph: SkillGraph,
    sample_workflows: StaticWorkflows,
) -> SkillTreeService:
    """An initialized service over the sample graph, persisting in memory."""
    svc = SkillTreeService(store=memory_store, settings=EngineSettings())
    svc.set_dependencies(graph=sample_graph, workflows=sample_workflows)
    svc.initialize()
    return svc


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    """The sample graph written as a JSON document."""
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(SAMPLE_GRAPH_DOCUMENT), encoding="utf-8")
    return path
