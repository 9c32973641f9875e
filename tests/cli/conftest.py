"""Shared fixtures for CLI tests.

``invoke`` runs the ``skilltrees`` group against the sample graph document
and a snapshot file in a temporary directory, with the engine's environment
variables cleared so the host environment cannot leak in.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner, Result

from skilltrees.cli.main import cli
from skilltrees.config import ENV_DATA_PATH, ENV_GRAPH_PATH, ENV_HUB_THRESHOLD


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner with the engine's variables unset."""
    return CliRunner(env={
        ENV_DATA_PATH: None,
        ENV_GRAPH_PATH: None,
        ENV_HUB_THRESHOLD: None,
    })


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "state.json"


@pytest.fixture
def invoke(
    runner: CliRunner, graph_file: Path, data_file: Path
) -> Callable[..., Result]:
    """Invoke a subcommand with ``--graph`` and ``--data`` preset."""

    def _invoke(*args: str) -> Result:
        return runner.invoke(
            cli, ["--graph", str(graph_file), "--data", str(data_file), *args]
        )

    return _invoke


@pytest.fixture
def invoke_json(invoke: Callable[..., Result]) -> Callable[..., object]:
    """Invoke a subcommand with ``--format json`` and decode its output."""

    def _invoke_json(*args: str) -> object:
        result = invoke(*args, "--format", "json")
        assert result.exit_code == 0, result.output
        return json.loads(result.output)

    return _invoke_json
