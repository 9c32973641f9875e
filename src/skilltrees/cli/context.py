"""Shared CLI plumbing: service construction and error reporting.

Every command receives the group's ``--graph``/``--data`` settings through
the click context object, builds a ``SkillTreeService`` from them, and maps
``SkillTreeError`` to exit code 1.

Exit Codes (all commands):
    0 -- Success.
    1 -- Engine error (unknown skill/tree, empty domain, bad snapshot, ...).
    2 -- Usage error (reported by click).
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click

from skilltrees.config import EngineSettings
from skilltrees.core.graph import load_graph
from skilltrees.exceptions import SkillTreeError
from skilltrees.service import SkillTreeService

FORMAT_OPTION = click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)


def build_service(ctx: click.Context) -> SkillTreeService:
    """Create, wire and initialize a service from the group options.

    Raises:
        SkillTreeError: If the graph document or the snapshot is invalid.
    """
    settings: EngineSettings = ctx.obj["settings"]
    service = SkillTreeService(settings=settings)
    if settings.graph_path is not None:
        graph, workflows = load_graph(settings.graph_path)
        service.set_dependencies(graph=graph, workflows=workflows)
    service.initialize()
    return service


def emit_error(message: str, output_format: str) -> None:
    """Print an error in the requested format."""
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}")


@contextmanager
def reporting_errors(output_format: str = "text") -> Iterator[None]:
    """Turn engine errors into an error message and exit code 1."""
    try:
        yield
    except SkillTreeError as exc:
        emit_error(str(exc), output_format)
        sys.exit(1)


def make_settings(data: str | None, graph: str | None) -> EngineSettings:
    """Build settings from option values, environment filling the gaps."""
    settings = EngineSettings.from_env()
    if data:
        settings.data_path = Path(data)
    if graph:
        settings.graph_path = Path(graph)
    return settings
