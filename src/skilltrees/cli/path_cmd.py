"""Learning path commands: ``path`` and ``paths``."""

from __future__ import annotations

import json

import click

from skilltrees.cli import output
from skilltrees.cli.context import FORMAT_OPTION, build_service, reporting_errors


@click.command("path")
@click.argument("target")
@FORMAT_OPTION
@click.pass_context
def path_command(ctx: click.Context, target: str, output_format: str) -> None:
    """Generate a learning path toward the skill TARGET."""
    with reporting_errors(output_format):
        path = build_service(ctx).generate_learning_path(target)

    if output_format == "json":
        click.echo(json.dumps(output.path_dict(path), indent=2))
    else:
        output.print_learning_path(path)


@click.command("paths")
@FORMAT_OPTION
@click.pass_context
def paths_command(ctx: click.Context, output_format: str) -> None:
    """List generated learning paths."""
    with reporting_errors(output_format):
        paths = build_service(ctx).get_learning_paths()

    if output_format == "json":
        click.echo(json.dumps(
            {"count": len(paths), "paths": [output.path_dict(p) for p in paths]},
            indent=2,
        ))
    else:
        output.print_path_list(paths)
