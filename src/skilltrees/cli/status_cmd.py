"""``skilltrees status``: counts of stored trees, paths and progressions."""

from __future__ import annotations

import json
from dataclasses import asdict

import click

from skilltrees.cli import output
from skilltrees.cli.context import FORMAT_OPTION, build_service, reporting_errors


@click.command("status")
@FORMAT_OPTION
@click.pass_context
def status_command(ctx: click.Context, output_format: str) -> None:
    """Show how many trees, paths and progressions are stored."""
    with reporting_errors(output_format):
        status = build_service(ctx).get_status()

    if output_format == "json":
        click.echo(json.dumps(asdict(status), indent=2))
    else:
        output.print_status(status)
