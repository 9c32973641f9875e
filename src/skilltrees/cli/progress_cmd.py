"""Progression commands: ``progress``, ``record``, ``set-status``."""

from __future__ import annotations

import json

import click

from skilltrees.cli import output
from skilltrees.cli.context import FORMAT_OPTION, build_service, reporting_errors
from skilltrees.core.progression import ProgressionStatus, SkillProgression


def _show(skill_id: str, prog: SkillProgression, output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps(output.progression_dict(skill_id, prog), indent=2))
    else:
        output.print_progression(skill_id, prog)


@click.command("progress")
@click.argument("skill_id")
@FORMAT_OPTION
@click.pass_context
def progress_command(ctx: click.Context, skill_id: str, output_format: str) -> None:
    """Show the progression of SKILL_ID."""
    with reporting_errors(output_format):
        prog = build_service(ctx).get_progression(skill_id)
    _show(skill_id, prog, output_format)


@click.command("record")
@click.argument("skill_id")
@click.option(
    "--output/--usage", "outputs", default=True,
    help="Record an output seen (default) or a use in a workflow.",
)
@click.option(
    "--times", "-n", type=click.IntRange(min=1), default=1,
    help="Number of interactions to record.",
)
@FORMAT_OPTION
@click.pass_context
def record_command(
    ctx: click.Context, skill_id: str, outputs: bool, times: int, output_format: str
) -> None:
    """Record an interaction with SKILL_ID and re-derive its status."""
    with reporting_errors(output_format):
        service = build_service(ctx)
        record = (
            service.record_skill_output if outputs
            else service.record_skill_usage
        )
        for _ in range(times):
            prog = record(skill_id)
    _show(skill_id, prog, output_format)


@click.command("set-status")
@click.argument("skill_id")
@click.argument(
    "status", type=click.Choice([s.value for s in ProgressionStatus]),
)
@click.option("--notes", default=None, help="Free-text notes to store.")
@FORMAT_OPTION
@click.pass_context
def set_status_command(
    ctx: click.Context, skill_id: str, status: str, notes: str | None,
    output_format: str,
) -> None:
    """Override the status of SKILL_ID."""
    with reporting_errors(output_format):
        prog = build_service(ctx).update_progression(
            skill_id, status=status, notes=notes
        )
    _show(skill_id, prog, output_format)
