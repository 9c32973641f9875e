"""SkillTrees CLI -- skill trees, progression and learning paths.

Entry point for the ``skilltrees`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    tree        Generate a skill tree for a domain (``phase=INIT``).
    trees       List generated trees.
    show        Show one tree node by node.
    domains     List the domain values the graph offers.
    unlock      Mark prerequisites met across a tree.
    progress    Show one skill's progression.
    record      Record an output seen or a use of a skill.
    set-status  Override a skill's status.
    path        Generate a learning path toward a skill.
    paths       List generated learning paths.
    status      Show stored counts.

Usage::

    skilltrees --graph graph.yaml domains
    skilltrees --graph graph.yaml tree tag=testing
    skilltrees --graph graph.yaml record design --times 3
    skilltrees --graph graph.yaml path deploy --format json
"""

from __future__ import annotations

import logging

import click

from skilltrees import __version__
from skilltrees.cli.context import make_settings
from skilltrees.cli.path_cmd import path_command, paths_command
from skilltrees.cli.progress_cmd import (
    progress_command,
    record_command,
    set_status_command,
)
from skilltrees.cli.status_cmd import status_command
from skilltrees.cli.tree_cmd import (
    domains_command,
    show_command,
    tree_command,
    trees_command,
    unlock_command,
)
from skilltrees.config import ENV_DATA_PATH, ENV_GRAPH_PATH

_LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--graph", "graph_path", envvar=ENV_GRAPH_PATH,
    type=click.Path(exists=True, dir_okay=False),
    help="Skill graph document (JSON or YAML).",
)
@click.option(
    "--data", "data_path", envvar=ENV_DATA_PATH,
    type=click.Path(dir_okay=False),
    help="Snapshot file (default: .skilltrees/state.json).",
)
@click.option("-v", "--verbose", count=True, help="-v for info, -vv for debug logs.")
@click.pass_context
def cli(
    ctx: click.Context, graph_path: str | None, data_path: str | None,
    verbose: int,
) -> None:
    """SkillTrees: skill trees and learning paths from a skill graph.

    Builds dependency trees for a slice of the skill graph, tracks how far
    the user has progressed with each skill, and plans the order in which
    to learn toward a target skill.
    """
    logging.basicConfig(
        level=_LOG_LEVELS[min(verbose, len(_LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = make_settings(data_path, graph_path)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# Register all subcommands
cli.add_command(tree_command)
cli.add_command(trees_command)
cli.add_command(show_command)
cli.add_command(domains_command)
cli.add_command(unlock_command)
cli.add_command(progress_command)
cli.add_command(record_command)
cli.add_command(set_status_command)
cli.add_command(path_command)
cli.add_command(paths_command)
cli.add_command(status_command)
