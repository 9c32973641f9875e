"""Tree commands: ``tree``, ``trees``, ``show``, ``domains``, ``unlock``.

``skilltrees tree phase=INIT`` generates and stores a tree for a domain;
the others list, inspect, and act on stored trees.
"""

from __future__ import annotations

import json

import click

from skilltrees.cli import output
from skilltrees.cli.context import (
    FORMAT_OPTION,
    build_service,
    emit_error,
    reporting_errors,
)
from skilltrees.core.domain import TreeDomain


def _parse_domain(_ctx: click.Context, _param: click.Parameter, value: str) -> TreeDomain:
    try:
        return TreeDomain.parse(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.command("tree")
@click.argument("domain", callback=_parse_domain)
@FORMAT_OPTION
@click.pass_context
def tree_command(ctx: click.Context, domain: TreeDomain, output_format: str) -> None:
    """Generate a skill tree for DOMAIN (phase=, tag=, category= or workflow=)."""
    with reporting_errors(output_format):
        service = build_service(ctx)
        tree = service.generate_tree(domain)

    if output_format == "json":
        click.echo(json.dumps(output.tree_summary_dict(tree), indent=2))
    else:
        output.print_tree_summary(tree)


@click.command("trees")
@FORMAT_OPTION
@click.pass_context
def trees_command(ctx: click.Context, output_format: str) -> None:
    """List generated skill trees."""
    with reporting_errors(output_format):
        trees = build_service(ctx).get_trees()

    if output_format == "json":
        click.echo(json.dumps(
            {"count": len(trees), "trees": [output.tree_summary_dict(t) for t in trees]},
            indent=2,
        ))
    else:
        output.print_tree_list(trees)


@click.command("show")
@click.argument("tree_id")
@FORMAT_OPTION
@click.pass_context
def show_command(ctx: click.Context, tree_id: str, output_format: str) -> None:
    """Show every node of the tree TREE_ID."""
    with reporting_errors(output_format):
        tree = build_service(ctx).get_tree(tree_id)
    if tree is None:
        emit_error(f"Unknown skill tree: {tree_id}", output_format)
        ctx.exit(1)

    if output_format == "json":
        click.echo(json.dumps(output.tree_detail_dict(tree), indent=2))
    else:
        output.print_tree_detail(tree)


@click.command("domains")
@FORMAT_OPTION
@click.pass_context
def domains_command(ctx: click.Context, output_format: str) -> None:
    """List the phases, tags, categories and workflows in the graph."""
    with reporting_errors(output_format):
        domains = build_service(ctx).get_available_domains()

    if output_format == "json":
        click.echo(json.dumps(
            [{"kind": d.kind.value, "values": d.values} for d in domains],
            indent=2,
        ))
    else:
        output.print_domains(domains)


@click.command("unlock")
@click.argument("tree_id")
@FORMAT_OPTION
@click.pass_context
def unlock_command(ctx: click.Context, tree_id: str, output_format: str) -> None:
    """Mark prerequisites met for TREE_ID skills whose parents are learned."""
    with reporting_errors(output_format):
        unlocked = build_service(ctx).update_prerequisites(tree_id)

    if output_format == "json":
        click.echo(json.dumps({"tree_id": tree_id, "unlocked": unlocked}, indent=2))
    elif unlocked:
        click.echo(f"Unlocked {len(unlocked)} skills: {', '.join(unlocked)}")
    else:
        click.echo("No skills unlocked.")
