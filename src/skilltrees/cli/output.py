"""Rich output formatting helpers for the SkillTrees CLI.

Status color mapping:
    mastered = bold green, familiar = green, in-progress = cyan,
    available = yellow, locked = dim
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skilltrees.core.domain import DomainValues
from skilltrees.core.progression import LearningPath, ProgressionStatus, SkillProgression
from skilltrees.core.store import path_to_dict, tree_to_dict
from skilltrees.core.tree import SkillTree
from skilltrees.service import ServiceStatus

_STATUS_STYLES: dict[ProgressionStatus, str] = {
    ProgressionStatus.MASTERED: "bold green",
    ProgressionStatus.FAMILIAR: "green",
    ProgressionStatus.IN_PROGRESS: "cyan",
    ProgressionStatus.AVAILABLE: "yellow",
    ProgressionStatus.LOCKED: "dim",
}

_STATUS_ICONS: dict[ProgressionStatus, str] = {
    ProgressionStatus.MASTERED: "★",
    ProgressionStatus.FAMILIAR: "●",
    ProgressionStatus.IN_PROGRESS: "◐",
    ProgressionStatus.AVAILABLE: "○",
    ProgressionStatus.LOCKED: "◌",
}

console = Console()


def status_text(status: ProgressionStatus) -> Text:
    """Return an icon-prefixed, colored status label."""
    return Text(
        f"{_STATUS_ICONS[status]} {status.value}",
        style=_STATUS_STYLES.get(status, "white"),
    )


# -- JSON views ---------------------------------------------------------------


def tree_summary_dict(tree: SkillTree) -> dict[str, Any]:
    """Compact tree view for listings."""
    return {
        "id": tree.id,
        "name": tree.name,
        "domain": tree.domain.to_dict(),
        "stats": asdict(tree.stats),
        "roots": tree.roots,
        "leaves": tree.leaves,
        "critical_path": tree.critical_path,
        "suggested_order": tree.suggested_order,
        "generated_at": tree.generated_at,
    }


def tree_detail_dict(tree: SkillTree) -> dict[str, Any]:
    return tree_to_dict(tree)


def path_dict(path: LearningPath) -> dict[str, Any]:
    return path_to_dict(path)


def progression_dict(skill_id: str, prog: SkillProgression) -> dict[str, Any]:
    return {"skill_id": skill_id, **prog.to_dict()}


# -- Text views ---------------------------------------------------------------


def print_tree_summary(tree: SkillTree) -> None:
    """Print a tree's header, statistics and paths."""
    s = tree.stats
    console.print(Panel(
        Text.assemble(
            ("Tree: ", "bold"), (tree.name, ""),
            ("  Id: ", "bold"), (tree.id, "dim"),
        ),
        title="Skill Tree",
    ))
    console.print(
        f"  Nodes: [bold]{s.total_nodes}[/bold]  Edges: {s.total_edges}  "
        f"Depth: {s.max_depth}  Hubs: {s.hub_count}  "
        f"Avg branching: {s.avg_branching:.2f}"
    )
    console.print(f"  Roots:  {', '.join(tree.roots)}")
    console.print(f"  Leaves: {', '.join(tree.leaves)}")
    console.print(f"  Critical path: {' → '.join(tree.critical_path)}")
    console.print(f"  Suggested order: {', '.join(tree.suggested_order)}")


def print_tree_detail(tree: SkillTree) -> None:
    """Print the summary plus one row per node, by depth."""
    print_tree_summary(tree)
    table = Table(title="Nodes", show_header=True, header_style="bold")
    table.add_column("Depth", justify="right")
    table.add_column("Skill", style="bold")
    table.add_column("Status")
    table.add_column("Leverage", justify="right")
    table.add_column("Parents", style="dim")
    table.add_column("Flags")
    for node in sorted(tree.nodes, key=lambda n: n.depth):
        flags = []
        if node.is_hub:
            flags.append("HUB")
        if node.critical_path:
            flags.append("*")
        table.add_row(
            str(node.depth), node.name, status_text(node.progression.status),
            f"{node.leverage_score:.2f}", ", ".join(node.parents) or "-",
            " ".join(flags),
        )
    console.print(table)


def print_tree_list(trees: list[SkillTree]) -> None:
    if not trees:
        console.print("[dim]No skill trees generated yet.[/dim]")
        return
    table = Table(title="Skill Trees", show_header=True, header_style="bold")
    table.add_column("Id", style="bold")
    table.add_column("Domain")
    table.add_column("Nodes", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Generated", style="dim")
    for tree in trees:
        table.add_row(
            tree.id, tree.domain.label, str(tree.stats.total_nodes),
            str(tree.stats.max_depth), tree.generated_at,
        )
    console.print(table)


def print_domains(domains: list[DomainValues]) -> None:
    if not domains:
        console.print("[dim]No graph loaded; no domains available.[/dim]")
        return
    table = Table(title="Available Domains", show_header=True, header_style="bold")
    table.add_column("Kind", style="bold")
    table.add_column("Values")
    for domain in domains:
        table.add_row(domain.kind.value, ", ".join(domain.values) or "-")
    console.print(table)


def print_progression(skill_id: str, prog: SkillProgression) -> None:
    console.print(Text.assemble(("Skill: ", "bold"), (skill_id, ""), ("  ", ""),
                                status_text(prog.status)))
    console.print(f"  Prerequisites met: {'yes' if prog.prerequisites_met else 'no'}")
    console.print(f"  Outputs seen:      {prog.outputs_seen}")
    console.print(f"  Used in loop:      {prog.used_in_loop}")
    if prog.last_interaction:
        console.print(f"  Last interaction:  [dim]{prog.last_interaction}[/dim]")
    if prog.notes:
        console.print(f"  Notes:             {prog.notes}")


def print_learning_path(path: LearningPath) -> None:
    console.print(Panel(
        Text.assemble(
            (path.name, "bold"), ("  ", ""),
            (path.difficulty.value, "cyan"), ("  ", ""),
            (path.estimated_effort, "dim"),
        ),
        title="Learning Path",
    ))
    if path.skills:
        for index, skill_id in enumerate(path.skills, start=1):
            console.print(f"  {index:>2}. {skill_id}")
    else:
        console.print("[green]Nothing left to learn.[/green]")
    if path.prerequisites:
        console.print(f"  Already known: [dim]{', '.join(path.prerequisites)}[/dim]")
    for outcome in path.outcomes:
        console.print(f"  - {outcome}")


def print_path_list(paths: list[LearningPath]) -> None:
    if not paths:
        console.print("[dim]No learning paths generated yet.[/dim]")
        return
    table = Table(title="Learning Paths", show_header=True, header_style="bold")
    table.add_column("Id", style="bold")
    table.add_column("Target")
    table.add_column("Skills", justify="right")
    table.add_column("Difficulty")
    for path in paths:
        table.add_row(path.id, path.target, str(len(path.skills)), path.difficulty.value)
    console.print(table)


def print_status(status: ServiceStatus) -> None:
    console.print(
        f"Trees: [bold]{status.tree_count}[/bold] | "
        f"Paths: [bold]{status.path_count}[/bold] | "
        f"Progressions: [bold]{status.progression_count}[/bold] | "
        f"Domain values: [bold]{status.available_domains}[/bold]"
    )
