"""Domain filter: select the skills that belong to a tree's domain.

A domain is a tagged criterion over ``SkillNode``:

- ``phase``    -- ``node.phase == value``
- ``tag``      -- ``value in node.tags``
- ``category`` -- ``node.category == value``
- ``workflow`` -- node id is in the workflow's skill set
- ``custom``   -- an arbitrary predicate; no predicate selects every node

The filter is pure and never fails on an empty result. The tree builder is
the one that rejects an empty selection, so the failure surfaces where a
tree was actually requested.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from skilltrees.core.graph.models import SkillNode, WorkflowSource
from skilltrees.exceptions import ConfigurationError


class DomainKind(str, Enum):
    """The criterion a ``TreeDomain`` filters by."""

    PHASE = "phase"
    TAG = "tag"
    CATEGORY = "category"
    WORKFLOW = "workflow"
    CUSTOM = "custom"


@dataclass
class TreeDomain:
    """A domain descriptor for tree generation.

    Attributes:
        kind: Which criterion to apply.
        value: The phase, tag, category or workflow id to match. For custom
            domains it is only a label.
        predicate: Node predicate for custom domains. Never persisted.
    """

    kind: DomainKind
    value: str
    predicate: Callable[[SkillNode], bool] | None = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        self.kind = DomainKind(self.kind)

    @property
    def label(self) -> str:
        """Return the ``kind=value`` form used in names and messages."""
        return f"{self.kind.value}={self.value}"

    @classmethod
    def parse(cls, text: str) -> TreeDomain:
        """Parse a ``kind=value`` string (e.g., ``"phase=INIT"``).

        Raises:
            ValueError: If the text has no ``=`` or the kind is unknown or
                ``custom`` (custom domains need a predicate object).
        """
        kind, sep, value = text.partition("=")
        if not sep or not value:
            raise ValueError(f"Domain must look like kind=value, got {text!r}")
        try:
            domain_kind = DomainKind(kind.strip())
        except ValueError:
            valid = ", ".join(k.value for k in DomainKind if k is not DomainKind.CUSTOM)
            raise ValueError(
                f"Unknown domain kind {kind!r}. Valid kinds: {valid}"
            ) from None
        if domain_kind is DomainKind.CUSTOM:
            raise ValueError("Custom domains cannot be parsed from text")
        return cls(kind=domain_kind, value=value.strip())

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> TreeDomain:
        return cls(kind=DomainKind(data["kind"]), value=data.get("value", ""))


@dataclass
class DomainValues:
    """All values currently available for one domain kind."""

    kind: DomainKind
    values: list[str]


def filter_nodes(
    nodes: Iterable[SkillNode],
    domain: TreeDomain,
    workflows: WorkflowSource | None = None,
) -> list[SkillNode]:
    """Select the nodes matching a domain, preserving input order.

    Args:
        nodes: Candidate nodes (usually the whole graph).
        domain: The domain criterion.
        workflows: Required for ``workflow`` domains.

    Returns:
        Matching nodes. May be empty; an unknown workflow id matches nothing.

    Raises:
        ConfigurationError: If a workflow domain is used without a source.
    """
    kind = domain.kind
    if kind is DomainKind.PHASE:
        return [n for n in nodes if n.phase == domain.value]
    if kind is DomainKind.TAG:
        return [n for n in nodes if domain.value in n.tags]
    if kind is DomainKind.CATEGORY:
        return [n for n in nodes if n.category == domain.value]
    if kind is DomainKind.WORKFLOW:
        if workflows is None:
            raise ConfigurationError(
                "Workflow source not set. Call set_dependencies first."
            )
        skill_ids = workflows.get_skill_ids_for_workflow(domain.value) or set()
        return [n for n in nodes if n.id in skill_ids]
    if domain.predicate is None:
        return list(nodes)
    return [n for n in nodes if domain.predicate(n)]


def available_domains(
    nodes: Iterable[SkillNode],
    workflows: WorkflowSource | None = None,
) -> list[DomainValues]:
    """Collect the distinct phases, tags, categories and workflows.

    Values are sorted; workflow ids come from the source in its own order.
    """
    phases: set[str] = set()
    tags: set[str] = set()
    categories: set[str] = set()
    for node in nodes:
        if node.phase:
            phases.add(node.phase)
        if node.category:
            categories.add(node.category)
        tags.update(node.tags)

    return [
        DomainValues(DomainKind.PHASE, sorted(phases)),
        DomainValues(DomainKind.TAG, sorted(tags)),
        DomainValues(DomainKind.CATEGORY, sorted(categories)),
        DomainValues(
            DomainKind.WORKFLOW,
            list(workflows.list_workflows()) if workflows else [],
        ),
    ]
