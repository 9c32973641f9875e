"""Domain filtering for skill tree generation."""

from skilltrees.core.domain.filter import (
    DomainKind,
    DomainValues,
    TreeDomain,
    available_domains,
    filter_nodes,
)

__all__ = [
    "DomainKind",
    "DomainValues",
    "TreeDomain",
    "available_domains",
    "filter_nodes",
]
