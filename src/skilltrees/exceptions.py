"""SkillTrees exception hierarchy.

All public exceptions inherit from SkillTreeError, giving callers a single
base class to catch when they want to handle any engine failure without
swallowing unrelated errors. None of these are retryable: every failure is
deterministic given the same inputs.
"""


class SkillTreeError(Exception):
    """Base exception for all SkillTrees errors."""


class ConfigurationError(SkillTreeError):
    """Raised when a required collaborator has not been supplied.

    Covers a missing graph accessor before a tree or learning path is
    requested, and a workflow domain requested without a workflow source.
    """


class NotFoundError(SkillTreeError):
    """Raised when an operation's input selects nothing from the graph."""


class NoMatchingSkillsError(NotFoundError):
    """Raised when a domain filter yields zero skills for a tree build."""

    def __init__(self, domain_label: str) -> None:
        super().__init__(f"No skills found for domain: {domain_label}")
        self.domain_label = domain_label


class SkillNotFoundError(NotFoundError):
    """Raised when a learning path target is not present in the graph."""

    def __init__(self, skill_id: str) -> None:
        super().__init__(f"Skill not found: {skill_id}")
        self.skill_id = skill_id


class UnknownReferenceError(SkillTreeError):
    """Raised when an operation names an id the engine does not track."""


class UnknownTreeError(UnknownReferenceError):
    """Raised when a tree id is not in the tree store."""

    def __init__(self, tree_id: str) -> None:
        super().__init__(f"Unknown skill tree: {tree_id}")
        self.tree_id = tree_id


class UnknownSkillError(UnknownReferenceError):
    """Raised when a progression operation names a skill absent from the graph."""

    def __init__(self, skill_id: str) -> None:
        super().__init__(f"Unknown skill: {skill_id}")
        self.skill_id = skill_id


class SnapshotError(SkillTreeError):
    """Raised when the persisted snapshot exists but cannot be decoded.

    Write failures are not wrapped: ``OSError`` from the filesystem
    propagates unmodified to the caller.
    """


class GraphLoadError(SkillTreeError):
    """Raised when a graph document is malformed or cannot be parsed."""
