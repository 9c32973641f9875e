"""Whole-state snapshot persistence.

The engine persists everything it owns as a single document::

    {
      "trees": [...],
      "progressions": {"<skill id>": {...}},
      "learning_paths": [...],
      "last_updated": "<ISO-8601 UTC>"
    }

Storage sits behind the narrow ``SnapshotStore`` protocol (``load``/``save``)
so a transactional or lock-guarded backend can replace the JSON file without
touching algorithm code.

Concurrency: ``JsonSnapshotStore`` overwrites the whole file on every save
with no locking. Within one process the service serializes saves; two
processes sharing a file are last-writer-wins with no lost-update detection.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from skilltrees.core.progression.models import LearningPath, SkillProgression
from skilltrees.core.store.serialization import (
    path_from_dict,
    path_to_dict,
    tree_from_dict,
    tree_to_dict,
)
from skilltrees.core.tree.models import SkillTree
from skilltrees.exceptions import SnapshotError

logger = logging.getLogger(__name__)


@dataclass
class SnapshotState:
    """Everything the engine persists."""

    trees: list[SkillTree] = field(default_factory=list)
    progressions: dict[str, SkillProgression] = field(default_factory=dict)
    learning_paths: list[LearningPath] = field(default_factory=list)
    last_updated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "trees": [tree_to_dict(t) for t in self.trees],
            "progressions": {
                skill_id: prog.to_dict()
                for skill_id, prog in sorted(self.progressions.items())
            },
            "learning_paths": [path_to_dict(p) for p in self.learning_paths],
            "last_updated": self.last_updated
            or datetime.now(timezone.utc).isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotState:
        """Deserialize a snapshot document.

        Raises:
            SnapshotError: If the document has the wrong shape.
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot document must be a JSON object")
        try:
            return cls(
                trees=[tree_from_dict(t) for t in data.get("trees", [])],
                progressions={
                    skill_id: SkillProgression.from_dict(prog)
                    for skill_id, prog in data.get("progressions", {}).items()
                },
                learning_paths=[
                    path_from_dict(p) for p in data.get("learning_paths", [])
                ],
                last_updated=data.get("last_updated"),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SnapshotError(f"Malformed snapshot: {exc}") from exc


@runtime_checkable
class SnapshotStore(Protocol):
    """Load and save the engine's whole state."""

    def load(self) -> SnapshotState:
        ...

    def save(self, state: SnapshotState) -> None:
        ...


class JsonSnapshotStore:
    """Snapshot store backed by one JSON file.

    Args:
        path: File to read and overwrite. Parent directories are created on
            the first save.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SnapshotState:
        """Read the snapshot; a missing file yields an empty state.

        Raises:
            SnapshotError: If the file exists but is not a valid snapshot.
        """
        if not self._path.exists():
            logger.debug("No snapshot at %s; starting empty", self._path)
            return SnapshotState()
        text = self._path.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Cannot decode snapshot {self._path}: {exc}") from exc
        state = SnapshotState.from_dict(data)
        logger.info(
            "Loaded snapshot %s (%d trees, %d progressions, %d paths)",
            self._path, len(state.trees), len(state.progressions),
            len(state.learning_paths),
        )
        return state

    def save(self, state: SnapshotState) -> None:
        """Overwrite the file with the full state. ``OSError`` propagates."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(state.to_dict(), indent=2, sort_keys=True),
            encoding="utf-8",
        )
        logger.debug("Saved snapshot to %s", self._path)


class MemorySnapshotStore:
    """Snapshot store that keeps the serialized document in memory.

    Saves go through the same ``to_dict`` path as the JSON store, so what a
    test reads back is what a file would have held.
    """

    def __init__(self) -> None:
        self.document: dict[str, Any] | None = None
        self.save_count = 0

    def load(self) -> SnapshotState:
        if self.document is None:
            return SnapshotState()
        return SnapshotState.from_dict(json.loads(json.dumps(self.document)))

    def save(self, state: SnapshotState) -> None:
        self.document = json.loads(json.dumps(state.to_dict()))
        self.save_count += 1
