"""SkillTreeService: the engine facade.

Owns three keyed collections (trees, progressions, learning paths), persists
them as one snapshot after every mutation, and emits events for subscribers.

Control flows:

- ``generate_tree``: domain filter -> tree builder -> store -> persist ->
  ``tree-generated``.
- ``record_skill_output`` / ``record_skill_usage`` / ``update_progression``:
  mutate one record -> derive status -> persist -> ``progression-updated``.
- ``generate_learning_path``: prerequisite closure on the global graph ->
  order -> store -> persist -> ``path-generated``.

Concurrency: every mutation and its snapshot save run under one re-entrant
lock, so in-process callers on different threads are serialized and no
update is lost between the in-memory state and the file. Separate processes
sharing a snapshot file are still last-writer-wins.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from skilltrees.config import EngineSettings
from skilltrees.core import events as ev
from skilltrees.core.domain.filter import (
    DomainValues,
    TreeDomain,
    available_domains,
    filter_nodes,
)
from skilltrees.core.events import EventBus, Listener
from skilltrees.core.graph.models import GraphAccessor, WorkflowSource
from skilltrees.core.progression.models import (
    LearningPath,
    ProgressionStatus,
    SkillProgression,
)
from skilltrees.core.progression.paths import build_learning_path
from skilltrees.core.progression.status import derive_status
from skilltrees.core.store.snapshot import JsonSnapshotStore, SnapshotState, SnapshotStore
from skilltrees.core.tree.builder import build_tree
from skilltrees.core.tree.models import SkillTree
from skilltrees.exceptions import (
    ConfigurationError,
    UnknownSkillError,
    UnknownTreeError,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceStatus:
    """Counts describing the service's current state."""

    tree_count: int
    path_count: int
    progression_count: int
    available_domains: int


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SkillTreeService:
    """Skill tree generation, progression tracking and learning paths.

    Args:
        store: Snapshot backend. Defaults to a ``JsonSnapshotStore`` at
            ``settings.data_path``.
        settings: Engine settings. Defaults to ``EngineSettings()``.
        events: Event bus to publish on. A private bus is created if omitted.

    Example::

        service = SkillTreeService(settings=EngineSettings(data_path=path))
        service.set_dependencies(graph=graph)
        service.initialize()
        tree = service.generate_tree(TreeDomain(DomainKind.PHASE, "INIT"))
    """

    def __init__(
        self,
        store: SnapshotStore | None = None,
        settings: EngineSettings | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._settings.validate()
        self._store = store or JsonSnapshotStore(self._settings.data_path)
        self._events = events or EventBus()
        self._lock = threading.RLock()

        self._trees: dict[str, SkillTree] = {}
        self._progressions: dict[str, SkillProgression] = {}
        self._paths: dict[str, LearningPath] = {}

        self._graph: GraphAccessor | None = None
        self._workflows: WorkflowSource | None = None

    # -- Wiring ---------------------------------------------------------------

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def events(self) -> EventBus:
        return self._events

    def set_dependencies(
        self,
        graph: GraphAccessor | None = None,
        workflows: WorkflowSource | None = None,
    ) -> None:
        """Attach the graph accessor and the optional workflow source."""
        self._graph = graph
        self._workflows = workflows

    def subscribe(self, event: str, callback: Listener) -> None:
        """Shortcut for ``service.events.subscribe``."""
        self._events.subscribe(event, callback)

    def initialize(self) -> None:
        """Load the persisted snapshot and emit ``initialized``.

        A missing snapshot is not an error; the service starts empty.
        """
        with self._lock:
            state = self._store.load()
            self._trees = {tree.id: tree for tree in state.trees}
            self._progressions = dict(state.progressions)
            self._paths = {path.id: path for path in state.learning_paths}
        self._events.emit(ev.INITIALIZED)

    def _require_graph(self) -> GraphAccessor:
        if self._graph is None:
            raise ConfigurationError(
                "Graph accessor not set. Call set_dependencies first."
            )
        return self._graph

    def _persist(self) -> None:
        self._store.save(
            SnapshotState(
                trees=list(self._trees.values()),
                progressions=dict(self._progressions),
                learning_paths=list(self._paths.values()),
                last_updated=_now(),
            )
        )

    # -- Trees ----------------------------------------------------------------

    def generate_tree(self, domain: TreeDomain) -> SkillTree:
        """Generate, store and persist a tree for ``domain``.

        Raises:
            ConfigurationError: If no graph accessor is set, or a workflow
                domain is requested without a workflow source.
            NoMatchingSkillsError: If the domain selects no skills. Nothing
                is stored.
        """
        graph = self._require_graph()
        with self._lock:
            nodes = filter_nodes(graph.get_all_nodes(), domain, self._workflows)
            tree = build_tree(
                nodes,
                domain,
                progression_of=self.get_progression,
                graph_marker=graph.get_graph_version_marker(),
                hub_threshold=self._settings.hub_threshold,
            )
            self._trees[tree.id] = tree
            try:
                self._persist()
            except Exception:
                del self._trees[tree.id]
                raise
        logger.info(
            "Generated tree %s: %d nodes, %d edges",
            tree.id, tree.stats.total_nodes, tree.stats.total_edges,
        )
        result = copy.deepcopy(tree)
        self._events.emit(ev.TREE_GENERATED, result)
        return result

    def get_trees(self) -> list[SkillTree]:
        """Return copies of the stored trees; stored trees never change."""
        return [copy.deepcopy(tree) for tree in self._trees.values()]

    def get_tree(self, tree_id: str) -> SkillTree | None:
        tree = self._trees.get(tree_id)
        return copy.deepcopy(tree) if tree is not None else None

    # -- Progression ----------------------------------------------------------

    def get_progression(self, skill_id: str) -> SkillProgression:
        """Return a copy of a skill's progression (default if untracked)."""
        current = self._progressions.get(skill_id)
        return current.copy() if current else SkillProgression()

    def _check_skill(self, skill_id: str) -> None:
        if self._graph is not None and self._graph.get_node(skill_id) is None:
            raise UnknownSkillError(skill_id)

    def _mutate(
        self,
        skill_id: str,
        change: Callable[[SkillProgression], None],
        override: ProgressionStatus | None = None,
    ) -> SkillProgression:
        """Apply ``change`` to a record, re-derive status, store. Lock held."""
        previous = self._progressions.get(skill_id)
        updated = self.get_progression(skill_id)
        change(updated)
        updated.last_interaction = _now()
        if override is not None:
            updated.status = override
        else:
            derived = derive_status(
                updated.outputs_seen,
                updated.used_in_loop,
                updated.prerequisites_met,
                previous_status=updated.status,
                thresholds=self._settings.thresholds,
            )
            # Only an explicit override moves a status down the ladder.
            if derived.rank > updated.status.rank:
                updated.status = derived
        self._progressions[skill_id] = updated
        logger.debug(
            "Progression %s: status=%s outputs=%d uses=%d",
            skill_id, updated.status.value, updated.outputs_seen,
            updated.used_in_loop,
        )
        return previous

    def _restore(self, skill_id: str, previous: SkillProgression | None) -> None:
        if previous is None:
            self._progressions.pop(skill_id, None)
        else:
            self._progressions[skill_id] = previous

    def _update(
        self,
        skill_id: str,
        change: Callable[[SkillProgression], None],
        override: ProgressionStatus | None = None,
    ) -> SkillProgression:
        self._check_skill(skill_id)
        with self._lock:
            previous = self._mutate(skill_id, change, override)
            try:
                self._persist()
            except Exception:
                self._restore(skill_id, previous)
                raise
            result = self.get_progression(skill_id)
        self._events.emit(
            ev.PROGRESSION_UPDATED, {"skill_id": skill_id, "progression": result}
        )
        return result

    def update_progression(
        self,
        skill_id: str,
        *,
        prerequisites_met: bool | None = None,
        status: ProgressionStatus | str | None = None,
        notes: str | None = None,
    ) -> SkillProgression:
        """Update a record's flags or notes.

        Status is re-derived from the counters unless ``status`` is given,
        in which case it is an explicit override and derivation is skipped.
        Derivation never lowers a status; only an override can.

        Raises:
            UnknownSkillError: If a graph is set and does not know the skill.
            ValueError: If ``status`` is not a valid status name.
        """
        override = ProgressionStatus(status) if status is not None else None

        def change(prog: SkillProgression) -> None:
            if prerequisites_met is not None:
                prog.prerequisites_met = prerequisites_met
            if notes is not None:
                prog.notes = notes

        return self._update(skill_id, change, override)

    def record_skill_output(self, skill_id: str) -> SkillProgression:
        """Record that the user saw this skill's output."""

        def change(prog: SkillProgression) -> None:
            prog.outputs_seen += 1
            prog.prerequisites_met = True

        return self._update(skill_id, change)

    def record_skill_usage(self, skill_id: str) -> SkillProgression:
        """Record that the user used this skill in a workflow."""

        def change(prog: SkillProgression) -> None:
            prog.used_in_loop += 1
            prog.prerequisites_met = True

        return self._update(skill_id, change)

    def update_prerequisites(self, tree_id: str) -> list[str]:
        """Unlock tree skills whose parents are all familiar or mastered.

        Roots have no parents and are therefore always unlocked. This is the
        only place prerequisite satisfaction is inferred from the graph, and
        it only runs when called.

        Returns:
            Ids of skills whose ``prerequisites_met`` flipped to True.

        Raises:
            UnknownTreeError: If the tree id is not stored.
        """
        tree = self._trees.get(tree_id)
        if tree is None:
            raise UnknownTreeError(tree_id)

        def unlock(prog: SkillProgression) -> None:
            prog.prerequisites_met = True

        unlocked: list[str] = []
        previous: dict[str, SkillProgression | None] = {}
        with self._lock:
            for node in tree.nodes:
                parents_learned = all(
                    self.get_progression(p).status.is_learned for p in node.parents
                )
                if parents_learned and not self.get_progression(node.id).prerequisites_met:
                    previous[node.id] = self._mutate(node.id, unlock)
                    unlocked.append(node.id)
            if unlocked:
                try:
                    self._persist()
                except Exception:
                    for skill_id, prog in previous.items():
                        self._restore(skill_id, prog)
                    raise
            results = {skill_id: self.get_progression(skill_id) for skill_id in unlocked}

        for skill_id in unlocked:
            self._events.emit(
                ev.PROGRESSION_UPDATED,
                {"skill_id": skill_id, "progression": results[skill_id]},
            )
        return unlocked

    # -- Learning paths -------------------------------------------------------

    def generate_learning_path(self, target_skill_id: str) -> LearningPath:
        """Generate, store and persist a learning path toward a skill.

        Raises:
            ConfigurationError: If no graph accessor is set.
            SkillNotFoundError: If the target is not in the graph.
        """
        graph = self._require_graph()
        with self._lock:
            path = build_learning_path(graph, target_skill_id, self.get_progression)
            self._paths[path.id] = path
            try:
                self._persist()
            except Exception:
                del self._paths[path.id]
                raise
        logger.info(
            "Generated learning path %s: %d skills (%s)",
            path.id, len(path.skills), path.difficulty.value,
        )
        result = copy.deepcopy(path)
        self._events.emit(ev.PATH_GENERATED, result)
        return result

    def get_learning_paths(self) -> list[LearningPath]:
        return [copy.deepcopy(path) for path in self._paths.values()]

    def get_learning_path(self, path_id: str) -> LearningPath | None:
        path = self._paths.get(path_id)
        return copy.deepcopy(path) if path is not None else None

    # -- Queries --------------------------------------------------------------

    def get_available_domains(self) -> list[DomainValues]:
        """Return domain values available for tree generation.

        Empty when no graph accessor is set.
        """
        if self._graph is None:
            return []
        return available_domains(self._graph.get_all_nodes(), self._workflows)

    def get_status(self) -> ServiceStatus:
        domains = self.get_available_domains()
        return ServiceStatus(
            tree_count=len(self._trees),
            path_count=len(self._paths),
            progression_count=len(self._progressions),
            available_domains=sum(len(d.values) for d in domains),
        )
