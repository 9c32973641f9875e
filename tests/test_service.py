"""Tests for SkillTreeService: trees, progression, paths, events, persistence."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from skilltrees.config import EngineSettings
from skilltrees.core import events as ev
from skilltrees.core.domain import DomainKind, TreeDomain
from skilltrees.core.graph import SkillGraph, StaticWorkflows
from skilltrees.core.progression import ProgressionStatus, ProgressionThresholds
from skilltrees.core.store import MemorySnapshotStore, SnapshotState
from skilltrees.exceptions import (
    ConfigurationError,
    NoMatchingSkillsError,
    SkillNotFoundError,
    UnknownSkillError,
    UnknownTreeError,
)
from skilltrees.service import SkillTreeService


class FailingStore(MemorySnapshotStore):
    """Memory store whose saves can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def save(self, state: SnapshotState) -> None:
        if self.fail:
            raise OSError("disk full")
        super().save(state)


# ===========================================================================
# Trees
# ===========================================================================


class TestGenerateTree:

    def test_generates_and_stores(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        assert service.get_tree(tree.id) == tree
        assert service.get_trees() == [tree]
        assert memory_store.save_count == 1
        assert memory_store.document["trees"][0]["id"] == tree.id

    def test_marker_from_graph(self, service: SkillTreeService) -> None:
        tree = service.generate_tree(TreeDomain.parse("phase=INIT"))
        assert tree.based_on_graph == "graph-v1"

    def test_workflow_domain(self, service: SkillTreeService) -> None:
        tree = service.generate_tree(TreeDomain.parse("workflow=loop"))
        assert [n.id for n in tree.nodes] == ["A", "C", "D"]

    def test_empty_domain_stores_nothing(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        with pytest.raises(NoMatchingSkillsError):
            service.generate_tree(TreeDomain.parse("tag=nothing"))
        assert service.get_trees() == []
        assert memory_store.save_count == 0

    def test_unknown_workflow_is_not_found(self, service: SkillTreeService) -> None:
        with pytest.raises(NoMatchingSkillsError):
            service.generate_tree(TreeDomain.parse("workflow=nope"))

    def test_requires_graph(self, memory_store: MemorySnapshotStore) -> None:
        svc = SkillTreeService(store=memory_store)
        svc.initialize()
        with pytest.raises(ConfigurationError, match="Graph accessor not set"):
            svc.generate_tree(TreeDomain.parse("tag=core"))

    def test_workflow_requires_source(
        self, memory_store: MemorySnapshotStore, sample_graph: SkillGraph
    ) -> None:
        svc = SkillTreeService(store=memory_store)
        svc.set_dependencies(graph=sample_graph)
        with pytest.raises(ConfigurationError, match="Workflow source"):
            svc.generate_tree(TreeDomain.parse("workflow=loop"))

    def test_tree_snapshots_current_progression(self, service: SkillTreeService) -> None:
        service.record_skill_output("A")
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        service.record_skill_output("A")
        assert tree.node("A").progression.outputs_seen == 1

    def test_hub_threshold_from_settings(
        self, memory_store: MemorySnapshotStore, sample_graph: SkillGraph
    ) -> None:
        svc = SkillTreeService(store=memory_store, settings=EngineSettings(hub_threshold=2))
        svc.set_dependencies(graph=sample_graph)
        tree = svc.generate_tree(TreeDomain(DomainKind.CUSTOM, "all"))
        assert tree.stats.hub_count == 2

    def test_get_unknown_tree(self, service: SkillTreeService) -> None:
        assert service.get_tree("tree-missing") is None


# ===========================================================================
# Progression
# ===========================================================================


class TestRecording:

    def test_outputs_seen_three_times(self, service: SkillTreeService) -> None:
        statuses = [service.record_skill_output("A").status for _ in range(3)]
        prog = service.get_progression("A")
        assert prog.outputs_seen == 3
        assert prog.status is ProgressionStatus.IN_PROGRESS
        assert statuses == [ProgressionStatus.IN_PROGRESS] * 3

    def test_recording_sets_prerequisites_and_timestamp(
        self, service: SkillTreeService
    ) -> None:
        prog = service.record_skill_usage("B")
        assert prog.prerequisites_met
        assert prog.used_in_loop == 1
        assert prog.last_interaction is not None

    def test_two_uses_make_familiar(self, service: SkillTreeService) -> None:
        service.record_skill_usage("A")
        assert service.record_skill_usage("A").status is ProgressionStatus.FAMILIAR

    def test_mastery(self, service: SkillTreeService) -> None:
        for _ in range(10):
            service.record_skill_output("A")
        for _ in range(5):
            service.record_skill_usage("A")
        assert service.get_progression("A").status is ProgressionStatus.MASTERED

    def test_custom_thresholds(
        self, memory_store: MemorySnapshotStore, sample_graph: SkillGraph
    ) -> None:
        settings = EngineSettings(
            thresholds=ProgressionThresholds(mastered_uses=1, mastered_outputs=1)
        )
        svc = SkillTreeService(store=memory_store, settings=settings)
        svc.set_dependencies(graph=sample_graph)
        svc.record_skill_output("A")
        assert svc.record_skill_usage("A").status is ProgressionStatus.MASTERED

    def test_unknown_skill_rejected(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        with pytest.raises(UnknownSkillError, match="Unknown skill: Z"):
            service.record_skill_output("Z")
        assert memory_store.save_count == 0

    def test_any_skill_accepted_without_graph(
        self, memory_store: MemorySnapshotStore
    ) -> None:
        svc = SkillTreeService(store=memory_store)
        assert svc.record_skill_output("anything").outputs_seen == 1

    def test_returned_record_is_a_copy(self, service: SkillTreeService) -> None:
        prog = service.record_skill_output("A")
        prog.outputs_seen = 50
        assert service.get_progression("A").outputs_seen == 1

    def test_untracked_skill_default(self, service: SkillTreeService) -> None:
        prog = service.get_progression("D")
        assert prog.status is ProgressionStatus.LOCKED
        assert prog.outputs_seen == 0


class TestUpdateProgression:

    def test_prerequisites_flag_derives_available(self, service: SkillTreeService) -> None:
        prog = service.update_progression("C", prerequisites_met=True)
        assert prog.status is ProgressionStatus.AVAILABLE

    def test_status_override_skips_derivation(self, service: SkillTreeService) -> None:
        prog = service.update_progression("C", status="mastered", notes="knew it")
        assert prog.status is ProgressionStatus.MASTERED
        assert prog.outputs_seen == 0
        assert prog.notes == "knew it"

    def test_invalid_status(self, service: SkillTreeService) -> None:
        with pytest.raises(ValueError):
            service.update_progression("C", status="expert")

    def test_notes_only_keeps_counters(self, service: SkillTreeService) -> None:
        service.record_skill_output("A")
        prog = service.update_progression("A", notes="reviewed")
        assert prog.outputs_seen == 1
        assert prog.status is ProgressionStatus.IN_PROGRESS


class TestUpdatePrerequisites:

    def test_roots_unlocked_first(self, service: SkillTreeService) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        assert service.update_prerequisites(tree.id) == ["A"]
        assert service.get_progression("A").status is ProgressionStatus.AVAILABLE
        assert not service.get_progression("B").prerequisites_met

    def test_children_unlocked_once_parent_learned(
        self, service: SkillTreeService
    ) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        service.record_skill_usage("A")
        service.record_skill_usage("A")
        assert service.update_prerequisites(tree.id) == ["B", "C"]
        assert service.get_progression("D").prerequisites_met is False

    def test_second_call_unlocks_nothing(self, service: SkillTreeService) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        service.update_prerequisites(tree.id)
        assert service.update_prerequisites(tree.id) == []

    def test_single_save_per_batch(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        service.update_progression("A", status="familiar")
        before = memory_store.save_count
        service.update_prerequisites(tree.id)
        assert memory_store.save_count == before + 1

    def test_unknown_tree(self, service: SkillTreeService) -> None:
        with pytest.raises(UnknownTreeError, match="tree-nope"):
            service.update_prerequisites("tree-nope")


# ===========================================================================
# Learning paths
# ===========================================================================


class TestLearningPaths:

    def test_generate_and_store(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        path = service.generate_learning_path("D")
        assert path.skills == ["A", "C", "D"]
        assert service.get_learning_path(path.id) == path
        assert service.get_learning_paths() == [path]
        assert memory_store.document["learning_paths"][0]["id"] == path.id

    def test_uses_global_graph_across_domains(self, service: SkillTreeService) -> None:
        service.generate_tree(TreeDomain.parse("phase=BUILD"))
        assert service.generate_learning_path("D").skills == ["A", "C", "D"]

    def test_reflects_progress(self, service: SkillTreeService) -> None:
        service.update_progression("A", status="familiar")
        path = service.generate_learning_path("D")
        assert path.skills == ["C", "D"]
        assert path.prerequisites == ["A"]

    def test_no_prerequisites_yields_target_only(self, service: SkillTreeService) -> None:
        assert service.generate_learning_path("A").skills == ["A"]

    def test_unknown_target(self, service: SkillTreeService) -> None:
        with pytest.raises(SkillNotFoundError):
            service.generate_learning_path("Z")
        assert service.get_learning_paths() == []

    def test_requires_graph(self, memory_store: MemorySnapshotStore) -> None:
        with pytest.raises(ConfigurationError):
            SkillTreeService(store=memory_store).generate_learning_path("A")


# ===========================================================================
# Queries and events
# ===========================================================================


class TestQueries:

    def test_available_domains(self, service: SkillTreeService) -> None:
        domains = {d.kind: d.values for d in service.get_available_domains()}
        assert domains[DomainKind.WORKFLOW] == ["loop"]
        assert domains[DomainKind.PHASE] == ["BUILD", "INIT"]

    def test_available_domains_without_graph(
        self, memory_store: MemorySnapshotStore
    ) -> None:
        assert SkillTreeService(store=memory_store).get_available_domains() == []

    def test_status(self, service: SkillTreeService) -> None:
        service.generate_tree(TreeDomain.parse("tag=core"))
        service.generate_learning_path("D")
        service.record_skill_output("A")
        status = service.get_status()
        assert status.tree_count == 1
        assert status.path_count == 1
        assert status.progression_count == 1
        # 2 phases + 2 tags + 2 categories + 1 workflow
        assert status.available_domains == 7


class TestEvents:

    def test_initialized(self, memory_store: MemorySnapshotStore) -> None:
        svc = SkillTreeService(store=memory_store)
        seen: list[object] = []
        svc.subscribe(ev.INITIALIZED, seen.append)
        svc.initialize()
        assert seen == [None]

    def test_tree_generated_payload(self, service: SkillTreeService) -> None:
        seen: list[object] = []
        service.subscribe(ev.TREE_GENERATED, seen.append)
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        assert seen == [tree]

    def test_progression_updated_payload(self, service: SkillTreeService) -> None:
        seen: list[dict] = []
        service.subscribe(ev.PROGRESSION_UPDATED, seen.append)
        service.record_skill_output("A")
        assert seen[0]["skill_id"] == "A"
        assert seen[0]["progression"].outputs_seen == 1

    def test_one_event_per_unlocked_skill(self, service: SkillTreeService) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        service.update_progression("A", status="mastered")
        seen: list[dict] = []
        service.subscribe(ev.PROGRESSION_UPDATED, seen.append)
        service.update_prerequisites(tree.id)
        assert [e["skill_id"] for e in seen] == ["A", "B", "C"]

    def test_path_generated(self, service: SkillTreeService) -> None:
        seen: list[object] = []
        service.events.subscribe(ev.PATH_GENERATED, seen.append)
        path = service.generate_learning_path("D")
        assert seen == [path]

    def test_failing_subscriber_does_not_fail_operation(
        self, service: SkillTreeService
    ) -> None:
        def broken(_payload: object) -> None:
            raise RuntimeError("listener bug")

        service.subscribe(ev.TREE_GENERATED, broken)
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        assert service.get_tree(tree.id) == tree

    def test_no_event_on_failure(self, service: SkillTreeService) -> None:
        seen: list[object] = []
        service.subscribe(ev.TREE_GENERATED, seen.append)
        with pytest.raises(NoMatchingSkillsError):
            service.generate_tree(TreeDomain.parse("tag=nothing"))
        assert seen == []


# ===========================================================================
# Persistence
# ===========================================================================


class TestPersistence:

    def test_reload_from_file(
        self, tmp_path: Path, sample_graph: SkillGraph, sample_workflows: StaticWorkflows
    ) -> None:
        settings = EngineSettings(data_path=tmp_path / "state.json")
        first = SkillTreeService(settings=settings)
        first.set_dependencies(graph=sample_graph, workflows=sample_workflows)
        first.initialize()
        tree = first.generate_tree(TreeDomain.parse("tag=core"))
        path = first.generate_learning_path("D")
        first.record_skill_output("A")

        second = SkillTreeService(settings=settings)
        second.initialize()
        assert second.get_tree(tree.id).suggested_order == tree.suggested_order
        assert second.get_learning_path(path.id) == path
        assert second.get_progression("A") == first.get_progression("A")

    def test_failed_save_rolls_back_progression(self, sample_graph: SkillGraph) -> None:
        store = FailingStore()
        svc = SkillTreeService(store=store)
        svc.set_dependencies(graph=sample_graph)
        svc.record_skill_output("A")
        store.fail = True
        with pytest.raises(OSError):
            svc.record_skill_output("A")
        with pytest.raises(OSError):
            svc.record_skill_output("B")
        assert svc.get_progression("A").outputs_seen == 1
        assert svc.get_progression("B").outputs_seen == 0
        assert svc.get_status().progression_count == 1

    def test_failed_save_rolls_back_tree_and_path(self, sample_graph: SkillGraph) -> None:
        store = FailingStore()
        store.fail = True
        svc = SkillTreeService(store=store)
        svc.set_dependencies(graph=sample_graph)
        with pytest.raises(OSError):
            svc.generate_tree(TreeDomain.parse("tag=core"))
        with pytest.raises(OSError):
            svc.generate_learning_path("D")
        assert svc.get_trees() == []
        assert svc.get_learning_paths() == []

    def test_failed_save_rolls_back_unlock_batch(self, sample_graph: SkillGraph) -> None:
        store = FailingStore()
        svc = SkillTreeService(store=store)
        svc.set_dependencies(graph=sample_graph)
        tree = svc.generate_tree(TreeDomain.parse("tag=core"))
        svc.update_progression("A", status="familiar")
        store.fail = True
        with pytest.raises(OSError):
            svc.update_prerequisites(tree.id)
        assert not svc.get_progression("B").prerequisites_met
        assert svc.get_progression("A").status is ProgressionStatus.FAMILIAR


class TestConcurrency:

    def test_no_lost_updates_across_threads(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        threads = [
            threading.Thread(
                target=lambda: [service.record_skill_output("A") for _ in range(25)]
            )
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert service.get_progression("A").outputs_seen == 200
        assert memory_store.document["progressions"]["A"]["outputs_seen"] == 200
        assert memory_store.save_count == 200


class TestStatusOverrides:

    def test_override_survives_later_recording(self, service: SkillTreeService) -> None:
        service.update_progression("A", status="mastered")
        assert service.record_skill_output("A").status is ProgressionStatus.MASTERED

    def test_override_can_lower_status(self, service: SkillTreeService) -> None:
        service.record_skill_usage("A")
        service.record_skill_usage("A")
        prog = service.update_progression("A", status="available")
        assert prog.status is ProgressionStatus.AVAILABLE
        assert prog.used_in_loop == 2

    def test_unlock_keeps_overridden_status(self, service: SkillTreeService) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        service.update_progression("A", status="mastered")
        service.update_prerequisites(tree.id)
        prog = service.get_progression("A")
        assert prog.prerequisites_met
        assert prog.status is ProgressionStatus.MASTERED


class TestStoredSnapshotsAreIsolated:

    def test_changing_fetched_tree_leaves_store_untouched(
        self, service: SkillTreeService, memory_store: MemorySnapshotStore
    ) -> None:
        tree_id = service.generate_tree(TreeDomain.parse("tag=core")).id
        fetched = service.get_tree(tree_id)
        fetched.roots.append("INJECTED")
        fetched.node("A").children.clear()
        service.get_trees()[0].suggested_order.reverse()
        service.record_skill_output("A")

        assert service.get_tree(tree_id).roots == ["A"]
        reloaded = SkillTreeService(store=memory_store)
        reloaded.initialize()
        stored = reloaded.get_tree(tree_id)
        assert stored.roots == ["A"]
        assert stored.node("A").children == ["B", "C"]
        assert stored.suggested_order == ["A", "C", "D", "B"]

    def test_changing_returned_tree_leaves_store_untouched(
        self, service: SkillTreeService
    ) -> None:
        tree = service.generate_tree(TreeDomain.parse("tag=core"))
        tree.leaves.append("INJECTED")
        assert service.get_tree(tree.id).leaves == ["B", "D"]

    def test_changing_fetched_path_leaves_store_untouched(
        self, service: SkillTreeService
    ) -> None:
        path = service.generate_learning_path("D")
        path.skills.append("INJECTED")
        service.get_learning_path(path.id).skills.clear()
        assert service.get_learning_paths()[0].skills == ["A", "C", "D"]
