"""Tests for building the commit graph from branch heads."""

import logging

import pytest

from repository.errors import RepoOpenError, RepositoryError
from repository.memory import MemoryStore
from repository.model import RepositoryModel
from repository.models import Signature


def open_model(store: MemoryStore) -> RepositoryModel:
    model = RepositoryModel.open("memory://test", store=store)
    assert model.refresh()
    return model


class TestOpen:
    """Tests for RepositoryModel.open."""

    def test_invalid_store_raises(self):
        """Test that an unrecognized path fails with RepoOpenError."""
        with pytest.raises(RepoOpenError):
            RepositoryModel.open("memory://nothing", store=MemoryStore(valid=False))

    def test_not_loaded_before_refresh(self, scenario_store):
        """Test that opening does not load any commits yet."""
        model = RepositoryModel.open("memory://scenario", store=scenario_store)
        assert not model.loaded
        assert len(model.graph) == 0
        assert model.branches() == []

    def test_default_store_comes_from_environment(self, monkeypatch):
        """Test that OSTREE_STORE=memory selects the in-memory backend."""
        monkeypatch.setenv("OSTREE_STORE", "memory")
        model = RepositoryModel.open("/srv/repo")
        assert isinstance(model.store, MemoryStore)


class TestRefresh:
    """Tests for RepositoryModel.refresh."""

    def test_all_commits_loaded(self, scenario_model):
        """Test that every commit reachable from a head is in the graph."""
        assert set(scenario_model.graph) == {"c1", "c2", "c3"}
        assert scenario_model.branches() == ["a", "b"]

    def test_shared_history_merges_branch_sets(self, scenario_model):
        """Test that a commit reachable from two branches appears once with both."""
        graph = scenario_model.graph
        assert graph["c1"].branches == frozenset({"a", "b"})
        assert graph["c2"].branches == frozenset({"a"})
        assert graph["c3"].branches == frozenset({"b"})

    def test_shared_history_loaded_once(self, scenario_store):
        """Test that shared ancestry is not re-read from the store."""
        open_model(scenario_store)
        loads = [h for call, h in scenario_store.calls if call == "load"]
        assert sorted(loads) == ["c1", "c2", "c3"]

    def test_branch_set_reaches_deep_shared_ancestry(self, make_meta):
        """Test that every shared ancestor gets the later branch, not just the fork point."""
        store = MemoryStore()
        store.add_commit("r", make_meta(None, 1))
        store.add_commit("m", make_meta("r", 2))
        store.add_commit("x", make_meta("m", 3))
        store.add_commit("y", make_meta("m", 4))
        store.refs = {"left": "x", "right": "y"}

        graph = open_model(store).graph

        assert graph["r"].branches == frozenset({"left", "right"})
        assert graph["m"].branches == frozenset({"left", "right"})

    def test_parent_links_resolve(self, scenario_model):
        """Test that every non-root parent resolves within a complete graph."""
        graph = scenario_model.graph
        for record in graph.values():
            if not record.is_root:
                assert record.parent_hash in graph
        assert graph.dangling_parents() == set()

    def test_store_order_does_not_matter(self, scenario_store, make_meta):
        """Test that branch enumeration order does not change the result."""
        first = open_model(scenario_store).graph
        scenario_store.refs = dict(reversed(list(scenario_store.refs.items())))
        second = open_model(scenario_store).graph
        assert first == second

    def test_refresh_is_idempotent(self, scenario_store):
        """Test that two refreshes of an unchanged store give identical graphs."""
        scenario_store.signatures["c2"] = [Signature(fingerprint="ABCD", valid=True)]
        model = open_model(scenario_store)
        first = model.graph

        assert model.refresh()

        assert set(model.graph) == set(first)
        assert model.graph.signatures_by_commit() == first.signatures_by_commit()
        assert model.graph == first
        assert not model.changed

    def test_refresh_picks_up_new_commits(self, scenario_store, make_meta):
        """Test that the graph is rebuilt wholesale from the store."""
        model = open_model(scenario_store)
        scenario_store.add_commit("c4", make_meta("c2", 300))
        scenario_store.refs["a"] = "c4"

        assert model.refresh()

        assert "c4" in model.graph
        assert model.changed
        assert model.graph.most_recent_commit_of_branch("a").hash == "c4"

    def test_signatures_attached(self, scenario_store):
        """Test that verification results are attached in store order."""
        sigs = [Signature(fingerprint="AAAA", valid=True), Signature(fingerprint="BBBB")]
        scenario_store.signatures["c3"] = sigs
        graph = open_model(scenario_store).graph

        assert graph["c3"].signatures == tuple(sigs)
        assert graph["c3"].is_signed
        assert not graph["c1"].is_signed


class TestTruncation:
    """Tests for non-fatal store errors during the walk."""

    def test_corrupt_commit_truncates_branch(self, make_meta, caplog):
        """Test that history above a corrupt commit is kept and a warning recorded."""
        store = MemoryStore()
        store.add_commit("c1", make_meta(None, 1))
        store.add_commit("c2", make_meta("c1", 2))
        store.add_commit("c3", make_meta("c2", 3))
        store.corrupt = {"c2"}
        store.refs = {"main": "c3"}

        with caplog.at_level(logging.WARNING):
            model = open_model(store)

        assert set(model.graph) == {"c3"}
        assert model.graph.dangling_parents() == {"c2"}
        assert len(model.warnings) == 1
        assert model.warnings[0].branch == "main"
        assert model.warnings[0].commit_hash == "c2"
        assert "truncated" in caplog.text

    def test_truncation_only_affects_that_branch(self, make_meta):
        """Test that other branches are still walked to their roots."""
        store = MemoryStore()
        store.add_commit("r", make_meta(None, 1))
        store.add_commit("ok", make_meta("r", 2))
        store.add_commit("bad-head", make_meta("missing", 3))
        store.refs = {"broken": "bad-head", "good": "ok"}

        model = open_model(store)

        assert set(model.graph) == {"r", "ok", "bad-head"}
        assert [w.branch for w in model.warnings] == ["broken"]

    def test_unresolvable_head_is_skipped(self, scenario_store):
        """Test that a ref whose head cannot be resolved is dropped with a warning."""

        class FlakyStore(MemoryStore):
            def list_branch_refs(self):
                return set(self.refs) | {"ghost"}

        store = FlakyStore(refs=scenario_store.refs, commits=scenario_store.commits)
        model = open_model(store)

        assert model.branches() == ["a", "b"]
        assert model.warnings[0].branch == "ghost"

    def test_cycle_is_guarded(self, make_meta):
        """Test that a cyclic parent chain terminates with a warning."""
        store = MemoryStore()
        store.add_commit("x", make_meta("y", 1))
        store.add_commit("y", make_meta("x", 2))
        store.refs = {"loop": "y"}

        model = open_model(store)

        assert set(model.graph) == {"x", "y"}
        assert "cycle" in model.warnings[0].message

    def test_signature_error_degrades(self, scenario_store):
        """Test that a raising verifier yields an invalid signature instead of failing."""

        class BrokenVerifier(MemoryStore):
            def verify_signatures(self, commit_hash):
                raise RepositoryError("gpg exploded")

        store = BrokenVerifier(refs=scenario_store.refs, commits=scenario_store.commits)
        graph = open_model(store).graph

        assert graph["c1"].signatures == (Signature(),)
        assert not graph["c1"].signatures[0].valid

    def test_failed_refresh_keeps_previous_graph(self, scenario_store):
        """Test that a store failure never exposes a partial graph."""
        model = open_model(scenario_store)
        before = model.graph

        def fail():
            raise RepoOpenError("repository vanished")

        scenario_store.list_branch_refs = fail

        assert model.refresh() is False
        assert model.graph is before
        assert model.branches() == ["a", "b"]
