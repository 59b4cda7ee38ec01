"""Tests for the per-environment GraphCache."""
from __future__ import annotations

from src.shared.models.service_graph import Relationship, Service
from src.service_graph.state import GraphCache


class TestGraphCache:
    def test_unloaded_is_distinct_from_empty(self):
        cache = GraphCache()
        assert not cache.has_services("dev")

        cache.store_services("dev", [])

        assert cache.has_services("dev")
        assert cache.services["dev"] == {}

    def test_store_services_keys_by_id(self):
        cache = GraphCache()
        first = Service(id="a", name="First")
        second = Service(id="a", name="Second")

        stored = cache.store_services("dev", [first, second])

        assert list(stored) == ["a"]
        assert stored["a"].name == "Second"

    def test_put_and_remove_service(self):
        cache = GraphCache()
        cache.put_service("dev", Service(id="a", name="A"))
        cache.remove_service("dev", "a")
        cache.remove_service("qa", "a")

        assert cache.services == {"dev": {}}

    def test_invalidate_relationships_only_touches_one_environment(self):
        cache = GraphCache()
        cache.store_relationships("dev", [Relationship(id="r", source="a", target="b")])
        cache.store_relationships("qa", [])
        cache.store_services("dev", [])

        cache.invalidate_relationships("dev")

        assert not cache.has_relationships("dev")
        assert cache.has_relationships("qa")
        assert cache.has_services("dev")

    def test_clear(self):
        cache = GraphCache()
        cache.store_services("dev", [])
        cache.store_relationships("dev", [])

        cache.clear()

        assert cache.services == {}
        assert cache.relationships == {}
