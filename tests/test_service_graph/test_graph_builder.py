"""Tests for src.service_graph.services.graph_builder.build_neighborhood."""
from __future__ import annotations

import pytest

from src.shared.errors import ServiceNotFoundError
from src.shared.models.service_graph import Relationship, RelationshipType, Service
from src.service_graph.services.graph_builder import build_neighborhood


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _services(*ids: str) -> dict[str, Service]:
    return {sid: Service(id=sid, name=sid.upper()) for sid in ids}


def _rel(
    rel_id: str,
    source: str,
    target: str,
    rel_type: RelationshipType | str = RelationshipType.DEPENDS_ON,
) -> Relationship:
    return Relationship(id=rel_id, source=source, target=target, relationship_type=rel_type)


def _ids(services: list[Service]) -> set[str]:
    return {s.id for s in services}


def _edge_ids(relationships: list[Relationship]) -> set[str]:
    return {r.id for r in relationships}


# ---------------------------------------------------------------------------
# Chain A -> B -> C
# ---------------------------------------------------------------------------


class TestChain:
    """Services {A,B,C} with A depends_on B and B depends_on C."""

    @pytest.fixture
    def chain(self):
        return _services("A", "B", "C"), [_rel("ab", "A", "B"), _rel("bc", "B", "C")]

    def test_depth_one_from_a(self, chain):
        services, rels = chain
        graph = build_neighborhood(services, rels, "A", 1)

        assert graph.center_service.id == "A"
        assert _ids(graph.connected_services) == {"B"}
        assert _edge_ids(graph.relationships) == {"ab"}

    def test_depth_two_from_a(self, chain):
        services, rels = chain
        graph = build_neighborhood(services, rels, "A", 2)

        assert _ids(graph.connected_services) == {"B", "C"}
        assert _edge_ids(graph.relationships) == {"ab", "bc"}

    def test_default_depth_is_one(self, chain):
        services, rels = chain
        graph = build_neighborhood(services, rels, "A")
        assert _ids(graph.connected_services) == {"B"}

    def test_traversal_follows_edges_backwards(self, chain):
        services, rels = chain
        graph = build_neighborhood(services, rels, "C", 1)

        assert _ids(graph.connected_services) == {"B"}
        assert _edge_ids(graph.relationships) == {"bc"}

    def test_middle_node_sees_both_sides(self, chain):
        services, rels = chain
        graph = build_neighborhood(services, rels, "B", 1)

        assert _ids(graph.connected_services) == {"A", "C"}
        assert _edge_ids(graph.relationships) == {"ab", "bc"}

    def test_depth_beyond_graph_size_is_stable(self, chain):
        services, rels = chain
        graph = build_neighborhood(services, rels, "A", 10)

        assert _ids(graph.connected_services) == {"B", "C"}
        assert len(graph.relationships) == 2


# ---------------------------------------------------------------------------
# Depth zero
# ---------------------------------------------------------------------------


class TestDepthZero:
    def test_returns_center_only(self):
        services = _services("A", "B", "C")
        rels = [_rel("ab", "A", "B"), _rel("ac", "A", "C"), _rel("bc", "B", "C")]

        graph = build_neighborhood(services, rels, "A", 0)

        assert graph.center_service.id == "A"
        assert graph.connected_services == []
        assert graph.relationships == []

    def test_returns_center_only_without_relationships(self):
        graph = build_neighborhood(_services("A"), [], "A", 0)
        assert graph.connected_services == []
        assert graph.relationships == []


# ---------------------------------------------------------------------------
# Edge bookkeeping
# ---------------------------------------------------------------------------


class TestEdges:
    def test_edge_between_visited_services_recorded_once(self):
        services = _services("A", "B", "C")
        rels = [_rel("ab", "A", "B"), _rel("ac", "A", "C"), _rel("bc", "B", "C")]

        graph = build_neighborhood(services, rels, "A", 3)

        ids = [r.id for r in graph.relationships]
        assert sorted(ids) == ["ab", "ac", "bc"]
        assert len(ids) == len(set(ids))

    def test_parallel_edges_deduplicated_by_id_not_endpoints(self):
        services = _services("A", "B")
        rels = [
            _rel("ab-depends", "A", "B"),
            _rel("ab-reads", "A", "B", RelationshipType.READS_FROM),
        ]

        graph = build_neighborhood(services, rels, "A", 1)

        assert _edge_ids(graph.relationships) == {"ab-depends", "ab-reads"}
        assert _ids(graph.connected_services) == {"B"}

    def test_edge_to_unknown_service_is_not_returned(self):
        services = _services("A", "B")
        rels = [_rel("ab", "A", "B"), _rel("ax", "A", "ghost")]

        graph = build_neighborhood(services, rels, "A", 2)

        assert _edge_ids(graph.relationships) == {"ab"}
        assert _ids(graph.connected_services) == {"B"}

    def test_every_edge_endpoint_is_in_result(self):
        services = _services("A", "B", "C", "D", "E")
        rels = [
            _rel("ab", "A", "B"),
            _rel("bc", "B", "C"),
            _rel("cd", "C", "D"),
            _rel("de", "D", "E"),
            _rel("ea", "E", "A"),
            _rel("bx", "B", "missing"),
            _rel("ce", "C", "E", "custom_link"),
        ]

        for depth in range(0, 5):
            graph = build_neighborhood(services, rels, "A", depth)
            present = {graph.center_service.id} | _ids(graph.connected_services)
            for edge in graph.relationships:
                assert edge.source in present
                assert edge.target in present

    def test_cycle_does_not_revisit_center(self):
        services = _services("A", "B")
        rels = [_rel("ab", "A", "B"), _rel("ba", "B", "A")]

        graph = build_neighborhood(services, rels, "A", 5)

        assert _ids(graph.connected_services) == {"B"}
        assert _edge_ids(graph.relationships) == {"ab", "ba"}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_unknown_center_raises(self):
        with pytest.raises(ServiceNotFoundError) as exc_info:
            build_neighborhood(_services("A"), [], "Z", 1)
        assert exc_info.value.status_code == 404
        assert "Z" in str(exc_info.value)
