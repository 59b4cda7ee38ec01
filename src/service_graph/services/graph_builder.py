"""Neighborhood extraction for the service dependency graph.

Pure-function module: given every service and relationship of an
environment, :func:`build_neighborhood` walks relationship edges in both
directions, level by level, and returns the subgraph within ``depth`` hops of
a center service. No cache or storage is touched here.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.shared.constants import DEFAULT_GRAPH_DEPTH
from src.shared.errors import ServiceNotFoundError
from src.shared.models.service_graph import GraphData, Relationship, Service


def build_neighborhood(
    services: Mapping[str, Service],
    relationships: Iterable[Relationship],
    center_id: str,
    depth: int = DEFAULT_GRAPH_DEPTH,
) -> GraphData:
    """Collect the services and relationships within *depth* hops of *center_id*.

    Each round scans every relationship touching the current frontier. A
    relationship is recorded once (by id) and only if both of its endpoints
    are known services; the far endpoint joins the next frontier if it has
    not been visited yet. Endpoints that no longer resolve to a service are
    dropped when the result is materialized.

    Args:
        services: Service id to Service mapping for the environment.
        relationships: All relationships of the environment.
        center_id: Id of the service to center the neighborhood on.
        depth: Number of hops to expand. ``0`` returns the center alone.

    Returns:
        GraphData with the center, its connected services and the edges
        between them. Ordering is not significant.

    Raises:
        ServiceNotFoundError: If *center_id* is not a known service.
    """
    center = services.get(center_id)
    if center is None:
        raise ServiceNotFoundError(center_id)

    all_relationships = list(relationships)

    # dicts double as insertion-ordered sets
    visited: dict[str, None] = {center_id: None}
    frontier: dict[str, None] = {center_id: None}
    connected_ids: dict[str, None] = {}
    edges: list[Relationship] = []
    seen_relationship_ids: set[str] = set()

    for _ in range(depth):
        next_frontier: dict[str, None] = {}

        for service_id in frontier:
            for rel in all_relationships:
                if rel.source == service_id:
                    other_id = rel.target
                elif rel.target == service_id:
                    other_id = rel.source
                else:
                    continue

                if (
                    rel.id not in seen_relationship_ids
                    and rel.source in services
                    and rel.target in services
                ):
                    seen_relationship_ids.add(rel.id)
                    edges.append(rel)

                if other_id not in visited:
                    visited[other_id] = None
                    connected_ids[other_id] = None
                    next_frontier[other_id] = None

        frontier = next_frontier

    connected_services = [
        services[service_id] for service_id in connected_ids if service_id in services
    ]

    return GraphData(
        center_service=center,
        connected_services=connected_services,
        relationships=edges,
    )
