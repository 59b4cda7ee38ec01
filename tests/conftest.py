"""Shared test fixtures for the service graph test suite."""
from __future__ import annotations

from pathlib import Path

import pytest

from src.shared.models.service_graph import (
    Relationship,
    RelationshipType,
    Service,
    ServiceStatus,
    ServiceType,
)
from src.service_graph.state import GraphState
from src.service_graph.storage import loader


def _service(service_id: str, name: str | None = None, **kwargs) -> Service:
    """Build a Service with a name derived from its id."""
    if name is None:
        name = f"{service_id} service"
    return Service(id=service_id, name=name, **kwargs)


def _relationship(
    rel_id: str,
    source: str,
    target: str,
    rel_type: RelationshipType | str = RelationshipType.DEPENDS_ON,
) -> Relationship:
    """Build a Relationship between two service ids."""
    return Relationship(id=rel_id, source=source, target=target, relationship_type=rel_type)


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    """Provide an empty storage root."""
    root = tmp_path / "data"
    root.mkdir()
    return root


@pytest.fixture
def graph_state(data_path: Path) -> GraphState:
    """Provide a GraphState over an empty storage root."""
    return GraphState(data_path)


@pytest.fixture
def sample_services() -> list[Service]:
    return [
        _service(
            "api-gateway",
            "API Gateway",
            service_type=ServiceType.GATEWAY,
            status=ServiceStatus.HEALTHY,
            team="platform",
            tags=["edge", "public"],
        ),
        _service(
            "user-service",
            "User Service",
            service_type=ServiceType.API,
            owner="alice",
            description="Manages user accounts",
        ),
        _service("user-db", "User Database", service_type=ServiceType.DATABASE),
        _service("auth-service", "Auth Service", team="identity"),
    ]


@pytest.fixture
def sample_relationships() -> list[Relationship]:
    return [
        _relationship("r1", "api-gateway", "user-service"),
        _relationship("r2", "user-service", "user-db", RelationshipType.READS_FROM),
        _relationship("r3", "api-gateway", "auth-service", RelationshipType.AUTHENTICATES_VIA),
    ]


@pytest.fixture
def seeded_state(
    data_path: Path,
    sample_services: list[Service],
    sample_relationships: list[Relationship],
) -> GraphState:
    """Provide a GraphState whose ``dev`` environment holds the sample data."""
    for service in sample_services:
        loader.save_service(data_path, "dev", service)
    loader.save_relationships(data_path, "dev", sample_relationships)
    return GraphState(data_path)
