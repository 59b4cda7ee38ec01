"""Per-environment in-memory cache of services and relationships."""
from __future__ import annotations

from src.shared.models.service_graph import Relationship, Service


class GraphCache:
    """Memoized services and relationships, keyed by environment name.

    A missing environment key means "not loaded yet", which is distinct
    from an environment that was loaded and turned out to be empty.

    Not thread-safe on its own; :class:`GraphState` serializes access.
    """

    def __init__(self) -> None:
        self.services: dict[str, dict[str, Service]] = {}
        self.relationships: dict[str, list[Relationship]] = {}

    def has_services(self, environment: str) -> bool:
        return environment in self.services

    def has_relationships(self, environment: str) -> bool:
        return environment in self.relationships

    def store_services(self, environment: str, services: list[Service]) -> dict[str, Service]:
        """Replace the cached services of *environment*; later duplicates win."""
        services_by_id = {service.id: service for service in services}
        self.services[environment] = services_by_id
        return services_by_id

    def store_relationships(
        self, environment: str, relationships: list[Relationship]
    ) -> list[Relationship]:
        self.relationships[environment] = list(relationships)
        return self.relationships[environment]

    def put_service(self, environment: str, service: Service) -> None:
        self.services.setdefault(environment, {})[service.id] = service

    def remove_service(self, environment: str, service_id: str) -> None:
        services_by_id = self.services.get(environment)
        if services_by_id is not None:
            services_by_id.pop(service_id, None)

    def invalidate_relationships(self, environment: str) -> None:
        self.relationships.pop(environment, None)

    def clear(self) -> None:
        self.services.clear()
        self.relationships.clear()
