"""Lock-guarded owner of the service graph cache and configuration.

A :class:`GraphState` holds the storage root, the current environment and
the :class:`GraphCache`. Every public method takes the single state lock for
its whole duration, storage I/O included, so calls against the same
environment are linearized. Instances are independent: the FastAPI app keeps
one on ``app.state``, the MCP server keeps one at module level and tests
build their own.

Cache rules:
    * services and relationships are loaded lazily per environment;
    * service writes update the cached map in place;
    * relationship writes drop the environment's cached list, because the
      relationships file is rewritten as a whole;
    * changing the data path clears everything.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from src.shared.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_GRAPH_DEPTH,
    ENVIRONMENT_ORDER,
    RELATIONSHIPS_FILENAME,
    SERVICES_DIRNAME,
    UNRANKED_ENVIRONMENT_ORDER,
)
from src.shared.errors import (
    DuplicateRelationshipError,
    EnvironmentExistsError,
    EnvironmentNotFoundError,
    InvalidPathError,
    RelationshipNotFoundError,
    ServiceNotFoundError,
    StateLockError,
    StorageError,
)
from src.shared.models.service_graph import (
    GraphData,
    Relationship,
    RelationshipsFile,
    Service,
    ValidationResult,
)
from src.service_graph.services.graph_builder import build_neighborhood
from src.service_graph.services.validator import validate_graph
from src.service_graph.state.graph_cache import GraphCache
from src.service_graph.storage import loader

logger = logging.getLogger("service-graph.state")


def _environment_sort_key(name: str) -> tuple[int, str]:
    return (ENVIRONMENT_ORDER.get(name, UNRANKED_ENVIRONMENT_ORDER), name)


class GraphState:
    """Shared mutable state of the service graph backend."""

    def __init__(
        self,
        data_path: str | Path,
        current_environment: str = DEFAULT_ENVIRONMENT,
        lock_timeout: float = -1.0,
    ) -> None:
        self._data_path = Path(data_path)
        self._current_environment = current_environment
        self._lock_timeout = lock_timeout if lock_timeout >= 0 else -1.0
        self._lock = threading.Lock()
        self.cache = GraphCache()

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise StateLockError()
        try:
            yield
        finally:
            self._lock.release()

    # ------------------------------------------------------------------
    # Cache fill (caller must hold the lock)
    # ------------------------------------------------------------------

    def _services_for(self, environment: str) -> dict[str, Service]:
        if self.cache.has_services(environment):
            return self.cache.services[environment]
        services = loader.load_services(self._data_path, environment)
        logger.debug(
            "Loaded %d services into cache", len(services),
            extra={"environment": environment},
        )
        return self.cache.store_services(environment, services)

    def _relationships_for(self, environment: str) -> list[Relationship]:
        if self.cache.has_relationships(environment):
            return self.cache.relationships[environment]
        relationships = loader.load_relationships(self._data_path, environment)
        logger.debug(
            "Loaded %d relationships into cache", len(relationships),
            extra={"environment": environment},
        )
        return self.cache.store_relationships(environment, relationships)

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def get_services(self, environment: str) -> dict[str, Service]:
        """Return a copy of the id -> Service map of *environment*."""
        with self._locked():
            return dict(self._services_for(environment))

    def get_service(self, environment: str, service_id: str) -> Service:
        """Look up one service, loading the whole environment on a cache miss.

        Raises:
            ServiceNotFoundError: If the id is unknown after loading.
        """
        with self._locked():
            service = self._services_for(environment).get(service_id)
            if service is None:
                raise ServiceNotFoundError(service_id)
            return service

    def search_services(self, environment: str, query: str) -> list[Service]:
        with self._locked():
            return [
                service
                for service in self._services_for(environment).values()
                if service.matches_search(query)
            ]

    def save_service(self, environment: str, service: Service) -> None:
        with self._locked():
            loader.save_service(self._data_path, environment, service)
            self.cache.put_service(environment, service)
            logger.info(
                "Saved service %s", service.id, extra={"environment": environment}
            )

    def delete_service(self, environment: str, service_id: str) -> None:
        with self._locked():
            loader.delete_service_file(self._data_path, environment, service_id)
            self.cache.remove_service(environment, service_id)
            logger.info(
                "Deleted service %s", service_id, extra={"environment": environment}
            )

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def get_relationships(self, environment: str) -> list[Relationship]:
        with self._locked():
            return list(self._relationships_for(environment))

    def get_relationships_for_service(
        self, environment: str, service_id: str
    ) -> list[Relationship]:
        with self._locked():
            return [
                rel
                for rel in self._relationships_for(environment)
                if rel.source == service_id or rel.target == service_id
            ]

    def save_relationship(self, environment: str, relationship: Relationship) -> None:
        """Insert or replace (by id) a relationship.

        Raises:
            DuplicateRelationshipError: If a new id repeats an existing
                source, target and type combination.
        """
        with self._locked():
            relationships = loader.load_relationships(self._data_path, environment)

            for index, existing in enumerate(relationships):
                if existing.id == relationship.id:
                    relationships[index] = relationship
                    break
            else:
                for existing in relationships:
                    if (
                        existing.source == relationship.source
                        and existing.target == relationship.target
                        and existing.relationship_type == relationship.relationship_type
                    ):
                        raise DuplicateRelationshipError(
                            relationship.source, relationship.target
                        )
                relationships.append(relationship)

            loader.save_relationships(self._data_path, environment, relationships)
            self.cache.invalidate_relationships(environment)
            logger.info(
                "Saved relationship %s", relationship.id,
                extra={"environment": environment},
            )

    def delete_relationship(self, environment: str, relationship_id: str) -> None:
        with self._locked():
            relationships = loader.load_relationships(self._data_path, environment)
            remaining = [rel for rel in relationships if rel.id != relationship_id]
            if len(remaining) == len(relationships):
                raise RelationshipNotFoundError(relationship_id)

            loader.save_relationships(self._data_path, environment, remaining)
            self.cache.invalidate_relationships(environment)
            logger.info(
                "Deleted relationship %s", relationship_id,
                extra={"environment": environment},
            )

    def delete_relationships_for_service(self, environment: str, service_id: str) -> int:
        """Remove every relationship touching *service_id*; return how many."""
        with self._locked():
            relationships = loader.load_relationships(self._data_path, environment)
            remaining = [
                rel
                for rel in relationships
                if rel.source != service_id and rel.target != service_id
            ]
            deleted = len(relationships) - len(remaining)

            loader.save_relationships(self._data_path, environment, remaining)
            self.cache.invalidate_relationships(environment)
            logger.info(
                "Deleted %d relationships of service %s", deleted, service_id,
                extra={"environment": environment},
            )
            return deleted

    # ------------------------------------------------------------------
    # Graph queries
    # ------------------------------------------------------------------

    def get_neighborhood(
        self,
        environment: str,
        center_id: str,
        depth: int = DEFAULT_GRAPH_DEPTH,
    ) -> GraphData:
        with self._locked():
            services = self._services_for(environment)
            relationships = self._relationships_for(environment)
            return build_neighborhood(services, relationships, center_id, depth)

    def validate(self, environment: str) -> ValidationResult:
        """Validate a fresh on-disk snapshot of *environment*, bypassing the cache."""
        with self._locked():
            services = loader.load_services(self._data_path, environment)
            relationships = loader.load_relationships(self._data_path, environment)
            result = validate_graph(services, relationships)
            logger.info(
                "Validated environment: errors=%d warnings=%d info=%d",
                result.error_count, result.warning_count, result.info_count,
                extra={"environment": environment},
            )
            return result

    # ------------------------------------------------------------------
    # Environments and data path
    # ------------------------------------------------------------------

    def list_environments(self) -> list[str]:
        """Non-hidden environment directories, dev/staging/prod first."""
        with self._locked():
            if not self._data_path.is_dir():
                return []
            try:
                names = [
                    entry.name
                    for entry in self._data_path.iterdir()
                    if entry.is_dir() and not entry.name.startswith(".")
                ]
            except OSError as exc:
                raise StorageError(f"IO error: {exc}") from exc
            return sorted(names, key=_environment_sort_key)

    def get_current_environment(self) -> str:
        with self._locked():
            return self._current_environment

    def switch_environment(self, environment: str) -> None:
        with self._locked():
            if not loader.environment_dir(self._data_path, environment).exists():
                raise EnvironmentNotFoundError(environment)
            self._current_environment = environment
            logger.info("Switched environment", extra={"environment": environment})

    def create_environment(self, environment: str) -> None:
        """Create ``<env>/services/`` and an empty relationships file."""
        with self._locked():
            env_path = loader.environment_dir(self._data_path, environment)
            if env_path.exists():
                raise EnvironmentExistsError(environment)
            try:
                (env_path / SERVICES_DIRNAME).mkdir(parents=True)
                (env_path / RELATIONSHIPS_FILENAME).write_text(
                    RelationshipsFile().model_dump_json(indent=2), encoding="utf-8"
                )
            except OSError as exc:
                raise StorageError(f"IO error: {exc}") from exc
            logger.info("Created environment", extra={"environment": environment})

    def get_data_path(self) -> Path:
        with self._locked():
            return self._data_path

    def set_data_path(self, path: str | Path) -> None:
        """Point the state at another storage root and drop every cached entry.

        Raises:
            InvalidPathError: If *path* does not exist or is not a directory.
        """
        new_path = Path(path)
        with self._locked():
            if not new_path.exists():
                raise InvalidPathError(str(path))
            if not new_path.is_dir():
                raise InvalidPathError(f"{path} is not a directory")
            self.cache.clear()
            self._data_path = new_path
            logger.info("Data path changed to %s", new_path)
