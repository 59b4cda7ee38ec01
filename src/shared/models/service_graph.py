"""Service graph Pydantic v2 data models.

All models serialize with camelCase keys (``serviceType``, ``affectedIds``,
``centerService``) to stay compatible with the on-disk JSON files, and accept
either camelCase or snake_case on input.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

_CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "from_attributes": True,
}


class ServiceType(str, Enum):
    """Well-known service categories. Any other string is kept as a custom tag."""
    API = "api"
    DATABASE = "database"
    CACHE = "cache"
    QUEUE = "queue"
    GATEWAY = "gateway"
    FRONTEND = "frontend"
    BACKEND = "backend"
    EXTERNAL = "external"


class ServiceStatus(str, Enum):
    """Operational status of a service."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"
    DEPRECATED = "deprecated"


class RelationshipType(str, Enum):
    """Canonical relationship types. Any other string is kept as a custom type."""
    DEPENDS_ON = "depends_on"
    COMMUNICATES_WITH = "communicates_with"
    AUTHENTICATES_VIA = "authenticates_via"
    READS_FROM = "reads_from"
    WRITES_TO = "writes_to"
    PUBLISHES = "publishes"
    SUBSCRIBES = "subscribes"


class IssueSeverity(str, Enum):
    """How critical a validation issue is."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueType(str, Enum):
    """Category of a validation issue."""
    ORPHANED_RELATIONSHIP = "orphaned_relationship"
    DUPLICATE_SERVICE_ID = "duplicate_service_id"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_RELATIONSHIP_TYPE = "invalid_relationship_type"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    UNREACHABLE_SERVICE = "unreachable_service"


class Service(BaseModel):
    """A service node in an environment's dependency graph.

    ``id`` and ``name`` are required keys but may be empty strings; empty
    values are reported by environment validation rather than rejected here.
    """
    id: str
    name: str
    service_type: ServiceType | str = Field(
        default=ServiceType.BACKEND, union_mode="left_to_right"
    )
    status: ServiceStatus = ServiceStatus.UNKNOWN
    description: str | None = None
    version: str | None = None
    owner: str | None = None
    team: str | None = None
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = _CAMEL_CONFIG

    def matches_search(self, query: str) -> bool:
        """Case-insensitive substring match over name, id, description,
        owner, team and tags."""
        needle = query.lower()
        candidates = [self.name, self.id, self.description, self.owner, self.team]
        if any(value is not None and needle in value.lower() for value in candidates):
            return True
        return any(needle in tag.lower() for tag in self.tags)


class Relationship(BaseModel):
    """A directed edge ``source -> target`` between two services."""
    id: str
    source: str
    target: str
    relationship_type: RelationshipType | str = Field(
        default=RelationshipType.DEPENDS_ON, union_mode="left_to_right"
    )
    description: str | None = None
    metadata: dict[str, Any] | None = None

    model_config = _CAMEL_CONFIG


class RelationshipsFile(BaseModel):
    """Document stored in ``<env>/relationships.json``."""
    relationships: list[Relationship] = Field(default_factory=list)

    model_config = _CAMEL_CONFIG


class GraphData(BaseModel):
    """Neighborhood of a center service, ready for visualization."""
    center_service: Service
    connected_services: list[Service] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    model_config = _CAMEL_CONFIG


class ValidationIssue(BaseModel):
    """A single data-integrity finding."""
    severity: IssueSeverity
    issue_type: IssueType
    message: str
    affected_ids: list[str] = Field(default_factory=list)
    suggestion: str | None = None

    model_config = _CAMEL_CONFIG


class ValidationResult(BaseModel):
    """All issues found in an environment, with per-severity counts."""
    issues: list[ValidationIssue] = Field(default_factory=list)

    model_config = _CAMEL_CONFIG

    @computed_field(alias="errorCount")  # type: ignore[prop-decorator]
    @property
    def error_count(self) -> int:
        return self._count(IssueSeverity.ERROR)

    @computed_field(alias="warningCount")  # type: ignore[prop-decorator]
    @property
    def warning_count(self) -> int:
        return self._count(IssueSeverity.WARNING)

    @computed_field(alias="infoCount")  # type: ignore[prop-decorator]
    @property
    def info_count(self) -> int:
        return self._count(IssueSeverity.INFO)

    def _count(self, severity: IssueSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)


class EnvironmentRequest(BaseModel):
    """Request naming an environment to create or switch to."""
    name: str = Field(..., min_length=1, pattern=r"^[^/\\.][^/\\]*$")

    model_config = _CAMEL_CONFIG


class DataPathRequest(BaseModel):
    """Request to move the storage root to another directory."""
    path: str = Field(..., min_length=1)

    model_config = _CAMEL_CONFIG
