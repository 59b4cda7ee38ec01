"""JSON file storage for services and relationships.

Directory layout under the data root::

    <root>/
        <environment>/
            services/
                <service-id>.json
            relationships.json

Every failure to read, write or parse a file is raised as
:class:`~src.shared.errors.StorageError` chained to the original exception.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from src.shared.constants import (
    RELATIONSHIPS_FILENAME,
    SERVICE_FILE_SUFFIX,
    SERVICES_DIRNAME,
)
from src.shared.errors import InvalidPathError, ServiceNotFoundError, StorageError
from src.shared.models.service_graph import Relationship, RelationshipsFile, Service

logger = logging.getLogger("service-graph.storage")


def _is_path_like(name: str) -> bool:
    return not name or "/" in name or "\\" in name or name in (".", "..")


def environment_dir(data_path: Path, environment: str) -> Path:
    """Directory of *environment* under the data root.

    Raises:
        InvalidPathError: If the name is empty or would leave the data root.
    """
    if _is_path_like(environment):
        raise InvalidPathError(environment)
    return Path(data_path) / environment


def _services_dir(data_path: Path, environment: str) -> Path:
    return environment_dir(data_path, environment) / SERVICES_DIRNAME


def _service_path(data_path: Path, environment: str, service_id: str) -> Path:
    if _is_path_like(service_id):
        raise InvalidPathError(service_id)
    return _services_dir(data_path, environment) / f"{service_id}{SERVICE_FILE_SUFFIX}"


def _relationships_path(data_path: Path, environment: str) -> Path:
    return environment_dir(data_path, environment) / RELATIONSHIPS_FILENAME


def _read_service(path: Path) -> Service:
    try:
        return Service.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        logger.warning("Failed to read service file %s: %s", path, exc)
        raise StorageError(f"IO error: {exc}") from exc
    except PydanticValidationError as exc:
        logger.warning("Malformed service file %s", path)
        raise StorageError(f"JSON parsing error in {path.name}: {exc}") from exc


def load_services(data_path: Path, environment: str) -> list[Service]:
    """Load every service of *environment*, in filename order.

    Returns an empty list if the environment has no services directory.
    """
    services_dir = _services_dir(data_path, environment)
    if not services_dir.is_dir():
        return []

    try:
        paths = sorted(
            p for p in services_dir.iterdir()
            if p.suffix == SERVICE_FILE_SUFFIX and p.is_file()
        )
    except OSError as exc:
        raise StorageError(f"IO error: {exc}") from exc

    return [_read_service(path) for path in paths]


def load_service(data_path: Path, environment: str, service_id: str) -> Service:
    """Load a single service by id.

    Raises:
        ServiceNotFoundError: If the service file does not exist.
    """
    path = _service_path(data_path, environment, service_id)
    if not path.exists():
        raise ServiceNotFoundError(service_id)
    return _read_service(path)


def save_service(data_path: Path, environment: str, service: Service) -> None:
    """Write *service* to its own file, creating directories as needed."""
    path = _service_path(data_path, environment, service.id)
    content = service.model_dump_json(by_alias=True, indent=2)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"IO error: {exc}") from exc


def delete_service_file(data_path: Path, environment: str, service_id: str) -> None:
    """Remove a service file.

    Raises:
        ServiceNotFoundError: If the service file does not exist.
    """
    path = _service_path(data_path, environment, service_id)
    if not path.exists():
        raise ServiceNotFoundError(service_id)
    try:
        path.unlink()
    except OSError as exc:
        raise StorageError(f"IO error: {exc}") from exc


def load_relationships(data_path: Path, environment: str) -> list[Relationship]:
    """Load the relationship list of *environment*.

    Accepts the ``{"relationships": [...]}`` document as well as a bare JSON
    list. Returns an empty list if the file does not exist.
    """
    path = _relationships_path(data_path, environment)
    if not path.exists():
        return []

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(raw, list):
            raw = {"relationships": raw}
        return RelationshipsFile.model_validate(raw).relationships
    except OSError as exc:
        logger.warning("Failed to read relationships file %s: %s", path, exc)
        raise StorageError(f"IO error: {exc}") from exc
    except (json.JSONDecodeError, PydanticValidationError) as exc:
        logger.warning("Malformed relationships file %s", path)
        raise StorageError(f"JSON parsing error in {path.name}: {exc}") from exc


def save_relationships(
    data_path: Path,
    environment: str,
    relationships: list[Relationship],
) -> None:
    """Overwrite the relationships file of *environment* with *relationships*."""
    path = _relationships_path(data_path, environment)
    document = RelationshipsFile(relationships=list(relationships))
    content = document.model_dump_json(by_alias=True, indent=2)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"IO error: {exc}") from exc
