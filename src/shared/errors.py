"""Custom exception classes and FastAPI exception handlers."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str, status_code: int = 500) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class ValidationError(AppError):
    """Validation error (422)."""

    def __init__(self, detail: str = "Validation error") -> None:
        super().__init__(detail=detail, status_code=422)


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(detail=detail, status_code=404)


class ConflictError(AppError):
    """Conflict error (409)."""

    def __init__(self, detail: str = "Conflict") -> None:
        super().__init__(detail=detail, status_code=409)


class ServiceNotFoundError(NotFoundError):
    """Service not found (404)."""

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(detail=f"Service not found: {service_id}")


class RelationshipNotFoundError(NotFoundError):
    """Relationship not found (404)."""

    def __init__(self, relationship_id: str) -> None:
        self.relationship_id = relationship_id
        super().__init__(detail=f"Relationship not found: {relationship_id}")


class EnvironmentNotFoundError(NotFoundError):
    """Environment not found (404)."""

    def __init__(self, environment: str) -> None:
        self.environment = environment
        super().__init__(detail=f"Environment not found: {environment}")


class EnvironmentExistsError(ConflictError):
    """Environment already exists (409)."""

    def __init__(self, environment: str) -> None:
        self.environment = environment
        super().__init__(detail=f"Environment already exists: {environment}")


class DuplicateRelationshipError(ConflictError):
    """A relationship with the same source, target and type exists (409)."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(detail=f"Duplicate relationship: {source} -> {target}")


class InvalidPathError(ValidationError):
    """Invalid filesystem path or path component (422)."""

    def __init__(self, path: str) -> None:
        super().__init__(detail=f"Invalid path: {path}")


class StorageError(AppError):
    """I/O failure or malformed JSON in the data directory (500)."""

    def __init__(self, detail: str = "Storage error") -> None:
        super().__init__(detail=detail, status_code=500)


class StateLockError(AppError):
    """Shared graph state could not be acquired (503)."""

    def __init__(self, detail: str = "State lock error") -> None:
        super().__init__(detail=detail, status_code=503)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with a FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )
