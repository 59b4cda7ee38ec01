"""Service CRUD and search router for the Service Graph backend."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Query, Request, Response

from src.shared.errors import ValidationError
from src.shared.models.service_graph import Service

router = APIRouter(tags=["services"])


@router.get("/api/environments/{environment}/services")
async def list_services(
    request: Request,
    environment: str,
    q: str | None = Query(default=None, description="Case-insensitive search text"),
) -> list[Service]:
    """List services of an environment, optionally filtered by a search query."""
    state = request.app.state.graph_state
    if q:
        return await asyncio.to_thread(state.search_services, environment, q)
    services = await asyncio.to_thread(state.get_services, environment)
    return list(services.values())


@router.get("/api/environments/{environment}/services/{service_id}")
async def get_service(request: Request, environment: str, service_id: str) -> Service:
    state = request.app.state.graph_state
    return await asyncio.to_thread(state.get_service, environment, service_id)


@router.put("/api/environments/{environment}/services/{service_id}")
async def save_service(
    request: Request,
    environment: str,
    service_id: str,
    body: Service,
) -> Service:
    """Create or overwrite a service."""
    if body.id != service_id:
        raise ValidationError(
            f"Service id '{body.id}' does not match path id '{service_id}'"
        )
    state = request.app.state.graph_state
    await asyncio.to_thread(state.save_service, environment, body)
    return body


@router.delete("/api/environments/{environment}/services/{service_id}", status_code=204)
async def delete_service(request: Request, environment: str, service_id: str) -> Response:
    state = request.app.state.graph_state
    await asyncio.to_thread(state.delete_service, environment, service_id)
    return Response(status_code=204)
