"""Relationship router for the Service Graph backend."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Query, Request, Response

from src.shared.errors import ValidationError
from src.shared.models.service_graph import Relationship

router = APIRouter(tags=["relationships"])


@router.get("/api/environments/{environment}/relationships")
async def list_relationships(
    request: Request,
    environment: str,
    service_id: str | None = Query(
        default=None, description="Only relationships touching this service"
    ),
) -> list[Relationship]:
    state = request.app.state.graph_state
    if service_id is not None:
        return await asyncio.to_thread(
            state.get_relationships_for_service, environment, service_id
        )
    return await asyncio.to_thread(state.get_relationships, environment)


@router.put("/api/environments/{environment}/relationships/{relationship_id}")
async def save_relationship(
    request: Request,
    environment: str,
    relationship_id: str,
    body: Relationship,
) -> Relationship:
    """Create or replace a relationship.

    A new id that repeats an existing source/target/type triple is rejected
    with 409.
    """
    if body.id != relationship_id:
        raise ValidationError(
            f"Relationship id '{body.id}' does not match path id '{relationship_id}'"
        )
    state = request.app.state.graph_state
    await asyncio.to_thread(state.save_relationship, environment, body)
    return body


@router.delete(
    "/api/environments/{environment}/relationships/{relationship_id}",
    status_code=204,
)
async def delete_relationship(
    request: Request, environment: str, relationship_id: str
) -> Response:
    state = request.app.state.graph_state
    await asyncio.to_thread(state.delete_relationship, environment, relationship_id)
    return Response(status_code=204)


@router.delete("/api/environments/{environment}/services/{service_id}/relationships")
async def delete_relationships_for_service(
    request: Request, environment: str, service_id: str
) -> dict[str, int]:
    state = request.app.state.graph_state
    deleted = await asyncio.to_thread(
        state.delete_relationships_for_service, environment, service_id
    )
    return {"deleted": deleted}
