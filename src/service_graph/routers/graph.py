"""Neighborhood graph router for the Service Graph backend."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Query, Request

from src.shared.constants import DEFAULT_GRAPH_DEPTH
from src.shared.models.service_graph import GraphData

router = APIRouter(tags=["graph"])


@router.get("/api/environments/{environment}/graph/{center_id}")
async def get_service_graph(
    request: Request,
    environment: str,
    center_id: str,
    depth: int = Query(default=DEFAULT_GRAPH_DEPTH, ge=0, description="Hops to expand"),
) -> GraphData:
    """Return the services and relationships within *depth* hops of a service."""
    state = request.app.state.graph_state
    return await asyncio.to_thread(
        state.get_neighborhood, environment, center_id, depth
    )
