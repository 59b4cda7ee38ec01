"""Environment and data-path router for the Service Graph backend."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request

from src.shared.models.service_graph import DataPathRequest, EnvironmentRequest

router = APIRouter(tags=["environments"])


@router.get("/api/environments")
async def list_environments(request: Request) -> list[str]:
    """List environments, dev/staging/prod first."""
    state = request.app.state.graph_state
    return await asyncio.to_thread(state.list_environments)


@router.post("/api/environments", status_code=201)
async def create_environment(request: Request, body: EnvironmentRequest) -> dict[str, str]:
    state = request.app.state.graph_state
    await asyncio.to_thread(state.create_environment, body.name)
    return {"name": body.name}


@router.get("/api/environments/current")
async def get_current_environment(request: Request) -> dict[str, str]:
    state = request.app.state.graph_state
    name = await asyncio.to_thread(state.get_current_environment)
    return {"name": name}


@router.put("/api/environments/current")
async def switch_environment(request: Request, body: EnvironmentRequest) -> dict[str, str]:
    state = request.app.state.graph_state
    await asyncio.to_thread(state.switch_environment, body.name)
    return {"name": body.name}


@router.get("/api/data-path")
async def get_data_path(request: Request) -> dict[str, str]:
    state = request.app.state.graph_state
    path = await asyncio.to_thread(state.get_data_path)
    return {"path": str(path)}


@router.put("/api/data-path")
async def set_data_path(request: Request, body: DataPathRequest) -> dict[str, str]:
    """Move the storage root; every cached environment is dropped."""
    state = request.app.state.graph_state
    await asyncio.to_thread(state.set_data_path, body.path)
    return {"path": body.path}
