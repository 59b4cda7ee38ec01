"""Health check router for the Service Graph backend."""
from __future__ import annotations

import asyncio
import time

from fastapi import APIRouter, Request

from src.shared.constants import SERVICE_GRAPH_SERVICE_NAME, VERSION
from src.shared.errors import AppError
from src.shared.models.common import HealthStatus

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health(request: Request) -> HealthStatus:
    """Health check endpoint returning storage availability."""

    def _check() -> HealthStatus:
        state = request.app.state.graph_state
        start_time = request.app.state.start_time

        details: dict[str, object] = {}
        try:
            data_path = state.get_data_path()
            storage = "available" if data_path.is_dir() else "unavailable"
            details["environments"] = len(state.list_environments())
            details["current_environment"] = state.get_current_environment()
        except (AppError, OSError):
            storage = "unavailable"

        return HealthStatus(
            status="healthy" if storage == "available" else "degraded",
            service_name=SERVICE_GRAPH_SERVICE_NAME,
            version=VERSION,
            storage=storage,
            uptime_seconds=time.time() - start_time,
            details=details,
        )

    return await asyncio.to_thread(_check)
