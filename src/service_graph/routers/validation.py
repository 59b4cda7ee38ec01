"""Environment validation router for the Service Graph backend."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request

from src.shared.models.service_graph import ValidationResult

router = APIRouter(tags=["validation"])


@router.get("/api/environments/{environment}/validation")
async def validate_environment(request: Request, environment: str) -> ValidationResult:
    """Validate the on-disk data of an environment.

    Structural problems are reported as issues with a 200 response; only a
    failure to load the environment is returned as an error.
    """
    state = request.app.state.graph_state
    return await asyncio.to_thread(state.validate, environment)
