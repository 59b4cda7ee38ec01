"""Service Graph FastAPI application."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI

from src.shared.config import ServiceGraphConfig
from src.shared.constants import SERVICE_GRAPH_SERVICE_NAME, VERSION
from src.shared.errors import register_exception_handlers
from src.shared.logging import TraceIDMiddleware, setup_logging
from src.service_graph.state import GraphState

config = ServiceGraphConfig()
logger = setup_logging(SERVICE_GRAPH_SERVICE_NAME, config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - bootstrap the data directory and graph state."""
    app.state.start_time = time.time()

    data_path = Path(config.data_path)
    data_path.mkdir(parents=True, exist_ok=True)
    app.state.graph_state = GraphState(
        data_path,
        current_environment=config.default_environment,
        lock_timeout=config.state_lock_timeout,
    )

    logger.info(
        "Service started: name=%s version=%s data_path=%s environment=%s",
        SERVICE_GRAPH_SERVICE_NAME, VERSION, data_path, config.default_environment,
    )
    yield

    logger.info("Service stopped: name=%s", SERVICE_GRAPH_SERVICE_NAME)


app = FastAPI(
    title="Service Graph",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(TraceIDMiddleware)
register_exception_handlers(app)

# Register all routers
from src.service_graph.routers import (  # noqa: E402
    environments_router,
    graph_router,
    health_router,
    relationships_router,
    services_router,
    validation_router,
)

app.include_router(health_router)
app.include_router(environments_router)
app.include_router(services_router)
app.include_router(relationships_router)
app.include_router(graph_router)
app.include_router(validation_router)
