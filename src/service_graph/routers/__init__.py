"""Service Graph routers."""
from src.service_graph.routers.environments import router as environments_router
from src.service_graph.routers.graph import router as graph_router
from src.service_graph.routers.health import router as health_router
from src.service_graph.routers.relationships import router as relationships_router
from src.service_graph.routers.services import router as services_router
from src.service_graph.routers.validation import router as validation_router

__all__ = [
    "environments_router",
    "graph_router",
    "health_router",
    "relationships_router",
    "services_router",
    "validation_router",
]
