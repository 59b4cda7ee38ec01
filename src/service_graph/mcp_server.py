"""MCP server for the Service Graph backend.

Exposes neighborhood queries, search and validation as MCP tools over stdio
transport. Each tool delegates to a module-level :class:`GraphState`.

Environment variables (typically set via .mcp.json):
    DATA_PATH           -- Root directory holding one folder per environment.
    DEFAULT_ENVIRONMENT -- Environment used when a tool call omits one.

Usage:
    python -m src.service_graph.mcp_server
"""
from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from src.shared.config import ServiceGraphConfig
from src.shared.constants import DEFAULT_GRAPH_DEPTH, SERVICE_GRAPH_MCP_NAME
from src.shared.errors import AppError
from src.service_graph.state import GraphState

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger("service-graph.mcp")

# ---------------------------------------------------------------------------
# Module-level initialisation
# ---------------------------------------------------------------------------

config = ServiceGraphConfig()

graph_state = GraphState(
    config.data_path,
    current_environment=config.default_environment,
    lock_timeout=config.state_lock_timeout,
)

# ---------------------------------------------------------------------------
# MCP server
# ---------------------------------------------------------------------------

mcp = FastMCP(SERVICE_GRAPH_MCP_NAME)


def _resolve_environment(environment: str | None) -> str:
    return environment or graph_state.get_current_environment()


@mcp.tool()
def get_service_graph(
    center_service_id: str,
    depth: int = DEFAULT_GRAPH_DEPTH,
    environment: str | None = None,
) -> dict[str, Any]:
    """Return the services and relationships within *depth* hops of a service.

    Args:
        center_service_id: Id of the service at the center of the view.
        depth: Number of hops to expand (0 returns only the center).
        environment: Environment name; defaults to the current environment.

    Returns:
        ``centerService``, ``connectedServices`` and ``relationships``, or
        an error dict.
    """
    if depth < 0:
        return {"error": "depth must be >= 0"}
    try:
        env = _resolve_environment(environment)
        graph = graph_state.get_neighborhood(env, center_service_id, depth)
        return graph.model_dump(mode="json", by_alias=True)
    except AppError as exc:
        logger.warning("get_service_graph failed: %s", exc)
        return {"error": str(exc)}


@mcp.tool()
def validate_environment(environment: str | None = None) -> dict[str, Any]:
    """Check an environment for duplicate ids, orphaned relationships,
    unknown relationship types, isolated services and dependency cycles.

    Returns:
        ``issues`` plus ``errorCount``, ``warningCount`` and ``infoCount``,
        or an error dict if the environment could not be loaded.
    """
    try:
        env = _resolve_environment(environment)
        result = graph_state.validate(env)
        return result.model_dump(mode="json", by_alias=True)
    except AppError as exc:
        logger.warning("validate_environment failed: %s", exc)
        return {"error": str(exc)}


@mcp.tool()
def search_services(query: str, environment: str | None = None) -> dict[str, Any]:
    """Find services whose name, id, description, owner, team or tags
    contain *query* (case-insensitive)."""
    try:
        env = _resolve_environment(environment)
        services = graph_state.search_services(env, query)
        return {
            "services": [s.model_dump(mode="json", by_alias=True) for s in services],
        }
    except AppError as exc:
        logger.warning("search_services failed: %s", exc)
        return {"error": str(exc)}


@mcp.tool()
def get_relationships_for_service(
    service_id: str,
    environment: str | None = None,
) -> dict[str, Any]:
    """List relationships in which *service_id* is the source or the target."""
    try:
        env = _resolve_environment(environment)
        relationships = graph_state.get_relationships_for_service(env, service_id)
        return {
            "relationships": [
                r.model_dump(mode="json", by_alias=True) for r in relationships
            ],
        }
    except AppError as exc:
        logger.warning("get_relationships_for_service failed: %s", exc)
        return {"error": str(exc)}


@mcp.tool()
def list_environments() -> dict[str, Any]:
    """List the available environments and the current one."""
    try:
        return {
            "environments": graph_state.list_environments(),
            "current": graph_state.get_current_environment(),
        }
    except AppError as exc:
        logger.warning("list_environments failed: %s", exc)
        return {"error": str(exc)}


if __name__ == "__main__":
    mcp.run()
