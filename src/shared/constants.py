"""Shared constants used across the service graph packages."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Port numbers
SERVICE_GRAPH_PORT: int = 8001
INTERNAL_PORT: int = 8000

# Service names
SERVICE_GRAPH_SERVICE_NAME: str = "service-graph"
SERVICE_GRAPH_MCP_NAME: str = "ServiceGraph"

# On-disk layout
SERVICES_DIRNAME: str = "services"
RELATIONSHIPS_FILENAME: str = "relationships.json"
SERVICE_FILE_SUFFIX: str = ".json"

# Environments
DEFAULT_ENVIRONMENT: str = "dev"

# Sort rank of well-known environment names; anything else ranks last.
ENVIRONMENT_ORDER: dict[str, int] = {
    "dev": 0,
    "development": 0,
    "staging": 1,
    "stage": 1,
    "prod": 2,
    "production": 2,
}
UNRANKED_ENVIRONMENT_ORDER: int = 3

# Neighborhood traversal
DEFAULT_GRAPH_DEPTH: int = 1
