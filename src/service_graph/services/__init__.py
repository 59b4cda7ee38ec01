"""Graph algorithms for the service graph backend."""

from src.service_graph.services.graph_builder import build_neighborhood
from src.service_graph.services.validator import validate_graph

__all__ = [
    "build_neighborhood",
    "validate_graph",
]
