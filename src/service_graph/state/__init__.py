"""Shared state of the service graph backend."""
from src.service_graph.state.graph_cache import GraphCache
from src.service_graph.state.graph_state import GraphState

__all__ = ["GraphCache", "GraphState"]
