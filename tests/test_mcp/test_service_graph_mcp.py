"""Integration tests for the Service Graph MCP server.

Tests the MCP tool functions exposed by ``src.service_graph.mcp_server`` by
patching the module-level GraphState with one over a temporary data
directory.
"""
from __future__ import annotations

import pytest
from mcp.server.fastmcp import FastMCP


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def graph_mcp(seeded_state, data_path, monkeypatch):
    """Import the MCP server with its state pointed at the seeded data."""
    monkeypatch.setenv("DATA_PATH", str(data_path))

    import src.service_graph.mcp_server as mod

    monkeypatch.setattr(mod, "graph_state", seeded_state)
    return mod


# ---------------------------------------------------------------------------
# MCP instance sanity checks
# ---------------------------------------------------------------------------


class TestServiceGraphMCPInstance:
    def test_mcp_is_fastmcp_instance(self, graph_mcp):
        assert isinstance(graph_mcp.mcp, FastMCP)

    def test_mcp_has_registered_tools(self, graph_mcp):
        tools = graph_mcp.mcp._tool_manager._tools
        assert "get_service_graph" in tools
        assert "validate_environment" in tools
        assert "search_services" in tools
        assert "get_relationships_for_service" in tools
        assert "list_environments" in tools

    def test_mcp_name(self, graph_mcp):
        assert graph_mcp.mcp.name == "ServiceGraph"


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class TestGetServiceGraph:
    def test_defaults_to_current_environment(self, graph_mcp):
        result = graph_mcp.get_service_graph("api-gateway")

        assert "error" not in result
        assert result["centerService"]["id"] == "api-gateway"
        assert {s["id"] for s in result["connectedServices"]} == {
            "user-service", "auth-service",
        }

    def test_depth_two(self, graph_mcp):
        result = graph_mcp.get_service_graph("api-gateway", depth=2, environment="dev")
        assert len(result["connectedServices"]) == 3

    def test_unknown_service_returns_error(self, graph_mcp):
        assert graph_mcp.get_service_graph("ghost") == {
            "error": "Service not found: ghost",
        }

    def test_negative_depth_returns_error(self, graph_mcp):
        assert "error" in graph_mcp.get_service_graph("api-gateway", depth=-1)


class TestValidateEnvironment:
    def test_returns_counts(self, graph_mcp):
        result = graph_mcp.validate_environment()

        assert result["issues"] == []
        assert result["errorCount"] == 0
        assert result["warningCount"] == 0
        assert result["infoCount"] == 0

    def test_malformed_data_returns_error(self, graph_mcp, data_path):
        (data_path / "dev" / "relationships.json").write_text("[")

        result = graph_mcp.validate_environment("dev")

        assert "error" in result


class TestSearchAndRelationships:
    def test_search_services(self, graph_mcp):
        result = graph_mcp.search_services("platform")
        assert [s["id"] for s in result["services"]] == ["api-gateway"]

    def test_relationships_for_service(self, graph_mcp):
        result = graph_mcp.get_relationships_for_service("auth-service")
        assert [r["id"] for r in result["relationships"]] == ["r3"]

    def test_list_environments(self, graph_mcp):
        assert graph_mcp.list_environments() == {"environments": ["dev"], "current": "dev"}
