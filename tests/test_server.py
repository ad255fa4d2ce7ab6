"""Tests for sonarqube_mcp/server.py"""

import anyio
import pytest
import requests
from mcp.shared.memory import create_connected_server_and_client_session

from sonarqube_mcp.config import Config, load
from sonarqube_mcp.server import SonarQubeMcpServer
from sonarqube_mcp.tools.core import Result

BASE = "https://sonar.example.com"
CLOUD = "https://sonarcloud.io"
BRIDGE_STATUS = "http://localhost:64120/sonarlint/api/status"

COMMON_TOOLS = {
    "change_sonar_issue_status",
    "search_my_sonarqube_projects",
    "search_sonar_issues_in_projects",
    "get_project_quality_gate_status",
    "show_rule",
    "list_rule_repositories",
    "list_quality_gates",
    "list_languages",
    "get_component_measures",
    "search_metrics",
    "get_scm_info",
    "get_raw_source",
    "create_webhook",
    "list_webhooks",
    "list_portfolios",
}
SYSTEM_TOOLS = {"get_system_health", "get_system_info", "get_system_logs", "ping_system", "get_system_status"}


@pytest.fixture
def make_server(tmp_path):
    servers = []

    def _make(url: str = BASE, token: str | None = "squ_test", organization: str | None = None):
        config = Config(storage_path=str(tmp_path), url=url, organization=organization, token=token)
        server = SonarQubeMcpServer(config)
        servers.append(server)
        return server

    yield _make
    for server in servers:
        server.shutdown()


def names(tools) -> set[str]:
    return {tool.definition.name for tool in tools}


def bridge_down(requests_mock):
    requests_mock.get(BRIDGE_STATUS, exc=requests.exceptions.ConnectionError)


def server_at(requests_mock, version: str, sca_enabled: bool = False):
    requests_mock.get(f"{BASE}/api/system/status", json={"status": "UP", "version": version})
    requests_mock.get(
        f"{BASE}/api/settings/values",
        json={"settings": [{"key": "sonar.sca.enabled", "value": "true" if sca_enabled else "false"}]},
    )


# ---------------------------------------------------------------------------
# Tool assembly
# ---------------------------------------------------------------------------

def test_cloud_tools(make_server, requests_mock):
    bridge_down(requests_mock)
    server = make_server(CLOUD, organization="my-org")
    assert names(server.assemble_tools()) == COMMON_TOOLS | {"list_enterprises"}


def test_server_tools_without_dependency_risks(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.1.0")
    tools = names(make_server().assemble_tools())
    assert tools == COMMON_TOOLS | SYSTEM_TOOLS


def test_dependency_risks_need_recent_server_and_setting(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.4.0", sca_enabled=True)
    tools = names(make_server().assemble_tools())
    assert "search_dependency_risks" in tools
    assert len(tools) == 21


def test_dependency_risks_disabled_setting(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.4.0", sca_enabled=False)
    assert "search_dependency_risks" not in names(make_server().assemble_tools())


def test_bridge_tools_when_ide_is_running(make_server, requests_mock):
    requests_mock.get(BRIDGE_STATUS, json={"ideName": "VS Code"})
    server = make_server(CLOUD, organization="my-org")
    tools = names(server.assemble_tools())
    assert {"analyze_list_files", "toggle_automatic_analysis"} <= tools
    assert len(tools) == 18


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------

def test_start_skips_plugin_sync_without_token(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.1.0")
    server = make_server(token=None)
    server.start()
    assert not any("/api/plugins/" in request.url for request in requests_mock.request_history)
    assert server.find_tool("get_system_status") is not None


def test_start_survives_plugin_sync_failure(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.1.0")
    requests_mock.get(f"{BASE}/api/plugins/installed", status_code=500)
    server = make_server()
    server.start()
    assert server.tools


# ---------------------------------------------------------------------------
# Dispatch and shutdown
# ---------------------------------------------------------------------------

def test_unknown_tool(make_server, requests_mock):
    bridge_down(requests_mock)
    server = make_server(CLOUD, organization="my-org")
    server.tools = server.assemble_tools()
    assert server.call_tool("nope", {}) == Result.failure("Unknown tool: nope")


def test_authenticated_tool_without_token(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.1.0")
    server = make_server(token=None)
    server.tools = server.assemble_tools()
    calls_before = requests_mock.call_count
    result = server.call_tool("list_languages", {})
    assert result == Result.failure("Not connected to SonarQube, please provide valid credentials")
    assert requests_mock.call_count == calls_before


def test_call_tool_dispatches(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.1.0")
    requests_mock.get(f"{BASE}/api/system/ping", text="pong")
    server = make_server()
    server.tools = server.assemble_tools()
    assert server.call_tool("ping_system", {}) == Result.success("pong")


def test_shutdown_is_idempotent(make_server):
    server = make_server()
    server.shutdown()
    server.shutdown()


# ---------------------------------------------------------------------------
# SonarQube Cloud without credentials
# ---------------------------------------------------------------------------

def test_cloud_without_token_keeps_cloud_tools(make_server, requests_mock):
    bridge_down(requests_mock)
    server = make_server(CLOUD, token=None)
    assert server.server_api.is_sonarqube_cloud
    assert names(server.assemble_tools()) == COMMON_TOOLS | {"list_enterprises"}


def test_cloud_without_token_skips_version_gate(make_server, requests_mock):
    bridge_down(requests_mock)
    requests_mock.get(f"{CLOUD}/api/system/status", json={"status": "UP", "version": "8.0.0.46314"})
    server = make_server(CLOUD, token=None)
    server.start()
    assert not any("/api/system/status" in request.url for request in requests_mock.request_history)
    assert server.find_tool("list_enterprises") is not None


def test_loaded_cloud_config_reaches_the_server(tmp_path, monkeypatch, requests_mock):
    monkeypatch.chdir(tmp_path)
    bridge_down(requests_mock)
    server = SonarQubeMcpServer(load(environ={"STORAGE_PATH": str(tmp_path)}))
    try:
        assert server.server_api.is_sonarqube_cloud
        assert "get_system_health" not in names(server.assemble_tools())
    finally:
        server.shutdown()


# ---------------------------------------------------------------------------
# MCP session
# ---------------------------------------------------------------------------

def test_mcp_session_lists_and_calls_tools(make_server, requests_mock):
    bridge_down(requests_mock)
    server_at(requests_mock, "2025.1.0")
    requests_mock.get(f"{BASE}/api/system/ping", text="pong")
    server = make_server(token=None)
    server.tools = server.assemble_tools()

    async def session_roundtrip():
        async with create_connected_server_and_client_session(server.build_app()) as session:
            listed = await session.list_tools()
            gated = await session.call_tool("search_sonar_issues_in_projects", {})
            ping = await session.call_tool("ping_system", {})
            return listed, gated, ping

    listed, gated, ping = anyio.run(session_roundtrip)

    assert {tool.name for tool in listed.tools} == names(server.tools)
    assert gated.isError
    assert gated.content[0].text == "Not connected to SonarQube, please provide valid credentials"
    assert not ping.isError
    assert ping.content[0].text == "pong"
