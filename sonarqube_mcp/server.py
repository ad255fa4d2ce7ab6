"""MCP server: assembles the tool list for the configured deployment and serves it over stdio.

Usage:
    server = SonarQubeMcpServer(config, logger=configure_logging(...))
    server.start()            # version gate, plugin sync, tool registration
    asyncio.run(server.serve_stdio())
    server.shutdown()
"""

import asyncio
import threading
from typing import Any

from loguru import logger as default_logger
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from sonarqube_mcp import __version__
from sonarqube_mcp.bridge import SonarQubeIdeBridgeClient, bridge_url
from sonarqube_mcp.config import Config
from sonarqube_mcp.http import HttpClientProvider
from sonarqube_mcp.plugins import PluginsSynchronizer
from sonarqube_mcp.serverapi import EndpointParams, ServerApi, ServerApiHelper
from sonarqube_mcp.serverapi.errors import SonarQubeError
from sonarqube_mcp.tools.analysis import AnalyzeListFilesTool, ToggleAutomaticAnalysisTool
from sonarqube_mcp.tools.core import Result, Tool, ToolExecutor
from sonarqube_mcp.tools.dependency_risks import SearchDependencyRisksTool
from sonarqube_mcp.tools.enterprises import ListEnterprisesTool
from sonarqube_mcp.tools.issues import ChangeIssueStatusTool, SearchIssuesTool
from sonarqube_mcp.tools.languages import ListLanguagesTool
from sonarqube_mcp.tools.measures import GetComponentMeasuresTool
from sonarqube_mcp.tools.metrics import SearchMetricsTool
from sonarqube_mcp.tools.portfolios import ListPortfoliosTool
from sonarqube_mcp.tools.projects import SearchMyProjectsTool
from sonarqube_mcp.tools.qualitygates import ListQualityGatesTool, ProjectStatusTool
from sonarqube_mcp.tools.rules import ListRuleRepositoriesTool, ShowRuleTool
from sonarqube_mcp.tools.sources import GetRawSourceTool, GetScmInfoTool
from sonarqube_mcp.tools.system import (
    SystemHealthTool,
    SystemInfoTool,
    SystemLogsTool,
    SystemPingTool,
    SystemStatusTool,
)
from sonarqube_mcp.tools.webhooks import CreateWebhookTool, ListWebhooksTool
from sonarqube_mcp.version_checker import ServerVersionChecker

SERVER_NAME = "sonarqube-mcp-server"
SCA_MINIMUM_VERSION = "2025.4"


class SonarQubeMcpServer:
    def __init__(self, config: Config, logger=None, provider: HttpClientProvider | None = None) -> None:
        self.config = config
        self._logger = logger or default_logger
        self._provider = provider or HttpClientProvider(
            config.user_agent,
            timeout=config.http_timeout,
            ca_bundle=config.ca_bundle,
            logger=self._logger.bind(component="http"),
        )
        endpoint = config.endpoint_params()
        self.server_api = ServerApi(
            ServerApiHelper(endpoint, self._provider.get_http_client(endpoint.token), config.http_timeout)
        )
        self.bridge = SonarQubeIdeBridgeClient(
            ServerApiHelper(
                EndpointParams(bridge_url(config.ide_port)),
                self._provider.get_http_client(None),
                config.http_timeout,
            ),
            logger=self._logger.bind(component="bridge"),
        )
        self.version_checker = ServerVersionChecker(self.server_api, self._logger.bind(component="version"))
        self.executor = ToolExecutor(self.server_api.is_authenticated, self._logger.bind(component="tools"))
        self.tools: list[Tool] = []
        self._shutdown_lock = threading.Lock()
        self._closed = False

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Run the version gate, then plugin sync, then register tools.

        Raises:
            UnsupportedPlatformError: if the server is older than the minimum.
        """
        self.version_checker.check_version_is_supported()
        self.synchronize_plugins()
        self.tools = self.assemble_tools()
        self._logger.info("Registered {} tools", len(self.tools))

    def synchronize_plugins(self) -> None:
        if not self.server_api.is_authenticated:
            self._logger.info("No token configured, skipping plugin synchronization")
            return
        synchronizer = PluginsSynchronizer(
            self.server_api, self.config.plugins_path, self._logger.bind(component="plugins")
        )
        try:
            synchronizer.synchronize()
        except SonarQubeError as exc:
            self._logger.error("Plugin synchronization failed: {}", exc)

    def assemble_tools(self) -> list[Tool]:
        api = self.server_api
        tools: list[Tool] = []

        if self.bridge.is_available():
            self._logger.info("SonarQube for IDE detected on port {}", self.config.ide_port)
            tools += [
                AnalyzeListFilesTool(self.bridge, self._logger.bind(component="tools")),
                ToggleAutomaticAnalysisTool(self.bridge),
            ]

        if api.is_sonarqube_cloud:
            tools.append(ListEnterprisesTool(api))
        else:
            tools += [
                SystemHealthTool(api),
                SystemInfoTool(api),
                SystemLogsTool(api),
                SystemPingTool(api),
                SystemStatusTool(api),
            ]
            if self._dependency_risks_available():
                tools.append(SearchDependencyRisksTool(api))
            else:
                self._logger.info("Dependency risks are not available on this server, tool not registered")

        tools += [
            ChangeIssueStatusTool(api),
            SearchMyProjectsTool(api),
            SearchIssuesTool(api),
            ProjectStatusTool(api),
            ShowRuleTool(api),
            ListRuleRepositoriesTool(api),
            ListQualityGatesTool(api),
            ListLanguagesTool(api),
            GetComponentMeasuresTool(api),
            SearchMetricsTool(api),
            GetScmInfoTool(api),
            GetRawSourceTool(api),
            CreateWebhookTool(api),
            ListWebhooksTool(api),
            ListPortfoliosTool(api),
        ]
        return tools

    def _dependency_risks_available(self) -> bool:
        try:
            recent_enough = self.version_checker.is_server_version_at_least(SCA_MINIMUM_VERSION)
        except SonarQubeError as exc:
            self._logger.warning("Unable to read the server version: {}", exc)
            return False
        return recent_enough and self.version_checker.is_sca_enabled()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def find_tool(self, name: str) -> Tool | None:
        for tool in self.tools:
            if tool.definition.name == name:
                return tool
        return None

    def call_tool(self, name: str, arguments: dict[str, Any] | None) -> Result:
        tool = self.find_tool(name)
        if tool is None:
            return Result.failure(f"Unknown tool: {name}")
        return self.executor.execute(tool, arguments)

    def build_app(self) -> Server:
        app = Server(SERVER_NAME, version=__version__)

        @app.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [tool.definition.to_mcp_tool() for tool in self.tools]

        # Arguments are validated by the executor so failures render as tool results.
        @app.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
            result = await asyncio.to_thread(self.call_tool, name, arguments)
            return result.to_call_tool_result()

        return app

    async def serve_stdio(self) -> None:
        app = self.build_app()
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        with self._shutdown_lock:
            if self._closed:
                return
            self._closed = True
        self._logger.info("Shutting down")
        self._provider.shutdown()
