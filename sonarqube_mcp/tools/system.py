"""Administration tools, only registered against SonarQube Server."""

import json
from typing import Any

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.errors import LocalValidationError
from sonarqube_mcp.serverapi.system import HealthResponse, InfoResponse, StatusResponse
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder

LOG_NAMES = ["access", "app", "ce", "deprecation", "es", "web"]

STATUS_DESCRIPTIONS = {
    "STARTING": "SonarQube Server Web Server is up and serving some Web Services but initialization is still ongoing",
    "UP": "SonarQube Server instance is up and running",
    "DOWN": "SonarQube Server instance is up but not running because migration has failed or some other reason",
    "RESTARTING": "SonarQube Server instance is still up but a restart has been requested",
    "DB_MIGRATION_NEEDED": "Database migration is required",
    "DB_MIGRATION_RUNNING": "DB migration is running",
}


def _underlined(title: str, char: str = "-") -> list[str]:
    return [title, char * len(title)]


# ---------------------------------------------------------------------------
# get_system_health
# ---------------------------------------------------------------------------

class SystemHealthTool:
    TOOL_NAME = "get_system_health"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = SchemaBuilder(
            self.TOOL_NAME,
            "Get the health status of SonarQube Server instance. Returns GREEN (fully operational), "
            "YELLOW (usable but needs attention), or RED (not operational).",
        ).build()

    def execute(self, arguments: Arguments) -> Result:
        return Result.success(render_health(self._api.system.health()))


def render_health(response: HealthResponse) -> str:
    lines = [f"SonarQube Server Health Status: {response.health}"]
    if response.causes:
        lines.extend(["", "Causes:"])
        lines.extend(f"- {cause.message}" for cause in response.causes)
    if response.nodes:
        lines.extend(["", "Nodes:"])
        for node in response.nodes:
            lines.extend([
                "",
                f"{node.name} ({node.type}) - {node.health}",
                f"  Host: {node.host}:{node.port}",
                f"  Started: {node.started_at}",
            ])
            if node.causes:
                lines.append("  Causes:")
                lines.extend(f"  - {cause.message}" for cause in node.causes)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# get_system_info
# ---------------------------------------------------------------------------

class SystemInfoTool:
    TOOL_NAME = "get_system_info"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = SchemaBuilder(
            self.TOOL_NAME,
            "Get detailed information about system configuration including JVM state, database, "
            "search indexes, and settings. Requires 'Administer' permissions.",
        ).build()

    def execute(self, arguments: Arguments) -> Result:
        return Result.success(render_info(self._api.system.info()))


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def render_info(response: InfoResponse) -> str:
    lines = _underlined("SonarQube Server System Information", "=")
    lines.append("")
    if response.health is not None:
        lines.extend([f"Health: {response.health}", ""])
    sections = [
        ("System", response.system),
        ("Database", response.database),
        ("Bundled Plugins", response.bundled),
        ("Installed Plugins", response.plugins),
        ("Web JVM State", response.web_jvm_state),
        ("Web Database Connection", response.web_database_connection),
        ("Web Logging", response.web_logging),
        ("Compute Engine Tasks", response.compute_engine_tasks),
        ("Compute Engine JVM State", response.compute_engine_jvm_state),
        ("Compute Engine Database Connection", response.compute_engine_database_connection),
        ("Compute Engine Logging", response.compute_engine_logging),
        ("Search State", response.search_state),
        ("Search Indexes", response.search_indexes),
        ("ALMs", response.alms),
        ("Server Push Connections", response.server_push_connections),
    ]
    for title, section in sections:
        if not section:
            continue
        lines.extend(_underlined(title))
        lines.extend(f"- {key}: {_render_value(value)}" for key, value in section.items())
        lines.append("")
    if response.settings:
        # Settings are too large to dump.
        lines.extend(_underlined("Settings"))
        lines.append(f"Total settings: {len(response.settings)}")
        lines.append("(Use SonarQube Server Web UI to view detailed settings)")
    return "\n".join(lines).strip()


# ---------------------------------------------------------------------------
# get_system_logs
# ---------------------------------------------------------------------------

class SystemLogsTool:
    TOOL_NAME = "get_system_logs"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME, "Get system logs in plain-text format. Requires system administration permission."
            )
            .add_string_property(
                "name", "Name of the logs to get. Possible values: access, app, ce, deprecation, es, web. Default: app"
            )
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        name = arguments.get_optional_string("name")
        if name is not None and name not in LOG_NAMES:
            raise LocalValidationError(f"Invalid log name. Possible values: {', '.join(LOG_NAMES)}", "name")
        logs = self._api.system.logs(name)
        title = f"SonarQube Server {(name or 'app').upper()} Logs"
        header = "\n".join(_underlined(title, "=")) + "\n\n"
        if not logs or not logs.strip():
            return Result.success(header + "No logs available.")
        return Result.success(header + logs)


# ---------------------------------------------------------------------------
# ping_system / get_system_status (anonymous)
# ---------------------------------------------------------------------------

class SystemPingTool:
    TOOL_NAME = "ping_system"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Ping the SonarQube Server system to check if it's alive. Returns 'pong' as plain text.",
            )
            .anonymous()
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        return Result.success(self._api.system.ping().strip())


class SystemStatusTool:
    TOOL_NAME = "get_system_status"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Get state information about SonarQube Server. Returns status (STARTING, UP, DOWN, RESTARTING, "
                "DB_MIGRATION_NEEDED, DB_MIGRATION_RUNNING), version, and id.",
            )
            .anonymous()
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        return Result.success(render_status(self._api.system.status()))


def render_status(response: StatusResponse) -> str:
    lines = _underlined("SonarQube Server System Status", "=")
    lines.append("")
    if response.status is not None:
        lines.append(f"Status: {response.status}")
        lines.append(f"Description: {STATUS_DESCRIPTIONS.get(response.status, 'Unknown status')}")
        lines.append("")
    if response.id is not None:
        lines.append(f"ID: {response.id}")
    if response.version is not None:
        lines.append(f"Version: {response.version}")
    return "\n".join(lines).strip()
