"""System endpoints: health, info, logs, ping and status.

``ping`` and ``status`` are anonymous so they work before any credential is
checked, which makes them suitable for connectivity probes.
"""

from typing import Any

from pydantic import Field

from sonarqube_mcp.serverapi.errors import SonarQubeError
from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

HEALTH_PATH = "/api/system/health"
INFO_PATH = "/api/system/info"
LOGS_PATH = "/api/system/logs"
PING_PATH = "/api/system/ping"
STATUS_PATH = "/api/system/status"


class Version:
    """Dotted version number, compared numerically. Qualifiers after '-' are ignored."""

    def __init__(self, version: str) -> None:
        self.name = version.strip()
        numeric = self.name.split("-", 1)[0]
        try:
            self.numbers = tuple(int(part) for part in numeric.split("."))
        except ValueError as exc:
            raise ValueError(f"Invalid version: '{version}'") from exc

    def satisfies_min_requirement(self, minimum: "Version") -> bool:
        length = max(len(self.numbers), len(minimum.numbers))
        mine = self.numbers + (0,) * (length - len(self.numbers))
        other = minimum.numbers + (0,) * (length - len(minimum.numbers))
        return mine >= other

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Version({self.name!r})"


# ---------------------------------------------------------------------------
# Response records
# ---------------------------------------------------------------------------

class Cause(ApiModel):
    message: str | None = None


class Node(ApiModel):
    name: str | None = None
    type: str | None = None
    host: str | None = None
    port: int | None = None
    started_at: str | None = None
    health: str | None = None
    causes: list[Cause] = Field(default_factory=list)


class HealthResponse(ApiModel):
    health: str | None = None
    causes: list[Cause] = Field(default_factory=list)
    nodes: list[Node] = Field(default_factory=list)


class InfoResponse(ApiModel):
    """/api/system/info, keyed by human-readable section names."""

    health: str | None = Field(default=None, alias="Health")
    health_causes: list[str] = Field(default_factory=list, alias="Health Causes")
    system: dict[str, Any] | None = Field(default=None, alias="System")
    database: dict[str, Any] | None = Field(default=None, alias="Database")
    bundled: dict[str, Any] | None = Field(default=None, alias="Bundled")
    plugins: dict[str, Any] | None = Field(default=None, alias="Plugins")
    web_jvm_state: dict[str, Any] | None = Field(default=None, alias="Web JVM State")
    web_database_connection: dict[str, Any] | None = Field(default=None, alias="Web Database Connection")
    web_logging: dict[str, Any] | None = Field(default=None, alias="Web Logging")
    compute_engine_tasks: dict[str, Any] | None = Field(default=None, alias="Compute Engine Tasks")
    compute_engine_jvm_state: dict[str, Any] | None = Field(default=None, alias="Compute Engine JVM State")
    compute_engine_database_connection: dict[str, Any] | None = Field(
        default=None, alias="Compute Engine Database Connection"
    )
    compute_engine_logging: dict[str, Any] | None = Field(default=None, alias="Compute Engine Logging")
    search_state: dict[str, Any] | None = Field(default=None, alias="Search State")
    search_indexes: dict[str, Any] | None = Field(default=None, alias="Search Indexes")
    alms: dict[str, Any] | None = Field(default=None, alias="ALMs")
    server_push_connections: dict[str, Any] | None = Field(default=None, alias="Server Push Connections")
    settings: dict[str, Any] | None = Field(default=None, alias="Settings")


class StatusResponse(ApiModel):
    id: str | None = None
    version: str | None = None
    status: str | None = None


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class SystemApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def health(self) -> HealthResponse:
        with self._helper.get(HEALTH_PATH) as response:
            return HealthResponse.model_validate_json(response.body_as_string())

    def info(self) -> InfoResponse:
        with self._helper.get(INFO_PATH) as response:
            return InfoResponse.model_validate_json(response.body_as_string())

    def logs(self, name: str | None = None) -> str:
        path = UrlBuilder(LOGS_PATH).add_param("name", name).build()
        with self._helper.get(path) as response:
            return response.body_as_string()

    def ping(self) -> str:
        with self._helper.get_anonymous(PING_PATH) as response:
            return response.body_as_string()

    def status(self) -> StatusResponse:
        with self._helper.get_anonymous(STATUS_PATH) as response:
            return StatusResponse.model_validate_json(response.body_as_string())

    def version(self) -> Version:
        status = self.status()
        if not status.version:
            raise SonarQubeError("SonarQube did not report its version")
        return Version(status.version)
