from pydantic import Field

from sonarqube_mcp.http import HttpResponse
from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

INSTALLED_PATH = "/api/plugins/installed"
DOWNLOAD_PATH = "/api/plugins/download"


class InstalledPlugin(ApiModel):
    key: str | None = None
    name: str | None = None
    version: str | None = None
    filename: str | None = None
    hash: str | None = None
    sonar_lint_supported: bool = False


class InstalledPluginsResponse(ApiModel):
    plugins: list[InstalledPlugin] = Field(default_factory=list)


class PluginsApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def installed(self) -> InstalledPluginsResponse:
        with self._helper.get(INSTALLED_PATH) as response:
            return InstalledPluginsResponse.model_validate_json(response.body_as_string())

    def download(self, plugin_key: str) -> HttpResponse:
        """Start downloading a plugin jar. The caller checks the status and closes the response."""
        return self._helper.raw_get(UrlBuilder(DOWNLOAD_PATH).add_param("plugin", plugin_key).build())
