"""Startup gate on the connected server version. SonarQube Cloud is exempt."""

from loguru import logger as default_logger

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.errors import SonarQubeError, UnsupportedPlatformError
from sonarqube_mcp.serverapi.system import Version

MINIMUM_SUPPORTED_VERSION = Version("10.9")
UNSUPPORTED_MESSAGE = (
    "SonarQube server version is not supported, minimal version is SQS 2025.1 or SQCB 25.1"
)


class ServerVersionChecker:
    def __init__(self, server_api: ServerApi, logger=None) -> None:
        self._api = server_api
        self._logger = logger or default_logger
        self._version: Version | None = None

    def server_version(self) -> Version:
        if self._version is None:
            self._version = self._api.system.version()
        return self._version

    def check_version_is_supported(self) -> None:
        """Raise ``UnsupportedPlatformError`` when the server is too old."""
        if self._api.is_sonarqube_cloud:
            return
        version = self.server_version()
        if not version.satisfies_min_requirement(MINIMUM_SUPPORTED_VERSION):
            raise UnsupportedPlatformError(UNSUPPORTED_MESSAGE)
        self._logger.info("Connected to SonarQube Server {}", version)

    def is_server_version_at_least(self, minimum: str) -> bool:
        if self._api.is_sonarqube_cloud:
            return False
        return self.server_version().satisfies_min_requirement(Version(minimum))

    def is_sca_enabled(self) -> bool:
        """Advisory: a failed settings lookup counts as disabled."""
        try:
            return self._api.settings.is_sca_enabled()
        except SonarQubeError as exc:
            self._logger.warning("Unable to read the dependency risks setting: {}", exc)
            return False
