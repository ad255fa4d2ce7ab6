"""Client for the local SonarQube for IDE bridge.

The IDE extension listens on ``http://localhost:<port>`` and exposes a small
JSON API to analyze files and toggle automatic analysis. Calls are
unauthenticated.
"""

import json
from dataclasses import dataclass

from loguru import logger as default_logger
from pydantic import Field

from sonarqube_mcp.serverapi.errors import SonarQubeError
from sonarqube_mcp.serverapi.helper import ServerApiHelper, try_parse_error_message
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

STATUS_PATH = "/sonarlint/api/status"
ANALYZE_LIST_FILES_PATH = "/sonarlint/api/analysis/files"
AUTOMATIC_ANALYSIS_PATH = "/sonarlint/api/analysis/automatic/config"

JSON_CONTENT_TYPE = "application/json"


class FindingRange(ApiModel):
    start_line: int | None = None
    end_line: int | None = None


class Finding(ApiModel):
    rule_key: str | None = None
    message: str | None = None
    severity: str | None = None
    file_path: str | None = None
    text_range: FindingRange | None = None


class AnalysisResponse(ApiModel):
    findings: list[Finding] = Field(default_factory=list)


@dataclass(frozen=True)
class ToggleResult:
    is_successful: bool
    error_message: str | None = None


def bridge_url(port: int) -> str:
    return f"http://localhost:{port}"


class SonarQubeIdeBridgeClient:
    def __init__(self, helper: ServerApiHelper, logger=None) -> None:
        self._helper = helper
        self._logger = logger or default_logger

    def is_available(self) -> bool:
        """Probe the bridge. Any failure means the IDE is not reachable."""
        try:
            with self._helper.raw_get_anonymous(STATUS_PATH) as response:
                return response.is_successful
        except SonarQubeError as exc:
            self._logger.info("SonarQube for IDE is not available: {}", exc)
            return False

    def request_analyze_list_files(self, file_paths: list[str]) -> AnalysisResponse:
        body = json.dumps({"fileAbsolutePaths": file_paths})
        with self._helper.post(ANALYZE_LIST_FILES_PATH, JSON_CONTENT_TYPE, body) as response:
            return AnalysisResponse.model_validate_json(response.body_as_string())

    def request_automatic_analysis_enablement(self, enabled: bool) -> ToggleResult:
        path = UrlBuilder(AUTOMATIC_ANALYSIS_PATH).add_param("enabled", enabled).build()
        with self._helper.raw_post(path, JSON_CONTENT_TYPE, "") as response:
            if response.is_successful:
                return ToggleResult(True)
            message = try_parse_error_message(response)
            self._logger.warning("Automatic analysis toggle refused with status {}", response.code)
            return ToggleResult(False, message)
