"""Quality gates: /api/qualitygates/list and /api/qualitygates/project_status."""

from pydantic import AliasChoices, Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

LIST_PATH = "/api/qualitygates/list"
PROJECT_STATUS_PATH = "/api/qualitygates/project_status"


class GateCondition(ApiModel):
    id: str | None = None
    metric: str | None = None
    op: str | None = None
    error: str | None = None


class QualityGate(ApiModel):
    name: str | None = None
    is_default: bool = False
    is_built_in: bool = False
    # SonarQube Server only
    id: str | None = None
    conditions: list[GateCondition] | None = None
    # SonarQube Cloud only
    cayc_status: str | None = None
    has_standard_conditions: bool | None = None
    has_mqr_conditions: bool | None = Field(default=None, alias="hasMQRConditions")
    is_ai_code_supported: bool | None = None


class QualityGatesListResponse(ApiModel):
    qualitygates: list[QualityGate] = Field(default_factory=list)
    default_id: str | None = Field(default=None, validation_alias=AliasChoices("default_id", "default"))


class StatusCondition(ApiModel):
    status: str | None = None
    metric_key: str | None = None
    comparator: str | None = None
    period_index: int | None = None
    error_threshold: str | None = None
    actual_value: str | None = None


class ProjectStatus(ApiModel):
    status: str | None = None
    ignored_conditions: bool = False
    conditions: list[StatusCondition] = Field(default_factory=list)


class ProjectStatusResponse(ApiModel):
    project_status: ProjectStatus | None = None


class QualityGatesApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def list(self) -> QualityGatesListResponse:
        path = UrlBuilder(LIST_PATH).add_param("organization", self._helper.organization).build()
        with self._helper.get(path) as response:
            return QualityGatesListResponse.model_validate_json(response.body_as_string())

    def project_status(
        self,
        analysis_id: str | None = None,
        branch_key: str | None = None,
        project_id: str | None = None,
        project_key: str | None = None,
        pull_request: str | None = None,
    ) -> ProjectStatusResponse:
        path = (
            UrlBuilder(PROJECT_STATUS_PATH)
            .add_param("analysisId", analysis_id)
            .add_param("branchKey", branch_key)
            .add_param("projectId", project_id)
            .add_param("projectKey", project_key)
            .add_param("pullRequest", pull_request)
            .build()
        )
        with self._helper.get(path) as response:
            return ProjectStatusResponse.model_validate_json(response.body_as_string())
