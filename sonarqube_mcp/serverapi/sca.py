"""Software composition analysis: dependency risks of a project."""

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Paging
from sonarqube_mcp.serverapi.url import UrlBuilder

DEPENDENCY_RISKS_PATH = "/api/v2/sca/issues-releases"


class Release(ApiModel):
    key: str | None = None
    branch_uuid: str | None = None
    package_url: str | None = None
    package_manager: str | None = None
    package_name: str | None = None
    version: str | None = None
    license_expression: str | None = None
    known: bool | None = None
    known_package: bool | None = None
    newly_introduced: bool | None = None
    direct_summary: bool | None = None
    scope_summary: str | None = None
    production_scope_summary: bool | None = None
    dependency_file_paths: list[str] = Field(default_factory=list)


class Assignee(ApiModel):
    login: str | None = None
    name: str | None = None
    avatar: str | None = None
    active: bool | None = None


class IssueRelease(ApiModel):
    key: str | None = None
    severity: str | None = None
    original_severity: str | None = None
    manual_severity: str | None = None
    show_increased_severity_warning: bool | None = None
    release: Release | None = None
    type: str | None = None
    quality: str | None = None
    status: str | None = None
    created_at: str | None = None
    assignee: Assignee | None = None
    comment_count: int | None = None
    vulnerability_id: str | None = None
    cwe_ids: list[str] = Field(default_factory=list)
    cvss_score: str | None = None
    withdrawn: bool | None = None
    spdx_license_id: str | None = None
    transitions: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)


class Branch(ApiModel):
    uuid: str | None = None
    key: str | None = None
    is_pull_request: bool | None = None
    project_key: str | None = None
    project_name: str | None = None


class DependencyRisksResponse(ApiModel):
    issues_releases: list[IssueRelease] = Field(default_factory=list)
    branches: list[Branch] = Field(default_factory=list)
    count_without_filters: int | None = None
    page: Paging | None = None


class ScaApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def dependency_risks(
        self, project_key: str, branch_key: str | None = None, pull_request_key: str | None = None
    ) -> DependencyRisksResponse:
        path = (
            UrlBuilder(DEPENDENCY_RISKS_PATH)
            .add_param("projectKey", project_key)
            .add_param("branchKey", branch_key)
            .add_param("pullRequestKey", pull_request_key)
            .build()
        )
        with self._helper.get(path) as response:
            return DependencyRisksResponse.model_validate_json(response.body_as_string())
