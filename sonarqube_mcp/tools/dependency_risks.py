"""search_dependency_risks: software composition analysis findings of a project."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.sca import DependencyRisksResponse, IssueRelease
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, pagination_banner


class SearchDependencyRisksTool:
    TOOL_NAME = "search_dependency_risks"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Search for software composition analysis issues (dependency risks) of a SonarQube project, "
                "paired with releases that appear in the analyzed project, application, or portfolio.",
            )
            .add_required_string_property("projectKey", "The project key")
            .add_string_property("branchKey", "The branch key")
            .add_string_property("pullRequestKey", "The pull request key")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.sca.dependency_risks(
            arguments.get_string_or_throw("projectKey"),
            branch_key=arguments.get_optional_string("branchKey"),
            pull_request_key=arguments.get_optional_string("pullRequestKey"),
        )
        return Result.success(render_dependency_risks(response))


def _render_issue_release(item: IssueRelease) -> str:
    line = (
        f"Issue key: {item.key} | Severity: {item.severity} | Type: {item.type}"
        f" | Quality: {item.quality} | Status: {item.status}"
    )
    if item.vulnerability_id is not None:
        line += f" | Vulnerability ID: {item.vulnerability_id}"
    if item.cvss_score is not None:
        line += f" | CVSS Score: {item.cvss_score}"
    release = item.release
    if release is not None:
        line += (
            f" | Package: {release.package_name} | Version: {release.version}"
            f" | Package Manager: {release.package_manager}"
        )
        if release.newly_introduced:
            line += " | Newly Introduced: Yes"
        if release.direct_summary:
            line += " | Direct Dependency: Yes"
        if release.production_scope_summary:
            line += " | Production Scope: Yes"
    if item.assignee is not None:
        line += f" | Assignee: {item.assignee.name}"
    return line + f" | Created: {item.created_at}"


def render_dependency_risks(response: DependencyRisksResponse) -> str:
    if not response.issues_releases:
        return "No dependency risks were found."
    lines = [f"Found {len(response.issues_releases)} dependency risks."]
    banner = pagination_banner(response.page, "items")
    if banner:
        lines.append(banner)
    lines.extend(_render_issue_release(item) for item in response.issues_releases)
    return "\n".join(lines)
