"""Issue search and issue status transitions."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.errors import LocalValidationError
from sonarqube_mcp.serverapi.issues import Issue, IssueSearchResponse, Transition
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, pagination_banner

SEVERITIES = ["INFO", "MINOR", "MAJOR", "CRITICAL", "BLOCKER"]


class SearchIssuesTool:
    TOOL_NAME = "search_sonar_issues_in_projects"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "Search for Sonar issues in my organization's projects.")
            .add_array_property("projects", "string", "An optional list of Sonar projects to look in")
            .add_string_property("pullRequestId", "The identifier of the Pull Request to look in")
            .add_enum_property("severities", SEVERITIES, "An optional list of severities to filter by")
            .add_number_property("p", "An optional page number. Defaults to 1.")
            .add_number_property("ps", "An optional page size. Must be greater than 0 and less than or equal to 500.")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.issues.search(
            projects=arguments.get_optional_string_list("projects"),
            pull_request_id=arguments.get_optional_string("pullRequestId"),
            severities=arguments.get_optional_string_list("severities"),
            page=arguments.get_optional_integer("p"),
            page_size=arguments.get_optional_integer("ps"),
        )
        return Result.success(render_issues(response))


def render_issue(issue: Issue) -> str:
    line = (
        f"Issue key: {issue.key} | Rule: {issue.rule} | Project: {issue.project}"
        f" | Component: {issue.component} | Severity: {issue.severity} | Status: {issue.status}"
        f" | Message: {issue.message} | Attribute: {issue.clean_code_attribute}"
        f" | Category: {issue.clean_code_attribute_category} | Author: {issue.author}"
    )
    if issue.text_range is not None:
        line += f" | Start Line: {issue.text_range.start_line} | End Line: {issue.text_range.end_line}"
    if issue.creation_date is not None:
        line += f" | Created: {issue.creation_date}"
    return line


def render_issues(response: IssueSearchResponse) -> str:
    if not response.issues:
        return "No issues were found."
    lines = [f"Found {len(response.issues)} issues."]
    banner = pagination_banner(response.paging, "issues")
    if banner:
        lines.append(banner)
    lines.extend(render_issue(issue) for issue in response.issues)
    return "\n".join(lines)


class ChangeIssueStatusTool:
    TOOL_NAME = "change_sonar_issue_status"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Change the status of a Sonar issue to \"accept\", \"falsepositive\" or to \"reopen\" an issue.",
            )
            .add_required_string_property("key", "The key of the issue which status should be changed")
            .add_required_enum_property("status", [t.value for t in Transition], "The new status of the issue")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        key = arguments.get_string_or_throw("key")
        statuses = arguments.get_string_list_or_throw("status")
        if not statuses:
            raise LocalValidationError("Missing required argument: status", "status")
        transition = Transition.from_status(statuses[0])
        if transition is None:
            raise LocalValidationError(f"Status is unknown: {statuses[0]}", "status")
        self._api.issues.do_transition(key, transition)
        return Result.success("The issue status was successfully changed.")
