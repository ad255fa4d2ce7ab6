"""Quality gate listing and the quality gate status of a project, branch or pull request."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.errors import LocalValidationError
from sonarqube_mcp.serverapi.qualitygates import ProjectStatusResponse, QualityGate, QualityGatesListResponse
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, render_bool


class ListQualityGatesTool:
    TOOL_NAME = "list_quality_gates"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = SchemaBuilder(self.TOOL_NAME, "List all quality gates in my SonarQube.").build()

    def execute(self, arguments: Arguments) -> Result:
        return Result.success(render_quality_gates(self._api.quality_gates.list()))


def _render_gate(gate: QualityGate) -> list[str]:
    title = gate.name or "Unnamed"
    if gate.is_default:
        title += " [Default]"
    if gate.is_built_in:
        title += " [Built-in]"
    if gate.id is not None:
        title += f" (ID: {gate.id})"
    lines = ["", title]
    if gate.conditions is not None:
        if gate.conditions:
            lines.append("Conditions:")
            lines.extend(f"- {c.metric} {c.op} {c.error}" for c in gate.conditions)
        else:
            lines.append("No conditions")
    if gate.cayc_status is not None:
        lines.append(f"Status: {gate.cayc_status}")
    if gate.has_standard_conditions is not None:
        lines.append(f"Standard Conditions: {render_bool(gate.has_standard_conditions)}")
    if gate.has_mqr_conditions is not None:
        lines.append(f"MQR Conditions: {render_bool(gate.has_mqr_conditions)}")
    if gate.is_ai_code_supported is not None:
        lines.append(f"AI Code Supported: {render_bool(gate.is_ai_code_supported)}")
    return lines


def render_quality_gates(response: QualityGatesListResponse) -> str:
    if not response.qualitygates:
        return "No quality gates were found."
    lines = ["Quality Gates:"]
    for gate in response.qualitygates:
        lines.extend(_render_gate(gate))
    return "\n".join(lines)


class ProjectStatusTool:
    TOOL_NAME = "get_project_quality_gate_status"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Get the Quality Gate Status for the project. "
                "Either 'analysisId', 'projectId' or 'projectKey' must be provided.",
            )
            .add_string_property(
                "analysisId", "The optional analysis ID to get the status for, for example 'AU-TpxcA-iU5OvuD2FL1'"
            )
            .add_string_property(
                "branch", "The optional branch key to get the status for, for example 'feature/my_branch'"
            )
            .add_string_property(
                "projectId",
                "The optional project ID to get the status for, for example 'AU-Tpxb--iU5OvuD2FLy'. "
                "Doesn't work with branches or pull requests.",
            )
            .add_string_property("projectKey", "The optional project key to get the status for, for example 'my_project'")
            .add_string_property("pullRequest", "The optional pull request ID to get the status for, for example '5461'")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        analysis_id = arguments.get_optional_string("analysisId")
        branch = arguments.get_optional_string("branch")
        project_id = arguments.get_optional_string("projectId")
        project_key = arguments.get_optional_string("projectKey")
        pull_request = arguments.get_optional_string("pullRequest")
        if analysis_id is None and project_id is None and project_key is None:
            raise LocalValidationError("Either 'analysisId', 'projectId' or 'projectKey' must be provided")
        if project_id is not None and (branch is not None or pull_request is not None):
            raise LocalValidationError("Project ID doesn't work with branches or pull requests", "projectId")
        response = self._api.quality_gates.project_status(
            analysis_id=analysis_id,
            branch_key=branch,
            project_id=project_id,
            project_key=project_key,
            pull_request=pull_request,
        )
        return Result.success(render_project_status(response))


def render_project_status(response: ProjectStatusResponse) -> str:
    status = response.project_status
    if status is None:
        return "No Quality Gate status was found."
    lines = [f"The Quality Gate status is {status.status}. Here are the following conditions:"]
    lines.extend(
        f"{c.metric_key} is {c.status}, the threshold is {c.error_threshold} and the actual value is {c.actual_value}"
        for c in status.conditions
    )
    return "\n".join(lines)
