"""Tools delegating to the SonarQube for IDE bridge. Both run without a token."""

from loguru import logger as default_logger

from sonarqube_mcp.bridge import AnalysisResponse, Finding, SonarQubeIdeBridgeClient
from sonarqube_mcp.serverapi.errors import SonarQubeError
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, render_bool

BRIDGE_UNAVAILABLE_MESSAGE = "SonarQube for IDE is not available. Please ensure SonarQube for IDE is running."
MAX_FINDINGS_DISPLAYED = 100


class AnalyzeListFilesTool:
    TOOL_NAME = "analyze_list_files"

    def __init__(self, bridge: SonarQubeIdeBridgeClient, logger=None) -> None:
        self._bridge = bridge
        self._logger = logger or default_logger
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Analyze files in the current working directory using SonarQube for IDE. "
                "This tool connects to a running SonarQube for IDE instance to perform code quality analysis "
                "on a list of files.",
            )
            .add_array_property("list_files", "string", "List of absolute file paths to analyze")
            .anonymous()
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        if not self._bridge.is_available():
            return Result.failure(BRIDGE_UNAVAILABLE_MESSAGE)
        files = arguments.get_optional_string_list("list_files")
        if not files:
            return Result.failure(
                "No files provided to analyze. Please provide a list of file paths using the 'list_files' property."
            )
        try:
            response = self._bridge.request_analyze_list_files(files)
        except SonarQubeError as exc:
            self._logger.error("Analysis request to SonarQube for IDE failed: {}", exc)
            return Result.failure("Failed to request analysis of the list of files. Check logs for details.")
        return Result.success(render_analysis(response))


def _render_finding(index: int, finding: Finding) -> str:
    line = f"  {index}. [{finding.severity}] {finding.message} (file: {finding.file_path}"
    text_range = finding.text_range
    if text_range is not None and text_range.start_line is not None:
        line += f" [Lines: {text_range.start_line} to {text_range.end_line}]"
    return line + ")"


def render_analysis(response: AnalysisResponse) -> str:
    text = "SonarQube for IDE Analysis Completed!\n\nAnalysis Summary:\n"
    findings = response.findings
    if not findings:
        text += "No findings found! Your code looks good.\n\n"
    else:
        text += f"Issues Found ({len(findings)}):\n"
        shown = findings[:MAX_FINDINGS_DISPLAYED]
        text += "".join(_render_finding(i, f) + "\n" for i, f in enumerate(shown, start=1))
        if len(findings) > MAX_FINDINGS_DISPLAYED:
            text += f"  ... and {len(findings) - MAX_FINDINGS_DISPLAYED} more issues\n"
        text += "\n"
    text += (
        "Next Steps:\n"
        "Check SonarQube for IDE - issues are now displayed in your extension\n"
        "Ask the agent to fix the issues."
    )
    return text


class ToggleAutomaticAnalysisTool:
    TOOL_NAME = "toggle_automatic_analysis"

    def __init__(self, bridge: SonarQubeIdeBridgeClient) -> None:
        self._bridge = bridge
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Enable or disable SonarQube for IDE automatic analysis. When enabled, SonarQube for IDE will "
                "automatically analyze files as they are modified in the working directory. When disabled, "
                "automatic analysis is turned off.",
            )
            .add_required_boolean_property("enabled", "Enable or disable the automatic analysis")
            .anonymous()
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        if not self._bridge.is_available():
            return Result.failure(BRIDGE_UNAVAILABLE_MESSAGE)
        enabled = arguments.get_boolean_or_throw("enabled")
        try:
            outcome = self._bridge.request_automatic_analysis_enablement(enabled)
        except SonarQubeError as exc:
            return Result.failure(f"Failed to change automatic analysis: {exc}")
        if outcome.is_successful:
            return Result.success(f"Successfully toggled automatic analysis to {render_bool(enabled)}.")
        return Result.failure(
            outcome.error_message or "Failed to toggle automatic analysis. Check logs for details."
        )
