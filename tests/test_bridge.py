"""Tests for sonarqube_mcp/bridge.py and the tools built on it"""

import pytest
import requests

from sonarqube_mcp.bridge import SonarQubeIdeBridgeClient, bridge_url
from sonarqube_mcp.serverapi import EndpointParams, ServerApiHelper
from sonarqube_mcp.tools.analysis import AnalyzeListFilesTool, ToggleAutomaticAnalysisTool
from sonarqube_mcp.tools.core import Result, ToolExecutor

BRIDGE = "http://localhost:64120"


@pytest.fixture
def bridge(provider) -> SonarQubeIdeBridgeClient:
    helper = ServerApiHelper(EndpointParams(bridge_url(64120)), provider.get_http_client(None), timeout=5)
    return SonarQubeIdeBridgeClient(helper)


def run(tool, arguments=None) -> Result:
    # Bridge tools are anonymous, so they run even without a token.
    return ToolExecutor(is_authenticated=False).execute(tool, arguments or {})


# ---------------------------------------------------------------------------
# Availability probe
# ---------------------------------------------------------------------------

def test_available_when_status_answers(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={"ideName": "VS Code"})
    assert bridge.is_available()


def test_unavailable_on_connection_error(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", exc=requests.exceptions.ConnectionError)
    assert not bridge.is_available()


def test_unavailable_on_error_status(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", status_code=500)
    assert not bridge.is_available()


# ---------------------------------------------------------------------------
# analyze_list_files
# ---------------------------------------------------------------------------

def test_analyze_reports_unavailable_bridge(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", exc=requests.exceptions.ConnectionError)
    result = run(AnalyzeListFilesTool(bridge), {"list_files": ["/src/A.java"]})
    assert result == Result.failure(
        "SonarQube for IDE is not available. Please ensure SonarQube for IDE is running."
    )


def test_analyze_requires_files(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    result = run(AnalyzeListFilesTool(bridge), {"list_files": []})
    assert result.is_error
    assert "No files provided to analyze" in result.text


def test_analyze_renders_findings(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    analysis = requests_mock.post(
        f"{BRIDGE}/sonarlint/api/analysis/files",
        json={
            "findings": [
                {
                    "ruleKey": "java:S1135",
                    "message": "Complete the task",
                    "severity": "INFO",
                    "filePath": "/src/A.java",
                    "textRange": {"startLine": 3, "endLine": 3},
                },
                {"ruleKey": "java:S100", "message": "Rename", "severity": "MINOR", "filePath": "/src/B.java"},
            ]
        },
    )
    result = run(AnalyzeListFilesTool(bridge), {"list_files": ["/src/A.java", "/src/B.java"]})
    assert analysis.last_request.json() == {"fileAbsolutePaths": ["/src/A.java", "/src/B.java"]}
    assert analysis.last_request.headers["Content-Type"] == "application/json"
    assert result.text == (
        "SonarQube for IDE Analysis Completed!\n\n"
        "Analysis Summary:\n"
        "Issues Found (2):\n"
        "  1. [INFO] Complete the task (file: /src/A.java [Lines: 3 to 3])\n"
        "  2. [MINOR] Rename (file: /src/B.java)\n"
        "\n"
        "Next Steps:\n"
        "Check SonarQube for IDE - issues are now displayed in your extension\n"
        "Ask the agent to fix the issues."
    )


def test_analyze_caps_displayed_findings(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    findings = [{"message": f"m{i}", "severity": "MAJOR", "filePath": "/f"} for i in range(105)]
    requests_mock.post(f"{BRIDGE}/sonarlint/api/analysis/files", json={"findings": findings})
    text = run(AnalyzeListFilesTool(bridge), {"list_files": ["/f"]}).text
    assert "  100. [MAJOR] m99 (file: /f)" in text
    assert "m100" not in text
    assert "  ... and 5 more issues" in text


def test_analyze_without_findings(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    requests_mock.post(f"{BRIDGE}/sonarlint/api/analysis/files", json={"findings": []})
    assert "No findings found! Your code looks good." in run(AnalyzeListFilesTool(bridge), {"list_files": ["/f"]}).text


def test_analyze_failure_points_to_logs(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    requests_mock.post(f"{BRIDGE}/sonarlint/api/analysis/files", status_code=500)
    result = run(AnalyzeListFilesTool(bridge), {"list_files": ["/f"]})
    assert result == Result.failure("Failed to request analysis of the list of files. Check logs for details.")


# ---------------------------------------------------------------------------
# toggle_automatic_analysis
# ---------------------------------------------------------------------------

def test_toggle_success(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    toggle = requests_mock.post(f"{BRIDGE}/sonarlint/api/analysis/automatic/config", status_code=200)
    result = run(ToggleAutomaticAnalysisTool(bridge), {"enabled": False})
    assert result == Result.success("Successfully toggled automatic analysis to false.")
    assert toggle.last_request.url == f"{BRIDGE}/sonarlint/api/analysis/automatic/config?enabled=false"


def test_toggle_reports_ide_message(bridge, requests_mock):
    requests_mock.get(f"{BRIDGE}/sonarlint/api/status", json={})
    requests_mock.post(
        f"{BRIDGE}/sonarlint/api/analysis/automatic/config", status_code=400, json={"message": "No folder open"}
    )
    assert run(ToggleAutomaticAnalysisTool(bridge), {"enabled": True}) == Result.failure("No folder open")


def test_toggle_requires_enabled(bridge, requests_mock):
    result = run(ToggleAutomaticAnalysisTool(bridge), {})
    assert result == Result.failure("Invalid tool arguments: Missing required argument: enabled")
    assert requests_mock.call_count == 0
