"""Tests for sonarqube_mcp/cli.py"""

import json

import pytest
import requests
from click.testing import CliRunner
from loguru import logger

from sonarqube_mcp.cli import cli
from sonarqube_mcp.config import TEMPLATE

BASE = "https://sonar.example.com"


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("SONARQUBE_URL", "SONARQUBE_TOKEN", "SONARQUBE_ORG", "SONARQUBE_IDE_PORT", "SONARQUBE_CLOUD_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "storage"))
    monkeypatch.setenv("SONARQUBE_URL", BASE)
    monkeypatch.setenv("SONARQUBE_TOKEN", "squ_test")
    # Keep loguru on the real stderr so command output stays parseable.
    monkeypatch.setattr("sonarqube_mcp.log.configure_logging", lambda log_file, level: logger)
    return tmp_path


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def test_init_writes_template(tmp_path):
    out = tmp_path / "sonarqube-mcp.yaml"
    result = CliRunner().invoke(cli, ["init", "--output", str(out)])
    assert result.exit_code == 0
    assert "Template written" in result.output
    assert out.read_text(encoding="utf-8") == TEMPLATE


def test_init_refuses_overwrite(tmp_path):
    out = tmp_path / "sonarqube-mcp.yaml"
    out.write_text("token: secret", encoding="utf-8")
    result = CliRunner().invoke(cli, ["init", "--output", str(out)])
    assert result.exit_code == 1
    assert out.read_text(encoding="utf-8") == "token: secret"


# ---------------------------------------------------------------------------
# tools / check
# ---------------------------------------------------------------------------

def test_tools_lists_schemas(env, requests_mock):
    requests_mock.get("http://localhost:64120/sonarlint/api/status", exc=requests.exceptions.ConnectionError)
    requests_mock.get(f"{BASE}/api/system/status", json={"status": "UP", "version": "2025.1.0"})
    result = CliRunner().invoke(cli, ["tools"])
    assert result.exit_code == 0, result.output
    tools = {tool["name"]: tool for tool in json.loads(result.stdout)}
    assert "get_system_health" in tools
    assert tools["ping_system"]["requiresAuthentication"] is False
    assert tools["show_rule"]["inputSchema"]["required"] == ["key"]


def test_check_rejects_old_server(env, requests_mock):
    requests_mock.get(f"{BASE}/api/system/status", json={"status": "UP", "version": "9.9.0"})
    result = CliRunner().invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "Version: 9.9.0" in result.output
    assert "Unsupported platform" in result.output


def test_invalid_config_exits(env, monkeypatch):
    monkeypatch.setenv("SONARQUBE_IDE_PORT", "not-a-port")
    result = CliRunner().invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output
