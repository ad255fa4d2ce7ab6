"""Configuration loading and validation.

Usage:
    config = load()                          # sonarqube-mcp.yaml if present, then env
    endpoint = config.endpoint_params()      # base URL, organization, token
    generate_template("sonarqube-mcp.yaml")  # writes example file to disk
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from sonarqube_mcp import __version__
from sonarqube_mcp.serverapi.helper import EndpointParams

DEFAULT_CONFIG_PATH = "sonarqube-mcp.yaml"
DEFAULT_CLOUD_URL = "https://sonarcloud.io"
DEFAULT_IDE_PORT = 64120
DEFAULT_LOG_LEVEL = "INFO"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    storage_path: str
    url: str = DEFAULT_CLOUD_URL
    cloud_url: str = DEFAULT_CLOUD_URL
    organization: str | None = None
    token: str | None = None
    ide_port: int = DEFAULT_IDE_PORT
    telemetry_disabled: bool = False
    ca_bundle: str | None = None
    http_timeout: float | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_sonarqube_cloud(self) -> bool:
        return self.url.rstrip("/") == self.cloud_url.rstrip("/")

    @property
    def user_agent(self) -> str:
        return f"SonarQube MCP Server {__version__}"

    @property
    def plugins_path(self) -> Path:
        return Path(self.storage_path).expanduser() / "plugins"

    @property
    def log_file_path(self) -> Path:
        return Path(self.storage_path).expanduser() / "logs" / "mcp.log"

    def endpoint_params(self) -> EndpointParams:
        # The organization only scopes requests against the cloud deployment.
        organization = self.organization if self.is_sonarqube_cloud else None
        return EndpointParams(self.url, organization, self.token, self.is_sonarqube_cloud)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None, environ: Mapping[str, str] | None = None) -> Config:
    """Load and validate configuration.

    The YAML file is optional: when *config_path* is None the default file is
    read only if it exists. Environment variables override file values.

    Raises:
        ConfigError: if an explicit file is missing or malformed, or if any
                     value is invalid. Every problem is listed at once.
    """
    env = os.environ if environ is None else environ
    raw = _read_file(config_path)

    sonarqube = _section(raw, "sonarqube")
    storage = _section(raw, "storage")
    telemetry = _section(raw, "telemetry")
    http = _section(raw, "http")

    cloud_url = _pick(env, "SONARQUBE_CLOUD_URL", None) or DEFAULT_CLOUD_URL
    errors: list[str] = []

    storage_path = _pick(env, "STORAGE_PATH", storage.get("path"))
    url = _pick(env, "SONARQUBE_URL", sonarqube.get("url")) or cloud_url
    organization = _pick(env, "SONARQUBE_ORG", sonarqube.get("organization"))
    token = _pick(env, "SONARQUBE_TOKEN", sonarqube.get("token"))
    ca_bundle = _pick(env, "SONARQUBE_CA_BUNDLE", http.get("ca_bundle"))
    log_level = (_pick(env, "LOG_LEVEL", None) or DEFAULT_LOG_LEVEL).upper()

    ide_port = _parse_port(_pick(env, "SONARQUBE_IDE_PORT", sonarqube.get("ide_port")), errors)
    http_timeout = _parse_timeout(_pick(env, "SONARQUBE_HTTP_TIMEOUT", http.get("timeout")), errors)
    telemetry_disabled = _parse_bool(_pick(env, "TELEMETRY_DISABLED", telemetry.get("disabled")))

    config = Config(
        storage_path=storage_path or "",
        url=url,
        cloud_url=cloud_url,
        organization=organization,
        token=token,
        ide_port=ide_port,
        telemetry_disabled=telemetry_disabled,
        ca_bundle=ca_bundle,
        http_timeout=http_timeout,
        log_level=log_level,
    )
    _validate(config, errors)
    return config


def _read_file(config_path: str | None) -> dict[str, Any]:
    if config_path is None:
        path = Path(DEFAULT_CONFIG_PATH)
        if not path.exists():
            return {}
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(
                f"Config file not found: '{config_path}'\n"
                "Run `sonarqube-mcp init` to generate a template."
            )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must be a YAML mapping at the top level.")
    return raw


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name)
    return value if isinstance(value, dict) else {}


def _pick(env: Mapping[str, str], variable: str, file_value: Any) -> str | None:
    """Environment first, then the file. Blank values count as absent."""
    value = env.get(variable)
    if value is None or not str(value).strip():
        value = file_value
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_port(value: str | None, errors: list[str]) -> int:
    if value is None:
        return DEFAULT_IDE_PORT
    try:
        port = int(value)
    except ValueError:
        errors.append(f"  - IDE port '{value}' is not an integer (SONARQUBE_IDE_PORT)")
        return DEFAULT_IDE_PORT
    if not 1 <= port <= 65535:
        errors.append(f"  - IDE port {port} is out of range 1-65535 (SONARQUBE_IDE_PORT)")
    return port


def _parse_timeout(value: str | None, errors: list[str]) -> float | None:
    if value is None:
        return None
    try:
        timeout = float(value)
    except ValueError:
        errors.append(f"  - HTTP timeout '{value}' is not a number (SONARQUBE_HTTP_TIMEOUT)")
        return None
    if timeout <= 0:
        errors.append(f"  - HTTP timeout must be positive, got {value} (SONARQUBE_HTTP_TIMEOUT)")
        return None
    return timeout


def _parse_bool(value: str | None) -> bool:
    return value is not None and value.lower() in ("1", "true", "yes")


def _validate(config: Config, errors: list[str]) -> None:
    """Raise ConfigError if anything collected so far, or found here, is wrong."""
    if not config.storage_path:
        errors.append(
            "  - 'storage.path' is missing (or set the STORAGE_PATH environment variable)"
        )
    if not config.url.startswith(("http://", "https://")):
        errors.append(f"  - SonarQube URL '{config.url}' must start with http:// or https://")
    if config.is_sonarqube_cloud and config.token and not config.organization:
        errors.append(
            "  - 'sonarqube.organization' is required for SonarQube Cloud "
            "(or set the SONARQUBE_ORG environment variable)"
        )
    if config.ca_bundle and not Path(config.ca_bundle).is_file():
        errors.append(f"  - CA bundle '{config.ca_bundle}' does not exist (SONARQUBE_CA_BUNDLE)")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
sonarqube:
  url: "https://sonarcloud.io"     # or your SonarQube Server URL
  organization: "my-org"           # SonarQube Cloud only
  token: "squ_xxxxxxxxxxxx"        # Generate at: <your-sonar-url>/account/security
  ide_port: 64120                  # SonarQube for IDE bridge port

storage:
  path: "~/.sonarqube-mcp"         # plugins and logs are kept here

telemetry:
  disabled: false

http:
  # timeout: 30                    # seconds, no timeout when omitted
  # ca_bundle: "/etc/ssl/private-ca.pem"
"""


def generate_template(output_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a template sonarqube-mcp.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists (to avoid overwriting secrets).
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
