"""Request execution and HTTP error classification.

Every resource client goes through ``ServerApiHelper``: it resolves paths
against the configured base URL, picks the authentication mode and turns
non-2xx responses into the typed errors of ``serverapi.errors``.
"""

import concurrent.futures
import json
from dataclasses import dataclass

import requests

from sonarqube_mcp.http import HttpClient, HttpResponse, PendingResponse
from sonarqube_mcp.serverapi.errors import (
    ForbiddenError,
    GenericHttpError,
    NetworkError,
    NotFoundError,
    ServerInternalError,
    SonarQubeApiError,
    UnauthorizedError,
)

SONARCLOUD_HOST = "://sonarcloud.io"
SONARCLOUD_API_HOST = "://api.sonarcloud.io"


@dataclass(frozen=True)
class EndpointParams:
    """Base URL, organization and token, fixed for the process lifetime.

    The deployment flavor is decided once from the configured URL, so a
    SonarQube Cloud endpoint stays cloud even without an organization.
    """

    base_url: str
    organization: str | None = None
    token: str | None = None
    is_sonarqube_cloud: bool = False


def concat(base_url: str, relative_path: str) -> str:
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url + relative_path.lstrip("/")


class ServerApiHelper:
    def __init__(self, endpoint: EndpointParams, client: HttpClient, timeout: float | None = None) -> None:
        self.endpoint = endpoint
        self._client = client
        self._timeout = timeout

    @property
    def organization(self) -> str | None:
        return self.endpoint.organization

    @property
    def is_sonarqube_cloud(self) -> bool:
        return self.endpoint.is_sonarqube_cloud

    # ------------------------------------------------------------------
    # Classifying calls
    # ------------------------------------------------------------------

    def get(self, path: str) -> HttpResponse:
        return _check(self.raw_get(path))

    def get_anonymous(self, path: str) -> HttpResponse:
        return _check(self.raw_get_anonymous(path))

    def get_api_subdomain(self, path: str) -> HttpResponse:
        return _check(self.raw_get_api_subdomain(path))

    def post(self, path: str, content_type: str, body: str) -> HttpResponse:
        return _check(self.raw_post(path, content_type, body))

    # ------------------------------------------------------------------
    # Raw calls (status not checked)
    # ------------------------------------------------------------------

    def raw_get(self, path: str) -> HttpResponse:
        url = self.build_endpoint_url(path)
        return self._wait(url, self._client.get_async(url))

    def raw_get_anonymous(self, path: str) -> HttpResponse:
        url = self.build_endpoint_url(path)
        return self._wait(url, self._client.get_async_anonymous(url))

    def raw_get_api_subdomain(self, path: str) -> HttpResponse:
        url = self.build_api_subdomain_url(path)
        return self._wait(url, self._client.get_async(url))

    def raw_post(self, path: str, content_type: str, body: str) -> HttpResponse:
        url = self.build_endpoint_url(path)
        return self._wait(url, self._client.post_async(url, content_type, body))

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def build_endpoint_url(self, path: str) -> str:
        return concat(self.endpoint.base_url, path)

    def build_api_subdomain_url(self, path: str) -> str:
        """Enterprise endpoints of SonarQube Cloud live on api.sonarcloud.io."""
        if not self.endpoint.is_sonarqube_cloud:
            return self.build_endpoint_url(path)
        base_url = self.endpoint.base_url.replace(SONARCLOUD_HOST, SONARCLOUD_API_HOST)
        return concat(base_url, path)

    def _wait(self, url: str, pending: PendingResponse) -> HttpResponse:
        try:
            return pending.result(self._timeout)
        except concurrent.futures.TimeoutError as exc:
            pending.cancel()
            raise NetworkError(
                f"Request timed out after {self._timeout}s while contacting '{url}'"
            ) from exc
        except concurrent.futures.CancelledError as exc:
            raise NetworkError(f"Request to '{url}' was cancelled") from exc
        except requests.exceptions.Timeout as exc:
            raise NetworkError(f"Request timed out while contacting '{url}'") from exc
        except requests.exceptions.ConnectionError as exc:
            raise NetworkError(
                f"Unable to reach SonarQube server at '{self.endpoint.base_url}'"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise NetworkError(f"Request to '{url}' failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

def _check(response: HttpResponse) -> HttpResponse:
    if not response.is_successful:
        raise handle_error(response)
    return response


def handle_error(response: HttpResponse) -> SonarQubeApiError:
    """Close *response* and return the typed error matching its status."""
    with response:
        code = response.code
        url = response.url
        if code == 401:
            return UnauthorizedError("Not authorized. Please check server credentials.", url)
        if code == 403:
            return ForbiddenError(try_parse_error_message(response) or "Forbidden", url)
        if code == 404:
            return NotFoundError(format_failure(code, url), url)
        if code == 500:
            return ServerInternalError(format_failure(code, url), url)
        message = try_parse_error_message(response)
        return GenericHttpError(format_failure(code, url, message), url, status_code=code)


def format_failure(code: int, url: str, message: str | None = None) -> str:
    text = f"Error {code} on {url}"
    if message:
        text += f": {message}"
    return text


def try_parse_error_message(response: HttpResponse) -> str | None:
    """Extract the message of a SonarQube error body, or None.

    Two envelopes exist: ``{"errors": [{"msg": ...}]}`` on the Web API and
    ``{"message": ...}`` on the v2 and enterprise APIs.
    """
    try:
        content = response.body_as_string()
    except requests.exceptions.RequestException:
        return None
    if not content or not content.strip():
        return None
    try:
        payload = json.loads(content)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if isinstance(errors, list):
        messages = [e["msg"] for e in errors if isinstance(e, dict) and isinstance(e.get("msg"), str)]
        return ", ".join(messages) if messages else None
    message = payload.get("message")
    return message if isinstance(message, str) else None
