"""Shared fixtures: a real HTTP provider (intercepted by requests_mock) and ServerApi factories."""

import socket
import threading

import pytest

from sonarqube_mcp.http import HttpClientProvider
from sonarqube_mcp.serverapi import EndpointParams, ServerApi, ServerApiHelper

SERVER_URL = "https://sonar.example.com"
CLOUD_URL = "https://sonarcloud.io"


@pytest.fixture
def provider():
    provider = HttpClientProvider(user_agent="SonarQube MCP Server test")
    yield provider
    provider.shutdown()


@pytest.fixture
def make_api(provider):
    def _make(
        base_url: str = SERVER_URL,
        organization: str | None = None,
        token: str | None = "squ_test",
        cloud: bool = False,
    ):
        endpoint = EndpointParams(base_url, organization, token, is_sonarqube_cloud=cloud)
        return ServerApi(ServerApiHelper(endpoint, provider.get_http_client(token), timeout=5))

    return _make


@pytest.fixture
def server_api(make_api) -> ServerApi:
    return make_api()


@pytest.fixture
def cloud_api(make_api) -> ServerApi:
    return make_api(CLOUD_URL, organization="my-org", cloud=True)


@pytest.fixture
def anonymous_api(make_api) -> ServerApi:
    return make_api(token=None)


# ---------------------------------------------------------------------------
# A TCP server that accepts connections and never answers
# ---------------------------------------------------------------------------

class SilentServer:
    def __init__(self) -> None:
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.port = self._sock.getsockname()[1]
        self.request_received = threading.Event()
        self.connection_closed = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def _serve(self) -> None:
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        with conn:
            while True:
                try:
                    data = conn.recv(4096)
                except OSError:
                    break
                if not data:
                    break
                self.request_received.set()
        self.connection_closed.set()

    def close(self) -> None:
        self._sock.close()


@pytest.fixture
def silent_server():
    server = SilentServer()
    yield server
    server.close()
