"""Pooled HTTP transport used by every SonarQube API call.

Usage:
    provider = HttpClientProvider(user_agent="SonarQube MCP Server 1.0")
    client   = provider.get_http_client(token="squ_xxx")
    with client.get_async("https://sonarcloud.io/api/system/status").result() as response:
        print(response.body_as_string())
    provider.shutdown()

Requests run on a worker pool and return a ``PendingResponse`` future.
Cancelling that future aborts the socket read, so callers blocked on a
slow server are released immediately.
"""

import ssl
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import IO, Iterator

import certifi
import requests
from loguru import logger as default_logger
from requests.adapters import HTTPAdapter

from sonarqube_mcp.http.redirects import preserve_post_on_redirect
from sonarqube_mcp.http.tracking import POOL_CLASSES_BY_SCHEME, InFlightCall, set_current_call

DEFAULT_MAX_WORKERS = 8
DEFAULT_POOL_SIZE = 10


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------

class HttpResponse:
    """A streamed HTTP response. Must be closed (use it as a context manager)."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response

    @property
    def code(self) -> int:
        return self._response.status_code

    @property
    def url(self) -> str:
        return self._response.url

    @property
    def is_successful(self) -> bool:
        return 200 <= self.code < 300

    def body_as_string(self) -> str:
        return self._response.text

    def body_as_stream(self) -> IO[bytes]:
        raw = self._response.raw
        raw.decode_content = True
        return raw

    def iter_bytes(self, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
        return self._response.iter_content(chunk_size=chunk_size)

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "HttpResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PendingResponse(Future):
    """Future of an ``HttpResponse``.

    The future stays PENDING until the worker has a result, so ``cancel()``
    succeeds for the whole time the request is on the wire. A successful
    cancel shuts down the socket; the worker then discards whatever it got.
    """

    def __init__(self) -> None:
        super().__init__()
        self.call = InFlightCall()

    def cancel(self) -> bool:
        cancelled = super().cancel()
        if cancelled:
            self.call.abort()
        return cancelled


# ---------------------------------------------------------------------------
# TLS
# ---------------------------------------------------------------------------

def build_ssl_context(ca_bundle: str | None = None) -> ssl.SSLContext:
    """certifi roots plus the OS trust store, plus an optional private CA bundle."""
    context = ssl.create_default_context(cafile=certifi.where())
    if not sys.platform.startswith("win"):
        context.load_default_certs()
    if ca_bundle:
        context.load_verify_locations(cafile=ca_bundle)
    return context


class PoolingAdapter(HTTPAdapter):
    """HTTPAdapter with a shared TLS context and abortable connections."""

    def __init__(self, ssl_context: ssl.SSLContext, pool_maxsize: int = DEFAULT_POOL_SIZE) -> None:
        self._ssl_context = ssl_context
        super().__init__(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)

    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        pool_kwargs["ssl_context"] = self._ssl_context
        super().init_poolmanager(connections, maxsize, block=block, **pool_kwargs)
        self.poolmanager.pool_classes_by_scheme = dict(POOL_CLASSES_BY_SCHEME)


# ---------------------------------------------------------------------------
# Provider and per-token client
# ---------------------------------------------------------------------------

class HttpClientProvider:
    """Owns the connection pool and worker threads shared by all clients."""

    def __init__(
        self,
        user_agent: str,
        timeout: float | None = None,
        ca_bundle: str | None = None,
        ssl_context: ssl.SSLContext | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        logger=None,
    ) -> None:
        self._logger = logger or default_logger
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["User-Agent"] = user_agent
        self._session.hooks["response"].append(preserve_post_on_redirect)
        adapter = PoolingAdapter(ssl_context or build_ssl_context(ca_bundle))
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="sonarqube-http")
        self._pending: set[PendingResponse] = set()
        self._lock = threading.Lock()
        self._closed = False

    def get_http_client(self, token: str | None = None) -> "HttpClient":
        return HttpClient(self, token)

    def submit(self, method: str, url: str, headers: dict[str, str], data: str | None = None) -> PendingResponse:
        pending = PendingResponse()
        with self._lock:
            if self._closed:
                raise RuntimeError("HTTP client provider has been shut down")
            self._pending.add(pending)
        pending.add_done_callback(self._forget)
        self._executor.submit(self._send, pending, method, url, headers, data)
        return pending

    def _send(self, pending: PendingResponse, method, url, headers, data) -> None:
        if pending.cancelled():
            pending.set_running_or_notify_cancel()
            return
        set_current_call(pending.call)
        try:
            response = self._session.request(
                method, url, headers=headers, data=data, timeout=self._timeout, stream=True
            )
        except Exception as exc:
            if pending.set_running_or_notify_cancel():
                pending.set_exception(exc)
            else:
                self._logger.debug("{} {} aborted after cancellation", method, url)
            return
        finally:
            set_current_call(None)
        if pending.set_running_or_notify_cancel():
            pending.set_result(HttpResponse(response))
        else:
            response.close()

    def _forget(self, pending: PendingResponse) -> None:
        with self._lock:
            self._pending.discard(pending)

    def shutdown(self) -> None:
        """Abort in-flight requests and release the pool. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._pending)
        for future in pending:
            future.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._session.close()


class HttpClient:
    """Per-token view over the shared provider.

    Authenticated calls send ``Authorization: Bearer <token>`` when a token is
    configured. Anonymous calls never send credentials.
    """

    def __init__(self, provider: HttpClientProvider, token: str | None) -> None:
        self._provider = provider
        self._token = token

    def _auth_headers(self) -> dict[str, str]:
        if self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    def get_async(self, url: str) -> PendingResponse:
        return self._provider.submit("GET", url, self._auth_headers())

    def get_async_anonymous(self, url: str) -> PendingResponse:
        return self._provider.submit("GET", url, {})

    def post_async(self, url: str, content_type: str, body: str) -> PendingResponse:
        headers = {**self._auth_headers(), "Content-Type": content_type}
        return self._provider.submit("POST", url, headers, body)

    def get(self, url: str, timeout: float | None = None) -> HttpResponse:
        return self.get_async(url).result(timeout)

    def get_anonymous(self, url: str, timeout: float | None = None) -> HttpResponse:
        return self.get_async_anonymous(url).result(timeout)

    def post(self, url: str, content_type: str, body: str, timeout: float | None = None) -> HttpResponse:
        return self.post_async(url, content_type, body).result(timeout)
