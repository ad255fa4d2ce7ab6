"""Connection tracking so an in-flight request can be aborted from another thread.

The worker thread that sends a request registers an ``InFlightCall`` as the
current call. The connection classes below attach themselves to that call
when they connect or send, which lets ``InFlightCall.abort()`` shut down the
socket a blocked read is waiting on.
"""

import socket
import threading

from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

_local = threading.local()


class InFlightCall:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: list[HTTPConnection] = []
        self.aborted = False

    def attach(self, connection: HTTPConnection) -> None:
        with self._lock:
            self._connections.append(connection)
            aborted = self.aborted
        if aborted:
            _shutdown(connection)

    def abort(self) -> None:
        with self._lock:
            self.aborted = True
            connections = list(self._connections)
        for connection in connections:
            _shutdown(connection)


def _shutdown(connection: HTTPConnection) -> None:
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Already closed by the peer or by the pool.
        pass


def current_call() -> InFlightCall | None:
    return getattr(_local, "call", None)


def set_current_call(call: InFlightCall | None) -> None:
    _local.call = call


# ---------------------------------------------------------------------------
# urllib3 connection and pool classes
# ---------------------------------------------------------------------------

class _TrackedConnectionMixin:
    def connect(self):
        super().connect()
        call = current_call()
        if call is not None:
            call.attach(self)

    def request(self, *args, **kwargs):
        call = current_call()
        if call is not None:
            call.attach(self)
        return super().request(*args, **kwargs)


class TrackedHTTPConnection(_TrackedConnectionMixin, HTTPConnection):
    pass


class TrackedHTTPSConnection(_TrackedConnectionMixin, HTTPSConnection):
    pass


class TrackedHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = TrackedHTTPConnection


class TrackedHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = TrackedHTTPSConnection


POOL_CLASSES_BY_SCHEME = {
    "http": TrackedHTTPConnectionPool,
    "https": TrackedHTTPSConnectionPool,
}
