from sonarqube_mcp.http.client import (
    HttpClient,
    HttpClientProvider,
    HttpResponse,
    PendingResponse,
    build_ssl_context,
)

__all__ = [
    "HttpClient",
    "HttpClientProvider",
    "HttpResponse",
    "PendingResponse",
    "build_ssl_context",
]
