"""Exception hierarchy shared by the transport, the API clients and the tools."""


class SonarQubeError(Exception):
    """Base exception for all sonarqube-mcp errors."""


# ---------------------------------------------------------------------------
# HTTP classification
# ---------------------------------------------------------------------------

class SonarQubeApiError(SonarQubeError):
    """Raised when SonarQube answers a request with a non-2xx status."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class UnauthorizedError(SonarQubeApiError):
    """Raised on HTTP 401: invalid or missing token."""


class ForbiddenError(SonarQubeApiError):
    """Raised on HTTP 403: the token lacks the required permission."""


class NotFoundError(SonarQubeApiError):
    """Raised on HTTP 404. On SonarQube this often means a bad token too."""


class ServerInternalError(SonarQubeApiError):
    """Raised on HTTP 500."""


class GenericHttpError(SonarQubeApiError):
    """Raised on any other non-2xx status."""

    def __init__(self, message: str, url: str | None = None, status_code: int = 0) -> None:
        super().__init__(message, url)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Transport and local failures
# ---------------------------------------------------------------------------

class NetworkError(SonarQubeError):
    """Raised on connection failure, timeout or cancellation."""


class LocalValidationError(SonarQubeError):
    """Raised when a tool argument is invalid. No request is sent."""

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class MissingRequiredArgumentError(LocalValidationError):
    def __init__(self, argument: str) -> None:
        super().__init__(f"Missing required argument: {argument}", argument)


class UnsupportedPlatformError(SonarQubeError):
    """Raised at startup when the server version is below the minimum."""


class PluginSynchronizationError(SonarQubeError):
    """Raised when the local plugin cache cannot be brought up to date."""
