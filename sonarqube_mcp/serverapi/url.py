"""Query string builder used by every resource client.

Usage:
    path = UrlBuilder("/api/issues/search").add_param("projects", ["a", "b"]).build()
    # -> "/api/issues/search?projects=a%2Cb"
"""

from collections.abc import Iterable
from typing import Any
from urllib.parse import quote_plus

FORM_URL_ENCODED = "application/x-www-form-urlencoded"


def encode(value: str) -> str:
    """Percent-encode a single query or form value (space becomes '+')."""
    return quote_plus(value, safe="")


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UrlBuilder:
    """Append encoded query parameters to a path, in insertion order.

    Parameters whose value is None, an empty string or an empty list are
    skipped. List values are comma-joined first and the joined string is
    encoded as one token.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._params: list[tuple[str, str]] = []

    def add_param(self, name: str, value: Any) -> "UrlBuilder":
        if value is None:
            return self
        if isinstance(value, (list, tuple)):
            if not value:
                return self
            rendered = ",".join(_render(v) for v in value)
        else:
            rendered = _render(value)
            if rendered == "":
                return self
        self._params.append((name, rendered))
        return self

    def add_params(self, params: Iterable[tuple[str, Any]]) -> "UrlBuilder":
        for name, value in params:
            self.add_param(name, value)
        return self

    def build(self) -> str:
        url = self._path
        for index, (name, value) in enumerate(self._params):
            url += ("?" if index == 0 else "&") + name + "=" + encode(value)
        return url


def form_body(fields: Iterable[tuple[str, Any]]) -> str:
    """Build an application/x-www-form-urlencoded body, skipping None values."""
    return "&".join(
        f"{name}={encode(_render(value))}" for name, value in fields if value is not None
    )
