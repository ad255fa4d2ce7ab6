"""Source code and SCM blame: /api/sources/raw and /api/sources/scm."""

from typing import Any, NamedTuple

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

RAW_PATH = "/api/sources/raw"
SCM_PATH = "/api/sources/scm"


class ScmLine(NamedTuple):
    line: int
    author: str
    datetime: str
    revision: str


class ScmResponse(ApiModel):
    # Each row is [line, author, datetime, revision].
    scm: list[list[Any]] = Field(default_factory=list)

    @property
    def lines(self) -> list[ScmLine]:
        return [
            ScmLine(int(row[0]), str(row[1]), str(row[2]), str(row[3]))
            for row in self.scm
            if len(row) >= 4
        ]


class SourcesApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def raw(self, key: str, branch: str | None = None, pull_request: str | None = None) -> str:
        path = (
            UrlBuilder(RAW_PATH)
            .add_param("key", key)
            .add_param("branch", branch)
            .add_param("pullRequest", pull_request)
            .build()
        )
        with self._helper.get(path) as response:
            return response.body_as_string()

    def scm(
        self,
        key: str,
        commits_by_line: bool | None = None,
        from_line: int | None = None,
        to_line: int | None = None,
    ) -> ScmResponse:
        path = (
            UrlBuilder(SCM_PATH)
            .add_param("key", key)
            .add_param("commits_by_line", commits_by_line)
            .add_param("from", from_line)
            .add_param("to", to_line)
            .build()
        )
        with self._helper.get(path) as response:
            return ScmResponse.model_validate_json(response.body_as_string())
