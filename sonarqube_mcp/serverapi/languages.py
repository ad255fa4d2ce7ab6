from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

LIST_PATH = "/api/languages/list"


class Language(ApiModel):
    key: str | None = None
    name: str | None = None


class LanguagesResponse(ApiModel):
    languages: list[Language] = Field(default_factory=list)


class LanguagesApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def list(self, query: str | None = None) -> LanguagesResponse:
        path = UrlBuilder(LIST_PATH).add_param("q", query).build()
        with self._helper.get(path) as response:
            return LanguagesResponse.model_validate_json(response.body_as_string())
