"""Portfolios of SonarQube Server, listed through /api/views/search."""

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Paging
from sonarqube_mcp.serverapi.url import UrlBuilder

SEARCH_PATH = "/api/views/search"
PORTFOLIO_QUALIFIER = "VW"


class View(ApiModel):
    key: str | None = None
    name: str | None = None
    qualifier: str | None = None
    visibility: str | None = None
    is_favorite: bool | None = None


class ViewsSearchResponse(ApiModel):
    components: list[View] = Field(default_factory=list)
    paging: Paging | None = None


class ViewsApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def search(
        self,
        query: str | None = None,
        only_favorites: bool | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> ViewsSearchResponse:
        path = (
            UrlBuilder(SEARCH_PATH)
            .add_param("q", query)
            .add_param("onlyFavorites", only_favorites)
            .add_param("p", page)
            .add_param("ps", page_size)
            .add_param("qualifiers", PORTFOLIO_QUALIFIER)
            .build()
        )
        with self._helper.get(path) as response:
            return ViewsSearchResponse.model_validate_json(response.body_as_string())
