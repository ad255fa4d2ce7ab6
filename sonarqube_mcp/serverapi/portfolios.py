"""Portfolios across both deployment flavors.

SonarQube Cloud serves enterprise portfolios on the API host; SonarQube
Server lists them as views. ``PortfoliosApi.list`` hides the difference and
returns a single ``PortfolioPage`` shape.
"""

from pydantic import Field

from sonarqube_mcp.serverapi.enterprises import CloudPortfoliosResponse, EnterprisesApi
from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Paging
from sonarqube_mcp.serverapi.views import ViewsApi, ViewsSearchResponse


class Portfolio(ApiModel):
    """A portfolio of either flavor. ``identifier`` is the key (Server) or the id (Cloud)."""

    name: str | None = None
    identifier: str | None = None
    qualifier: str | None = None
    visibility: str | None = None
    is_favorite: bool | None = None
    description: str | None = None
    enterprise_id: str | None = None
    selection: str | None = None
    is_draft: bool = False
    draft_stage: int | None = None
    tags: list[str] = Field(default_factory=list)


class PortfolioPage(ApiModel):
    portfolios: list[Portfolio] = Field(default_factory=list)
    paging: Paging | None = None


def from_views(response: ViewsSearchResponse) -> PortfolioPage:
    return PortfolioPage(
        portfolios=[
            Portfolio(
                name=view.name,
                identifier=view.key,
                qualifier=view.qualifier,
                visibility=view.visibility,
                is_favorite=view.is_favorite,
            )
            for view in response.components
        ],
        paging=response.paging,
    )


def from_cloud(response: CloudPortfoliosResponse) -> PortfolioPage:
    return PortfolioPage(
        portfolios=[
            Portfolio(
                name=portfolio.name,
                identifier=portfolio.id,
                description=portfolio.description,
                enterprise_id=portfolio.enterprise_id,
                selection=portfolio.selection,
                is_draft=bool(portfolio.is_draft),
                draft_stage=portfolio.draft_stage,
                tags=portfolio.tags,
            )
            for portfolio in response.portfolios
        ],
        paging=response.page,
    )


class PortfoliosApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def list(
        self,
        enterprise_id: str | None = None,
        query: str | None = None,
        favorite: bool | None = None,
        draft: bool | None = None,
        page_index: int | None = None,
        page_size: int | None = None,
    ) -> PortfolioPage:
        if self._helper.is_sonarqube_cloud:
            response = EnterprisesApi(self._helper).list_portfolios(
                enterprise_id, query, favorite, draft, page_index, page_size
            )
            return from_cloud(response)
        return from_views(ViewsApi(self._helper).search(query, favorite, page_index, page_size))
