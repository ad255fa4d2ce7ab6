"""SonarQube Cloud enterprises, served from the api.sonarcloud.io host."""

from pydantic import Field, TypeAdapter

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Paging
from sonarqube_mcp.serverapi.url import UrlBuilder

ENTERPRISES_PATH = "/enterprises/enterprises"
PORTFOLIOS_PATH = "/enterprises/portfolios"


class Enterprise(ApiModel):
    id: str | None = None
    key: str | None = None
    name: str | None = None
    avatar: str | None = None
    default_portfolio_permission_template_id: str | None = None


class PortfolioProject(ApiModel):
    branch_id: str | None = None
    id: str | None = None


class CloudPortfolio(ApiModel):
    id: str | None = None
    enterprise_id: str | None = None
    name: str | None = None
    description: str | None = None
    selection: str | None = None
    favorite_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    projects: list[PortfolioProject] = Field(default_factory=list)
    is_draft: bool | None = None
    draft_stage: int | None = None


class CloudPortfoliosResponse(ApiModel):
    portfolios: list[CloudPortfolio] = Field(default_factory=list)
    page: Paging | None = None


_ENTERPRISE_LIST = TypeAdapter(list[Enterprise])


class EnterprisesApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def list_enterprises(self, enterprise_key: str | None = None) -> list[Enterprise]:
        # The endpoint answers with a bare JSON array.
        path = UrlBuilder(ENTERPRISES_PATH).add_param("enterpriseKey", enterprise_key).build()
        with self._helper.get_api_subdomain(path) as response:
            return _ENTERPRISE_LIST.validate_json(response.body_as_string())

    def list_portfolios(
        self,
        enterprise_id: str | None = None,
        query: str | None = None,
        favorite: bool | None = None,
        draft: bool | None = None,
        page_index: int | None = None,
        page_size: int | None = None,
    ) -> CloudPortfoliosResponse:
        path = (
            UrlBuilder(PORTFOLIOS_PATH)
            .add_param("enterpriseId", enterprise_id)
            .add_param("q", query)
            .add_param("favorite", favorite)
            .add_param("draft", draft)
            .add_param("pageIndex", page_index)
            .add_param("pageSize", page_size)
            .build()
        )
        with self._helper.get_api_subdomain(path) as response:
            return CloudPortfoliosResponse.model_validate_json(response.body_as_string())
