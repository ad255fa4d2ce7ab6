from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

SEARCH_PATH = "/api/metrics/search"


class Metric(ApiModel):
    id: str | None = None
    key: str | None = None
    type: str | None = None
    name: str | None = None
    description: str | None = None
    domain: str | None = None
    direction: int = 0
    higher_values_are_better: bool = False
    qualitative: bool = False
    hidden: bool = False
    custom: bool = False


class MetricsSearchResponse(ApiModel):
    metrics: list[Metric] = Field(default_factory=list)
    total: int | None = None
    p: int | None = None
    ps: int | None = None


class MetricsApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def search(self, page: int | None = None, page_size: int | None = None) -> MetricsSearchResponse:
        path = UrlBuilder(SEARCH_PATH).add_param("p", page).add_param("ps", page_size).build()
        with self._helper.get(path) as response:
            return MetricsSearchResponse.model_validate_json(response.body_as_string())
