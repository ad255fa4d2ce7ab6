"""Measures of one component: /api/measures/component."""

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.metrics import Metric
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import UrlBuilder

COMPONENT_PATH = "/api/measures/component"


class MeasurePeriod(ApiModel):
    index: int | None = None
    value: str | None = None
    best_value: bool = False


class Measure(ApiModel):
    metric: str | None = None
    value: str | None = None
    period: MeasurePeriod | None = None
    periods: list[MeasurePeriod] = Field(default_factory=list)


class MeasuredComponent(ApiModel):
    key: str | None = None
    name: str | None = None
    qualifier: str | None = None
    language: str | None = None
    path: str | None = None
    measures: list[Measure] = Field(default_factory=list)


class Period(ApiModel):
    index: int | None = None
    mode: str | None = None
    date: str | None = None
    parameter: str | None = None


class ComponentMeasuresResponse(ApiModel):
    component: MeasuredComponent | None = None
    metrics: list[Metric] = Field(default_factory=list)
    periods: list[Period] = Field(default_factory=list)


class MeasuresApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def component(
        self,
        component: str | None = None,
        branch: str | None = None,
        metric_keys: list[str] | None = None,
        pull_request: str | None = None,
    ) -> ComponentMeasuresResponse:
        path = (
            UrlBuilder(COMPONENT_PATH)
            .add_param("component", component)
            .add_param("branch", branch)
            .add_param("metricKeys", metric_keys)
            .add_param("pullRequest", pull_request)
            .add_param("additionalFields", "metrics")
            .build()
        )
        with self._helper.get(path) as response:
            return ComponentMeasuresResponse.model_validate_json(response.body_as_string())
