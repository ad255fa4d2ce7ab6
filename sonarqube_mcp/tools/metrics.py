"""search_metrics."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.metrics import MetricsSearchResponse
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, render_bool

_DIRECTIONS = {
    -1: "-1 (lower values are better)",
    0: "0 (no direction)",
    1: "1 (higher values are better)",
}


class SearchMetricsTool:
    TOOL_NAME = "search_metrics"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "Search for SonarQube metrics")
            .add_number_property("p", "1-based page number (default: 1)")
            .add_number_property(
                "ps", "Page size. Must be greater than 0 and less than or equal to 500 (default: 100)"
            )
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.metrics.search(
            page=arguments.get_optional_integer("p"),
            page_size=arguments.get_optional_integer("ps"),
        )
        return Result.success(render_metrics(response))


def render_metrics(response: MetricsSearchResponse) -> str:
    header = (
        f"Search Results: {response.total} total metrics\n"
        f"Page: {response.p} | Page Size: {response.ps}\n\n"
    )
    if not response.metrics:
        return header + "No metrics were found."
    blocks = []
    for metric in response.metrics:
        blocks.append(
            f"  - {metric.name} ({metric.key})\n"
            f"    ID: {metric.id}\n"
            f"    Description: {metric.description}\n"
            f"    Domain: {metric.domain}\n"
            f"    Type: {metric.type}\n"
            f"    Direction: {_DIRECTIONS.get(metric.direction, str(metric.direction))}\n"
            f"    Qualitative: {render_bool(metric.qualitative)}\n"
            f"    Hidden: {render_bool(metric.hidden)}\n"
            f"    Custom: {render_bool(metric.custom)}"
        )
    return header + "Metrics:\n" + "\n\n".join(blocks)
