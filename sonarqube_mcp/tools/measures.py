"""get_component_measures: metric values of a project, file or directory."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.measures import ComponentMeasuresResponse, Measure
from sonarqube_mcp.serverapi.metrics import Metric
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, render_bool


class GetComponentMeasuresTool:
    TOOL_NAME = "get_component_measures"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "Get measures for a component (project, directory, file).")
            .add_string_property("component", "The component key to get measures for")
            .add_string_property("branch", "The branch to analyze for measures")
            .add_array_property(
                "metricKeys", "string", "The metric keys to retrieve (e.g. nloc, complexity, violations, coverage)"
            )
            .add_string_property("pullRequest", "The pull request identifier to analyze for measures")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.measures.component(
            component=arguments.get_optional_string("component"),
            branch=arguments.get_optional_string("branch"),
            metric_keys=arguments.get_optional_string_list("metricKeys"),
            pull_request=arguments.get_optional_string("pullRequest"),
        )
        return Result.success(render_component_measures(response))


def _render_measure(measure: Measure, metrics: dict[str, Metric]) -> list[str]:
    metric = metrics.get(measure.metric or "")
    if metric is None:
        return [f"  - {measure.metric}: {measure.value}"]
    value = measure.value or ""
    if measure.periods:
        value += " | New: " + "".join(
            (period.value or "") + ("" if period.best_value else " (not best)") for period in measure.periods
        )
    lines = [f"  - {metric.name} ({measure.metric}): {value}"]
    if metric.description is not None:
        lines.append(f"    Description: {metric.description}")
    return lines


def render_component_measures(response: ComponentMeasuresResponse) -> str:
    component = response.component
    if component is None:
        return "No component found."
    lines = [f"Component: {component.name}", f"Key: {component.key}", f"Qualifier: {component.qualifier}"]
    if component.language is not None:
        lines.append(f"Language: {component.language}")
    if component.path is not None:
        lines.append(f"Path: {component.path}")
    lines.append("")

    metrics = {metric.key: metric for metric in response.metrics if metric.key}
    if component.measures:
        lines.append("Measures:")
        for measure in component.measures:
            lines.extend(_render_measure(measure, metrics))
    else:
        lines.append("No measures found for this component.")

    if response.metrics:
        lines.extend(["", "Available Metrics:"])
        for metric in response.metrics:
            lines.extend([
                f"  - {metric.name} ({metric.key})",
                f"    Description: {metric.description}",
                f"    Domain: {metric.domain}",
                f"    Type: {metric.type}",
                f"    Higher values are better: {render_bool(metric.higher_values_are_better)}",
                f"    Qualitative: {render_bool(metric.qualitative)}",
                f"    Hidden: {render_bool(metric.hidden)}",
                f"    Custom: {render_bool(metric.custom)}",
                "",
            ])

    if response.periods:
        lines.append("Periods:")
        for period in response.periods:
            line = f"  - Period {period.index}: {period.mode}"
            if period.date is not None:
                line += f" ({period.date})"
            if period.parameter is not None:
                line += f" - {period.parameter}"
            lines.append(line)
    return "\n".join(lines).strip()
