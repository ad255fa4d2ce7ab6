"""search_my_sonarqube_projects."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.projects import ProjectsPage
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, pagination_banner


class SearchMyProjectsTool:
    TOOL_NAME = "search_my_sonarqube_projects"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "Find Sonar projects in my organization. The response is paginated.")
            .add_string_property("page", "An optional page number. Defaults to 1.")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        page = arguments.get_int_or_default("page", 1)
        return Result.success(render_projects(self._api.projects.list_my_projects(page)))


def render_projects(page: ProjectsPage) -> str:
    if not page.projects:
        return "No projects were found."
    lines = [f"Found {len(page.projects)} Sonar projects in your organization."]
    banner = pagination_banner(page.paging, "projects")
    if banner:
        lines.append(banner)
    lines.extend(f"Project key: {p.key} | Project name: {p.name}" for p in page.projects)
    return "\n".join(lines)
