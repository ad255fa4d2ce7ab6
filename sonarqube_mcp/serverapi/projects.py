"""Projects visible to the current user.

SonarQube Cloud lists them with ``/api/components/search`` scoped to the
organization; SonarQube Server with ``/api/projects/search_my_projects``.
Both answers are normalized into a ``ProjectsPage``.
"""

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Paging
from sonarqube_mcp.serverapi.url import UrlBuilder

COMPONENTS_SEARCH_PATH = "/api/components/search"
SEARCH_MY_PROJECTS_PATH = "/api/projects/search_my_projects"


class Project(ApiModel):
    key: str | None = None
    name: str | None = None
    qualifier: str | None = None
    last_analysis_date: str | None = None
    quality_gate: str | None = None


class ProjectsPage(ApiModel):
    paging: Paging | None = None
    projects: list[Project] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Flavor-specific payloads
# ---------------------------------------------------------------------------

class ComponentSearchResponse(ApiModel):
    """SonarQube Cloud answer of /api/components/search."""

    paging: Paging | None = None
    components: list[Project] = Field(default_factory=list)

    def to_page(self) -> ProjectsPage:
        return ProjectsPage(paging=self.paging, projects=self.components)


class MyProjectsResponse(ApiModel):
    """SonarQube Server answer of /api/projects/search_my_projects."""

    paging: Paging | None = None
    projects: list[Project] = Field(default_factory=list)

    def to_page(self) -> ProjectsPage:
        return ProjectsPage(paging=self.paging, projects=self.projects)


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

class ComponentsApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def search_projects_in_my_org(self, page: int) -> ComponentSearchResponse:
        path = (
            UrlBuilder(COMPONENTS_SEARCH_PATH)
            .add_param("p", page)
            .add_param("organization", self._helper.organization)
            .build()
        )
        with self._helper.get(path) as response:
            return ComponentSearchResponse.model_validate_json(response.body_as_string())


class ProjectsApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def search_my_projects(self, page: int | None = None) -> MyProjectsResponse:
        path = UrlBuilder(SEARCH_MY_PROJECTS_PATH).add_param("p", page).build()
        with self._helper.get(path) as response:
            return MyProjectsResponse.model_validate_json(response.body_as_string())

    def list_my_projects(self, page: int = 1) -> ProjectsPage:
        """Projects of the organization (Cloud) or of the current user (Server)."""
        if self._helper.is_sonarqube_cloud:
            return ComponentsApi(self._helper).search_projects_in_my_org(page).to_page()
        return self.search_my_projects(page).to_page()
