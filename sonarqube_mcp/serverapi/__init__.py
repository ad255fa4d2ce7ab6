"""Typed SonarQube Web API clients behind a single facade.

Usage:
    api = ServerApi(ServerApiHelper(endpoint, provider.get_http_client(endpoint.token)))
    page = api.issues.search(projects=["my-project"])
"""

from sonarqube_mcp.serverapi.enterprises import EnterprisesApi
from sonarqube_mcp.serverapi.helper import EndpointParams, ServerApiHelper
from sonarqube_mcp.serverapi.issues import IssuesApi
from sonarqube_mcp.serverapi.languages import LanguagesApi
from sonarqube_mcp.serverapi.measures import MeasuresApi
from sonarqube_mcp.serverapi.metrics import MetricsApi
from sonarqube_mcp.serverapi.plugins import PluginsApi
from sonarqube_mcp.serverapi.portfolios import PortfoliosApi
from sonarqube_mcp.serverapi.projects import ProjectsApi
from sonarqube_mcp.serverapi.qualitygates import QualityGatesApi
from sonarqube_mcp.serverapi.rules import RulesApi
from sonarqube_mcp.serverapi.sca import ScaApi
from sonarqube_mcp.serverapi.settings import SettingsApi
from sonarqube_mcp.serverapi.sources import SourcesApi
from sonarqube_mcp.serverapi.system import SystemApi
from sonarqube_mcp.serverapi.webhooks import WebhooksApi


class ServerApi:
    """Entry point to every resource client. Clients are stateless and cheap to build."""

    def __init__(self, helper: ServerApiHelper) -> None:
        self.helper = helper

    @property
    def is_authenticated(self) -> bool:
        return bool(self.helper.endpoint.token)

    @property
    def is_sonarqube_cloud(self) -> bool:
        return self.helper.endpoint.is_sonarqube_cloud

    @property
    def organization(self) -> str | None:
        return self.helper.organization

    @property
    def issues(self) -> IssuesApi:
        return IssuesApi(self.helper)

    @property
    def projects(self) -> ProjectsApi:
        return ProjectsApi(self.helper)

    @property
    def quality_gates(self) -> QualityGatesApi:
        return QualityGatesApi(self.helper)

    @property
    def rules(self) -> RulesApi:
        return RulesApi(self.helper)

    @property
    def languages(self) -> LanguagesApi:
        return LanguagesApi(self.helper)

    @property
    def metrics(self) -> MetricsApi:
        return MetricsApi(self.helper)

    @property
    def measures(self) -> MeasuresApi:
        return MeasuresApi(self.helper)

    @property
    def sources(self) -> SourcesApi:
        return SourcesApi(self.helper)

    @property
    def system(self) -> SystemApi:
        return SystemApi(self.helper)

    @property
    def settings(self) -> SettingsApi:
        return SettingsApi(self.helper)

    @property
    def plugins(self) -> PluginsApi:
        return PluginsApi(self.helper)

    @property
    def webhooks(self) -> WebhooksApi:
        return WebhooksApi(self.helper)

    @property
    def portfolios(self) -> PortfoliosApi:
        return PortfoliosApi(self.helper)

    @property
    def enterprises(self) -> EnterprisesApi:
        return EnterprisesApi(self.helper)

    @property
    def sca(self) -> ScaApi:
        return ScaApi(self.helper)


__all__ = ["EndpointParams", "ServerApi", "ServerApiHelper"]
