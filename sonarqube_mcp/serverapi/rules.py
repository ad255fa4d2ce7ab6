"""Rules: /api/rules/show, /api/rules/repositories and /api/rules/search."""

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Impact
from sonarqube_mcp.serverapi.url import UrlBuilder

SHOW_PATH = "/api/rules/show"
REPOSITORIES_PATH = "/api/rules/repositories"
SEARCH_PATH = "/api/rules/search"


class RuleParam(ApiModel):
    key: str | None = None
    html_desc: str | None = None
    default_value: str | None = None
    type: str | None = None


class DescriptionSection(ApiModel):
    key: str | None = None
    content: str | None = None


class Rule(ApiModel):
    key: str | None = None
    repo: str | None = None
    name: str | None = None
    created_at: str | None = None
    html_desc: str | None = None
    md_desc: str | None = None
    severity: str | None = None
    status: str | None = None
    is_template: bool = False
    template_key: str | None = None
    tags: list[str] = Field(default_factory=list)
    sys_tags: list[str] = Field(default_factory=list)
    lang: str | None = None
    lang_name: str | None = None
    params: list[RuleParam] = Field(default_factory=list)
    type: str | None = None
    scope: str | None = None
    is_external: bool = False
    description_sections: list[DescriptionSection] = Field(default_factory=list)
    education_principles: list[str] = Field(default_factory=list)
    clean_code_attribute: str | None = None
    clean_code_attribute_category: str | None = None
    impacts: list[Impact] = Field(default_factory=list)


class ShowResponse(ApiModel):
    rule: Rule | None = None


class Repository(ApiModel):
    key: str | None = None
    name: str | None = None
    language: str | None = None


class RepositoriesResponse(ApiModel):
    repositories: list[Repository] = Field(default_factory=list)


class ActiveParam(ApiModel):
    key: str | None = None
    value: str | None = None


class ActiveRule(ApiModel):
    q_profile: str | None = None
    inherit: str | None = None
    severity: str | None = None
    params: list[ActiveParam] = Field(default_factory=list)
    impacts: list[Impact] = Field(default_factory=list)


class RulesSearchResponse(ApiModel):
    total: int | None = None
    p: int | None = None
    ps: int | None = None
    rules: list[Rule] = Field(default_factory=list)
    actives: dict[str, list[ActiveRule]] = Field(default_factory=dict)


class RulesApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def show(self, rule_key: str) -> ShowResponse:
        path = (
            UrlBuilder(SHOW_PATH)
            .add_param("key", rule_key)
            .add_param("organization", self._helper.organization)
            .build()
        )
        with self._helper.get(path) as response:
            return ShowResponse.model_validate_json(response.body_as_string())

    def repositories(self, language: str | None = None, query: str | None = None) -> RepositoriesResponse:
        path = UrlBuilder(REPOSITORIES_PATH).add_param("language", language).add_param("q", query).build()
        with self._helper.get(path) as response:
            return RepositoriesResponse.model_validate_json(response.body_as_string())

    def search(self, quality_profile_key: str, page: int = 1) -> RulesSearchResponse:
        """Rules activated in a quality profile, with their active parameters.

        No tool calls this. It feeds the rule configuration of a local analysis
        engine, which this server does not embed.
        """
        path = (
            UrlBuilder(SEARCH_PATH)
            .add_param("qprofile", quality_profile_key)
            .add_param("organization", self._helper.organization)
            .add_param("activation", True)
            .add_param("f", ["templateKey", "actives"])
            .add_param("p", page)
            .build()
        )
        with self._helper.get(path) as response:
            return RulesSearchResponse.model_validate_json(response.body_as_string())
