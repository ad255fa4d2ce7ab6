"""Issues Web API: /api/issues/search and /api/issues/do_transition."""

from enum import Enum

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel, Impact, Paging
from sonarqube_mcp.serverapi.url import FORM_URL_ENCODED, UrlBuilder, form_body

SEARCH_PATH = "/api/issues/search"
DO_TRANSITION_PATH = "/api/issues/do_transition"


class Transition(str, Enum):
    ACCEPT = "accept"
    FALSE_POSITIVE = "falsepositive"
    REOPEN = "reopen"

    @classmethod
    def from_status(cls, status: str) -> "Transition | None":
        for transition in cls:
            if transition.value == status:
                return transition
        return None


# ---------------------------------------------------------------------------
# Response records
# ---------------------------------------------------------------------------

class TextRange(ApiModel):
    start_line: int | None = None
    end_line: int | None = None
    start_offset: int | None = None
    end_offset: int | None = None


class Location(ApiModel):
    text_range: TextRange | None = None
    msg: str | None = None


class Flow(ApiModel):
    locations: list[Location] = Field(default_factory=list)


class Comment(ApiModel):
    key: str | None = None
    login: str | None = None
    html_text: str | None = None
    markdown: str | None = None
    updatable: bool = False
    created_at: str | None = None


class Issue(ApiModel):
    key: str | None = None
    component: str | None = None
    project: str | None = None
    rule: str | None = None
    issue_status: str | None = None
    status: str | None = None
    resolution: str | None = None
    severity: str | None = None
    message: str | None = None
    line: int | None = None
    hash: str | None = None
    author: str | None = None
    effort: str | None = None
    creation_date: str | None = None
    update_date: str | None = None
    tags: list[str] = Field(default_factory=list)
    type: str | None = None
    comments: list[Comment] = Field(default_factory=list)
    transitions: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    text_range: TextRange | None = None
    flows: list[Flow] = Field(default_factory=list)
    rule_description_context_key: str | None = None
    clean_code_attribute_category: str | None = None
    clean_code_attribute: str | None = None
    impacts: list[Impact] = Field(default_factory=list)


class IssueComponent(ApiModel):
    key: str | None = None
    enabled: bool = False
    qualifier: str | None = None
    name: str | None = None
    long_name: str | None = None
    path: str | None = None


class IssueRule(ApiModel):
    key: str | None = None
    name: str | None = None
    status: str | None = None
    lang: str | None = None
    lang_name: str | None = None


class IssueUser(ApiModel):
    login: str | None = None
    name: str | None = None
    active: bool = False
    avatar: str | None = None


class IssueSearchResponse(ApiModel):
    paging: Paging | None = None
    issues: list[Issue] = Field(default_factory=list)
    components: list[IssueComponent] = Field(default_factory=list)
    rules: list[IssueRule] = Field(default_factory=list)
    users: list[IssueUser] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class IssuesApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def search(
        self,
        projects: list[str] | None = None,
        pull_request_id: str | None = None,
        severities: list[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> IssueSearchResponse:
        path = (
            UrlBuilder(SEARCH_PATH)
            .add_param("organization", self._helper.organization)
            .add_param("projects", projects)
            .add_param("pullRequest", pull_request_id)
            .add_param("severities", severities)
            .add_param("p", page)
            .add_param("ps", page_size)
            .build()
        )
        with self._helper.get(path) as response:
            return IssueSearchResponse.model_validate_json(response.body_as_string())

    def do_transition(self, issue_key: str, transition: Transition) -> None:
        body = form_body([("issue", issue_key), ("transition", transition.value)])
        with self._helper.post(DO_TRANSITION_PATH, FORM_URL_ENCODED, body):
            pass
