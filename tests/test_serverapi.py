"""Tests for the resource clients in sonarqube_mcp/serverapi"""

import pytest

from sonarqube_mcp.serverapi.issues import Transition
from sonarqube_mcp.serverapi.models import Paging
from sonarqube_mcp.serverapi.system import Version

BASE = "https://sonar.example.com"
CLOUD = "https://sonarcloud.io"
CLOUD_API = "https://api.sonarcloud.io"


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------

def test_issue_search_builds_query_in_order(cloud_api, requests_mock):
    requests_mock.get(f"{CLOUD}/api/issues/search", json={"issues": []})
    cloud_api.issues.search(projects=["a", "b"], severities=["MAJOR"], page=2, page_size=50)
    assert requests_mock.last_request.url == (
        f"{CLOUD}/api/issues/search?organization=my-org&projects=a%2Cb&severities=MAJOR&p=2&ps=50"
    )


def test_issue_search_tolerates_missing_fields(server_api, requests_mock):
    requests_mock.get(
        f"{BASE}/api/issues/search",
        json={"paging": {"pageIndex": 1, "pageSize": 100, "total": 1}, "issues": [{"key": "AX1"}], "facets": []},
    )
    response = server_api.issues.search()
    assert response.issues[0].key == "AX1"
    assert response.issues[0].text_range is None
    assert response.paging.total == 1


def test_do_transition_posts_form(server_api, requests_mock):
    adapter = requests_mock.post(f"{BASE}/api/issues/do_transition", json={})
    server_api.issues.do_transition("AX 1", Transition.FALSE_POSITIVE)
    assert adapter.last_request.text == "issue=AX+1&transition=falsepositive"
    assert adapter.last_request.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_transition_from_status():
    assert Transition.from_status("accept") is Transition.ACCEPT
    assert Transition.from_status("close") is None


# ---------------------------------------------------------------------------
# Projects: both flavors normalize to one page
# ---------------------------------------------------------------------------

def test_projects_on_cloud_use_components_search(cloud_api, requests_mock):
    requests_mock.get(
        f"{CLOUD}/api/components/search",
        json={"paging": {"pageIndex": 1, "pageSize": 100, "total": 1}, "components": [{"key": "k", "name": "n"}]},
    )
    page = cloud_api.projects.list_my_projects(1)
    assert requests_mock.last_request.url == f"{CLOUD}/api/components/search?p=1&organization=my-org"
    assert [(p.key, p.name) for p in page.projects] == [("k", "n")]


def test_projects_on_server_use_search_my_projects(server_api, requests_mock):
    requests_mock.get(
        f"{BASE}/api/projects/search_my_projects",
        json={"paging": {"pageIndex": 1, "pageSize": 100, "total": 1}, "projects": [{"key": "k", "name": "n"}]},
    )
    page = server_api.projects.list_my_projects(1)
    assert requests_mock.last_request.url == f"{BASE}/api/projects/search_my_projects?p=1"
    assert page.projects[0].key == "k"
    assert page.paging.total_pages == 1


# ---------------------------------------------------------------------------
# Quality gates and rules
# ---------------------------------------------------------------------------

def test_quality_gates_accept_numeric_ids_and_default_alias(server_api, requests_mock):
    requests_mock.get(
        f"{BASE}/api/qualitygates/list",
        json={"qualitygates": [{"id": 8, "name": "Sonar way", "isDefault": True}], "default": 8},
    )
    response = server_api.quality_gates.list()
    assert response.qualitygates[0].id == "8"
    assert response.default_id == "8"


def test_project_status_query(server_api, requests_mock):
    requests_mock.get(f"{BASE}/api/qualitygates/project_status", json={"projectStatus": {"status": "OK"}})
    response = server_api.quality_gates.project_status(project_key="my_project", pull_request="5461")
    assert requests_mock.last_request.url == (
        f"{BASE}/api/qualitygates/project_status?projectKey=my_project&pullRequest=5461"
    )
    assert response.project_status.status == "OK"


def test_rule_show_is_organization_scoped(cloud_api, requests_mock):
    requests_mock.get(f"{CLOUD}/api/rules/show", json={"rule": {"key": "java:S1135", "name": "Track TODO"}})
    response = cloud_api.rules.show("java:S1135")
    assert requests_mock.last_request.url == f"{CLOUD}/api/rules/show?key=java%3AS1135&organization=my-org"
    assert response.rule.name == "Track TODO"


def test_rules_search_joins_fields_then_encodes(cloud_api, requests_mock):
    requests_mock.get(f"{CLOUD}/api/rules/search", json={"rules": [], "actives": {}})
    cloud_api.rules.search("qp-1")
    assert requests_mock.last_request.url == (
        f"{CLOUD}/api/rules/search?qprofile=qp-1&organization=my-org&activation=true&f=templateKey%2Cactives&p=1"
    )


# ---------------------------------------------------------------------------
# Webhooks
# ---------------------------------------------------------------------------

def test_create_webhook_captures_key(cloud_api, requests_mock):
    adapter = requests_mock.post(
        f"{CLOUD}/api/webhooks/create",
        json={"webhook": {"key": "wh-1", "name": "CI", "url": "https://ci", "hasSecret": True}},
    )
    response = cloud_api.webhooks.create("CI", "https://ci", project="p", secret="0123456789abcdef")
    assert adapter.last_request.url == f"{CLOUD}/api/webhooks/create?organization=my-org"
    assert adapter.last_request.text == "name=CI&url=https%3A%2F%2Fci&project=p&secret=0123456789abcdef"
    assert response.webhook.key == "wh-1"
    assert response.webhook.has_secret


# ---------------------------------------------------------------------------
# Portfolios and enterprises
# ---------------------------------------------------------------------------

def test_portfolios_on_server_come_from_views(server_api, requests_mock):
    requests_mock.get(
        f"{BASE}/api/views/search",
        json={
            "paging": {"pageIndex": 1, "pageSize": 100, "total": 1},
            "components": [{"key": "pf", "name": "Portfolio", "qualifier": "VW", "isFavorite": True}],
        },
    )
    page = server_api.portfolios.list(query="Port", favorite=True)
    assert requests_mock.last_request.url == f"{BASE}/api/views/search?q=Port&onlyFavorites=true&qualifiers=VW"
    assert page.portfolios[0].identifier == "pf"
    assert page.portfolios[0].is_favorite


def test_portfolios_on_cloud_come_from_api_subdomain(cloud_api, requests_mock):
    requests_mock.get(
        f"{CLOUD_API}/enterprises/portfolios",
        json={
            "portfolios": [{"id": "uuid-1", "name": "Cloud PF", "enterpriseId": "e-1", "isDraft": True, "draftStage": 2}],
            "page": {"pageIndex": 1, "pageSize": 50, "total": 1},
        },
    )
    page = cloud_api.portfolios.list(enterprise_id="e-1")
    assert requests_mock.last_request.url == f"{CLOUD_API}/enterprises/portfolios?enterpriseId=e-1"
    portfolio = page.portfolios[0]
    assert (portfolio.identifier, portfolio.enterprise_id, portfolio.is_draft, portfolio.draft_stage) == (
        "uuid-1",
        "e-1",
        True,
        2,
    )
    assert page.paging.page_size == 50


def test_enterprises_parse_bare_array(cloud_api, requests_mock):
    requests_mock.get(
        f"{CLOUD_API}/enterprises/enterprises",
        json=[{"id": "e-1", "key": "acme", "name": "ACME"}],
    )
    enterprises = cloud_api.enterprises.list_enterprises("acme")
    assert requests_mock.last_request.url == f"{CLOUD_API}/enterprises/enterprises?enterpriseKey=acme"
    assert enterprises[0].name == "ACME"


# ---------------------------------------------------------------------------
# Sources, system and settings
# ---------------------------------------------------------------------------

def test_scm_rows_become_lines(server_api, requests_mock):
    requests_mock.get(
        f"{BASE}/api/sources/scm",
        json={"scm": [[1, "alice", "2024-01-01T10:00:00+0000", "abc123"]]},
    )
    response = server_api.sources.scm("p:src/A.java", commits_by_line=True, from_line=1, to_line=3)
    assert requests_mock.last_request.url == (
        f"{BASE}/api/sources/scm?key=p%3Asrc%2FA.java&commits_by_line=true&from=1&to=3"
    )
    assert response.lines[0].author == "alice"


def test_ping_and_status_are_anonymous(server_api, requests_mock):
    ping = requests_mock.get(f"{BASE}/api/system/ping", text="pong")
    status = requests_mock.get(f"{BASE}/api/system/status", json={"id": "x", "version": "2025.1.0.1", "status": "UP"})
    assert server_api.system.ping() == "pong"
    assert str(server_api.system.version()) == "2025.1.0.1"
    assert "Authorization" not in ping.last_request.headers
    assert "Authorization" not in status.last_request.headers


def test_sca_setting(server_api, requests_mock):
    requests_mock.get(f"{BASE}/api/settings/values", json={"settings": [{"key": "sonar.sca.enabled", "value": "true"}]})
    assert server_api.settings.is_sca_enabled()


def test_dependency_risks_query(server_api, requests_mock):
    requests_mock.get(f"{BASE}/api/v2/sca/issues-releases", json={"issuesReleases": []})
    server_api.sca.dependency_risks("proj", branch_key="main")
    assert requests_mock.last_request.url == f"{BASE}/api/v2/sca/issues-releases?projectKey=proj&branchKey=main"


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "version, minimum, expected",
    [
        ("2025.1.0.102418", "10.9", True),
        ("10.9", "10.9", True),
        ("10.8.1", "10.9", False),
        ("9.9.0-SNAPSHOT", "10.9", False),
        ("2025.4", "2025.4", True),
    ],
)
def test_version_comparison(version, minimum, expected):
    assert Version(version).satisfies_min_requirement(Version(minimum)) is expected


def test_total_pages_guards_zero_page_size():
    assert Paging(page_index=1, page_size=0, total=10).total_pages is None
    assert Paging(page_index=1, page_size=3, total=10).total_pages == 4
