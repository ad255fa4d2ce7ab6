"""Rule details and rule repositories."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.rules import RepositoriesResponse, Rule
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder


class ShowRuleTool:
    TOOL_NAME = "show_rule"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "Shows detailed information about a SonarQube rule")
            .add_required_string_property("key", "The rule key (e.g. javascript:EmptyBlock)")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.rules.show(arguments.get_string_or_throw("key"))
        if response.rule is None:
            return Result.failure("No rule was found.")
        return Result.success(render_rule(response.rule))


def render_rule(rule: Rule) -> str:
    lines = [
        "Rule details:",
        f"Key: {rule.key}",
        f"Name: {rule.name}",
        f"Severity: {rule.severity}",
        f"Type: {rule.type}",
        f"Language: {rule.lang_name} ({rule.lang})",
    ]
    if rule.impacts:
        lines.append("Impacts:")
        lines.extend(f"- {impact.software_quality}: {impact.severity}" for impact in rule.impacts)
    description = rule.html_desc
    if description is None and rule.description_sections:
        description = "\n".join(section.content or "" for section in rule.description_sections)
    return "\n".join(lines) + "\n\nDescription:\n" + (description or "")


class ListRuleRepositoriesTool:
    TOOL_NAME = "list_rule_repositories"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "List rule repositories available in SonarQube")
            .add_string_property("language", "Optional language key to filter repositories (e.g. 'java')")
            .add_string_property("q", "Optional search query to filter repositories by name or key")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.rules.repositories(
            language=arguments.get_optional_string("language"),
            query=arguments.get_optional_string("q"),
        )
        return Result.success(render_repositories(response))


def render_repositories(response: RepositoriesResponse) -> str:
    if not response.repositories:
        return "No rule repositories were found."
    blocks = [f"Found {len(response.repositories)} rule repositories:"]
    blocks.extend(
        f"Key: {repo.key}\nName: {repo.name}\nLanguage: {repo.language}" for repo in response.repositories
    )
    return "\n\n".join(blocks)
