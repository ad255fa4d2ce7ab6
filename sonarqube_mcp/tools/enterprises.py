"""list_enterprises, for SonarQube Cloud only."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.enterprises import Enterprise
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder


class ListEnterprisesTool:
    TOOL_NAME = "list_enterprises"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "List enterprises available in SonarQube Cloud. Available only for SonarQube Cloud instances.",
            )
            .add_string_property("enterpriseKey", "Optional enterprise key to filter results")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        enterprises = self._api.enterprises.list_enterprises(arguments.get_optional_string("enterpriseKey"))
        return Result.success(render_enterprises(enterprises))


def render_enterprises(enterprises: list[Enterprise]) -> str:
    if not enterprises:
        return "No enterprises were found."
    lines = []
    for enterprise in enterprises:
        line = f"Enterprise: {enterprise.name} ({enterprise.key}) | ID: {enterprise.id}"
        if enterprise.avatar is not None:
            line += f" | Avatar: {enterprise.avatar}"
        if enterprise.default_portfolio_permission_template_id is not None:
            line += f" | Default Portfolio Template: {enterprise.default_portfolio_permission_template_id}"
        lines.append(line)
    return "Available Enterprises:\n\n" + "\n".join(lines)
