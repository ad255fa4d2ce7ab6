"""list_languages."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder


class ListLanguagesTool:
    TOOL_NAME = "list_languages"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "List all programming languages supported in this instance")
            .add_string_property("q", "Optional pattern to match language keys/names against")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.languages.list(arguments.get_optional_string("q"))
        if not response.languages:
            return Result.success("No languages were found.")
        lines = [f"{language.name} ({language.key})" for language in response.languages]
        return Result.success("Supported Languages:\n\n" + "\n".join(lines))
