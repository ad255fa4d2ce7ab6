"""Raw source code and SCM blame of a file."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.sources import ScmResponse
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder


class GetRawSourceTool:
    TOOL_NAME = "get_raw_source"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(self.TOOL_NAME, "Get source code as raw text. Require 'See Source Code' permission on file")
            .add_required_string_property("key", "File key (e.g. my_project:src/foo/Bar.php)")
            .add_string_property("branch", "Branch key (e.g. feature/my_branch)")
            .add_string_property("pullRequest", "Pull request id")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        source = self._api.sources.raw(
            arguments.get_string_or_throw("key"),
            branch=arguments.get_optional_string("branch"),
            pull_request=arguments.get_optional_string("pullRequest"),
        )
        return Result.success(source)


class GetScmInfoTool:
    TOOL_NAME = "get_scm_info"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Get SCM information of source files. Require See Source Code permission on file's project",
            )
            .add_required_string_property("key", "File key (e.g. my_project:src/foo/Bar.php)")
            .add_boolean_property(
                "commits_by_line",
                "Group lines by SCM commit if value is false, else display commits for each line (true/false)",
            )
            .add_number_property("from", "First line to return. Starts at 1")
            .add_number_property("to", "Last line to return (inclusive)")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.sources.scm(
            arguments.get_string_or_throw("key"),
            commits_by_line=arguments.get_optional_boolean("commits_by_line"),
            from_line=arguments.get_optional_integer("from"),
            to_line=arguments.get_optional_integer("to"),
        )
        return Result.success(render_scm(response))


def render_scm(response: ScmResponse) -> str:
    lines = ["SCM Information:", "================", ""]
    scm_lines = response.lines
    if not scm_lines:
        lines.append("No SCM information available for this file.")
        return "\n".join(lines)
    lines.append("Line | Author      | Date                    | Revision")
    lines.append("-----|-------------|-------------------------|----------------")
    for row in scm_lines:
        lines.append(f"{row.line:<4d} | {row.author:<11s} | {row.datetime:<23s} | {row.revision}")
    return "\n".join(lines)
