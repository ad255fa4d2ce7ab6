"""Tests for sonarqube_mcp/tools/core.py: schema, arguments and the executor"""

import pytest

from sonarqube_mcp.serverapi.errors import (
    ForbiddenError,
    LocalValidationError,
    MissingRequiredArgumentError,
    NetworkError,
    NotFoundError,
)
from sonarqube_mcp.tools.core import (
    Arguments,
    Result,
    SchemaBuilder,
    ToolExecutor,
    pagination_banner,
    render_bool,
    validate_arguments,
)
from sonarqube_mcp.serverapi.models import Paging


class RecordingTool:
    """Test double counting calls; its body raises whatever it is given."""

    def __init__(self, anonymous: bool = False, raises: Exception | None = None) -> None:
        builder = (
            SchemaBuilder("recording", "Records calls")
            .add_required_string_property("key", "A key")
            .add_number_property("p", "A page")
            .add_boolean_property("flag", "A flag")
            .add_array_property("items", "string", "Items")
        )
        if anonymous:
            builder = builder.anonymous()
        self.definition = builder.build()
        self.calls = 0
        self._raises = raises

    def execute(self, arguments: Arguments) -> Result:
        self.calls += 1
        if self._raises is not None:
            raise self._raises
        return Result.success(f"key={arguments.get_string_or_throw('key')}")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

def test_input_schema_lists_properties_and_required():
    schema = RecordingTool().definition.input_schema()
    assert schema["type"] == "object"
    assert schema["required"] == ["key"]
    assert schema["properties"]["items"] == {"type": "array", "description": "Items", "items": {"type": "string"}}


def test_required_property_must_be_declared():
    builder = SchemaBuilder("broken", "x")
    builder._required.append("ghost")
    with pytest.raises(ValueError, match="ghost"):
        builder.build()


def test_enum_property_is_an_array_of_allowed_strings():
    definition = SchemaBuilder("t", "d").add_enum_property("severities", ["MAJOR", "MINOR"], "s").build()
    assert definition.properties["severities"]["items"] == {"type": "string", "enum": ["MAJOR", "MINOR"]}


def test_to_mcp_tool():
    tool = RecordingTool().definition.to_mcp_tool()
    assert tool.name == "recording"
    assert tool.inputSchema["required"] == ["key"]


# ---------------------------------------------------------------------------
# Validation and argument access
# ---------------------------------------------------------------------------

def test_missing_required_argument_names_it():
    with pytest.raises(MissingRequiredArgumentError, match="Missing required argument: key"):
        validate_arguments(RecordingTool().definition, {})


@pytest.mark.parametrize(
    "arguments",
    [{"key": "k", "p": "two"}, {"key": "k", "flag": "maybe"}, {"key": "k", "items": [1, {"x": 1}]}, {"key": ["k"]}],
)
def test_wrongly_typed_argument_is_rejected(arguments):
    with pytest.raises(LocalValidationError):
        validate_arguments(RecordingTool().definition, arguments)


def test_numbers_and_booleans_may_arrive_as_strings():
    validate_arguments(RecordingTool().definition, {"key": 12, "p": "3", "flag": "true", "items": "one"})


def test_arguments_accessors():
    arguments = Arguments({"s": 5, "b": "TRUE", "i": 2.0, "l": "x", "n": None})
    assert arguments.get_string_or_throw("s") == "5"
    assert arguments.get_optional_boolean("b") is True
    assert arguments.get_optional_integer("i") == 2
    assert arguments.get_optional_string_list("l") == ["x"]
    assert arguments.get_optional_string("n") is None
    assert arguments.get_int_or_default("missing", 1) == 1
    assert "n" not in arguments


def test_non_integer_number_is_rejected():
    with pytest.raises(LocalValidationError, match="must be an integer"):
        Arguments({"p": 1.5}).get_optional_integer("p")


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

def test_unauthenticated_call_is_refused_before_validation_and_execution():
    tool = RecordingTool()
    result = ToolExecutor(is_authenticated=False).execute(tool, {})
    assert result.is_error
    assert result.text == "Not connected to SonarQube, please provide valid credentials"
    assert tool.calls == 0


def test_anonymous_tool_runs_without_token():
    tool = RecordingTool(anonymous=True)
    result = ToolExecutor(is_authenticated=False).execute(tool, {"key": "k"})
    assert result == Result.success("key=k")


def test_validation_failure_never_executes():
    tool = RecordingTool()
    result = ToolExecutor(is_authenticated=True).execute(tool, None)
    assert result.text == "Invalid tool arguments: Missing required argument: key"
    assert result.is_error
    assert tool.calls == 0


@pytest.mark.parametrize(
    "error, expected",
    [
        (LocalValidationError("Status is unknown: x"), "Invalid tool arguments: Status is unknown: x"),
        (NotFoundError("Error 404 on u", "u"), "An error occurred during the tool execution: Make sure your token is valid."),
        (ForbiddenError("Insufficient privileges", "u"), "An error occurred during the tool execution: SonarQube answered with Insufficient privileges"),
        (NetworkError("Unable to reach SonarQube server at 'x'"), "An error occurred during the tool execution: Unable to reach SonarQube server at 'x'"),
        (RuntimeError("boom"), "An error occurred during the tool execution: boom"),
    ],
)
def test_errors_become_failure_results(error, expected):
    result = ToolExecutor(is_authenticated=True).execute(RecordingTool(raises=error), {"key": "k"})
    assert result == Result.failure(expected)
    assert "Traceback" not in result.text


def test_result_converts_to_call_tool_result():
    converted = Result.failure("nope").to_call_tool_result()
    assert converted.isError
    assert converted.content[0].text == "nope"


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def test_pagination_banner():
    banner = pagination_banner(Paging(page_index=2, page_size=10, total=25), "issues")
    assert banner == (
        "This response is paginated and this is the page 2 out of 3 total pages. "
        "There is a maximum of 10 issues per page."
    )
    assert pagination_banner(None, "issues") is None
    assert pagination_banner(Paging(page_index=1, page_size=0, total=3), "issues") is None


def test_render_bool():
    assert render_bool(True) == "true"
    assert render_bool(None) == "false"
