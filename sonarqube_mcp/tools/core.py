"""Tool contract, argument access and the executor that runs tools safely.

A tool is any object with a ``definition`` (a ``ToolDefinition``) and an
``execute(arguments) -> Result`` method. The executor is the only caller of
``execute``: it checks authentication first, then the argument schema, and
turns every exception into a failure ``Result``.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger as default_logger
from mcp import types

from sonarqube_mcp.serverapi.errors import (
    LocalValidationError,
    MissingRequiredArgumentError,
    NotFoundError,
    SonarQubeApiError,
)

NOT_CONNECTED_MESSAGE = "Not connected to SonarQube, please provide valid credentials"
INVALID_ARGUMENTS_PREFIX = "Invalid tool arguments: "
EXECUTION_ERROR_PREFIX = "An error occurred during the tool execution: "


# ---------------------------------------------------------------------------
# Definition and schema builder
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    requires_authentication: bool = True

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": self.properties,
            "required": list(self.required),
            "additionalProperties": False,
        }

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(name=self.name, description=self.description, inputSchema=self.input_schema())


class SchemaBuilder:
    """Fluent builder for a ``ToolDefinition``.

    Usage:
        definition = (
            SchemaBuilder("show_rule", "Shows detailed information about a SonarQube rule")
            .add_required_string_property("key", "The rule key")
            .build()
        )
    """

    def __init__(self, name: str, description: str) -> None:
        self._name = name
        self._description = description
        self._properties: dict[str, dict[str, Any]] = {}
        self._required: list[str] = []
        self._requires_authentication = True

    def add_string_property(self, name: str, description: str) -> "SchemaBuilder":
        self._properties[name] = {"type": "string", "description": description}
        return self

    def add_required_string_property(self, name: str, description: str) -> "SchemaBuilder":
        self._required.append(name)
        return self.add_string_property(name, description)

    def add_number_property(self, name: str, description: str) -> "SchemaBuilder":
        self._properties[name] = {"type": "number", "description": description}
        return self

    def add_boolean_property(self, name: str, description: str) -> "SchemaBuilder":
        self._properties[name] = {"type": "boolean", "description": description}
        return self

    def add_required_boolean_property(self, name: str, description: str) -> "SchemaBuilder":
        self._required.append(name)
        return self.add_boolean_property(name, description)

    def add_array_property(self, name: str, items_type: str, description: str) -> "SchemaBuilder":
        self._properties[name] = {"type": "array", "description": description, "items": {"type": items_type}}
        return self

    def add_required_array_property(self, name: str, items_type: str, description: str) -> "SchemaBuilder":
        self._required.append(name)
        return self.add_array_property(name, items_type, description)

    def add_enum_property(self, name: str, items: list[str], description: str) -> "SchemaBuilder":
        self._properties[name] = {
            "type": "array",
            "description": description,
            "items": {"type": "string", "enum": list(items)},
        }
        return self

    def add_required_enum_property(self, name: str, items: list[str], description: str) -> "SchemaBuilder":
        self._required.append(name)
        return self.add_enum_property(name, items, description)

    def anonymous(self) -> "SchemaBuilder":
        """Mark the tool as usable without a token."""
        self._requires_authentication = False
        return self

    def build(self) -> ToolDefinition:
        missing = [name for name in self._required if name not in self._properties]
        if missing:
            raise ValueError(f"Required properties are not declared: {', '.join(missing)}")
        return ToolDefinition(
            name=self._name,
            description=self._description,
            properties=dict(self._properties),
            required=tuple(self._required),
            requires_authentication=self._requires_authentication,
        )


# ---------------------------------------------------------------------------
# Arguments and results
# ---------------------------------------------------------------------------

class Arguments:
    """Typed read access to the raw argument mapping of a tool call."""

    def __init__(self, raw: dict[str, Any] | None = None) -> None:
        self._raw = dict(raw or {})

    def __contains__(self, name: str) -> bool:
        return self._raw.get(name) is not None

    def get_string_or_throw(self, name: str) -> str:
        value = self._raw.get(name)
        if value is None:
            raise MissingRequiredArgumentError(name)
        return value if isinstance(value, str) else str(value)

    def get_optional_string(self, name: str) -> str | None:
        value = self._raw.get(name)
        if value is None or isinstance(value, (list, dict, bool)):
            return None
        return value if isinstance(value, str) else str(value)

    def get_boolean_or_throw(self, name: str) -> bool:
        value = self.get_optional_boolean(name)
        if value is None:
            raise MissingRequiredArgumentError(name)
        return value

    def get_optional_boolean(self, name: str) -> bool | None:
        value = self._raw.get(name)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return None

    def get_optional_integer(self, name: str) -> int | None:
        value = self._raw.get(name)
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if not value.is_integer():
                raise LocalValidationError(f"Argument '{name}' must be an integer", name)
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as exc:
                raise LocalValidationError(f"Argument '{name}' must be an integer", name) from exc
        return None

    def get_int_or_default(self, name: str, default: int) -> int:
        value = self.get_optional_integer(name)
        return default if value is None else value

    def get_string_list_or_throw(self, name: str) -> list[str]:
        values = self.get_optional_string_list(name)
        if values is None:
            raise MissingRequiredArgumentError(name)
        return values

    def get_optional_string_list(self, name: str) -> list[str] | None:
        value = self._raw.get(name)
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        raise LocalValidationError(f"Argument '{name}' must be an array of strings", name)


@dataclass(frozen=True)
class Result:
    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "Result":
        return cls(text, False)

    @classmethod
    def failure(cls, text: str) -> "Result":
        return cls(text, True)

    def to_call_tool_result(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=self.text)],
            isError=self.is_error,
        )


class Tool(Protocol):
    definition: ToolDefinition

    def execute(self, arguments: Arguments) -> Result:
        ...


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _matches(declared: dict[str, Any], value: Any) -> bool:
    kind = declared.get("type")
    if kind == "string":
        return isinstance(value, str) or _is_number(value)
    if kind == "number":
        return _is_number(value)
    if kind == "boolean":
        return isinstance(value, bool) or (isinstance(value, str) and value.lower() in ("true", "false"))
    if kind == "array":
        if isinstance(value, str):
            return True
        if not isinstance(value, (list, tuple)):
            return False
        item_schema = declared.get("items") or {}
        return all(_matches({"type": item_schema.get("type", "string")}, item) for item in value)
    return True


def validate_arguments(definition: ToolDefinition, raw: dict[str, Any]) -> None:
    """Raise ``LocalValidationError`` if *raw* does not fit *definition*."""
    for name in definition.required:
        if raw.get(name) is None:
            raise MissingRequiredArgumentError(name)
    for name, value in raw.items():
        declared = definition.properties.get(name)
        if declared is None or value is None:
            continue
        if not _matches(declared, value):
            raise LocalValidationError(f"Argument '{name}' must be of type {declared['type']}", name)


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

class ToolExecutor:
    def __init__(self, is_authenticated: bool, logger=None) -> None:
        self._is_authenticated = is_authenticated
        self._logger = logger or default_logger

    def execute(self, tool: Tool, raw_arguments: dict[str, Any] | None) -> Result:
        definition = tool.definition
        if definition.requires_authentication and not self._is_authenticated:
            return Result.failure(NOT_CONNECTED_MESSAGE)
        raw = raw_arguments or {}
        try:
            validate_arguments(definition, raw)
            result = tool.execute(Arguments(raw))
        except LocalValidationError as exc:
            result = Result.failure(INVALID_ARGUMENTS_PREFIX + str(exc))
        except NotFoundError:
            result = Result.failure(EXECUTION_ERROR_PREFIX + "Make sure your token is valid.")
        except SonarQubeApiError as exc:
            result = Result.failure(EXECUTION_ERROR_PREFIX + f"SonarQube answered with {exc}")
        except Exception as exc:
            self._logger.exception("Tool {} failed", definition.name)
            result = Result.failure(EXECUTION_ERROR_PREFIX + str(exc))
        self._logger.debug("Tool {} called, error={}", definition.name, result.is_error)
        return result


def pagination_banner(paging, noun: str) -> str | None:
    """Banner line for a paginated listing, or None when page count is unknown."""
    if paging is None:
        return None
    total_pages = paging.total_pages
    if total_pages is None:
        return None
    return (
        f"This response is paginated and this is the page {paging.page_index} out of {total_pages} "
        f"total pages. There is a maximum of {paging.page_size} {noun} per page."
    )


def render_bool(value: bool | None) -> str:
    return "true" if value else "false"
