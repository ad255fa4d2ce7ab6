"""MCP tools: one class per operation, each exposing ``definition`` and ``execute``."""

from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, Tool, ToolDefinition, ToolExecutor

__all__ = ["Arguments", "Result", "SchemaBuilder", "Tool", "ToolDefinition", "ToolExecutor"]
