"""CLI entry point, command definitions using Click.

Commands:
    serve         Start the MCP server on stdio
    init          Generate a template config file
    tools         Print the tools the server would register, as JSON
    check         Probe the SonarQube server and print its version
    sync-plugins  Synchronize the local analyzer plugins once
"""

import functools
import json
import sys

import click

from sonarqube_mcp import __version__


# ---------------------------------------------------------------------------
# Helpers shared by all commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load config and set up logging. Exits on error."""
    from sonarqube_mcp.config import ConfigError, load
    from sonarqube_mcp.log import configure_logging

    obj = ctx.obj
    try:
        config = load(obj["config_path"])
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)

    level = "DEBUG" if obj["verbose"] else config.log_level
    log_file = config.log_file_path if obj.get("log_to_file") else None
    logger = configure_logging(log_file, level)
    logger.debug("Using SonarQube at {}", config.url)
    return config, logger


def _make_server(ctx: click.Context):
    from sonarqube_mcp.server import SonarQubeMcpServer

    config, logger = _load_config(ctx)
    return SonarQubeMcpServer(config, logger=logger)


def _handle_errors(func):
    """Decorator that catches SonarQube exceptions and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from sonarqube_mcp.serverapi.errors import (
            NetworkError,
            PluginSynchronizationError,
            SonarQubeError,
            UnauthorizedError,
            UnsupportedPlatformError,
        )

        try:
            return func(*args, **kwargs)
        except UnsupportedPlatformError as exc:
            click.echo(f"Unsupported platform: {exc}", err=True)
            sys.exit(1)
        except UnauthorizedError as exc:
            click.echo(f"Authentication error: {exc}", err=True)
            sys.exit(1)
        except NetworkError as exc:
            click.echo(f"Network error: {exc}", err=True)
            sys.exit(1)
        except PluginSynchronizationError as exc:
            click.echo(f"Plugin error: {exc}", err=True)
            sys.exit(1)
        except SonarQubeError as exc:
            click.echo(f"SonarQube error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to the configuration file (default: sonarqube-mcp.yaml if present).")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable debug logging on stderr.")
@click.version_option(__version__, prog_name="sonarqube-mcp")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """SonarQube MCP server: expose SonarQube to AI agents over the Model Context Protocol."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------

@cli.command("serve")
@click.pass_context
@_handle_errors
def serve_command(ctx: click.Context) -> None:
    """Start the MCP server on stdin/stdout."""
    import asyncio

    ctx.obj["log_to_file"] = True
    server = _make_server(ctx)
    try:
        server.start()
        asyncio.run(server.serve_stdio())
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="sonarqube-mcp.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template sonarqube-mcp.yaml file."""
    from sonarqube_mcp.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your server URL, organization, token and storage path.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# tools
# ---------------------------------------------------------------------------

@cli.command("tools")
@click.option("--pretty", is_flag=True, default=False, help="Pretty-print the JSON output.")
@click.pass_context
@_handle_errors
def tools_command(ctx: click.Context, pretty: bool) -> None:
    """Print the tools that would be registered, with their input schemas."""
    server = _make_server(ctx)
    try:
        tools = server.assemble_tools()
    finally:
        server.shutdown()
    data = [
        {
            "name": tool.definition.name,
            "description": tool.definition.description,
            "inputSchema": tool.definition.input_schema(),
            "requiresAuthentication": tool.definition.requires_authentication,
        }
        for tool in tools
    ]
    click.echo(json.dumps(data, indent=2 if pretty else None, ensure_ascii=False))


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

@cli.command("check")
@click.pass_context
@_handle_errors
def check_command(ctx: click.Context) -> None:
    """Probe the SonarQube server anonymously and print its status and version."""
    server = _make_server(ctx)
    try:
        status = server.server_api.system.status()
        click.echo(f"SonarQube at {server.config.url}")
        click.echo(f"Status:  {status.status}")
        click.echo(f"Version: {status.version}")
        server.version_checker.check_version_is_supported()
        if not server.server_api.is_authenticated:
            click.echo("No token configured: only anonymous tools will work.", err=True)
    finally:
        server.shutdown()


# ---------------------------------------------------------------------------
# sync-plugins
# ---------------------------------------------------------------------------

@cli.command("sync-plugins")
@click.pass_context
@_handle_errors
def sync_plugins_command(ctx: click.Context) -> None:
    """Download missing analyzer plugins, remove orphans and list enabled languages."""
    from sonarqube_mcp.plugins import PluginsSynchronizer

    server = _make_server(ctx)
    try:
        result = PluginsSynchronizer(server.server_api, server.config.plugins_path).synchronize()
    finally:
        server.shutdown()
    click.echo(f"Plugins directory: {server.config.plugins_path}")
    click.echo(f"Downloaded: {', '.join(result.downloaded) or 'none'}")
    click.echo(f"Removed:    {', '.join(result.removed) or 'none'}")
    languages = sorted(language.name for language in result.enabled_languages)
    click.echo(f"Enabled languages: {', '.join(languages) or 'none'}")
