from sonarqube_mcp.cli import cli

cli()
