"""sonarqube-mcp: expose SonarQube Server and SonarQube Cloud to AI agents over MCP."""

__version__ = "0.1.0"
