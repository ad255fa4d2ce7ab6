from sonarqube_mcp.plugins.languages import Language, languages_for_plugin
from sonarqube_mcp.plugins.synchronizer import PluginsSynchronizer, SynchronizedAnalyzers

__all__ = ["Language", "PluginsSynchronizer", "SynchronizedAnalyzers", "languages_for_plugin"]
