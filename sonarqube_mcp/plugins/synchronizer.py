"""Keep the local plugin directory in line with the plugins installed on the server.

Usage:
    analyzers = PluginsSynchronizer(server_api, config.plugins_path).synchronize()
    analyzers.enabled_languages   # frozenset of Language

A run downloads every locally-supported plugin that is missing, deletes jars
the server no longer reports, and lists what is left. Downloads go to a
temporary file in the same directory and are renamed once complete, so a
partially transferred jar never appears under its final name.
"""

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from loguru import logger as default_logger

from sonarqube_mcp.plugins.languages import Language, languages_for_plugin
from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.errors import PluginSynchronizationError
from sonarqube_mcp.serverapi.plugins import InstalledPlugin


@dataclass(frozen=True)
class SynchronizedAnalyzers:
    plugin_paths: frozenset[Path]
    enabled_languages: frozenset[Language]
    downloaded: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()


def is_plain_file_name(name: str) -> bool:
    return name not in ("", ".", "..") and "/" not in name and "\\" not in name and Path(name).name == name


class PluginsSynchronizer:
    def __init__(self, server_api: ServerApi, plugins_path: Path, logger=None) -> None:
        self._api = server_api
        self.plugins_path = Path(plugins_path)
        self._logger = logger or default_logger

    def synchronize(self) -> SynchronizedAnalyzers:
        server_plugins = [p for p in self._api.plugins.installed().plugins if self._is_usable(p)]
        downloaded = self._download_missing(server_plugins)
        removed = self._cleanup_unknown(server_plugins)
        return self._list_local(server_plugins, downloaded, removed)

    def _is_usable(self, plugin: InstalledPlugin) -> bool:
        if not plugin.key or not plugin.filename:
            return False
        # The file name comes from the server and must stay inside the plugins directory.
        if not is_plain_file_name(plugin.filename):
            self._logger.warning("Ignoring plugin '{}' with unsafe file name '{}'", plugin.key, plugin.filename)
            return False
        return True

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _download_missing(self, server_plugins: list[InstalledPlugin]) -> tuple[str, ...]:
        try:
            self.plugins_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PluginSynchronizationError(
                f"Unable to create plugins directory '{self.plugins_path}': {exc}"
            ) from exc

        downloaded = []
        for plugin in server_plugins:
            target = self.plugins_path / plugin.filename
            if plugin.sonar_lint_supported and not target.exists():
                self._download(plugin.key, target)
                downloaded.append(plugin.filename)
        return tuple(downloaded)

    def _download(self, plugin_key: str, target: Path) -> None:
        with self._api.plugins.download(plugin_key) as response:
            if not response.is_successful:
                raise PluginSynchronizationError(
                    f"Failed to download plugin '{plugin_key}': HTTP status {response.code}"
                )
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=self.plugins_path)
            try:
                with os.fdopen(fd, "wb") as out:
                    shutil.copyfileobj(response.body_as_stream(), out)
                os.replace(tmp_name, target)
            except Exception as exc:
                Path(tmp_name).unlink(missing_ok=True)
                raise PluginSynchronizationError(f"Error downloading plugin '{plugin_key}': {exc}") from exc
        self._logger.info("Successfully downloaded plugin '{}' to {}", plugin_key, target)

    def _cleanup_unknown(self, server_plugins: list[InstalledPlugin]) -> tuple[str, ...]:
        known = {plugin.filename for plugin in server_plugins}
        removed = []
        for local_file in sorted(self.plugins_path.glob("*.jar")):
            if local_file.name in known:
                continue
            try:
                local_file.unlink()
            except OSError as exc:
                raise PluginSynchronizationError(
                    f"Failed to remove unknown plugin file '{local_file}': {exc}"
                ) from exc
            self._logger.info("Removed unknown plugin file: {}", local_file)
            removed.append(local_file.name)
        return tuple(removed)

    def _list_local(
        self,
        server_plugins: list[InstalledPlugin],
        downloaded: tuple[str, ...],
        removed: tuple[str, ...],
    ) -> SynchronizedAnalyzers:
        paths: set[Path] = set()
        languages: set[Language] = set()
        for plugin in server_plugins:
            path = self.plugins_path / plugin.filename
            supported = languages_for_plugin(plugin.key)
            if plugin.sonar_lint_supported and supported is not None and path.exists():
                paths.add(path)
                languages.update(supported)

        self._logger.info(
            "Found {} plugins, enabled languages: {}",
            len(paths),
            ", ".join(sorted(language.name for language in languages)) or "none",
        )
        return SynchronizedAnalyzers(frozenset(paths), frozenset(languages), downloaded, removed)
