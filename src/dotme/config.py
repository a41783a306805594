"""
JSON-backed store for repository aliases and default filter patterns.

The file lives at `~/.dotme/config.json` unless `DOTME_CONFIG_DIR` points
elsewhere. A missing file reads as an empty configuration; the directory is
created on the first write.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

from dotme import DotmeError
from dotme.patterns import FilterConfig

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "DOTME_CONFIG_DIR"
CONFIG_FILENAME = "config.json"


class ConfigError(DotmeError):
    """The configuration file cannot be read, parsed or written."""


class AliasExistsError(DotmeError):
    """An alias with this name is already saved."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"alias '{alias}' already exists")


class AliasNotFoundError(DotmeError):
    """No alias with this name is saved."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"alias '{alias}' not found")


@dataclass
class _ConfigData:
    repositories: dict[str, str] = field(default_factory=dict)
    default_patterns: FilterConfig = field(default_factory=FilterConfig)


def default_config_path() -> Path:
    """Return the config file path, honoring `DOTME_CONFIG_DIR`.

    Raises:
        ConfigError: If no override is set and the home directory is unknown.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override) / CONFIG_FILENAME
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigError(
            f"cannot determine home directory; set {CONFIG_DIR_ENV}: {exc}"
        ) from exc
    return home / ".dotme" / CONFIG_FILENAME


def _string_list(value: Any, key: str, path: Path) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' in {path} must be a list of strings")
    return tuple(cast(list[str], value))


def _parse_config_data(data: Any, path: Path) -> _ConfigData:
    """Validate decoded JSON and convert it to `_ConfigData`."""
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    data = cast(dict[str, Any], data)

    repositories = data.get("repositories")
    if repositories is None:
        repositories = {}
    if not isinstance(repositories, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in repositories.items()
    ):
        raise ConfigError(f"'repositories' in {path} must map names to URLs")

    patterns = data.get("default_patterns")
    if patterns is None:
        patterns = {}
    if not isinstance(patterns, dict):
        raise ConfigError(f"'default_patterns' in {path} must be an object")
    patterns = cast(dict[str, Any], patterns)

    return _ConfigData(
        repositories=dict(cast(dict[str, str], repositories)),
        default_patterns=FilterConfig(
            _string_list(patterns.get("include_patterns"), "include_patterns", path),
            _string_list(patterns.get("exclude_patterns"), "exclude_patterns", path),
        ),
    )


def _serialize(config: _ConfigData) -> dict[str, Any]:
    patterns: dict[str, list[str]] = {}
    if config.default_patterns.include_patterns:
        patterns["include_patterns"] = list(config.default_patterns.include_patterns)
    if config.default_patterns.exclude_patterns:
        patterns["exclude_patterns"] = list(config.default_patterns.exclude_patterns)
    return {"repositories": config.repositories, "default_patterns": patterns}


class ConfigStore:
    """Aliases and default patterns persisted in one JSON file.

    Every operation reads the file afresh; mutating operations write it
    back immediately.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_config_path()

    def _load(self) -> _ConfigData:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No config file at %s, using empty config", self.path)
            return _ConfigData()
        except OSError as exc:
            raise ConfigError(
                f"failed to read config file {self.path}: {exc}"
            ) from exc

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"failed to parse config file {self.path}: {exc}"
            ) from exc
        return _parse_config_data(data, self.path)

    def _save(self, config: _ConfigData) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(_serialize(config), indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise ConfigError(
                f"failed to write config file {self.path}: {exc}"
            ) from exc
        logger.debug("Wrote config file %s", self.path)

    def save_alias(self, alias: str, url: str) -> None:
        """Save *url* under *alias*.

        Raises:
            AliasExistsError: If *alias* is already saved.
        """
        config = self._load()
        if alias in config.repositories:
            raise AliasExistsError(alias)
        config.repositories[alias] = url
        self._save(config)

    def get_alias(self, alias: str) -> str:
        """Return the URL saved under *alias*.

        Raises:
            AliasNotFoundError: If *alias* is not saved.
        """
        config = self._load()
        try:
            return config.repositories[alias]
        except KeyError:
            raise AliasNotFoundError(alias) from None

    def list_aliases(self) -> dict[str, str]:
        """Return a copy of all aliases, sorted by name."""
        repositories = self._load().repositories
        return {name: repositories[name] for name in sorted(repositories)}

    def delete_alias(self, alias: str) -> None:
        """Remove *alias*.

        Raises:
            AliasNotFoundError: If *alias* is not saved.
        """
        config = self._load()
        if alias not in config.repositories:
            raise AliasNotFoundError(alias)
        del config.repositories[alias]
        self._save(config)

    def get_default_patterns(self) -> FilterConfig:
        """Return the patterns used when none are given on the command line."""
        return self._load().default_patterns

    def set_default_patterns(self, patterns: FilterConfig) -> None:
        """Replace the saved default patterns."""
        config = self._load()
        config.default_patterns = patterns
        self._save(config)
