"""Settings for planroom: YAML file, environment, and command-line overrides."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import (
    BrowserSettings,
    CLIOptions,
    LoggingSettings,
    PlanroomConfig,
    StorageSettings,
)
from .resolver import ENV_PREFIX, flatten_for_env, parse_env_overrides, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.planroom/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # planroom configuration
    # Edit by hand or with `planroom config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Read, validate, and persist ``config.yaml``."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config_path: Settings file; defaults to ``~/.planroom/config.yaml``.
            env: Environment used for ``PLANROOM__`` overrides; defaults to ``os.environ``.
        """
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = False,
    ) -> PlanroomConfig:
        """Return effective settings: defaults < file < environment < CLI.

        Raises:
            ConfigError: If the file is unreadable or a value fails validation.
        """
        if ensure_file:
            self.ensure_exists()
        return resolve_with_precedence(
            defaults=PlanroomConfig(),
            file_overrides=self._read_file(),
            env_overrides=parse_env_overrides(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        return self._read_file()

    def ensure_exists(self) -> Path:
        """Write a file holding the defaults when none exists yet."""
        if not self._config_path.exists():
            self.save(PlanroomConfig())
        return self._config_path

    def save(self, config: PlanroomConfig | Mapping[str, Any]) -> None:
        if isinstance(config, PlanroomConfig):
            data = config.model_dump(mode="json")
        else:
            data = dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def set_value(self, key: str, raw_value: str) -> PlanroomConfig:
        """Persist one dotted ``key`` after validating the resulting file.

        Args:
            key: Dotted path such as ``browser.file_list_limit``.
            raw_value: YAML literal to store.

        Returns:
            PlanroomConfig: Settings resolved from the updated file alone.

        Raises:
            ConfigError: If the key is empty, the value does not parse, or the
                updated file would not validate. Nothing is written then.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError("KEY must be a dotted path such as 'browser.file_list_limit'.")
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse value: {exc}") from exc

        data = self._read_file()
        node = data
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(f"Cannot assign into '{segment}'; it is not a mapping.")
            node = child
        node[segments[-1]] = value

        resolved = resolve_with_precedence(defaults=PlanroomConfig(), file_overrides=data)
        self.save(data)
        return resolved

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "BrowserSettings",
    "CLIOptions",
    "ConfigError",
    "ConfigManager",
    "LoggingSettings",
    "PlanroomConfig",
    "StorageSettings",
    "flatten_for_env",
    "parse_env_overrides",
    "resolve_with_precedence",
]
