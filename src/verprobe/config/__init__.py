"""Configuration management for verprobe."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import VerprobeConfig
from .resolver import (
    assign_nested,
    env_overrides_from,
    flatten_for_env,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.verprobe/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # verprobe configuration file
    # Generated automatically; manage via `verprobe config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> VerprobeConfig:
        """Load configuration data from disk, applying precedence rules.

        Args:
            cli_overrides: Dotted-key overrides supplied on the command line.
            include_env: Whether `VERPROBE__*` variables participate.
            ensure_file: Create the file with defaults when it is missing.
            env_overrides: Environment mapping to use instead of the process environment.

        Returns:
            VerprobeConfig: Effective configuration.

        Raises:
            ConfigError: If the file cannot be parsed or the merged values are invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_section = None
        if include_env:
            env = env_overrides if env_overrides is not None else self._env
            env_section = env_overrides_from(env) or None

        return resolve_with_precedence(
            defaults=VerprobeConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_section,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: VerprobeConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, VerprobeConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self._write_file(VerprobeConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
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

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(dict(data), sort_keys=False)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{serialized}", encoding="utf-8"
        )


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "VerprobeConfig",
    "assign_nested",
    "env_overrides_from",
    "flatten_for_env",
    "resolve_with_precedence",
]
