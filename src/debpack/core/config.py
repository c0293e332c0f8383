"""Configuration resolver with 4-level priority.

Priority (highest to lowest):
1. CLI arguments
2. Environment variables (DEBPACK_*)
3. Config files (user > system)
4. Defaults
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from debpack.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"
DEFAULT_COMPRESS_LEVEL = 9

# https://reproducible-builds.org/specs/source-date-epoch/
SOURCE_DATE_EPOCH_ENV = "SOURCE_DATE_EPOCH"


@dataclass
class ConfigSource:
    """Represents where a config value came from."""

    value: Any
    source: str  # 'cli' | 'env' | 'user_config' | 'system_config' | 'default'


@dataclass(frozen=True)
class LoggingPolicy:
    """Resolved, immutable logging policy."""

    level_name: str  # quiet | normal | verbose | debug
    emit_info: bool
    emit_verbose: bool
    emit_debug: bool
    color: bool
    source: ConfigSource


class ConfigResolver:
    """Resolve configuration with strict 4-level priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'build': {'compress_level': 6}},
            user_config_path=Path('~/.config/debpack/config.yaml')
        )

        level, source = resolver.resolve('build.compress_level')
        # level = 6, source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Arguments from CLI (highest priority)
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/debpack/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/debpack/config.yaml")
        self.defaults = defaults if defaults is not None else self._default_config()

        self._user_config: dict[str, Any] | None = None
        self._system_config: dict[str, Any] | None = None

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (supports dot notation: 'logging.level')

        Returns:
            (value, source) tuple

        Raises:
            ConfigError: If key not found in any source
        """
        value = self._from_cli(key)
        if value is not None:
            return value, "cli"

        value = self._from_env(key)
        if value is not None:
            return value, "env"

        value = self._from_user_config(key)
        if value is not None:
            return value, "user_config"

        value = self._from_system_config(key)
        if value is not None:
            return value, "system_config"

        value = self._from_defaults(key)
        if value is not None:
            return value, "default"

        raise ConfigError(f"Config key '{key}' not found in any source")

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level.

        Allowed values (after normalization): quiet | normal | verbose | debug.
        Falls back to DEFAULT_LOGGING_LEVEL when no source provides the key.

        Raises:
            ConfigError: If the resolved value is invalid.
        """
        level, _src = self._resolve_logging_level_and_source()
        return level

    def resolve_logging_policy(self) -> LoggingPolicy:
        """Resolve the logging policy without touching runtime logging state."""
        level_name, src = self._resolve_logging_level_and_source()
        color = self._try_resolve_value("logging.color")
        return LoggingPolicy(
            level_name=level_name,
            emit_info=level_name != "quiet",
            emit_verbose=level_name in ("verbose", "debug"),
            emit_debug=level_name == "debug",
            color=True if color is None else _as_bool("logging.color", color[0]),
            source=src,
        )

    def resolve_compress_level(self) -> int:
        """Resolve build.compress_level as a gzip level in 0..9."""
        key = "build.compress_level"
        found = self._try_resolve_value(key)
        if found is None:
            return DEFAULT_COMPRESS_LEVEL
        level = _as_int(key, found[0])
        if not 0 <= level <= 9:
            raise ConfigError(f"Config key '{key}' must be between 0 and 9, got {level}")
        return level

    def resolve_build_timestamp(self) -> int:
        """Resolve the build timestamp as epoch seconds.

        Order: build.timestamp (any source), then SOURCE_DATE_EPOCH, then now.
        """
        key = "build.timestamp"
        found = self._try_resolve_value(key)
        if found is not None:
            value = _as_int(key, found[0])
        else:
            raw = os.environ.get(SOURCE_DATE_EPOCH_ENV)
            if raw is None or raw.strip() == "":
                return int(time.time())
            value = _as_int(SOURCE_DATE_EPOCH_ENV, raw)
        if value < 0:
            raise ConfigError(f"Build timestamp must not be negative, got {value}")
        return value

    def resolve_output_dir(self) -> Path:
        """Resolve output.dir."""
        key = "output.dir"
        found = self._try_resolve_value(key)
        if found is None:
            return Path(".")
        if not isinstance(found[0], str) or found[0].strip() == "":
            raise ConfigError(f"Config key '{key}' must be a non-empty path string")
        return Path(found[0]).expanduser()

    def _resolve_logging_level_and_source(self) -> tuple[str, ConfigSource]:
        key = "logging.level"
        found = self._try_resolve_value(key)
        if found is None:
            return DEFAULT_LOGGING_LEVEL, ConfigSource(
                value=DEFAULT_LOGGING_LEVEL,
                source="default",
            )

        value, source = found
        norm = self._normalize_logging_level(key, value)
        return norm, ConfigSource(value=norm, source=source)

    def _try_resolve_value(self, key: str) -> tuple[Any, str] | None:
        try:
            return self.resolve(key)
        except ConfigError as e:
            if "not found in any source" in str(e):
                return None
            raise

    def _normalize_logging_level(self, key: str, value: Any) -> str:
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")

        norm = value.strip().lower()
        if norm == "":
            raise ConfigError(f"Config key '{key}' must not be empty")

        if norm not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}. Allowed values: {allowed}")

        return norm

    def _from_cli(self, key: str) -> Any | None:
        return self._get_nested(self.cli_args, key)

    def _from_env(self, key: str) -> Any | None:
        """Get value from environment variables.

        Environment variable format: DEBPACK_KEY_NAME
        Example: DEBPACK_BUILD_COMPRESS_LEVEL, DEBPACK_OUTPUT_DIR
        """
        env_key = f"DEBPACK_{key.upper().replace('.', '_')}"
        return os.environ.get(env_key)

    def _from_user_config(self, key: str) -> Any | None:
        return self._get_nested(self._get_user_config(), key)

    def _from_system_config(self, key: str) -> Any | None:
        return self._get_nested(self._get_system_config(), key)

    def _from_defaults(self, key: str) -> Any | None:
        return self._get_nested(self.defaults, key)

    def _get_user_config(self) -> dict[str, Any]:
        """Load user config file (cached)."""
        if self._user_config is None:
            self._user_config = self._load_yaml(self.user_config_path)
        return self._user_config

    def _get_system_config(self) -> dict[str, Any]:
        """Load system config file (cached)."""
        if self._system_config is None:
            self._system_config = self._load_yaml(self.system_config_path)
        return self._system_config

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def _get_nested(self, data: dict[str, Any], key: str) -> Any | None:
        """Get nested value using dot notation.

        Example:
            data = {'build': {'compress_level': 6}}
            _get_nested(data, 'build.compress_level') -> 6
        """
        current: Any = data

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None

        return current

    @staticmethod
    def _default_config() -> dict[str, Any]:
        """Default configuration."""
        return {
            "logging": {
                "level": DEFAULT_LOGGING_LEVEL,
                "color": True,
            },
            "build": {
                "compress_level": DEFAULT_COMPRESS_LEVEL,
                # None means SOURCE_DATE_EPOCH or the current time.
                "timestamp": None,
            },
            "output": {
                "dir": ".",
            },
        }


def _as_int(key: str, value: Any) -> int:
    # Environment values arrive as strings.
    if isinstance(value, bool):
        raise ConfigError(f"Config key '{key}' must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigError(f"Config key '{key}' must be an int, got {value!r}")


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false", "1", "0"}:
        return value.strip().lower() in {"true", "1"}
    raise ConfigError(f"Config key '{key}' must be a bool, got {value!r}")
