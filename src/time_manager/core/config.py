"""Configuration management for Time Manager."""

import copy
import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]
from jsonschema import ValidationError, validate  # type: ignore[import-untyped]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigManager:
    """Manage the YAML configuration file."""

    DEFAULT_CONFIG = {
        "version": "1.0",
        "general": {
            "data_dir": "~/.time-manager/data",
        },
        "auth": {
            "secret_key": None,
            "access_token_minutes": 60,
            "refresh_token_days": 7,
        },
        "server": {
            "host": "localhost",
            "port": 3000,
            "cors": {
                "enabled": True,
                "origins": ["http://localhost:3000", "http://localhost:5173"],
            },
        },
        "logging": {
            "level": "INFO",
            "access_log": True,
        },
    }

    CONFIG_SCHEMA = {
        "type": "object",
        "properties": {
            "version": {"type": "string"},
            "general": {
                "type": "object",
                "properties": {
                    "data_dir": {"type": "string"},
                },
            },
            "auth": {
                "type": "object",
                "properties": {
                    "secret_key": {"type": ["string", "null"]},
                    "access_token_minutes": {"type": "integer", "minimum": 1, "maximum": 10080},
                    "refresh_token_days": {"type": "integer", "minimum": 1, "maximum": 365},
                },
            },
            "server": {
                "type": "object",
                "properties": {
                    "host": {"type": "string"},
                    "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                    "cors": {
                        "type": "object",
                        "properties": {
                            "enabled": {"type": "boolean"},
                            "origins": {"type": "array", "items": {"type": "string"}},
                        },
                    },
                },
            },
            "logging": {
                "type": "object",
                "properties": {
                    "level": {
                        "type": "string",
                        "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
                    },
                    "access_log": {"type": "boolean"},
                },
            },
        },
        "required": ["version"],
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. Defaults to ~/.time-manager/config.yml
        """
        if config_path is None:
            config_path = Path.home() / ".time-manager" / "config.yml"
        self.config_path = config_path
        self._config: dict[str, Any] = {}
        self._load_or_create()

    def _load_or_create(self) -> None:
        """Load existing config or create default."""
        if self.config_path.exists():
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f) or {}
            self._config = self._merge_with_defaults(loaded_config)
            try:
                self.validate()
            except ValueError as e:
                # Keep the broken file around and fall back to defaults
                backup_path = self.config_path.with_suffix(".yml.backup")
                self.config_path.rename(backup_path)
                self._config = copy.deepcopy(self.DEFAULT_CONFIG)
                self.save()
                raise ValueError(
                    f"Config validation failed, backed up to {backup_path}. "
                    f"Using defaults. Error: {e}"
                )
        else:
            self._config = copy.deepcopy(self.DEFAULT_CONFIG)
            self.save()

    def _merge_with_defaults(self, config: dict[str, Any]) -> dict[str, Any]:
        result = copy.deepcopy(self.DEFAULT_CONFIG)
        self._deep_merge(result, config)
        return result

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Example:
            >>> config.get('server.port')
            3000
            >>> config.get('nonexistent.key', 'default')
            'default'
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation and save.

        Raises:
            ValueError: If configuration is invalid after setting
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
        self.validate()
        self.save()

    def validate(self) -> bool:
        """Validate configuration against schema.

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            validate(instance=self._config, schema=self.CONFIG_SCHEMA)
            return True
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e.message}")

    def save(self) -> None:
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self._config, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    def to_dict(self) -> dict[str, Any]:
        """Get a copy of the full configuration."""
        return copy.deepcopy(self._config)

    def ensure_secret_key(self) -> str:
        """Return the token signing key, generating and saving one if missing."""
        secret_key: Optional[str] = self.get("auth.secret_key")
        if not secret_key:
            secret_key = secrets.token_urlsafe(32)
            self.set("auth.secret_key", secret_key)
        return secret_key


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the configuration, built once at startup."""

    data_dir: Path
    secret_key: str
    access_token_minutes: int = 60
    refresh_token_days: int = 7
    host: str = "localhost"
    port: int = 3000
    cors_enabled: bool = True
    cors_origins: tuple[str, ...] = ()
    log_level: str = "INFO"
    access_log: bool = True

    @classmethod
    def from_config(cls, config: ConfigManager) -> "Settings":
        """Freeze a configuration manager into settings.

        A signing key is generated and persisted if the config has none.
        """
        return cls(
            data_dir=Path(config.get("general.data_dir", "~/.time-manager/data")).expanduser(),
            secret_key=config.ensure_secret_key(),
            access_token_minutes=config.get("auth.access_token_minutes", 60),
            refresh_token_days=config.get("auth.refresh_token_days", 7),
            host=config.get("server.host", "localhost"),
            port=config.get("server.port", 3000),
            cors_enabled=config.get("server.cors.enabled", True),
            cors_origins=tuple(config.get("server.cors.origins", [])),
            log_level=config.get("logging.level", "INFO"),
            access_log=config.get("logging.access_log", True),
        )


def setup_logging(settings: Settings) -> None:
    """Configure the package logger once.

    Repeated calls only adjust the level.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    package_logger = logging.getLogger("time_manager")
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
