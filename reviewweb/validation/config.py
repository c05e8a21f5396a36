"""
ReviewWeb Configuration - Configuration loading and validation.

This module provides the Config class for managing adapter configuration
from global (~/.reviewweb/config.yaml) and local (.reviewweb/config.yaml)
sources, with environment variables (and a ``.env`` file) on top.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

DEFAULT_BASE_URL = "https://reviewweb.site/api/v1"

API_KEY_ENV_VARS = ("REVIEWWEBSITE_API_KEY", "REVIEWWEBSITE_ACCESS_KEY")


class ConfigError(Exception):
    """Raised when there's a configuration error."""

    pass


class ApiConfig(BaseModel):
    """Configuration for the remote ReviewWeb.site API."""

    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None  # seconds; None waits as long as the server does


class LoggingConfig(BaseModel):
    """Configuration for local logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class ServerConfig(BaseModel):
    """Configuration for the MCP server front end."""

    name: str = "reviewweb"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080


class ReviewWebConfig(BaseModel):
    """Complete adapter configuration schema."""

    api_key: Optional[str] = None
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


class Config:
    """
    Adapter configuration manager.

    Handles loading, merging, and validating configuration from:
    - Global: ~/.reviewweb/config.yaml
    - Local: .reviewweb/config.yaml (project-specific)
    - Environment: REVIEWWEBSITE_* variables

    Local configuration overrides global configuration, and the environment
    overrides both. A Config is built once at startup and handed to the
    controller; nothing reads the environment behind its back.

    Example:
        >>> config = Config.load()
        >>> config.api_key
        'rw_...'
    """

    GLOBAL_CONFIG_DIR = Path.home() / ".reviewweb"
    LOCAL_CONFIG_DIR = Path(".reviewweb")

    def __init__(
        self,
        global_config: Optional[Dict[str, Any]] = None,
        local_config: Optional[Dict[str, Any]] = None,
        env_config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize Config.

        Args:
            global_config: Global configuration dictionary.
            local_config: Local (project) configuration dictionary.
            env_config: Values derived from environment variables.
        """
        self._global_config = global_config or {}
        self._local_config = local_config or {}
        self._env_config = env_config or {}
        self._merged: Optional[ReviewWebConfig] = None

    @classmethod
    def load(cls, environ: Optional[Dict[str, str]] = None) -> "Config":
        """
        Load configuration from default locations.

        Args:
            environ: Environment to read instead of ``os.environ``. When omitted,
                a ``.env`` file in the working directory is loaded first.

        Returns:
            Config instance with loaded configuration.
        """
        if environ is None:
            load_dotenv()
            environ = dict(os.environ)

        global_config = cls._load_yaml(cls.GLOBAL_CONFIG_DIR / "config.yaml")
        local_config = cls._load_yaml(cls._find_local_config())

        return cls(
            global_config=global_config,
            local_config=local_config,
            env_config=cls.from_environ(environ),
        )

    @classmethod
    def _load_yaml(cls, path: Optional[Path]) -> Dict[str, Any]:
        """Load YAML file if it exists."""
        if path is None or not path.exists():
            return {}

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}")

    @classmethod
    def _find_local_config(cls) -> Optional[Path]:
        """Find the local config file by walking up the directory tree."""
        current = Path.cwd()
        while current != current.parent:
            config_path = current / cls.LOCAL_CONFIG_DIR / "config.yaml"
            if config_path.exists():
                return config_path
            current = current.parent
        return None

    @staticmethod
    def from_environ(environ: Dict[str, str]) -> Dict[str, Any]:
        """Translate REVIEWWEBSITE_* variables into a config dictionary."""
        config: Dict[str, Any] = {}

        for var in API_KEY_ENV_VARS:
            if environ.get(var):
                config["api_key"] = environ[var]
                break

        api: Dict[str, Any] = {}
        if environ.get("REVIEWWEBSITE_BASE_URL"):
            api["base_url"] = environ["REVIEWWEBSITE_BASE_URL"]
        if environ.get("REVIEWWEBSITE_TIMEOUT"):
            api["timeout"] = environ["REVIEWWEBSITE_TIMEOUT"]
        if api:
            config["api"] = api

        if environ.get("REVIEWWEBSITE_LOG_LEVEL"):
            config["logging"] = {"level": environ["REVIEWWEBSITE_LOG_LEVEL"].upper()}

        return config

    def get_merged_config(self) -> Dict[str, Any]:
        """Get the merged configuration as a dictionary."""
        merged = self._deep_merge(self._global_config.copy(), self._local_config)
        return self._deep_merge(merged, self._env_config)

    @property
    def merged(self) -> ReviewWebConfig:
        """Get the validated merged configuration."""
        if self._merged is None:
            try:
                merged_dict = self.get_merged_config()
                self._merged = ReviewWebConfig(**merged_dict)
            except ValidationError as e:
                raise ConfigError(f"Invalid configuration: {e}")
        return self._merged

    @property
    def api_key(self) -> Optional[str]:
        """The process-wide API key, if any source provides one."""
        return self.merged.api_key or None

    @property
    def base_url(self) -> str:
        return self.merged.api.base_url.rstrip("/")

    @property
    def timeout(self) -> Optional[float]:
        return self.merged.api.timeout

    def set(self, key: str, value: Any) -> None:
        """
        Override a dotted key (e.g. ``logging.level``) for this process only.

        Used by the CLI for flags such as ``--log-level``.
        """
        target = self._env_config
        *parents, leaf = key.split(".")
        for part in parents:
            target = target.setdefault(part, {})
        target[leaf] = value
        self._merged = None  # Reset cache

    def set_api_key(self, api_key: str, global_: bool = False) -> None:
        """
        Store the API key in the global or local file-backed layer.

        Args:
            api_key: The ReviewWeb.site API key.
            global_: Whether to set globally or locally.
        """
        config = self._global_config if global_ else self._local_config
        config["api_key"] = api_key
        self._merged = None  # Reset cache

    def save(self, global_: bool = False) -> Path:
        """Save the file-backed configuration (never the environment layer)."""
        if global_:
            path = self.GLOBAL_CONFIG_DIR / "config.yaml"
            self._save_yaml(path, self._global_config)
        else:
            path = self._find_local_config() or self.LOCAL_CONFIG_DIR / "config.yaml"
            self._save_yaml(path, self._local_config)
        return path

    def _save_yaml(self, path: Path, data: Dict[str, Any]) -> None:
        """Save data to a YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
