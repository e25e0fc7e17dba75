"""Unified configuration management for the application."""
from __future__ import annotations
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from omega_deploy.config.schemas import (
    AppConfig,
    AWSConfig,
    DeploymentConfig,
    ImageLookupConfig,
    LoggingConfig,
    ServerConfig,
)
from omega_deploy.config.utils.env_expansion import expand_config_env_vars
from omega_deploy.domain.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "OMEGA_"
CONFIG_FILE_ENV = "OMEGA_CONFIG_FILE"

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "OMEGA_LOG_LEVEL": ("logging", "level"),
    "OMEGA_LOG_DESTINATION": ("logging", "destination"),
    "OMEGA_LOG_FILE": ("logging", "file_path"),
    "OMEGA_SERVER_HOST": ("server", "host"),
    "OMEGA_SERVER_PORT": ("server", "port"),
    "OMEGA_AWS_REGION": ("aws", "region"),
    "OMEGA_AWS_PROFILE": ("aws", "profile"),
    "OMEGA_AWS_ENDPOINT_URL": ("aws", "endpoint_url"),
    "OMEGA_IMAGE_NAME_PATTERN": ("image_lookup", "name_pattern"),
    "OMEGA_SERVICE_NAME": ("deployment", "service_name"),
    "OMEGA_KEY_NAME": ("deployment", "key_name"),
    "OMEGA_INSTANCE_TYPE": ("deployment", "instance_type"),
}


class ConfigurationManager:
    """
    Single source of truth for application configuration.

    Configuration is assembled lazily from, in increasing precedence:
    - schema defaults
    - an optional JSON or YAML file (``config_file`` or ``OMEGA_CONFIG_FILE``)
    - ``OMEGA_*`` environment variables
    - explicit overrides passed to :meth:`override`

    String values may reference environment variables as ``$VAR``,
    ``${VAR}`` or ``${VAR:default}``.
    """

    def __init__(self, config_file: Optional[str] = None,
                 overrides: Optional[Dict[str, Dict[str, Any]]] = None):
        """Initialize configuration manager with lazy loading."""
        self._config_file = config_file or os.environ.get(CONFIG_FILE_ENV)
        self._overrides: Dict[str, Dict[str, Any]] = overrides or {}
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def override(self, section: str, **values: Any) -> None:
        """Apply explicit overrides, e.g. from command line flags, and reload."""
        with self._lock:
            self._overrides.setdefault(section, {}).update(
                {k: v for k, v in values.items() if v is not None}
            )
            self._app_config = None

    def get_logging_config(self) -> LoggingConfig:
        return self.app_config.logging

    def get_server_config(self) -> ServerConfig:
        return self.app_config.server

    def get_aws_config(self) -> AWSConfig:
        return self.app_config.aws

    def get_image_lookup_config(self) -> ImageLookupConfig:
        return self.app_config.image_lookup

    def get_deployment_config(self) -> DeploymentConfig:
        return self.app_config.deployment

    def _load_app_config(self) -> AppConfig:
        """Load application configuration from sources."""
        raw: Dict[str, Any] = {}
        if self._config_file:
            raw = self._read_config_file(self._config_file)
        raw = expand_config_env_vars(raw)
        self._merge(raw, self._environment_overrides())
        self._merge(raw, self._overrides)
        try:
            config = AppConfig(**raw)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        logger.debug("Configuration loaded from %s", self._config_file or "defaults")
        return config

    @staticmethod
    def _read_config_file(path: str) -> Dict[str, Any]:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.suffix in (".yaml", ".yml"):
                    import yaml
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        return data

    @staticmethod
    def _environment_overrides() -> Dict[str, Dict[str, Any]]:
        overrides: Dict[str, Dict[str, Any]] = {}
        for env_name, (section, field) in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                overrides.setdefault(section, {})[field] = value
        return overrides

    @staticmethod
    def _merge(target: Dict[str, Any], overrides: Dict[str, Dict[str, Any]]) -> None:
        for section, values in overrides.items():
            existing = target.get(section)
            if not isinstance(existing, dict):
                existing = {}
            target[section] = {**existing, **values}


_config_manager: Optional[ConfigurationManager] = None
_config_manager_lock = threading.Lock()


def get_config_manager() -> ConfigurationManager:
    """Process-wide configuration manager, created on first use."""
    global _config_manager
    if _config_manager is None:
        with _config_manager_lock:
            if _config_manager is None:
                _config_manager = ConfigurationManager()
    return _config_manager
