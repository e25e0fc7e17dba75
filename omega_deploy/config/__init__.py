"""Configuration package - typed schemas and the configuration manager."""
from omega_deploy.config.schemas import (
    AppConfig,
    AWSConfig,
    DeploymentConfig,
    ImageLookupConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "AppConfig",
    "AWSConfig",
    "DeploymentConfig",
    "ImageLookupConfig",
    "LoggingConfig",
    "ServerConfig",
]
