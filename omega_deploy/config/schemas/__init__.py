"""Configuration schemas."""
from .app_schema import AppConfig
from .aws_schema import AWSConfig
from .deployment_schema import DeploymentConfig
from .image_schema import ImageLookupConfig
from .logging_schema import LoggingConfig
from .server_schema import ServerConfig

__all__ = [
    "AppConfig",
    "AWSConfig",
    "DeploymentConfig",
    "ImageLookupConfig",
    "LoggingConfig",
    "ServerConfig",
]
