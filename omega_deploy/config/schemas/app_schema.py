"""Main application configuration schema."""

from pydantic import BaseModel, Field

from .aws_schema import AWSConfig
from .deployment_schema import DeploymentConfig
from .image_schema import ImageLookupConfig
from .logging_schema import LoggingConfig
from .server_schema import ServerConfig


class AppConfig(BaseModel):
    """Application configuration."""

    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
    server: ServerConfig = Field(default_factory=lambda: ServerConfig())
    aws: AWSConfig = Field(default_factory=lambda: AWSConfig())
    image_lookup: ImageLookupConfig = Field(default_factory=lambda: ImageLookupConfig())
    deployment: DeploymentConfig = Field(default_factory=lambda: DeploymentConfig())
