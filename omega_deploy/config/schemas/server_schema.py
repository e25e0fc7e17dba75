"""Server configuration schema for the hello-world HTTP server."""
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    model_config = ConfigDict(extra="forbid")

    host: str = Field("0.0.0.0", description="Server host")
    port: int = Field(9999, description="Server port, also opened on the EC2 security group")
    log_level: str = Field("info", description="Server log level")
    access_log: bool = Field(True, description="Enable access logging")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port range."""
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v
