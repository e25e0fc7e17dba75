"""AWS client configuration schema."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AWSConfig(BaseModel):
    """AWS client configuration."""

    region: Optional[str] = Field(None, description="AWS region, defaults to the session region")
    profile: Optional[str] = Field(None, description="Named credentials profile")
    endpoint_url: Optional[str] = Field(None, description="Override endpoint, e.g. for local testing")
    request_retry_attempts: int = Field(
        0, description="botocore retry attempts; retries belong to the orchestration layer"
    )
    connection_timeout_ms: int = Field(10000, description="Connection timeout in milliseconds")

    @field_validator("request_retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry attempts."""
        if v < 0 or v > 10:
            raise ValueError("Retry attempts must be between 0 and 10")
        return v
