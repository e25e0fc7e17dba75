"""Image lookup configuration schema."""
from typing import List

from pydantic import BaseModel, Field, field_validator


class ImageLookupConfig(BaseModel):
    """Catalog filters used to discover the EC2 image."""

    name_pattern: str = Field(
        "*hvm-ssd/ubuntu-xenial-16.04-amd64-server*", description="Image name glob"
    )
    root_device_type: str = Field("ebs", description="Root device type")
    architecture: str = Field("x86_64", description="CPU architecture")
    virtualization_type: str = Field("hvm", description="Virtualization type")
    owners: List[str] = Field(["099720109477"], description="Publisher account IDs (Canonical)")
    output_key: str = Field("HVM", description="Custom resource output attribute holding the image ID")

    @field_validator("owners")
    @classmethod
    def validate_owners(cls, v: List[str]) -> List[str]:
        """Validate owners."""
        if not v:
            raise ValueError("At least one image owner is required")
        return v
