"""Deployment configuration schema."""
from typing import Optional

from pydantic import BaseModel, Field


class DeploymentConfig(BaseModel):
    """Settings for the EC2 side of the deployment and the Lambda functions."""

    service_name: str = Field("omega-deploy", description="Service name passed to the bootstrap script")
    key_name: Optional[str] = Field(None, description="SSH key pair for EC2 instances")
    instance_type: str = Field("t2.micro", description="EC2 instance type")
    admin_port: int = Field(22, description="Administrative (SSH) access port")
    ingress_cidr: str = Field("0.0.0.0/0", description="Source range allowed on the open ports")
    userdata_template: str = Field("userdata.sh", description="Bootstrap script in the template store")
    binary_name: Optional[str] = Field(
        "omega-deploy", description="Executable started on the instance; omitted when empty"
    )
    lambda_runtime: str = Field("python3.12", description="Lambda runtime")
    lambda_memory_size: int = Field(128, description="Memory for the hello-world function (MB)")
    lambda_timeout: int = Field(3, description="Timeout for the hello-world function (s)")
    lookup_memory_size: int = Field(128, description="Memory for the image lookup function (MB)")
    lookup_timeout: int = Field(30, description="Timeout for the image lookup function (s)")
