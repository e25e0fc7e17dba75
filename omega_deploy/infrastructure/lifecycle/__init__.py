"""CloudFormation custom resource lifecycle support."""
from omega_deploy.infrastructure.lifecycle.acknowledgment import (
    LifecycleAcknowledgment,
    build_response_body,
    send_response,
)

__all__ = ["LifecycleAcknowledgment", "build_response_body", "send_response"]
