# omega_deploy/domain/lifecycle/value_objects.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from omega_deploy.domain.core.exceptions import ValidationError


class RequestType(str, Enum):
    """Custom resource lifecycle event kinds."""
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"

    @classmethod
    def validate(cls, value: str) -> 'RequestType':
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Invalid request type: {value}")


class ResponseStatus(str, Enum):
    """Status reported back to CloudFormation."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ResponseTarget:
    """Where and how to answer a custom resource request."""
    response_url: str
    stack_id: str
    request_id: str
    logical_resource_id: str
    physical_resource_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResponseTarget':
        """
        Extract the response coordinates from the raw Lambda payload.

        Only these fields are needed to answer CloudFormation, so a target can
        be built even when the rest of the event is unusable.

        Raises:
            ValidationError: If any response coordinate is missing
        """
        missing = [k for k in ("ResponseURL", "StackId", "RequestId", "LogicalResourceId")
                   if not data.get(k)]
        if missing:
            raise ValidationError(f"Custom resource event cannot be answered, missing fields: {missing}",
                                  missing)
        return cls(
            response_url=data["ResponseURL"],
            stack_id=data["StackId"],
            request_id=data["RequestId"],
            logical_resource_id=data["LogicalResourceId"],
            physical_resource_id=data.get("PhysicalResourceId"),
        )


@dataclass(frozen=True)
class LifecycleEvent:
    """A custom resource request as delivered to the Lambda function."""
    request_type: RequestType
    stack_id: str
    request_id: str
    logical_resource_id: str
    response_url: str
    resource_type: str = "AWS::CloudFormation::CustomResource"
    physical_resource_id: Optional[str] = None
    resource_properties: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.stack_id:
            raise ValidationError("StackId is required")
        if not self.logical_resource_id:
            raise ValidationError("LogicalResourceId is required")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LifecycleEvent':
        """Build an event from the raw Lambda payload."""
        missing = [k for k in ("RequestType", "StackId", "RequestId", "LogicalResourceId", "ResponseURL")
                   if not data.get(k)]
        if missing:
            raise ValidationError(f"Custom resource event missing fields: {missing}", missing)
        return cls(
            request_type=RequestType.validate(data["RequestType"]),
            stack_id=data["StackId"],
            request_id=data["RequestId"],
            logical_resource_id=data["LogicalResourceId"],
            response_url=data["ResponseURL"],
            resource_type=data.get("ResourceType", "AWS::CloudFormation::CustomResource"),
            physical_resource_id=data.get("PhysicalResourceId"),
            resource_properties=dict(data.get("ResourceProperties") or {})
        )

    @property
    def target(self) -> ResponseTarget:
        return ResponseTarget(
            response_url=self.response_url,
            stack_id=self.stack_id,
            request_id=self.request_id,
            logical_resource_id=self.logical_resource_id,
            physical_resource_id=self.physical_resource_id,
        )

    @property
    def is_create(self) -> bool:
        return self.request_type == RequestType.CREATE
