from typing import Optional, Any


class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class AWSError(InfrastructureError):
    """Raised when AWS operations fail."""
    pass


class CatalogQueryError(AWSError):
    """Raised when the image catalog cannot be queried."""
    pass


class AcknowledgmentError(InfrastructureError):
    """Raised when a lifecycle response cannot be delivered to CloudFormation."""
    pass
