# omega_deploy/domain/core/exceptions.py
from typing import Any, Iterable, List, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation fails."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class ImageSelectionError(DomainException):
    """Base exception for image selection failures."""
    pass


class EmptyInputError(ImageSelectionError):
    """Raised when there are no images to select from."""
    def __init__(self, message: str = "No images to search"):
        super().__init__(message)


class NoImagesFoundError(EmptyInputError):
    """Raised when the image catalog returned no candidates for a lookup."""
    def __init__(self, filters: Any = None, owners: Optional[List[str]] = None):
        super().__init__(f"No images matched filters {filters} for owners {owners}")
        self.filters = filters
        self.owners = owners or []


class TimestampParseError(ImageSelectionError):
    """Raised when an image creation date is not a valid RFC3339 timestamp."""
    def __init__(self, value: Any, image_id: Optional[str] = None):
        super().__init__(f"Invalid RFC3339 timestamp {value!r} for image {image_id}")
        self.value = value
        self.image_id = image_id


class TemplateError(DomainException):
    """Base exception for bootstrap template failures."""
    pass


class TemplateNotFoundError(TemplateError):
    """Raised when a named template is not available in the store."""
    def __init__(self, path: str):
        super().__init__(f"Template {path} not found")
        self.path = path


class UndefinedVariableError(TemplateError):
    """Raised when a template references a variable with no value."""
    def __init__(self, names: Iterable[str]):
        self.names = sorted(names)
        super().__init__(f"Undefined template variables: {', '.join(self.names)}")


class TemplateExpansionError(TemplateError):
    """Raised when a bootstrap template cannot be expanded."""
    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Failed to expand template {path}: {cause}")
        self.path = path
        self.cause = cause


class GraphMutationError(DomainException):
    """Raised when a resource cannot be added to a resource graph."""
    def __init__(self, message: str, resource_names: Optional[List[str]] = None):
        super().__init__(message)
        self.resource_names = resource_names or []
