"""Machine image domain - descriptors, filters and selection policy."""
from omega_deploy.domain.image.selector import parse_rfc3339, select_most_recent
from omega_deploy.domain.image.value_objects import FilterSet, ImageDescriptor, ImageFilter

__all__ = [
    "FilterSet",
    "ImageDescriptor",
    "ImageFilter",
    "parse_rfc3339",
    "select_most_recent",
]
