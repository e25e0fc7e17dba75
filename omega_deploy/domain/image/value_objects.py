# omega_deploy/domain/image/value_objects.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from omega_deploy.domain.core.exceptions import ValidationError


@dataclass(frozen=True)
class ImageDescriptor:
    """Catalog entry for a bootable machine image."""
    image_id: str
    creation_date: str
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.image_id, str) or not self.image_id:
            raise ValidationError("Image ID must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImageDescriptor':
        """Build a descriptor from a DescribeImages response entry."""
        return cls(
            image_id=data.get("ImageId"),
            creation_date=data.get("CreationDate"),
            name=data.get("Name")
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ImageId": self.image_id,
            "CreationDate": self.creation_date,
            "Name": self.name
        }


@dataclass(frozen=True)
class ImageFilter:
    """A single catalog filter; any of the values may match."""
    name: str
    values: Tuple[str, ...]

    def __post_init__(self):
        if not self.name:
            raise ValidationError("Filter name is required")
        if not self.values:
            raise ValidationError(f"Filter {self.name} requires at least one value")
        # Accept any iterable of strings while keeping the object hashable
        object.__setattr__(self, "values", tuple(self.values))

    def to_boto(self) -> Dict[str, Any]:
        return {"Name": self.name, "Values": list(self.values)}


@dataclass(frozen=True)
class FilterSet:
    """Ordered filters that must all match (logical AND)."""
    filters: Tuple[ImageFilter, ...]

    def __post_init__(self):
        object.__setattr__(self, "filters", tuple(self.filters))

    @classmethod
    def of(cls, **criteria: Iterable[str]) -> 'FilterSet':
        """Build a filter set from keyword criteria, e.g. ``root_device_type=["ebs"]``."""
        return cls(tuple(
            ImageFilter(name.replace("_", "-"), tuple(values))
            for name, values in criteria.items()
        ))

    def names(self) -> List[str]:
        return [f.name for f in self.filters]

    def to_boto(self) -> List[Dict[str, Any]]:
        return [f.to_boto() for f in self.filters]

    def __str__(self) -> str:
        return ", ".join(f"{f.name}={'|'.join(f.values)}" for f in self.filters)
