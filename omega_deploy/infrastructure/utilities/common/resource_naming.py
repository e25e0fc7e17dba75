"""
Deterministic resource naming.

CloudFormation logical IDs must be alphanumeric and stable across builds, so
names are derived from a readable prefix plus a digest of fixed seed strings.
"""
import hashlib
import re

_NON_ALPHANUMERIC = re.compile(r'[^A-Za-z0-9]')


def cloudformation_resource_name(prefix: str, *parts: str) -> str:
    """
    Build a logical resource name from a prefix and seed parts.

    Args:
        prefix: Human readable prefix, non-alphanumeric characters are dropped
        parts: Seed strings; the same seeds always yield the same name

    Returns:
        Logical resource name
    """
    if not parts:
        raise ValueError("At least one seed part is required for a stable resource name")
    digest = hashlib.sha1()
    for part in parts:
        digest.update(str(part).encode("utf-8"))
    return f"{_NON_ALPHANUMERIC.sub('', prefix)}{digest.hexdigest()}"


def function_resource_name(function_name: str) -> str:
    """Logical name of a Lambda function resource."""
    return cloudformation_resource_name(function_name, "AWS::Lambda::Function", function_name)

