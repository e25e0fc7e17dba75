"""CloudFormation stack assembly."""
from omega_deploy.application.stack.builder import StackBuilder, StackResourceNames

__all__ = ["StackBuilder", "StackResourceNames"]
