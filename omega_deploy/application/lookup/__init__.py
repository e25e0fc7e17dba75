"""Image lookup custom resource."""
from omega_deploy.application.lookup.handler import ImageLookupHandler, LookupState, build_filter_set

__all__ = ["ImageLookupHandler", "LookupState", "build_filter_set"]
