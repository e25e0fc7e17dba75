"""
AWS Lambda entry points.

Both functions are deployed from the same artifact as the EC2 server.
"""
from typing import Any, Dict, Optional

from omega_deploy.application.hello import hello_world
from omega_deploy.application.lookup.handler import ImageLookupHandler, handle_lifecycle_event
from omega_deploy.config.manager import get_config_manager
from omega_deploy.infrastructure.aws.aws_client import AWSClient
from omega_deploy.infrastructure.aws.catalog import ImageCatalogClient
from omega_deploy.infrastructure.logging.logger import setup_logging

_lookup_handler: Optional[ImageLookupHandler] = None


def _get_lookup_handler() -> ImageLookupHandler:
    global _lookup_handler
    if _lookup_handler is None:
        config_manager = get_config_manager()
        setup_logging(config_manager.get_logging_config())
        aws_client = AWSClient(config_manager.get_aws_config())
        _lookup_handler = ImageLookupHandler(
            ImageCatalogClient(aws_client),
            config_manager.get_image_lookup_config()
        )
    return _lookup_handler


def hello_world_handler(event: Dict[str, Any], context: Any) -> str:
    """Lambda handler returning the hello-world message."""
    return hello_world()


def image_lookup_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for the image lookup custom resource.

    Configuration, logging and the AWS client are set up inside the
    acknowledgment scope, so a setup failure is still reported as FAILED.
    """
    return handle_lifecycle_event(event, _get_lookup_handler)
