"""
Image lookup custom resource handler.

Invoked by CloudFormation once per lifecycle event of the lookup custom
resource. Only ``Create`` queries the EC2 catalog; ``Update`` and ``Delete``
answer with no outputs, so an existing stack keeps the image it was created
with. Every invocation whose event says where to answer acknowledges it
exactly once, success or failure.
"""
from enum import Enum
from typing import Any, Callable, Dict, Optional

from omega_deploy.config.schemas.image_schema import ImageLookupConfig
from omega_deploy.domain.core.exceptions import EmptyInputError, NoImagesFoundError
from omega_deploy.domain.image.selector import select_most_recent
from omega_deploy.domain.image.value_objects import FilterSet, ImageFilter
from omega_deploy.domain.lifecycle.value_objects import LifecycleEvent, ResponseTarget
from omega_deploy.infrastructure.aws.catalog import ImageCatalogClient
from omega_deploy.infrastructure.lifecycle.acknowledgment import LifecycleAcknowledgment
from omega_deploy.infrastructure.logging.logger import get_logger


class LookupState(str, Enum):
    """States a single lookup invocation passes through."""
    SKIP = "Skip"
    QUERY = "Query"
    RESPOND = "Respond"


AcknowledgmentFactory = Callable[[ResponseTarget], LifecycleAcknowledgment]


def build_filter_set(config: ImageLookupConfig) -> FilterSet:
    """Catalog filters for the configured image family."""
    return FilterSet((
        ImageFilter("name", (config.name_pattern,)),
        ImageFilter("root-device-type", (config.root_device_type,)),
        ImageFilter("architecture", (config.architecture,)),
        ImageFilter("virtualization-type", (config.virtualization_type,)),
    ))


class ImageLookupHandler:
    """Finds the newest matching image and returns it as a custom resource output."""

    def __init__(self,
                 catalog: ImageCatalogClient,
                 config: Optional[ImageLookupConfig] = None,
                 acknowledgment_factory: AcknowledgmentFactory = LifecycleAcknowledgment):
        """
        Initialize the handler.

        Args:
            catalog: Image catalog client
            config: Image lookup configuration
            acknowledgment_factory: Builds the acknowledgment obligation for a response target
        """
        self._catalog = catalog
        self._config = config or ImageLookupConfig()
        self._acknowledgment_factory = acknowledgment_factory
        self._logger = get_logger(__name__)
        self.state: Optional[LookupState] = None

    def handle(self, event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        """
        Handle one lifecycle event.

        Args:
            event: Raw custom resource event
            context: Lambda context, unused

        Returns:
            Output attributes, e.g. ``{"HVM": "ami-0123"}``; empty unless Create

        Raises:
            ValidationError: If the event is malformed; acknowledged FAILED when it carries a response URL
            CatalogQueryError: If the catalog call fails
            NoImagesFoundError: If no image matches
            TimestampParseError: If an image creation date is malformed
            AcknowledgmentError: If the work succeeded but CloudFormation could not be told
        """
        return handle_lifecycle_event(event, lambda: self, self._acknowledgment_factory)

    def lookup(self, event: LifecycleEvent) -> Dict[str, Any]:
        """Run the lookup state machine for ``event`` without acknowledging it."""
        if not event.is_create:
            self.state = LookupState.SKIP
            self._logger.info("Skipping image lookup", request_type=event.request_type.value)
            return {}

        self.state = LookupState.QUERY
        filter_set = build_filter_set(self._config)
        images = self._catalog.find_images(filter_set, self._config.owners)

        self.state = LookupState.RESPOND
        try:
            image = select_most_recent(images)
        except EmptyInputError as e:
            raise NoImagesFoundError(str(filter_set), self._config.owners) from e

        outputs = {self._config.output_key: image.image_id}
        self._logger.info("CustomResource outputs", outputs=outputs, image_name=image.name,
                          creation_date=image.creation_date)
        return outputs


def handle_lifecycle_event(event: Dict[str, Any],
                           handler_factory: Callable[[], ImageLookupHandler],
                           acknowledgment_factory: AcknowledgmentFactory = LifecycleAcknowledgment) -> Dict[str, Any]:
    """
    Acknowledge ``event`` exactly once around parsing, handler setup and lookup.

    The obligation is taken as soon as the raw payload says where to answer,
    so an unknown request type or a failure while building the handler is
    still reported to CloudFormation as FAILED.

    Args:
        event: Raw custom resource event
        handler_factory: Builds the lookup handler; called inside the acknowledgment scope
        acknowledgment_factory: Builds the acknowledgment obligation for a response target

    Raises:
        ValidationError: If the event is malformed
        AcknowledgmentError: If the work succeeded but CloudFormation could not be told
    """
    target = ResponseTarget.from_dict(event)
    with acknowledgment_factory(target) as acknowledgment:
        lifecycle_event = LifecycleEvent.from_dict(event)
        get_logger(__name__).info(
            "Custom resource event",
            request_type=lifecycle_event.request_type.value,
            stack_id=lifecycle_event.stack_id,
            logical_resource_id=lifecycle_event.logical_resource_id
        )
        outputs = handler_factory().lookup(lifecycle_event)
        acknowledgment.succeed(outputs)
    return outputs
