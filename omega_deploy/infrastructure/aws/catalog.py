"""EC2 image catalog client."""
from typing import List, Sequence

from omega_deploy.domain.image.value_objects import FilterSet, ImageDescriptor
from omega_deploy.infrastructure.aws.aws_client import AWSClient
from omega_deploy.infrastructure.logging.logger import get_logger


class ImageCatalogClient:
    """Queries the EC2 image catalog and returns image descriptors."""

    def __init__(self, aws_client: AWSClient):
        self._aws_client = aws_client
        self._logger = get_logger(__name__)

    def find_images(self, filter_set: FilterSet, owners: Sequence[str]) -> List[ImageDescriptor]:
        """
        Return the images matching every filter, published by one of ``owners``.

        Raises:
            CatalogQueryError: If the catalog cannot be queried
        """
        raw_images = self._aws_client.describe_images(filter_set.to_boto(), list(owners))
        images = [ImageDescriptor.from_dict(image) for image in raw_images]
        self._logger.info(
            "Image catalog results",
            filters=str(filter_set),
            owners=list(owners),
            count=len(images)
        )
        return images
