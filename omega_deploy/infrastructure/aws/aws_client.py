from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from omega_deploy.config.schemas.aws_schema import AWSConfig
from omega_deploy.infrastructure.exceptions import CatalogQueryError
from omega_deploy.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class AWSClient:
    """
    Centralized AWS client management.
    Handles AWS client creation and the AWS calls this deployment needs.
    """

    def __init__(self, config: Optional[AWSConfig] = None, session: Optional[boto3.session.Session] = None):
        """
        Initialize AWS client with configuration.

        Args:
            config: AWS configuration; defaults are used when omitted
            session: Optional boto3 session, mainly for tests
        """
        self.aws_config = config or AWSConfig()
        self.session = session or boto3.session.Session(
            profile_name=self.aws_config.profile,
            region_name=self.aws_config.region
        )
        self.region_name = self.aws_config.region or self.session.region_name
        self.config = Config(
            region_name=self.region_name,
            retries={
                'max_attempts': self.aws_config.request_retry_attempts,
                'mode': 'standard'
            },
            connect_timeout=self.aws_config.connection_timeout_ms / 1000
        )
        self._ec2_client = None

    @property
    def ec2_client(self):
        """EC2 client, created on first use."""
        if self._ec2_client is None:
            self._ec2_client = self.session.client(
                'ec2',
                config=self.config,
                endpoint_url=self.aws_config.endpoint_url
            )
        return self._ec2_client

    def describe_images(self, filters: List[Dict[str, Any]], owners: List[str]) -> List[Dict[str, Any]]:
        """
        Describe EC2 images matching all filters.

        Args:
            filters: DescribeImages filters, ANDed together
            owners: Owner account IDs or aliases

        Returns:
            Raw image entries

        Raises:
            CatalogQueryError: If the call fails
        """
        try:
            response = self.ec2_client.describe_images(Filters=filters, Owners=owners)
        except ClientError as e:
            error = e.response.get('Error', {})
            logger.error("DescribeImages failed", code=error.get('Code'), message=error.get('Message'))
            raise CatalogQueryError(
                f"Failed to describe images: {error.get('Message', str(e))}",
                details=error
            ) from e
        except BotoCoreError as e:
            logger.error("DescribeImages failed", error=str(e))
            raise CatalogQueryError(f"Failed to describe images: {str(e)}") from e
        return response.get('Images', [])
