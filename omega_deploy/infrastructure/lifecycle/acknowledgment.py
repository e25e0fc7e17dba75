"""
Lifecycle acknowledgment for CloudFormation custom resources.

CloudFormation waits for the custom resource to PUT a response document to the
pre-signed ``ResponseURL`` of the event. A handler that never answers leaves the
stack operation hanging until it times out, so the answer is modelled as an
obligation that is released exactly once on every exit path.
"""
import json
from typing import Any, Dict, Optional

import requests

from omega_deploy.domain.lifecycle.value_objects import ResponseStatus, ResponseTarget
from omega_deploy.infrastructure.exceptions import AcknowledgmentError
from omega_deploy.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

# CloudFormation rejects response reasons above 4 KB
MAX_REASON_LENGTH = 4000


def build_response_body(target: ResponseTarget,
                        status: ResponseStatus,
                        data: Optional[Dict[str, Any]] = None,
                        reason: Optional[str] = None,
                        physical_resource_id: Optional[str] = None) -> Dict[str, Any]:
    """Build the JSON document CloudFormation expects at the response URL."""
    return {
        "Status": status.value,
        "Reason": (reason or "See the details in the function's log")[:MAX_REASON_LENGTH],
        "PhysicalResourceId": physical_resource_id or target.physical_resource_id or target.logical_resource_id,
        "StackId": target.stack_id,
        "RequestId": target.request_id,
        "LogicalResourceId": target.logical_resource_id,
        "NoEcho": False,
        "Data": data or {},
    }


def send_response(response_url: str, body: Dict[str, Any], timeout: Optional[float] = None) -> None:
    """
    PUT a response document to CloudFormation.

    Raises:
        AcknowledgmentError: If the request fails or is rejected
    """
    payload = json.dumps(body)
    # The pre-signed S3 URL is signed without a content type
    headers = {"content-type": "", "content-length": str(len(payload))}
    try:
        response = requests.put(response_url, data=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise AcknowledgmentError(f"Failed to send lifecycle response: {e}") from e
    logger.info("Lifecycle response sent", status=body.get("Status"), http_status=response.status_code)


class LifecycleAcknowledgment:
    """
    Exactly-once acknowledgment obligation for a lifecycle event, addressed by its response target.

    Use as a context manager around the handler body::

        with LifecycleAcknowledgment(target) as ack:
            outputs = do_work()
            ack.succeed(outputs)

    Leaving the block with an exception reports FAILED with the exception
    message; leaving it normally without an explicit call reports SUCCESS with
    no data. Any later attempt to respond raises ``AcknowledgmentError``.
    """

    def __init__(self, target: ResponseTarget, physical_resource_id: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.target = target
        self.physical_resource_id = physical_resource_id
        self.timeout = timeout
        self.sent_status: Optional[ResponseStatus] = None
        self.error: Optional[AcknowledgmentError] = None

    @property
    def released(self) -> bool:
        return self.sent_status is not None

    def succeed(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._release(ResponseStatus.SUCCESS, data=data)

    def fail(self, reason: str) -> None:
        self._release(ResponseStatus.FAILED, reason=reason)

    def __enter__(self) -> "LifecycleAcknowledgment":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self.released:
            return False
        if exc is not None:
            try:
                self.fail(str(exc) or exc_type.__name__)
            except AcknowledgmentError:
                # The handler's own error takes precedence; the failed delivery is logged
                logger.error("Failed to acknowledge failed lifecycle event",
                             request_id=self.target.request_id, error=str(self.error))
            return False
        self.succeed()
        return False

    def _release(self, status: ResponseStatus, data: Optional[Dict[str, Any]] = None,
                 reason: Optional[str] = None) -> None:
        if self.released:
            raise AcknowledgmentError(
                f"Lifecycle event {self.target.request_id} already acknowledged as {self.sent_status.value}"
            )
        # Mark before sending: a failed delivery must not be retried from here
        self.sent_status = status
        body = build_response_body(self.target, status, data=data, reason=reason,
                                   physical_resource_id=self.physical_resource_id)
        try:
            send_response(self.target.response_url, body, timeout=self.timeout)
        except AcknowledgmentError as e:
            self.error = e
            logger.error("Lifecycle acknowledgment failed", request_id=self.target.request_id,
                         status=status.value, error=str(e))
            raise
