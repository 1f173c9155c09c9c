"""
Order Submitter

Sends the order to the commerce backend and routes capture failures back
into field-level errors plus a single user-facing alert.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..core.fields import FieldKey
from ..models.order import ErrorKind, OrderConfirmation, OrderPayload, SubmissionError
from .commerce_client import CaptureFailed, CommerceClient

logger = logging.getLogger(__name__)

GENERIC_ALERT = "Unable to place your order. Please try again."

# Single-message errors and the error-map key each is written to
SINGLE_MESSAGE_KEYS = {
    ErrorKind.GATEWAY_ERROR.value: ErrorKind.GATEWAY_ERROR.value,
    ErrorKind.NOT_VALID.value: FieldKey.SHIPPING_METHOD.value,
    ErrorKind.BAD_REQUEST.value: ErrorKind.BAD_REQUEST.value,
}


@dataclass
class ErrorRouting:
    """Where a capture failure lands: field errors and an optional alert"""
    field_errors: dict[str, str] = field(default_factory=dict)
    alert: Optional[str] = None


def validation_alert(messages: list[str]) -> str:
    """Alert text for a validation failure: every message prefixed by a space"""
    return "".join(f" {message}" for message in messages)


def classify(error: SubmissionError) -> ErrorRouting:
    """Map a capture error onto the field namespace"""
    if error.kind == ErrorKind.VALIDATION.value and isinstance(error.message, list):
        return ErrorRouting(
            field_errors={entry.field: entry.message for entry in error.message},
            alert=validation_alert([entry.message for entry in error.message]),
        )

    if error.kind in SINGLE_MESSAGE_KEYS:
        message = error.message if isinstance(error.message, str) else str(error.message)
        return ErrorRouting(
            field_errors={SINGLE_MESSAGE_KEYS[error.kind]: message},
            alert=message,
        )

    logger.warning(f"Unclassified order capture error: {error.kind} - {error.message}")
    return ErrorRouting(alert=GENERIC_ALERT)


class OrderSubmitter:
    """Captures orders against the commerce backend"""

    def __init__(self, commerce: CommerceClient):
        self.commerce = commerce

    async def submit(self, session_id: str, payload: OrderPayload) -> OrderConfirmation:
        """
        Capture the order.

        Raises:
            CaptureFailed: with the backend's error attached
        """
        logger.info(f"Capturing order for checkout {session_id} via {payload.payment.gateway}")
        try:
            confirmation = await self.commerce.capture_order(session_id, payload)
        except CaptureFailed as e:
            logger.error(f"Error while capturing order for {session_id}: {e.error.kind} - {e.error.message}")
            raise

        logger.info(f"Order {confirmation.id} captured for checkout {session_id}")
        return confirmation
