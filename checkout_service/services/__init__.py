# Checkout Service Services

from .commerce_client import CommerceClient, CaptureFailed, MalformedResponse
from .reference_data import ReferenceDataClient
from .session_sync import SessionSynchronizer
from .order_builder import build_order, OrderBuildError
from .order_submitter import OrderSubmitter, classify
from .checkout_controller import CheckoutController, CheckoutNotReady

__all__ = [
    "CommerceClient",
    "CaptureFailed",
    "MalformedResponse",
    "ReferenceDataClient",
    "SessionSynchronizer",
    "build_order",
    "OrderBuildError",
    "OrderSubmitter",
    "classify",
    "CheckoutController",
    "CheckoutNotReady",
]
