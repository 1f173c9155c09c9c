# Checkout Service Models

from .checkout import (
    CartRef,
    CheckoutSession,
    Gateway,
    LineItem,
    LiveSnapshot,
    Price,
    ShippingOption,
    VariantSelection,
)
from .order import (
    Card,
    Customer,
    ErrorKind,
    FieldMessage,
    Fulfillment,
    OrderConfirmation,
    OrderPayload,
    Payment,
    ShippingAddress,
    SubmissionError,
)

__all__ = [
    "CartRef",
    "CheckoutSession",
    "Gateway",
    "LineItem",
    "LiveSnapshot",
    "Price",
    "ShippingOption",
    "VariantSelection",
    "Card",
    "Customer",
    "ErrorKind",
    "FieldMessage",
    "Fulfillment",
    "OrderConfirmation",
    "OrderPayload",
    "Payment",
    "ShippingAddress",
    "SubmissionError",
]
