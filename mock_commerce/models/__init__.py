# Mock Commerce Models

from .pricing import Price, format_price
from .product import Product, VariantGroup, VariantOption
from .cart import Cart, CartItem, SelectedVariant, AddToCartRequest, UpdateCartItemRequest, CartResponse
from .checkout import (
    CheckoutToken,
    CheckoutStatus,
    CheckoutLineItem,
    LiveObject,
    Gateway,
    ShippingMethod,
    CaptureRequest,
    Order,
)

__all__ = [
    "Price",
    "format_price",
    "Product",
    "VariantGroup",
    "VariantOption",
    "Cart",
    "CartItem",
    "SelectedVariant",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "CheckoutToken",
    "CheckoutStatus",
    "CheckoutLineItem",
    "LiveObject",
    "Gateway",
    "ShippingMethod",
    "CaptureRequest",
    "Order",
]
