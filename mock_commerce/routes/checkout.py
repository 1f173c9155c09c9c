"""Checkout API routes for mock commerce backend"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..models.checkout import (
    CaptureRequest,
    CheckoutStatus,
    CheckoutToken,
    Order,
    ShippingMethod,
)
from ..database.carts import cart_db
from ..database.checkouts import checkout_db
from ..database.locale import locale_db
from ..database.orders import order_db
from ..errors import CommerceError, not_found, validation_error
from ..security.public_key import require_public_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/checkouts", tags=["Checkout"], dependencies=[Depends(require_public_key)])
orders_router = APIRouter(prefix="/v1/orders", tags=["Orders"], dependencies=[Depends(require_public_key)])

TEST_GATEWAY = "test_gateway"
DECLINED_CARD = "4000000000000002"

REQUIRED_FIELDS = [
    ("customer[email]", lambda r: r.customer.email),
    ("shipping[name]", lambda r: r.shipping.name),
    ("shipping[street]", lambda r: r.shipping.street),
    ("shipping[town_city]", lambda r: r.shipping.town_city),
    ("shipping[postal_zip_code]", lambda r: r.shipping.postal_zip_code),
]


def _get_token(token_id: str) -> CheckoutToken:
    token = checkout_db.get_token(token_id)
    if not token:
        raise not_found("Checkout token")
    return token


def _find_method(country: str, method_id: str) -> Optional[ShippingMethod]:
    return next(
        (method for method in locale_db.shipping_methods(country) if method.id == method_id),
        None,
    )


@router.get("/{cart_id}", response_model=CheckoutToken)
async def generate_token(cart_id: str, type: str = Query("cart")):
    """Generate a checkout token from a cart"""
    if type != "cart":
        raise CommerceError(400, "bad_request", f"Unsupported identifier type: {type}")

    cart = cart_db.get_cart(cart_id)
    if not cart:
        raise not_found("Cart")
    if not cart.line_items:
        raise CommerceError(400, "bad_request", "Cart is empty")

    token = checkout_db.create_token(cart)
    logger.info(f"Checkout token {token.id} generated for cart {cart_id}")
    return token


@router.get("/{token_id}/helper/shipping_options", response_model=list[ShippingMethod])
async def shipping_options(
    token_id: str,
    country: str = Query(..., min_length=2),
    region: Optional[str] = Query(None),
):
    """Shipping methods available for the destination"""
    _get_token(token_id)
    return locale_db.shipping_methods(country)


@router.get("/{token_id}/check/shipping", response_model=CheckoutToken)
async def check_shipping(
    token_id: str,
    shipping_option_id: str = Query(...),
    country: str = Query(..., min_length=2),
    region: Optional[str] = Query(None),
):
    """Apply a shipping method and recompute the live totals"""
    _get_token(token_id)

    method = _find_method(country, shipping_option_id)
    if not method:
        raise CommerceError(422, "not_valid", "The shipping method is not valid for this destination")

    return checkout_db.apply_shipping(token_id, method, locale_db.tax_rate(country, region))


@router.post("/{token_id}", response_model=Order, status_code=201)
async def capture_order(token_id: str, request: CaptureRequest):
    """
    Capture an order.

    Rejections use the error types the storefront knows how to route:
    validation, not_valid, gateway_error and bad_request.
    """
    token = _get_token(token_id)
    if token.status == CheckoutStatus.CAPTURED:
        raise CommerceError(400, "bad_request", "This checkout has already been captured")

    if set(request.line_items) != {item.id for item in token.line_items}:
        raise CommerceError(400, "bad_request", "Line items do not match the checkout")

    errors = [(param, "is required") for param, value in REQUIRED_FIELDS if not value(request).strip()]
    if request.customer.email and "@" not in request.customer.email:
        errors.append(("customer[email]", "must be a valid email address"))
    if errors:
        raise validation_error(errors)

    method = _find_method(request.shipping.country, request.fulfillment.shipping_method)
    if not method:
        raise CommerceError(422, "not_valid", "Please select a valid shipping method")

    if request.payment.gateway not in {gateway.code for gateway in token.gateways}:
        raise CommerceError(400, "bad_request", f"Unknown payment gateway: {request.payment.gateway}")

    if request.payment.gateway == TEST_GATEWAY:
        card = request.payment.card
        number = "".join(ch for ch in card.number if ch.isdigit()) if card else ""
        if len(number) != 16:
            raise CommerceError(402, "gateway_error", "The card number is invalid")
        if number == DECLINED_CARD:
            raise CommerceError(402, "gateway_error", "Your card was declined")

    checkout_db.apply_shipping(
        token_id,
        method,
        locale_db.tax_rate(request.shipping.country, request.shipping.county_state),
    )
    order = order_db.create_order(token, request)
    checkout_db.mark_captured(token_id)
    cart_db.empty_cart(token.cart_id)

    logger.info(f"Order {order.id} captured: {order.order_value.formatted_with_code}")
    return order


@orders_router.get("/{order_id}", response_model=Order)
async def get_order(order_id: str):
    """Get order details"""
    order = order_db.get_order(order_id)
    if not order:
        raise not_found("Order")
    return order


@orders_router.get("", response_model=list[Order])
async def list_orders(limit: int = 50):
    """List recent orders"""
    return order_db.list_orders(limit=limit)
