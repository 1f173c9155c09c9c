"""Checkout token storage for mock commerce backend"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.cart import Cart
from ..models.checkout import (
    CheckoutLineItem,
    CheckoutStatus,
    CheckoutToken,
    Gateway,
    LiveObject,
    ShippingMethod,
)
from ..models.pricing import format_price

GATEWAYS = [
    Gateway(id="gway_test", code="test_gateway", name="Test Gateway"),
    Gateway(id="gway_stripe", code="stripe", name="Stripe"),
]


def _live(
    line_items: list[CheckoutLineItem],
    shipping: Optional[ShippingMethod] = None,
    tax_rate: float = 0.0,
) -> LiveObject:
    subtotal = round(sum(item.line_total.raw for item in line_items), 2)
    tax = round(subtotal * tax_rate, 2)
    shipping_price = shipping.price.raw if shipping else 0.0
    return LiveObject(
        line_items=line_items,
        subtotal=format_price(subtotal),
        tax={"amount": format_price(tax).model_dump()},
        shipping={
            "id": shipping.id if shipping else None,
            "description": shipping.description if shipping else None,
            "price": format_price(shipping_price).model_dump(),
        },
        total=format_price(subtotal + tax + shipping_price),
    )


class CheckoutDatabase:
    """In-memory checkout token storage"""

    def __init__(self):
        self.tokens: dict[str, CheckoutToken] = {}

    def create_token(self, cart: Cart) -> CheckoutToken:
        """Snapshot a cart into a new checkout token"""
        line_items = [
            CheckoutLineItem(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=format_price(item.unit_price),
                line_total=format_price(item.total_price),
                variants=[v.model_dump() for v in item.variants],
                image=item.image,
            )
            for item in cart.line_items
        ]

        token = CheckoutToken(
            id=f"chkt_{uuid.uuid4().hex[:12]}",
            cart_id=cart.id,
            line_items=line_items,
            live=_live([item.model_copy(update={"image": None}) for item in line_items]),
            gateways=list(GATEWAYS),
            created_at=datetime.utcnow(),
        )
        self.tokens[token.id] = token
        return token

    def get_token(self, token_id: str) -> Optional[CheckoutToken]:
        """Get a checkout token by ID"""
        return self.tokens.get(token_id)

    def apply_shipping(
        self,
        token_id: str,
        method: ShippingMethod,
        tax_rate: float,
    ) -> Optional[CheckoutToken]:
        """Recompute the live object with shipping and tax applied"""
        token = self.get_token(token_id)
        if not token:
            return None

        token.live = _live(token.live.line_items, method, tax_rate)
        return token

    def mark_captured(self, token_id: str) -> None:
        token = self.get_token(token_id)
        if token:
            token.status = CheckoutStatus.CAPTURED

    def reset(self) -> None:
        self.tokens.clear()


# Singleton instance
checkout_db = CheckoutDatabase()
