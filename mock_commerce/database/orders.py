"""Order storage for mock commerce backend"""

import itertools
import uuid
from datetime import datetime
from typing import Optional

from ..models.checkout import CaptureRequest, CheckoutToken, Order


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, Order] = {}
        self._references = itertools.count(1)

    def create_order(
        self,
        token: CheckoutToken,
        request: CaptureRequest,
    ) -> Order:
        """Create an order from a captured checkout"""
        card_last_four = None
        if request.payment.card:
            digits = "".join(ch for ch in request.payment.card.number if ch.isdigit())
            card_last_four = digits[-4:] if len(digits) >= 4 else None

        order = Order(
            id=f"ord_{uuid.uuid4().hex[:12]}",
            checkout_token_id=token.id,
            customer_reference=f"SHOP-{next(self._references):06d}",
            order_value=token.live.total,
            customer=request.customer,
            shipping=request.shipping,
            shipping_method=request.fulfillment.shipping_method,
            gateway=request.payment.gateway,
            card_last_four=card_last_four,
            extrafields=request.extrafields,
            created_at=datetime.utcnow(),
        )

        self.orders[order.id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def list_orders(self, limit: int = 50) -> list[Order]:
        """List recent orders"""
        orders = list(self.orders.values())
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]

    def reset(self) -> None:
        self.orders.clear()


# Singleton instance
order_db = OrderDatabase()
