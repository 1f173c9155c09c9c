"""Cart storage for mock commerce backend"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.cart import Cart, CartItem, SelectedVariant
from ..models.product import Product


class CartDatabase:
    """In-memory cart storage"""

    def __init__(self):
        self.carts: dict[str, Cart] = {}

    def create_cart(self) -> Cart:
        """Create a new cart"""
        now = datetime.utcnow()
        cart = Cart(
            id=f"cart_{uuid.uuid4().hex[:12]}",
            line_items=[],
            created_at=now,
            updated_at=now,
        )
        self.carts[cart.id] = cart
        return cart

    def get_cart(self, cart_id: str) -> Optional[Cart]:
        """Get a cart by ID"""
        return self.carts.get(cart_id)

    def add_item(
        self,
        cart_id: str,
        product: Product,
        quantity: int = 1,
        variants: Optional[list[SelectedVariant]] = None,
    ) -> Optional[Cart]:
        """Add an item to the cart, merging with an identical line"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        variants = variants or []
        selection = {(v.variant_id, v.option_id) for v in variants}

        existing_item = next(
            (
                item for item in cart.line_items
                if item.product_id == product.id
                and {(v.variant_id, v.option_id) for v in item.variants} == selection
            ),
            None,
        )

        if existing_item:
            existing_item.quantity += quantity
        else:
            unit_price = product.price + sum(
                product.get_variant_group(v.variant_id).get_option(v.option_id).price_delta
                for v in variants
            )
            cart.line_items.append(
                CartItem(
                    id=f"item_{uuid.uuid4().hex[:12]}",
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=round(unit_price, 2),
                    variants=variants,
                    image=product.image_url,
                )
            )

        cart.updated_at = datetime.utcnow()
        return cart

    def update_item_quantity(
        self,
        cart_id: str,
        line_item_id: str,
        quantity: int,
    ) -> Optional[Cart]:
        """Update line item quantity; zero removes the line"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        item = next((item for item in cart.line_items if item.id == line_item_id), None)
        if not item:
            return None

        if quantity <= 0:
            cart.line_items = [i for i in cart.line_items if i.id != line_item_id]
        else:
            item.quantity = quantity

        cart.updated_at = datetime.utcnow()
        return cart

    def remove_item(self, cart_id: str, line_item_id: str) -> Optional[Cart]:
        """Remove a line item from the cart"""
        return self.update_item_quantity(cart_id, line_item_id, 0)

    def empty_cart(self, cart_id: str) -> Optional[Cart]:
        """Remove all line items"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        cart.line_items = []
        cart.updated_at = datetime.utcnow()
        return cart

    def reset(self) -> None:
        self.carts.clear()


# Singleton instance
cart_db = CartDatabase()
