"""Cart models for mock commerce backend"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .pricing import Price, format_price


class SelectedVariant(BaseModel):
    variant_id: str
    option_id: str
    variant_name: str
    option_name: str


class CartItem(BaseModel):
    """Line item in a shopping cart"""
    id: str
    product_id: str
    product_name: str
    quantity: int = Field(gt=0)
    unit_price: float
    variants: list[SelectedVariant] = []
    image: Optional[str] = None

    @property
    def total_price(self) -> float:
        return round(self.unit_price * self.quantity, 2)


class Cart(BaseModel):
    """Shopping cart"""
    id: str
    line_items: list[CartItem] = []
    created_at: datetime
    updated_at: datetime

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.line_items)

    @property
    def subtotal(self) -> float:
        return round(sum(item.total_price for item in self.line_items), 2)


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = Field(default=1, gt=0)
    variants: dict[str, str] = {}


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""
    quantity: int = Field(ge=0)


class CartResponse(BaseModel):
    """Cart as returned by the API"""
    id: str
    total_items: int
    total_unique_items: int
    line_items: list[dict]
    subtotal: Price

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls(
            id=cart.id,
            total_items=cart.total_items,
            total_unique_items=len(cart.line_items),
            line_items=[
                {
                    **item.model_dump(exclude={"unit_price"}),
                    "price": format_price(item.unit_price).model_dump(),
                    "line_total": format_price(item.total_price).model_dump(),
                }
                for item in cart.line_items
            ],
            subtotal=format_price(cart.subtotal),
        )
