"""Checkout session models as returned by the commerce backend"""

from pydantic import BaseModel, Field
from typing import Optional


class CartRef(BaseModel):
    """Reference to the shopper's cart, owned by the cart service"""
    model_config = {"frozen": True}

    id: str
    total_items: int = Field(ge=0)


class Price(BaseModel):
    """Currency-formatted amount"""
    raw: float = 0.0
    formatted: str = "0.00"
    formatted_with_symbol: str = "$0.00"
    formatted_with_code: str = "0.00 USD"


class TaxInfo(BaseModel):
    amount: Price = Field(default_factory=Price)


class ShippingInfo(BaseModel):
    id: Optional[str] = None
    description: Optional[str] = None
    price: Price = Field(default_factory=Price)


class VariantSelection(BaseModel):
    """Chosen option for one product variant group"""
    variant_id: str
    option_id: str
    variant_name: Optional[str] = None
    option_name: Optional[str] = None


class LineItem(BaseModel):
    """Line item in a checkout snapshot"""
    id: str
    product_id: str
    product_name: str
    quantity: int
    price: Price = Field(default_factory=Price)
    line_total: Price = Field(default_factory=Price)
    variants: list[VariantSelection] = []
    image: Optional[str] = None


class LiveSnapshot(BaseModel):
    """Server-computed totals for the order in progress"""
    line_items: Optional[list[LineItem]] = None
    subtotal: Price = Field(default_factory=Price)
    tax: TaxInfo = Field(default_factory=TaxInfo)
    shipping: ShippingInfo = Field(default_factory=ShippingInfo)
    total: Price = Field(default_factory=Price)


class Gateway(BaseModel):
    id: str
    code: str
    name: Optional[str] = None


class CheckoutSession(BaseModel):
    """Remote checkout session (a tokenised cart)"""
    id: str
    cart_id: Optional[str] = None
    live: Optional[LiveSnapshot] = None
    line_items: list[LineItem] = []
    gateways: list[Gateway] = []
    collects_billing_address: bool = False

    def root_line_item(self, line_item_id: str) -> Optional[LineItem]:
        """Root line item carries display metadata such as the image"""
        return next((item for item in self.line_items if item.id == line_item_id), None)


class ShippingOption(BaseModel):
    """Shipping method available for a session and destination"""
    id: str
    description: str
    price: Price = Field(default_factory=Price)
