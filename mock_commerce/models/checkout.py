"""Checkout models for mock commerce backend"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

from .pricing import Price


class CheckoutStatus(str, Enum):
    OPEN = "open"
    CAPTURED = "captured"


class ShippingMethod(BaseModel):
    """Shipping method offered for a destination"""
    id: str
    description: str
    price: Price


class Gateway(BaseModel):
    id: str
    code: str
    name: str


class CheckoutLineItem(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    price: Price
    line_total: Price
    variants: list[dict] = []
    image: Optional[str] = None


class LiveObject(BaseModel):
    """Totals recomputed as shipping is applied"""
    line_items: list[CheckoutLineItem]
    subtotal: Price
    tax: dict
    shipping: dict
    total: Price


class CheckoutToken(BaseModel):
    """Checkout session generated from a cart"""
    id: str
    cart_id: str
    status: CheckoutStatus = CheckoutStatus.OPEN
    line_items: list[CheckoutLineItem]
    live: LiveObject
    gateways: list[Gateway]
    collects_billing_address: bool = False
    created_at: datetime


# ==================== Capture ====================


class CaptureCustomer(BaseModel):
    firstname: str = ""
    lastname: str = ""
    email: str = ""


class CaptureShipping(BaseModel):
    name: str = ""
    country: str = ""
    street: str = ""
    town_city: str = ""
    county_state: str = ""
    postal_zip_code: str = ""


class CaptureFulfillment(BaseModel):
    shipping_method: str = ""


class CaptureCard(BaseModel):
    number: str = ""
    expiry_month: str = ""
    expiry_year: str = ""
    cvc: str = ""
    postal_zip_code: str = ""


class CapturePayment(BaseModel):
    gateway: str = ""
    card: Optional[CaptureCard] = None


class CaptureRequest(BaseModel):
    """Order submitted against a checkout"""
    line_items: dict[str, dict] = {}
    customer: CaptureCustomer = CaptureCustomer()
    extrafields: dict[str, str] = {}
    shipping: CaptureShipping = CaptureShipping()
    fulfillment: CaptureFulfillment = CaptureFulfillment()
    payment: CapturePayment = CapturePayment()


class Order(BaseModel):
    """Captured order"""
    id: str
    checkout_token_id: str
    customer_reference: str
    status_payment: str = "paid"
    order_value: Price
    customer: CaptureCustomer
    shipping: CaptureShipping
    shipping_method: str
    gateway: str
    card_last_four: Optional[str] = None
    extrafields: dict[str, str] = {}
    created_at: datetime
