"""Order capture models"""

from pydantic import BaseModel
from typing import Any, Optional, Union
from enum import Enum


class ErrorKind(str, Enum):
    """Error types the commerce backend reports on capture"""
    VALIDATION = "validation"
    GATEWAY_ERROR = "gateway_error"
    NOT_VALID = "not_valid"
    BAD_REQUEST = "bad_request"


class Customer(BaseModel):
    firstname: str
    lastname: str
    email: str


class ShippingAddress(BaseModel):
    name: str
    country: str
    street: str
    town_city: str
    county_state: str
    postal_zip_code: str


class Fulfillment(BaseModel):
    shipping_method: str


class Card(BaseModel):
    number: str
    expiry_month: str
    expiry_year: str
    cvc: str
    postal_zip_code: str


class Payment(BaseModel):
    gateway: str
    card: Optional[Card] = None


class OrderPayload(BaseModel):
    """Submission-ready order built from the form and the checkout session"""
    line_items: dict[str, dict[str, Any]]
    customer: Customer
    extrafields: dict[str, str] = {}
    shipping: ShippingAddress
    fulfillment: Fulfillment
    payment: Payment

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the capture request, omitting the card when absent"""
        return self.model_dump(exclude_none=True)


class OrderConfirmation(BaseModel):
    """Successful capture result"""
    id: str
    customer_reference: Optional[str] = None
    status_payment: Optional[str] = None
    order_value: Optional[dict[str, Any]] = None


class FieldMessage(BaseModel):
    """One offending field in a validation failure"""
    field: str
    message: str


class SubmissionError(BaseModel):
    """Error returned when an order capture fails"""
    kind: str
    message: Union[list[FieldMessage], str] = ""

    @classmethod
    def from_wire(cls, error: dict[str, Any]) -> "SubmissionError":
        """Parse the backend's ``{"type", "message"}`` error body"""
        message = error.get("message", "")
        if isinstance(message, list):
            message = [
                FieldMessage(field=entry.get("param", ""), message=entry.get("error", ""))
                for entry in message
            ]
        return cls(kind=error.get("type", ""), message=message)
