"""Builds the capture payload from the form and the checkout session"""

from typing import Any

from ..core.config import Settings, settings as default_settings
from ..core.fields import FieldKey, FieldStore
from ..models.checkout import CheckoutSession, LineItem
from ..models.order import (
    Card,
    Customer,
    Fulfillment,
    OrderPayload,
    Payment,
    ShippingAddress,
)


class OrderBuildError(ValueError):
    """The session cannot be turned into an order"""


def join_street(primary: str, secondary: str, separator: str = "") -> str:
    """Street line sent to the backend; the second line is appended as-is"""
    return separator.join(part for part in (primary, secondary) if part)


def _line_item_entry(item: LineItem) -> dict[str, Any]:
    entry = item.model_dump(exclude={"variants"})
    entry["variants"] = {variant.variant_id: variant.option_id for variant in item.variants}
    return entry


def build_order(
    fields: FieldStore,
    session: CheckoutSession,
    settings: Settings = default_settings,
) -> OrderPayload:
    """
    Construct the order for ``session`` from the current form values.

    Pure: no I/O, and the same inputs always produce the same payload.

    Raises:
        OrderBuildError: session is missing or has no live line items
    """
    if session is None:
        raise OrderBuildError("Cannot build an order without a checkout session")
    if session.live is None or session.live.line_items is None:
        raise OrderBuildError(f"Checkout session {session.id} has no live line items")

    line_items = {item.id: _line_item_entry(item) for item in session.live.line_items}

    card = None
    if fields.selected_gateway == settings.test_gateway_id:
        card = Card(
            number=fields.get(FieldKey.CARD_NUMBER),
            expiry_month=fields.get(FieldKey.EXP_MONTH),
            expiry_year=fields.get(FieldKey.EXP_YEAR),
            cvc=fields.get(FieldKey.CVC),
            postal_zip_code=fields.get(FieldKey.BILLING_POSTAL_ZIP_CODE),
        )

    return OrderPayload(
        line_items=line_items,
        customer=Customer(
            firstname=fields.get(FieldKey.FIRST_NAME),
            lastname=fields.get(FieldKey.LAST_NAME),
            email=fields.get(FieldKey.CUSTOMER_EMAIL),
        ),
        extrafields={settings.order_notes_field_id: fields.get(FieldKey.ORDER_NOTES)},
        shipping=ShippingAddress(
            name=fields.get(FieldKey.SHIPPING_NAME),
            country=fields.get(FieldKey.DELIVERY_COUNTRY),
            street=join_street(
                fields.get(FieldKey.SHIPPING_STREET),
                fields.get(FieldKey.STREET_2),
            ),
            town_city=fields.get(FieldKey.SHIPPING_TOWN_CITY),
            county_state=fields.get(FieldKey.DELIVERY_REGION),
            postal_zip_code=fields.get(FieldKey.SHIPPING_POSTAL_ZIP_CODE),
        ),
        fulfillment=Fulfillment(shipping_method=fields.get(FieldKey.SHIPPING_METHOD)),
        payment=Payment(gateway=fields.selected_gateway, card=card),
    )
