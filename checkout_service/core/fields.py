"""
Field Store

Shopper-editable checkout form values and their validation errors.

Reportable keys use the same bracketed paths the commerce backend puts in
validation errors (e.g. ``shipping[name]``), so an error's ``param`` can be
used directly as a lookup into the error map.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class FieldKey(str, Enum):
    """Form fields held by the store"""
    # Reported by the backend on validation failure
    CUSTOMER_EMAIL = "customer[email]"
    SHIPPING_NAME = "shipping[name]"
    SHIPPING_STREET = "shipping[street]"
    SHIPPING_TOWN_CITY = "shipping[town_city]"
    SHIPPING_POSTAL_ZIP_CODE = "shipping[postal_zip_code]"
    SHIPPING_METHOD = "fulfillment[shipping_method]"

    # Local only
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    STREET_2 = "street2"
    ORDER_NOTES = "order_notes"
    DELIVERY_COUNTRY = "delivery_country"
    DELIVERY_REGION = "delivery_region"
    CARD_NUMBER = "card_number"
    EXP_MONTH = "exp_month"
    EXP_YEAR = "exp_year"
    CVC = "cvc"
    BILLING_POSTAL_ZIP_CODE = "billing_postal_zip_code"

    @property
    def reportable(self) -> bool:
        return "[" in self.value


class ErrorKey(str, Enum):
    """Error slots that are not tied to a form field"""
    GATEWAY_ERROR = "gateway_error"
    BAD_REQUEST = "bad_request"


# Cleared at the start of every submission attempt
WELL_KNOWN_ERROR_KEYS = (
    FieldKey.SHIPPING_METHOD.value,
    ErrorKey.GATEWAY_ERROR.value,
    FieldKey.SHIPPING_NAME.value,
    FieldKey.SHIPPING_STREET.value,
)

REPORTABLE_ERROR_KEYS = tuple(
    [key.value for key in FieldKey if key.reportable] + [key.value for key in ErrorKey]
)

AnyKey = Union[FieldKey, ErrorKey, str]


def _key(key: AnyKey) -> str:
    return key.value if isinstance(key, Enum) else key


def format_card_number(value: str) -> str:
    """Group card digits in fours, keeping at most 16 digits"""
    digits = re.sub(r"\D", "", value)[:16]
    return " ".join(digits[i : i + 4] for i in range(0, len(digits), 4))


def default_values() -> dict[str, str]:
    """Prefilled demo form"""
    return {
        FieldKey.FIRST_NAME.value: "John",
        FieldKey.LAST_NAME.value: "Doe",
        FieldKey.CUSTOMER_EMAIL.value: "john@doe.com",
        FieldKey.SHIPPING_NAME.value: "John Doe",
        FieldKey.SHIPPING_STREET.value: "318 Homer Street",
        FieldKey.STREET_2.value: "",
        FieldKey.SHIPPING_TOWN_CITY.value: "Vancouver",
        FieldKey.SHIPPING_POSTAL_ZIP_CODE.value: "V6B 2V2",
        FieldKey.ORDER_NOTES.value: "",
        FieldKey.DELIVERY_COUNTRY.value: "CA",
        FieldKey.DELIVERY_REGION.value: "BC",
        FieldKey.SHIPPING_METHOD.value: "",
        FieldKey.CARD_NUMBER.value: format_card_number("4242424242424242"),
        FieldKey.EXP_MONTH.value: "11",
        FieldKey.EXP_YEAR.value: "22",
        FieldKey.CVC.value: "123",
        FieldKey.BILLING_POSTAL_ZIP_CODE.value: "V6B 2V2",
    }


@dataclass
class FieldStore:
    """Form values and per-field errors keyed by the shared field namespace"""
    values: dict[str, str] = field(default_factory=default_values)
    errors: dict[str, Optional[str]] = field(
        default_factory=lambda: dict.fromkeys(REPORTABLE_ERROR_KEYS)
    )
    selected_gateway: str = "test_gateway"

    def get(self, key: AnyKey) -> str:
        return self.values.get(_key(key), "")

    def set(self, key: AnyKey, value: str) -> str:
        """Set a value and return the previous one"""
        name = _key(key)
        if name == FieldKey.CARD_NUMBER.value:
            value = format_card_number(value)
        previous = self.values.get(name, "")
        self.values[name] = value
        return previous

    def error(self, key: AnyKey) -> Optional[str]:
        """Error for a key; unknown keys read as no error"""
        return self.errors.get(_key(key))

    def set_error(self, key: AnyKey, message: Optional[str]) -> None:
        self.errors[_key(key)] = message

    def reset_errors(self) -> None:
        """Clear every error while keeping all keys readable"""
        self.errors.update(dict.fromkeys([*self.errors, *WELL_KNOWN_ERROR_KEYS]))

    def snapshot(self) -> "FieldStore":
        return FieldStore(
            values=dict(self.values),
            errors=dict(self.errors),
            selected_gateway=self.selected_gateway,
        )
