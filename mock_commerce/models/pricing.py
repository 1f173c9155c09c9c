"""Currency formatting shared by carts and checkouts"""

from pydantic import BaseModel

CURRENCY_SYMBOL = "$"
CURRENCY_CODE = "USD"


class Price(BaseModel):
    raw: float
    formatted: str
    formatted_with_symbol: str
    formatted_with_code: str


def format_price(amount: float) -> Price:
    """Format an amount the way the storefront displays it"""
    amount = round(amount, 2)
    formatted = f"{amount:,.2f}"
    return Price(
        raw=amount,
        formatted=formatted,
        formatted_with_symbol=f"{CURRENCY_SYMBOL}{formatted}",
        formatted_with_code=f"{formatted} {CURRENCY_CODE}",
    )
