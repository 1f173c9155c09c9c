"""Locale reference data and shipping zones"""

from typing import Optional

from ..models.checkout import ShippingMethod
from ..models.pricing import format_price

COUNTRIES: dict[str, str] = {
    "CA": "Canada",
    "US": "United States",
    "GB": "United Kingdom",
}

SUBDIVISIONS: dict[str, dict[str, str]] = {
    "CA": {
        "AB": "Alberta",
        "BC": "British Columbia",
        "ON": "Ontario",
        "QC": "Quebec",
    },
    "US": {
        "CA": "California",
        "NY": "New York",
        "WA": "Washington",
    },
    "GB": {
        "ENG": "England",
        "SCT": "Scotland",
        "WLS": "Wales",
    },
}

# Shipping methods per destination country
SHIPPING_ZONES: dict[str, list[tuple[str, str, float]]] = {
    "CA": [
        ("ship_ca_standard", "Canada Post Standard", 10.00),
        ("ship_ca_expedited", "Canada Post Expedited", 25.00),
    ],
    "US": [
        ("ship_us_ground", "USPS Ground", 15.00),
    ],
}

INTERNATIONAL = [("ship_intl", "International Tracked", 40.00)]

# Sales tax by (country, region); region None is the country default
TAX_RATES: dict[tuple[str, Optional[str]], float] = {
    ("CA", None): 0.05,
    ("CA", "BC"): 0.12,
    ("CA", "ON"): 0.13,
    ("US", None): 0.0,
    ("US", "WA"): 0.065,
}


class LocaleDatabase:
    """Read-only locale lookups"""

    def list_countries(self) -> dict[str, str]:
        return dict(COUNTRIES)

    def list_subdivisions(self, country_code: str) -> Optional[dict[str, str]]:
        subdivisions = SUBDIVISIONS.get(country_code.upper())
        return dict(subdivisions) if subdivisions is not None else None

    def shipping_methods(self, country_code: str) -> list[ShippingMethod]:
        """Shipping methods available for a destination country"""
        zone = SHIPPING_ZONES.get(country_code.upper(), INTERNATIONAL)
        return [
            ShippingMethod(id=method_id, description=description, price=format_price(price))
            for method_id, description, price in zone
        ]

    def tax_rate(self, country_code: str, region: Optional[str] = None) -> float:
        country_code = country_code.upper()
        if (country_code, region) in TAX_RATES:
            return TAX_RATES[(country_code, region)]
        return TAX_RATES.get((country_code, None), 0.0)


# Singleton instance
locale_db = LocaleDatabase()
