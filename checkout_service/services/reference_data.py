"""Country and subdivision lookups"""

import logging
from typing import Optional

import httpx

from .commerce_client import CommerceClient, MalformedResponse

logger = logging.getLogger(__name__)


class ReferenceDataClient:
    """
    Read-only locale lookups.

    Keeps the last successful result of each lookup; a failed fetch is
    logged and leaves the previous data in place.
    """

    def __init__(self, commerce: CommerceClient):
        self.commerce = commerce
        self.countries: dict[str, str] = {}
        self.subdivisions: dict[str, str] = {}

    async def list_countries(self) -> Optional[dict[str, str]]:
        try:
            self.countries = await self.commerce.list_countries()
        except (httpx.HTTPError, MalformedResponse) as e:
            logger.error(f"Failed to list countries: {e}")
            return None
        return self.countries

    async def list_subdivisions(self, country_code: str) -> Optional[dict[str, str]]:
        try:
            self.subdivisions = await self.commerce.list_subdivisions(country_code)
        except (httpx.HTTPError, MalformedResponse) as e:
            logger.error(f"Failed to list subdivisions for {country_code}: {e}")
            return None
        return self.subdivisions
