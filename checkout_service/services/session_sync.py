"""
Session Synchronizer

Owns the remote checkout session: generates it from a cart, refreshes it
when the cart or delivery location changes, and attaches shipping options.

Every regeneration takes a generation token when it starts. A result is
applied only if no newer regeneration has started since, so late responses
from a superseded call never overwrite the current session. Shipping
updates carry their own sequence number and are dropped once a
regeneration has started after them.
"""

import itertools
import logging
from typing import Optional

import httpx

from ..models.checkout import CheckoutSession, ShippingOption
from .commerce_client import CommerceClient, MalformedResponse

logger = logging.getLogger(__name__)


class SessionSynchronizer:
    """Keeps the current checkout session and its shipping options"""

    def __init__(self, commerce: CommerceClient):
        self.commerce = commerce
        self.session: Optional[CheckoutSession] = None
        self.shipping_options: list[ShippingOption] = []
        self._generations = itertools.count(1)
        self._generation = 0
        self._updates = itertools.count(1)
        self._update = 0

    @property
    def generation(self) -> int:
        """Token of the most recently started regeneration"""
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    async def regenerate(
        self,
        cart_id: str,
        country: str,
        region: Optional[str] = None,
    ) -> Optional[CheckoutSession]:
        """
        Generate a new session for the cart, then fetch its shipping options.

        Returns the applied session, or None if the call failed or was
        superseded by a newer one.
        """
        self._generation = token = next(self._generations)
        logger.debug(f"Regenerating checkout for cart {cart_id} ({country}/{region}), generation {token}")

        try:
            session = await self.commerce.create_session(cart_id)
            if not self.is_current(token):
                logger.info(f"Discarding stale checkout session {session.id} (generation {token})")
                return None

            options = await self.commerce.get_shipping_options(session.id, country, region)
        except (httpx.HTTPError, MalformedResponse) as e:
            logger.error(f"Error regenerating checkout for cart {cart_id}: {e}")
            return None

        if not self.is_current(token):
            logger.info(f"Discarding stale shipping options for {session.id} (generation {token})")
            return None

        self.session = session
        self.shipping_options = options
        logger.info(f"Checkout session {session.id} ready with {len(options)} shipping options")
        return session

    async def set_shipping_option(
        self,
        option_id: str,
        country: str,
        region: Optional[str] = None,
    ) -> Optional[CheckoutSession]:
        """Push the selected shipping option to the current session"""
        if self.session is None:
            logger.warning("Cannot set shipping option without a checkout session")
            return None

        token = self._generation
        self._update = update = next(self._updates)
        session_id = self.session.id

        try:
            session = await self.commerce.set_shipping_option(session_id, option_id, country, region)
        except (httpx.HTTPError, MalformedResponse) as e:
            logger.error(f"Error setting shipping option {option_id} on {session_id}: {e}")
            return None

        stale = (
            not self.is_current(token)
            or update != self._update
            or self.session is None
            or self.session.id != session_id
        )
        if stale:
            logger.info(f"Discarding stale shipping update for {session_id}")
            return None

        self.session = session
        return session

    def selected_shipping_option(self, option_id: str) -> Optional[ShippingOption]:
        return next((option for option in self.shipping_options if option.id == option_id), None)
