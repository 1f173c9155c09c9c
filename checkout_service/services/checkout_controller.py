"""
Checkout Controller

Coordinates the field store, session synchronizer, reference data and
order submission in response to checkout events:

1. Mount: generate the checkout session and load countries/subdivisions
2. Cart changes: regenerate, or leave checkout when the cart empties
3. Delivery location edits: refresh subdivisions and regenerate
4. Shipping method edits: push the selection to the session
5. Submit: build, capture, and route errors back into the form

Event methods are synchronous and schedule their remote work as tasks;
``settle()`` waits for everything scheduled so far.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol, Union

from ..core.config import Settings, settings as default_settings
from ..core.fields import FieldKey, FieldStore
from ..core.session import CheckoutState
from ..models.checkout import CartRef, CheckoutSession, ShippingOption
from ..models.order import OrderConfirmation
from .commerce_client import CaptureFailed
from .order_builder import OrderBuildError, build_order
from .order_submitter import OrderSubmitter, classify
from .reference_data import ReferenceDataClient
from .session_sync import SessionSynchronizer

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def redirect_to(self, path: str) -> None: ...


class CheckoutNotReady(Exception):
    """Submit was requested before a checkout session is available"""


def _log_alert(message: str) -> None:
    logger.warning(f"Checkout alert: {message}")


class CheckoutController:
    """Checkout state machine for a single shopper"""

    def __init__(
        self,
        synchronizer: SessionSynchronizer,
        reference_data: ReferenceDataClient,
        submitter: OrderSubmitter,
        navigator: Navigator,
        alert: Callable[[str], None] = _log_alert,
        fields: Optional[FieldStore] = None,
        settings: Settings = default_settings,
    ):
        self.synchronizer = synchronizer
        self.reference_data = reference_data
        self.submitter = submitter
        self.navigator = navigator
        self.alert = alert
        self.settings = settings
        self.state = CheckoutState.INITIALIZING
        self.cart: Optional[CartRef] = None
        self._tasks: set[asyncio.Task] = set()

        if fields is None:
            fields = FieldStore()
            fields.set(FieldKey.DELIVERY_COUNTRY, settings.default_delivery_country)
            fields.set(FieldKey.DELIVERY_REGION, settings.default_delivery_region)
        self.fields = fields

    # ==================== Views ====================

    @property
    def session(self) -> Optional[CheckoutSession]:
        return self.synchronizer.session

    @property
    def shipping_options(self) -> list[ShippingOption]:
        return self.synchronizer.shipping_options

    @property
    def selected_shipping_option(self) -> Optional[ShippingOption]:
        return self.synchronizer.selected_shipping_option(self.fields.get(FieldKey.SHIPPING_METHOD))

    @property
    def countries(self) -> dict[str, str]:
        return self.reference_data.countries

    @property
    def subdivisions(self) -> dict[str, str]:
        return self.reference_data.subdivisions

    @property
    def delivery_country(self) -> str:
        return self.fields.get(FieldKey.DELIVERY_COUNTRY)

    @property
    def delivery_region(self) -> str:
        return self.fields.get(FieldKey.DELIVERY_REGION)

    @property
    def finished(self) -> bool:
        return self.state in (CheckoutState.CONFIRMED, CheckoutState.EXITED)

    # ==================== Events ====================

    def mount(self, cart: CartRef) -> None:
        """Start checkout for a cart"""
        self.cart = cart
        if cart.total_items == 0:
            self._exit()
            return

        self._spawn(self._regenerate())
        self._spawn(self.reference_data.list_countries())
        self._spawn(self.reference_data.list_subdivisions(self.delivery_country))

    def update_cart(self, cart: CartRef) -> None:
        """Cart contents changed upstream"""
        previous, self.cart = self.cart, cart

        if cart.total_items == 0:
            self._exit()
            return

        if previous is not None and previous.total_items != cart.total_items:
            logger.info(f"Cart {cart.id} changed ({previous.total_items} -> {cart.total_items} items)")
            self._clear_shipping_method()
            self._spawn(self._regenerate())

    def set_field(self, key: Union[FieldKey, str], value: str) -> None:
        """
        Shopper edited a form field.

        A country change always regenerates; a region change only does so
        while a session exists.
        """
        key = FieldKey(key)
        previous = self.fields.set(key, value)
        current = self.fields.get(key)
        if current == previous:
            return

        country_changed = key == FieldKey.DELIVERY_COUNTRY
        region_changed = key == FieldKey.DELIVERY_REGION

        if country_changed:
            self._spawn(self.reference_data.list_subdivisions(current))

        if country_changed or (region_changed and self.session is not None):
            self._clear_shipping_method()
            self._spawn(self._regenerate())

        elif key == FieldKey.SHIPPING_METHOD and current and self.session is not None:
            self._spawn(
                self.synchronizer.set_shipping_option(current, self.delivery_country, self.delivery_region)
            )

    def select_gateway(self, gateway: str) -> None:
        self.fields.selected_gateway = gateway

    async def submit(self) -> Optional[OrderConfirmation]:
        """
        Capture the order for the current session.

        Returns the confirmation, or None when the backend rejected the
        order; rejections are written into the field store and alerted.

        Raises:
            CheckoutNotReady: no usable session yet, or already submitting
        """
        session = self.session
        if self.state != CheckoutState.READY or session is None:
            raise CheckoutNotReady(f"Cannot submit while {self.state.value}")

        self.state = CheckoutState.SUBMITTING
        self.fields.reset_errors()

        try:
            payload = build_order(self.fields, session, self.settings)
            confirmation = await self.submitter.submit(session.id, payload)
            self.state = CheckoutState.CONFIRMED
        except OrderBuildError as e:
            raise CheckoutNotReady(str(e)) from e
        except CaptureFailed as e:
            routing = classify(e.error)
            for key, message in routing.field_errors.items():
                self.fields.set_error(key, message)
            if routing.alert:
                self.alert(routing.alert)
            return None
        finally:
            # Anything short of a confirmation leaves the order retryable
            if self.state == CheckoutState.SUBMITTING:
                self.state = CheckoutState.READY

        self.navigator.redirect_to(self.settings.confirmation_path)
        return confirmation

    async def settle(self) -> None:
        """Wait for all scheduled remote work, including work it schedules"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ==================== Internals ====================

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _clear_shipping_method(self) -> None:
        self.fields.set(FieldKey.SHIPPING_METHOD, "")

    def _exit(self) -> None:
        if self.finished:
            return
        logger.info("Cart is empty, redirecting out of checkout")
        self.state = CheckoutState.EXITED
        self.navigator.redirect_to(self.settings.exit_path)

    async def _regenerate(self) -> None:
        if self.cart is None or self.finished:
            return

        session = await self.synchronizer.regenerate(
            self.cart.id,
            self.delivery_country,
            self.delivery_region,
        )
        if session is not None and self.state == CheckoutState.INITIALIZING:
            self.state = CheckoutState.READY
