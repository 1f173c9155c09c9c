"""Checkout state and in-memory management of active checkouts"""

import uuid
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class CheckoutState(str, Enum):
    """Current state of a checkout"""
    INITIALIZING = "initializing"
    READY = "ready"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    EXITED = "exited"


class RecordingNavigator:
    """Navigator that remembers where the checkout asked to go"""

    def __init__(self):
        self.redirects: list[str] = []

    def redirect_to(self, path: str) -> None:
        self.redirects.append(path)

    @property
    def location(self) -> Optional[str]:
        return self.redirects[-1] if self.redirects else None


@dataclass
class ActiveCheckout:
    """A checkout driven through the HTTP surface"""
    checkout_id: str
    created_at: datetime
    updated_at: datetime
    controller: Any
    navigator: RecordingNavigator
    alerts: list[str] = field(default_factory=list)

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    @property
    def state(self) -> CheckoutState:
        return self.controller.state

    def expired(self, now: datetime, max_idle: timedelta, finished_grace: timedelta) -> bool:
        """
        Whether the checkout can be dropped.

        A capture in flight keeps the checkout alive. Confirmed and exited
        checkouts only linger long enough for the storefront to read the
        outcome.
        """
        if self.state == CheckoutState.SUBMITTING:
            return False
        idle = now - self.updated_at
        if self.state in (CheckoutState.CONFIRMED, CheckoutState.EXITED):
            return idle > finished_grace
        return idle > max_idle


class CheckoutManager:
    """Active checkouts keyed by id, each owning one controller"""

    def __init__(self):
        self.checkouts: dict[str, ActiveCheckout] = {}

    def create_checkout(
        self,
        controller_factory: Callable[[RecordingNavigator, Callable[[str], None]], Any],
    ) -> ActiveCheckout:
        """Create a new checkout; the factory wires navigation and alerts"""
        now = datetime.utcnow()
        navigator = RecordingNavigator()
        alerts: list[str] = []
        checkout = ActiveCheckout(
            checkout_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            controller=controller_factory(navigator, alerts.append),
            navigator=navigator,
            alerts=alerts,
        )
        self.checkouts[checkout.checkout_id] = checkout
        logger.info(f"Checkout {checkout.checkout_id} created")
        return checkout

    def get_checkout(self, checkout_id: str) -> Optional[ActiveCheckout]:
        return self.checkouts.get(checkout_id)

    def delete_checkout(self, checkout_id: str) -> bool:
        return self.checkouts.pop(checkout_id, None) is not None

    def expire_checkouts(
        self,
        max_idle_hours: int = 24,
        finished_grace_minutes: int = 30,
        now: Optional[datetime] = None,
    ) -> list[str]:
        """Drop expired checkouts, returning their ids"""
        now = now or datetime.utcnow()
        max_idle = timedelta(hours=max_idle_hours)
        finished_grace = timedelta(minutes=finished_grace_minutes)

        expired = [
            checkout_id for checkout_id, checkout in self.checkouts.items()
            if checkout.expired(now, max_idle, finished_grace)
        ]
        for checkout_id in expired:
            del self.checkouts[checkout_id]
        if expired:
            logger.info(f"Expired {len(expired)} checkouts")
        return expired


# Singleton instance
checkout_manager = CheckoutManager()
