"""Shared fixtures: in-process commerce backend and a scripted fake"""

import asyncio
from typing import Optional

import httpx
import pytest

from checkout_service.core.session import RecordingNavigator
from checkout_service.models.checkout import (
    CheckoutSession,
    LineItem,
    LiveSnapshot,
    Price,
    ShippingOption,
    VariantSelection,
)
from checkout_service.services.commerce_client import CommerceClient
from mock_commerce.database import cart_db, checkout_db, order_db
from mock_commerce.main import app as commerce_app

COMMERCE_URL = "http://commerce.test"


@pytest.fixture(autouse=True)
def reset_commerce_state():
    cart_db.reset()
    checkout_db.reset()
    order_db.reset()
    yield


@pytest.fixture
async def commerce_http():
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=commerce_app),
        base_url=COMMERCE_URL,
    ) as client:
        yield client


@pytest.fixture
def commerce(commerce_http):
    return CommerceClient(base_url=COMMERCE_URL, public_key="pk_test", http_client=commerce_http)


@pytest.fixture
async def stub_commerce():
    """Build a CommerceClient whose every request is answered by ``handler``"""
    clients: list[httpx.AsyncClient] = []

    def _stub(handler) -> CommerceClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=COMMERCE_URL)
        clients.append(http)
        return CommerceClient(base_url=COMMERCE_URL, public_key="pk_test", http_client=http)

    yield _stub
    for http in clients:
        await http.aclose()


def maintenance_page(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="<html>maintenance</html>", headers={"Content-Type": "text/html"})


@pytest.fixture
def make_cart(commerce_http):
    """Create a cart on the mock backend with a tee (size M) and two mugs"""

    async def _make_cart() -> dict:
        response = await commerce_http.post("/v1/carts")
        cart_id = response.json()["id"]
        await commerce_http.post(
            f"/v1/carts/{cart_id}",
            json={"product_id": "prod_shirt", "quantity": 1, "variants": {"vgrp_size": "optn_m"}},
        )
        response = await commerce_http.post(
            f"/v1/carts/{cart_id}",
            json={"product_id": "prod_mug", "quantity": 1},
        )
        return response.json()

    return _make_cart


@pytest.fixture
def navigator():
    return RecordingNavigator()


def make_session(session_id: str = "chkt_1", cart_id: str = "cart_1") -> CheckoutSession:
    items = [
        LineItem(
            id="item_1",
            product_id="prod_shirt",
            product_name="Organic Cotton Tee",
            quantity=1,
            price=Price(raw=32.0, formatted="32.00"),
            variants=[VariantSelection(variant_id="vgrp_size", option_id="optn_m")],
        ),
        LineItem(
            id="item_2",
            product_id="prod_mug",
            product_name="Stoneware Mug",
            quantity=2,
            price=Price(raw=18.5, formatted="18.50"),
        ),
    ]
    return CheckoutSession(
        id=session_id,
        cart_id=cart_id,
        live=LiveSnapshot(line_items=items),
        line_items=items,
    )


class ScriptedCommerce:
    """
    Fake commerce backend.

    Calls can be held open with ``hold(name)`` and released later, to
    control the order in which concurrent requests resolve.
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.failures: set[str] = set()
        self._gates: dict[str, list[asyncio.Event]] = {}
        self._sessions = 0

    def hold(self, name: str) -> asyncio.Event:
        """Hold the next call to ``name`` until the returned event is set"""
        event = asyncio.Event()
        self._gates.setdefault(name, []).append(event)
        return event

    async def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        gates = self._gates.get(name)
        if gates:
            await gates.pop(0).wait()
        if name in self.failures:
            raise httpx.ConnectError(f"{name} unavailable")

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def create_session(self, cart_id: str) -> CheckoutSession:
        self._sessions += 1
        session_id = f"chkt_{self._sessions}"
        await self._enter("create_session", cart_id)
        return make_session(session_id, cart_id)

    async def get_shipping_options(
        self, session_id: str, country: str, region: Optional[str] = None
    ) -> list[ShippingOption]:
        await self._enter("get_shipping_options", session_id, country, region)
        return [
            ShippingOption(id=f"ship_{country.lower()}_standard", description=f"{session_id} standard"),
            ShippingOption(id=f"ship_{country.lower()}_express", description=f"{session_id} express"),
        ]

    async def set_shipping_option(
        self, session_id: str, option_id: str, country: str, region: Optional[str] = None
    ) -> CheckoutSession:
        await self._enter("set_shipping_option", session_id, option_id, country, region)
        session = make_session(session_id)
        session.live.shipping.id = option_id
        return session

    async def list_countries(self) -> dict[str, str]:
        await self._enter("list_countries")
        return {"CA": "Canada", "US": "United States"}

    async def list_subdivisions(self, country_code: str) -> dict[str, str]:
        await self._enter("list_subdivisions", country_code)
        return {"CA": {"BC": "British Columbia"}, "US": {"WA": "Washington"}}.get(country_code, {})


@pytest.fixture
def scripted():
    return ScriptedCommerce()
