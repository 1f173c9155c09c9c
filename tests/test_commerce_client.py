"""Commerce client against the in-process mock backend"""

import httpx
import pytest

from checkout_service.core.fields import FieldKey, FieldStore
from checkout_service.services.commerce_client import CaptureFailed, CommerceClient, MalformedResponse
from checkout_service.services.order_builder import build_order
from checkout_service.services.reference_data import ReferenceDataClient

from conftest import COMMERCE_URL, maintenance_page, make_session


async def test_create_session_snapshots_the_cart(commerce, make_cart):
    cart = await make_cart()

    session = await commerce.create_session(cart["id"])

    assert session.id.startswith("chkt_")
    assert session.cart_id == cart["id"]
    assert [item.id for item in session.live.line_items] == [item["id"] for item in cart["line_items"]]
    assert session.root_line_item(session.line_items[0].id).image == "/static/images/tee.jpg"
    assert session.live.line_items[0].variants[0].option_id == "optn_m"
    assert session.live.subtotal.formatted_with_symbol == "$50.50"
    assert {gateway.code for gateway in session.gateways} == {"test_gateway", "stripe"}


async def test_shipping_options_depend_on_destination(commerce, make_cart):
    cart = await make_cart()
    session = await commerce.create_session(cart["id"])

    canada = await commerce.get_shipping_options(session.id, "CA", "BC")
    france = await commerce.get_shipping_options(session.id, "FR")

    assert [option.id for option in canada] == ["ship_ca_standard", "ship_ca_expedited"]
    assert canada[0].price.formatted_with_symbol == "$10.00"
    assert [option.id for option in france] == ["ship_intl"]


async def test_set_shipping_option_recomputes_live_totals(commerce, make_cart):
    cart = await make_cart()
    session = await commerce.create_session(cart["id"])

    updated = await commerce.set_shipping_option(session.id, "ship_ca_expedited", "CA", "BC")

    assert updated.live.shipping.id == "ship_ca_expedited"
    assert updated.live.tax.amount.raw == pytest.approx(6.06)
    assert updated.live.total.raw == pytest.approx(50.50 + 6.06 + 25.00)


async def test_unknown_session_raises_http_error(commerce):
    with pytest.raises(httpx.HTTPStatusError):
        await commerce.create_session("cart_missing")


async def test_locale_lookups(commerce):
    countries = await commerce.list_countries()
    subdivisions = await commerce.list_subdivisions("CA")

    assert countries["CA"] == "Canada"
    assert subdivisions["BC"] == "British Columbia"


class TestCapture:
    async def _session(self, commerce, make_cart):
        cart = await make_cart()
        return await commerce.create_session(cart["id"])

    async def test_capture_succeeds(self, commerce, make_cart, commerce_http):
        session = await self._session(commerce, make_cart)
        fields = FieldStore()
        fields.set(FieldKey.SHIPPING_METHOD, "ship_ca_standard")

        confirmation = await commerce.capture_order(session.id, build_order(fields, session))

        assert confirmation.id.startswith("ord_")
        assert confirmation.status_payment == "paid"
        cart = (await commerce_http.get(f"/v1/carts/{session.cart_id}")).json()
        assert cart["total_items"] == 0

    async def test_validation_errors_are_parsed(self, commerce, make_cart):
        session = await self._session(commerce, make_cart)
        fields = FieldStore()
        fields.set(FieldKey.SHIPPING_NAME, "")
        fields.set(FieldKey.CUSTOMER_EMAIL, "not-an-email")

        with pytest.raises(CaptureFailed) as exc_info:
            await commerce.capture_order(session.id, build_order(fields, session))

        error = exc_info.value.error
        assert error.kind == "validation"
        assert {(entry.field, entry.message) for entry in error.message} == {
            ("shipping[name]", "is required"),
            ("customer[email]", "must be a valid email address"),
        }

    async def test_missing_shipping_method_is_not_valid(self, commerce, make_cart):
        session = await self._session(commerce, make_cart)

        with pytest.raises(CaptureFailed) as exc_info:
            await commerce.capture_order(session.id, build_order(FieldStore(), session))

        assert exc_info.value.error.kind == "not_valid"

    async def test_declined_card_is_a_gateway_error(self, commerce, make_cart):
        session = await self._session(commerce, make_cart)
        fields = FieldStore()
        fields.set(FieldKey.SHIPPING_METHOD, "ship_ca_standard")
        fields.set(FieldKey.CARD_NUMBER, "4000000000000002")

        with pytest.raises(CaptureFailed) as exc_info:
            await commerce.capture_order(session.id, build_order(fields, session))

        assert exc_info.value.error.kind == "gateway_error"
        assert exc_info.value.error.message == "Your card was declined"

    async def test_unknown_gateway_is_a_bad_request(self, commerce, make_cart):
        session = await self._session(commerce, make_cart)
        fields = FieldStore()
        fields.set(FieldKey.SHIPPING_METHOD, "ship_ca_standard")
        fields.selected_gateway = "paypal"

        with pytest.raises(CaptureFailed) as exc_info:
            await commerce.capture_order(session.id, build_order(fields, session))

        assert exc_info.value.error.kind == "bad_request"

    async def test_second_capture_is_a_bad_request(self, commerce, make_cart):
        session = await self._session(commerce, make_cart)
        fields = FieldStore()
        fields.set(FieldKey.SHIPPING_METHOD, "ship_ca_standard")
        await commerce.capture_order(session.id, build_order(fields, session))

        with pytest.raises(CaptureFailed) as exc_info:
            await commerce.capture_order(session.id, build_order(fields, session))

        assert exc_info.value.error.kind == "bad_request"

    async def test_network_failure_is_reported_as_capture_failure(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as http:
            client = CommerceClient(base_url=COMMERCE_URL, http_client=http)
            fields = FieldStore()

            with pytest.raises(CaptureFailed) as exc_info:
                await client.capture_order("chkt_1", build_order(fields, make_session()))

        assert exc_info.value.error.kind == "network_error"

    async def test_non_json_error_body_is_unclassified(self):
        def teapot(request):
            return httpx.Response(418, text="I'm a teapot")

        async with httpx.AsyncClient(transport=httpx.MockTransport(teapot)) as http:
            client = CommerceClient(base_url=COMMERCE_URL, http_client=http)

            with pytest.raises(CaptureFailed) as exc_info:
                await client.capture_order("chkt_1", build_order(FieldStore(), make_session()))

        assert exc_info.value.error.kind == "unknown"


async def test_public_key_header_is_sent():
    seen = []

    def record(request):
        seen.append(request.headers.get("X-Authorization"))
        return httpx.Response(200, json={"countries": {}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(record)) as http:
        client = CommerceClient(base_url=COMMERCE_URL, public_key="pk_test_123", http_client=http)
        await client.list_countries()

    assert seen == ["pk_test_123"]


async def test_mock_rejects_wrong_public_key(commerce_http, monkeypatch):
    monkeypatch.setenv("COMMERCE_PUBLIC_KEY", "pk_live")

    response = await commerce_http.get(
        "/v1/services/locale/countries",
        headers={"X-Authorization": "pk_test"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["type"] == "authentication_error"


async def test_reference_data_keeps_last_good_subdivisions(commerce):
    reference = ReferenceDataClient(commerce)

    assert (await reference.list_subdivisions("CA"))["ON"] == "Ontario"
    assert await reference.list_subdivisions("ZZ") is None
    assert reference.subdivisions["ON"] == "Ontario"


class TestMalformedResponses:
    async def test_non_json_success_body(self, stub_commerce):
        client = stub_commerce(maintenance_page)

        with pytest.raises(MalformedResponse):
            await client.create_session("cart_1")

    @pytest.mark.parametrize("body", [["CA", "US"], {"countries": ["CA"]}, {}])
    async def test_wrongly_shaped_locale_body(self, stub_commerce, body):
        client = stub_commerce(lambda request: httpx.Response(200, json=body))

        with pytest.raises(MalformedResponse):
            await client.list_countries()

    async def test_shipping_options_must_be_a_list(self, stub_commerce):
        client = stub_commerce(lambda request: httpx.Response(200, json={"id": "ship_ca_standard"}))

        with pytest.raises(MalformedResponse):
            await client.get_shipping_options("chkt_1", "CA")

    async def test_unreadable_confirmation_is_a_capture_failure(self, stub_commerce):
        client = stub_commerce(lambda request: httpx.Response(201, json={"unexpected": True}))

        with pytest.raises(CaptureFailed) as exc_info:
            await client.capture_order("chkt_1", build_order(FieldStore(), make_session()))

        assert exc_info.value.error.kind == "unknown"
