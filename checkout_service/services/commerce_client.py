"""
Commerce API Client

HTTP client for the commerce backend that owns carts, checkout sessions,
shipping options, locale reference data and order capture.
"""

import logging
from typing import Optional, Any

import httpx
from pydantic import BaseModel, ValidationError

from ..models.checkout import CheckoutSession, ShippingOption
from ..models.order import OrderConfirmation, OrderPayload, SubmissionError

logger = logging.getLogger(__name__)


class MalformedResponse(Exception):
    """Successful response whose body is not JSON or not the expected shape"""

    def __init__(self, method: str, path: str, detail: str):
        super().__init__(f"{method} {path}: {detail}")
        self.method = method
        self.path = path


class CaptureFailed(Exception):
    """Order capture was rejected or could not be completed"""

    def __init__(self, error: SubmissionError):
        super().__init__(f"{error.kind}: {error.message}")
        self.error = error


class CommerceClient:
    """
    Client for the commerce backend API.

    Every request carries the store's public key in ``X-Authorization``.
    Transport and status failures raise ``httpx.HTTPError``; bodies that
    cannot be read raise ``MalformedResponse``.
    """

    def __init__(
        self,
        base_url: str,
        public_key: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize commerce client.

        Args:
            base_url: Base URL of the commerce API
            public_key: Store public key, sent on every request
            timeout: Request timeout in seconds
            http_client: Preconfigured client (e.g. bound to an ASGI transport)
        """
        self.base_url = base_url.rstrip("/")
        self._public_key = public_key
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

        if not public_key:
            logger.warning("No commerce public key configured - requests are unauthenticated")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._public_key:
            headers["X-Authorization"] = self._public_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request, raising on error status or an unreadable body"""
        url = f"{self.base_url}{path}"

        response = await self._http_client.request(
            method=method,
            url=url,
            headers=self._generate_headers(),
            json=body,
            params=params,
        )

        if response.status_code >= 400:
            logger.error(f"Request failed: {method} {path} {response.status_code} - {response.text}")
            response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Non-JSON response: {method} {path} {response.status_code} - {response.text[:200]}")
            raise MalformedResponse(method, path, "body is not JSON") from e

    async def _get_model(self, model: type[BaseModel], method: str, path: str, **kwargs) -> Any:
        data = await self._request(method, path, **kwargs)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(method, path, f"unexpected {model.__name__}: {e}") from e

    async def _get_mapping(self, path: str, key: str) -> dict[str, str]:
        data = await self._request("GET", path)
        mapping = data.get(key) if isinstance(data, dict) else None
        if not isinstance(mapping, dict):
            raise MalformedResponse("GET", path, f"expected an object with '{key}'")
        return mapping

    # ==================== Checkout APIs ====================

    async def create_session(self, cart_id: str) -> CheckoutSession:
        """Generate a checkout session from a cart"""
        return await self._get_model(
            CheckoutSession,
            "GET",
            f"/v1/checkouts/{cart_id}",
            params={"type": "cart"},
        )

    async def get_shipping_options(
        self,
        session_id: str,
        country: str,
        region: Optional[str] = None,
    ) -> list[ShippingOption]:
        """List shipping options for a session and destination"""
        params = {"country": country}
        if region:
            params["region"] = region

        path = f"/v1/checkouts/{session_id}/helper/shipping_options"
        data = await self._request("GET", path, params=params)
        if not isinstance(data, list):
            raise MalformedResponse("GET", path, "expected a list of shipping options")
        try:
            return [ShippingOption.model_validate(option) for option in data]
        except ValidationError as e:
            raise MalformedResponse("GET", path, f"unexpected ShippingOption: {e}") from e

    async def set_shipping_option(
        self,
        session_id: str,
        option_id: str,
        country: str,
        region: Optional[str] = None,
    ) -> CheckoutSession:
        """Apply a shipping option to the session's live snapshot"""
        params = {"shipping_option_id": option_id, "country": country}
        if region:
            params["region"] = region

        return await self._get_model(
            CheckoutSession,
            "GET",
            f"/v1/checkouts/{session_id}/check/shipping",
            params=params,
        )

    async def capture_order(
        self,
        session_id: str,
        payload: OrderPayload,
    ) -> OrderConfirmation:
        """
        Capture an order for a checkout session.

        Raises:
            CaptureFailed: backend rejected the order, could not be reached,
                or answered with an unreadable confirmation
        """
        try:
            return await self._get_model(
                OrderConfirmation,
                "POST",
                f"/v1/checkouts/{session_id}",
                body=payload.to_wire(),
            )
        except httpx.HTTPStatusError as e:
            raise CaptureFailed(_parse_error(e.response)) from e
        except httpx.HTTPError as e:
            raise CaptureFailed(SubmissionError(kind="network_error", message=str(e))) from e
        except MalformedResponse as e:
            raise CaptureFailed(SubmissionError(kind="unknown", message=str(e))) from e

    # ==================== Locale APIs ====================

    async def list_countries(self) -> dict[str, str]:
        """All countries, code -> name"""
        return await self._get_mapping("/v1/services/locale/countries", "countries")

    async def list_subdivisions(self, country_code: str) -> dict[str, str]:
        """Subdivisions of a country, code -> name"""
        return await self._get_mapping(f"/v1/services/locale/{country_code}/subdivisions", "subdivisions")


def _parse_error(response: httpx.Response) -> SubmissionError:
    try:
        body = response.json()
    except ValueError:
        return SubmissionError(kind="unknown", message=response.text)

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return SubmissionError(kind="unknown", message=response.text)
    try:
        return SubmissionError.from_wire(error)
    except (ValidationError, AttributeError):
        return SubmissionError(kind="unknown", message=response.text)
