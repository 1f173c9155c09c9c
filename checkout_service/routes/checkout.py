"""Checkout API routes"""

from typing import Callable, Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException, Depends

from ..core.config import settings
from ..core.fields import FieldKey
from ..core.session import checkout_manager, ActiveCheckout, RecordingNavigator
from ..models.checkout import CartRef
from ..services.checkout_controller import CheckoutController, CheckoutNotReady
from ..services.commerce_client import CommerceClient
from ..services.order_submitter import OrderSubmitter
from ..services.reference_data import ReferenceDataClient
from ..services.session_sync import SessionSynchronizer

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])

# Shared across checkouts; replaced in tests
commerce_client: Optional[CommerceClient] = None


def get_commerce_client() -> CommerceClient:
    """Get or create commerce client"""
    global commerce_client
    if commerce_client is None:
        commerce_client = CommerceClient(
            base_url=settings.commerce_base_url,
            public_key=settings.commerce_public_key,
            timeout=settings.request_timeout,
        )
    return commerce_client


def get_controller_factory(
    commerce: CommerceClient = Depends(get_commerce_client),
) -> Callable[[RecordingNavigator, Callable[[str], None]], CheckoutController]:
    """Build controllers wired to the shared commerce client"""

    def factory(navigator: RecordingNavigator, alert: Callable[[str], None]) -> CheckoutController:
        return CheckoutController(
            synchronizer=SessionSynchronizer(commerce),
            reference_data=ReferenceDataClient(commerce),
            submitter=OrderSubmitter(commerce),
            navigator=navigator,
            alert=alert,
        )

    return factory


class StartCheckoutRequest(BaseModel):
    """Cart to check out"""
    cart_id: str
    total_items: int = Field(ge=0)


class CartChangeRequest(BaseModel):
    total_items: int = Field(ge=0)


class FieldEditRequest(BaseModel):
    field: str
    value: str


class GatewayRequest(BaseModel):
    gateway: str


class CheckoutView(BaseModel):
    """Snapshot of a checkout for the storefront"""
    checkout_id: str
    state: str
    session: Optional[dict] = None
    shipping_options: list[dict] = []
    selected_shipping_option: Optional[dict] = None
    fields: dict[str, str]
    errors: dict[str, Optional[str]]
    selected_gateway: str
    countries: dict[str, str] = {}
    subdivisions: dict[str, str] = {}
    redirect: Optional[str] = None
    alerts: list[str] = []
    order_id: Optional[str] = None


def _view(checkout: ActiveCheckout, order_id: Optional[str] = None) -> CheckoutView:
    controller: CheckoutController = checkout.controller
    selected = controller.selected_shipping_option
    return CheckoutView(
        checkout_id=checkout.checkout_id,
        state=controller.state.value,
        session=controller.session.model_dump() if controller.session else None,
        shipping_options=[option.model_dump() for option in controller.shipping_options],
        selected_shipping_option=selected.model_dump() if selected else None,
        fields=dict(controller.fields.values),
        errors=dict(controller.fields.errors),
        selected_gateway=controller.fields.selected_gateway,
        countries=controller.countries,
        subdivisions=controller.subdivisions,
        redirect=checkout.navigator.location,
        alerts=list(checkout.alerts),
        order_id=order_id,
    )


def _get_checkout(checkout_id: str) -> ActiveCheckout:
    checkout = checkout_manager.get_checkout(checkout_id)
    if not checkout:
        raise HTTPException(status_code=404, detail="Checkout not found")
    checkout.touch()
    return checkout


@router.post("", response_model=CheckoutView)
async def start_checkout(
    request: StartCheckoutRequest,
    factory=Depends(get_controller_factory),
):
    """
    Start a checkout for a cart.

    Generates the checkout session and loads locale data before returning.
    """
    checkout_manager.expire_checkouts(settings.checkout_max_age_hours, settings.finished_checkout_grace_minutes)
    checkout = checkout_manager.create_checkout(factory)
    checkout.controller.mount(CartRef(id=request.cart_id, total_items=request.total_items))
    await checkout.controller.settle()
    return _view(checkout)


@router.get("/{checkout_id}", response_model=CheckoutView)
async def get_checkout(checkout_id: str):
    """Get checkout details"""
    checkout = _get_checkout(checkout_id)
    await checkout.controller.settle()
    return _view(checkout)


@router.put("/{checkout_id}/cart", response_model=CheckoutView)
async def update_cart(checkout_id: str, request: CartChangeRequest):
    """Cart contents changed"""
    checkout = _get_checkout(checkout_id)
    controller: CheckoutController = checkout.controller
    if controller.cart is None:
        raise HTTPException(status_code=409, detail="Checkout has no cart")

    controller.update_cart(CartRef(id=controller.cart.id, total_items=request.total_items))
    await controller.settle()
    return _view(checkout)


@router.patch("/{checkout_id}/fields", response_model=CheckoutView)
async def edit_field(checkout_id: str, request: FieldEditRequest):
    """Edit one form field"""
    checkout = _get_checkout(checkout_id)
    try:
        key = FieldKey(request.field)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown field: {request.field}")

    checkout.controller.set_field(key, request.value)
    await checkout.controller.settle()
    return _view(checkout)


@router.put("/{checkout_id}/gateway", response_model=CheckoutView)
async def select_gateway(checkout_id: str, request: GatewayRequest):
    """Choose the payment gateway"""
    checkout = _get_checkout(checkout_id)
    checkout.controller.select_gateway(request.gateway)
    return _view(checkout)


@router.post("/{checkout_id}/submit", response_model=CheckoutView)
async def submit_order(checkout_id: str):
    """Capture the order; rejected orders come back with field errors and alerts"""
    checkout = _get_checkout(checkout_id)
    await checkout.controller.settle()
    checkout.alerts.clear()

    try:
        confirmation = await checkout.controller.submit()
    except CheckoutNotReady as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _view(checkout, order_id=confirmation.id if confirmation else None)


@router.delete("/{checkout_id}")
async def delete_checkout(checkout_id: str):
    """Delete a checkout"""
    if checkout_manager.delete_checkout(checkout_id):
        return {"message": "Checkout deleted"}
    raise HTTPException(status_code=404, detail="Checkout not found")
