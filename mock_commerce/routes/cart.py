"""Cart API routes for mock commerce backend"""

from fastapi import APIRouter, Depends

from ..models.cart import (
    AddToCartRequest,
    CartResponse,
    SelectedVariant,
    UpdateCartItemRequest,
)
from ..database.carts import cart_db
from ..database.products import product_db
from ..errors import not_found, validation_error
from ..security.public_key import require_public_key

router = APIRouter(prefix="/v1/carts", tags=["Cart"], dependencies=[Depends(require_public_key)])


def _get_cart(cart_id: str):
    cart = cart_db.get_cart(cart_id)
    if not cart:
        raise not_found("Cart")
    return cart


@router.post("", response_model=CartResponse, status_code=201)
async def create_cart():
    """Create a new shopping cart"""
    return CartResponse.from_cart(cart_db.create_cart())


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str):
    """Get cart by ID"""
    return CartResponse.from_cart(_get_cart(cart_id))


@router.post("/{cart_id}", response_model=CartResponse)
async def add_to_cart(cart_id: str, request: AddToCartRequest):
    """Add a product, with its variant selections, to the cart"""
    _get_cart(cart_id)

    product = product_db.get_product(request.product_id)
    if not product:
        raise not_found("Product")

    variants = []
    errors = []
    for group in product.variant_groups:
        option_id = request.variants.get(group.id)
        option = group.get_option(option_id) if option_id else None
        if option is None:
            errors.append((f"variants[{group.id}]", f"a valid {group.name.lower()} must be selected"))
            continue
        variants.append(
            SelectedVariant(
                variant_id=group.id,
                option_id=option.id,
                variant_name=group.name,
                option_name=option.name,
            )
        )

    if errors:
        raise validation_error(errors)

    cart = cart_db.add_item(cart_id, product, request.quantity, variants)
    return CartResponse.from_cart(cart)


@router.put("/{cart_id}/items/{line_item_id}", response_model=CartResponse)
async def update_cart_item(cart_id: str, line_item_id: str, request: UpdateCartItemRequest):
    """Update line item quantity"""
    _get_cart(cart_id)

    cart = cart_db.update_item_quantity(cart_id, line_item_id, request.quantity)
    if not cart:
        raise not_found("Line item")
    return CartResponse.from_cart(cart)


@router.delete("/{cart_id}/items/{line_item_id}", response_model=CartResponse)
async def remove_from_cart(cart_id: str, line_item_id: str):
    """Remove a line item from the cart"""
    _get_cart(cart_id)

    cart = cart_db.remove_item(cart_id, line_item_id)
    if not cart:
        raise not_found("Line item")
    return CartResponse.from_cart(cart)


@router.delete("/{cart_id}/items", response_model=CartResponse)
async def empty_cart(cart_id: str):
    """Remove all line items"""
    _get_cart(cart_id)
    return CartResponse.from_cart(cart_db.empty_cart(cart_id))
