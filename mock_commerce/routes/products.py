"""Product API routes for mock commerce backend"""

from fastapi import APIRouter, Depends

from ..models.product import Product
from ..database.products import product_db
from ..errors import not_found
from ..security.public_key import require_public_key

router = APIRouter(prefix="/v1/products", tags=["Products"], dependencies=[Depends(require_public_key)])


@router.get("", response_model=list[Product])
async def list_products():
    """List the catalog"""
    return product_db.get_all_products()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get product details"""
    product = product_db.get_product(product_id)
    if not product:
        raise not_found("Product")
    return product
