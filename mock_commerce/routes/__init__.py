# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .checkout import router as checkout_router, orders_router
from .locale import router as locale_router

__all__ = ["products_router", "cart_router", "checkout_router", "orders_router", "locale_router"]
