# Database modules

from .products import product_db, ProductDatabase
from .carts import cart_db, CartDatabase
from .checkouts import checkout_db, CheckoutDatabase
from .orders import order_db, OrderDatabase
from .locale import locale_db, LocaleDatabase

__all__ = [
    "product_db",
    "ProductDatabase",
    "cart_db",
    "CartDatabase",
    "checkout_db",
    "CheckoutDatabase",
    "order_db",
    "OrderDatabase",
    "locale_db",
    "LocaleDatabase",
]
