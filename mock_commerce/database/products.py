"""Mock product database"""

from typing import Optional
from ..models.product import Product, VariantGroup, VariantOption

# Mock product catalog
PRODUCTS: dict[str, Product] = {
    "prod_shirt": Product(
        id="prod_shirt",
        name="Organic Cotton Tee",
        description="Heavyweight tee in organic cotton. Relaxed fit.",
        price=32.00,
        sku="TEE-ORG",
        image_url="/static/images/tee.jpg",
        variant_groups=[
            VariantGroup(
                id="vgrp_size",
                name="Size",
                options=[
                    VariantOption(id="optn_s", name="S"),
                    VariantOption(id="optn_m", name="M"),
                    VariantOption(id="optn_l", name="L"),
                    VariantOption(id="optn_xl", name="XL", price_delta=4.00),
                ],
            ),
        ],
    ),
    "prod_mug": Product(
        id="prod_mug",
        name="Stoneware Mug",
        description="Hand-glazed 350ml stoneware mug.",
        price=18.50,
        sku="MUG-STN",
        image_url="/static/images/mug.jpg",
    ),
    "prod_tote": Product(
        id="prod_tote",
        name="Canvas Tote Bag",
        description="Heavy canvas tote with inner pocket.",
        price=24.00,
        sku="TOTE-CNV",
        image_url="/static/images/tote.jpg",
        variant_groups=[
            VariantGroup(
                id="vgrp_colour",
                name="Colour",
                options=[
                    VariantOption(id="optn_natural", name="Natural"),
                    VariantOption(id="optn_black", name="Black"),
                ],
            ),
        ],
    ),
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self):
        self.products = dict(PRODUCTS)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_all_products(self) -> list[Product]:
        """Get all products"""
        return list(self.products.values())


# Singleton instance
product_db = ProductDatabase()
