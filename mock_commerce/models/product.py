"""Product models for mock commerce backend"""

from pydantic import BaseModel, Field
from typing import Optional


class VariantOption(BaseModel):
    """One choice within a variant group, e.g. size M"""
    id: str
    name: str
    price_delta: float = 0.0


class VariantGroup(BaseModel):
    """Variant group such as size or colour"""
    id: str
    name: str
    options: list[VariantOption]

    def get_option(self, option_id: str) -> Optional[VariantOption]:
        return next((option for option in self.options if option.id == option_id), None)


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    name: str
    description: str
    price: float = Field(gt=0)
    sku: str
    image_url: Optional[str] = None
    variant_groups: list[VariantGroup] = []

    def get_variant_group(self, group_id: str) -> Optional[VariantGroup]:
        return next((group for group in self.variant_groups if group.id == group_id), None)
