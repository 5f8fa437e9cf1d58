# storefront/models/product.py
from decimal import Decimal
from typing import ClassVar, Optional, Tuple
from uuid import UUID
from .base import CatalogModel, TimeStampedModel

class Product(TimeStampedModel):
    """Canonical product row, authored in the base locale"""
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    category_id: Optional[UUID] = None
    file_type: str = "pdf"
    is_active: bool = True
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

    TRANSLATABLE_FIELDS: ClassVar[Tuple[str, ...]] = (
        "name", "slug", "description", "short_description",
        "seo_title", "seo_description",
    )

class ProductTranslation(CatalogModel):
    """Per-locale overlay for a product"""
    product_id: UUID
    locale: str
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

class Variation(TimeStampedModel):
    """Purchasable child of a product with its own price"""
    id: UUID
    product_id: UUID
    name: str
    slug: Optional[str] = None
    price: Decimal
    sort_order: Optional[int] = 0
    is_active: bool = True

    TRANSLATABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "slug")

class VariationTranslation(CatalogModel):
    variation_id: UUID
    locale: str
    name: Optional[str] = None
    slug: Optional[str] = None

class ProductFile(CatalogModel):
    """Downloadable asset attached to a product or a variation"""
    id: UUID
    product_id: Optional[UUID] = None
    variation_id: Optional[UUID] = None
    name: str
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    path: str

class ProductImage(CatalogModel):
    id: UUID
    product_id: Optional[UUID] = None
    variation_id: Optional[UUID] = None
    url: Optional[str] = None
    alt: Optional[str] = None
    sort_order: Optional[int] = 0
    is_main: Optional[bool] = False
