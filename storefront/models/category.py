# storefront/models/category.py
from typing import ClassVar, Optional, Tuple
from uuid import UUID
from .base import CatalogModel, TimeStampedModel

class Category(TimeStampedModel):
    """Category model for product categorization"""
    id: UUID
    name: str
    slug: str
    parent_id: Optional[UUID] = None
    description: Optional[str] = None
    is_active: bool = True

    TRANSLATABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "slug", "description")

class CategoryTranslation(CatalogModel):
    category_id: UUID
    locale: str
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
