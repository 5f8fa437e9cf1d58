# storefront/models/product_detail.py
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from .promotion import ActivePromotion

class AttributeValueDetail(BaseModel):
    """Attribute/value pair of a variation; names are None when the dictionaries miss the id"""
    attribute_id: UUID
    attribute_name: Optional[str] = None
    value_id: UUID
    value: Optional[str] = None

class FileDetail(BaseModel):
    id: UUID
    path: str
    name: str

class VariationDetails(BaseModel):
    """Batch-loaded children of one variation"""
    attribute_values: List[AttributeValueDetail] = Field(default_factory=list)
    files: List[FileDetail] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

class VariationView(BaseModel):
    """A translated, priced variation as shown on the product page"""
    id: UUID
    name: str
    slug: Optional[str] = None
    price: Decimal
    original_price: Decimal
    has_promotion: bool = False
    discount: Decimal = Decimal("0.00")
    promotion: Optional[ActivePromotion] = None
    attribute_values: List[AttributeValueDetail] = Field(default_factory=list)
    files: List[FileDetail] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

class ProductDetail(BaseModel):
    """Localized, price-accurate product page aggregate"""
    id: UUID
    name: str
    slug: str
    description: str = ""
    long_description: str = ""
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    base_price: Decimal = Decimal("0.00")
    original_price: Decimal = Decimal("0.00")
    has_promotion: bool = False
    file_type: str = "pdf"
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    variations: List[VariationView] = Field(default_factory=list)
