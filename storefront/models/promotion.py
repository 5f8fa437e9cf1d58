# storefront/models/promotion.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID
from pydantic import BaseModel
from .base import TimeStampedModel

class DiscountType(str, Enum):
    """Promotion discount kinds"""
    PERCENTAGE = "percentage"  # percent of the base price
    FIXED = "fixed"  # flat amount off

class PromotionScope(str, Enum):
    """Where a promotion applies"""
    ALL = "all"  # every variation in the store
    SPECIFIC = "specific"  # listed products and variations only

class Promotion(TimeStampedModel):
    """Promotion row as stored"""
    id: UUID
    name: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    applies_to: PromotionScope = PromotionScope.SPECIFIC

    def is_running(self, now: datetime) -> bool:
        """Enabled and inside its window, both ends inclusive"""
        return self.is_active and self.start_date <= now <= self.end_date

    def to_active(self) -> "ActivePromotion":
        return ActivePromotion(
            id=self.id,
            name=self.name,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            start_date=self.start_date,
            end_date=self.end_date,
        )

class ActivePromotion(BaseModel):
    """Promotion currently in its window, as seen by the pricing path"""
    id: UUID
    name: str
    discount_type: DiscountType
    discount_value: Decimal
    start_date: datetime
    end_date: datetime

class PriceWithPromotion(BaseModel):
    """Outcome of applying an optional promotion to a base price"""
    original_price: Decimal
    final_price: Decimal
    discount: Decimal = Decimal("0.00")
    has_promotion: bool = False
    promotion: Optional[ActivePromotion] = None
