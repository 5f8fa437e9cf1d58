# storefront/models/base.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class CatalogModel(BaseModel):
    """Base model for rows read from the catalog tables"""
    model_config = ConfigDict(from_attributes=True)

class TimeStampedModel(CatalogModel):
    """Base model with timestamp fields"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
