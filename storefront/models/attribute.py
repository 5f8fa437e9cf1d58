# storefront/models/attribute.py
from uuid import UUID
from .base import CatalogModel

class Attribute(CatalogModel):
    """Global attribute dimension, e.g. 'Cor'"""
    id: UUID
    name: str

class AttributeValue(CatalogModel):
    """One setting of an attribute, e.g. 'Azul'"""
    id: UUID
    attribute_id: UUID
    value: str

class VariationAttributeValue(CatalogModel):
    """Join row recording that a variation carries an attribute value"""
    variation_id: UUID
    attribute_id: UUID
    value_id: UUID
