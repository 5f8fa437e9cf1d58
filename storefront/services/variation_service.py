# storefront/services/variation_service.py
import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from uuid import UUID
from ..config import Config
from ..models.attribute import Attribute, AttributeValue, VariationAttributeValue
from ..models.locale import Locale
from ..models.product import ProductFile, ProductImage
from ..models.product_detail import AttributeValueDetail, FileDetail, VariationDetails
from ..utils.translation import pick_translated

logger = logging.getLogger(__name__)

class VariationService:
    """Loads everything hanging off a set of variations in a fixed number of queries"""

    def __init__(self, db):
        self.db = db

    async def load_variation_details(self, variation_ids: Sequence[UUID],
                                     locale: Optional[Locale] = None) -> Dict[UUID, VariationDetails]:
        """Attribute values, files and images per variation id"""
        ids = list(dict.fromkeys(variation_ids))
        if not ids:
            return {}

        mappings, values, attributes, files, images = await asyncio.gather(
            self._fetch_mappings(ids),
            self._fetch_attribute_values(locale),
            self._fetch_attributes(locale),
            self._fetch_files(ids),
            self._fetch_images(ids),
        )

        values_by_id = {v.id: v for v in values}
        attributes_by_id = {a.id: a for a in attributes}

        details = {vid: VariationDetails() for vid in ids}

        for mapping in mappings:
            target = details.get(mapping.variation_id)
            if target is None:
                continue
            value = values_by_id.get(mapping.value_id)
            attribute = attributes_by_id.get(mapping.attribute_id)
            if value is None or attribute is None:
                logger.debug(
                    "Variation %s references unknown attribute %s / value %s",
                    mapping.variation_id, mapping.attribute_id, mapping.value_id
                )
            target.attribute_values.append(AttributeValueDetail(
                attribute_id=mapping.attribute_id,
                attribute_name=attribute.name if attribute else None,
                value_id=mapping.value_id,
                value=value.value if value else None,
            ))

        for file in files:
            target = details.get(file.variation_id)
            if target is not None:
                target.files.append(FileDetail(id=file.id, path=file.path, name=file.name))

        for image in images:
            target = details.get(image.variation_id)
            if target is not None:
                target.images.append(image.url or Config.FALLBACK_IMAGE)

        return details

    async def _fetch_mappings(self, ids: List[UUID]) -> List[VariationAttributeValue]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT variation_id, attribute_id, value_id
                FROM variation_attribute_values
                WHERE variation_id = ANY($1::uuid[])
            """, ids)
            return [VariationAttributeValue.model_validate(dict(r)) for r in rows]

    async def _fetch_attribute_values(self, locale: Optional[Locale]) -> List[AttributeValue]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT av.id, av.attribute_id, av.value, t.value AS translated_value
                FROM attribute_values av
                LEFT JOIN attribute_value_i18n t
                    ON t.value_id = av.id AND t.locale = $1
            """, locale.value if locale else None)
            return [
                AttributeValue(
                    id=r['id'],
                    attribute_id=r['attribute_id'],
                    value=pick_translated('value', r['value'], r['translated_value'], locale),
                )
                for r in rows
            ]

    async def _fetch_attributes(self, locale: Optional[Locale]) -> List[Attribute]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT a.id, a.name, t.name AS translated_name
                FROM attributes a
                LEFT JOIN attribute_i18n t
                    ON t.attribute_id = a.id AND t.locale = $1
            """, locale.value if locale else None)
            return [
                Attribute(
                    id=r['id'],
                    name=pick_translated('name', r['name'], r['translated_name'], locale),
                )
                for r in rows
            ]

    async def _fetch_files(self, ids: List[UUID]) -> List[ProductFile]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT id, product_id, variation_id, name, original_name,
                       mime_type, size, path
                FROM files
                WHERE variation_id = ANY($1::uuid[])
                ORDER BY created_at
            """, ids)
            return [ProductFile.model_validate(dict(r)) for r in rows]

    async def _fetch_images(self, ids: List[UUID]) -> List[ProductImage]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT id, product_id, variation_id, url, alt, sort_order, is_main
                FROM product_images
                WHERE variation_id = ANY($1::uuid[])
                ORDER BY is_main DESC, sort_order
            """, ids)
            return [ProductImage.model_validate(dict(r)) for r in rows]
