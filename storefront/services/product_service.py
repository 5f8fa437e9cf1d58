# storefront/services/product_service.py
import asyncio
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple
from uuid import UUID
from ..config import Config
from ..exceptions import ProductNotFoundError
from ..models.category import Category, CategoryTranslation
from ..models.locale import Locale
from ..models.product import (
    Product, ProductImage, ProductTranslation, Variation, VariationTranslation
)
from ..models.product_detail import ProductDetail, VariationDetails, VariationView
from ..utils.formatters import decode_slug, normalize_slug, to_money
from ..utils.translation import merge_translation
from .promotion_service import PromotionCache, PromotionService, calculate_promotional_price
from .variation_service import VariationService

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = """
    p.id, p.name, p.slug, p.description, p.short_description, p.category_id,
    p.file_type, p.is_active, p.seo_title, p.seo_description
"""

TRANSLATION_COLUMNS = """
    t.product_id AS t_product_id, t.locale AS t_locale, t.name AS t_name,
    t.slug AS t_slug, t.description AS t_description,
    t.short_description AS t_short_description,
    t.seo_title AS t_seo_title, t.seo_description AS t_seo_description
"""


def _split_row(row: Mapping[str, Any], prefix: str = "t_") -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """Split a joined row into its own columns and the prefixed overlay columns"""
    own, overlay = {}, {}
    for key, value in dict(row).items():
        if key.startswith(prefix):
            overlay[key[len(prefix):]] = value
        else:
            own[key] = value
    has_overlay = any(value is not None for value in overlay.values())
    return own, overlay if has_overlay else None


class ProductService:
    """Read path for the localized, priced product page"""

    def __init__(self, db, promotion_cache: Optional[PromotionCache] = None,
                 variation_service: Optional[VariationService] = None):
        self.db = db
        if promotion_cache is None:
            promotion_cache = PromotionCache(PromotionService(db).fetch_active_promotions)
        self.promotion_cache = promotion_cache
        self.variation_service = variation_service or VariationService(db)

    async def resolve_product(self, slug: str,
                              locale: Optional[str] = None) -> Tuple[Product, Optional[ProductTranslation]]:
        """Find a product by its native slug, then by the locale's translated slug"""
        parsed = Locale.from_code(locale)
        code = parsed.value if parsed else None

        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {PRODUCT_COLUMNS}, {TRANSLATION_COLUMNS}
                FROM products p
                LEFT JOIN product_i18n t
                    ON t.product_id = p.id AND t.locale = $2
                WHERE p.slug = $1 AND p.is_active = true
                LIMIT 1
            """, slug, code)

            if row is None and parsed is not None and not parsed.is_base:
                logger.debug("Slug %r not native, trying %s translations", slug, code)
                row = await conn.fetchrow(f"""
                    SELECT {PRODUCT_COLUMNS}, {TRANSLATION_COLUMNS}
                    FROM product_i18n t
                    JOIN products p ON p.id = t.product_id
                    WHERE t.slug = $1 AND t.locale = $2 AND p.is_active = true
                    LIMIT 1
                """, slug, code)

        if row is None:
            raise ProductNotFoundError(slug, locale)

        own, overlay = _split_row(row)
        product = Product.model_validate(own)
        translation = ProductTranslation.model_validate(overlay) if overlay else None
        return product, translation

    async def get_product_by_slug(self, slug: str, locale: Optional[str] = None) -> ProductDetail:
        """Localized product aggregate with every active variation priced"""
        locale = locale or Config.BASE_LOCALE
        parsed = Locale.from_code(locale)

        product, translation = await self.resolve_product(slug, locale)
        product = merge_translation(product, translation, parsed)

        category, variations, images = await asyncio.gather(
            self._fetch_category(product.category_id, parsed),
            self._fetch_variations(product.id, parsed),
            self._fetch_product_images(product.id),
        )

        details, promotions = await asyncio.gather(
            self.variation_service.load_variation_details([v.id for v in variations], parsed),
            self.promotion_cache.get(),
        )

        views = [
            self._build_variation(variation, details.get(variation.id), promotions)
            for variation in variations
        ]

        if views:
            base_price = min(v.price for v in views)
            original_price = min(v.original_price for v in views)
        else:
            base_price = original_price = to_money(Decimal(0))

        return ProductDetail(
            id=product.id,
            name=product.name,
            slug=product.slug,
            description=product.short_description or "",
            long_description=product.description or "",
            seo_title=product.seo_title,
            seo_description=product.seo_description,
            base_price=base_price,
            original_price=original_price,
            has_promotion=any(v.has_promotion for v in views),
            file_type=product.file_type,
            category=category.name if category else "",
            tags=[],
            images=[img.url or Config.FALLBACK_IMAGE for img in images] or [Config.FALLBACK_IMAGE],
            variations=views,
        )

    async def find_product(self, raw_slug: str, locale: Optional[str] = None) -> ProductDetail:
        """Look up a slug as typed in a URL, retrying with its accent-free form"""
        slug = decode_slug(raw_slug)
        try:
            return await self.get_product_by_slug(slug, locale)
        except ProductNotFoundError:
            normalized = normalize_slug(slug)
            if normalized is None:
                raise
            return await self.get_product_by_slug(normalized, locale)

    @staticmethod
    def _build_variation(variation: Variation, details: Optional[VariationDetails],
                         promotions: Mapping[UUID, Any]) -> VariationView:
        details = details or VariationDetails()
        pricing = calculate_promotional_price(variation.price, promotions.get(variation.id))
        return VariationView(
            id=variation.id,
            name=variation.name,
            slug=variation.slug,
            price=pricing.final_price,
            original_price=pricing.original_price,
            has_promotion=pricing.has_promotion,
            discount=pricing.discount,
            promotion=pricing.promotion,
            attribute_values=details.attribute_values,
            files=details.files,
            images=details.images,
        )

    async def _fetch_category(self, category_id: Optional[UUID],
                              locale: Optional[Locale]) -> Optional[Category]:
        if category_id is None:
            return None
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow("""
                SELECT c.id, c.name, c.slug, c.parent_id, c.description, c.is_active,
                       t.category_id AS t_category_id, t.locale AS t_locale,
                       t.name AS t_name, t.slug AS t_slug, t.description AS t_description
                FROM categories c
                LEFT JOIN category_i18n t
                    ON t.category_id = c.id AND t.locale = $2
                WHERE c.id = $1
            """, category_id, locale.value if locale else None)

        if row is None:
            return None
        own, overlay = _split_row(row)
        translation = CategoryTranslation.model_validate(overlay) if overlay else None
        return merge_translation(Category.model_validate(own), translation, locale)

    async def _fetch_variations(self, product_id: UUID,
                                locale: Optional[Locale]) -> List[Variation]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT v.id, v.product_id, v.name, v.slug, v.price,
                       v.sort_order, v.is_active,
                       t.variation_id AS t_variation_id, t.locale AS t_locale,
                       t.name AS t_name, t.slug AS t_slug
                FROM product_variations v
                LEFT JOIN product_variation_i18n t
                    ON t.variation_id = v.id AND t.locale = $2
                WHERE v.product_id = $1 AND v.is_active = true
                ORDER BY v.sort_order NULLS LAST, v.created_at
            """, product_id, locale.value if locale else None)

        variations = []
        for row in rows:
            own, overlay = _split_row(row)
            translation = VariationTranslation.model_validate(overlay) if overlay else None
            variations.append(merge_translation(Variation.model_validate(own), translation, locale))
        return variations

    async def _fetch_product_images(self, product_id: UUID) -> List[ProductImage]:
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT id, product_id, variation_id, url, alt, sort_order, is_main
                FROM product_images
                WHERE product_id = $1
                ORDER BY is_main DESC, sort_order
            """, product_id)
        return [ProductImage.model_validate(dict(r)) for r in rows]
