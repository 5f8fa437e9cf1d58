# storefront/services/promotion_service.py
import logging
import time
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple
from uuid import UUID
from ..config import Config
from ..models.promotion import ActivePromotion, DiscountType, PriceWithPromotion, Promotion, PromotionScope
from ..utils.formatters import store_now, to_money

logger = logging.getLogger(__name__)

PromotionMap = Mapping[UUID, ActivePromotion]

# Scope priorities: a lower number wins
VARIATION_PRIORITY = 1
PRODUCT_PRIORITY = 2
STORE_PRIORITY = 3

# Every (variation, promotion) pair that may be live; the winner is picked in
# pick_active_promotions so the whole rule sits in one place.
PROMOTION_CANDIDATES_QUERY = """
    SELECT
        scoped.variation_id, scoped.priority,
        p.id, p.name, p.description, p.discount_type, p.discount_value,
        p.start_date, p.end_date, p.is_active, p.applies_to, p.created_at
    FROM (
        SELECT pv.variation_id, pv.promotion_id, $3::int AS priority
        FROM promotion_variations pv
        UNION ALL
        SELECT v.id, pp.promotion_id, $4::int
        FROM promotion_products pp
        JOIN product_variations v ON v.product_id = pp.product_id
        UNION ALL
        SELECT v.id, g.id, $5::int
        FROM promotions g
        CROSS JOIN product_variations v
        WHERE g.applies_to = $2
    ) scoped
    JOIN promotions p ON p.id = scoped.promotion_id
    JOIN product_variations active ON active.id = scoped.variation_id AND active.is_active = true
    WHERE p.is_active = true
      AND p.start_date <= $1
      AND p.end_date >= $1
"""


def pick_active_promotions(rows: Iterable[Mapping[str, Any]],
                           now: datetime) -> Dict[UUID, ActivePromotion]:
    """Reduce candidate rows to one running promotion per variation.

    Variation-specific promotions beat product-wide ones, which beat
    store-wide ones. Inside a scope the largest discount_value wins and a tie
    goes to the most recently created promotion.
    """
    candidates = []
    for row in rows:
        promotion = Promotion.model_validate(dict(row))
        if promotion.is_running(now):
            candidates.append((row['variation_id'], row['priority'], promotion))

    candidates.sort(key=lambda c: c[2].created_at or datetime.min, reverse=True)
    candidates.sort(key=lambda c: (c[1], -c[2].discount_value))

    winners: Dict[UUID, ActivePromotion] = {}
    for variation_id, _, promotion in candidates:
        if variation_id not in winners:
            winners[variation_id] = promotion.to_active()
    return winners


def calculate_promotional_price(original_price: Decimal,
                                promotion: Optional[ActivePromotion]) -> PriceWithPromotion:
    """Apply a promotion to a base price; the final price never drops below zero"""
    original_price = to_money(original_price)
    if promotion is None:
        return PriceWithPromotion(
            original_price=original_price,
            final_price=original_price,
        )

    if promotion.discount_type == DiscountType.PERCENTAGE:
        discount = original_price * Decimal(promotion.discount_value) / Decimal(100)
    else:
        discount = Decimal(promotion.discount_value)

    # final is derived from the rounded discount so original - discount == final
    discount = to_money(discount)
    final_price = max(Decimal(0), original_price - discount)

    return PriceWithPromotion(
        original_price=original_price,
        final_price=to_money(final_price),
        discount=discount,
        has_promotion=True,
        promotion=promotion,
    )


class PromotionService:
    """Reads the promotions currently in their window"""

    def __init__(self, db):
        self.db = db

    async def fetch_active_promotions(self, now: Optional[datetime] = None) -> Dict[UUID, ActivePromotion]:
        """Winning active promotion per variation id"""
        now = now or store_now()
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch(
                PROMOTION_CANDIDATES_QUERY, now, PromotionScope.ALL.value,
                VARIATION_PRIORITY, PRODUCT_PRIORITY, STORE_PRIORITY,
            )

        promotions = pick_active_promotions(rows, now)
        logger.debug("%d promotion candidate(s) resolved to %d variation(s)", len(rows), len(promotions))
        return promotions


class PromotionCache:
    """Process-wide lazily refreshed snapshot of active promotions.

    A read after the TTL has elapsed refetches synchronously and swaps the
    whole snapshot in; there is no background refresher. Two readers racing
    past an expired snapshot may both refetch, the last one to finish wins.
    """

    def __init__(self, fetch: Callable[[], Awaitable[Dict[UUID, ActivePromotion]]],
                 ttl: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._fetch = fetch
        self.ttl = Config.PROMOTION_CACHE_TTL if ttl is None else ttl
        self._clock = clock
        self._snapshot: Optional[Tuple[PromotionMap, float]] = None

    @property
    def is_populated(self) -> bool:
        return self._snapshot is not None

    def is_fresh(self) -> bool:
        snapshot = self._snapshot
        return snapshot is not None and self._clock() - snapshot[1] < self.ttl

    async def get(self) -> PromotionMap:
        """Active promotions keyed by variation id"""
        if self.is_fresh():
            return self._snapshot[0]

        promotions = MappingProxyType(dict(await self._fetch()))
        self._snapshot = (promotions, self._clock())
        logger.debug("Promotion cache refreshed with %d variation(s)", len(promotions))
        return promotions

    def invalidate(self):
        """Drop the snapshot so the next read refetches"""
        self._snapshot = None
        logger.debug("Promotion cache invalidated")
