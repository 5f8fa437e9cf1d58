"""In-memory stand-in for the asyncpg pool used by the services.

Queries are routed by the tables they read; every call is recorded so tests
can count round trips.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from storefront.models.promotion import ActivePromotion, DiscountType


def _translation_columns(row, prefix, fields):
    return {f"{prefix}{field}": (row or {}).get(field) for field in fields}


class FakeCatalog:
    def __init__(self):
        self.products = []
        self.product_i18n = []
        self.categories = []
        self.category_i18n = []
        self.variations = []
        self.variation_i18n = []
        self.attributes = []
        self.attribute_i18n = []
        self.attribute_values = []
        self.attribute_value_i18n = []
        self.mappings = []
        self.files = []
        self.images = []
        self.promotions = []
        self.promotion_variations = []
        self.promotion_products = []

    # builders

    def add_category(self, name, slug=None, **extra):
        row = {"id": uuid4(), "name": name, "slug": slug or name.lower(),
               "parent_id": None, "description": None, "is_active": True}
        row.update(extra)
        self.categories.append(row)
        return row

    def add_category_translation(self, category, locale, **fields):
        row = {"category_id": category["id"], "locale": locale, "name": None,
               "slug": None, "description": None}
        row.update(fields)
        self.category_i18n.append(row)
        return row

    def add_product(self, name, slug, **extra):
        row = {"id": uuid4(), "name": name, "slug": slug, "description": None,
               "short_description": None, "category_id": None, "file_type": "pdf",
               "is_active": True, "seo_title": None, "seo_description": None}
        row.update(extra)
        self.products.append(row)
        return row

    def add_product_translation(self, product, locale, **fields):
        row = {"product_id": product["id"], "locale": locale, "name": None,
               "slug": None, "description": None, "short_description": None,
               "seo_title": None, "seo_description": None}
        row.update(fields)
        self.product_i18n.append(row)
        return row

    def add_variation(self, product, name, price, **extra):
        row = {"id": uuid4(), "product_id": product["id"], "name": name,
               "slug": name.lower().replace(" ", "-"), "price": Decimal(str(price)),
               "sort_order": len(self.variations), "is_active": True}
        row.update(extra)
        self.variations.append(row)
        return row

    def add_variation_translation(self, variation, locale, **fields):
        row = {"variation_id": variation["id"], "locale": locale, "name": None, "slug": None}
        row.update(fields)
        self.variation_i18n.append(row)
        return row

    def add_attribute(self, name):
        row = {"id": uuid4(), "name": name}
        self.attributes.append(row)
        return row

    def add_attribute_translation(self, attribute, locale, name):
        self.attribute_i18n.append({"attribute_id": attribute["id"], "locale": locale, "name": name})

    def add_value(self, attribute, value):
        row = {"id": uuid4(), "attribute_id": attribute["id"], "value": value}
        self.attribute_values.append(row)
        return row

    def add_value_translation(self, value, locale, text):
        self.attribute_value_i18n.append({"value_id": value["id"], "locale": locale, "value": text})

    def link(self, variation, attribute_id, value_id):
        self.mappings.append({"variation_id": variation["id"],
                              "attribute_id": attribute_id, "value_id": value_id})

    def add_file(self, variation, name, path):
        row = {"id": uuid4(), "product_id": None, "variation_id": variation["id"],
               "name": name, "original_name": name, "mime_type": "application/pdf",
               "size": 1024, "path": path}
        self.files.append(row)
        return row

    def add_image(self, url, product=None, variation=None, sort_order=0, is_main=False):
        row = {"id": uuid4(), "product_id": product["id"] if product else None,
               "variation_id": variation["id"] if variation else None,
               "url": url, "alt": None, "sort_order": sort_order, "is_main": is_main}
        self.images.append(row)
        return row

    def add_promotion(self, name, discount_type, value, start_date, end_date, **extra):
        row = {"id": uuid4(), "name": name, "description": None,
               "discount_type": discount_type, "discount_value": Decimal(str(value)),
               "start_date": start_date, "end_date": end_date, "is_active": True,
               "applies_to": "specific", "created_at": start_date}
        row.update(extra)
        self.promotions.append(row)
        return row

    def attach_promotion_to_variation(self, promotion, variation):
        self.promotion_variations.append({"promotion_id": promotion["id"],
                                          "variation_id": variation["id"]})

    def attach_promotion_to_product(self, promotion, product):
        self.promotion_products.append({"promotion_id": promotion["id"],
                                        "product_id": product["id"]})

    # query routing

    def run(self, query, args):
        sql = " ".join(query.split())

        if "FROM products p LEFT JOIN product_i18n" in sql:
            slug, locale = args
            return [self._product_row(p, locale) for p in self.products
                    if p["slug"] == slug and p["is_active"]][:1]

        if "FROM product_i18n t JOIN products p" in sql:
            slug, locale = args
            rows = []
            for t in self.product_i18n:
                if t["slug"] == slug and t["locale"] == locale:
                    rows.extend(self._product_row(p, locale) for p in self.products
                                if p["id"] == t["product_id"] and p["is_active"])
            return rows[:1]

        if "FROM categories c" in sql:
            category_id, locale = args
            rows = []
            for c in self.categories:
                if c["id"] == category_id:
                    t = self._find(self.category_i18n, "category_id", c["id"], locale)
                    row = dict(c)
                    row.update(_translation_columns(
                        t, "t_", ("category_id", "locale", "name", "slug", "description")))
                    rows.append(row)
            return rows

        if "FROM product_variations v" in sql:
            product_id, locale = args
            rows = []
            for v in sorted(self.variations, key=lambda r: r["sort_order"]):
                if v["product_id"] == product_id and v["is_active"]:
                    t = self._find(self.variation_i18n, "variation_id", v["id"], locale)
                    row = dict(v)
                    row.update(_translation_columns(
                        t, "t_", ("variation_id", "locale", "name", "slug")))
                    rows.append(row)
            return rows

        if "FROM variation_attribute_values" in sql:
            (ids,) = args
            return [m for m in self.mappings if m["variation_id"] in ids]

        if "FROM attribute_values av" in sql:
            (locale,) = args
            rows = []
            for v in self.attribute_values:
                t = self._find(self.attribute_value_i18n, "value_id", v["id"], locale)
                rows.append(dict(v, translated_value=t["value"] if t else None))
            return rows

        if "FROM attributes a" in sql:
            (locale,) = args
            rows = []
            for a in self.attributes:
                t = self._find(self.attribute_i18n, "attribute_id", a["id"], locale)
                rows.append(dict(a, translated_name=t["name"] if t else None))
            return rows

        if "FROM files" in sql:
            (ids,) = args
            return [f for f in self.files if f["variation_id"] in ids]

        if "FROM product_images" in sql and "ANY" in sql:
            (ids,) = args
            return self._sorted_images(i for i in self.images if i["variation_id"] in ids)

        if "FROM product_images" in sql:
            (product_id,) = args
            return self._sorted_images(i for i in self.images if i["product_id"] == product_id)

        if "FROM promotion_variations" in sql:
            return self._promotion_candidates(*args)

        raise AssertionError(f"Unexpected query: {sql}")

    def _product_row(self, product, locale):
        t = self._find(self.product_i18n, "product_id", product["id"], locale)
        row = dict(product)
        row.update(_translation_columns(
            t, "t_", ("product_id", "locale", "name", "slug", "description",
                      "short_description", "seo_title", "seo_description")))
        return row

    def _promotion_candidates(self, now, store_scope, variation_priority,
                              product_priority, store_priority):
        scoped = [(pv["variation_id"], pv["promotion_id"], variation_priority)
                  for pv in self.promotion_variations]
        scoped += [(v["id"], pp["promotion_id"], product_priority)
                   for pp in self.promotion_products
                   for v in self.variations if v["product_id"] == pp["product_id"]]
        scoped += [(v["id"], g["id"], store_priority)
                   for g in self.promotions if g["applies_to"] == store_scope
                   for v in self.variations]

        promotions = {p["id"]: p for p in self.promotions}
        active_variations = {v["id"] for v in self.variations if v["is_active"]}
        rows = []
        for variation_id, promotion_id, priority in scoped:
            p = promotions[promotion_id]
            if variation_id not in active_variations or not p["is_active"]:
                continue
            if not p["start_date"] <= now <= p["end_date"]:
                continue
            rows.append(dict(p, variation_id=variation_id, priority=priority))
        return rows

    @staticmethod
    def _find(rows, key, value, locale):
        for row in rows:
            if row[key] == value and row["locale"] == locale:
                return row
        return None

    @staticmethod
    def _sorted_images(images):
        return sorted(images, key=lambda i: (not i["is_main"], i["sort_order"]))


class FakeConnection:
    def __init__(self, pool):
        self.pool = pool

    async def fetch(self, query, *args):
        self.pool.queries.append(query)
        return self.pool.catalog.run(query, args)

    async def fetchrow(self, query, *args):
        rows = await self.fetch(query, *args)
        return rows[0] if rows else None

    async def fetchval(self, query, *args):
        row = await self.fetchrow(query, *args)
        return next(iter(row.values())) if row else None


class FakePool:
    def __init__(self, catalog):
        self.catalog = catalog
        self.queries = []

    @asynccontextmanager
    async def acquire(self):
        yield FakeConnection(self)

    def count(self, fragment):
        return sum(1 for q in self.queries if fragment in " ".join(q.split()))


class FakeDatabase:
    """Mirrors storefront.database.Database: services only touch .pool"""
    def __init__(self, catalog=None):
        self.catalog = catalog or FakeCatalog()
        self.pool = FakePool(self.catalog)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_promotion(discount_type, value, name="Promo"):
    now = datetime(2026, 10, 17, 12, 0)
    return ActivePromotion(
        id=uuid4(),
        name=name,
        discount_type=DiscountType(discount_type),
        discount_value=Decimal(str(value)),
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=1),
    )
