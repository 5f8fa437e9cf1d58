import pytest

from storefront.services.product_service import ProductService
from storefront.services.promotion_service import PromotionCache
from tests.fakes import FakeCatalog, FakeClock, FakeDatabase


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def db(catalog):
    return FakeDatabase(catalog)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def active_promotions():
    """Backing store for the promotion cache; tests mutate it to simulate admin edits"""
    return {}


@pytest.fixture
def promotion_fetches():
    return []


@pytest.fixture
def promotion_cache(active_promotions, promotion_fetches, clock):
    async def fetch():
        promotion_fetches.append(clock())
        return dict(active_promotions)

    return PromotionCache(fetch, ttl=300, clock=clock)


@pytest.fixture
def product_service(db, promotion_cache):
    return ProductService(db, promotion_cache=promotion_cache)
