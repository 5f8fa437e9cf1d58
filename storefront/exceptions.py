# storefront/exceptions.py
from typing import Optional


class StorefrontError(Exception):
    """Base class for catalog read-path errors"""


class ProductNotFoundError(StorefrontError):
    """The slug resolved neither natively nor through a translated slug"""

    def __init__(self, slug: str, locale: Optional[str] = None):
        self.slug = slug
        self.locale = locale
        message = f"Product {slug!r} not found"
        if locale:
            message = f"{message} (locale {locale})"
        super().__init__(message)
