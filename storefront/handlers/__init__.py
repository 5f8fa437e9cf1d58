# storefront/handlers/__init__.py
"""Bot handlers"""
from .base_handler import BaseHandler
from .catalog_handler import CatalogHandler
from .admin_handlers import AdminHandler

__all__ = [
    'BaseHandler',
    'CatalogHandler',
    'AdminHandler',
]
