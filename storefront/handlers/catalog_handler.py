# storefront/handlers/catalog_handler.py
import logging
from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..exceptions import ProductNotFoundError
from ..services.product_service import ProductService

logger = logging.getLogger(__name__)

class CatalogHandler(BaseHandler):
    """Storefront commands for shoppers"""
    def __init__(self, db, product_service: ProductService):
        super().__init__(db)
        self.product_service = product_service

    async def show_product(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/product <slug> handler"""
        locale = self.user_locale(update)

        if not context.args:
            await update.effective_message.reply_text(self.messages.text("usage", locale))
            return

        slug = context.args[0]
        try:
            product = await self.product_service.find_product(
                slug, locale.value if locale else None
            )
        except ProductNotFoundError:
            logger.info(f"Product {slug!r} not found")
            await update.effective_message.reply_text(self.messages.text("not_found", locale))
            return

        await update.effective_message.reply_text(
            self.messages.format_product_detail(product, locale),
            parse_mode=ParseMode.HTML
        )
