# storefront/handlers/admin_handlers.py
import logging
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..services.promotion_service import PromotionCache

logger = logging.getLogger(__name__)

class AdminHandler(BaseHandler):
    """Admin commands"""

    def __init__(self, db, promotion_cache: PromotionCache):
        super().__init__(db)
        self.promotion_cache = promotion_cache

    async def refresh_promotions(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Drop cached promotions after an admin edit"""
        user_id = update.effective_user.id
        locale = self.user_locale(update)

        if not await self.is_admin(user_id):
            await update.effective_message.reply_text(self.messages.text("forbidden", locale))
            return

        self.promotion_cache.invalidate()
        logger.info(f"Promotion cache invalidated by admin {user_id}")
        await update.effective_message.reply_text(self.messages.text("promotions_refreshed", locale))
