# storefront/bot.py
import asyncio
import logging
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes
from .config import Config
from .database import Database
from .handlers import AdminHandler, CatalogHandler
from .models.locale import Locale
from .services.product_service import ProductService
from .services.promotion_service import PromotionCache, PromotionService
from .utils.messages import Messages

logger = logging.getLogger(__name__)

class StorefrontBot:
    def __init__(self, db: Database = None):
        """Wire the database, the shared promotion cache and the handlers"""
        self.db = db or Database()
        self.promotion_cache = PromotionCache(PromotionService(self.db).fetch_active_promotions)
        self.product_service = ProductService(self.db, promotion_cache=self.promotion_cache)
        self.application = Application.builder().token(Config.TELEGRAM_TOKEN).build()
        self.setup_handlers()

    def setup_handlers(self):
        """Register command handlers"""
        catalog = CatalogHandler(self.db, self.product_service)
        admin = AdminHandler(self.db, self.promotion_cache)

        self.application.add_handler(CommandHandler("product", catalog.show_product))
        self.application.add_handler(CommandHandler("refresh_promotions", admin.refresh_promotions))
        self.application.add_error_handler(self.on_error)

    @staticmethod
    async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
        """Log handler failures and tell the user something went wrong"""
        logger.error("Error while handling update", exc_info=context.error)
        if isinstance(update, Update) and update.effective_message:
            user = update.effective_user
            locale = Locale.from_code(user.language_code if user else None)
            await update.effective_message.reply_text(Messages.text("error", locale))

    async def start(self):
        """Connect to the database and poll until cancelled"""
        await self.db.connect()
        try:
            async with self.application:
                await self.application.start()
                await self.application.updater.start_polling()
                logger.info("Bot is polling")
                try:
                    await asyncio.Event().wait()
                finally:
                    await self.application.updater.stop()
                    await self.application.stop()
        finally:
            await self.db.close()
