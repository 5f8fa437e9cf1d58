# storefront/handlers/base_handler.py
from typing import Optional
from telegram import Update
from ..config import Config
from ..models.locale import Locale
from ..utils.messages import Messages

class BaseHandler:
    """Base class for the bot handlers"""
    def __init__(self, db):
        self.db = db
        self.messages = Messages()

    @staticmethod
    def user_locale(update: Update) -> Optional[Locale]:
        """Locale from the Telegram client language, None when unsupported"""
        user = update.effective_user
        return Locale.from_code(user.language_code if user else None)

    async def is_admin(self, user_id: int) -> bool:
        """Check admin access"""
        return user_id in Config.ADMIN_IDS
