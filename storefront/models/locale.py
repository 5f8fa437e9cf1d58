# storefront/models/locale.py
from enum import Enum
from typing import Optional
from ..config import Config

class Locale(str, Enum):
    """Locales the storefront serves translations for"""
    PT = "pt"
    EN = "en"
    ES = "es"

    @classmethod
    def base(cls) -> "Locale":
        """Locale the canonical rows are authored in"""
        base = cls.from_code(Config.BASE_LOCALE)
        if base is None:
            raise ValueError(f"Unsupported BASE_LOCALE {Config.BASE_LOCALE!r}")
        return base

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["Locale"]:
        """Map a locale code such as 'es' or 'pt-BR' to a member, None when unsupported"""
        if not code:
            return None
        language = code.replace("_", "-").split("-", 1)[0].strip().lower()
        try:
            return cls(language)
        except ValueError:
            return None

    @property
    def is_base(self) -> bool:
        return self == Locale.base()
