# storefront/utils/formatters.py
import unicodedata
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from urllib.parse import unquote
import pytz
from ..config import Config

CENT = Decimal("0.01")

def to_money(amount) -> Decimal:
    """Coerce to Decimal rounded half-up to cents"""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)

def format_price(amount: Decimal, currency: str = "R$") -> str:
    """Format a price the Brazilian way, e.g. R$ 1.234,90"""
    text = f"{to_money(amount):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{currency} {text}"

def store_now() -> datetime:
    """Current wall-clock time in the store timezone, naive like the promotion columns"""
    store_tz = pytz.timezone(Config.TIMEZONE)
    return datetime.now(pytz.utc).astimezone(store_tz).replace(tzinfo=None)

def decode_slug(raw_slug: str) -> str:
    return unquote(raw_slug).strip()

def normalize_slug(slug: str) -> Optional[str]:
    """Accent-stripped lower-case form of a slug, None when it equals the input"""
    decomposed = unicodedata.normalize("NFD", slug)
    normalized = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()
    return normalized if normalized != slug else None
