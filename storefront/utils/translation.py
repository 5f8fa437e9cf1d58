# storefront/utils/translation.py
import re
from typing import Iterable, Optional, TypeVar
from pydantic import BaseModel
from ..models.locale import Locale

ModelT = TypeVar("ModelT", bound=BaseModel)

RICH_TEXT_FIELDS = frozenset({"description", "short_description"})

_TAG_RE = re.compile(r"<[^>]+>")
_ENTITY_SPACE_RE = re.compile(r"&nbsp;|&#160;", re.IGNORECASE)


def has_markup(text: Optional[str]) -> bool:
    """True when text contains at least one HTML tag"""
    return bool(text) and _TAG_RE.search(text) is not None


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def is_blank_rich_text(text: Optional[str]) -> bool:
    """True for empty strings and for markup with no visible text, e.g. '<p></p>'"""
    if is_blank(text):
        return True
    visible = _ENTITY_SPACE_RE.sub(" ", _TAG_RE.sub("", text))
    return not visible.strip()


def pick_translated(field: str, canonical: Optional[str], translated: Optional[str],
                    locale: Optional[Locale] = None) -> Optional[str]:
    """Translated value when present and non-empty, else the canonical one"""
    if not is_blank(translated):
        if (field in RICH_TEXT_FIELDS
                and locale is not None and not locale.is_base
                and has_markup(canonical)
                and is_blank_rich_text(translated)):
            # an editor left only empty tags behind; untranslated markup beats a blank block
            return canonical
        return translated
    return canonical


def merge_translation(entity: ModelT, translation: Optional[BaseModel],
                      locale: Optional[Locale] = None,
                      fields: Optional[Iterable[str]] = None) -> ModelT:
    """Overlay the translation's text fields onto a copy of the canonical entity"""
    if translation is None:
        return entity
    if fields is None:
        fields = getattr(entity, "TRANSLATABLE_FIELDS", ())

    updates = {}
    for field in fields:
        canonical = getattr(entity, field, None)
        translated = getattr(translation, field, None)
        merged = pick_translated(field, canonical, translated, locale)
        if merged != canonical:
            updates[field] = merged
    return entity.model_copy(update=updates) if updates else entity


def strip_markup(text: Optional[str]) -> str:
    """Visible text of a rich-text field"""
    if not text:
        return ""
    return _ENTITY_SPACE_RE.sub(" ", _TAG_RE.sub("", text)).strip()
