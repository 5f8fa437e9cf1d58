# storefront/utils/messages.py
import html
from typing import Dict
from ..models.locale import Locale
from ..models.product_detail import ProductDetail, VariationView
from ..utils.formatters import format_price
from ..utils.translation import strip_markup

TEXTS: Dict[Locale, Dict[str, str]] = {
    Locale.PT: {
        "category": "Categoria",
        "price": "Preço",
        "from": "a partir de",
        "variations": "Opções",
        "not_found": "❌ Produto não encontrado.",
        "usage": "Uso: /product <slug>",
        "error": "⚠️ Não foi possível carregar o produto. Tente novamente.",
        "forbidden": "⛔️ Você não tem acesso a este comando.",
        "promotions_refreshed": "✅ Cache de promoções limpo.",
    },
    Locale.EN: {
        "category": "Category",
        "price": "Price",
        "from": "from",
        "variations": "Options",
        "not_found": "❌ Product not found.",
        "usage": "Usage: /product <slug>",
        "error": "⚠️ Could not load the product. Please try again.",
        "forbidden": "⛔️ You do not have access to this command.",
        "promotions_refreshed": "✅ Promotion cache cleared.",
    },
    Locale.ES: {
        "category": "Categoría",
        "price": "Precio",
        "from": "desde",
        "variations": "Opciones",
        "not_found": "❌ Producto no encontrado.",
        "usage": "Uso: /product <slug>",
        "error": "⚠️ No se pudo cargar el producto. Inténtalo de nuevo.",
        "forbidden": "⛔️ No tienes acceso a este comando.",
        "promotions_refreshed": "✅ Caché de promociones borrada.",
    },
}

class Messages:
    @staticmethod
    def text(key: str, locale: Locale = None) -> str:
        """Localized UI string, base locale when the user's is unsupported"""
        return TEXTS[locale or Locale.base()][key]

    @staticmethod
    def format_price_line(price, original_price, has_promotion: bool) -> str:
        if has_promotion and original_price > price:
            return f"<s>{format_price(original_price)}</s> {format_price(price)}"
        return format_price(price)

    @staticmethod
    def format_variation(variation: VariationView) -> str:
        """One line per variation"""
        line = f"• {html.escape(variation.name)}: " + Messages.format_price_line(
            variation.price, variation.original_price, variation.has_promotion
        )
        attributes = ", ".join(
            f"{html.escape(av.attribute_name)}: {html.escape(av.value)}"
            for av in variation.attribute_values
            if av.attribute_name and av.value
        )
        if attributes:
            line += f" ({attributes})"
        return line

    @staticmethod
    def format_product_detail(product: ProductDetail, locale: Locale = None) -> str:
        """Product card in Telegram HTML"""
        t = TEXTS[locale or Locale.base()]
        lines = [f"🏷 <b>{html.escape(product.name)}</b>"]
        if product.category:
            lines.append(f"🗂 {t['category']}: {html.escape(product.category)}")

        price = Messages.format_price_line(
            product.base_price, product.original_price, product.has_promotion
        )
        prefix = f"{t['from']} " if len(product.variations) > 1 else ""
        lines.append(f"💰 {t['price']}: {prefix}{price}")

        description = strip_markup(product.description)
        if description:
            lines.append("")
            lines.append(html.escape(description))

        if product.variations:
            lines.append("")
            lines.append(f"📦 {t['variations']}:")
            lines.extend(Messages.format_variation(v) for v in product.variations)

        return "\n".join(lines)
