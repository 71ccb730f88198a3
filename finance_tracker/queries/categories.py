"""
Transaction Categories

Categories are free text on a transaction. These are the ones offered as
suggestions, plus the icon/color keys used to draw them. Unknown
categories fall back to a generic style.
"""

from typing import NamedTuple


DEFAULT_CATEGORIES = (
    "Alimentação",
    "Transporte",
    "Salário",
    "Lazer",
    "Saúde",
    "Compras",
    "Moradia",
    "Educação",
    "Contas",
)


class CategoryStyle(NamedTuple):
    icon: str
    color: str


FALLBACK_STYLE = CategoryStyle(icon="circle-dollar-sign", color="gray")

_STYLES = {
    "Alimentação": CategoryStyle("utensils", "orange"),
    "Transporte": CategoryStyle("car", "blue"),
    "Salário": CategoryStyle("banknote", "emerald"),
    "Lazer": CategoryStyle("gamepad", "purple"),
    "Saúde": CategoryStyle("heart-pulse", "rose"),
    "Compras": CategoryStyle("shopping-bag", "gray"),
    "Moradia": CategoryStyle("home", "gray"),
    "Educação": CategoryStyle("graduation-cap", "gray"),
    "Contas": CategoryStyle("zap", "gray"),
}


def category_style(name: str) -> CategoryStyle:
    """Icon and color keys for a category name (exact match)."""
    return _STYLES.get(name, FALLBACK_STYLE)
