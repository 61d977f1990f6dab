"""Echo Card: CJK-aware layout and rendering of signal/echo cards."""

from .card_renderer import CardRenderer, RenderedCard, export_card, render_png
from .era import format_era
from .fonts import FontSet, PillowTextMeasurer, TextMeasurer, load_fonts
from .layout import compute_layout
from .line_breaker import wrap_text
from .models import CardData, LayoutResult, QuoteMatch, WrappedSection

__all__ = [
    "CardData",
    "CardRenderer",
    "FontSet",
    "LayoutResult",
    "PillowTextMeasurer",
    "QuoteMatch",
    "RenderedCard",
    "TextMeasurer",
    "WrappedSection",
    "compute_layout",
    "export_card",
    "format_era",
    "load_fonts",
    "render_png",
    "wrap_text",
]
