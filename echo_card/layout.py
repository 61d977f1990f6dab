"""Card geometry.

All values are logical units. They define the visual format as a whole:
change any of them only together with ``FORMAT_VERSION``.
"""

from .fonts import MAIN_FONT_SIZE, FontSet, TextMeasurer
from .line_breaker import wrap_text
from .models import CardData, LayoutResult, WrappedSection

FORMAT_VERSION = 1

CARD_WIDTH = 340
PADDING_X = 38
CONTENT_WIDTH = CARD_WIDTH - PADDING_X * 2  # 264
PADDING_TOP = 60
PADDING_BOTTOM = 62

LABEL_HEIGHT = 11
LABEL_MARGIN_BOTTOM = 20
LABEL_GAP = 4  # between the CJK label and its Latin gloss

LINE_HEIGHT = MAIN_FONT_SIZE * 1.2  # 30.96

INFO_MARGIN_TOP = 16
INFO_HEIGHT = 10

DIVIDER_MARGIN_TOP = 42
DIVIDER_HEIGHT = 24
DIVIDER_MARGIN_BOTTOM = 36


def section_height(line_count: int) -> float:
    """Height of one labeled section holding ``line_count`` body lines."""
    return (
        LABEL_HEIGHT
        + LABEL_MARGIN_BOTTOM
        + line_count * LINE_HEIGHT
        + INFO_MARGIN_TOP
        + INFO_HEIGHT
    )


def card_height(lines1: int, lines2: int) -> float:
    """Total card height for the given body line counts."""
    return (
        PADDING_TOP
        + section_height(lines1)
        + DIVIDER_MARGIN_TOP
        + DIVIDER_HEIGHT
        + DIVIDER_MARGIN_BOTTOM
        + section_height(lines2)
        + PADDING_BOTTOM
    )


def compute_layout(data: CardData, fonts: FontSet, measurer: TextMeasurer) -> LayoutResult:
    """Wrap both body texts and compute the logical card height."""
    section1 = WrappedSection(tuple(wrap_text(data.user_signal, fonts.main, CONTENT_WIDTH, measurer)))
    section2 = WrappedSection(tuple(wrap_text(data.quote, fonts.main, CONTENT_WIDTH, measurer)))
    return LayoutResult(
        section1=section1,
        section2=section2,
        total_height=card_height(section1.line_count, section2.line_count),
    )
