"""Echo card renderer.

Draws the two-section card (the user's signal, then the matched echo) with
Pillow at any uniform scale. Layout is computed in logical units by
``compute_layout`` and the same result positions every drawn element, so the
height reported for sizing always matches the bitmap.
"""

import io
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from PIL import Image

from .config import settings
from .era import format_era
from .fonts import FontSet, PillowTextMeasurer
from .layout import (
    CARD_WIDTH,
    CONTENT_WIDTH,
    DIVIDER_HEIGHT,
    DIVIDER_MARGIN_BOTTOM,
    DIVIDER_MARGIN_TOP,
    INFO_HEIGHT,
    INFO_MARGIN_TOP,
    LABEL_GAP,
    LABEL_HEIGHT,
    LABEL_MARGIN_BOTTOM,
    LINE_HEIGHT,
    PADDING_TOP,
    PADDING_X,
    compute_layout,
)
from .models import CardData, WrappedSection
from .pulse_divider import draw_pulse_divider
from .surface import ScaledSurface
from .utils import get_logger

logger = get_logger(__name__)

# Palette
BG_COLOR = (251, 251, 251)  # #FBFBFB
LABEL_COLOR = (187, 187, 187)  # #bbb
TEXT_COLOR = (31, 31, 31)  # #1f1f1f
INFO_COLOR = (217, 44, 61, 166)  # rgba(217,44,61,0.65)

# Section labels: CJK word + Latin gloss
SIGNAL_LABEL = ("念头", "SIGNAL")
ECHO_LABEL = ("回响", "ECHO")

INFO_SEPARATOR = " / "


@dataclass
class RenderedCard:
    """A rendered card bitmap and the logical height it was laid out at."""

    image: Image.Image
    logical_height: float
    scale: float

    @property
    def logical_width(self) -> float:
        return CARD_WIDTH

    def to_png_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path, "PNG")
        return path


def signal_info(data: CardData) -> str:
    """Metadata line under the user's signal: name / time [/ location]."""
    parts = [data.user_name, data.user_time]
    if data.user_location:
        parts.append(data.user_location)
    return INFO_SEPARATOR.join(parts)


def echo_info(data: CardData) -> str:
    """Metadata line under the quote: author / era / location."""
    return INFO_SEPARATOR.join([data.author_name, format_era(data.era), data.location])


class CardRenderer:
    """Renders echo cards at a given scale."""

    def __init__(self, measurer: Optional[PillowTextMeasurer] = None):
        self.measurer = measurer or PillowTextMeasurer()

    def card_height(self, data: CardData, fonts: FontSet) -> float:
        """Logical card height, computed without drawing."""
        return compute_layout(data, fonts, self.measurer).total_height

    def render(self, data: CardData, fonts: FontSet, scale: float = 1.0) -> RenderedCard:
        """
        Render a card.

        Args:
            data: Card text
            fonts: Resolved typefaces (see ``fonts.load_fonts``)
            scale: Physical pixels per logical unit, e.g. the device pixel
                ratio for a preview or ``settings.export_scale`` for export

        Returns:
            RenderedCard whose image is ``round(340 * scale)`` by
            ``round(logical_height * scale)`` pixels
        """
        layout = compute_layout(data, fonts, self.measurer)
        surface = ScaledSurface(CARD_WIDTH, layout.total_height, scale, self.measurer)
        surface.fill(BG_COLOR)

        y = PADDING_TOP
        y = self._draw_section(surface, fonts, y, SIGNAL_LABEL, layout.section1, signal_info(data))

        y += DIVIDER_MARGIN_TOP
        draw_pulse_divider(surface, PADDING_X, y, CONTENT_WIDTH)
        y += DIVIDER_HEIGHT + DIVIDER_MARGIN_BOTTOM

        self._draw_section(surface, fonts, y, ECHO_LABEL, layout.section2, echo_info(data))

        logger.info(
            f"Rendered card {surface.size[0]}x{surface.size[1]}px at {scale}x "
            f"({layout.section1.line_count}+{layout.section2.line_count} lines, "
            f"height {layout.total_height:.2f})"
        )
        return RenderedCard(image=surface.image, logical_height=layout.total_height, scale=scale)

    def _draw_section(
        self,
        surface: ScaledSurface,
        fonts: FontSet,
        y: float,
        label: tuple[str, str],
        section: WrappedSection,
        info: str,
    ) -> float:
        """Draw label, body lines and info line from ``y``; return the new y."""
        self._draw_label(surface, fonts, y, label)
        y += LABEL_HEIGHT + LABEL_MARGIN_BOTTOM

        for line in section.lines:
            surface.text((PADDING_X, y), line, fonts.main, TEXT_COLOR)
            y += LINE_HEIGHT

        y += INFO_MARGIN_TOP
        surface.text((PADDING_X, y), info, fonts.info, INFO_COLOR)
        return y + INFO_HEIGHT

    @staticmethod
    def _draw_label(surface: ScaledSurface, fonts: FontSet, y: float, label: tuple[str, str]) -> None:
        cjk, latin = label
        surface.text((PADDING_X, y), cjk, fonts.label_cjk, LABEL_COLOR)
        latin_x = PADDING_X + surface.text_width(cjk, fonts.label_cjk) + LABEL_GAP
        surface.text((latin_x, y), latin, fonts.label_latin, LABEL_COLOR)


def render_png(data: CardData, fonts: FontSet, scale: Optional[float] = None) -> bytes:
    """Render a card and encode it as PNG."""
    scale = scale if scale is not None else settings.export_scale
    return CardRenderer().render(data, fonts, scale).to_png_bytes()


def export_card(
    data: CardData,
    fonts: FontSet,
    path: Optional[Path] = None,
    scale: Optional[float] = None,
) -> Path:
    """Render a card at export resolution and write it as a PNG file."""
    scale = scale if scale is not None else settings.export_scale
    if path is None:
        settings.ensure_directories()
        path = settings.output_dir / f"echo-{datetime.now():%Y%m%d-%H%M%S}.png"
    card = CardRenderer().render(data, fonts, scale)
    out_path = card.save(path)
    logger.info(f"Exported card: {out_path}")
    return out_path
