"""Greedy line breaking for mixed Chinese/Latin body text.

Breaks per character rather than per word, and keeps closing punctuation
attached to the preceding character: a trailing mark may hang past the
right margin by up to ``MAX_OVERFLOW`` instead of opening a new line.
"""

from .fonts import MAIN_FONT_SIZE, FontFace, TextMeasurer

# How far a hanging mark may extend past the line width (~15.5 at body size)
MAX_OVERFLOW = MAIN_FONT_SIZE * 0.6

# Marks that must never start a line
PUNCTUATION = frozenset(
    [
        "，", "。", "！", "？", "、", "；", "：", "…",
        "“", "”", "）", "】", "》", "·", "～", "—",
    ]
)


def wrap_text(
    text: str,
    face: FontFace,
    max_width: float,
    measurer: TextMeasurer,
) -> list[str]:
    """Wrap ``text`` into lines no wider than ``max_width``.

    Args:
        text: Body text; iterated by code point
        face: Font the lines will be drawn with
        max_width: Line width in logical units
        measurer: Width source for ``face``

    Returns:
        Lines in order. Joining them reproduces ``text`` exactly; empty
        text gives no lines.
    """
    chars = list(text)
    limit = max_width + MAX_OVERFLOW
    lines: list[str] = []
    current = ""

    i = 0
    while i < len(chars):
        char = chars[i]
        candidate = current + char
        width = measurer.measure(candidate, face)

        if width <= max_width or not current:
            current = candidate
        elif char in PUNCTUATION and width <= limit:
            # hanging punctuation
            current = candidate
        elif i + 1 < len(chars) and chars[i + 1] in PUNCTUATION:
            combined = candidate + chars[i + 1]
            if measurer.measure(combined, face) <= limit:
                current = combined
                i += 1
            else:
                lines.append(current)
                current = char
        else:
            lines.append(current)
            current = char
        i += 1

    if current:
        lines.append(current)
    return lines
