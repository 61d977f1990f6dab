"""A Pillow drawing surface addressed in logical units.

Every coordinate, stroke width and font size passed in is multiplied by
``scale`` on the way to the bitmap, so the same drawing code serves a 1x
preview and a 5x export.
"""

from typing import Sequence

from PIL import Image, ImageDraw

from .fonts import FontFace, PillowTextMeasurer

Color = tuple[int, ...]
Point = tuple[float, float]


class ScaledSurface:
    """An RGB image plus a uniform logical-to-pixel scale."""

    def __init__(
        self,
        width: float,
        height: float,
        scale: float,
        measurer: PillowTextMeasurer,
    ):
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.scale = scale
        self.measurer = measurer
        self.image = Image.new("RGB", (round(width * scale), round(height * scale)))
        # RGBA draw mode blends translucent fills onto the RGB image
        self.draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def fill(self, color: Color) -> None:
        """Paint the whole surface."""
        self.draw.rectangle([(0, 0), self.image.size], fill=color)

    def text_width(self, text: str, face: FontFace) -> float:
        """Width of ``text`` in logical units."""
        return self.measurer.measure(text, face)

    def text(self, xy: Point, text: str, face: FontFace, color: Color) -> None:
        """Draw ``text`` with its top-left corner at ``xy``."""
        if not text:
            return
        x, y = xy
        font = self.measurer.font(face, self.scale)
        stroke = 0
        if face.synthetic_bold:
            # Faux bold: thicken the outline by about 1/40 of the em
            stroke = max(1, round(face.size * self.scale / 40))
        self.draw.text(
            (x * self.scale, y * self.scale),
            text,
            font=font,
            fill=color,
            stroke_width=stroke,
            stroke_fill=color,
        )

    def stroke_path(self, points: Sequence[Point], width: float, color: Color) -> None:
        """Stroke an open polyline with round joins and caps.

        The path is drawn opaque on its own layer and composited once, so
        a translucent stroke keeps a uniform alpha where segments meet.
        """
        if len(points) < 2:
            return
        stroke = max(1, round(width * self.scale))
        pad = stroke + 1
        scaled = [(px * self.scale, py * self.scale) for px, py in points]

        left = int(min(px for px, _ in scaled)) - pad
        top = int(min(py for _, py in scaled)) - pad
        right = int(max(px for px, _ in scaled)) + pad + 1
        bottom = int(max(py for _, py in scaled)) + pad + 1

        layer = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
        layer_draw = ImageDraw.Draw(layer)
        local = [(px - left, py - top) for px, py in scaled]
        layer_draw.line(local, fill=color, width=stroke, joint="curve")

        radius = stroke / 2
        for cx, cy in (local[0], local[-1]):
            layer_draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=color)

        self.image.paste(layer, (left, top), layer)
