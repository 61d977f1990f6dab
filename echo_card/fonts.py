"""Font resolution and text measurement.

Resolves the four card typefaces into a ``FontSet`` once per render and
measures strings through Pillow's FreeType bindings. Each logical family
falls back, in order, to:

1. an explicit file from settings (``FONT_JINGHUA_PATH`` and friends)
2. the named family's files in the assets directory or system font dirs
3. a generic serif / sans-serif / monospace system font
4. Pillow's built-in scalable default font
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from PIL import ImageFont

from .config import settings
from .utils import get_logger

logger = get_logger(__name__)

# Body text size; line height and punctuation overflow derive from it
MAIN_FONT_SIZE = 25.8


@dataclass(frozen=True)
class FontFamily:
    """A named family and the files that provide it."""

    key: str
    name: str
    generic: str
    regular_files: tuple[str, ...]
    bold_files: tuple[str, ...] = ()


FAMILIES: dict[str, FontFamily] = {
    "jinghua": FontFamily(
        key="jinghua",
        name="JingHua LaoSong",
        generic="serif",
        regular_files=("JingHuaLaoSong.ttf", "JingHuaLaoSong.otf", "京华老宋体.ttf"),
    ),
    "courier": FontFamily(
        key="courier",
        name="Courier Prime",
        generic="monospace",
        regular_files=("CourierPrime-Regular.ttf",),
        bold_files=("CourierPrime-Bold.ttf",),
    ),
    "noto": FontFamily(
        key="noto",
        name="Noto Sans SC",
        generic="sans-serif",
        regular_files=("NotoSansSC-Regular.ttf", "NotoSansSC-Regular.otf", "NotoSansSC-VariableFont_wght.ttf"),
        bold_files=("NotoSansSC-Bold.ttf", "NotoSansSC-Bold.otf"),
    ),
}

# Generic families: (path, face indices, bold)
GENERIC_FILES: dict[str, tuple[tuple[str, tuple[int, ...], bool], ...]] = {
    "serif": (
        ("/usr/share/fonts/opentype/noto/NotoSerifCJK-Bold.ttc", (2, 0), True),
        ("/usr/share/fonts/opentype/noto/NotoSerifCJK-Regular.ttc", (2, 0), False),
        ("/usr/share/fonts/google-noto-cjk/NotoSerifCJK-Bold.ttc", (2, 0), True),
        ("/usr/share/fonts/google-noto-cjk/NotoSerifCJK-Regular.ttc", (2, 0), False),
        ("/System/Library/Fonts/Supplemental/Songti.ttc", (1,), True),
        ("/System/Library/Fonts/Supplemental/Songti.ttc", (6,), False),
        ("C:\\Windows\\Fonts\\simsun.ttc", (0,), False),
        ("/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf", (0,), True),
        ("/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf", (0,), False),
    ),
    "sans-serif": (
        ("/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc", (2, 0), False),
        ("/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc", (2, 0), True),
        ("/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc", (2, 0), False),
        ("/System/Library/Fonts/PingFang.ttc", (0,), False),
        ("/System/Library/Fonts/Hiragino Sans GB.ttc", (0,), False),
        ("C:\\Windows\\Fonts\\msyh.ttc", (0,), False),
        ("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", (0,), False),
    ),
    "monospace": (
        ("/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", (0,), False),
        ("/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf", (0,), False),
        ("/System/Library/Fonts/Menlo.ttc", (0,), False),
        ("C:\\Windows\\Fonts\\consola.ttf", (0,), False),
        ("C:\\Windows\\Fonts\\cour.ttf", (0,), False),
    ),
}

SYSTEM_FONT_DIRS: tuple[str, ...] = (
    "~/.fonts",
    "~/.local/share/fonts",
    "~/Library/Fonts",
    "/Library/Fonts",
    "/usr/share/fonts/truetype",
    "/usr/local/share/fonts",
    "C:\\Windows\\Fonts",
)

# role -> (family key, logical size, bold)
ROLES: dict[str, tuple[str, float, bool]] = {
    "label_cjk": ("jinghua", 10, False),
    "label_latin": ("courier", 11, False),
    "main": ("jinghua", MAIN_FONT_SIZE, True),
    "info": ("noto", 10, False),
}


@dataclass(frozen=True)
class FontFace:
    """A resolved typeface at its logical size.

    ``path`` is None when no font file was found and Pillow's built-in
    default font stands in. ``bold_file`` marks a file that is itself a
    bold weight; a bold face without one is emboldened when drawn.
    """

    role: str
    family: str
    size: float
    bold: bool = False
    path: Optional[Path] = None
    index: int = 0
    bold_file: bool = False

    @property
    def is_fallback(self) -> bool:
        return self.path is None

    @property
    def synthetic_bold(self) -> bool:
        """Bold was requested but the file only carries a regular weight."""
        return self.bold and not self.bold_file


@dataclass(frozen=True)
class FontSet:
    """The four typefaces a card is drawn with."""

    label_cjk: FontFace
    label_latin: FontFace
    main: FontFace
    info: FontFace


class TextMeasurer(ABC):
    """Measures the advance width of a string in logical units."""

    @abstractmethod
    def measure(self, text: str, face: FontFace) -> float:
        """Return the rendered width of ``text`` set in ``face``."""


class PillowTextMeasurer(TextMeasurer):
    """FreeType-backed measurer that also hands out scaled fonts for drawing."""

    def __init__(self):
        self._cache: dict[tuple, ImageFont.ImageFont] = {}

    def font(self, face: FontFace, scale: float = 1.0) -> ImageFont.ImageFont:
        """Load ``face`` at ``face.size * scale`` pixels."""
        size = face.size * scale
        key = (face.path, face.index, size)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if face.path is None:
            font = ImageFont.load_default(size=size)
        else:
            font = ImageFont.truetype(str(face.path), size, index=face.index)
        self._cache[key] = font
        return font

    def measure(self, text: str, face: FontFace) -> float:
        if not text:
            return 0.0
        return float(self.font(face).getlength(text))


def _can_open(path: Path, index: int) -> bool:
    try:
        ImageFont.truetype(str(path), 10, index=index)
    except OSError as e:
        logger.debug(f"Cannot open font {path} (index {index}): {e}")
        return False
    return True


class FontResolver:
    """Resolves logical font roles to font files present on this machine."""

    def __init__(
        self,
        overrides: Optional[dict[str, Optional[Path]]] = None,
        fonts_dir: Optional[Path] = None,
        search_dirs: Sequence[str] = SYSTEM_FONT_DIRS,
    ):
        self.overrides = overrides if overrides is not None else settings.font_overrides
        self.fonts_dir = fonts_dir if fonts_dir is not None else settings.fonts_dir
        self.search_dirs = [self.fonts_dir] + [Path(os.path.expanduser(d)) for d in search_dirs]

    def resolve(self) -> FontSet:
        """Open every card typeface once and return the resolved set."""
        faces = {role: self._resolve_face(role, *params) for role, params in ROLES.items()}
        for face in faces.values():
            source = face.path or "built-in default"
            logger.debug(f"Font {face.role}: {face.family} {face.size}px -> {source}")
        return FontSet(**faces)

    def _resolve_face(self, role: str, family_key: str, size: float, bold: bool) -> FontFace:
        family = FAMILIES[family_key]

        override = self.overrides.get(family_key)
        if override and _can_open(Path(override), 0):
            is_bold = Path(override).name in family.bold_files
            return FontFace(role, family.name, size, bold, Path(override), 0, is_bold)
        if override:
            logger.warning(f"Configured font for {family.name} is unusable: {override}")

        names = (family.bold_files + family.regular_files) if bold else family.regular_files
        for name in names:
            for directory in self.search_dirs:
                candidate = Path(directory) / name
                if candidate.is_file() and _can_open(candidate, 0):
                    is_bold = name in family.bold_files
                    return FontFace(role, family.name, size, bold, candidate, 0, is_bold)

        for path, indices, is_bold in self._generic_candidates(family.generic, bold):
            candidate = Path(path)
            if not candidate.is_file():
                continue
            for idx in indices:
                if _can_open(candidate, idx):
                    return FontFace(role, family.generic, size, bold, candidate, idx, is_bold)

        logger.warning(f"No font file found for {family.name} ({family.generic}); using Pillow default")
        return FontFace(role, family.generic, size, bold, None, 0)

    @staticmethod
    def _generic_candidates(generic: str, bold: bool):
        """Generic candidates with the requested weight first."""
        candidates = GENERIC_FILES.get(generic, ())
        return sorted(candidates, key=lambda c: c[2] != bold)


def load_fonts() -> FontSet:
    """Resolve the card fonts using the configured overrides."""
    return FontResolver().resolve()
