"""
Font file inspection with fontTools.

The rasterization backends own rendering; fontTools is only used to label
the report and to learn the glyph count before any backend opens the font.
"""

from dataclasses import dataclass
from pathlib import Path

from fontTools.ttLib import TTFont

from glyphdiff.config.render import FACE_INDEX
from glyphdiff.utils.logging import logger


@dataclass(frozen=True)
class FontInfo:
    """Summary of a font file for the report header."""

    path: Path
    family: str | None = None
    style: str | None = None
    num_glyphs: int | None = None

    @property
    def label(self) -> str:
        """Human-readable font label."""
        if self.family:
            name = f"{self.family} {self.style}" if self.style else self.family
            return f"{name} ({self.path})"
        return str(self.path)


def read_font_info(path: Path) -> FontInfo:
    """
    Read family, style and glyph count from a font file.

    Unreadable files are not an error here; the backends decide whether
    the font can be opened.
    """
    try:
        font = TTFont(path, fontNumber=FACE_INDEX, lazy=True)
    except Exception as e:
        logger.warning(f"fontTools cannot read {path}: {e}")
        return FontInfo(path)

    try:
        family = style = None
        if "name" in font:
            family = font["name"].getBestFamilyName()
            style = font["name"].getBestSubFamilyName()
        num_glyphs = font["maxp"].numGlyphs if "maxp" in font else None
    except Exception as e:
        logger.warning(f"fontTools cannot read tables of {path}: {e}")
        return FontInfo(path)
    finally:
        font.close()

    return FontInfo(path, family, style, num_glyphs)
