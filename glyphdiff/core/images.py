"""
Glyph image capture and scoring.
"""

from pathlib import Path

from PIL import Image, ImageOps

from glyphdiff.config.paths import IMAGE_SUFFIX
from glyphdiff.config.render import Implementation
from glyphdiff.core.backend import Bitmap


def image_path(images_dir: Path, impl: Implementation, glyph_id: int) -> Path:
    """Deterministic artifact path for one glyph under one implementation."""
    return images_dir / f"{impl.tag}_{glyph_id}{IMAGE_SUFFIX}"


def bitmap_to_image(bitmap: Bitmap) -> Image.Image:
    """Convert a glyph bitmap to dark-on-light grayscale."""
    coverage = Image.frombytes("L", (bitmap.width, bitmap.height), bitmap.buffer)
    return ImageOps.invert(coverage)


def write_glyph_image(
    bitmap: Bitmap, images_dir: Path, impl: Implementation, glyph_id: int
) -> Path:
    """
    Save a non-empty bitmap as PNG, overwriting any previous file.

    Returns:
        Path of the written image
    """
    images_dir.mkdir(parents=True, exist_ok=True)
    path = image_path(images_dir, impl, glyph_id)
    bitmap_to_image(bitmap).save(path, format="PNG")
    return path


def ink_coverage(bitmap: Bitmap) -> float:
    """
    Score a bitmap by its total ink, in fully covered pixels.

    The difference between two renderings is the absolute difference of
    their scores.
    """
    return sum(bitmap.buffer) / 255
