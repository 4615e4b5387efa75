"""
Sweep driver.

One sweep visits every glyph id of a font under one backend and one mode,
writing its results into the shared glyph table.
"""

from dataclasses import dataclass
from pathlib import Path

from glyphdiff.config.paths import IMAGES_DIR
from glyphdiff.config.render import DEFAULT_DPI, SweepMode
from glyphdiff.core.backend import (
    Bitmap,
    FontHandle,
    RasterizationBackend,
    opened_font,
)
from glyphdiff.core.errors import RenderError
from glyphdiff.core.fingerprint import fingerprint
from glyphdiff.core.glyph_table import GlyphRecord, GlyphTable
from glyphdiff.core.images import ink_coverage, write_glyph_image
from glyphdiff.utils.logging import logger


@dataclass
class SweepStats:
    """Counters for one pass."""

    mode: SweepMode
    num_glyphs: int = 0
    visited: int = 0
    rendered: int = 0
    skipped: int = 0
    failed: int = 0
    captured: int = 0
    missing: int = 0

    def summary(self) -> str:
        parts = [
            f"{self.visited} visited",
            f"{self.rendered} rendered",
            f"{self.skipped} skipped",
            f"{self.failed} failed",
        ]
        if self.mode.is_capture:
            parts.append(f"{self.captured} captured")
            parts.append(f"{self.missing} missing")
        return f"{self.mode.value}: " + ", ".join(parts)


def _render(
    backend: RasterizationBackend,
    handle: FontHandle,
    glyph_id: int,
    stats: SweepStats,
) -> Bitmap | None:
    """Render one glyph, returning None on a per-glyph failure."""
    try:
        bitmap = backend.render(handle, glyph_id)
    except RenderError as e:
        logger.warning(f"{backend.name}: {e}")
        stats.failed += 1
        return None
    stats.rendered += 1
    return bitmap


def _hash_glyph(
    backend: RasterizationBackend,
    handle: FontHandle,
    record: GlyphRecord,
    mode: SweepMode,
    stats: SweepStats,
) -> None:
    bitmap = _render(backend, handle, record.glyph_id, stats)
    if bitmap is None:
        return
    record.set_fingerprint(mode.implementation, fingerprint(bitmap))


def _capture_glyph(
    backend: RasterizationBackend,
    handle: FontHandle,
    record: GlyphRecord,
    mode: SweepMode,
    images_dir: Path,
    stats: SweepStats,
) -> None:
    if not record.is_divergent:
        stats.skipped += 1
        return

    impl = mode.implementation
    if record.glyph_id >= handle.num_glyphs:
        # Glyph exists only in the other implementation's font
        record.set_capture(impl, 0.0, None)
        stats.missing += 1
    else:
        bitmap = _render(backend, handle, record.glyph_id, stats)
        if bitmap is None:
            return
        if bitmap.is_empty:
            stats.skipped += 1
            return
        path = write_glyph_image(bitmap, images_dir, impl, record.glyph_id)
        record.set_capture(impl, ink_coverage(bitmap), path)
        stats.captured += 1

    if mode is SweepMode.CAPTURE_TEST:
        record.update_difference()


def sweep(
    backend: RasterizationBackend,
    mode: SweepMode,
    table: GlyphTable,
    font_path: Path,
    char_size: int,
    *,
    images_dir: Path = IMAGES_DIR,
    dpi: int = DEFAULT_DPI,
) -> SweepStats:
    """
    Run one pass over all glyphs of a font.

    Hash passes visit the backend's own glyph ids. Capture passes also visit
    ids that only the other implementation's font has, so glyphs missing
    from one side still get a difference.

    Args:
        backend: Initialized backend used for rendering
        mode: What to record for each glyph
        table: Shared glyph table, grown as needed
        font_path: Font file to open
        char_size: Character size in points
        images_dir: Directory for captured images
        dpi: Horizontal and vertical resolution

    Returns:
        Counters for the pass

    Raises:
        FaceError: If the font cannot be opened or sized
    """
    stats = SweepStats(mode)

    with opened_font(backend, font_path, char_size, dpi) as handle:
        stats.num_glyphs = handle.num_glyphs
        count = handle.num_glyphs
        if mode.is_capture:
            count = max(count, len(table))

        for glyph_id in range(count):
            record = table.ensure(glyph_id)
            stats.visited += 1
            if mode.is_capture:
                _capture_glyph(backend, handle, record, mode, images_dir, stats)
            else:
                _hash_glyph(backend, handle, record, mode, stats)

    logger.info(stats.summary())
    return stats
