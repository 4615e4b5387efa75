"""
Comparison pipeline orchestration.

Loads both backends, runs the four sweeps in order against one glyph
table, ranks the table and writes the report.
"""

from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from glyphdiff.config.render import (
    DEFAULT_DPI,
    SWEEP_ORDER,
    Implementation,
    RunConfig,
    SweepMode,
)
from glyphdiff.core.backend import RasterizationBackend, loaded_backend
from glyphdiff.core.font_io import FontInfo, read_font_info
from glyphdiff.core.glyph_table import GlyphRecord, GlyphTable
from glyphdiff.pipeline.rank import rank
from glyphdiff.pipeline.report import emit_report
from glyphdiff.pipeline.sweep import SweepStats, sweep
from glyphdiff.utils.logging import logger


@dataclass
class ComparisonResult:
    """Outcome of a full comparison run."""

    font: FontInfo
    table: GlyphTable
    ranked: list[GlyphRecord]
    stats: list[SweepStats]
    report_path: Path

    @property
    def divergent(self) -> list[GlyphRecord]:
        return [record for record in self.ranked if record.is_divergent]


def _new_table(font: FontInfo) -> GlyphTable:
    table = GlyphTable()
    if font.num_glyphs:
        table.reserve(font.num_glyphs)
    return table


def _check_glyph_counts(stats: list[SweepStats]) -> None:
    counts = {s.mode: s.num_glyphs for s in stats}
    base = counts.get(SweepMode.HASH_BASE)
    test = counts.get(SweepMode.HASH_TEST)
    if base != test:
        logger.warning(
            f"Glyph count mismatch: base has {base}, test has {test}; "
            "glyphs present in only one font are treated as divergent"
        )


def run_comparison(config: RunConfig) -> ComparisonResult:
    """
    Run all comparison passes in order.

    Pipeline:
      1. hash-base     - Fingerprint every glyph with the base backend
      2. hash-test     - Fingerprint every glyph with the test backend
      3. capture-base  - Write base images for divergent glyphs
      4. capture-test  - Write test images and compute differences

    Both backends stay loaded for the whole run and are shut down on every
    exit path.

    Args:
        config: Run settings

    Returns:
        Ranked table, per-pass counters and the report location

    Raises:
        GlyphDiffError: On any fatal backend, face or report failure
    """
    font = read_font_info(config.font_path)
    table = _new_table(font)
    stats: list[SweepStats] = []

    with ExitStack() as stack:
        backends: dict[Implementation, RasterizationBackend] = {
            Implementation.BASE: stack.enter_context(
                loaded_backend(config.base_backend)
            ),
            Implementation.TEST: stack.enter_context(
                loaded_backend(config.test_backend)
            ),
        }
        if config.capture_base_with_test:
            logger.warning("Capturing base images with the test backend")

        total = len(SWEEP_ORDER)
        for i, mode in enumerate(SWEEP_ORDER, 1):
            backend = backends[config.backend_for(mode)]
            logger.info(f"[{i}/{total}] Running {mode.value} with {backend.name}")
            stats.append(
                sweep(
                    backend,
                    mode,
                    table,
                    config.font_path,
                    config.char_size,
                    images_dir=config.images_dir,
                    dpi=config.dpi,
                )
            )
            if mode is SweepMode.HASH_TEST:
                _check_glyph_counts(stats)

    ranked = rank(table)
    report_path = emit_report(
        ranked, font.label, config.report_path, config.char_size
    )

    divergent = sum(1 for record in ranked if record.is_divergent)
    logger.info(f"{divergent} of {len(table)} glyphs diverge")
    return ComparisonResult(font, table, ranked, stats, report_path)


def collect_fingerprints(
    backend_path: str, font_path: Path, char_size: int, dpi: int = DEFAULT_DPI
) -> GlyphTable:
    """Fingerprint every glyph of a font with a single backend."""
    table = GlyphTable()
    with loaded_backend(backend_path) as backend:
        sweep(backend, SweepMode.HASH_BASE, table, font_path, char_size, dpi=dpi)
    return table
