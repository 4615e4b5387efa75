"""
Exception hierarchy for comparison runs.

Everything except RenderError aborts the run.
"""


class GlyphDiffError(Exception):
    """Base class for glyphdiff failures."""


class BackendLoadError(GlyphDiffError):
    """Backend artifact could not be loaded or is missing a required symbol."""


class FaceError(GlyphDiffError):
    """Font face could not be opened or sized."""


class RenderError(GlyphDiffError):
    """A single glyph failed to load or render."""

    def __init__(self, glyph_id: int, message: str):
        super().__init__(f"glyph {glyph_id}: {message}")
        self.glyph_id = glyph_id


class ReportError(GlyphDiffError):
    """Report document could not be written."""
