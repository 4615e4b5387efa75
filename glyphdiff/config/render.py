"""
Rendering and sweep configuration.

Defines the resolution, FreeType flags, and the ordered sweep modes
used for a comparison run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from glyphdiff.config.paths import IMAGES_DIR, REPORT_PATH

# Horizontal and vertical resolution passed to FT_Set_Char_Size
DEFAULT_DPI = 96

# Face index opened inside the font file
FACE_INDEX = 0


class Implementation(str, Enum):
    """Which of the two backend builds a value belongs to."""

    BASE = "base"
    TEST = "test"

    @property
    def tag(self) -> str:
        """Tag used in image filenames."""
        return self.value


class SweepMode(Enum):
    """Per-pass behaviour of the sweep driver."""

    HASH_BASE = "hash-base"
    HASH_TEST = "hash-test"
    CAPTURE_BASE = "capture-base"
    CAPTURE_TEST = "capture-test"

    @property
    def implementation(self) -> Implementation:
        """Implementation whose record fields this mode writes."""
        if self in (SweepMode.HASH_BASE, SweepMode.CAPTURE_BASE):
            return Implementation.BASE
        return Implementation.TEST

    @property
    def is_capture(self) -> bool:
        """Capture modes only touch glyphs whose fingerprints differ."""
        return self in (SweepMode.CAPTURE_BASE, SweepMode.CAPTURE_TEST)


# Passes always run in this order against one glyph table
SWEEP_ORDER = [
    SweepMode.HASH_BASE,
    SweepMode.HASH_TEST,
    SweepMode.CAPTURE_BASE,
    SweepMode.CAPTURE_TEST,
]


@dataclass(frozen=True)
class RunConfig:
    """
    Settings for one comparison run.

    capture_base_with_test reproduces the historical behaviour of capturing
    base images with the test backend.
    """

    base_backend: str
    test_backend: str
    char_size: int
    font_path: Path
    images_dir: Path = field(default=IMAGES_DIR)
    report_path: Path = field(default=REPORT_PATH)
    dpi: int = DEFAULT_DPI
    capture_base_with_test: bool = False

    def backend_for(self, mode: SweepMode) -> Implementation:
        """Implementation whose backend renders glyphs for a mode."""
        if mode is SweepMode.CAPTURE_BASE and self.capture_base_with_test:
            return Implementation.TEST
        return mode.implementation
