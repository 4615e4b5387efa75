"""Shared pytest fixtures."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fake_backend import EMPTY, make_bitmap

FAKE_BACKEND_SOURCE = Path(__file__).parent / "fake_backend.py"

GLYPH_ORDER = [".notdef", "space", "A", "B"]


def _box(x_min, y_min, x_max, y_max):
    pen = TTGlyphPen(None)
    pen.moveTo((x_min, y_min))
    pen.lineTo((x_min, y_max))
    pen.lineTo((x_max, y_max))
    pen.lineTo((x_max, y_min))
    pen.closePath()
    return pen.glyph()


@pytest.fixture
def synthetic_font(tmp_path):
    """Build a 4-glyph TrueType font: .notdef, space, A, B."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap({0x20: "space", 0x41: "A", 0x42: "B"})
    fb.setupGlyf(
        {
            ".notdef": _box(50, 0, 450, 700),
            "space": TTGlyphPen(None).glyph(),
            "A": _box(100, 0, 500, 700),
            "B": _box(100, 0, 300, 500),
        }
    )
    fb.setupHorizontalMetrics(
        {".notdef": (500, 50), "space": (250, 0), "A": (600, 100), "B": (400, 100)}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Glyphdiff Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    path = tmp_path / "GlyphdiffTest-Regular.ttf"
    fb.save(str(path))
    return path


@pytest.fixture
def scenario_glyphs():
    """
    Base and test glyphs for the four-glyph scenario.

    0: whitespace in both, 1: differs, 2: identical, 3: test only.
    """
    same = make_bitmap("#.", ".#")
    base = [EMPTY, make_bitmap("##", ".."), same]
    test = [EMPTY, make_bitmap("##", "#."), same, make_bitmap("##", "##")]
    return base, test


@pytest.fixture
def plugin_backend(tmp_path):
    """Write a Python backend plugin file serving the given glyphs."""

    def write(glyphs, name="plugin", fail_open=False):
        source = FAKE_BACKEND_SOURCE.read_text()
        source += (
            "\n\ndef create_backend():\n"
            f"    return FakeBackend({glyphs!r}, name={name!r}, "
            f"fail_open={fail_open!r})\n"
        )
        path = tmp_path / f"{name}_backend.py"
        path.write_text(source)
        return str(path)

    return write
