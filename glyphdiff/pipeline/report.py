"""
HTML report of ranked divergent glyphs.
"""

import html
import os
from collections.abc import Sequence
from pathlib import Path

from glyphdiff.config.paths import REPORT_PATH
from glyphdiff.core.errors import ReportError
from glyphdiff.core.glyph_table import GlyphRecord
from glyphdiff.utils.logging import logger

STYLE = """\
img {
  image-rendering: pixelated;
  image-rendering: crisp-edges;
  -ms-interpolation-mode: nearest-neighbor;
  min-width: 10%;
}
table, th, td {
  border: 1px solid black;
  border-collapse: collapse;
}
.missing {
  color: #888;
  font-style: italic;
}
"""


def visible_records(records: Sequence[GlyphRecord]) -> list[GlyphRecord]:
    """Records shown in the report: those with a non-zero difference."""
    return [record for record in records if record.difference > 0]


def _image_cell(path: Path | None, report_dir: Path) -> str:
    if path is None:
        return '<span class="missing">missing</span>'
    src = Path(os.path.relpath(path, report_dir)).as_posix()
    return f'<img src="{html.escape(src)}">'


def _row(rank_index: int, record: GlyphRecord, report_dir: Path) -> str:
    base = _image_cell(record.base_image_path, report_dir)
    test = _image_cell(record.test_image_path, report_dir)
    return (
        f"<tr><td>{rank_index}</td><td>{record.glyph_id}</td>"
        f"<td>{record.difference:.2f}</td><td>{base} {test}</td></tr>"
    )


def render_report(
    records: Sequence[GlyphRecord],
    font_label: str,
    char_size: int | None = None,
    report_dir: Path = Path("."),
) -> str:
    """
    Render ranked records as an HTML document.

    Rank indices count shown rows from zero. Zero-difference records are
    left out of the view but not removed from records.
    """
    shown = visible_records(records)
    divergent = sum(1 for record in records if record.is_divergent)

    heading = html.escape(font_label)
    if char_size is not None:
        heading += f" at {char_size}pt"

    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>glyphdiff: {html.escape(font_label)}</title>",
        f"<style>\n{STYLE}</style>",
        "</head>",
        "<body>",
        f"<p>{heading}</p>",
        f"<p>{len(records)} glyphs, {divergent} divergent, {len(shown)} shown</p>",
        '<table style="width:100%">',
        "<tr><th>Rank</th><th>Glyph</th><th>Difference</th>"
        "<th>Base glyph | Test glyph</th></tr>",
    ]
    lines.extend(
        _row(rank_index, record, report_dir)
        for rank_index, record in enumerate(shown)
    )
    lines += ["</table>", "</body>", "</html>", ""]
    return "\n".join(lines)


def emit_report(
    records: Sequence[GlyphRecord],
    font_label: str,
    output_path: Path = REPORT_PATH,
    char_size: int | None = None,
) -> Path:
    """
    Write the report, overwriting any previous one.

    Raises:
        ReportError: If the report cannot be written
    """
    document = render_report(
        records, font_label, char_size, report_dir=output_path.parent
    )
    try:
        output_path.write_text(document, encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Cannot write report {output_path}: {e}") from e

    logger.info(f"Report written to {output_path}")
    return output_path
