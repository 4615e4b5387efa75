"""
Ranking of glyph records by difference.
"""

from glyphdiff.core.glyph_table import GlyphRecord, GlyphTable


def rank_key(record: GlyphRecord) -> tuple[float, int]:
    """Descending difference, then ascending glyph id."""
    return (-record.difference, record.glyph_id)


def rank(table: GlyphTable) -> list[GlyphRecord]:
    """
    Reorder the table in place by descending difference.

    Ties resolve by ascending glyph id, so ranking is reproducible and
    ranking an already ranked table leaves it unchanged.

    Returns:
        Records in ranked order
    """
    ordered = sorted(table, key=rank_key)
    table.reorder(ordered)
    return ordered
