"""
Glyph-id indexed record store shared by all sweep passes.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from glyphdiff.config.render import Implementation


@dataclass
class GlyphRecord:
    """Comparison state for one glyph id."""

    glyph_id: int
    base_image_path: Path | None = None
    test_image_path: Path | None = None
    base_fingerprint: str = ""
    test_fingerprint: str = ""
    base_score: float | None = None
    test_score: float | None = None
    difference: float = 0.0

    @property
    def is_divergent(self) -> bool:
        """Fingerprints differ between the two implementations."""
        return self.base_fingerprint != self.test_fingerprint

    def set_fingerprint(self, impl: Implementation, value: str) -> None:
        if impl is Implementation.BASE:
            self.base_fingerprint = value
        else:
            self.test_fingerprint = value

    def set_capture(
        self, impl: Implementation, score: float, image_path: Path | None
    ) -> None:
        if impl is Implementation.BASE:
            self.base_score = score
            self.base_image_path = image_path
        else:
            self.test_score = score
            self.test_image_path = image_path

    def update_difference(self) -> None:
        """Set difference from whichever scores were captured."""
        self.difference = abs((self.base_score or 0.0) - (self.test_score or 0.0))


class GlyphTable:
    """
    Growable table of GlyphRecord, one per glyph id.

    Capacity starts at 1 and doubles whenever an index reaches it. Growth
    appends new records and never replaces existing ones, so references held
    to earlier records stay valid.
    """

    def __init__(self, capacity: int = 1):
        self._records: list[GlyphRecord] = []
        self._capacity = 0
        self._size = 0
        self._grow_to(max(capacity, 1))

    def _grow_to(self, capacity: int) -> None:
        start = len(self._records)
        self._records.extend(GlyphRecord(i) for i in range(start, capacity))
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def reserve(self, count: int) -> None:
        """Pre-size for a glyph count known up front."""
        if count > self._capacity:
            self._grow_to(count)
        self._size = max(self._size, count)

    def ensure(self, glyph_id: int) -> GlyphRecord:
        """Return the record for glyph_id, growing the table if needed."""
        if glyph_id < 0:
            raise IndexError(f"Negative glyph id: {glyph_id}")
        capacity = self._capacity
        while glyph_id >= capacity:
            capacity *= 2
        if capacity != self._capacity:
            self._grow_to(capacity)
        self._size = max(self._size, glyph_id + 1)
        return self._records[glyph_id]

    def reorder(self, records: list[GlyphRecord]) -> None:
        """
        Replace the order of the addressed records.

        After this the position of a record no longer equals its glyph id.
        """
        if sorted(map(id, records)) != sorted(map(id, self._records[: self._size])):
            raise ValueError("reorder() must receive exactly the table's records")
        self._records[: self._size] = records

    def __getitem__(self, index: int) -> GlyphRecord:
        if not 0 <= index < self._size:
            raise IndexError(f"Glyph table index out of range: {index}")
        return self._records[index]

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[GlyphRecord]:
        return iter(self._records[: self._size])
