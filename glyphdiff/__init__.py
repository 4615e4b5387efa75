"""Differential glyph rendering comparison between two FreeType builds."""

__version__ = "0.1.0"
