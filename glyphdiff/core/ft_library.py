"""
FreeType shared-library backend.

Binds one FreeType build with ctypes so several builds can be loaded into
the same process. Struct layouts and enum values come from freetype-py.
"""

import ctypes
import os
from pathlib import Path

import freetype
from freetype.ft_structs import FT_FaceRec, FT_GlyphSlot

from glyphdiff.config.render import DEFAULT_DPI, FACE_INDEX
from glyphdiff.core.backend import Bitmap, FontHandle, RasterizationBackend
from glyphdiff.core.errors import BackendLoadError, FaceError, RenderError
from glyphdiff.utils.logging import logger

FT_Face = ctypes.POINTER(FT_FaceRec)
FT_Error = ctypes.c_int

# Symbol name -> (restype, argtypes)
REQUIRED_SYMBOLS = {
    "FT_Init_FreeType": (FT_Error, [ctypes.POINTER(ctypes.c_void_p)]),
    "FT_New_Face": (
        FT_Error,
        [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_long, ctypes.POINTER(FT_Face)],
    ),
    "FT_Set_Char_Size": (
        FT_Error,
        [FT_Face, ctypes.c_long, ctypes.c_long, ctypes.c_uint, ctypes.c_uint],
    ),
    "FT_Load_Glyph": (FT_Error, [FT_Face, ctypes.c_uint, ctypes.c_int32]),
    "FT_Render_Glyph": (FT_Error, [FT_GlyphSlot, ctypes.c_int]),
    "FT_Done_Face": (FT_Error, [FT_Face]),
    "FT_Done_FreeType": (FT_Error, [ctypes.c_void_p]),
}

DLOPEN_MODE = ctypes.RTLD_LOCAL | getattr(os, "RTLD_DEEPBIND", 0)

# Bits per pixel of the packed gray modes, most significant bits first
PACKED_GRAY_BITS = {
    freetype.FT_PIXEL_MODE_MONO: 1,
    freetype.FT_PIXEL_MODE_GRAY2: 2,
    freetype.FT_PIXEL_MODE_GRAY4: 4,
}


def _bitmap_rows(ft_bitmap, glyph_id: int) -> bytes:
    """
    Copy an FT_Bitmap into packed 8-bit grayscale rows.

    Handles negative pitch (bottom-up storage) and the 1, 2 and 4 bit
    gray modes embedded bitmap strikes keep under FT_LOAD_DEFAULT.

    Raises:
        RenderError: For color and LCD pixel modes
    """
    width, rows, pitch = ft_bitmap.width, ft_bitmap.rows, ft_bitmap.pitch
    if width == 0 or rows == 0:
        return b""

    stride = abs(pitch)
    raw = ctypes.string_at(ft_bitmap.buffer, stride * rows)
    lines = [raw[y * stride : (y + 1) * stride] for y in range(rows)]
    if pitch < 0:
        lines.reverse()

    mode = ft_bitmap.pixel_mode
    if mode == freetype.FT_PIXEL_MODE_GRAY:
        return b"".join(line[:width] for line in lines)

    bits = PACKED_GRAY_BITS.get(mode)
    if bits is None:
        raise RenderError(glyph_id, f"unsupported pixel mode {mode}")

    levels = (1 << bits) - 1
    gray = bytearray(width * rows)
    for y, line in enumerate(lines):
        for x in range(width):
            offset = x * bits
            value = (line[offset >> 3] >> (8 - bits - (offset & 7))) & levels
            gray[y * width + x] = value * 255 // levels
    return bytes(gray)


class FreeTypeLibraryBackend(RasterizationBackend):
    """One FreeType build loaded from a shared library path."""

    def __init__(self, library_path: Path):
        self.library_path = library_path
        self.name = library_path.name
        try:
            self._lib = ctypes.CDLL(str(library_path), mode=DLOPEN_MODE)
        except OSError as e:
            raise BackendLoadError(f"Cannot load {library_path}: {e}") from e

        for symbol, (restype, argtypes) in REQUIRED_SYMBOLS.items():
            try:
                func = getattr(self._lib, symbol)
            except AttributeError as e:
                raise BackendLoadError(
                    f"{library_path} is missing required symbol {symbol}"
                ) from e
            func.restype = restype
            func.argtypes = argtypes

        self._library = ctypes.c_void_p()

    def initialize(self) -> None:
        error = self._lib.FT_Init_FreeType(ctypes.byref(self._library))
        if error:
            raise BackendLoadError(
                f"FT_Init_FreeType failed for {self.name} (error {error})"
            )

    def open_font(
        self, font_path: Path, char_size: int, dpi: int = DEFAULT_DPI
    ) -> FontHandle:
        face = FT_Face()
        error = self._lib.FT_New_Face(
            self._library, os.fsencode(font_path), FACE_INDEX, ctypes.byref(face)
        )
        if error:
            raise FaceError(f"{self.name}: cannot open {font_path} (error {error})")

        error = self._lib.FT_Set_Char_Size(face, char_size * 64, 0, dpi, dpi)
        if error:
            self._lib.FT_Done_Face(face)
            raise FaceError(
                f"{self.name}: cannot set char size {char_size} (error {error})"
            )

        num_glyphs = face.contents.num_glyphs
        logger.debug(f"{self.name}: opened {font_path} with {num_glyphs} glyphs")
        return FontHandle(font_path, char_size, num_glyphs, face)

    def render(self, handle: FontHandle, glyph_id: int) -> Bitmap:
        face = handle.face
        error = self._lib.FT_Load_Glyph(face, glyph_id, freetype.FT_LOAD_DEFAULT)
        if error:
            raise RenderError(glyph_id, f"FT_Load_Glyph failed (error {error})")

        slot = face.contents.glyph
        error = self._lib.FT_Render_Glyph(slot, freetype.FT_RENDER_MODE_NORMAL)
        if error:
            raise RenderError(glyph_id, f"FT_Render_Glyph failed (error {error})")

        ft_bitmap = slot.contents.bitmap
        buffer = _bitmap_rows(ft_bitmap, glyph_id)
        return Bitmap(ft_bitmap.width, ft_bitmap.rows, buffer)

    def close_font(self, handle: FontHandle) -> None:
        error = self._lib.FT_Done_Face(handle.face)
        if error:
            logger.warning(f"{self.name}: FT_Done_Face failed (error {error})")
        handle.face = None

    def shutdown(self) -> None:
        error = self._lib.FT_Done_FreeType(self._library)
        if error:
            logger.warning(f"{self.name}: FT_Done_FreeType failed (error {error})")
        self._library = ctypes.c_void_p()
