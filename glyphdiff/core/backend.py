"""
Rasterization backend interface and loading.

A backend is one implementation of the glyph rasterization capability set.
Two backends (base and test) are loaded side by side and must not share
mutable state.
"""

import importlib.util
import itertools
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from glyphdiff.config.render import DEFAULT_DPI
from glyphdiff.core.errors import BackendLoadError
from glyphdiff.utils.logging import logger

# Default factory looked up in Python backend plugin files
PLUGIN_FACTORY = "create_backend"

_plugin_ids = itertools.count()


@dataclass(frozen=True)
class Bitmap:
    """
    Rendered glyph bitmap.

    buffer is row-major 8-bit grayscale with exactly width bytes per row.
    """

    width: int
    height: int
    buffer: bytes = b""

    @property
    def is_empty(self) -> bool:
        """Whitespace and undefined glyphs render with no pixels."""
        return self.width == 0 or self.height == 0


@dataclass
class FontHandle:
    """An opened, sized font face owned by one backend."""

    font_path: Path
    char_size: int
    num_glyphs: int
    face: Any = None


class RasterizationBackend(ABC):
    """Capability set every backend build must expose."""

    name: str = "backend"

    @abstractmethod
    def initialize(self) -> None:
        """Initialize the underlying library."""

    @abstractmethod
    def open_font(
        self, font_path: Path, char_size: int, dpi: int = DEFAULT_DPI
    ) -> FontHandle:
        """Open face 0 of a font and set its character size in points."""

    @abstractmethod
    def render(self, handle: FontHandle, glyph_id: int) -> Bitmap:
        """Load and rasterize one glyph. Raises RenderError on failure."""

    @abstractmethod
    def close_font(self, handle: FontHandle) -> None:
        """Release an opened face."""

    @abstractmethod
    def shutdown(self) -> None:
        """Release the underlying library."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def _split_plugin_spec(path: str) -> tuple[Path, str]:
    """Split 'file.py:factory' into a file path and factory name."""
    file_part, sep, factory = path.rpartition(":")
    if sep and file_part.endswith(".py") and factory.isidentifier():
        return Path(file_part), factory
    return Path(path), PLUGIN_FACTORY


def _is_plugin(path: str) -> bool:
    return _split_plugin_spec(path)[0].suffix == ".py"


def load_plugin_backend(path: str) -> RasterizationBackend:
    """
    Load a backend from a Python file.

    The file is executed as a fresh module on every call so two loads
    never share module-level state.

    Args:
        path: "backend.py" or "backend.py:factory"

    Returns:
        Backend returned by the factory

    Raises:
        BackendLoadError: If the file cannot be executed or has no factory
    """
    file_path, factory_name = _split_plugin_spec(path)
    if not file_path.is_file():
        raise BackendLoadError(f"Backend plugin not found: {file_path}")

    module_name = f"glyphdiff_backend_{next(_plugin_ids)}"
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise BackendLoadError(f"Cannot import backend plugin: {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise BackendLoadError(f"Failed to import {file_path}: {e}") from e

    factory = getattr(module, factory_name, None)
    if not callable(factory):
        raise BackendLoadError(f"{file_path} does not define {factory_name}()")

    try:
        backend = factory()
    except Exception as e:
        raise BackendLoadError(f"{file_path}:{factory_name}() failed: {e}") from e

    if not isinstance(backend, RasterizationBackend):
        raise BackendLoadError(
            f"{file_path}:{factory_name}() returned {type(backend).__name__}, "
            "not a RasterizationBackend"
        )
    return backend


def load_backend(path: str) -> RasterizationBackend:
    """
    Resolve a backend implementation from an artifact path.

    Python files are loaded as plugins; anything else is treated as a
    FreeType shared library.

    Raises:
        BackendLoadError: If the artifact cannot be loaded
    """
    if _is_plugin(path):
        backend = load_plugin_backend(path)
    else:
        from glyphdiff.core.ft_library import FreeTypeLibraryBackend

        backend = FreeTypeLibraryBackend(Path(path))

    logger.debug(f"Loaded backend {backend!r} from {path}")
    return backend


@contextmanager
def loaded_backend(path: str) -> Iterator[RasterizationBackend]:
    """
    Context manager that loads and initializes a backend.

    shutdown() runs exactly once if initialize() succeeded, on every exit path.
    """
    backend = load_backend(path)
    backend.initialize()
    try:
        yield backend
    finally:
        backend.shutdown()


@contextmanager
def opened_font(
    backend: RasterizationBackend,
    font_path: Path,
    char_size: int,
    dpi: int = DEFAULT_DPI,
) -> Iterator[FontHandle]:
    """Context manager for an opened face with guaranteed close."""
    handle = backend.open_font(font_path, char_size, dpi)
    try:
        yield handle
    finally:
        backend.close_font(handle)
