"""
Shared logging configuration for glyphdiff.

Per-glyph render failures are logged as warnings, fatal errors as errors
just before the CLI exits.
"""

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger("glyphdiff")


def set_verbose(verbose: bool) -> None:
    """Switch glyphdiff logging between INFO and DEBUG."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
