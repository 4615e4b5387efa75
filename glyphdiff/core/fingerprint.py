"""
Bitmap fingerprinting for exact-equality divergence detection.
"""

import hashlib
import re
import struct

from glyphdiff.core.backend import Bitmap

FINGERPRINT_LENGTH = 32

_FINGERPRINT_RE = re.compile(r"[0-9a-f]{32}")


def fingerprint(bitmap: Bitmap) -> str:
    """
    Compute the 128-bit fingerprint of a rendered bitmap.

    Dimensions are hashed along with the pixels so that, for example,
    a 2x3 and a 3x2 bitmap with the same bytes do not collide.

    Returns:
        32 lowercase hex characters
    """
    digest = hashlib.md5(struct.pack("<II", bitmap.width, bitmap.height))
    digest.update(bitmap.buffer)
    return digest.hexdigest()


def is_fingerprint(text: str) -> bool:
    """Check that text is a well-formed fingerprint."""
    return _FINGERPRINT_RE.fullmatch(text) is not None
