"""
Filesystem path constants for comparison runs.

Outputs are written relative to the working directory.
"""

from pathlib import Path

IMAGES_DIR = Path("images")
REPORT_PATH = Path("index.html")

# Image artifact naming: <tag>_<glyph id>.png
IMAGE_SUFFIX = ".png"
