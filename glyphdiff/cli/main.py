"""
Main CLI entry point for glyphdiff.
"""

import sys
from pathlib import Path

import click

from glyphdiff import __version__
from glyphdiff.config.paths import IMAGES_DIR, REPORT_PATH
from glyphdiff.config.render import DEFAULT_DPI
from glyphdiff.core.errors import GlyphDiffError
from glyphdiff.utils.logging import logger, set_verbose

font_argument = click.argument(
    "font", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
size_argument = click.argument("size", type=click.IntRange(min=1))
dpi_option = click.option(
    "--dpi",
    type=click.IntRange(min=1),
    default=DEFAULT_DPI,
    show_default=True,
    help="Horizontal and vertical rendering resolution.",
)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """Differential glyph rendering comparison between two FreeType builds."""
    set_verbose(verbose)


@cli.command()
@click.argument("base")
@click.argument("test")
@size_argument
@font_argument
@click.option(
    "--images-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=IMAGES_DIR,
    show_default=True,
    help="Directory for captured glyph images.",
)
@click.option(
    "--output",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=REPORT_PATH,
    show_default=True,
    help="HTML report path.",
)
@dpi_option
@click.option(
    "--legacy-capture",
    is_flag=True,
    help="Capture base images with the test backend (historical behaviour).",
)
def compare(base, test, size, font, images_dir, report_path, dpi, legacy_capture):
    """Compare BASE and TEST backends on every glyph of FONT at SIZE points.

    BASE and TEST are FreeType shared libraries or Python backend files
    (backend.py or backend.py:factory).
    """
    from glyphdiff.config.render import RunConfig
    from glyphdiff.pipeline.runner import run_comparison

    config = RunConfig(
        base_backend=base,
        test_backend=test,
        char_size=size,
        font_path=font,
        images_dir=images_dir,
        report_path=report_path,
        dpi=dpi,
        capture_base_with_test=legacy_capture,
    )
    try:
        result = run_comparison(config)
    except GlyphDiffError as e:
        logger.error(str(e))
        sys.exit(1)

    click.echo(
        f"{len(result.divergent)} divergent glyphs, report: {result.report_path}"
    )


@cli.command("hash")
@click.argument("backend")
@size_argument
@font_argument
@dpi_option
def hash_glyphs(backend, size, font, dpi):
    """Print the fingerprint of every glyph of FONT rendered by BACKEND."""
    from glyphdiff.pipeline.runner import collect_fingerprints

    try:
        table = collect_fingerprints(backend, font, size, dpi)
    except GlyphDiffError as e:
        logger.error(str(e))
        sys.exit(1)

    for record in table:
        click.echo(f"{record.glyph_id}\t{record.base_fingerprint or '-'}")


if __name__ == "__main__":
    cli()
