"""Tests for the command line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from glyphdiff import __version__
from glyphdiff.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def backends(plugin_backend, scenario_glyphs):
    base_glyphs, test_glyphs = scenario_glyphs
    return plugin_backend(base_glyphs, name="base"), plugin_backend(
        test_glyphs, name="test"
    )


def test_version(runner):
    """Test --version prints the package version."""
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_compare_usage_error(runner):
    """Test missing arguments exit non-zero with usage."""
    result = runner.invoke(cli, ["compare", "base.so", "test.so"])
    assert result.exit_code == 2
    assert "Usage:" in result.output


def test_compare_rejects_bad_size(runner, synthetic_font):
    """Test a non-positive character size is a usage error."""
    result = runner.invoke(cli, ["compare", "a.so", "b.so", "0", str(synthetic_font)])
    assert result.exit_code == 2


def test_compare_writes_report(runner, tmp_path, backends, synthetic_font):
    """Test a full run writes images and the report in the working directory."""
    base, test = backends
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["compare", base, test, "12", str(synthetic_font)])

        assert result.exit_code == 0, result.output
        assert "2 divergent glyphs" in result.output
        report = Path("index.html").read_text()
        assert report.count("<tr><td>") == 2
        assert sorted(p.name for p in Path("images").iterdir()) == [
            "base_1.png",
            "test_1.png",
            "test_3.png",
        ]


def test_compare_options(runner, tmp_path, backends, synthetic_font):
    """Test output locations and legacy capture are configurable."""
    base, test = backends
    output = tmp_path / "out" / "report.html"
    output.parent.mkdir()
    images = tmp_path / "out" / "glyphs"

    result = runner.invoke(
        cli,
        [
            "compare",
            base,
            test,
            "12",
            str(synthetic_font),
            "--output",
            str(output),
            "--images-dir",
            str(images),
            "--legacy-capture",
        ],
    )

    assert result.exit_code == 0, result.output
    assert output.exists()
    assert (images / "base_1.png").read_bytes() == (images / "test_1.png").read_bytes()


def test_compare_missing_backend_is_fatal(runner, tmp_path, backends, synthetic_font):
    """Test an unloadable backend exits 1 without a report."""
    base, _ = backends
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(
            cli, ["compare", base, "missing.py", "12", str(synthetic_font)]
        )
        assert result.exit_code == 1
        assert not Path("index.html").exists()


def test_hash_prints_fingerprints(runner, backends, synthetic_font):
    """Test the hash command prints one fingerprint per glyph."""
    _, test = backends
    result = runner.invoke(cli, ["hash", test, "12", str(synthetic_font)])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert len(lines) == 4
    ids = [line.split("\t")[0] for line in lines]
    assert ids == ["0", "1", "2", "3"]
    assert all(len(line.split("\t")[1]) == 32 for line in lines)


def test_compare_failing_plugin_factory_is_fatal(
    runner, tmp_path, backends, synthetic_font
):
    """Test a backend factory that raises exits 1 instead of crashing."""
    base, _ = backends
    broken = tmp_path / "broken_backend.py"
    broken.write_text("def create_backend():\n    raise OSError('no device')\n")

    result = runner.invoke(cli, ["compare", base, str(broken), "12", str(synthetic_font)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
