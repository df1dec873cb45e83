"""Tests for the enumgen command line."""

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from enumgen import __version__
from enumgen.cli import app
from enumgen.generator import canonical_header

runner = CliRunner()

COLORS = """
//enum: RED=#FF0000 | GREEN=#00FF00 | BLUE
type Color string
"""


@pytest.fixture(autouse=True)
def in_tmp_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every command from an empty project directory."""
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield tmp_path
    root.handlers[:] = handlers
    root.setLevel(level)


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"enumgen version {__version__}" in result.output


class TestGenerate:
    def test_generates_in_source_directory(self, write_go, tmp_path: Path) -> None:
        write_go("colors.go", COLORS)

        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 0, result.output
        assert "Generated" in result.output
        assert "color_enum.go" in result.output
        assert result.output.rstrip().endswith("Enum generation completed!")
        assert canonical_header("colors", "Color") in (tmp_path / "color_enum.go").read_text()

    def test_second_run_reports_skip(self, write_go) -> None:
        write_go("colors.go", COLORS)
        runner.invoke(app, ["generate", "-i", "*.go"])

        result = runner.invoke(app, ["generate", "-i", "*.go"])

        assert result.exit_code == 0
        assert "Skipped" in result.output
        assert "already generated" in result.output

    def test_output_and_package_options(self, write_go, tmp_path: Path) -> None:
        write_go("colors.go", COLORS)
        (tmp_path / "gen").mkdir()

        result = runner.invoke(app, ["generate", "-i", "*.go", "-o", "gen", "-p", "paint"])

        assert result.exit_code == 0, result.output
        assert "package paint\n" in (tmp_path / "gen" / "color_enum.go").read_text()

    def test_config_file(self, write_go, tmp_path: Path) -> None:
        write_go("colors.go", COLORS)
        (tmp_path / "enumgen.toml").write_text('[enumgen]\ninput = "*.go"\npackage = "paint"\n')

        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 0, result.output
        assert "package paint\n" in (tmp_path / "color_enum.go").read_text()

    def test_option_overrides_config(self, write_go, tmp_path: Path) -> None:
        write_go("colors.go", COLORS)
        (tmp_path / "enumgen.toml").write_text('[enumgen]\ninput = "*.go"\npackage = "paint"\n')

        result = runner.invoke(app, ["generate", "--pkg", "ink"])

        assert result.exit_code == 0, result.output
        assert "package ink\n" in (tmp_path / "color_enum.go").read_text()

    def test_content_guard(self, write_go, tmp_path: Path) -> None:
        write_go("colors.go", COLORS)
        runner.invoke(app, ["generate", "-i", "*.go"])
        companion = tmp_path / "color_enum.go"
        companion.write_text(companion.read_text() + "// extra\n")

        result = runner.invoke(app, ["generate", "-i", "*.go", "--guard", "content"])

        assert result.exit_code == 0, result.output
        assert "// extra" not in companion.read_text()

    def test_strict_mode(self, write_go) -> None:
        write_go("dup.go", "//enum: A | A\ntype Dup int\n")

        assert runner.invoke(app, ["generate", "-i", "*.go"]).exit_code == 0

        result = runner.invoke(app, ["generate", "-i", "*.go", "--strict"])
        assert result.exit_code == 1
        assert "Error parsing files" in result.output
        assert "duplicate member names" in result.output

    def test_strict_mode_prints_warnings(self, write_go, tmp_path: Path) -> None:
        write_go("levels.go", "//enum: low | High\ntype Level int\n")

        result = runner.invoke(app, ["generate", "-i", "*.go", "--strict"])

        assert result.exit_code == 0, result.output
        assert "Warning Enum 'Level' member 'low' is not exported" in result.output
        assert (tmp_path / "level_enum.go").exists()

    def test_no_warnings_without_strict(self, write_go) -> None:
        write_go("levels.go", "//enum: low | High\ntype Level int\n")
        result = runner.invoke(app, ["generate", "-i", "*.go"])
        assert result.exit_code == 0, result.output
        assert "Warning" not in result.output

    def test_config_in_subdirectory(self, write_go, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        write_go("sub/colors.go", COLORS)
        write_go("other.go", "//enum: X\ntype Other int\n")
        (tmp_path / "sub" / "enumgen.toml").write_text('[enumgen]\ninput = "*.go"\n')

        result = runner.invoke(app, ["generate", "--config", "sub/enumgen.toml"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "sub" / "color_enum.go").exists()
        assert not (tmp_path / "other_enum.go").exists()


class TestGenerateErrors:
    def test_no_files(self) -> None:
        result = runner.invoke(app, ["generate", "-i", "*.go"])
        assert result.exit_code == 1
        assert "Error finding files: no files match '*.go'" in result.output

    def test_cannot_infer_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("nothing\n")
        result = runner.invoke(app, ["generate", "-i", "*.txt"])
        assert result.exit_code == 1
        assert "Error inferring defaults" in result.output

    def test_malformed_declaration(self, write_go, tmp_path: Path) -> None:
        write_go("a.go", COLORS)
        write_go("b.go", "//enum: A\ntype (\n\tX int\n\tY int\n)\n")

        result = runner.invoke(app, ["generate", "-i", "*.go"])

        assert result.exit_code == 1
        assert "Error parsing files" in result.output
        assert "exactly one type specification" in result.output
        assert not (tmp_path / "color_enum.go").exists()

    def test_unsupported_type(self, write_go) -> None:
        write_go("p.go", "//enum: A\ntype P struct{}\n")
        result = runner.invoke(app, ["generate", "-i", "*.go"])
        assert result.exit_code == 1
        assert "unsupported base type" in result.output

    def test_missing_output_directory(self, write_go) -> None:
        write_go("colors.go", COLORS)
        result = runner.invoke(app, ["generate", "-i", "*.go", "-o", "missing"])
        assert result.exit_code == 1
        assert "Error generating file for Color" in result.output

    def test_bad_config(self, tmp_path: Path) -> None:
        (tmp_path / "enumgen.toml").write_text('[enumgen]\nguard = "mtime"\n')
        result = runner.invoke(app, ["generate"])
        assert result.exit_code == 1
        assert "Error loading configuration" in result.output


class TestScan:
    def test_lists_enums(self, write_go) -> None:
        write_go("colors.go", COLORS)
        write_go("status.go", "//enum: Active | Pending=5\ntype Status int\n")

        result = runner.invoke(app, ["scan", "-i", "*.go"])

        assert result.exit_code == 0, result.output
        assert "Color" in result.output
        assert "Status" in result.output
        assert "Found 2 enum(s) in 2 file(s)." in result.output

    def test_writes_nothing(self, write_go, tmp_path: Path) -> None:
        write_go("colors.go", COLORS)
        runner.invoke(app, ["scan"])
        assert not (tmp_path / "color_enum.go").exists()

    def test_no_directives(self, write_go) -> None:
        write_go("plain.go", "type Plain int\n")
        result = runner.invoke(app, ["scan", "-i", "*.go"])
        assert result.exit_code == 0
        assert "No enum directives found." in result.output

    def test_parse_error(self, write_go) -> None:
        write_go("bad.go", '//enum: A\ntype S string\nvar s = "oops\n')
        result = runner.invoke(app, ["scan", "-i", "*.go"])
        assert result.exit_code == 1
        assert "Error parsing files" in result.output

    def test_strict_scan_prints_warnings(self, write_go) -> None:
        write_go("levels.go", "//enum: low | High\ntype Level int\n")
        (Path.cwd() / "enumgen.toml").write_text("[enumgen]\nstrict = true\n")

        result = runner.invoke(app, ["scan", "-i", "*.go"])

        assert result.exit_code == 0, result.output
        assert "member 'low' is not exported" in result.output
        assert "Found 1 enum(s) in 1 file(s)." in result.output
