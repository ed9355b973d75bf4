"""Tests for the CLI commands using Click's CliRunner."""

import textwrap
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from macrodoc.cli.commands import macrodoc

SOURCE = textwrap.dedent("""\
    ; Description: Load macros.
    ; Key Points: Register pairs only.
    IFNDEF LOAD

    ; LD_HL_A
    ; Loads HL from A.
    ; Parameters: none
    ; Usage:
    ;   LD_HL_A
    MACRO LD_HL_A
        ld l, a
        ld h, 0
    ENDM
""")


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a quiet config file."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"logging": {"level": "ERROR"}}))
    return path


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a directory of annotated macro sources."""
    src = tmp_path / "lib"
    src.mkdir()
    (src / "load.asm").write_text(SOURCE)
    (src / "macros.asm").write_text("; Usage: ALL\nMACRO ALL\nENDM\n")
    return src


class TestMacrodocGroup:
    """Tests for the main command group."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(macrodoc, ["--help"])
        assert result.exit_code == 0
        assert "Macro Documentation Generator" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(macrodoc, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestBuildCommand:
    """Tests for the 'build' command."""

    def test_build(
        self, runner: CliRunner, config_file: Path, sample_project: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            macrodoc,
            [
                "--config",
                str(config_file),
                "build",
                str(sample_project),
                "--exclude",
                "macros.asm",
                "--output-dir",
                str(out / "files"),
                "--combined-table",
                str(out / "all.md"),
                "--index-file",
                str(out / "index.html"),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Found 2 source files" in result.output
        assert (out / "files" / "load.md").exists()
        assert (out / "files" / "macros.md").exists()
        assert "# macros.asm" not in (out / "all.md").read_text()
        assert 'href="#load_asm-LD_HL_A"' in (out / "index.html").read_text()
        assert "1 files, 1 macros" in result.output

    def test_missing_input_dir(
        self, runner: CliRunner, config_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            macrodoc,
            ["--config", str(config_file), "build", str(tmp_path / "absent")],
        )
        assert result.exit_code != 0
        assert "Input directory not found" in result.output


class TestInspectCommand:
    """Tests for the 'inspect' command."""

    def test_yaml_output(
        self, runner: CliRunner, config_file: Path, sample_project: Path
    ) -> None:
        result = runner.invoke(
            macrodoc,
            ["--config", str(config_file), "inspect", str(sample_project / "load.asm")],
        )
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.output)
        assert data["name"] == "load.asm"
        assert data["header"]["Key Points"] == "Register pairs only."
        macro = data["macros"][0]
        assert macro["name"] == "LD_HL_A"
        assert macro["fields"] == {
            "Parameters": "none",
            "Usage": "LD_HL_A",
            "Notes": "Loads HL from A.",
        }

    def test_comments_output(
        self, runner: CliRunner, config_file: Path, sample_project: Path
    ) -> None:
        result = runner.invoke(
            macrodoc,
            [
                "--config",
                str(config_file),
                "inspect",
                str(sample_project / "load.asm"),
                "--format",
                "comments",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "; Description: Load macros." in result.output
        assert "; LD_HL_A\n; Loads HL from A.\n; Parameters: none\n; Usage: LD_HL_A\n" in (
            result.output
        )
        assert "MACRO LD_HL_A" in result.output

    def test_missing_file(self, runner: CliRunner, config_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            macrodoc,
            ["--config", str(config_file), "inspect", str(tmp_path / "nope.asm")],
        )
        assert result.exit_code != 0
