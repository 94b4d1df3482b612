"""Tests for the CLI interface."""

import pytest
from pathlib import Path
from unittest.mock import patch, Mock

from typer.testing import CliRunner

from mtext_bridge.cli import app, generate_output_path
from mtext_bridge.formatting.ir import nodes_from_json


runner = CliRunner()


class TestGenerateOutputPath:
    """Tests for output path generation."""

    def test_mtext_extension(self):
        """Test the default output is a sibling .mtext file."""
        input_path = Path("/path/to/note.html")
        output = generate_output_path(input_path)

        assert output.name == "note.mtext"
        assert output.parent == input_path.parent

    def test_model_dump_suffix(self):
        """Test model dumps get the -model suffix."""
        output = generate_output_path(Path("/path/to/note.html"), dump_model=True)

        assert output.name == "note-model.json"

    def test_handles_spaces_in_filename(self):
        output = generate_output_path(Path("/path/to/my note.htm"))

        assert output.name == "my note.mtext"

    def test_custom_output_directory(self):
        """Test specifying custom output directory."""
        output_dir = Path("/custom/output")
        output = generate_output_path(Path("/path/to/note.html"), output_dir)

        assert output.parent == output_dir
        assert output.name == "note.mtext"


class TestCLI:
    """Tests for CLI commands."""

    def test_version_flag(self):
        """Test --version flag."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "MText Bridge" in result.stdout

    def test_help_flag(self):
        """Test --help flag."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "MText" in result.stdout

    def test_missing_file_error(self, tmp_path: Path):
        """Test error when file doesn't exist."""
        result = runner.invoke(app, [str(tmp_path / "nonexistent.html")])

        assert result.exit_code != 0

    def test_unsupported_format(self, tmp_path: Path):
        """Test unsupported input files fail."""
        unsupported = tmp_path / "file.xyz"
        unsupported.write_text("content")

        result = runner.invoke(app, [str(unsupported)])

        assert result.exit_code == 1
        assert "unsupported" in result.output.lower()

    def test_single_file(self, tmp_html_file: Path, sample_mtext: str):
        """Test converting a file writes a sibling .mtext file."""
        result = runner.invoke(app, [str(tmp_html_file)])

        assert result.exit_code == 0
        output = tmp_html_file.with_suffix(".mtext")
        assert output.read_text(encoding="utf-8") == sample_mtext

    def test_output_option(self, tmp_html_file: Path, tmp_path: Path):
        """Test --output picks the path and, by extension, the format."""
        output = tmp_path / "out" / "model.json"
        output.parent.mkdir()

        result = runner.invoke(app, [str(tmp_html_file), "-o", str(output)])

        assert result.exit_code == 0
        assert len(nodes_from_json(output.read_text(encoding="utf-8"))) == 3

    def test_stdout(self, tmp_html_file: Path, sample_mtext: str):
        """Test --stdout prints the MText string and writes nothing."""
        result = runner.invoke(app, [str(tmp_html_file), "--stdout"])

        assert result.exit_code == 0
        assert sample_mtext in result.stdout
        assert not tmp_html_file.with_suffix(".mtext").exists()

    def test_json_dump(self, tmp_html_file: Path):
        """Test --json writes the document model."""
        result = runner.invoke(app, [str(tmp_html_file), "--json"])

        assert result.exit_code == 0
        dump = tmp_html_file.parent / "note-model.json"
        assert nodes_from_json(dump.read_text(encoding="utf-8"))[0].type == "paragraph"

    def test_font_option(self, tmp_html_file: Path):
        """Test --font replaces the fallback family."""
        result = runner.invoke(app, [str(tmp_html_file), "--stdout", "--font", "Verdana"])

        assert result.exit_code == 0
        assert "{\\fVerdana|b1|i0;Title}" in result.stdout

    def test_invalid_model_fails(self, tmp_path: Path):
        """Test a broken model file exits with an error."""
        bad = tmp_path / "bad.json"
        bad.write_text("{", encoding="utf-8")

        result = runner.invoke(app, [str(bad)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_folder_processing(self, tmp_path: Path):
        """Test processing a folder of files."""
        (tmp_path / "one.html").write_text("<b>1</b>", encoding="utf-8")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "two.htm").write_text("<i>2</i>", encoding="utf-8")
        (tmp_path / "ignored.xyz").write_text("Ignored")

        result = runner.invoke(app, [str(tmp_path)])

        assert result.exit_code == 0
        assert (tmp_path / "one.mtext").read_text(encoding="utf-8") == (
            "{\\fArial|b1|i0;1}"
        )
        assert (nested / "two.mtext").exists()
        assert "2 succeeded, 0 failed" in result.output

    def test_folder_skips_model_dumps(self, tmp_path: Path):
        """Test that -model.json files are not treated as inputs."""
        (tmp_path / "note.html").write_text("<p>x</p>", encoding="utf-8")
        (tmp_path / "note-model.json").write_text("not a model", encoding="utf-8")

        result = runner.invoke(app, [str(tmp_path)])

        assert result.exit_code == 0
        assert "1 succeeded, 0 failed" in result.output

    def test_folder_reports_failures(self, tmp_path: Path):
        """Test one bad file fails the run."""
        (tmp_path / "good.html").write_text("<p>x</p>", encoding="utf-8")
        (tmp_path / "bad.json").write_text("{", encoding="utf-8")

        result = runner.invoke(app, [str(tmp_path)])

        assert result.exit_code == 1
        assert "1 succeeded, 1 failed" in result.output

    @patch("mtext_bridge.cli.MTextConverter")
    def test_font_passed_to_converter(self, mock_converter_class: Mock, tmp_html_file: Path):
        """Test --font reaches the converter's settings."""
        mock_converter_class.return_value = Mock()

        runner.invoke(app, [str(tmp_html_file), "--font", "Consolas"])

        settings = mock_converter_class.call_args[0][0]
        assert settings.default_font == "Consolas"
