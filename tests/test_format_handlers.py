"""Tests for format handlers."""

import pytest
from pathlib import Path

from mtext_bridge.config import Settings
from mtext_bridge.formats import (
    HANDLER_MAP,
    INPUT_EXTENSIONS,
    HTMLHandler,
    JSONHandler,
    MTextHandler,
    UnsupportedOperationError,
    get_handler,
)
from mtext_bridge.formatting.ir import DocumentNode
from mtext_bridge.formatting.parser import HtmlParser
from mtext_bridge.formatting.serializer import MTextSerializer


class TestGetHandler:
    """Tests for handler lookup."""

    def test_known_extensions(self):
        """Test each extension maps to its handler."""
        assert get_handler(".html") is HTMLHandler
        assert get_handler(".htm") is HTMLHandler
        assert get_handler(".json") is JSONHandler
        assert get_handler(".mtext") is MTextHandler
        assert get_handler(".txt") is MTextHandler

    def test_case_insensitive(self):
        assert get_handler(".HTML") is HTMLHandler

    def test_unsupported_extension(self):
        """Test unknown extensions raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported file format"):
            get_handler(".docx")

    def test_inputs_are_readable(self):
        """Test every input extension has a handler."""
        for ext in INPUT_EXTENSIONS:
            assert ext in HANDLER_MAP

    def test_handlers_declare_their_extensions(self):
        for ext, handler_class in HANDLER_MAP.items():
            assert ext in handler_class().supported_extensions


class TestHTMLHandler:
    """Tests for the HTML handler."""

    def test_read(self, tmp_html_file: Path, settings: Settings):
        """Test reading parses the markup."""
        handler = HTMLHandler(HtmlParser(settings))
        nodes = handler.read(tmp_html_file)

        assert [node.type for node in nodes] == ["paragraph", "paragraph", "ul"]

    def test_write_unsupported(self, tmp_path: Path):
        """Test HTML is never written."""
        with pytest.raises(UnsupportedOperationError):
            HTMLHandler().write([], tmp_path / "out.html")


class TestJSONHandler:
    """Tests for the JSON model handler."""

    def test_write_then_read(self, tmp_path: Path, sample_nodes):
        """Test a dumped forest reads back equal."""
        path = tmp_path / "model.json"
        handler = JSONHandler()
        handler.write(sample_nodes, path)

        assert path.read_text(encoding="utf-8").startswith("[")
        assert handler.read(path) == sample_nodes


class TestMTextHandler:
    """Tests for the MText output handler."""

    def test_write(self, tmp_path: Path, settings: Settings, sample_nodes):
        """Test the file holds exactly the serialized string."""
        path = tmp_path / "out.mtext"
        MTextHandler(MTextSerializer(settings)).write(sample_nodes, path)

        assert path.read_text(encoding="utf-8") == (
            "\\pqr;Total {\\c16711680;\\fArial|b1|i0;42}\\P\\P1. a\\P2. b"
        )

    def test_uses_serializer_font(self, tmp_path: Path, settings: Settings):
        """Test the injected serializer's settings apply."""
        custom = settings.model_copy(update={"default_font": "Verdana"})
        path = tmp_path / "out.txt"
        MTextHandler(MTextSerializer(custom)).write(
            [DocumentNode(type="text", text="x", italic=True)], path
        )

        assert path.read_text(encoding="utf-8") == "{\\fVerdana|b0|i1;x}"

    def test_read_unsupported(self, tmp_path: Path):
        """Test MText cannot be parsed back."""
        path = tmp_path / "in.mtext"
        path.write_text("\\P", encoding="utf-8")

        with pytest.raises(UnsupportedOperationError):
            MTextHandler().read(path)
