"""Pytest fixtures for MText Bridge tests."""

import pytest
from pathlib import Path

from mtext_bridge.config import Settings
from mtext_bridge.formatting.ir import DocumentNode, ParagraphProperties


@pytest.fixture
def settings() -> Settings:
    """Settings with the documented defaults, isolated from the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def sample_html() -> str:
    """Sample editor HTML covering paragraphs, inline formatting and lists."""
    return (
        '<p style="text-align: center;"><strong>Title</strong></p>'
        '<p>Plain <em>and</em> <span style="text-decoration: underline;">under</span></p>'
        "<ul><li>one</li><li>two</li></ul>"
    )


@pytest.fixture
def sample_mtext() -> str:
    """MText expected for sample_html."""
    return (
        "\\pqc;{\\fArial|b1|i0;Title}\\P"
        "\\pql;Plain {\\fArial|b0|i1;and} {\\Lunder}\\P"
        "\\P* one\\P* two"
    )


@pytest.fixture
def sample_nodes() -> list[DocumentNode]:
    """Hand-built node forest, independent of the parser."""
    return [
        DocumentNode(
            type="paragraph",
            paragraph=ParagraphProperties(align="right"),
            children=[
                DocumentNode(type="text", text="Total "),
                DocumentNode(type="text", text="42", bold=True, rgb_color=0xFF0000),
            ],
        ),
        DocumentNode(
            type="ol",
            children=[
                DocumentNode(type="li", children=[DocumentNode(type="text", text="a")]),
                DocumentNode(type="li", children=[DocumentNode(type="text", text="b")]),
            ],
        ),
    ]


@pytest.fixture
def tmp_html_file(tmp_path: Path, sample_html: str) -> Path:
    """Create a temporary HTML file for testing."""
    file_path = tmp_path / "note.html"
    file_path.write_text(sample_html, encoding="utf-8")
    return file_path
