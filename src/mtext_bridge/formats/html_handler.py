"""HTML file handler."""

from pathlib import Path
from typing import Optional

from mtext_bridge.formats.base import FormatHandler
from mtext_bridge.formatting.ir import DocumentNode
from mtext_bridge.formatting.parser import HtmlParser


class HTMLHandler(FormatHandler):
    """Handler for editor HTML (.html, .htm) files.

    Read-only: the HTML subset is parsed into the document model with
    HtmlParser.
    """

    def __init__(self, parser: Optional[HtmlParser] = None) -> None:
        self.parser = parser or HtmlParser()

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".html", ".htm")

    def read(self, path: Path) -> list[DocumentNode]:
        """Parse an HTML file into nodes."""
        markup = path.read_text(encoding="utf-8", errors="replace")
        return self.parser.parse(markup)
