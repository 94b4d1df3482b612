"""Main conversion orchestrator."""

import logging
from pathlib import Path
from typing import Optional

from mtext_bridge.config import Settings, get_settings
from mtext_bridge.formats import (
    HTMLHandler,
    INPUT_EXTENSIONS,
    MTextHandler,
    FormatHandler,
    UnsupportedOperationError,
    get_handler,
)
from mtext_bridge.formatting.ir import DocumentNode, ModelError
from mtext_bridge.formatting.parser import HtmlParser
from mtext_bridge.formatting.serializer import MTextSerializer

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Error during conversion."""

    pass


class MTextConverter:
    """Orchestrates the HTML -> model -> MText pipeline.

    Pipeline:
    1. Read input (HTML markup or a JSON model dump) into a node forest
    2. Serialize the forest to MText, or dump it as JSON
    3. Write to the output file, format chosen by its extension

    Parser and serializer are independent; they share only the model.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the converter.

        Args:
            settings: Configuration for parser and serializer (global if omitted)
        """
        self.settings = settings or get_settings()
        self.parser = HtmlParser(self.settings)
        self.serializer = MTextSerializer(self.settings)

    def convert(self, markup: str) -> str:
        """Convert editor HTML to an MText string."""
        return self.serializer.serialize(self.parser.parse(markup))

    def convert_nodes(self, nodes: list[DocumentNode]) -> str:
        """Convert an already built node forest to an MText string."""
        return self.serializer.serialize(nodes)

    def read_file(self, input_path: Path) -> list[DocumentNode]:
        """Read a node forest from an HTML or JSON file.

        Raises:
            ConversionError: If the file is missing, unsupported or invalid
        """
        if not input_path.exists():
            raise ConversionError(f"Input file not found: {input_path}")

        ext = input_path.suffix.lower()
        if ext not in INPUT_EXTENSIONS:
            raise ConversionError(
                f"Unsupported input format: {ext}. "
                f"Supported: {', '.join(INPUT_EXTENSIONS)}"
            )

        handler = self._make_handler(ext)
        try:
            nodes = handler.read(input_path)
        except (ModelError, UnsupportedOperationError, UnicodeDecodeError, OSError) as e:
            raise ConversionError(f"Could not read {input_path}: {e}") from e

        logger.debug("Read %d top-level node(s) from %s", len(nodes), input_path)
        return nodes

    def write_file(self, nodes: list[DocumentNode], output_path: Path) -> None:
        """Write a node forest as MText or JSON, by output extension.

        Raises:
            ConversionError: If the output format cannot be written
        """
        try:
            handler = self._make_handler(output_path.suffix.lower())
            handler.write(nodes, output_path)
        except (ValueError, UnsupportedOperationError, OSError) as e:
            raise ConversionError(f"Could not write {output_path}: {e}") from e

        logger.debug("Wrote %s", output_path)

    def convert_file(
        self,
        input_path: Path,
        output_path: Path,
    ) -> list[DocumentNode]:
        """Convert a document file.

        Args:
            input_path: Path to an HTML or JSON model file
            output_path: Path for the output (.mtext/.txt or .json)

        Returns:
            The node forest that was written

        Raises:
            ConversionError: If conversion fails
        """
        nodes = self.read_file(input_path)
        self.write_file(nodes, output_path)
        logger.info("Converted %s -> %s", input_path, output_path)
        return nodes

    def _make_handler(self, ext: str) -> FormatHandler:
        """Create a handler that shares this converter's parser/serializer."""
        handler_class = get_handler(ext)
        if handler_class is HTMLHandler:
            return HTMLHandler(self.parser)
        if handler_class is MTextHandler:
            return MTextHandler(self.serializer)
        return handler_class()


def convert_html(markup: str, settings: Optional[Settings] = None) -> str:
    """Convert editor HTML to an MText string."""
    return MTextConverter(settings).convert(markup)
