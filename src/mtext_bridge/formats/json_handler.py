"""JSON model dump handler."""

from pathlib import Path

from mtext_bridge.formats.base import FormatHandler
from mtext_bridge.formatting.ir import DocumentNode, nodes_from_json, nodes_to_json


class JSONHandler(FormatHandler):
    """Handler for JSON dumps of the document model (.json).

    Uses the editor's camelCase keys, so node trees built by other tools
    can be serialized directly.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".json",)

    def read(self, path: Path) -> list[DocumentNode]:
        """Load a node forest from a JSON file."""
        return nodes_from_json(path.read_text(encoding="utf-8"))

    def write(self, nodes: list[DocumentNode], path: Path) -> None:
        """Dump a node forest as indented JSON."""
        path.write_text(nodes_to_json(nodes) + "\n", encoding="utf-8")
