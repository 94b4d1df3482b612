"""MText output handler."""

from pathlib import Path
from typing import Optional

from mtext_bridge.formats.base import FormatHandler
from mtext_bridge.formatting.ir import DocumentNode
from mtext_bridge.formatting.serializer import MTextSerializer


class MTextHandler(FormatHandler):
    """Handler for MText control-code files (.mtext, .txt).

    Write-only: MText is the output side of the pipeline.
    """

    def __init__(self, serializer: Optional[MTextSerializer] = None) -> None:
        self.serializer = serializer or MTextSerializer()

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".mtext", ".txt")

    def write(self, nodes: list[DocumentNode], path: Path) -> None:
        """Write the serialized MText string (no trailing newline)."""
        path.write_text(self.serializer.serialize(nodes), encoding="utf-8")
