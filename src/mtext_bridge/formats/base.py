"""Abstract base class for document format handlers."""

from abc import ABC, abstractmethod
from pathlib import Path

from mtext_bridge.formatting.ir import DocumentNode


class UnsupportedOperationError(Exception):
    """Raised when a handler cannot read or write its format."""

    pass


class FormatHandler(ABC):
    """Abstract base class for document format handlers.

    A handler reads a node forest from a file, writes one to a file, or
    both. The default implementations refuse, so each handler overrides
    only the directions its format supports.
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> tuple[str, ...]:
        """Return tuple of supported file extensions (e.g., ('.html',))."""
        ...

    def read(self, path: Path) -> list[DocumentNode]:
        """Read a node forest from a file.

        Args:
            path: Path to the input document

        Returns:
            Top-level nodes of the document
        """
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot read {path.suffix or path.name}"
        )

    def write(self, nodes: list[DocumentNode], path: Path) -> None:
        """Write a node forest to a file.

        Args:
            nodes: The document to write
            path: Path to write the output document
        """
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot write {path.suffix or path.name}"
        )
