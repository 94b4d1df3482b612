"""Document format handlers for MText Bridge."""

from mtext_bridge.formats.base import FormatHandler, UnsupportedOperationError
from mtext_bridge.formats.html_handler import HTMLHandler
from mtext_bridge.formats.json_handler import JSONHandler
from mtext_bridge.formats.mtext_handler import MTextHandler

__all__ = [
    "FormatHandler",
    "UnsupportedOperationError",
    "HTMLHandler",
    "JSONHandler",
    "MTextHandler",
]

# Map file extensions to handlers
HANDLER_MAP: dict[str, type[FormatHandler]] = {
    ".html": HTMLHandler,
    ".htm": HTMLHandler,
    ".json": JSONHandler,
    ".mtext": MTextHandler,
    ".txt": MTextHandler,
}

SUPPORTED_EXTENSIONS = tuple(HANDLER_MAP.keys())

# Extensions the pipeline can take as input
INPUT_EXTENSIONS = (".html", ".htm", ".json")


def get_handler(extension: str) -> type[FormatHandler]:
    """Get the appropriate handler class for a file extension."""
    ext = extension.lower()
    if ext not in HANDLER_MAP:
        raise ValueError(
            f"Unsupported file format: {ext}. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return HANDLER_MAP[ext]
