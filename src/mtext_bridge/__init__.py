"""MText Bridge - rich text to MText control-code conversion."""

__version__ = "0.1.0"

from mtext_bridge.formatting import DocumentNode, parse_html, to_mtext
from mtext_bridge.core.converter import convert_html

__all__ = [
    "__version__",
    "DocumentNode",
    "parse_html",
    "to_mtext",
    "convert_html",
]
