"""Conversion pipeline for MText Bridge."""

from mtext_bridge.core.converter import ConversionError, MTextConverter, convert_html

__all__ = [
    "ConversionError",
    "MTextConverter",
    "convert_html",
]
