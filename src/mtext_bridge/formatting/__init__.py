"""Document model, HTML parsing and MText serialization."""

from mtext_bridge.formatting.ir import (
    NodeType,
    Alignment,
    StackDivider,
    StackSpec,
    ParagraphProperties,
    TextFormat,
    DocumentNode,
    ModelError,
    node_to_dict,
    node_from_dict,
    nodes_to_json,
    nodes_from_json,
)
from mtext_bridge.formatting.parser import HtmlParser, parse_html
from mtext_bridge.formatting.serializer import MTextSerializer, ListContext, to_mtext

__all__ = [
    "NodeType",
    "Alignment",
    "StackDivider",
    "StackSpec",
    "ParagraphProperties",
    "TextFormat",
    "DocumentNode",
    "ModelError",
    "node_to_dict",
    "node_from_dict",
    "nodes_to_json",
    "nodes_from_json",
    "HtmlParser",
    "parse_html",
    "MTextSerializer",
    "ListContext",
    "to_mtext",
]
