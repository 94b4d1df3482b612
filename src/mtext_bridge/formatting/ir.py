"""Intermediate Representation for MText-bound rich text.

This module defines the document model shared by the HTML parser and the
MText serializer. The model is a forest of DocumentNode values whose
formatting is fully resolved at parse time, so the serializer never has to
look at a node's ancestors.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Iterator, Optional


class ModelError(ValueError):
    """Raised when serialized model data cannot be turned into nodes."""

    pass


# =============================================================================
# Enumerated values
# =============================================================================

class NodeType:
    """Node type names understood by the serializer.

    Any other string is a generic container named after its source tag.
    """
    TEXT = "text"
    BR = "br"
    PARAGRAPH = "paragraph"
    OL = "ol"
    UL = "ul"
    LI = "li"

    LISTS = (OL, UL)


class Alignment:
    """Paragraph alignment values."""
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFIED = "justified"
    DISTRIBUTED = "distributed"

    ALL = (LEFT, RIGHT, CENTER, JUSTIFIED, DISTRIBUTED)


class StackDivider:
    """Divider glyphs for stacked fractions."""
    HORIZONTAL = "/"  # horizontal rule
    DIAGONAL = "#"  # diagonal rule
    NONE = "^"  # no visible rule (tolerance style)

    ALL = (HORIZONTAL, DIAGONAL, NONE)


# =============================================================================
# Node payloads
# =============================================================================

@dataclass(frozen=True)
class StackSpec:
    """A stacked fraction.

    Attributes:
        numerator: Text above the divider
        denominator: Text below the divider
        divider: One of the StackDivider glyphs
    """

    numerator: str
    denominator: str
    divider: str = StackDivider.NONE


@dataclass(frozen=True)
class ParagraphProperties:
    """Paragraph-level layout, all lengths in em units.

    Attributes:
        indent: First-line indent
        left: Left margin
        right: Right margin
        align: One of the Alignment values
        tabs: Tab stop positions
    """

    indent: Optional[float] = None
    left: Optional[float] = None
    right: Optional[float] = None
    align: Optional[str] = None
    tabs: list[float] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check if no property is set."""
        return (
            self.indent is None
            and self.left is None
            and self.right is None
            and self.align is None
            and not self.tabs
        )


# Character and layout fields carried by both TextFormat and DocumentNode
FORMAT_FIELDS: tuple[str, ...] = (
    "bold",
    "italic",
    "underline",
    "overline",
    "strikethrough",
    "subscript",
    "superscript",
    "color",
    "rgb_color",
    "font",
    "font_bold",
    "font_italic",
    "height",
    "width",
    "tracking",
    "slant",
)


@dataclass(frozen=True)
class TextFormat:
    """Formatting accumulated while walking down a markup tree.

    Only set (non-None) fields take part in a merge, so a child element's
    delta overrides its parent's context field by field.
    """

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    overline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    subscript: Optional[bool] = None
    superscript: Optional[bool] = None
    color: Optional[int] = None
    rgb_color: Optional[int] = None
    font: Optional[str] = None
    font_bold: Optional[bool] = None
    font_italic: Optional[bool] = None
    height: Optional[float] = None
    width: Optional[float] = None
    tracking: Optional[float] = None
    slant: Optional[float] = None

    def as_fields(self) -> dict:
        """Return the set fields as a keyword dict."""
        values = {}
        for name in FORMAT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                values[name] = value
        return values

    def merge(self, other: "TextFormat") -> "TextFormat":
        """Return a new format with other's set fields layered on top."""
        merged = self.as_fields()
        merged.update(other.as_fields())
        return TextFormat(**merged)

    @property
    def is_empty(self) -> bool:
        """Check if no field is set."""
        return not self.as_fields()


@dataclass(frozen=True)
class DocumentNode:
    """A node of the document forest.

    A node is exactly one of: a text leaf (``text`` set), a fraction leaf
    (``stack`` set) or a container (``children`` set). Formatting fields
    are already resolved against the node's ancestors.

    Attributes:
        type: A NodeType value or a lower-cased generic tag name
        text: Literal content of a text leaf
        children: Child nodes of a container
        stack: Fraction descriptor of a fraction leaf
        paragraph: Paragraph properties, only on paragraph nodes
    """

    type: str
    text: Optional[str] = None
    children: Optional[list["DocumentNode"]] = None

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    overline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    subscript: Optional[bool] = None
    superscript: Optional[bool] = None

    # ACI index (1-255) and packed 0xRRGGBB
    color: Optional[int] = None
    rgb_color: Optional[int] = None

    font: Optional[str] = None
    font_bold: Optional[bool] = None
    font_italic: Optional[bool] = None

    height: Optional[float] = None
    width: Optional[float] = None
    tracking: Optional[float] = None
    slant: Optional[float] = None

    stack: Optional[StackSpec] = None
    paragraph: Optional[ParagraphProperties] = None

    @property
    def is_text_leaf(self) -> bool:
        """Check if this node carries literal text."""
        return self.stack is None and self.text is not None and self.children is None

    @property
    def is_fraction(self) -> bool:
        """Check if this node is a stacked fraction."""
        return self.stack is not None

    @property
    def is_container(self) -> bool:
        """Check if this node holds child nodes."""
        return self.stack is None and self.children is not None

    @property
    def text_format(self) -> TextFormat:
        """Get this node's formatting fields as a TextFormat."""
        return TextFormat(**{name: getattr(self, name) for name in FORMAT_FIELDS})

    @property
    def plain_text(self) -> str:
        """Get the text content of this subtree without formatting."""
        return "".join(node.text for node in self.walk() if node.is_text_leaf)

    def walk(self) -> Iterator["DocumentNode"]:
        """Traverse the subtree depth-first, yielding self then children."""
        yield self
        for child in self.children or []:
            yield from child.walk()

    def __str__(self) -> str:
        return self.plain_text


# =============================================================================
# JSON interchange
# =============================================================================

# Python attribute -> editor model key
_JSON_KEYS = {
    "rgb_color": "rgbColor",
    "font_bold": "fontBold",
    "font_italic": "fontItalic",
}


def node_to_dict(node: DocumentNode) -> dict:
    """Convert a node to the editor's JSON model shape, omitting unset fields."""
    data: dict = {"type": node.type}
    if node.text is not None:
        data["text"] = node.text
    if node.children is not None:
        data["children"] = [node_to_dict(child) for child in node.children]
    for name in FORMAT_FIELDS:
        value = getattr(node, name)
        if value is not None:
            data[_JSON_KEYS.get(name, name)] = value
    if node.stack is not None:
        data["stack"] = {
            "numerator": node.stack.numerator,
            "denominator": node.stack.denominator,
            "divider": node.stack.divider,
        }
    if node.paragraph is not None:
        props = {}
        for name in ("indent", "left", "right", "align"):
            value = getattr(node.paragraph, name)
            if value is not None:
                props[name] = value
        if node.paragraph.tabs:
            props["tabs"] = list(node.paragraph.tabs)
        data["paragraph"] = props
    return data


def node_from_dict(data: dict) -> DocumentNode:
    """Build a node from the editor's JSON model shape.

    Unknown keys are ignored.

    Raises:
        ModelError: If the data is not an object, has no type or carries
            a field of the wrong type
    """
    if not isinstance(data, dict):
        raise ModelError(f"Expected a node object, got {type(data).__name__}")
    node_type = data.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise ModelError(f"Node is missing a type: {data!r}")

    kwargs: dict = {"type": node_type}
    if "text" in data:
        kwargs["text"] = str(data["text"])
    if "children" in data:
        children = data["children"]
        if not isinstance(children, list):
            raise ModelError(f"Children of a {node_type!r} node must be a list")
        kwargs["children"] = [node_from_dict(child) for child in children]
    for name in FORMAT_FIELDS:
        key = _JSON_KEYS.get(name, name)
        value = data.get(key)
        if value is None:
            continue
        if not _field_type_ok(name, value):
            raise ModelError(
                f"Invalid {key!r} on a {node_type!r} node: {value!r}"
            )
        kwargs[name] = value

    stack = data.get("stack")
    if stack is not None:
        try:
            kwargs["stack"] = StackSpec(
                numerator=str(stack["numerator"]),
                denominator=str(stack["denominator"]),
                divider=stack.get("divider") or StackDivider.NONE,
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ModelError(f"Invalid stack descriptor: {stack!r}") from e

    paragraph = data.get("paragraph")
    if paragraph is not None:
        kwargs["paragraph"] = _paragraph_from_dict(paragraph)
    return DocumentNode(**kwargs)


# Format fields grouped by the JSON value type they accept
_BOOL_FIELDS = frozenset(
    {
        "bold",
        "italic",
        "underline",
        "overline",
        "strikethrough",
        "subscript",
        "superscript",
        "font_bold",
        "font_italic",
    }
)
_INT_FIELDS = frozenset({"color", "rgb_color"})
_STR_FIELDS = frozenset({"font"})


def _is_number(value) -> bool:
    # bool is an int subclass; json also yields NaN and Infinity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _field_type_ok(name: str, value) -> bool:
    if name in _BOOL_FIELDS:
        return isinstance(value, bool)
    if name in _INT_FIELDS:
        return isinstance(value, int) and not isinstance(value, bool)
    if name in _STR_FIELDS:
        return isinstance(value, str)
    return _is_number(value)


def _paragraph_from_dict(paragraph) -> ParagraphProperties:
    """Build paragraph properties, rejecting mistyped values."""
    if not isinstance(paragraph, dict):
        raise ModelError(f"Invalid paragraph properties: {paragraph!r}")

    lengths = {}
    for name in ("indent", "left", "right"):
        value = paragraph.get(name)
        if value is not None and not _is_number(value):
            raise ModelError(f"Invalid paragraph {name}: {value!r}")
        lengths[name] = value

    align = paragraph.get("align")
    if align is not None and not isinstance(align, str):
        raise ModelError(f"Invalid paragraph align: {align!r}")

    tabs = paragraph.get("tabs")
    if tabs is None:
        tabs = []
    if not isinstance(tabs, list) or not all(_is_number(tab) for tab in tabs):
        raise ModelError(f"Tabs must be a list of numbers: {tabs!r}")

    return ParagraphProperties(align=align, tabs=list(tabs), **lengths)


def nodes_to_json(nodes: list[DocumentNode], indent: Optional[int] = 2) -> str:
    """Serialize a node forest to a JSON string."""
    return json.dumps(
        [node_to_dict(node) for node in nodes],
        indent=indent,
        ensure_ascii=False,
    )


def nodes_from_json(content: str) -> list[DocumentNode]:
    """Load a node forest from a JSON string.

    A single top-level object is accepted as a one-node forest.

    Raises:
        ModelError: If the content is not valid JSON or not a node forest
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ModelError(f"Invalid JSON model: {e}") from e
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ModelError("JSON model must be a list of nodes")
    return [node_from_dict(item) for item in data]
