"""MText serializer for rendering IR as control-code text.

Formatting spans use the brace-grouped form: every formatted text leaf
becomes ``{<codes><text>}`` and no closing codes are ever emitted, so a
span ends exactly where its group closes.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from mtext_bridge.config import Settings, get_settings
from mtext_bridge.formatting.ir import (
    Alignment,
    DocumentNode,
    NodeType,
    ParagraphProperties,
    StackDivider,
)


@dataclass
class ListContext:
    """List state threaded through one serialization call.

    Attributes:
        kind: NodeType.OL or NodeType.UL of the innermost list
        depth: Nesting depth, 1 for a top-level list
        counters: Next ordered-list number per depth (index = depth - 1)
    """

    kind: str
    depth: int
    counters: list[int] = field(default_factory=list)

    def enter(self, kind: str) -> "ListContext":
        """Return the context for a list container nested in this one."""
        return ListContext.open(kind, parent=self)

    @classmethod
    def open(cls, kind: str, parent: Optional["ListContext"] = None) -> "ListContext":
        """Create the context for a list container.

        The counter stack is copied from the parent, so items of this
        container share one stack while siblings of the container do not.
        """
        depth = (parent.depth if parent else 0) + 1
        counters = list(parent.counters) if parent else []
        if kind == NodeType.OL:
            while len(counters) < depth:
                counters.append(1)
        return cls(kind=kind, depth=depth, counters=counters)

    def next_marker(self) -> str:
        """Return the bullet or number for the next item."""
        if self.kind != NodeType.OL:
            return "* "
        index = self.depth - 1
        number = self.counters[index]
        self.counters[index] = number + 1
        return f"{number}. "


def format_number(value: float) -> str:
    """Render a number in its shortest form (10.0 -> "10")."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class MTextSerializer:
    """Serialize a DocumentNode forest to an MText string."""

    PARAGRAPH_BREAK = "\\P"

    ALIGN_CODES = {
        Alignment.LEFT: "ql",
        Alignment.RIGHT: "qr",
        Alignment.CENTER: "qc",
        Alignment.JUSTIFIED: "qj",
        Alignment.DISTRIBUTED: "qd",
    }

    # Applied in order to text content before formatting is wrapped around it
    ESCAPES: tuple[tuple[re.Pattern, str], ...] = (
        (re.compile(r"\^I"), r"\\t"),  # tabulator
        (re.compile(r"\^J"), r"\\P"),  # line break
        (re.compile(r"\^M"), ""),  # carriage return is ignored
        (re.compile(r"\^ "), "^"),  # literal caret
        (re.compile(r"%%c", re.IGNORECASE), "Ø"),
        (re.compile(r"%%d", re.IGNORECASE), "°"),
        (re.compile(r"%%p", re.IGNORECASE), "±"),
    )

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the serializer.

        Args:
            settings: Provides the fallback font family (global if omitted)
        """
        self.settings = settings or get_settings()

    def serialize(self, nodes: list[DocumentNode]) -> str:
        """Convert a node forest to an MText string.

        Each call starts with fresh list numbering.
        """
        return "".join(self._serialize_node(node) for node in nodes)

    def _serialize_node(
        self, node: DocumentNode, list_context: Optional[ListContext] = None
    ) -> str:
        mtext = ""
        if node.paragraph is not None:
            mtext += self.paragraph_command(node.paragraph)

        if node.stack is not None:
            return mtext + self.stack_command(
                node.stack.numerator, node.stack.denominator, node.stack.divider
            )

        if node.type == NodeType.TEXT and node.text:
            mtext += self.apply_formatting(self.encode_text(node.text), node)
        elif node.type in NodeType.LISTS:
            if list_context is None:
                context = ListContext.open(node.type)
            else:
                context = list_context.enter(node.type)
            for child in node.children or []:
                mtext += self._serialize_node(child, context)
        elif node.type == NodeType.LI:
            indent = ""
            marker = ""
            if list_context is not None:
                indent = "  " * (list_context.depth - 1)
                marker = list_context.next_marker()
            # Lists nested in an item start over from their own container
            content = "".join(self._serialize_node(child) for child in node.children or [])
            mtext += f"{self.PARAGRAPH_BREAK}{indent}{marker}{content}"
        elif node.children is not None:
            mtext += "".join(self._serialize_node(child) for child in node.children)
            if node.type == NodeType.PARAGRAPH:
                mtext += self.PARAGRAPH_BREAK
        return mtext

    def encode_text(self, text: str) -> str:
        """Replace caret and percent escapes with their MText meaning."""
        for pattern, replacement in self.ESCAPES:
            text = pattern.sub(replacement, text)
        return text

    def apply_formatting(self, text: str, node: DocumentNode) -> str:
        """Wrap text in a brace group carrying the node's formatting codes."""
        codes = ""
        if node.underline:
            codes += "\\L"
        if node.overline:
            codes += "\\O"
        if node.strikethrough:
            codes += "\\K"

        # Script positions are stacks around the text itself
        if node.superscript:
            text = f"\\S{text}^ ;"
        if node.subscript:
            text = f"\\S^ {text};"

        if node.color:
            codes += f"\\C{format_number(node.color)};"
        if node.rgb_color:
            codes += f"\\c{node.rgb_color & 0xFFFFFF};"
        if node.height:
            codes += f"\\H{format_number(node.height)};"
        if node.width:
            codes += f"\\W{format_number(node.width)};"
        if node.tracking:
            codes += f"\\T{format_number(node.tracking)}x;"
        if node.slant:
            codes += f"\\Q{format_number(node.slant)};"
        if node.font or node.bold or node.italic:
            codes += f"\\f{self.font_command(node)};"

        if codes:
            return f"{{{codes}{text}}}"
        return text

    def font_command(self, node: DocumentNode) -> str:
        """Build the ``family|b<0|1>|i<0|1>`` body of a font command.

        Font-level bold/italic fall back to the character-level flags.
        """
        family = node.font if node.font is not None else self.settings.default_font
        bold = node.font_bold if node.font_bold is not None else node.bold
        italic = node.font_italic if node.font_italic is not None else node.italic
        return f"{family}|b{1 if bold else 0}|i{1 if italic else 0}"

    def stack_command(
        self,
        numerator: str,
        denominator: str,
        divider: Optional[str] = StackDivider.NONE,
    ) -> str:
        """Build a stacked fraction command such as ``\\S1/2;``."""
        divider = divider or StackDivider.NONE
        if divider == StackDivider.NONE:
            # Without the space "^x" would read as a caret escape
            divider = "^ "
        return f"\\S{numerator}{divider}{denominator};"

    def paragraph_command(self, paragraph: ParagraphProperties) -> str:
        """Build a paragraph command such as ``\\pi1,l2,qc;``.

        Fields always appear in the order indent, left, right, alignment,
        tabs; alignment defaults to left.
        """
        parts: list[str] = []
        if paragraph.indent is not None:
            parts.append(f"i{format_number(paragraph.indent)}")
        if paragraph.left is not None:
            parts.append(f"l{format_number(paragraph.left)}")
        if paragraph.right is not None:
            parts.append(f"r{format_number(paragraph.right)}")
        parts.append(self.ALIGN_CODES.get(paragraph.align, "ql"))
        if paragraph.tabs:
            parts.append("t" + ",".join(format_number(tab) for tab in paragraph.tabs))
        return "\\p" + ",".join(parts) + ";"


def to_mtext(nodes: list[DocumentNode], settings: Optional[Settings] = None) -> str:
    """Convert a node forest to an MText string."""
    return MTextSerializer(settings).serialize(nodes)
