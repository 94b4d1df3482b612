"""HTML parser for converting editor output to IR."""

import logging
import math
import re
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from mtext_bridge.config import Settings, get_settings
from mtext_bridge.formatting.ir import (
    Alignment,
    DocumentNode,
    NodeType,
    ParagraphProperties,
    TextFormat,
)

logger = logging.getLogger(__name__)

# A number with an optional length unit, e.g. "1.5em", "-.5px", "12"
_LENGTH_PATTERN = re.compile(
    r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)\s*(rem|em|px|pt)?$",
    re.IGNORECASE,
)
_IMPORTANT_PATTERN = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_COLOR_COMPONENT_PATTERN = re.compile(r"\d+(?:\.\d+)?")
_HEX_COLOR_PATTERN = re.compile(r"^[0-9a-f]{6}$")


def parse_style(style_attr: Optional[str]) -> dict[str, str]:
    """Split an inline style attribute into a property -> value map.

    Property names are lower-cased, values trimmed and stripped of
    ``!important``. Later declarations override earlier ones and malformed
    fragments are skipped.
    """
    declarations: dict[str, str] = {}
    if not style_attr:
        return declarations

    for declaration in style_attr.split(";"):
        name, sep, value = declaration.partition(":")
        name = name.strip().lower()
        value = _IMPORTANT_PATTERN.sub("", value).strip()
        if not sep or not name or not value:
            continue
        declarations[name] = value

    # The margin shorthand feeds the longhands unless they are given
    margin = declarations.get("margin")
    if margin:
        parts = margin.split()
        if 1 <= len(parts) <= 4:
            right = parts[1] if len(parts) > 1 else parts[0]
            left = parts[3] if len(parts) == 4 else right
            declarations.setdefault("margin-right", right)
            declarations.setdefault("margin-left", left)

    return declarations


def parse_css_length(
    value: Optional[str],
    base_font_px: float = 16,
    px_per_pt: float = 1.33,
) -> Optional[float]:
    """Convert a CSS length to em units.

    ``em`` and ``rem`` pass through, ``px`` is divided by the base font size,
    ``pt`` goes through px first, bare numbers pass through.

    Returns:
        The length in em, or None if the value is not a recognized length
    """
    if not value:
        return None
    match = _LENGTH_PATTERN.match(value.strip())
    if not match:
        return None

    number = float(match.group(1))
    if not math.isfinite(number):
        return None
    unit = (match.group(2) or "").lower()
    if unit == "px":
        return number / base_font_px
    if unit == "pt":
        return (number * px_per_pt) / base_font_px
    return number


def parse_css_color(value: Optional[str]) -> Optional[int]:
    """Convert a CSS ``rgb()``/``rgba()`` or hex color to packed 0xRRGGBB.

    Short hex forms are expanded the way browsers normalize them. Named
    colors and malformed values yield None.
    """
    if not value:
        return None
    value = value.strip().lower()

    if value.startswith("rgb"):
        components = _COLOR_COMPONENT_PATTERN.findall(value)[:3]
        if len(components) < 3:
            return None
        r, g, b = (min(255, round(float(c))) for c in components)
        return (r << 16) | (g << 8) | b

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits[:3])
        elif len(digits) == 8:
            digits = digits[:6]
        if not _HEX_COLOR_PATTERN.match(digits):
            return None
        return int(digits, 16)

    return None


class HtmlParser:
    """Parse editor HTML into a forest of DocumentNode values."""

    BOLD_TAGS = frozenset({"b", "strong"})
    ITALIC_TAGS = frozenset({"i", "em"})
    STRIKE_TAGS = frozenset({"s", "strike", "del"})

    # Tags the editor emits that carry no formatting of their own
    PLAIN_TAGS = frozenset({"span", "div", "font", "a"})

    ALIGN_VALUES = {
        "left": Alignment.LEFT,
        "right": Alignment.RIGHT,
        "center": Alignment.CENTER,
        "justify": Alignment.JUSTIFIED,
    }

    TEXT_ALIGN_PATTERN = re.compile(
        r"text-align\s*:\s*(left|right|center|justify)",
        re.IGNORECASE,
    )
    SCALE_X_PATTERN = re.compile(r"scaleX\(([^)]+)\)")

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the parser.

        Args:
            settings: Unit conversion and marker defaults (global if omitted)
        """
        self.settings = settings or get_settings()

    def parse(self, markup: str) -> list[DocumentNode]:
        """Convert an HTML string to a node forest.

        Args:
            markup: HTML produced by the editor

        Returns:
            Top-level nodes in document order
        """
        soup = BeautifulSoup(markup or "", self.settings.html_parser)
        root = soup.body or soup.find("html") or soup

        nodes: list[DocumentNode] = []
        for child in root.children:
            if isinstance(child, Tag) and child.name == "head":
                continue
            nodes.extend(self._parse_node(child, TextFormat()))
        return nodes

    def _parse_node(self, node, context: TextFormat) -> list[DocumentNode]:
        """Parse a markup node under the accumulated formatting context."""
        if isinstance(node, Tag):
            name = node.name.lower()
            if name == "br":
                return [DocumentNode(type=NodeType.BR)]
            if name in NodeType.LISTS:
                return [self._parse_container(node, name, context)]
            if name == "li":
                return [self._parse_container(node, NodeType.LI, context)]
            if name == "p":
                return [self._parse_paragraph(node, context)]
            return [self._parse_element(node, name, context)]

        # Comments, doctypes and the like subclass PreformattedString
        if isinstance(node, NavigableString) and not isinstance(
            node, PreformattedString
        ):
            text = str(node).replace("\u00a0", " ")
            return [DocumentNode(type=NodeType.TEXT, text=text, **context.as_fields())]

        return []

    def _parse_children(self, el: Tag, context: TextFormat) -> list[DocumentNode]:
        children: list[DocumentNode] = []
        for child in el.children:
            children.extend(self._parse_node(child, context))
        return children

    def _parse_container(
        self, el: Tag, node_type: str, context: TextFormat
    ) -> DocumentNode:
        """Parse a list or list item; these never change character formatting."""
        return DocumentNode(
            type=node_type,
            children=self._parse_children(el, context),
        )

    def _parse_paragraph(self, el: Tag, context: TextFormat) -> DocumentNode:
        """Parse a <p>, attaching its paragraph properties."""
        merged = context.merge(self._extract_formatting(el))
        return DocumentNode(
            type=NodeType.PARAGRAPH,
            children=self._parse_children(el, merged),
            paragraph=self._extract_paragraph_properties(el),
        )

    def _parse_element(self, el: Tag, name: str, context: TextFormat) -> DocumentNode:
        """Parse any other element into a generic container.

        The node keeps only the element's own formatting delta; the merged
        context is what its descendants inherit.
        """
        own_format = self._extract_formatting(el)
        if name not in self.PLAIN_TAGS and not self._is_formatting_tag(name):
            logger.debug("Treating <%s> as a generic container", name)
        return DocumentNode(
            type=name,
            children=self._parse_children(el, context.merge(own_format)),
            **own_format.as_fields(),
        )

    def _is_formatting_tag(self, name: str) -> bool:
        return (
            name in self.BOLD_TAGS
            or name in self.ITALIC_TAGS
            or name in self.STRIKE_TAGS
            or name in ("u", "sub", "sup")
        )

    def _length(self, prop: str, value: Optional[str]) -> Optional[float]:
        """Convert a style length, logging values that cannot be used."""
        length = parse_css_length(
            value,
            base_font_px=self.settings.base_font_px,
            px_per_pt=self.settings.px_per_pt,
        )
        if length is None and value:
            logger.debug("Ignoring unparseable %s value %r", prop, value)
        return length

    def _extract_formatting(self, el: Tag) -> TextFormat:
        """Extract the formatting delta contributed by one element."""
        name = el.name.lower()
        style = parse_style(el.get("style"))
        decoration = style.get("text-decoration", "").lower()
        values: dict = {}

        if name in self.BOLD_TAGS:
            values["bold"] = True
        if name in self.ITALIC_TAGS:
            values["italic"] = True
        if name == "u" or "underline" in decoration:
            values["underline"] = True
        if "overline" in decoration:
            values["overline"] = True
        if name in self.STRIKE_TAGS or "line-through" in decoration:
            values["strikethrough"] = True
        if name == "sub":
            values["subscript"] = True
        if name == "sup":
            values["superscript"] = True

        if "color" in style:
            rgb = parse_css_color(style["color"])
            if rgb is not None:
                values["rgb_color"] = rgb
            else:
                logger.debug("Ignoring unsupported color %r", style["color"])

        if "font-family" in style:
            family = re.sub(r"['\"]", "", style["font-family"]).split(",")[0].strip()
            if family:
                values["font"] = family

        classes = self._class_string(el)

        if "letter-spacing" in style:
            tracking = self._length("letter-spacing", style["letter-spacing"])
            if tracking is not None:
                values["tracking"] = tracking
        if not values.get("tracking") and self.settings.tracking_marker_class in classes:
            values["tracking"] = self.settings.default_tracking

        if "transform" in style:
            match = self.SCALE_X_PATTERN.search(style["transform"])
            if match:
                try:
                    width = float(match.group(1).strip())
                except ValueError:
                    width = None
                if width is not None and math.isfinite(width):
                    values["width"] = width
                else:
                    logger.debug("Ignoring unparseable scaleX %r", match.group(1))
        if not values.get("width") and self.settings.width_marker_class in classes:
            values["width"] = self.settings.default_width

        return TextFormat(**values)

    @staticmethod
    def _class_string(el: Tag) -> str:
        classes = el.get("class") or ""
        if isinstance(classes, (list, tuple)):
            return " ".join(classes)
        return classes

    def _extract_paragraph_properties(self, el: Tag) -> ParagraphProperties:
        """Extract alignment, indent and margins from a <p> element.

        Sources are checked in increasing precedence: the ``align``
        attribute, the parsed inline style, then the raw style string.
        """
        style_attr = el.get("style") or ""
        style = parse_style(style_attr)

        align = None
        align_attr = (el.get("align") or "").strip().lower()
        if align_attr in self.ALIGN_VALUES:
            align = self.ALIGN_VALUES[align_attr]

        style_align = style.get("text-align", "").lower()
        if style_align in self.ALIGN_VALUES:
            align = self.ALIGN_VALUES[style_align]

        match = self.TEXT_ALIGN_PATTERN.search(style_attr)
        if match:
            align = self.ALIGN_VALUES[match.group(1).lower()]

        lengths: dict[str, Optional[float]] = {}
        for key, prop in (
            ("indent", "text-indent"),
            ("left", "margin-left"),
            ("right", "margin-right"),
        ):
            value = self._length(prop, style.get(prop))
            if value is None and style_attr:
                value = self._length(prop, self._raw_property(style_attr, prop))
            lengths[key] = value

        return ParagraphProperties(align=align, **lengths)

    @staticmethod
    def _raw_property(style_attr: str, prop: str) -> Optional[str]:
        """Pull a property's value straight out of a raw style string."""
        match = re.search(rf"{prop}\s*:\s*([^;]+)", style_attr, re.IGNORECASE)
        if match:
            return match.group(1)
        return None


def parse_html(markup: str, settings: Optional[Settings] = None) -> list[DocumentNode]:
    """Convert an HTML string to a node forest."""
    return HtmlParser(settings).parse(markup)
