"""
DOM to Markdown-like text conversion.

Walks a DOM tree depth first and renders block elements (headings,
paragraphs, lists, tables, code, quotes) with Markdown syntax so that
downstream chunking and summarization see the page structure. The walk
works on a small DomNode tree, which can be built from BeautifulSoup or
by hand in tests.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString


class NodeKind(str, Enum):
    """Kinds of DOM nodes the structurer distinguishes."""

    TEXT = "text"
    ELEMENT = "element"


@dataclass
class DomNode:
    """
    Minimal DOM node.

    Text nodes carry ``text``; element nodes carry a lowercase
    ``tag_name``, ``attributes`` and ``children``.
    """

    kind: NodeKind
    tag_name: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    children: list["DomNode"] = field(default_factory=list)
    text: str = ""

    @classmethod
    def text_node(cls, text: str) -> "DomNode":
        return cls(kind=NodeKind.TEXT, text=text)

    @classmethod
    def element(
        cls,
        tag_name: str,
        attributes: dict[str, str] | None = None,
        children: list["DomNode"] | None = None,
    ) -> "DomNode":
        return cls(
            kind=NodeKind.ELEMENT,
            tag_name=tag_name.lower(),
            attributes=attributes or {},
            children=children or [],
        )

    @classmethod
    def from_soup(cls, node: Tag | NavigableString) -> "DomNode | None":
        """
        Convert a BeautifulSoup node.

        Comments, doctypes, CDATA and processing instructions have no
        text content in the DOM and are dropped (None is returned).
        The tree is walked with an explicit stack, so nesting depth is
        not bounded by the recursion limit.
        """
        root = cls._convert_one(node)
        if root is None or root.kind is NodeKind.TEXT:
            return root

        pending: list[tuple[Tag, DomNode]] = [(node, root)]
        while pending:
            tag, converted = pending.pop()
            for child in tag.children:
                child_node = cls._convert_one(child)
                if child_node is None:
                    continue
                converted.children.append(child_node)
                if child_node.kind is NodeKind.ELEMENT:
                    pending.append((child, child_node))

        return root

    @classmethod
    def _convert_one(cls, node: Tag | NavigableString) -> "DomNode | None":
        """Convert a single node without its children."""
        if isinstance(node, PreformattedString):
            return None
        if isinstance(node, NavigableString):
            return cls.text_node(str(node))
        if isinstance(node, Tag):
            attributes = {
                name: " ".join(value) if isinstance(value, list) else value
                for name, value in node.attrs.items()
            }
            return cls.element(node.name, attributes)
        return None

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        parts: list[str] = []
        pending: list[DomNode] = [self]
        while pending:
            node = pending.pop()
            if node.kind is NodeKind.TEXT:
                parts.append(node.text)
            else:
                pending.extend(reversed(node.children))
        return "".join(parts)

    @property
    def class_name(self) -> str:
        return self.attributes.get("class", "")


HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
LIST_TAGS = ("ul", "ol")
BOLD_TAGS = ("strong", "b")
ITALIC_TAGS = ("em", "i")
CELL_TAGS = ("th", "td")
SKIPPED_TAGS = ("script", "style")

_NEWLINE_RUN = re.compile(r"\n{3,}")


def structure_node(root: DomNode, base_url: str = "") -> str:
    """
    Render a DOM tree as structured text.

    Args:
        root: Root of the tree, usually ``<body>``
        base_url: URL used to resolve relative link targets

    Returns:
        Trimmed text with runs of three or more newlines collapsed to two
    """
    parts: list[str] = []
    _render(root, base_url, parts)
    return _NEWLINE_RUN.sub("\n\n", "".join(parts).strip())


def structure_html(html: str, base_url: str = "") -> str:
    """
    Parse HTML and render its ``<body>`` as structured text.

    Documents without a body are rendered whole.

    Args:
        html: Serialized HTML
        base_url: URL used to resolve relative link targets

    Returns:
        Structured text
    """
    soup = BeautifulSoup(html, "html.parser")
    root = DomNode.from_soup(soup.body or soup)
    if root is None:
        return ""
    return structure_node(root, base_url)


def _render(root: DomNode, base_url: str, out: list[str]) -> None:
    # Entries are nodes still to visit or closing markup to emit
    pending: list[tuple[DomNode, int] | str] = [(root, 0)]

    while pending:
        item = pending.pop()
        if isinstance(item, str):
            out.append(item)
            continue

        node, depth = item
        if node.kind is NodeKind.TEXT:
            trimmed = node.text.strip()
            if trimmed:
                out.append(" " + trimmed)
            continue

        opening, closing, child_depth = _element_markup(node, depth, base_url)
        out.append(opening)
        if child_depth is None:
            continue
        if closing:
            pending.append(closing)
        pending.extend((child, child_depth) for child in reversed(node.children))


def _element_markup(node: DomNode, depth: int, base_url: str) -> tuple[str, str, int | None]:
    """
    Markup around one element.

    Returns:
        ``(opening, closing, child_depth)``; children are not walked
        when ``child_depth`` is None
    """
    tag = node.tag_name

    if tag == "a":
        return _render_anchor(node, base_url), "", None
    elif tag == "p" or tag in HEADING_TAGS:
        # Paragraphs share the heading block rule with an empty marker
        level = HEADING_TAGS.index(tag) + 1 if tag in HEADING_TAGS else 0
        lead = "\n" if depth > 0 else "\n\n"
        return lead + "#" * level + " ", "\n", depth + 1
    elif tag in LIST_TAGS:
        return "\n", "\n", depth + 1
    elif tag == "li":
        return "\n" + "  " * depth + "- ", "", depth + 1
    elif tag == "br":
        return "\n", "", None
    elif tag in BOLD_TAGS:
        return f" **{node.text_content.strip()}** ", "", None
    elif tag in ITALIC_TAGS:
        return f" *{node.text_content.strip()}* ", "", None
    elif tag == "code":
        return f" `{node.text_content.strip()}` ", "", None
    elif tag == "pre":
        return "\n```\n" + node.text_content.strip() + "\n```\n", "", None
    elif tag == "blockquote":
        quoted = node.text_content.strip().replace("\n", "\n> ")
        return "\n> " + quoted + "\n", "", None
    elif tag == "table":
        return "\n", "\n", depth + 1
    elif tag == "tr":
        return "|", "\n", depth + 1
    elif tag in CELL_TAGS:
        return f" {node.text_content.strip()} |", "", None
    elif tag == "span":
        return _render_span(node), "", None
    elif tag in SKIPPED_TAGS:
        return "", "", None
    return "", "", depth


def _render_anchor(node: DomNode, base_url: str) -> str:
    text = node.text_content.strip()
    href = node.attributes.get("href")
    if not href:
        return " " + text

    try:
        target = urljoin(base_url, href)
    except ValueError:
        target = href
    return f" [{text}]({target})"


def _render_span(node: DomNode) -> str:
    text = node.text_content.strip()
    class_name = node.class_name
    if "highlight" in class_name:
        return f" **{text}** "
    if "italic" in class_name:
        return f" *{text}* "
    return f" {text} "
