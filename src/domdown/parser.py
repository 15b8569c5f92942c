"""HTML source to tree snapshot.

Builds an immutable ``ElementNode`` tree from HTML text with the standard
library ``html.parser``. Robust enough for DevTools "Copy outerHTML" dumps
and saved pages; it is not a full HTML5 tree builder.

Example:
    >>> from domdown.parser import parse_html
    >>> root = parse_html("<p>Hello <b>world</b></p>")
    >>> root.tag
    '#document'
    >>> root.children[0].tag
    'p'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser

from domdown.nodes import ElementNode, Node, TextNode

DOCUMENT_TAG = "#document"

VOID_ELEMENTS: frozenset[str] = frozenset((
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
))

# Content of these is dropped entirely
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset(("script", "style", "template"))

# Whitespace inside these is significant
PRESERVE_WHITESPACE: frozenset[str] = frozenset(("pre", "textarea"))


@dataclass(slots=True)
class _Building:
    """Mutable element under construction; frozen once its end tag is seen."""

    tag: str
    attributes: dict[str, str]
    children: list[Node | _Building] = field(default_factory=list)

    def freeze(self) -> ElementNode:
        return ElementNode(
            tag=self.tag,
            attributes=self.attributes,
            class_list=frozenset(self.attributes.get("class", "").split()),
            children=tuple(c.freeze() if isinstance(c, _Building) else c for c in self.children),
        )


class SnapshotParser(HTMLParser):
    """Build a tree snapshot from HTML.

    Void elements are never pushed. An end tag pops back to the nearest open
    element with the same tag; unmatched end tags are ignored.
    """

    def __init__(self, *, keep_whitespace: bool = False) -> None:
        super().__init__(convert_charrefs=True)
        self.keep_whitespace = keep_whitespace
        self.root = _Building(tag=DOCUMENT_TAG, attributes={})
        self.stack: list[_Building] = [self.root]
        self._raw_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        if self._raw_depth:
            if tag in RAW_TEXT_ELEMENTS:
                self._raw_depth += 1
            return
        if tag in RAW_TEXT_ELEMENTS:
            self._raw_depth = 1
            return
        node = _Building(tag=tag, attributes={k.lower(): v or "" for k, v in attrs})
        self.stack[-1].children.append(node)
        if tag not in VOID_ELEMENTS:
            self.stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        if self._raw_depth or tag in RAW_TEXT_ELEMENTS:
            return
        self.stack[-1].children.append(
            _Building(tag=tag, attributes={k.lower(): v or "" for k, v in attrs})
        )

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if self._raw_depth:
            if tag in RAW_TEXT_ELEMENTS:
                self._raw_depth -= 1
            return
        for i in range(len(self.stack) - 1, 0, -1):
            if self.stack[i].tag == tag:
                del self.stack[i:]
                return

    def handle_data(self, data: str) -> None:
        if self._raw_depth or not data:
            return
        if not self.keep_whitespace and "\n" in data and not data.strip() and not self._in_preformatted():
            return
        siblings = self.stack[-1].children
        if siblings and isinstance(siblings[-1], TextNode):
            # Character references arrive as separate chunks
            siblings[-1] = TextNode(siblings[-1].text + data)
        else:
            siblings.append(TextNode(data))

    def _in_preformatted(self) -> bool:
        return any(el.tag in PRESERVE_WHITESPACE for el in self.stack)

    def snapshot(self) -> ElementNode:
        return self.root.freeze()


def parse_html(source: str, *, keep_whitespace: bool = False) -> ElementNode:
    """Parse HTML into a tree snapshot.

    Args:
        source: HTML text (a fragment or a whole document)
        keep_whitespace: Keep whitespace-only text that contains a newline
            (source indentation). Always kept inside ``<pre>``.

    Returns:
        Synthetic ``#document`` element holding the parsed nodes. It has no
        rule of its own, so it renders as the concatenation of its children.
    """
    parser = SnapshotParser(keep_whitespace=keep_whitespace)
    parser.feed(source)
    parser.close()
    return parser.snapshot()
