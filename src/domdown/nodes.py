"""Immutable tree snapshot nodes for domdown.

The renderer never touches a live DOM. It receives a pre-materialized snapshot
made of two frozen dataclasses:

Node
├── TextNode     (raw character data)
└── ElementNode  (tag, attributes, class list, ordered children)

Snapshots come from ``parse_html()``, from a JSON snapshot via
``domdown.serialization``, or are built by hand with ``element()``/``text()``.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class TextNode:
    """Raw character data.

    Emitted verbatim by the renderer (no Markdown escaping).

    """

    text: str


@dataclass(frozen=True, slots=True)
class ElementNode:
    """An element with a tag, attributes, classes and ordered children.

    ``children`` order is document order and drives output order.
    There is no parent pointer; the renderer tracks ancestry itself.

    """

    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    class_list: frozenset[str] = frozenset()
    children: tuple[Node, ...] = ()

    def get(self, name: str, default: str = "") -> str:
        """Return an attribute value, or ``default`` when absent."""
        value = self.attributes.get(name)
        return default if value is None else value

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    @property
    def class_attr(self) -> str:
        """The raw ``class`` attribute, rebuilt from ``class_list`` if missing."""
        raw = self.attributes.get("class")
        if raw is not None:
            return raw
        return " ".join(sorted(self.class_list))


# PEP 695 type alias for any snapshot node
type Node = TextNode | ElementNode


def text(content: str) -> TextNode:
    """Build a text node."""
    return TextNode(content)


def element(
    tag: str,
    *children: Node | str,
    attributes: Mapping[str, str] | None = None,
    classes: str | frozenset[str] | set[str] | tuple[str, ...] | None = None,
) -> ElementNode:
    """Build an element node.

    Tag names are lower-cased. String children are wrapped in ``TextNode``.
    When ``classes`` is omitted, the class list is derived from the ``class``
    attribute.

    Example:
        >>> node = element("p", "Hello ", element("b", "world"))
        >>> node.children[1].tag
        'b'
    """
    attrs = dict(attributes or {})
    if classes is None:
        class_list = frozenset(attrs.get("class", "").split())
    elif isinstance(classes, str):
        class_list = frozenset(classes.split())
    else:
        class_list = frozenset(classes)
    kids = tuple(TextNode(c) if isinstance(c, str) else c for c in children)
    return ElementNode(tag=tag.lower(), attributes=attrs, class_list=class_list, children=kids)


def text_content(node: Node | None) -> str:
    """Concatenated character data of a subtree (DOM ``textContent``).

    Iterative, so arbitrarily deep trees are fine.
    """
    if node is None:
        return ""
    parts: list[str] = []
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, TextNode):
            parts.append(current.text)
        else:
            stack.extend(reversed(current.children))
    return "".join(parts)


def iter_elements(node: ElementNode, *, stop: frozenset[str] = frozenset()) -> Iterator[ElementNode]:
    """Yield descendant elements in document order (excluding ``node``).

    Elements whose tag is in ``stop`` are yielded but not descended into.
    """
    for child in node.children:
        if isinstance(child, ElementNode):
            yield child
            if child.tag.lower() not in stop:
                yield from iter_elements(child, stop=stop)


def find_first(node: ElementNode, tag: str) -> ElementNode | None:
    """First descendant element with the given tag, depth-first."""
    for el in iter_elements(node):
        if el.tag.lower() == tag:
            return el
    return None
