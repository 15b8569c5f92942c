"""Simple CSS selectors for matching snapshot elements.

Supports comma-separated compound selectors built from:

- a type selector (``button``, ``mat-icon``) or ``*``
- class selectors (``.role-label``)
- id selectors (``#main``)
- attribute selectors: ``[attr]``, ``[attr=v]``, ``[attr~=v]``,
  ``[attr^=v]``, ``[attr$=v]``, ``[attr*=v]`` (values quoted or bare)

Combinators (descendant, ``>``, ``+``, ``~``) and pseudo-classes are not
supported and raise SelectorError.

Example:
    >>> from domdown.nodes import element
    >>> sel = compile_selector('button, [aria-label="Copy"]')
    >>> sel.matches(element("span", attributes={"aria-label": "Copy"}))
    True
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

from domdown.errors import SelectorError
from domdown.nodes import ElementNode

_IDENT = r"-?[_a-zA-Z][_a-zA-Z0-9-]*"
_TOKEN = re.compile(
    rf"""
    (?P<type>{_IDENT}|\*)
    | \.(?P<cls>{_IDENT})
    | \#(?P<id>{_IDENT})
    | \[\s*(?P<attr>{_IDENT})\s*
        (?:(?P<op>[~^$*]?=)\s*
           (?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\]\s]+))\s*)?
      \]
    """,
    re.VERBOSE,
)

_ATTR_OPS: dict[str, Callable[[str, str], bool]] = {
    "=": lambda actual, wanted: actual == wanted,
    "~=": lambda actual, wanted: wanted in actual.split(),
    "^=": lambda actual, wanted: bool(wanted) and actual.startswith(wanted),
    "$=": lambda actual, wanted: bool(wanted) and actual.endswith(wanted),
    "*=": lambda actual, wanted: bool(wanted) and wanted in actual,
}


@dataclass(frozen=True, slots=True)
class AttributeTest:
    name: str
    op: str | None = None
    value: str = ""

    def matches(self, node: ElementNode) -> bool:
        actual = node.class_attr if self.name == "class" else node.attributes.get(self.name)
        if actual is None:
            return False
        if self.op is None:
            return True
        return _ATTR_OPS[self.op](actual, self.value)


@dataclass(frozen=True, slots=True)
class CompoundSelector:
    """All tests must pass: ``tag.cls#id[attr]``."""

    tag: str | None = None
    classes: frozenset[str] = frozenset()
    element_id: str | None = None
    attributes: tuple[AttributeTest, ...] = ()

    def matches(self, node: ElementNode) -> bool:
        if self.tag is not None and node.tag.lower() != self.tag:
            return False
        if self.classes and not self.classes <= node.class_list:
            return False
        if self.element_id is not None and node.attributes.get("id") != self.element_id:
            return False
        return all(test.matches(node) for test in self.attributes)


@dataclass(frozen=True, slots=True)
class SelectorList:
    """Matches when any compound selector matches."""

    source: str
    selectors: tuple[CompoundSelector, ...]

    def matches(self, node: ElementNode) -> bool:
        return any(sel.matches(node) for sel in self.selectors)

    def __call__(self, node: ElementNode) -> bool:
        return self.matches(node)


def _parse_compound(text: str, source: str) -> CompoundSelector:
    if not text:
        raise SelectorError(source, "empty selector in list")
    tag: str | None = None
    classes: set[str] = set()
    element_id: str | None = None
    attributes: list[AttributeTest] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            if text[pos].isspace() or text[pos] in ">+~":
                raise SelectorError(source, "combinators are not supported")
            raise SelectorError(source, f"unexpected {text[pos]!r} at offset {pos}")
        if match.group("type") is not None:
            if pos != 0:
                raise SelectorError(source, "type selector must come first")
            name = match.group("type").lower()
            tag = None if name == "*" else name
        elif match.group("cls") is not None:
            classes.add(match.group("cls"))
        elif match.group("id") is not None:
            element_id = match.group("id")
        else:
            op = match.group("op")
            value = next(
                (v for v in (match.group("dq"), match.group("sq"), match.group("bare")) if v is not None),
                "",
            )
            attributes.append(AttributeTest(name=match.group("attr").lower(), op=op, value=value))
        pos = match.end()
    return CompoundSelector(
        tag=tag,
        classes=frozenset(classes),
        element_id=element_id,
        attributes=tuple(attributes),
    )


@lru_cache(maxsize=128)
def compile_selector(source: str) -> SelectorList:
    """Compile a comma-separated selector list.

    Raises:
        SelectorError: On syntax this module does not support.
    """
    parts = _split_top_level(source)
    return SelectorList(
        source=source,
        selectors=tuple(_parse_compound(part.strip(), source) for part in parts),
    )


def _split_top_level(source: str) -> list[str]:
    """Split on commas that are not inside attribute brackets or quotes."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    for i, ch in enumerate(source):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            parts.append(source[start:i])
            start = i + 1
    parts.append(source[start:])
    return parts


def matches(node: ElementNode, selector: str) -> bool:
    """Check a single element against a selector string."""
    return compile_selector(selector).matches(node)
