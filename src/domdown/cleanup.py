"""Composable cleanup policies for tree snapshots.

The renderer trusts its input. Interactive chrome (buttons, icons, action
menus, role labels) has to be removed before rendering; these policies do
that as pure transforms, so the caller's tree is never mutated. Policies
compose via the | operator.

Example:
    >>> from domdown import parse_html, render
    >>> from domdown.cleanup import ai_studio_chrome, strip_selectors
    >>> tree = parse_html('<p>Answer<button>Copy</button></p>')
    >>> clean = (ai_studio_chrome | strip_selectors(".footnote"))(tree)
    >>> render(clean).markdown
    'Answer'
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable

from domdown.nodes import ElementNode, Node, TextNode
from domdown.selectors import compile_selector
from domdown.visitor import transform

# Zero-width and bidi override characters
_INVISIBLE_CHARS = re.compile(
    "[\u200b\u200c\u200d\u200e\u200f\u202a\u202b\u202c\u202d\u202e\ufeff]+"
)

# UI chrome inside an AI Studio chat turn
AI_STUDIO_CHROME_SELECTORS: tuple[str, ...] = (
    "ms-chat-turn-options",
    "button",
    "mat-icon",
    '[aria-label="Copy"]',
    '[aria-label="Edit"]',
    ".action-buttons",
    ".feedback-buttons",
    '[class*="thumb"]',
    '[class*="copy-button"]',
    ".overflow-menu",
    ".edit-button",
    ".turn-role-label",
    ".role-label",
)


class Policy:
    """Wrapper for a Node -> Node transform, supports composition via |."""

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[Node], Node]) -> None:
        self._fn = fn

    def __call__(self, root: Node) -> Node:
        return self._fn(root)

    def __or__(self, other: Policy) -> Policy:
        """Chain policies: (self | other)(tree) applies self then other."""

        def chained(root: Node) -> Node:
            return other._fn(self._fn(root))

        return Policy(chained)


def strip_selectors(*selectors: str) -> Policy:
    """Remove every element (and its subtree) matching any selector.

    The root itself is never removed.

    Raises:
        SelectorError: If a selector is malformed (raised immediately).
    """
    compiled = [compile_selector(s) for s in selectors]

    def matched(node: ElementNode) -> bool:
        return any(sel.matches(node) for sel in compiled)

    def apply(root: Node) -> Node:
        return _prune_children(root, matched)

    return Policy(apply)


def _prune_children(node: Node, matched: Callable[[ElementNode], bool]) -> Node:
    # Top-down, so a removed subtree is never walked
    if not isinstance(node, ElementNode) or not node.children:
        return node
    kept = tuple(
        _prune_children(c, matched) for c in node.children
        if not (isinstance(c, ElementNode) and matched(c))
    )
    if kept == node.children:
        return node
    return dataclasses.replace(node, children=kept)


def _normalize_unicode(root: Node) -> Node:
    """Strip zero-width characters and bidi overrides from text nodes."""
    def fn(node: Node) -> Node | None:
        if isinstance(node, TextNode) and _INVISIBLE_CHARS.search(node.text):
            return TextNode(_INVISIBLE_CHARS.sub("", node.text))
        return node
    return transform(root, fn)


def _drop_empty_text(root: Node) -> Node:
    """Remove text nodes with no characters at all."""
    def fn(node: Node) -> Node | None:
        if isinstance(node, TextNode) and not node.text:
            return None
        return node
    return transform(root, fn)


normalize_unicode = Policy(_normalize_unicode)
drop_empty_text = Policy(_drop_empty_text)

ai_studio_chrome: Policy = strip_selectors(*AI_STUDIO_CHROME_SELECTORS)

identity: Policy = Policy(lambda root: root)


def cleanup(root: Node, *, policy: Policy | Callable[[Node], Node]) -> Node:
    """Apply a cleanup policy to a tree.

    Args:
        root: Tree to clean.
        policy: Policy or callable Node -> Node.

    Returns:
        Cleaned tree (the input is left untouched).
    """
    return policy(root)
