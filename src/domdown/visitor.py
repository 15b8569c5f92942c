"""Immutable tree transforms for snapshots.

Example, drop every button:

    def drop_buttons(node: Node) -> Node | None:
        if isinstance(node, ElementNode) and node.tag == "button":
            return None
        return node

    clean = transform(tree, drop_buttons)

Example, rename a custom wrapper to a div:

    def unwrap(node: Node) -> Node | None:
        if isinstance(node, ElementNode) and node.tag == "x-wrap":
            return dataclasses.replace(node, tag="div")
        return node

Thread Safety:
    transform is pure; the input tree is never modified.

"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterator

from domdown.nodes import ElementNode, Node


def transform(root: Node, fn: Callable[[Node], Node | None]) -> Node:
    """Apply ``fn`` to every node bottom-up, returning a new tree.

    Children are transformed before their parent sees them. Returning None
    removes the node. Unchanged subtrees are shared with the input.

    Args:
        root: Tree to transform.
        fn: Called with each node (children already transformed); returns
            the replacement node, the same node, or None to remove it.

    Returns:
        The transformed tree.

    Raises:
        TypeError: If ``fn`` removes the root.

    """
    result = _transform_node(root, fn)
    if result is None:
        msg = "transform fn must not remove the root node"
        raise TypeError(msg)
    return result


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Transform a single node bottom-up: children first, then self."""
    if isinstance(node, ElementNode) and node.children:
        new_children = tuple(
            result for c in node.children
            if (result := _transform_node(c, fn)) is not None
        )
        if new_children != node.children:
            node = dataclasses.replace(node, children=new_children)
    return fn(node)


def walk(root: Node) -> Iterator[Node]:
    """Yield every node in document order (pre-order), root included."""
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ElementNode):
            stack.extend(reversed(node.children))
