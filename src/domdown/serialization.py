"""Snapshot serialization: JSON round-trip for tree snapshots.

Converts snapshot nodes to/from JSON-compatible dicts. Useful for:
- Capturing a DOM in the browser (``JSON.stringify`` of a walked tree) and
  rendering it here
- Storing a cleaned snapshot next to the Markdown it produced
- Debugging and inspection

Format::

    {"type": "element", "tag": "p", "attributes": {"class": "x"},
     "children": [{"type": "text", "text": "Hello"}]}

``class_list`` may be given explicitly as a list; otherwise it is derived
from the ``class`` attribute. Output is deterministic (sorted keys).

Example:
    from domdown.serialization import to_json, from_json

    json_str = to_json(tree)
    assert from_json(json_str) == tree

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

import json
from typing import Any

from domdown.errors import SnapshotError
from domdown.nodes import ElementNode, Node, TextNode


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a snapshot node to a JSON-compatible dict.

    Args:
        node: TextNode or ElementNode.

    Returns:
        Dict with a ``type`` discriminator.

    """
    if isinstance(node, TextNode):
        return {"type": "text", "text": node.text}
    result: dict[str, Any] = {
        "type": "element",
        "tag": node.tag,
        "attributes": dict(node.attributes),
        "children": [to_dict(child) for child in node.children],
    }
    derived = frozenset(node.attributes.get("class", "").split())
    if node.class_list != derived:
        result["class_list"] = sorted(node.class_list)
    return result


def from_dict(data: Any, *, _path: str = "") -> Node:
    """Reconstruct a snapshot node from a dict.

    Args:
        data: Dict as produced by ``to_dict`` (or a browser-side serializer).

    Returns:
        TextNode or ElementNode.

    Raises:
        SnapshotError: If ``type`` is missing or unknown, or a field has the
            wrong shape.

    """
    path = _path or "/"
    if not isinstance(data, dict):
        raise SnapshotError(f"expected an object, got {type(data).__name__}", path)

    node_type = data.get("type")
    if node_type == "text":
        value = data.get("text", "")
        if not isinstance(value, str):
            raise SnapshotError("'text' must be a string", path)
        return TextNode(value)
    if node_type != "element":
        raise SnapshotError(f"unknown node type: {node_type!r}", path)

    tag = data.get("tag")
    if not isinstance(tag, str) or not tag:
        raise SnapshotError("'tag' must be a non-empty string", path)

    attributes = data.get("attributes")
    if attributes is None:
        attributes = {}
    if not isinstance(attributes, dict):
        raise SnapshotError("'attributes' must be an object", path)
    attributes = {str(k).lower(): "" if v is None else str(v) for k, v in attributes.items()}

    raw_classes = data.get("class_list")
    if raw_classes is None:
        class_list = frozenset(attributes.get("class", "").split())
    elif isinstance(raw_classes, list) and all(isinstance(c, str) for c in raw_classes):
        class_list = frozenset(raw_classes)
    else:
        raise SnapshotError("'class_list' must be a list of strings", path)

    raw_children = data.get("children")
    if raw_children is None:
        raw_children = []
    if not isinstance(raw_children, list):
        raise SnapshotError("'children' must be an array", path)
    children = tuple(
        from_dict(child, _path=f"{_path}/children/{i}") for i, child in enumerate(raw_children)
    )

    return ElementNode(
        tag=tag.lower(),
        attributes=attributes,
        class_list=class_list,
        children=children,
    )


def to_json(node: Node, *, indent: int | None = None) -> str:
    """Serialize a snapshot to a JSON string.

    Args:
        node: Snapshot root.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(node), sort_keys=True, indent=indent, ensure_ascii=False)


def from_json(data: str) -> Node:
    """Deserialize a snapshot from a JSON string.

    Raises:
        SnapshotError: If the text is not valid JSON or not a snapshot.

    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    return from_dict(raw)
