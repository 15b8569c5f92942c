"""TreeRenderer protocol: stable interface for snapshot renderers.

Any renderer that implements ``render(node) -> RenderResult`` conforms to
this protocol. The built-in ``MarkdownRenderer`` is the reference
implementation.

Example:
    from domdown.renderers.protocol import TreeRenderer

    def render_turn(renderer: TreeRenderer, turn: ElementNode) -> str:
        return renderer.render(turn).markdown

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domdown.nodes import Node
    from domdown.renderers.markdown import RenderResult


class TreeRenderer(Protocol):
    """Protocol for tree snapshot renderers.

    Implementations accept a root node (or None) and return a RenderResult.

    """

    def render(self, root: Node | None) -> RenderResult:
        """Render a tree to a RenderResult.

        Args:
            root: The tree to render.

        Returns:
            Rendered output and side products.

        """
        ...
