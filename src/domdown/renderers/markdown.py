"""Markdown renderer for tree snapshots.

Walks a ``TextNode``/``ElementNode`` tree post-order and re-serializes it as
Markdown, dispatching each element through a tag -> strategy table.

Dispatch order for an element:
1. Transparent tag: children concatenated, no markup
2. Inline-code marker class: rendered as inline code
3. Tag in the rule table: that strategy
4. Anything else: ``pass_through`` (children concatenated)

After the walk, runs of 3+ newlines collapse to 2 and the result is stripped.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. A MarkdownRenderer can be shared across threads.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from domdown.config import RenderConfig, get_render_config
from domdown.errors import ImageExtractionError
from domdown.images import CollectedImage, FilenameAllocator, decode_data_uri, mime_type_of
from domdown.nodes import ElementNode, Node, TextNode, text_content
from domdown.renderers.rules import DEFAULT_RULES, RenderRule, inline_code, pass_through
from domdown.utils.logger import get_logger
from domdown.utils.text import collapse_blank_lines

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Output of one render.

    Unpacks as ``(markdown, images)``::

        markdown, images = render(tree)

    ``failed_images`` holds filenames whose data URI could not be decoded;
    their ``![alt](filename)`` references are still present in ``markdown``.
    """

    markdown: str
    images: tuple[CollectedImage, ...] = ()
    failed_images: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str | tuple[CollectedImage, ...]]:
        yield self.markdown
        yield self.images


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render() call: image counter, collected and failed
    images, and the stack of elements currently being rendered.
    """

    renderer: MarkdownRenderer
    filenames: FilenameAllocator = field(default_factory=FilenameAllocator)
    images: list[CollectedImage] = field(default_factory=list)
    failed_images: list[str] = field(default_factory=list)
    ancestors: list[ElementNode] = field(default_factory=list)

    @property
    def config(self) -> RenderConfig:
        return self.renderer.config

    @property
    def parent(self) -> ElementNode | None:
        """Nearest enclosing element that is not transparent."""
        transparent = self.config.transparent_tags
        for el in reversed(self.ancestors):
            if el.tag.lower() not in transparent:
                return el
        return None

    def render(self, node: Node) -> str:
        """Render one node with this context."""
        return self.renderer.render_node(node, self)

    def render_children(self, node: ElementNode) -> str:
        """Render and concatenate the children of ``node``."""
        self.ancestors.append(node)
        try:
            return "".join(self.renderer.render_node(child, self) for child in node.children)
        finally:
            self.ancestors.pop()

    def extract_image(self, alt: str, src: str) -> str:
        """Decode a data URI into a CollectedImage and return its filename.

        The filename is allocated even if decoding fails, so the reference
        can stay in the output; the failure is recorded in ``failed_images``.
        """
        mime_type = mime_type_of(src)
        filename = self.filenames.allocate(alt, mime_type)
        try:
            data = decode_data_uri(src)
        except ImageExtractionError as e:
            logger.warning("Could not extract image %s: %s", filename, e)
            self.failed_images.append(filename)
        else:
            self.images.append(CollectedImage(filename=filename, mime_type=mime_type, data=data))
        return filename


class MarkdownRenderer:
    """Render tree snapshots to Markdown.

    Usage:
        >>> from domdown.nodes import element
        >>> renderer = MarkdownRenderer()
        >>> renderer.render(element("h2", "Title")).markdown
        '## Title'

    Thread Safety:
        The renderer is immutable after construction. Each render() call
        creates an independent RenderContext.
    """

    __slots__ = ("_config", "_rules")

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Render configuration (uses the context default if None)
        """
        self._config = config if config is not None else get_render_config()
        rules: dict[str, RenderRule] = dict(DEFAULT_RULES)
        if self._config.rules:
            rules.update({tag.lower(): rule for tag, rule in self._config.rules.items()})
        self._rules = rules

    @property
    def config(self) -> RenderConfig:
        return self._config

    def rule_for(self, node: ElementNode) -> RenderRule:
        """Strategy used for ``node`` (transparent tags excluded)."""
        marker = self._config.inline_code_class
        if marker and marker in node.class_list:
            return inline_code
        return self._rules.get(node.tag.lower(), pass_through)

    def render(self, root: Node | None) -> RenderResult:
        """Render a tree to Markdown.

        Args:
            root: Root node; None renders to an empty result

        Returns:
            RenderResult with the Markdown and any extracted images
        """
        if root is None:
            return RenderResult(markdown="")

        ctx = RenderContext(renderer=self)
        try:
            raw = self.render_node(root, ctx)
        except RecursionError:
            logger.warning("Tree too deep to render structurally, falling back to plain text")
            raw = text_content(root)
        markdown = collapse_blank_lines(raw).strip()
        return RenderResult(
            markdown=markdown,
            images=tuple(ctx.images),
            failed_images=tuple(ctx.failed_images),
        )

    def render_node(self, node: Node, ctx: RenderContext) -> str:
        match node:
            case TextNode():
                return node.text
            case ElementNode():
                if node.tag.lower() in self._config.transparent_tags:
                    return ctx.render_children(node)
                return self.rule_for(node)(node, ctx)
            case _:
                return ""


def render(root: Node | None, config: RenderConfig | None = None) -> RenderResult:
    """Render a tree snapshot to Markdown.

    Args:
        root: Root node (None yields an empty result)
        config: Render configuration (uses the context default if None)

    Returns:
        RenderResult, unpackable as ``(markdown, images)``

    Example:
        >>> from domdown.nodes import element
        >>> markdown, images = render(element("ul", element("li", "A"), element("li", "B")))
        >>> print(markdown)
        - A
        - B
    """
    return MarkdownRenderer(config).render(root)


def render_markdown(root: Node | None, config: RenderConfig | None = None) -> str:
    """Render a tree snapshot and return only the Markdown string."""
    return MarkdownRenderer(config).render(root).markdown
