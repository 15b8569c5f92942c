"""
domdown: DOM snapshots to Markdown

Converts a DOM-like tree (rendered chat transcripts, saved pages, DevTools
outerHTML dumps) back into Markdown. Application wrapper elements are
unwrapped through a configurable transparent-tag set, nested lists and
tables are rebuilt, and embedded data-URI images are extracted into
separate files with collision-free names.

Quick Start:
    >>> from domdown import convert
    >>> result = convert("<h2>Notes</h2><ul><li>one</li><li>two</li></ul>")
    >>> print(result.markdown)
    ## Notes
    <BLANKLINE>
    - one
    - two

    >>> # Or work with the tree directly
    >>> from domdown import element, render
    >>> markdown, images = render(element("p", "Hello ", element("b", "world")))
    >>> markdown
    'Hello **world**'

Dialects:
    >>> from domdown import Converter, PLAIN
    >>> converter = Converter(PLAIN)
    >>> converter("<p>x</p>").markdown
    'x'

Installation:
    pip install domdown              # zero runtime dependencies
"""

from __future__ import annotations

from collections.abc import Callable

from domdown.cleanup import Policy, ai_studio_chrome, cleanup, identity, strip_selectors
from domdown.config import (
    AI_STUDIO,
    DIALECTS,
    PLAIN,
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from domdown.errors import DomdownError, ImageExtractionError, SelectorError, SnapshotError
from domdown.images import CollectedImage
from domdown.nodes import ElementNode, Node, TextNode, element, text, text_content
from domdown.parser import parse_html
from domdown.renderers.markdown import (
    MarkdownRenderer,
    RenderContext,
    RenderResult,
    render,
    render_markdown,
)
from domdown.renderers.protocol import TreeRenderer
from domdown.renderers.rules import DEFAULT_RULES, RenderRule
from domdown.serialization import from_dict, from_json, to_dict, to_json
from domdown.transcript import Transcript, TranscriptBuilder, Turn, render_transcript
from domdown.visitor import transform

__version__ = "0.1.0"


class Converter:
    """HTML in, Markdown out: parse, clean up, render.

    Usage:
        >>> converter = Converter(policy=ai_studio_chrome)
        >>> converter("<p>Answer <button>Copy</button></p>").markdown
        'Answer'

        >>> # Already have a tree?
        >>> converter.render(element("h1", "Title")).markdown
        '# Title'

    Thread Safety:
        Immutable after construction; every call renders with a fresh
        RenderContext. Safe to share across threads.

    """

    __slots__ = ("_config", "_policy", "_renderer")

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        policy: Policy | Callable[[Node], Node] | None = None,
        renderer: TreeRenderer | None = None,
    ) -> None:
        """Initialize converter.

        Args:
            config: Render configuration (uses the context default if None)
            policy: Cleanup applied to each tree before rendering
            renderer: Custom renderer (defaults to MarkdownRenderer(config))
        """
        self._config = config if config is not None else get_render_config()
        self._policy = policy or identity
        self._renderer = renderer or MarkdownRenderer(self._config)

    @property
    def config(self) -> RenderConfig:
        return self._config

    def __call__(self, source: str, *, keep_whitespace: bool = False) -> RenderResult:
        """Parse HTML and render it in one call."""
        return self.render(parse_html(source, keep_whitespace=keep_whitespace))

    def render(self, root: Node | None) -> RenderResult:
        """Clean up and render an existing tree."""
        if root is None:
            return RenderResult(markdown="")
        return self._renderer.render(self._policy(root))


def convert(
    source: str,
    config: RenderConfig | None = None,
    *,
    policy: Policy | Callable[[Node], Node] | None = None,
) -> RenderResult:
    """Convert an HTML string to Markdown.

    Args:
        source: HTML text
        config: Render configuration (uses the context default if None)
        policy: Optional cleanup policy applied before rendering

    Returns:
        RenderResult, unpackable as ``(markdown, images)``
    """
    return Converter(config, policy=policy)(source)


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "convert",
    "render",
    "render_markdown",
    "parse_html",
    "Converter",
    # Nodes
    "Node",
    "TextNode",
    "ElementNode",
    "element",
    "text",
    "text_content",
    # Renderer
    "MarkdownRenderer",
    "RenderContext",
    "RenderResult",
    "RenderRule",
    "DEFAULT_RULES",
    "TreeRenderer",
    "CollectedImage",
    # Configuration (ContextVar-based default)
    "RenderConfig",
    "AI_STUDIO",
    "PLAIN",
    "DIALECTS",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
    # Cleanup + transform
    "Policy",
    "cleanup",
    "identity",
    "strip_selectors",
    "ai_studio_chrome",
    "transform",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Transcripts
    "Turn",
    "Transcript",
    "TranscriptBuilder",
    "render_transcript",
    # Errors
    "DomdownError",
    "SnapshotError",
    "SelectorError",
    "ImageExtractionError",
]
