"""domdown renderers.

Renderers convert tree snapshots into output formats.

Available Renderers:
- MarkdownRenderer: Renders snapshots to Markdown, extracting embedded images

Thread Safety:
All per-render state lives in a RenderContext local to each render() call.
Safe for concurrent use from multiple threads.

"""

from domdown.renderers.markdown import (
    MarkdownRenderer,
    RenderContext,
    RenderResult,
    render,
    render_markdown,
)
from domdown.renderers.protocol import TreeRenderer
from domdown.renderers.rules import DEFAULT_RULES, RenderRule, pass_through

__all__ = [
    "DEFAULT_RULES",
    "MarkdownRenderer",
    "RenderContext",
    "RenderResult",
    "RenderRule",
    "TreeRenderer",
    "pass_through",
    "render",
    "render_markdown",
]
