"""Built-in tag strategies for the Markdown renderer.

A strategy receives the element and the per-run ``RenderContext`` and returns
the Markdown for that element. Strategies that need their children's output
ask the context for it, so code blocks and inline code (which use raw text)
never descend.

``DEFAULT_RULES`` maps lower-cased tag names to strategies. Any tag missing
from the table is rendered by ``pass_through``.

Custom strategies:
    def keyboard(node: ElementNode, ctx: RenderContext) -> str:
        return f"<kbd>{ctx.render_children(node).strip()}</kbd>"

    config = RenderConfig(rules={"kbd": keyboard})
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from domdown.images import is_data_image
from domdown.nodes import ElementNode, find_first, iter_elements, text_content
from domdown.utils.logger import get_logger
from domdown.utils.text import collapse_blank_lines, indent_continuation

if TYPE_CHECKING:
    from domdown.renderers.markdown import RenderContext

logger = get_logger(__name__)

type RenderRule = Callable[[ElementNode, RenderContext], str]

_LANGUAGE_CLASS = re.compile(r"language-(\w+)")
_NEWLINE_RUN = re.compile(r"\n+")

# Rows and cells of a nested table belong to that table
_TABLE_STOP = frozenset(("table",))


def pass_through(node: ElementNode, ctx: RenderContext) -> str:
    """Default policy: children concatenated, no markup added."""
    return ctx.render_children(node)


def heading(level: int) -> RenderRule:
    """Strategy factory for ``h1``..``h6``."""
    marker = "#" * level

    def render_heading(node: ElementNode, ctx: RenderContext) -> str:
        return f"\n\n{marker} {ctx.render_children(node).strip()}\n\n"

    return render_heading


def paragraph(node: ElementNode, ctx: RenderContext) -> str:
    content = ctx.render_children(node).strip()
    return f"\n\n{content}\n\n" if content else ""


def line_break(node: ElementNode, ctx: RenderContext) -> str:
    return "\n"


def horizontal_rule(node: ElementNode, ctx: RenderContext) -> str:
    return "\n\n---\n\n"


def blockquote(node: ElementNode, ctx: RenderContext) -> str:
    lines = collapse_blank_lines(ctx.render_children(node).strip()).split("\n")
    return "\n\n" + "\n".join(f"> {line}" for line in lines) + "\n\n"


def code_block(node: ElementNode, ctx: RenderContext) -> str:
    """Fenced code block from ``<pre>``.

    Text comes from the first ``<code>`` descendant when present. The
    language is read from a ``language-X`` class, then ``data-lang``, then
    a ``language`` attribute.
    """
    code_el = find_first(node, "code")
    source = code_el if code_el is not None else node
    match = _LANGUAGE_CLASS.search(source.class_attr)
    if match:
        lang = match.group(1)
    else:
        lang = node.get("data-lang") or node.get("language")
    code = text_content(source).rstrip()
    return f"\n\n```{lang}\n{code}\n```\n\n"


def _list_items(node: ElementNode, transparent: frozenset[str]) -> list[ElementNode]:
    """Direct ``<li>`` children, looking through transparent wrappers."""
    items: list[ElementNode] = []
    for child in node.children:
        if not isinstance(child, ElementNode):
            continue
        tag = child.tag.lower()
        if tag == "li":
            items.append(child)
        elif tag in transparent:
            items.extend(_list_items(child, transparent))
    return items


def unordered_list(node: ElementNode, ctx: RenderContext) -> str:
    items = _list_items(node, ctx.config.transparent_tags)
    if not items:
        logger.debug("<%s> without list items, rendering children", node.tag)
        return ctx.render_children(node)
    lines = [indent_continuation("- ", ctx.render(item).strip()) for item in items]
    return "\n\n" + "\n".join(lines) + "\n\n"


def ordered_list(node: ElementNode, ctx: RenderContext) -> str:
    items = _list_items(node, ctx.config.transparent_tags)
    if not items:
        logger.debug("<%s> without list items, rendering children", node.tag)
        return ctx.render_children(node)
    try:
        start = int(node.get("start", "1").strip())
    except ValueError:
        start = 1
    lines = [
        indent_continuation(f"{start + i}. ", ctx.render(item).strip())
        for i, item in enumerate(items)
    ]
    return "\n\n" + "\n".join(lines) + "\n\n"


def _cell_text(cell: ElementNode, ctx: RenderContext) -> str:
    content = ctx.render(cell).strip().replace("|", "\\|")
    return _NEWLINE_RUN.sub(" ", content)


def _table_row(cells: list[str]) -> str:
    return "|" + "|".join(f" {c} " if c else " " for c in cells) + "|"


def table(node: ElementNode, ctx: RenderContext) -> str:
    """Pipe table.

    Rows are gathered from any depth (wrappers included); the first row is
    the header. Short rows are padded with empty cells.
    """
    rows: list[list[str]] = []
    for tr in iter_elements(node, stop=_TABLE_STOP):
        if tr.tag.lower() != "tr":
            continue
        rows.append([
            _cell_text(cell, ctx)
            for cell in iter_elements(tr, stop=_TABLE_STOP)
            if cell.tag.lower() in ("td", "th")
        ])
    col_count = max((len(r) for r in rows), default=0)
    if not col_count:
        logger.debug("<table> without cells, rendering children")
        return ctx.render_children(node)

    padded = [r + [""] * (col_count - len(r)) for r in rows]
    lines = [_table_row(r) for r in padded]
    lines.insert(1, _table_row(["---"] * col_count))
    return "\n\n" + "\n".join(lines) + "\n\n"


def bold(node: ElementNode, ctx: RenderContext) -> str:
    content = ctx.render_children(node).strip()
    return f"**{content}**" if content else ""


def italic(node: ElementNode, ctx: RenderContext) -> str:
    content = ctx.render_children(node).strip()
    return f"*{content}*" if content else ""


def strikethrough(node: ElementNode, ctx: RenderContext) -> str:
    return f"~~{ctx.render_children(node).strip()}~~"


def inline_code(node: ElementNode, ctx: RenderContext) -> str:
    """Backtick-wrapped raw text, or bare text directly inside ``<pre>``."""
    parent = ctx.parent
    if parent is not None and parent.tag.lower() == "pre":
        return text_content(node)
    return f"`{text_content(node)}`"


def link(node: ElementNode, ctx: RenderContext) -> str:
    href = node.get("href").strip()
    label = ctx.render_children(node).strip()
    return f"[{label}]({href})" if href and label else label


def image(node: ElementNode, ctx: RenderContext) -> str:
    config = ctx.config
    alt = node.get("alt") or config.default_alt
    src = node.get("src")

    if any(marker in src for marker in config.spinner_markers) or (
        node.class_list & config.spinner_classes
    ):
        return config.spinner_placeholder

    if config.extract_images and is_data_image(src):
        filename = ctx.extract_image(alt, src)
        return f"![{alt}]({filename})"

    if src:
        return f"![{alt}]({src})"
    return ""


CONTAINER_TAGS: frozenset[str] = frozenset((
    "div", "section", "article", "main", "span", "figure", "figcaption",
    "details", "summary", "li", "td", "th", "tr", "thead", "tbody", "tfoot",
))

DEFAULT_RULES: dict[str, RenderRule] = {
    **{f"h{n}": heading(n) for n in range(1, 7)},
    "p": paragraph,
    "br": line_break,
    "hr": horizontal_rule,
    "blockquote": blockquote,
    "pre": code_block,
    "ul": unordered_list,
    "ol": ordered_list,
    "table": table,
    "strong": bold,
    "b": bold,
    "em": italic,
    "i": italic,
    "s": strikethrough,
    "del": strikethrough,
    "strike": strikethrough,
    "code": inline_code,
    "a": link,
    "img": image,
    **{tag: pass_through for tag in CONTAINER_TAGS},
}


__all__ = [
    "CONTAINER_TAGS",
    "DEFAULT_RULES",
    "RenderRule",
    "pass_through",
]
