"""Render configuration for domdown.

A ``RenderConfig`` describes one source-document dialect: which wrapper tags
are transparent, which tags get custom strategies, and the image policy.
It is immutable, so a single instance can be shared by any number of renders.

A ContextVar holds the default config used when ``render()`` is called without
one. Set it once per context (thread, task) or scope it with the context manager.

Usage:
    from domdown import render
    from domdown.config import RenderConfig, render_config_context, PLAIN

    result = render(tree, RenderConfig(extract_images=False))

    with render_config_context(PLAIN):
        result = render(tree)

"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domdown.renderers.rules import RenderRule

# Google AI Studio wraps rendered Markdown in these custom elements
AI_STUDIO_TRANSPARENT_TAGS: frozenset[str] = frozenset(
    ("ms-cmark-node", "ms-text-chunk", "ms-prompt-chunk")
)


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Defaults describe the AI Studio dialect. Use ``PLAIN`` for generic HTML.

    Attributes:
        transparent_tags: Wrapper tags rendered as the bare concatenation of
            their children
        rules: Per-tag strategy overrides, merged over the built-in rule table
        extract_images: Decode ``data:image/`` sources into CollectedImage records
        inline_code_class: Class that marks an element as inline code (None disables)
        spinner_markers: Substrings of ``src`` identifying a loading spinner
        spinner_classes: Classes identifying a loading spinner image
        spinner_placeholder: Markdown emitted in place of a spinner
        default_alt: Alt text used when an image has none

    """

    transparent_tags: frozenset[str] = AI_STUDIO_TRANSPARENT_TAGS
    rules: Mapping[str, RenderRule] | None = None
    extract_images: bool = True
    inline_code_class: str | None = "inline-code"
    spinner_markers: tuple[str, ...] = ("watermark/watermark.png",)
    spinner_classes: frozenset[str] = frozenset(("thinking-progress-icon",))
    spinner_placeholder: str = "![Thinking](watermark.png)"
    default_alt: str = "image"

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> RenderConfig:
        """Create RenderConfig from dictionary.

        Useful when configuration comes from a file or command-line options.
        Unknown keys are silently ignored. Sequences are coerced to the
        field's collection type, and tag names are lower-cased.

        Example:
            >>> config = RenderConfig.from_dict({
            ...     "transparent_tags": ["x-wrap"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.transparent_tags
            frozenset({'x-wrap'})

        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "transparent_tags" in filtered:
            filtered["transparent_tags"] = frozenset(
                t.lower() for t in filtered["transparent_tags"]
            )
        if "spinner_classes" in filtered:
            filtered["spinner_classes"] = frozenset(filtered["spinner_classes"])
        if "spinner_markers" in filtered:
            markers = filtered["spinner_markers"]
            filtered["spinner_markers"] = (markers,) if isinstance(markers, str) else tuple(markers)
        return cls(**filtered)

    def with_transparent(self, *tags: str) -> RenderConfig:
        """Return a copy with extra transparent tags."""
        return dataclasses.replace(
            self, transparent_tags=self.transparent_tags | {t.lower() for t in tags}
        )


AI_STUDIO: RenderConfig = RenderConfig()

PLAIN: RenderConfig = RenderConfig(
    transparent_tags=frozenset(),
    inline_code_class=None,
    spinner_markers=(),
    spinner_classes=frozenset(),
)

DIALECTS: dict[str, RenderConfig] = {
    "ai-studio": AI_STUDIO,
    "plain": PLAIN,
}

_render_config: ContextVar[RenderConfig] = ContextVar("render_config", default=AI_STUDIO)


def get_render_config() -> RenderConfig:
    """Get the render configuration active in this context."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set the render configuration for the current context.

    Only affects the current thread's context. Other threads are unaffected.
    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to the default (AI Studio) configuration."""
    _render_config.set(AI_STUDIO)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with render_config_context(PLAIN):
        ...     get_render_config().transparent_tags
        frozenset()

    """
    token = _render_config.set(config)
    try:
        yield
    finally:
        _render_config.reset(token)


__all__ = [
    "AI_STUDIO",
    "AI_STUDIO_TRANSPARENT_TAGS",
    "DIALECTS",
    "PLAIN",
    "RenderConfig",
    "get_render_config",
    "render_config_context",
    "reset_render_config",
    "set_render_config",
]
