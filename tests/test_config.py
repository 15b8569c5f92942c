"""Tests for RenderConfig and the ContextVar-based default."""

import threading

import pytest

from domdown import element, render
from domdown.config import (
    AI_STUDIO,
    AI_STUDIO_TRANSPARENT_TAGS,
    DIALECTS,
    PLAIN,
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from domdown.renderers.markdown import MarkdownRenderer


@pytest.fixture(autouse=True)
def _reset_config():
    yield
    reset_render_config()


class TestDefaults:
    def test_default_is_ai_studio(self) -> None:
        assert get_render_config() is AI_STUDIO
        assert AI_STUDIO.transparent_tags == AI_STUDIO_TRANSPARENT_TAGS

    def test_ai_studio_wrappers(self) -> None:
        assert {"ms-cmark-node", "ms-text-chunk", "ms-prompt-chunk"} == AI_STUDIO.transparent_tags

    def test_plain_has_no_dialect_rules(self) -> None:
        assert PLAIN.transparent_tags == frozenset()
        assert PLAIN.inline_code_class is None
        assert PLAIN.spinner_markers == ()

    def test_dialect_registry(self) -> None:
        assert DIALECTS == {"ai-studio": AI_STUDIO, "plain": PLAIN}

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            AI_STUDIO.extract_images = False  # type: ignore[misc]


class TestWithTransparent:
    def test_adds_lowercased_tags(self) -> None:
        config = PLAIN.with_transparent("X-Wrap", "y-wrap")
        assert config.transparent_tags == {"x-wrap", "y-wrap"}
        assert PLAIN.transparent_tags == frozenset()

    def test_keeps_existing_tags(self) -> None:
        assert AI_STUDIO.with_transparent("x").transparent_tags == AI_STUDIO_TRANSPARENT_TAGS | {"x"}


class TestContextVar:
    def test_set_and_reset(self) -> None:
        set_render_config(PLAIN)
        assert get_render_config() is PLAIN
        reset_render_config()
        assert get_render_config() is AI_STUDIO

    def test_context_manager_restores(self) -> None:
        with render_config_context(PLAIN):
            assert get_render_config() is PLAIN
        assert get_render_config() is AI_STUDIO

    def test_context_manager_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError), render_config_context(PLAIN):
            raise RuntimeError("boom")
        assert get_render_config() is AI_STUDIO

    def test_render_uses_context_default(self) -> None:
        node = element("span", "x", classes="inline-code")
        assert render(node).markdown == "`x`"
        with render_config_context(PLAIN):
            assert render(node).markdown == "x"

    def test_renderer_snapshots_config_at_construction(self) -> None:
        renderer = MarkdownRenderer()
        with render_config_context(PLAIN):
            assert renderer.config is AI_STUDIO

    def test_other_threads_unaffected(self) -> None:
        set_render_config(PLAIN)
        seen: list[RenderConfig] = []
        thread = threading.Thread(target=lambda: seen.append(get_render_config()))
        thread.start()
        thread.join()
        assert seen == [AI_STUDIO]
