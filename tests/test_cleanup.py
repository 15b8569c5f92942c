"""Tests for cleanup policies."""

import pytest

from domdown import parse_html, render
from domdown.cleanup import (
    Policy,
    ai_studio_chrome,
    cleanup,
    drop_empty_text,
    identity,
    normalize_unicode,
    strip_selectors,
)
from domdown.errors import SelectorError
from domdown.nodes import ElementNode, TextNode, element
from domdown.visitor import walk


def tags(root) -> list[str]:  # type: ignore[no-untyped-def]
    return [n.tag for n in walk(root) if isinstance(n, ElementNode)]


class TestStripSelectors:
    def test_removes_matching_subtrees(self) -> None:
        tree = element("div", element("p", "keep"), element("aside", element("p", "drop")))
        clean = strip_selectors("aside")(tree)
        assert tags(clean) == ["div", "p"]

    def test_root_never_removed(self) -> None:
        tree = element("div", "x")
        assert strip_selectors("div")(tree) is tree

    def test_unchanged_tree_is_shared(self) -> None:
        tree = element("div", element("p", "x"))
        assert strip_selectors(".nothing")(tree) is tree

    def test_input_not_mutated(self) -> None:
        tree = element("div", element("button", "Copy"), element("p", "x"))
        strip_selectors("button")(tree)
        assert tags(tree) == ["div", "button", "p"]

    def test_bad_selector_raises_immediately(self) -> None:
        with pytest.raises(SelectorError):
            strip_selectors("div > p")


class TestAiStudioChrome:
    def test_removes_buttons_icons_and_labels(self) -> None:
        source = (
            '<div class="turn">'
            '<div class="role-label">Model</div>'
            "<p>Answer <mat-icon>content_copy</mat-icon></p>"
            '<div class="action-buttons"><span>Rerun</span></div>'
            '<span aria-label="Copy">c</span>'
            '<span class="thumb-up-button">+1</span>'
            "<ms-chat-turn-options>opts</ms-chat-turn-options>"
            "<button>Edit</button>"
            "</div>"
        )
        assert render(ai_studio_chrome(parse_html(source))).markdown == "Answer"

    def test_content_untouched(self) -> None:
        tree = parse_html("<h2>Title</h2><p>Body</p>")
        assert ai_studio_chrome(tree) is tree


class TestTextPolicies:
    def test_normalize_unicode(self) -> None:
        tree = element("p", "a\u200bb\u202ec\ufeff")
        clean = normalize_unicode(tree)
        assert isinstance(clean, ElementNode)
        assert clean.children == (TextNode("abc"),)

    def test_drop_empty_text(self) -> None:
        tree = element("p", "", element("b", "x"), "")
        clean = drop_empty_text(tree)
        assert isinstance(clean, ElementNode)
        assert len(clean.children) == 1


class TestComposition:
    def test_pipe_applies_left_then_right(self) -> None:
        calls: list[str] = []

        def record(name: str) -> Policy:
            def fn(root):  # type: ignore[no-untyped-def]
                calls.append(name)
                return root

            return Policy(fn)

        (record("first") | record("second"))(element("div"))
        assert calls == ["first", "second"]

    def test_chained_policies(self) -> None:
        tree = element("div", element("button", "x"), element("p", "a\u200bb"))
        clean = (ai_studio_chrome | normalize_unicode)(tree)
        assert render(clean).markdown == "ab"

    def test_identity(self) -> None:
        tree = element("div")
        assert identity(tree) is tree

    def test_cleanup_accepts_plain_callables(self) -> None:
        tree = element("div", element("p", "x"))
        assert cleanup(tree, policy=lambda root: element("p", "y")) == element("p", "y")
        assert cleanup(tree, policy=strip_selectors("p")) == element("div")
