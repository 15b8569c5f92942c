"""Tests for text utilities."""

from hypothesis import given
from hypothesis import strategies as st

from domdown.utils.text import collapse_blank_lines, indent_continuation, sanitize_filename


class TestSanitizeFilename:
    def test_keeps_safe_characters(self) -> None:
        assert sanitize_filename("plot-1_final.v2") == "plot-1_final.v2"

    def test_whitespace_runs_become_underscores(self) -> None:
        assert sanitize_filename("a  b\tc") == "a_b_c"

    def test_drops_everything_else(self) -> None:
        assert sanitize_filename("résumé/≈*?") == "rsum"

    def test_dots_can_be_disallowed(self) -> None:
        assert sanitize_filename("v1.2 notes", allow_dots=False) == "v12_notes"

    def test_truncates(self) -> None:
        assert sanitize_filename("abcdef", max_length=3) == "abc"

    def test_empty(self) -> None:
        assert sanitize_filename("") == ""

    @given(st.text())
    def test_result_is_always_safe(self, value: str) -> None:
        name = sanitize_filename(value)
        assert len(name) <= 60
        assert all(c.isascii() and (c.isalnum() or c in "_-.") for c in name)


class TestCollapseBlankLines:
    def test_collapses_runs(self) -> None:
        assert collapse_blank_lines("a\n\n\n\n\nb\n\n\nc") == "a\n\nb\n\nc"

    def test_leaves_single_blank_lines(self) -> None:
        assert collapse_blank_lines("a\n\nb\nc") == "a\n\nb\nc"

    @given(st.text(alphabet="ab\n "))
    def test_idempotent(self, value: str) -> None:
        once = collapse_blank_lines(value)
        assert collapse_blank_lines(once) == once
        assert "\n\n\n" not in once


class TestIndentContinuation:
    def test_aligns_under_marker(self) -> None:
        assert indent_continuation("10. ", "a\nb") == "10. a\n    b"

    def test_blank_lines_stay_empty(self) -> None:
        assert indent_continuation("- ", "a\n\nb") == "- a\n\n  b"

    def test_single_line(self) -> None:
        assert indent_continuation("- ", "a") == "- a"
