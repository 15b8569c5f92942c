"""Text processing utilities for domdown.

Example:
    >>> from domdown.utils.text import sanitize_filename
    >>> sanitize_filename("My chart (v2).png")
    'My_chart_v2.png'
"""

from __future__ import annotations

import re

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_\-\s.]")
_UNSAFE_TITLE_CHARS = re.compile(r"[^A-Za-z0-9_\-\s]")
_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINE_RUN = re.compile(r"\n{3,}")


def sanitize_filename(text: str, max_length: int = 60, *, allow_dots: bool = True) -> str:
    """Reduce text to a filesystem-safe name.

    Keeps ASCII letters, digits, underscore, hyphen (and dots unless
    ``allow_dots`` is False), turns whitespace runs into ``_`` and truncates.

    Args:
        text: Text to sanitize (alt text, a title, ...)
        max_length: Maximum length of the result
        allow_dots: Keep ``.`` characters

    Returns:
        Safe name, possibly empty

    Examples:
        >>> sanitize_filename("a b\\tc")
        'a_b_c'
        >>> sanitize_filename("x.y", allow_dots=False)
        'xy'
    """
    if not text:
        return ""
    pattern = _UNSAFE_FILENAME_CHARS if allow_dots else _UNSAFE_TITLE_CHARS
    name = pattern.sub("", text)
    name = _WHITESPACE_RUN.sub("_", name)
    return name[:max_length]


def collapse_blank_lines(text: str) -> str:
    """Collapse 3+ consecutive newlines to exactly two.

    Examples:
        >>> collapse_blank_lines("a\\n\\n\\n\\nb")
        'a\\n\\nb'
    """
    return _BLANK_LINE_RUN.sub("\n\n", text)


def indent_continuation(first_prefix: str, content: str) -> str:
    """Prefix the first line and align continuation lines under it.

    Blank continuation lines stay empty.

    Examples:
        >>> indent_continuation("- ", "a\\nb")
        '- a\\n  b'
    """
    pad = " " * len(first_prefix)
    lines = content.split("\n")
    rest = [pad + line if line else "" for line in lines[1:]]
    return "\n".join([first_prefix + lines[0], *rest])
