"""Utility modules for domdown.

Provides:
- text: sanitize_filename, collapse_blank_lines, indent_continuation
- logger: get_logger for logging
"""

from domdown.utils.logger import get_logger
from domdown.utils.text import collapse_blank_lines, indent_continuation, sanitize_filename

__all__ = [
    "collapse_blank_lines",
    "get_logger",
    "indent_continuation",
    "sanitize_filename",
]
