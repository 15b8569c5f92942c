"""Exception classes for domdown.

Provides standardized exceptions for error handling throughout domdown.
Rendering itself never raises; these cover the layers around it.
"""

from __future__ import annotations


class DomdownError(Exception):
    """Base exception for all domdown errors.

    Subclass this for specific error categories.
    """

    pass


class SnapshotError(DomdownError):
    """Malformed tree snapshot.

    Raised when a serialized snapshot has an unknown node type or fields of
    the wrong shape.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize snapshot error with optional location.

        Args:
            message: Error description
            path: JSON-pointer-like path to the offending value (e.g. "/children/2")
        """
        self.message = message
        self.path = path
        location = f"{path}: " if path else ""
        super().__init__(f"{location}{message}")


class SelectorError(DomdownError):
    """Unsupported or malformed selector.

    Only compound selectors (tag, class, id and attribute tests) separated by
    commas are supported.
    """

    def __init__(self, selector: str, message: str) -> None:
        self.selector = selector
        super().__init__(f"Selector {selector!r}: {message}")


class ImageExtractionError(DomdownError):
    """A data URI could not be decoded.

    Caught by the renderer, which records the image as failed and keeps the
    Markdown reference in the output.
    """

    pass
