"""Embedded image extraction.

Decodes ``data:image/...`` URIs found on ``<img>`` elements and assigns each
one a filename that is unique within a single render run.

Example:
    >>> allocator = FilenameAllocator()
    >>> allocator.allocate("", "image/png")
    'image_1.png'
    >>> allocator.allocate("", "image/jpeg")
    'image_2.jpg'
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from urllib.parse import unquote_to_bytes

from domdown.errors import ImageExtractionError
from domdown.utils.text import sanitize_filename

DATA_IMAGE_PREFIX = "data:image/"

DEFAULT_MIME_TYPE = "image/png"

_MIME_PATTERN = re.compile(r"^data:(image/[^;,]+)", re.IGNORECASE)

_EXTENSIONS: dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/svg": "svg",
    "image/bmp": "bmp",
    "image/x-icon": "ico",
    "image/vnd.microsoft.icon": "ico",
    "image/avif": "avif",
}


@dataclass(frozen=True, slots=True)
class CollectedImage:
    """An image decoded from a data URI during one render.

    ``filename`` is unique within the render that produced it and appears
    verbatim in the emitted ``![alt](filename)`` reference.
    """

    filename: str
    mime_type: str
    data: bytes


def is_data_image(src: str) -> bool:
    return src.startswith(DATA_IMAGE_PREFIX)


def mime_type_of(src: str) -> str:
    """MIME type declared in a data URI header, defaulting to ``image/png``."""
    match = _MIME_PATTERN.match(src)
    return match.group(1).lower() if match else DEFAULT_MIME_TYPE


def extension_for(mime_type: str) -> str:
    """File extension for an image MIME type, defaulting to ``png``."""
    return _EXTENSIONS.get(mime_type.lower(), "png")


def decode_data_uri(src: str) -> bytes:
    """Decode the payload of a data URI.

    Base64 payloads (``;base64`` in the header) are strictly validated;
    others are percent-decoded.

    Raises:
        ImageExtractionError: If there is no payload separator or the base64
            payload is invalid.
    """
    header, sep, payload = src.partition(",")
    if not sep:
        raise ImageExtractionError("data URI has no ',' separating header and payload")
    if ";base64" in header.lower():
        # Browsers tolerate whitespace inside base64 attribute values
        compact = "".join(payload.split())
        try:
            return base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageExtractionError(f"invalid base64 payload: {e}") from e
    return unquote_to_bytes(payload)


@dataclass(slots=True)
class FilenameAllocator:
    """Per-run filename generator.

    Every allocation advances the counter. Names come from the alt text when
    it is usable, otherwise ``image_<counter>``. Collisions within the run get
    ``_<counter>`` inserted before the extension.

    Never shared between renders: each ``render()`` builds a fresh one, so
    numbering always starts at 1.
    """

    counter: int = 0
    used: set[str] = field(default_factory=set)

    def allocate(self, alt: str, mime_type: str) -> str:
        self.counter += 1
        ext = extension_for(mime_type)
        stem = sanitize_filename(alt)
        if not stem or stem == "image":
            stem = f"image_{self.counter}"
        name = stem if stem.endswith("." + ext) else f"{stem}.{ext}"
        while name in self.used:
            base = name[: -(len(ext) + 1)]
            name = f"{base}_{self.counter}.{ext}"
        self.used.add(name)
        return name
