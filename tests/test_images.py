"""Tests for data-URI decoding and filename allocation."""

import pytest

from domdown.errors import ImageExtractionError
from domdown.images import (
    FilenameAllocator,
    decode_data_uri,
    extension_for,
    is_data_image,
    mime_type_of,
)


class TestDataUriHeader:
    def test_is_data_image(self) -> None:
        assert is_data_image("data:image/png;base64,AAAA")
        assert not is_data_image("data:text/plain,hi")
        assert not is_data_image("https://x.dev/data:image/png")

    def test_mime_type(self) -> None:
        assert mime_type_of("data:image/webp;base64,AAAA") == "image/webp"
        assert mime_type_of("data:image/SVG+XML,<svg/>") == "image/svg+xml"

    def test_mime_type_default(self) -> None:
        assert mime_type_of("data:;base64,AAAA") == "image/png"

    def test_extension_map(self) -> None:
        assert extension_for("image/jpeg") == "jpg"
        assert extension_for("image/svg+xml") == "svg"
        assert extension_for("image/x-icon") == "ico"
        assert extension_for("IMAGE/GIF") == "gif"

    def test_unknown_mime_falls_back_to_png(self) -> None:
        assert extension_for("image/x-made-up") == "png"


class TestDecode:
    def test_base64(self) -> None:
        assert decode_data_uri("data:image/png;base64,aGVsbG8=") == b"hello"

    def test_base64_tolerates_whitespace(self) -> None:
        assert decode_data_uri("data:image/png;base64,aGVs\n bG8=") == b"hello"

    def test_percent_encoded(self) -> None:
        assert decode_data_uri("data:image/svg+xml,%3Csvg%2F%3E") == b"<svg/>"

    def test_invalid_base64_raises(self) -> None:
        with pytest.raises(ImageExtractionError, match="invalid base64"):
            decode_data_uri("data:image/png;base64,not*base64")

    def test_missing_separator_raises(self) -> None:
        with pytest.raises(ImageExtractionError):
            decode_data_uri("data:image/png;base64")


class TestFilenameAllocator:
    def test_alt_text_is_sanitized(self) -> None:
        assert FilenameAllocator().allocate("My chart (v2)", "image/png") == "My_chart_v2.png"

    def test_generic_alt_uses_counter(self) -> None:
        alloc = FilenameAllocator()
        assert alloc.allocate("image", "image/png") == "image_1.png"
        assert alloc.allocate("", "image/gif") == "image_2.gif"
        assert alloc.allocate("!!!", "image/png") == "image_3.png"

    def test_counter_advances_for_named_images(self) -> None:
        alloc = FilenameAllocator()
        assert alloc.allocate("chart", "image/png") == "chart.png"
        assert alloc.allocate("", "image/png") == "image_2.png"

    def test_existing_extension_not_doubled(self) -> None:
        assert FilenameAllocator().allocate("photo.png", "image/png") == "photo.png"
        assert FilenameAllocator().allocate("photo.png", "image/jpeg") == "photo.png.jpg"

    def test_long_alt_truncated(self) -> None:
        name = FilenameAllocator().allocate("x" * 200, "image/png")
        assert name == "x" * 60 + ".png"

    def test_collisions_get_counter_suffix(self) -> None:
        alloc = FilenameAllocator()
        names = [alloc.allocate("plot", "image/png") for _ in range(3)]
        assert names == ["plot.png", "plot_2.png", "plot_3.png"]

    def test_unique_across_many_allocations(self) -> None:
        alloc = FilenameAllocator()
        alts = ["a", "", "a", "image", "a_2", "", "a"]
        names = [alloc.allocate(alt, "image/png") for alt in alts]
        assert len(set(names)) == len(names)
