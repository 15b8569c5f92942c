"""Tests for the exception hierarchy."""

import pytest

from domdown.errors import DomdownError, ImageExtractionError, SelectorError, SnapshotError


class TestHierarchy:
    @pytest.mark.parametrize("cls", [SnapshotError, SelectorError, ImageExtractionError])
    def test_subclasses_base(self, cls: type[Exception]) -> None:
        assert issubclass(cls, DomdownError)

    def test_snapshot_error_with_path(self) -> None:
        err = SnapshotError("bad tag", "/children/0")
        assert str(err) == "/children/0: bad tag"
        assert err.message == "bad tag"

    def test_snapshot_error_without_path(self) -> None:
        assert str(SnapshotError("invalid JSON")) == "invalid JSON"

    def test_selector_error(self) -> None:
        err = SelectorError("a b", "combinators are not supported")
        assert str(err) == "Selector 'a b': combinators are not supported"
        assert err.selector == "a b"
