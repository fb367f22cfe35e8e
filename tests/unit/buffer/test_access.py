"""Tests for remove, get, set and find."""
from __future__ import annotations

import pytest


class TestRemove:
    """Tests for remove-at-index with shift."""

    def test_remove_first(self, registry) -> None:
        """Removing index 0 shifts everything left."""
        s = registry.construct(b"hello world")

        assert s.remove(0) == ord("h")
        assert s == b"ello world"
        assert s.length == 10

    def test_remove_last(self, registry) -> None:
        """Removing the last byte needs no shift."""
        s = registry.construct(b"abc")

        assert s.remove(2) == ord("c")
        assert s == b"ab"

    def test_remove_middle_keeps_terminator(self, registry) -> None:
        """Terminator follows the shortened content."""
        s = registry.construct(b"abc")
        s.remove(1)

        assert s.c_str() == b"ac\x00"

    def test_remove_out_of_range(self, registry) -> None:
        """Index length is out of range for remove."""
        from cstrbuf.exceptions import RangeError

        s = registry.construct(b"abc")

        with pytest.raises(RangeError):
            s.remove(3)
        with pytest.raises(RangeError):
            s.remove(-1)

        assert s == b"abc"

    def test_remove_from_empty(self, registry) -> None:
        """Nothing can be removed from an empty handle."""
        from cstrbuf.exceptions import RangeError

        s = registry.construct()

        with pytest.raises(RangeError):
            s.remove(0)

    def test_remove_keeps_capacity(self, registry) -> None:
        """Remove never reallocates."""
        s = registry.construct(b"abc")
        capacity = s.capacity
        s.remove(0)

        assert s.capacity == capacity


class TestGetSet:
    """Tests for bounds-checked byte access."""

    def test_get(self, registry) -> None:
        """get returns the byte value."""
        s = registry.construct(b"abc")

        assert s.get(0) == ord("a")
        assert s.get(2) == ord("c")

    def test_get_out_of_range(self, registry) -> None:
        """get outside [0, length) raises RangeError."""
        from cstrbuf.exceptions import RangeError

        s = registry.construct(b"abc")

        with pytest.raises(RangeError) as exc_info:
            s.get(3)

        assert exc_info.value.lower == 0
        assert exc_info.value.upper == 3

    def test_get_terminator_not_readable(self, registry) -> None:
        """The terminator is not part of the content."""
        from cstrbuf.exceptions import RangeError

        s = registry.construct()

        with pytest.raises(RangeError):
            s.get(0)

    def test_set_returns_previous(self, registry) -> None:
        """set overwrites and returns the old byte."""
        s = registry.construct(b"abc")

        assert s.set(1, ord("X")) == ord("b")
        assert s == b"aXc"

    def test_set_out_of_range(self, registry) -> None:
        """set at length raises RangeError."""
        from cstrbuf.exceptions import RangeError

        s = registry.construct(b"abc")

        with pytest.raises(RangeError):
            s.set(3, 0)

        assert s == b"abc"

    def test_set_invalid_byte(self, registry) -> None:
        """Values outside 0..255 are rejected."""
        s = registry.construct(b"abc")

        with pytest.raises(ValueError):
            s.set(0, 256)
        with pytest.raises(ValueError):
            s.set(0, -1)

        assert s == b"abc"


class TestFind:
    """Tests for first-occurrence search."""

    def test_find(self, registry) -> None:
        """find returns the offset of the first match."""
        s = registry.construct(b"llo")

        assert s.find(b"lo") == 1

    def test_find_first_occurrence(self, registry) -> None:
        """Only the first match is reported."""
        s = registry.construct(b"abcabc")

        assert s.find(b"bc") == 1

    def test_find_not_found(self, registry) -> None:
        """Missing pattern returns NOT_FOUND."""
        from cstrbuf.buffer import NOT_FOUND

        s = registry.construct(b"abc")

        assert s.find(b"zz") == NOT_FOUND
        assert NOT_FOUND == -1

    def test_find_empty_pattern(self, registry) -> None:
        """An empty pattern matches at offset 0."""
        s = registry.construct(b"abc")

        assert s.find(b"") == 0

    def test_find_empty_pattern_empty_handle(self, registry) -> None:
        """An empty pattern matches at 0 even with no content."""
        s = registry.construct()

        assert s.find(b"") == 0

    def test_find_ignores_stale_bytes(self) -> None:
        """Bytes past length left by an unscrubbed clear are not searched."""
        from cstrbuf.buffer import NOT_FOUND
        from cstrbuf.config import GrowthStrategy
        from cstrbuf.registry import InstanceRegistry

        with InstanceRegistry(GrowthStrategy(scrub_on_clear=False)) as reg:
            s = reg.construct(b"secret")
            s.clear()
            s.append(b"ab")

            assert s.find(b"ret") == NOT_FOUND

    def test_find_past_embedded_nul(self, registry) -> None:
        """Search covers bytes after an embedded 0."""
        s = registry.construct(b"a\x00bc")

        assert s.find(b"bc") == 2

    def test_find_pattern_longer_than_content(self, registry) -> None:
        """A pattern longer than the content is not found."""
        s = registry.construct(b"ab")

        assert s.find(b"abc") == -1
