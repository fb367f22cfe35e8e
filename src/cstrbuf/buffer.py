"""
Growable null-terminated byte buffers.

This module provides StringHandle, a mutable byte string backed by a
contiguous bytearray that always carries a 0 terminator immediately
after its content, so the live buffer can be handed to C-string
consumers without a separate allocation.

Growth:
- Construction reserves max(base_reserve, len(initial)) + base_reserve
- An insert that would leave no room for the terminator reallocates to
  required + base_reserve, copies the content, then performs the insert

Thread Safety:
    Every operation runs under the owning registry's lock.
"""
from __future__ import annotations

import ctypes
import logging
from typing import Final, Optional, TYPE_CHECKING, Union

from cstrbuf.exceptions import AllocationError, InvalidHandleError, RangeError

if TYPE_CHECKING:
    from cstrbuf.registry.instance_registry import InstanceRegistry

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview, "StringHandle"]

# Returned by find() when the pattern does not occur
NOT_FOUND: Final[int] = -1


# =============================================================================
# Utility Functions
# =============================================================================


def _coerce_bytes(value: Optional[BytesLike]) -> bytes:
    """Normalize accepted inputs to an immutable bytes snapshot.

    Args:
        value: Bytes-like object, StringHandle, or None.

    Returns:
        Content as bytes (empty for None).

    Raises:
        TypeError: If value is text or another unsupported type.
    """
    if value is None:
        return b""
    if isinstance(value, StringHandle):
        return value.to_bytes()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        raise TypeError("StringHandle stores bytes; encode text before passing it")
    raise TypeError(
        f"Expected bytes-like object or StringHandle, got {type(value).__name__}"
    )


def _allocate(size: int, limit: Optional[int]) -> bytearray:
    """Allocate a zeroed buffer of size bytes.

    Raises:
        AllocationError: If size exceeds limit or memory is exhausted.
    """
    if limit is not None and size > limit:
        raise AllocationError(size, limit=limit)
    try:
        return bytearray(size)
    except MemoryError as e:
        raise AllocationError(size) from e


# =============================================================================
# StringHandle
# =============================================================================


class StringHandle:
    """Mutable, growable byte string registered with an InstanceRegistry.

    Invariants after every completed operation:
    - capacity == len(backing buffer) >= length + 1
    - the byte at index length is 0

    A handle is released either by destroy() or by its registry's
    teardown; any further operation raises InvalidHandleError.

    Example:
        with InstanceRegistry() as registry:
            s = registry.construct()
            s.append(b"world")
            s.prepend(b"hello ")
            s.remove(0)
            sub = s.substring(1, 4)   # b"llo"
            sub.find(b"lo")           # 1
    """

    __slots__ = (
        "_registry",
        "_data",
        "_capacity",
        "_length",
        "_slot",
        "__weakref__",
    )

    def __init__(
        self,
        initial: Optional[BytesLike] = None,
        *,
        registry: "InstanceRegistry",
    ) -> None:
        """Allocate a buffer, copy initial content and register.

        Args:
            initial: Optional initial content.
            registry: Registry that will own the handle.

        Raises:
            AllocationError: If the buffer cannot be allocated.
            TypeError: If initial is not bytes-like.
        """
        content = _coerce_bytes(initial)
        strategy = registry.strategy
        capacity = strategy.construct_capacity(len(content))

        self._registry = registry
        self._data: Optional[bytearray] = _allocate(capacity, strategy.max_capacity)
        self._data[: len(content)] = content
        self._capacity = capacity
        self._length = len(content)
        self._slot: Optional[int] = None

        registry.register(self)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def registry(self) -> "InstanceRegistry":
        """Registry owning this handle."""
        return self._registry

    @property
    def length(self) -> int:
        """Logical byte count."""
        return self._length

    @property
    def capacity(self) -> int:
        """Allocated bytes, terminator included."""
        return self._capacity

    @property
    def slot(self) -> Optional[int]:
        """Registry slot, None once released."""
        return self._slot

    @property
    def released(self) -> bool:
        """True once destroyed or torn down."""
        return self._data is None

    def __len__(self) -> int:
        return self._length

    def _live_data(self) -> bytearray:
        if self._data is None:
            raise InvalidHandleError(
                "Operation on a released StringHandle", slot=self._slot
            )
        return self._data

    def to_bytes(self) -> bytes:
        """Content without the terminator."""
        with self._registry.lock:
            return bytes(self._live_data()[: self._length])

    def c_str(self) -> bytes:
        """Content followed by its 0 terminator."""
        with self._registry.lock:
            return bytes(self._live_data()[: self._length + 1])

    def as_ctypes(self) -> ctypes.Array:
        """Zero-copy ctypes char array over the live buffer.

        The array spans the whole capacity and is terminated at length.
        It stops tracking the handle once an insert reallocates.
        """
        with self._registry.lock:
            data = self._live_data()
            return (ctypes.c_char * self._capacity).from_buffer(data)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __eq__(self, other: object) -> bool:
        """Content equality. A released handle equals only itself."""
        if isinstance(other, StringHandle):
            if self.released or other.released:
                return self is other
            return self.to_bytes() == other.to_bytes()
        if isinstance(other, (bytes, bytearray, memoryview)):
            with self._registry.lock:
                if self.released:
                    return False
                return self.to_bytes() == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._data is None:
            return "StringHandle(<released>)"
        return (
            f"StringHandle({self.to_bytes()!r}, length={self._length}, "
            f"capacity={self._capacity}, slot={self._slot})"
        )

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def _reserve(self, required: int) -> None:
        """Reallocate so that required bytes plus the terminator fit."""
        strategy = self._registry.strategy
        old = self._live_data()
        new_capacity = strategy.regrow_capacity(required)
        new = _allocate(new_capacity, strategy.max_capacity)
        new[: self._length] = old[: self._length]

        logger.debug(
            "Buffer slot=%s reallocated: %d -> %d bytes",
            self._slot,
            self._capacity,
            new_capacity,
        )

        self._data = new
        self._capacity = new_capacity

    def insert(self, data: BytesLike, at: int) -> bool:
        """Insert bytes at an index, shifting the suffix right.

        Args:
            data: Bytes to insert.
            at: Insertion index, 0 <= at <= length.

        Returns:
            True on success.

        Raises:
            RangeError: If at is out of bounds. Nothing is modified.
            AllocationError: If growth fails.
            InvalidHandleError: If the handle is released.
        """
        payload = _coerce_bytes(data)
        n = len(payload)

        with self._registry.lock:
            self._live_data()
            if not 0 <= at <= self._length:
                raise RangeError(at, 0, self._length + 1, operation="insert")

            required = self._length + n
            if self._capacity < required + 1:
                self._reserve(required)

            buf = self._live_data()
            if at < self._length:
                buf[at + n : required] = buf[at : self._length]
            buf[at : at + n] = payload
            buf[required] = 0
            self._length = required
            return True

    def append(self, data: BytesLike) -> bool:
        """Insert bytes at the end."""
        with self._registry.lock:
            return self.insert(data, self._length)

    def prepend(self, data: BytesLike) -> bool:
        """Insert bytes at the front."""
        return self.insert(data, 0)

    def concat(self, other: "StringHandle") -> bool:
        """Append another handle's content.

        Concatenating a handle onto itself doubles its content.
        """
        if not isinstance(other, StringHandle):
            raise InvalidHandleError("concat requires a StringHandle")
        return self.append(other.to_bytes())

    def remove(self, at: int) -> int:
        """Remove and return the byte at an index.

        Raises:
            RangeError: If at is not in [0, length).
        """
        with self._registry.lock:
            buf = self._live_data()
            if not 0 <= at < self._length:
                raise RangeError(at, 0, self._length, operation="remove")

            removed = buf[at]
            buf[at : self._length - 1] = buf[at + 1 : self._length]
            self._length -= 1
            buf[self._length] = 0
            return removed

    def set(self, at: int, value: int) -> int:
        """Overwrite the byte at an index and return the previous value.

        Raises:
            RangeError: If at is not in [0, length).
            ValueError: If value is not in 0..255.
        """
        if not 0 <= value <= 255:
            raise ValueError(f"byte value must be in range(0, 256), got {value}")

        with self._registry.lock:
            buf = self._live_data()
            if not 0 <= at < self._length:
                raise RangeError(at, 0, self._length, operation="set")

            previous = buf[at]
            buf[at] = value
            return previous

    def clear(self) -> None:
        """Reset length to 0, keeping the allocation.

        With scrub_on_clear the whole buffer is zeroed.
        """
        with self._registry.lock:
            buf = self._live_data()
            if self._registry.strategy.scrub_on_clear:
                buf[:] = bytes(self._capacity)
            else:
                buf[0] = 0
            self._length = 0

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, at: int) -> int:
        """Return the byte at an index.

        Raises:
            RangeError: If at is not in [0, length).
        """
        with self._registry.lock:
            buf = self._live_data()
            if not 0 <= at < self._length:
                raise RangeError(at, 0, self._length, operation="get")
            return buf[at]

    def find(self, pattern: BytesLike) -> int:
        """Offset of the first occurrence of pattern, or NOT_FOUND.

        An empty pattern matches at offset 0, also on an empty handle.
        """
        needle = _coerce_bytes(pattern)

        with self._registry.lock:
            buf = self._live_data()
            if not needle:
                return 0
            return buf.find(needle, 0, self._length)

    # -------------------------------------------------------------------------
    # Duplication
    # -------------------------------------------------------------------------

    def substring(self, i: int, j: Optional[int] = None) -> Optional["StringHandle"]:
        """Duplicate a byte range into a new registered handle.

        Single-bound form copies [i, length) and only when 0 < i < length;
        i == 0 returns None even though the range is valid (use copy()).
        Two-bound form copies [i, j) when 0 <= i < j <= length.

        Returns:
            New StringHandle, or None when the range is rejected.
        """
        with self._registry.lock:
            buf = self._live_data()
            if j is None:
                if not 0 < i < self._length:
                    return None
                content = bytes(buf[i : self._length])
            else:
                if not 0 <= i < j <= self._length:
                    return None
                content = bytes(buf[i:j])
            return StringHandle(content, registry=self._registry)

    def copy(self) -> "StringHandle":
        """Duplicate the whole content into a new registered handle."""
        with self._registry.lock:
            buf = self._live_data()
            return StringHandle(bytes(buf[: self._length]), registry=self._registry)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def destroy(self) -> None:
        """Unregister and release the buffer.

        Raises:
            InvalidHandleError: If already released.
        """
        with self._registry.lock:
            self._live_data()
            self._registry.unregister(self)
            self._release()

    def _release(self) -> None:
        self._data = None
        self._capacity = 0
        self._length = 0
        self._slot = None
