"""
cstrbuf Instance Registry

Slot table tracking every live StringHandle so outstanding buffers can
be released in one bulk teardown. Thread-safe registration, removal
and teardown.
"""
from __future__ import annotations

import heapq
import logging
from threading import RLock
from typing import Any, TYPE_CHECKING

from cstrbuf.config import GrowthStrategy
from cstrbuf.exceptions import InvalidHandleError

if TYPE_CHECKING:
    from cstrbuf.buffer import BytesLike, StringHandle

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """Slot table of live string handles.

    Handles occupy integer slots. Vacated slots below the high watermark
    are reused lowest index first; otherwise the next slot past the
    high watermark is taken. When the next registration would fill the
    table, it grows by the strategy's growth factor and every existing
    entry keeps its index.

    The registry lock is also the lock every buffer operation on a
    handle of this registry runs under. It is reentrant so that buffer
    operations which create handles (substring, copy) can register while
    holding it.

    Usable as a context manager; leaving the block tears down every
    handle still registered.

    Attributes:
        _lock: Registry-wide reentrant lock.
        _strategy: Growth settings for the table and its buffers.
        _slots: Slot table, or None once released.
        _vacated: Min-heap of vacated slot indices below the watermark.
        _high_watermark: Highest index ever occupied, -1 if none.
        _live_count: Number of occupied slots.
    """

    __slots__ = (
        "_lock",
        "_strategy",
        "_slots",
        "_vacated",
        "_high_watermark",
        "_live_count",
    )

    def __init__(self, strategy: GrowthStrategy | None = None) -> None:
        """Initialize registry with a freshly allocated table.

        Args:
            strategy: Growth settings. Defaults to GrowthStrategy().
        """
        self._lock = RLock()
        self._strategy = strategy or GrowthStrategy()
        self._slots: list["StringHandle | None"] | None = None
        self._vacated: list[int] = []
        self._high_watermark = -1
        self._live_count = 0
        self._allocate_table()

    def __enter__(self) -> "InstanceRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown_all()

    @property
    def lock(self) -> RLock:
        """Lock serializing registry and buffer operations."""
        return self._lock

    @property
    def strategy(self) -> GrowthStrategy:
        """Current growth settings."""
        return self._strategy

    @strategy.setter
    def strategy(self, strategy: GrowthStrategy) -> None:
        # Applies to the next allocation; existing buffers keep their size.
        with self._lock:
            self._strategy = strategy

    @property
    def capacity(self) -> int:
        """Current slot count (0 once released)."""
        with self._lock:
            return len(self._slots) if self._slots is not None else 0

    @property
    def live_count(self) -> int:
        """Number of registered handles."""
        with self._lock:
            return self._live_count

    @property
    def high_watermark(self) -> int:
        """Highest slot index ever occupied, -1 if none."""
        with self._lock:
            return self._high_watermark

    @property
    def is_released(self) -> bool:
        """True when the table has been released by teardown."""
        with self._lock:
            return self._slots is None

    def __len__(self) -> int:
        return self.live_count

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            if self._slots is None:
                return False
            slot = getattr(handle, "slot", None)
            if slot is not None and 0 <= slot <= self._high_watermark:
                return self._slots[slot] is handle
            return False

    def _allocate_table(self) -> list["StringHandle | None"]:
        slots: list["StringHandle | None"] = [None] * self._strategy.initial_slots
        self._slots = slots
        self._vacated = []
        self._high_watermark = -1
        self._live_count = 0
        return slots

    def _grow(self, slots: list["StringHandle | None"]) -> None:
        old_size = len(slots)
        new_size = self._strategy.next_table_size(old_size)
        slots.extend([None] * (new_size - old_size))
        logger.debug("Registry table grown: %d -> %d slots", old_size, new_size)

    def construct(self, initial: "BytesLike | None" = None) -> "StringHandle":
        """Create a handle registered with this registry.

        Args:
            initial: Optional initial content.

        Returns:
            New registered StringHandle.
        """
        from cstrbuf.buffer import StringHandle

        return StringHandle(initial, registry=self)

    def register(self, handle: "StringHandle") -> int:
        """Assign a slot to a handle.

        A released table is reallocated at its initial size first.

        Args:
            handle: Handle to register.

        Returns:
            Slot index assigned to the handle.

        Raises:
            ValueError: If the handle is already registered here.
        """
        with self._lock:
            slots = self._slots
            if slots is None:
                slots = self._allocate_table()
                logger.debug("Registry table reallocated after teardown")

            if handle in self:
                raise ValueError(
                    f"Handle is already registered at slot {handle.slot}"
                )

            if self._live_count + 1 >= len(slots):
                self._grow(slots)

            if self._vacated:
                slot = heapq.heappop(self._vacated)
            else:
                slot = self._high_watermark + 1
                self._high_watermark = slot

            slots[slot] = handle
            handle._slot = slot
            self._live_count += 1
            return slot

    def _scan_for(
        self, slots: list["StringHandle | None"], handle: "StringHandle"
    ) -> int | None:
        for i in range(self._high_watermark + 1):
            if slots[i] is handle:
                return i
        return None

    def unregister(self, handle: "StringHandle") -> None:
        """Remove a handle from its slot.

        Uses the handle's stored slot index. A stale index falls back to
        a scan bounded by the high watermark.

        Args:
            handle: Handle to remove.

        Raises:
            InvalidHandleError: If the handle is not in this registry.
        """
        with self._lock:
            slots = self._slots
            if slots is None:
                raise InvalidHandleError(
                    "Registry has been torn down", slot=handle.slot
                )

            slot = handle.slot
            if (
                slot is None
                or not 0 <= slot <= self._high_watermark
                or slots[slot] is not handle
            ):
                logger.warning("Stale slot index %s, scanning registry table", slot)
                slot = self._scan_for(slots, handle)
                if slot is None:
                    raise InvalidHandleError(
                        "Handle is not registered", slot=handle.slot
                    )

            slots[slot] = None
            heapq.heappush(self._vacated, slot)
            self._live_count -= 1
            handle._slot = None

    def teardown_all(self) -> int:
        """Release every registered handle and the table itself.

        Idempotent: returns 0 when the table is already released.

        Returns:
            Number of handles released.
        """
        with self._lock:
            if self._slots is None:
                return 0

            released = 0
            for i in range(self._high_watermark + 1):
                handle = self._slots[i]
                if handle is not None:
                    handle._release()
                    self._slots[i] = None
                    released += 1

            self._slots = None
            self._vacated = []
            self._high_watermark = -1
            self._live_count = 0

            logger.debug("Registry teardown released %d handles", released)
            return released

    def handles(self) -> list["StringHandle"]:
        """Snapshot of registered handles in slot order."""
        with self._lock:
            if self._slots is None:
                return []
            return [
                h for h in self._slots[: self._high_watermark + 1]
                if h is not None
            ]

    def get_metadata(self) -> dict[str, Any]:
        """Get registry metadata.

        Returns:
            Metadata dictionary.
        """
        with self._lock:
            return {
                "capacity": len(self._slots) if self._slots is not None else 0,
                "live_count": self._live_count,
                "high_watermark": self._high_watermark,
                "vacated_slots": len(self._vacated),
                "released": self._slots is None,
                "strategy": self._strategy.to_dict(),
            }
