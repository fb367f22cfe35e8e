"""cstrbuf Operation APIs.

Module-level functions over the process-wide default registry:
- construct() - Create a registered handle
- append() / prepend() / insert() / concat() - Grow content
- remove() / set() / get() / find() - Byte access
- substring() / copy() - Duplicate into new handles
- clear() / destroy() / destroy_all() - Release content and handles
- session() - Scope a fresh default registry

Every function taking a handle raises InvalidHandleError for None or
a released handle.
"""
from __future__ import annotations

import atexit
import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from cstrbuf.api.config import get_config
from cstrbuf.buffer import BytesLike, StringHandle
from cstrbuf.config import GrowthStrategy
from cstrbuf.exceptions import InvalidHandleError
from cstrbuf.registry.instance_registry import InstanceRegistry

logger = logging.getLogger(__name__)

_default_registry: Optional[InstanceRegistry] = None
_registry_lock = threading.Lock()


def _install_exit_hook(registry: InstanceRegistry) -> None:
    if registry.strategy.teardown_at_exit:
        atexit.register(registry.teardown_all)


def _remove_exit_hook(registry: InstanceRegistry) -> None:
    atexit.unregister(registry.teardown_all)


def get_default_registry() -> InstanceRegistry:
    """Get or create the process-wide default registry.

    The registry is created with the current configuration and, when
    teardown_at_exit is set, releases its handles at interpreter exit.
    """
    global _default_registry
    if _default_registry is None:
        with _registry_lock:
            if _default_registry is None:
                registry = InstanceRegistry(get_config())
                _install_exit_hook(registry)
                _default_registry = registry
                logger.debug("Default registry created")
    return _default_registry


def set_default_registry(
    registry: Optional[InstanceRegistry],
) -> Optional[InstanceRegistry]:
    """Replace the default registry.

    The previous registry is not torn down; its exit hook is removed.

    Args:
        registry: New default registry, or None to create one lazily.

    Returns:
        The previous default registry, if any.
    """
    global _default_registry
    with _registry_lock:
        previous = _default_registry
        if previous is not None:
            _remove_exit_hook(previous)
        if registry is not None:
            _install_exit_hook(registry)
        _default_registry = registry
        return previous


def _apply_strategy(strategy: GrowthStrategy) -> None:
    with _registry_lock:
        registry = _default_registry
    if registry is None:
        return
    if registry.strategy.teardown_at_exit != strategy.teardown_at_exit:
        _remove_exit_hook(registry)
        registry.strategy = strategy
        _install_exit_hook(registry)
    else:
        registry.strategy = strategy


@contextmanager
def session(
    strategy: Optional[GrowthStrategy] = None,
) -> Generator[InstanceRegistry, None, None]:
    """Context manager scoping a fresh default registry.

    Handles created through the module-level API inside the block are
    released when it exits, and the previous default is restored.
    Configuration changed inside the block is carried over to the
    restored default.

    Args:
        strategy: Growth settings. Defaults to the current configuration.

    Example:
        >>> import cstrbuf
        >>>
        >>> with cstrbuf.session():
        ...     s = cstrbuf.construct(b"hello")
        ...     cstrbuf.append(s, b" world")
        >>> s.released
        True
    """
    config_on_entry = get_config()
    registry = InstanceRegistry(strategy or config_on_entry)
    previous = set_default_registry(registry)
    try:
        yield registry
    finally:
        registry.teardown_all()
        set_default_registry(previous)
        # configure() inside the block only reached the session registry
        config_on_exit = get_config()
        if config_on_exit != config_on_entry:
            _apply_strategy(config_on_exit)


def _require(handle: Optional[StringHandle]) -> StringHandle:
    if handle is None:
        raise InvalidHandleError("Expected a StringHandle, got None")
    if not isinstance(handle, StringHandle):
        raise InvalidHandleError(
            f"Expected a StringHandle, got {type(handle).__name__}"
        )
    if handle.released:
        raise InvalidHandleError(
            "Operation on a released StringHandle", slot=handle.slot
        )
    return handle


def construct(
    initial: Optional[BytesLike] = None,
    *,
    registry: Optional[InstanceRegistry] = None,
) -> StringHandle:
    """Create a handle, optionally with initial content.

    Args:
        initial: Initial bytes.
        registry: Owning registry. Defaults to the default registry.

    Returns:
        New registered StringHandle.
    """
    return StringHandle(initial, registry=registry or get_default_registry())


def insert(handle: StringHandle, data: BytesLike, at: int) -> bool:
    return _require(handle).insert(data, at)


def append(handle: StringHandle, data: BytesLike) -> bool:
    return _require(handle).append(data)


def prepend(handle: StringHandle, data: BytesLike) -> bool:
    return _require(handle).prepend(data)


def concat(handle: StringHandle, other: StringHandle) -> bool:
    return _require(handle).concat(_require(other))


def remove(handle: StringHandle, at: int) -> int:
    return _require(handle).remove(at)


def get(handle: StringHandle, at: int) -> int:
    return _require(handle).get(at)


def set(handle: StringHandle, at: int, value: int) -> int:
    return _require(handle).set(at, value)


def find(handle: StringHandle, pattern: BytesLike) -> int:
    return _require(handle).find(pattern)


def substring(
    handle: StringHandle, i: int, j: Optional[int] = None
) -> Optional[StringHandle]:
    """Duplicate [i, length) or [i, j) into a new handle, or return None.

    See StringHandle.substring for the accepted ranges.
    """
    return _require(handle).substring(i, j)


def copy(handle: StringHandle) -> StringHandle:
    return _require(handle).copy()


def clear(handle: StringHandle) -> None:
    _require(handle).clear()


def length(handle: StringHandle) -> int:
    return _require(handle).length


def capacity(handle: StringHandle) -> int:
    return _require(handle).capacity


def c_str(handle: StringHandle) -> bytes:
    return _require(handle).c_str()


def destroy(handle: StringHandle) -> None:
    """Unregister a handle and release its buffer."""
    _require(handle).destroy()


def destroy_all(registry: Optional[InstanceRegistry] = None) -> int:
    """Release every handle of a registry.

    Args:
        registry: Registry to tear down. Defaults to the default
            registry; nothing happens if it was never created.

    Returns:
        Number of handles released.
    """
    if registry is None:
        with _registry_lock:
            registry = _default_registry
        if registry is None:
            return 0
    return registry.teardown_all()
