"""
cstrbuf Exception Hierarchy

Custom exceptions for buffer and registry error handling.
"""
from __future__ import annotations

from typing import Any, Optional


class CStringError(Exception):
    """Base exception for all cstrbuf errors.

    All cstrbuf-specific exceptions inherit from this class,
    allowing users to catch all cstrbuf errors with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        context: Optional dict of additional context for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize CStringError.

        Args:
            message: Error message.
            context: Optional context dict.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        ctx_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{ctx_str})"


class AllocationError(CStringError, MemoryError):
    """Raised when backing memory for a buffer cannot be obtained.

    This occurs when:
    - The interpreter cannot allocate the requested bytearray
    - The request exceeds the configured per-buffer ceiling

    Allocation failures are not recovered from; they propagate
    to the caller unchanged.

    Attributes:
        requested: Number of bytes requested.
        limit: Configured ceiling, if one applied.
    """

    def __init__(
        self,
        requested: int,
        *,
        limit: Optional[int] = None,
        message: Optional[str] = None,
    ) -> None:
        """Initialize AllocationError.

        Args:
            requested: Number of bytes requested.
            limit: Configured ceiling, if any.
            message: Optional custom message.
        """
        self.requested = requested
        self.limit = limit

        if message is None:
            if limit is not None:
                message = (
                    f"Cannot allocate {requested} bytes: "
                    f"exceeds max_capacity={limit}"
                )
            else:
                message = f"Cannot allocate {requested} bytes"

        super().__init__(
            message,
            context={"requested": requested, "limit": limit},
        )


class RangeError(CStringError, IndexError):
    """Raised when an index falls outside the valid bounds of an operation.

    The operation performs no mutation when this is raised.

    Attributes:
        index: The offending index.
        lower: Inclusive lower bound.
        upper: Exclusive upper bound.
    """

    def __init__(
        self,
        index: int,
        lower: int,
        upper: int,
        *,
        operation: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        """Initialize RangeError.

        Args:
            index: The offending index.
            lower: Inclusive lower bound.
            upper: Exclusive upper bound.
            operation: Name of the operation that failed.
            message: Optional custom message.
        """
        self.index = index
        self.lower = lower
        self.upper = upper
        self.operation = operation

        if message is None:
            prefix = f"{operation}: " if operation else ""
            message = f"{prefix}index {index} out of range [{lower}, {upper})"

        super().__init__(
            message,
            context={
                "index": index,
                "lower": lower,
                "upper": upper,
                "operation": operation,
            },
        )


class InvalidHandleError(CStringError):
    """Raised when an operation targets a missing or released handle.

    This occurs when:
    - None is passed where a handle is expected
    - The handle was destroyed or released by a bulk teardown
    - A registry is asked to unregister a handle it does not hold

    Attributes:
        slot: Last known registry slot of the handle, if any.
    """

    def __init__(
        self,
        message: str = "Handle is invalid or has been released",
        *,
        slot: Optional[int] = None,
    ) -> None:
        """Initialize InvalidHandleError.

        Args:
            message: Error message.
            slot: Last known registry slot.
        """
        self.slot = slot
        super().__init__(message, context={"slot": slot})


class ConfigError(CStringError, ValueError):
    """Raised when configuration values or files are invalid.

    Attributes:
        config_file: Optional path to the configuration file.
        field_name: Name of the offending field, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        config_file: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        """Initialize ConfigError.

        Args:
            message: Error message.
            config_file: Path to the configuration file.
            field_name: Offending field name.
        """
        self.config_file = config_file
        self.field_name = field_name

        super().__init__(
            message,
            context={"config_file": config_file, "field_name": field_name},
        )


__all__ = [
    "AllocationError",
    "CStringError",
    "ConfigError",
    "InvalidHandleError",
    "RangeError",
]
