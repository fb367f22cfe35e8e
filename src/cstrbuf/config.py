"""
Growth strategy configuration.

This module provides:
- GrowthStrategy: Slack, table sizing and teardown settings shared by
  buffers and registries
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, ClassVar

from cstrbuf.exceptions import ConfigError


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(
            f"{name} must be an integer, got {value!r}",
            field_name=name,
        ) from e


@dataclass(frozen=True)
class GrowthStrategy:
    """Growth settings for buffers and the instance registry.

    Attributes:
        base_reserve: Slack bytes added on construction and on every
            reallocation. Also the minimum content reservation.
        initial_slots: Slot count of a freshly allocated registry table.
        growth_factor: Multiplier applied to the registry table when the
            next registration would fill it.
        scrub_on_clear: If True, clear() zeroes the whole buffer instead
            of only writing the terminator.
        max_capacity: Optional ceiling on a single buffer's capacity.
        teardown_at_exit: If True, the process-wide default registry
            releases everything still registered at interpreter exit.

    Example:
        strategy = GrowthStrategy(base_reserve=32, growth_factor=4)
        registry = InstanceRegistry(strategy)
    """

    DEFAULT_BASE_RESERVE: ClassVar[int] = 15
    DEFAULT_INITIAL_SLOTS: ClassVar[int] = 15
    DEFAULT_GROWTH_FACTOR: ClassVar[int] = 2

    base_reserve: int = 15
    initial_slots: int = 15
    growth_factor: int = 2
    scrub_on_clear: bool = True
    max_capacity: int | None = None
    teardown_at_exit: bool = True

    def __post_init__(self) -> None:
        """Validate configuration types and values."""
        for name in ("base_reserve", "initial_slots", "growth_factor", "max_capacity"):
            value = getattr(self, name)
            if value is None and name == "max_capacity":
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(
                    f"{name} must be an integer, got {value!r}",
                    field_name=name,
                )
        for name in ("scrub_on_clear", "teardown_at_exit"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(
                    f"{name} must be a boolean, got {value!r}",
                    field_name=name,
                )

        if self.base_reserve < 1:
            raise ConfigError(
                "base_reserve must be at least 1 to hold the terminator",
                field_name="base_reserve",
            )
        if self.initial_slots < 2:
            raise ConfigError(
                "initial_slots must be at least 2",
                field_name="initial_slots",
            )
        if self.growth_factor < 2:
            raise ConfigError(
                "growth_factor must be at least 2",
                field_name="growth_factor",
            )
        if self.max_capacity is not None and self.max_capacity <= self.base_reserve:
            raise ConfigError(
                "max_capacity must exceed base_reserve",
                field_name="max_capacity",
            )

    @classmethod
    def from_env(cls) -> "GrowthStrategy":
        """Create strategy from environment variables.

        Environment variables:
            CSTRBUF_BASE_RESERVE: Slack bytes per allocation
            CSTRBUF_INITIAL_SLOTS: Initial registry table size
            CSTRBUF_GROWTH_FACTOR: Registry table multiplier
            CSTRBUF_SCRUB_ON_CLEAR: "0" or "false" to keep stale bytes
            CSTRBUF_MAX_CAPACITY: Per-buffer byte ceiling
            CSTRBUF_TEARDOWN_AT_EXIT: "0" or "false" to skip the exit hook

        Returns:
            GrowthStrategy with values from environment.

        Raises:
            ConfigError: If a numeric variable does not parse.
        """
        base_str = os.environ.get("CSTRBUF_BASE_RESERVE")
        base_reserve = (
            _parse_int("CSTRBUF_BASE_RESERVE", base_str)
            if base_str else cls.DEFAULT_BASE_RESERVE
        )

        slots_str = os.environ.get("CSTRBUF_INITIAL_SLOTS")
        initial_slots = (
            _parse_int("CSTRBUF_INITIAL_SLOTS", slots_str)
            if slots_str else cls.DEFAULT_INITIAL_SLOTS
        )

        factor_str = os.environ.get("CSTRBUF_GROWTH_FACTOR")
        growth_factor = (
            _parse_int("CSTRBUF_GROWTH_FACTOR", factor_str)
            if factor_str else cls.DEFAULT_GROWTH_FACTOR
        )

        scrub_on_clear = _parse_bool(os.environ.get("CSTRBUF_SCRUB_ON_CLEAR", "1"))

        max_str = os.environ.get("CSTRBUF_MAX_CAPACITY")
        max_capacity = _parse_int("CSTRBUF_MAX_CAPACITY", max_str) if max_str else None

        teardown_at_exit = _parse_bool(
            os.environ.get("CSTRBUF_TEARDOWN_AT_EXIT", "1")
        )

        return cls(
            base_reserve=base_reserve,
            initial_slots=initial_slots,
            growth_factor=growth_factor,
            scrub_on_clear=scrub_on_clear,
            max_capacity=max_capacity,
            teardown_at_exit=teardown_at_exit,
        )

    def construct_capacity(self, initial_len: int) -> int:
        """Capacity for a new buffer holding initial_len bytes."""
        return max(self.base_reserve, initial_len) + self.base_reserve

    def regrow_capacity(self, required: int) -> int:
        """Capacity for a buffer that must hold required bytes."""
        return required + self.base_reserve

    def next_table_size(self, current: int) -> int:
        """Slot count after growing a table of the given size."""
        return current * self.growth_factor

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
