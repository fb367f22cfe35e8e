"""cstrbuf Configuration APIs.

Public APIs for configuring cstrbuf:
- configure() - Set global growth settings
- get_config() - Get current growth settings
- load_config() - Load growth settings from a YAML file

Settings are seeded from CSTRBUF_* environment variables on first use
and are pushed to the default registry whenever they change.
"""
from __future__ import annotations

import dataclasses
import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from cstrbuf.config import GrowthStrategy
from cstrbuf.exceptions import ConfigError

logger = logging.getLogger(__name__)

_CONFIG_FIELDS = frozenset(f.name for f in dataclasses.fields(GrowthStrategy))

# Marks an option configure() was not given; None is a real max_capacity.
_UNSET: Any = object()


@dataclass
class GlobalState:
    """Global state for cstrbuf."""
    config: GrowthStrategy = field(default_factory=GrowthStrategy.from_env)
    _lock: threading.Lock = field(default_factory=threading.Lock)


# Module-level global state
_global_state: Optional[GlobalState] = None
_state_lock = threading.Lock()


def _get_global_state() -> GlobalState:
    """Get or create global state."""
    global _global_state
    if _global_state is None:
        with _state_lock:
            if _global_state is None:
                _global_state = GlobalState()
    return _global_state


def _publish(strategy: GrowthStrategy) -> None:
    from cstrbuf.api.operations import _apply_strategy

    _apply_strategy(strategy)


def configure(
    base_reserve: int = _UNSET,
    initial_slots: int = _UNSET,
    growth_factor: int = _UNSET,
    scrub_on_clear: bool = _UNSET,
    max_capacity: Optional[int] = _UNSET,
    teardown_at_exit: bool = _UNSET,
    reset: bool = False,
) -> GrowthStrategy:
    """Configure cstrbuf global growth settings.

    Settings persist for the lifetime of the process unless reset, and
    apply to the default registry immediately. Existing buffers keep
    their current allocation until they next grow.

    Args:
        base_reserve: Slack bytes per allocation.
        initial_slots: Initial registry table size.
        growth_factor: Registry table multiplier.
        scrub_on_clear: Zero the whole buffer on clear().
        max_capacity: Per-buffer byte ceiling, or None to remove it.
        teardown_at_exit: Release the default registry at interpreter exit.
        reset: If True, reset all settings to defaults first.

    Returns:
        The resulting configuration.

    Raises:
        ConfigError: If the resulting settings are invalid. The previous
            configuration stays in effect.

    Example:
        >>> import cstrbuf
        >>>
        >>> cstrbuf.configure(base_reserve=64, scrub_on_clear=False)
        >>>
        >>> # Reset to defaults
        >>> cstrbuf.configure(reset=True)
    """
    state = _get_global_state()

    updates: dict[str, Any] = {
        "base_reserve": base_reserve,
        "initial_slots": initial_slots,
        "growth_factor": growth_factor,
        "scrub_on_clear": scrub_on_clear,
        "max_capacity": max_capacity,
        "teardown_at_exit": teardown_at_exit,
    }
    updates = {k: v for k, v in updates.items() if v is not _UNSET}

    with state._lock:
        base = GrowthStrategy() if reset else state.config
        new_config = dataclasses.replace(base, **updates)
        state.config = new_config

    logger.debug("Configuration updated: %s", new_config)
    _publish(new_config)
    return new_config


def get_config() -> GrowthStrategy:
    """Get current cstrbuf configuration.

    Returns:
        Current (immutable) configuration object.

    Example:
        >>> import cstrbuf
        >>>
        >>> config = cstrbuf.get_config()
        >>> print(f"Slack: {config.base_reserve}")
    """
    state = _get_global_state()
    with state._lock:
        return state.config


def load_config(path: str) -> GrowthStrategy:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        The resulting configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If config file is invalid.

    Example:
        >>> import cstrbuf
        >>>
        >>> cstrbuf.load_config("cstrbuf.yaml")

    YAML format::

        base_reserve: 32
        initial_slots: 64
        growth_factor: 2
        scrub_on_clear: false
        max_capacity: 1048576
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML in config file: {e}", config_file=path
            ) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file format: {path}", config_file=path)

    unknown = sorted(str(k) for k in set(data) - _CONFIG_FIELDS)
    if unknown:
        raise ConfigError(
            f"Unknown config keys in {path}: {unknown}",
            config_file=path,
            field_name=unknown[0],
        )

    try:
        return configure(**data)
    except ConfigError as e:
        raise ConfigError(
            f"Invalid value in {path}: {e.message}",
            config_file=path,
            field_name=e.field_name,
        ) from e
