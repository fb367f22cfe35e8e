"""Tests for GrowthStrategy configuration."""
from __future__ import annotations

import pytest


class TestGrowthStrategyDefaults:
    """Tests for default values and sizing helpers."""

    def test_defaults(self) -> None:
        """Defaults match the classic 15-byte slack."""
        from cstrbuf.config import GrowthStrategy

        strategy = GrowthStrategy()
        assert strategy.base_reserve == 15
        assert strategy.initial_slots == 15
        assert strategy.growth_factor == 2
        assert strategy.scrub_on_clear is True
        assert strategy.max_capacity is None
        assert strategy.teardown_at_exit is True

    def test_construct_capacity(self) -> None:
        """Construction reserves max(base, n) + base."""
        from cstrbuf.config import GrowthStrategy

        strategy = GrowthStrategy()
        assert strategy.construct_capacity(0) == 30
        assert strategy.construct_capacity(15) == 30
        assert strategy.construct_capacity(16) == 31

    def test_regrow_capacity(self) -> None:
        """Reallocation reserves required + base."""
        from cstrbuf.config import GrowthStrategy

        assert GrowthStrategy().regrow_capacity(100) == 115

    def test_next_table_size(self) -> None:
        """Tables grow by the growth factor."""
        from cstrbuf.config import GrowthStrategy

        assert GrowthStrategy().next_table_size(15) == 30
        assert GrowthStrategy(growth_factor=4).next_table_size(15) == 60

    def test_frozen(self) -> None:
        """Strategy is immutable."""
        import dataclasses

        from cstrbuf.config import GrowthStrategy

        strategy = GrowthStrategy()
        with pytest.raises(dataclasses.FrozenInstanceError):
            strategy.base_reserve = 1  # type: ignore[misc]


class TestGrowthStrategyValidation:
    """Tests for __post_init__ validation."""

    @pytest.mark.parametrize(
        "kwargs,field_name",
        [
            ({"base_reserve": 0}, "base_reserve"),
            ({"initial_slots": 1}, "initial_slots"),
            ({"growth_factor": 1}, "growth_factor"),
            ({"max_capacity": 10}, "max_capacity"),
            ({"base_reserve": 16.5}, "base_reserve"),
            ({"initial_slots": "8"}, "initial_slots"),
            ({"growth_factor": True}, "growth_factor"),
            ({"max_capacity": 64.0}, "max_capacity"),
            ({"scrub_on_clear": "no"}, "scrub_on_clear"),
            ({"teardown_at_exit": 1}, "teardown_at_exit"),
        ],
    )
    def test_invalid_values(self, kwargs, field_name: str) -> None:
        """Invalid settings raise ConfigError naming the field."""
        from cstrbuf.config import GrowthStrategy
        from cstrbuf.exceptions import ConfigError

        with pytest.raises(ConfigError) as exc_info:
            GrowthStrategy(**kwargs)

        assert exc_info.value.field_name == field_name


class TestGrowthStrategyFromEnv:
    """Tests for environment overrides."""

    def test_from_env_defaults(self, monkeypatch) -> None:
        """No variables gives defaults."""
        from cstrbuf.config import GrowthStrategy

        for name in (
            "CSTRBUF_BASE_RESERVE",
            "CSTRBUF_INITIAL_SLOTS",
            "CSTRBUF_GROWTH_FACTOR",
            "CSTRBUF_SCRUB_ON_CLEAR",
            "CSTRBUF_MAX_CAPACITY",
            "CSTRBUF_TEARDOWN_AT_EXIT",
        ):
            monkeypatch.delenv(name, raising=False)

        assert GrowthStrategy.from_env() == GrowthStrategy()

    def test_from_env_values(self, monkeypatch) -> None:
        """Variables override every field."""
        from cstrbuf.config import GrowthStrategy

        monkeypatch.setenv("CSTRBUF_BASE_RESERVE", "32")
        monkeypatch.setenv("CSTRBUF_INITIAL_SLOTS", "8")
        monkeypatch.setenv("CSTRBUF_GROWTH_FACTOR", "3")
        monkeypatch.setenv("CSTRBUF_SCRUB_ON_CLEAR", "false")
        monkeypatch.setenv("CSTRBUF_MAX_CAPACITY", "4096")
        monkeypatch.setenv("CSTRBUF_TEARDOWN_AT_EXIT", "0")

        strategy = GrowthStrategy.from_env()
        assert strategy.base_reserve == 32
        assert strategy.initial_slots == 8
        assert strategy.growth_factor == 3
        assert strategy.scrub_on_clear is False
        assert strategy.max_capacity == 4096
        assert strategy.teardown_at_exit is False

    def test_from_env_bad_integer(self, monkeypatch) -> None:
        """Non-numeric values raise ConfigError."""
        from cstrbuf.config import GrowthStrategy
        from cstrbuf.exceptions import ConfigError

        monkeypatch.setenv("CSTRBUF_BASE_RESERVE", "lots")

        with pytest.raises(ConfigError, match="CSTRBUF_BASE_RESERVE"):
            GrowthStrategy.from_env()
