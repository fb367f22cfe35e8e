"""Fixtures for module-level API tests."""
from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration after each test."""
    import cstrbuf

    yield
    cstrbuf.configure(reset=True)


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config file and return its path."""
    def _write(text: str) -> str:
        path = tmp_path / "cstrbuf.yaml"
        path.write_text(text)
        return str(path)

    return _write
