"""
PyTest Configuration for cstrbuf Tests

Provides fixtures, markers, and test setup.
"""
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "stress: mark test as stress test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture
def strategy():
    """Default growth strategy (15-byte slack, 15 initial slots)."""
    from cstrbuf.config import GrowthStrategy
    return GrowthStrategy()


@pytest.fixture
def registry(strategy):
    """Isolated registry torn down after the test."""
    from cstrbuf.registry import InstanceRegistry

    with InstanceRegistry(strategy) as reg:
        yield reg


@pytest.fixture
def hello_world(registry):
    """Handle holding b"ello world", built the way the demo program does."""
    s = registry.construct()
    s.append(b"world")
    s.prepend(b"hello ")
    s.remove(0)
    return s


@pytest.fixture
def default_session():
    """Fresh default registry for module-level API tests."""
    import cstrbuf

    with cstrbuf.session() as reg:
        yield reg
