"""
cstrbuf Registry Module

Slot registry tracking live string handles for bulk teardown.
"""
from cstrbuf.registry.instance_registry import InstanceRegistry

__all__ = [
    "InstanceRegistry",
]
