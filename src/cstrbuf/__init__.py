"""
cstrbuf - Growable Null-Terminated Byte Strings

Mutable byte strings that always carry a C-style terminator, tracked
by a slot registry so every outstanding buffer can be released in one
bulk teardown.

Main APIs:
- cstrbuf.construct(): Create a registered handle
- cstrbuf.append() / prepend() / insert(): Grow content in place
- cstrbuf.substring() / copy(): Duplicate into new handles
- cstrbuf.destroy() / destroy_all(): Release one or all handles
- cstrbuf.session(): Scope a fresh default registry
- cstrbuf.InstanceRegistry: Isolated registry for explicit lifecycles
"""

__version__ = "0.1.0"

from cstrbuf.api import (
    append,
    c_str,
    capacity,
    clear,
    concat,
    configure,
    construct,
    copy,
    destroy,
    destroy_all,
    find,
    get,
    get_config,
    get_default_registry,
    insert,
    length,
    load_config,
    prepend,
    remove,
    session,
    set,
    set_default_registry,
    substring,
)
from cstrbuf.buffer import NOT_FOUND, StringHandle
from cstrbuf.config import GrowthStrategy
from cstrbuf.exceptions import (
    AllocationError,
    ConfigError,
    CStringError,
    InvalidHandleError,
    RangeError,
)
from cstrbuf.registry import InstanceRegistry

__all__ = [
    "__version__",
    # Types
    "GrowthStrategy",
    "InstanceRegistry",
    "NOT_FOUND",
    "StringHandle",
    # Exceptions
    "AllocationError",
    "ConfigError",
    "CStringError",
    "InvalidHandleError",
    "RangeError",
    # Config
    "configure",
    "get_config",
    "load_config",
    # Lifecycle
    "construct",
    "destroy",
    "destroy_all",
    "get_default_registry",
    "set_default_registry",
    "session",
    # Operations
    "append",
    "c_str",
    "capacity",
    "clear",
    "concat",
    "copy",
    "find",
    "get",
    "insert",
    "length",
    "prepend",
    "remove",
    "set",
    "substring",
]
