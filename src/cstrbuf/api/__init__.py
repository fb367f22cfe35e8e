"""cstrbuf Public API Module.

Configuration and module-level operations over the default registry.
"""
from cstrbuf.api.config import (
    configure,
    get_config,
    load_config,
)
from cstrbuf.api.operations import (
    append,
    c_str,
    capacity,
    clear,
    concat,
    construct,
    copy,
    destroy,
    destroy_all,
    find,
    get,
    get_default_registry,
    insert,
    length,
    prepend,
    remove,
    session,
    set,
    set_default_registry,
    substring,
)

__all__ = [
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
    # Mutation
    "append",
    "clear",
    "concat",
    "insert",
    "prepend",
    "remove",
    "set",
    # Queries
    "c_str",
    "capacity",
    "find",
    "get",
    "length",
    # Duplication
    "copy",
    "substring",
]
