"""reflectkit - Runtime member access and generic method dispatch.

Resolves, reads and writes object members, locates and invokes generic
methods by name and type-argument signature, and projects objects into
ordered string sets and heterogeneous stores.
"""

__version__ = "0.1.0"

from .config import ReflectKitConfig, config
from .exceptions import (
    ReflectKitError,
    MemberNotFoundError,
    InvalidTargetError,
    ReadOnlyMemberError,
    TypeMismatchError,
    MethodNotFoundError,
    AmbiguousMethodError,
    InvalidCastError,
)
from .logging import (
    configure_structlog,
    get_bound_logger,
    operation_context,
    clear_context,
    set_log_level,
)
from .members import (
    MemberKind,
    MemberDescriptor,
    enumerate_members,
    get_member,
    get_member_type,
    get_value,
    set_value,
    get_member_value,
    set_member_value,
)
from .introspection import (
    MethodScope,
    Visibility,
    GenericMethodDescriptor,
    enumerate_generic_methods,
    find_generic_method,
    find_static_generic_method,
)
from .invoker import (
    BoundGenericMethod,
    bind_generic_method,
    invoke_generic,
    invoke_static_generic,
)
from .cache import MemberCache, stringify
from .context import (
    ReflectionContext,
    default_context,
    set_default_serializer,
    reset_default_serializer,
)
from .mappings import (
    type_key,
    cast_value,
    try_get,
    try_get_or_else,
    get_or_add,
    add_or_update,
)
from .string_set import StringSet, default_string_set_serializer, to_string_set
from .store import HeterogeneousStore
from .type_utils import (
    format_type_annotation,
    types_equal,
    is_assignable,
    get_module_directory,
)

__all__ = [
    "__version__",
    # Configuration
    "ReflectKitConfig",
    "config",
    # Exceptions
    "ReflectKitError",
    "MemberNotFoundError",
    "InvalidTargetError",
    "ReadOnlyMemberError",
    "TypeMismatchError",
    "MethodNotFoundError",
    "AmbiguousMethodError",
    "InvalidCastError",
    # Logging
    "configure_structlog",
    "get_bound_logger",
    "operation_context",
    "clear_context",
    "set_log_level",
    # Members
    "MemberKind",
    "MemberDescriptor",
    "enumerate_members",
    "get_member",
    "get_member_type",
    "get_value",
    "set_value",
    "get_member_value",
    "set_member_value",
    # Generic methods
    "MethodScope",
    "Visibility",
    "GenericMethodDescriptor",
    "enumerate_generic_methods",
    "find_generic_method",
    "find_static_generic_method",
    "BoundGenericMethod",
    "bind_generic_method",
    "invoke_generic",
    "invoke_static_generic",
    # Caching and context
    "MemberCache",
    "stringify",
    "ReflectionContext",
    "default_context",
    "set_default_serializer",
    "reset_default_serializer",
    # Mappings
    "type_key",
    "cast_value",
    "try_get",
    "try_get_or_else",
    "get_or_add",
    "add_or_update",
    "StringSet",
    "default_string_set_serializer",
    "to_string_set",
    "HeterogeneousStore",
    # Type utilities
    "format_type_annotation",
    "types_equal",
    "is_assignable",
    "get_module_directory",
]
