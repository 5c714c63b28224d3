"""
Type Utilities for reflectkit

Shared helpers for type formatting, structural type comparison and runtime
assignability checks. Used by member access, generic method resolution and
typed store retrieval.
"""

import inspect
import sys
import types
from pathlib import Path
from typing import (
    Annotated,
    Any,
    ClassVar,
    Final,
    ForwardRef,
    List,
    Literal,
    Tuple,
    TypeVar,
    Union,
    get_args,
    get_origin,
)


def format_type_annotation(type_hint: Any) -> str:
    """Format type annotation as readable string."""
    if type_hint is None:
        return "Any"

    if type_hint is type(None):
        return "None"

    if isinstance(type_hint, TypeVar):
        return f"~{type_hint.__name__}"

    origin = get_origin(type_hint)

    if origin is Literal:
        args = get_args(type_hint)
        return f"Literal[{', '.join(repr(arg) for arg in args)}]"

    if is_union_origin(origin):
        return " | ".join(format_type_annotation(arg) for arg in get_args(type_hint))

    # Handle generic types (List, Dict, etc)
    if origin:
        args = get_args(type_hint)
        origin_name = getattr(origin, "__name__", str(origin))
        if args:
            formatted_args = [
                "[" + ", ".join(format_type_annotation(a) for a in arg) + "]"
                if isinstance(arg, (list, tuple)) else format_type_annotation(arg)
                for arg in args
            ]
            return f"{origin_name}[{', '.join(formatted_args)}]"
        return origin_name

    # Unresolved forward references
    if isinstance(type_hint, ForwardRef):
        return str(type_hint.__forward_arg__)

    if hasattr(type_hint, '__name__'):
        return type_hint.__name__

    return str(type_hint)


def resolve_type_hints_safely(obj: Any, globalns: dict = None) -> dict:
    """
    Safely resolve type hints, falling back to raw annotations if needed.

    Forward references that cannot be resolved stay as strings.
    """
    from typing import get_type_hints

    try:
        return get_type_hints(obj, globalns=globalns)
    except Exception:
        annotations = {}
        for base in reversed(obj.__mro__ if hasattr(obj, '__mro__') else [obj]):
            annotations.update(getattr(base, '__annotations__', None) or {})
        return annotations


FRAMEWORK_MODULE_PREFIXES = ("builtins", "typing", "abc", "pydantic", "pydantic_settings")


def is_framework_class(cls: type) -> bool:
    """Check if a class belongs to the runtime or a framework base layer."""
    return cls is object or cls.__module__.split(".")[0] in FRAMEWORK_MODULE_PREFIXES


def is_union_origin(origin: Any) -> bool:
    """Check if a typing origin is Union or a PEP 604 union."""
    return origin is Union or origin is types.UnionType


def is_optional_type(type_hint: Any) -> bool:
    """Check if a type annotation represents an optional value (Union with None)."""
    if is_union_origin(get_origin(type_hint)):
        return type(None) in get_args(type_hint)
    return False


def get_non_none_type(type_hint: Any) -> Any:
    """Extract the non-None type from Optional[T] or Union[T, None]."""
    if is_union_origin(get_origin(type_hint)):
        non_none_types = [arg for arg in get_args(type_hint) if arg is not type(None)]
        if len(non_none_types) == 1:
            return non_none_types[0]
        elif len(non_none_types) > 1:
            return Union[tuple(non_none_types)]

    return type_hint


def unwrap_qualifiers(type_hint: Any) -> Any:
    """Strip ClassVar, Final and Annotated wrappers."""
    origin = get_origin(type_hint)
    while origin in (ClassVar, Final, Annotated):
        args = get_args(type_hint)
        if not args:
            return Any
        type_hint = args[0]
        origin = get_origin(type_hint)
    return type_hint


def _optional_types_equal(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is right
    return types_equal(left, right)


def types_equal(left: Any, right: Any) -> bool:
    """
    Compare two type expressions structurally.

    Reflection hands out fresh objects for the same logical type (a
    TypeVar declared twice, List[int] vs list[int]); identity comparison
    is not enough.
    """
    if left is right:
        return True

    if isinstance(left, TypeVar) or isinstance(right, TypeVar):
        if not (isinstance(left, TypeVar) and isinstance(right, TypeVar)):
            return False
        return (
            left.__name__ == right.__name__
            and _optional_types_equal(left.__bound__, right.__bound__)
            and len(left.__constraints__) == len(right.__constraints__)
            and all(types_equal(a, b) for a, b in zip(left.__constraints__, right.__constraints__))
            and left.__covariant__ == right.__covariant__
            and left.__contravariant__ == right.__contravariant__
        )

    if isinstance(left, ForwardRef):
        left = left.__forward_arg__
    if isinstance(right, ForwardRef):
        right = right.__forward_arg__
    if isinstance(left, str) or isinstance(right, str):
        left_name = left if isinstance(left, str) else getattr(left, "__name__", None)
        right_name = right if isinstance(right, str) else getattr(right, "__name__", None)
        return left_name is not None and left_name == right_name

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(types_equal(a, b) for a, b in zip(left, right))

    left_origin, right_origin = get_origin(left), get_origin(right)
    if left_origin is None or right_origin is None:
        if left_origin is None and right_origin is None:
            return left == right
        return False

    left_args, right_args = get_args(left), get_args(right)

    # Union members are unordered
    if is_union_origin(left_origin) and is_union_origin(right_origin):
        return (
            all(any(types_equal(a, b) for b in right_args) for a in left_args)
            and all(any(types_equal(b, a) for a in left_args) for b in right_args)
        )

    if left_origin is not right_origin:
        return False

    return len(left_args) == len(right_args) and all(
        types_equal(a, b) for a, b in zip(left_args, right_args)
    )


def is_assignable(value: Any, declared_type: Any) -> bool:
    """
    Check whether a runtime value may be stored under a declared type.

    Parameterized generics are checked against their origin only; Any,
    unresolved forward references, unbound TypeVars and non-runtime
    protocols accept every value.
    """
    declared_type = unwrap_qualifiers(declared_type)

    if declared_type is Any or declared_type is object:
        return True

    if declared_type is None or declared_type is type(None):
        return value is None

    if isinstance(declared_type, (str, ForwardRef)):
        return True

    if isinstance(declared_type, TypeVar):
        if declared_type.__bound__ is not None:
            return is_assignable(value, declared_type.__bound__)
        if declared_type.__constraints__:
            return any(is_assignable(value, c) for c in declared_type.__constraints__)
        return True

    origin = get_origin(declared_type)

    if is_union_origin(origin):
        return any(is_assignable(value, arg) for arg in get_args(declared_type))

    if origin is Literal:
        return value in get_args(declared_type)

    if origin is type:
        return isinstance(value, type)

    if origin is not None:
        declared_type = origin

    if not isinstance(declared_type, type):
        return True

    # Numeric tower: int is acceptable where float or complex is declared
    if declared_type is float and isinstance(value, int) and not isinstance(value, bool):
        return True
    if declared_type is complex and isinstance(value, (int, float)) and not isinstance(value, bool):
        return True

    try:
        return isinstance(value, declared_type)
    except TypeError:
        # Non-runtime-checkable protocols and similar
        return True


def collect_type_vars(type_hints: List[Any], exclude: Tuple[Any, ...] = ()) -> Tuple[TypeVar, ...]:
    """
    Collect distinct TypeVars from annotations in order of first appearance.

    Args:
        type_hints: Annotations to scan, in declaration order
        exclude: TypeVars owned by an enclosing generic class

    Returns:
        Tuple of TypeVars
    """
    found: List[TypeVar] = []

    def _walk(hint: Any) -> None:
        if isinstance(hint, TypeVar):
            if hint not in found and hint not in exclude:
                found.append(hint)
            return
        if isinstance(hint, (list, tuple)):
            for item in hint:
                _walk(item)
            return
        for arg in get_args(hint):
            _walk(arg)

    for hint in type_hints:
        _walk(hint)

    return tuple(found)


def get_module_directory(type_: type) -> Path:
    """
    Get the directory containing the source file of the module defining a type.

    Raises:
        TypeError: If the type is defined in a built-in or file-less module
    """
    module = sys.modules.get(type_.__module__)
    if module is None:
        raise TypeError(f"Module {type_.__module__} of {type_.__name__} is not loaded")

    try:
        path = inspect.getfile(module)
    except TypeError as e:
        raise TypeError(f"{type_.__name__} is defined in built-in module {type_.__module__}") from e

    return Path(path).resolve().parent
