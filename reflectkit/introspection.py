"""
Generic method introspection.

Python erases generics at runtime, so a generic method is located by
comparing its declared type parameters and parameter annotations
structurally. A method's type parameters are its PEP 695 __type_params__ or,
failing that, the TypeVars in its annotations that are not owned by the
declaring class. typing.overload variants are separate candidates.

Methods are enumerated most-derived class first, in definition order; a name
defined on a subclass hides every base definition of that name.
"""

import inspect
from dataclasses import dataclass, field
from enum import Enum, Flag
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar, get_overloads

from .config import config
from .exceptions import AmbiguousMethodError, MethodNotFoundError
from .logging import get_bound_logger
from .type_utils import (
    collect_type_vars,
    format_type_annotation,
    is_framework_class,
    resolve_type_hints_safely,
    types_equal,
)

logger = get_bound_logger("introspection")


class MethodScope(str, Enum):
    """Whether a method is called on an instance or on the type."""
    INSTANCE = "instance"
    STATIC = "static"


class Visibility(Flag):
    """Name-based visibility filter."""
    PUBLIC = 1
    NON_PUBLIC = 2
    ALL = 3


@dataclass(frozen=True)
class GenericMethodDescriptor:
    """A method resolved by name, generic arity and parameter signature."""

    owner: type
    name: str
    function: Callable
    generic_params: Tuple[TypeVar, ...]
    parameter_types: Tuple[Any, ...]
    scope: MethodScope
    passes_owner: bool = False
    declared_on: Optional[type] = field(default=None, compare=False)
    signature_source: Optional[Callable] = field(default=None, compare=False, repr=False)

    @property
    def arity(self) -> int:
        return len(self.generic_params)

    @property
    def is_static(self) -> bool:
        return self.scope is MethodScope.STATIC

    def describe(self) -> str:
        """Readable signature for logs and errors."""
        type_params = ", ".join(format_type_annotation(p) for p in self.generic_params)
        params = ", ".join(format_type_annotation(p) for p in self.parameter_types)
        return f"{self.owner.__name__}.{self.name}[{type_params}]({params})"


def _visible(name: str, visibility: Visibility) -> bool:
    if name.startswith("_"):
        return bool(visibility & Visibility.NON_PUBLIC)
    return bool(visibility & Visibility.PUBLIC)


def _unwrap_method(raw: Any) -> Optional[Tuple[Callable, MethodScope, bool]]:
    """Classify a class attribute as (function, scope, skip_first_parameter)."""
    if isinstance(raw, staticmethod):
        return raw.__func__, MethodScope.STATIC, False
    if isinstance(raw, classmethod):
        return raw.__func__, MethodScope.STATIC, True
    if inspect.isfunction(raw):
        return raw, MethodScope.INSTANCE, True
    return None


def _class_type_params(cls: type) -> Tuple[Any, ...]:
    return tuple(getattr(cls, "__parameters__", ())) + tuple(getattr(cls, "__type_params__", ()))


def _signature_types(variant: Callable, skip_first: bool) -> Tuple[Tuple[Any, ...], Any]:
    """Declared parameter types (receiver excluded) and the return type."""
    hints = resolve_type_hints_safely(variant)
    params = list(inspect.signature(variant).parameters.values())
    if skip_first and params:
        params = params[1:]
    parameter_types = tuple(hints.get(p.name, Any) for p in params)
    return parameter_types, hints.get("return", Any)


def _describe_variant(owner: type, declared_on: type, name: str, implementation: Callable,
                      variant: Callable, scope: MethodScope,
                      skip_first: bool) -> Optional[GenericMethodDescriptor]:
    parameter_types, return_type = _signature_types(variant, skip_first)

    generic_params = tuple(getattr(variant, "__type_params__", ()))
    if not generic_params:
        generic_params = collect_type_vars(
            list(parameter_types) + [return_type],
            exclude=_class_type_params(declared_on),
        )
    if not generic_params:
        return None

    return GenericMethodDescriptor(
        owner=owner,
        name=name,
        function=implementation,
        generic_params=generic_params,
        parameter_types=parameter_types,
        scope=scope,
        passes_owner=scope is MethodScope.STATIC and skip_first,
        declared_on=declared_on,
        signature_source=variant,
    )


def enumerate_generic_methods(
    type_: type,
    scope: MethodScope = MethodScope.INSTANCE,
    visibility: Visibility = Visibility.ALL,
) -> List[GenericMethodDescriptor]:
    """
    Enumerate the generic methods of a type.

    Args:
        type_: Class to inspect
        scope: Instance methods, or static and class methods
        visibility: Public, non-public or both

    Returns:
        Descriptors in enumeration order
    """
    if not isinstance(type_, type):
        raise TypeError(f"Expected a class, got {type(type_).__name__}: {type_!r}")

    methods = []
    seen = set()
    for cls in type_.__mro__:
        if is_framework_class(cls):
            continue
        for name, raw in vars(cls).items():
            if name in seen:
                continue
            seen.add(name)

            if not _visible(name, visibility):
                continue
            unwrapped = _unwrap_method(raw)
            if unwrapped is None:
                continue
            function, method_scope, skip_first = unwrapped
            if method_scope is not scope:
                continue

            variants = get_overloads(function) or [function]
            for variant in variants:
                descriptor = _describe_variant(
                    type_, cls, name, function, variant, method_scope, skip_first
                )
                if descriptor is not None:
                    methods.append(descriptor)

    return methods


def _generic_args_match(method: GenericMethodDescriptor, generic_arg_types: Sequence[Any]) -> bool:
    if method.arity != len(generic_arg_types):
        return False
    # A requested TypeVar names a declared parameter; a concrete type fills any slot
    return all(
        types_equal(declared, requested) if isinstance(requested, TypeVar) else True
        for declared, requested in zip(method.generic_params, generic_arg_types)
    )


def _parameters_match(method: GenericMethodDescriptor, arg_types: Sequence[Any]) -> bool:
    if len(method.parameter_types) != len(arg_types):
        return False
    return all(types_equal(declared, requested)
               for declared, requested in zip(method.parameter_types, arg_types))


def find_generic_method(
    type_: type,
    name: str,
    generic_arg_types: Sequence[Any],
    arg_types: Optional[Sequence[Any]] = None,
    scope: MethodScope = MethodScope.INSTANCE,
    visibility: Visibility = Visibility.ALL,
    strict: Optional[bool] = None,
) -> GenericMethodDescriptor:
    """
    Locate a generic method by name, generic arity and optional signature.

    The first structurally matching method in enumeration order wins. When
    several match, the choice depends on enumeration order; a warning is
    logged, or AmbiguousMethodError raised in strict mode.

    Args:
        type_: Class to search
        name: Method name
        generic_arg_types: One entry per generic parameter
        arg_types: Declared parameter types to match, receiver excluded
        scope: Instance methods, or static and class methods
        visibility: Public, non-public or both
        strict: Override config.strict_method_resolution

    Returns:
        The resolved method descriptor

    Raises:
        MethodNotFoundError: If no candidate matches
        AmbiguousMethodError: If several match and strict mode is on
    """
    generic_arg_types = tuple(generic_arg_types)
    candidates = [
        method for method in enumerate_generic_methods(type_, scope, visibility)
        if method.name == name
        and _generic_args_match(method, generic_arg_types)
        and (arg_types is None or _parameters_match(method, arg_types))
    ]

    if not candidates:
        logger.debug("method.not_found", owner=type_.__name__, method=name,
                     arity=len(generic_arg_types), scope=scope.value)
        raise MethodNotFoundError(type_, name, len(generic_arg_types))

    if len(candidates) > 1:
        if config.strict_method_resolution if strict is None else strict:
            raise AmbiguousMethodError(type_, name, len(candidates))
        logger.warning("method.ambiguous", owner=type_.__name__, method=name,
                       candidates=[c.describe() for c in candidates])

    chosen = candidates[0]
    logger.debug("method.resolved", method=chosen.describe(), scope=scope.value)
    return chosen


def find_static_generic_method(
    type_: type,
    name: str,
    generic_arg_types: Sequence[Any],
    arg_types: Optional[Sequence[Any]] = None,
    visibility: Visibility = Visibility.ALL,
    strict: Optional[bool] = None,
) -> GenericMethodDescriptor:
    """Locate a static or class generic method; see find_generic_method."""
    return find_generic_method(
        type_, name, generic_arg_types, arg_types,
        scope=MethodScope.STATIC, visibility=visibility, strict=strict,
    )
