"""
Generic method invocation.

Binds concrete type arguments to a resolved generic method and calls it.
Invocation is a pass-through: whatever the method raises reaches the caller
unchanged.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Sequence, TypeVar

from .introspection import (
    GenericMethodDescriptor,
    MethodScope,
    Visibility,
    find_generic_method,
)
from .logging import get_bound_logger

logger = get_bound_logger("invoker")


@dataclass(frozen=True)
class BoundGenericMethod:
    """A generic method with its type parameters bound to concrete types."""

    method: GenericMethodDescriptor
    type_arguments: Mapping[TypeVar, Any]

    def invoke(self, target: Any = None, /, *args, **kwargs) -> Any:
        """
        Call the method.

        Args:
            target: Receiver for instance methods; ignored by static methods,
                used as the owner type by class methods when given
            *args: Positional call arguments
            **kwargs: Keyword call arguments

        Returns:
            The method's result (None for methods without one)
        """
        method = self.method
        if method.scope is MethodScope.INSTANCE:
            if target is None:
                raise TypeError(f"{method.describe()} requires a target instance")
            return method.function(target, *args, **kwargs)

        if method.passes_owner:
            owner = method.owner
            if target is not None:
                owner = target if isinstance(target, type) else type(target)
            return method.function(owner, *args, **kwargs)

        return method.function(*args, **kwargs)


def bind_generic_method(method: GenericMethodDescriptor,
                        generic_arg_types: Sequence[Any]) -> BoundGenericMethod:
    """Bind concrete type arguments to a generic method's type parameters."""
    generic_arg_types = tuple(generic_arg_types)
    if len(generic_arg_types) != method.arity:
        raise TypeError(
            f"{method.describe()} takes {method.arity} type argument(s), "
            f"got {len(generic_arg_types)}"
        )
    type_arguments = MappingProxyType(dict(zip(method.generic_params, generic_arg_types)))
    return BoundGenericMethod(method, type_arguments)


def invoke_generic(target: Any, method_name: str, generic_arg_types: Sequence[Any],
                   /, *args, **kwargs) -> Any:
    """
    Resolve and invoke a generic instance method on target's runtime type.

    Public and non-public methods are searched.

    Raises:
        MethodNotFoundError: If no generic method matches
    """
    method = find_generic_method(
        type(target), method_name, generic_arg_types,
        scope=MethodScope.INSTANCE, visibility=Visibility.ALL,
    )
    logger.debug("method.invoke", method=method.describe())
    return bind_generic_method(method, generic_arg_types).invoke(target, *args, **kwargs)


def invoke_static_generic(type_or_instance: Any, method_name: str,
                          generic_arg_types: Sequence[Any], /, *args, **kwargs) -> Any:
    """
    Resolve and invoke a generic static or class method.

    An instance may be passed in place of the type; its runtime type is
    searched and no receiver is passed.

    Raises:
        MethodNotFoundError: If no generic method matches
    """
    type_ = type_or_instance if isinstance(type_or_instance, type) else type(type_or_instance)
    method = find_generic_method(
        type_, method_name, generic_arg_types,
        scope=MethodScope.STATIC, visibility=Visibility.ALL,
    )
    logger.debug("method.invoke", method=method.describe())
    return bind_generic_method(method, generic_arg_types).invoke(type_, *args, **kwargs)
