"""Mapping conventions shared by StringSet and HeterogeneousStore.

All helpers operate on any MutableMapping. get_or_add and add_or_update are
check-then-act sequences; under concurrent use a factory may run more than
once or a write may be lost.
"""

from typing import Any, Callable, MutableMapping, Mapping, Optional, TypeVar

from .exceptions import InvalidCastError
from .type_utils import is_assignable

K = TypeVar("K")
V = TypeVar("V")


def type_key(type_: type) -> str:
    """Key used for implicit, type-addressed storage."""
    return type_.__name__


def cast_value(value: Any, expected_type: Optional[Any]) -> Any:
    """
    Check that a value is assignable to expected_type and return it.

    None passes every cast; no expected_type means no check.

    Raises:
        InvalidCastError: If the value's runtime type is not assignable
    """
    if expected_type is None or value is None:
        return value
    if not is_assignable(value, expected_type):
        raise InvalidCastError(value, expected_type)
    return value


def try_get(mapping: Mapping[K, V], key: K, default: Optional[V] = None) -> Optional[V]:
    """Get the value for key, or default if absent."""
    if key in mapping:
        return mapping[key]
    return default


def try_get_or_else(mapping: Mapping[K, V], key: K, default_factory: Callable[[K], V]) -> V:
    """Get the value for key, or default_factory(key) if absent. Nothing is stored."""
    if key in mapping:
        return mapping[key]
    return default_factory(key)


def get_or_add(mapping: MutableMapping[K, V], key: K, factory: Callable[[K], V]) -> V:
    """Get the value for key; if absent store and return factory(key)."""
    if key not in mapping:
        value = factory(key)
        mapping[key] = value
        return value
    return mapping[key]


def add_or_update(mapping: MutableMapping[K, V], key: K, value: V,
                  update_fn: Callable[[K, V], V]) -> V:
    """
    Store value if key is absent, otherwise store update_fn(key, existing).

    Returns:
        The value now stored under key
    """
    if key not in mapping:
        mapping[key] = value
        return value

    updated = update_fn(key, mapping[key])
    mapping[key] = updated
    return updated
