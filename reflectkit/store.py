"""
Heterogeneous store: string keys to values of any per-entry type.

Values are addressed by explicit key or, implicitly, by the name of their
type. Implicit addressing is a thin wrapper over explicit keys, so both modes
share one storage and one key namespace.
"""

from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, Type, TypeVar

from . import mappings
from .logging import get_bound_logger

logger = get_bound_logger("store")

T = TypeVar("T")


class HeterogeneousStore(MutableMapping[str, Any]):
    """String-keyed store holding values of arbitrary types."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        if initial:
            self.update(initial)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Store keys must be str, got {type(key).__name__}: {key!r}")
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"HeterogeneousStore({self._data!r})"

    def get(self, key: str, default: Any = None, expected_type: Optional[Any] = None) -> Any:
        """
        Get the value for key, or default if absent.

        Args:
            key: Entry key
            default: Returned when key is absent
            expected_type: If given, a stored value must be assignable to it

        Raises:
            InvalidCastError: If the stored value is not of expected_type
        """
        if key not in self._data:
            return default
        return mappings.cast_value(self._data[key], expected_type)

    def try_get_or_else(self, key: str, default_factory: Callable[[str], Any],
                        expected_type: Optional[Any] = None) -> Any:
        """Get the value for key, or default_factory(key) without storing it."""
        if key not in self._data:
            return default_factory(key)
        return mappings.cast_value(self._data[key], expected_type)

    def get_or_add(self, key: str, factory: Callable[[str], Any],
                   expected_type: Optional[Any] = None) -> Any:
        """Get the value for key; if absent store and return factory(key)."""
        value = mappings.get_or_add(self, key, factory)
        return mappings.cast_value(value, expected_type)

    def add_or_update(self, key: str, value: Any, update_fn: Callable[[str, Any], Any]) -> Any:
        """Store value if key is absent, else store update_fn(key, existing)."""
        return mappings.add_or_update(self, key, value, update_fn)

    def add(self, value: Any, key: Optional[str] = None, as_type: Optional[type] = None) -> str:
        """
        Store a value, overwriting any previous entry.

        Without an explicit key the value is stored under the name of
        as_type, or of its own runtime type.

        Returns:
            The key used
        """
        if key is None:
            key = mappings.type_key(as_type or type(value))
        self[key] = value
        logger.debug("store.add", key=key, value_type=type(value).__name__)
        return key

    def get_typed(self, type_: Type[T], default: Optional[T] = None) -> Optional[T]:
        """
        Get the value stored under type_'s name, cast to type_.

        Raises:
            InvalidCastError: If the stored value is not assignable to type_
        """
        return self.get(mappings.type_key(type_), default, expected_type=type_)

    def remove_typed(self, type_: type) -> bool:
        """Remove the value stored under type_'s name."""
        key = mappings.type_key(type_)
        if key in self._data:
            del self._data[key]
            return True
        return False
