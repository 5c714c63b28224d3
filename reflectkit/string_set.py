"""
String set: an ordered, case-sensitive string-to-string mapping.

Objects convert into a StringSet through to_string_set(); rendering to text
goes through a pluggable serializer, per call or process-wide via the
reflection context.
"""

from typing import Any, Callable, Dict, Iterator, Mapping, MutableMapping, Optional

from . import mappings
from .cache import stringify
from .constants import STRING_SET_CLOSE, STRING_SET_OPEN, STRING_SET_SEPARATOR
from .context import ReflectionContext, default_context


class StringSet(MutableMapping[str, str]):
    """Ordered str -> str mapping; values are stringified on assignment."""

    def __init__(self, source: Optional[Mapping[str, Any]] = None,
                 none_text: Optional[str] = None):
        self.none_text = none_text
        self._data: Dict[str, str] = {}
        if source is not None:
            for key, value in source.items():
                self[key] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"StringSet keys must be str, got {type(key).__name__}: {key!r}")
        self._data[key] = value if isinstance(value, str) else stringify(value, self.none_text)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"StringSet({self._data!r})"

    def __str__(self) -> str:
        return self.to_text()

    @classmethod
    def from_object(cls, obj: Any, context: Optional[ReflectionContext] = None) -> "StringSet":
        """Project obj's public members through the context's member cache."""
        context = context or default_context()
        return cls(context.member_cache.to_string_mapping(obj))

    def to_text(self, serializer: Optional[Callable[["StringSet"], str]] = None,
                context: Optional[ReflectionContext] = None) -> str:
        """
        Render the set as text.

        Args:
            serializer: Per-call serializer; takes precedence over the context's
            context: Context supplying the default serializer

        Returns:
            Rendered text
        """
        if serializer is not None:
            return serializer(self)
        return (context or default_context()).serializer(self)

    def try_get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return mappings.try_get(self, key, default)

    def get_or_add(self, key: str, factory: Callable[[str], Any]) -> str:
        """Get the value for key; if absent store the stringified factory(key)."""
        mappings.get_or_add(self, key, factory)
        return self[key]

    def add_or_update(self, key: str, value: Any, update_fn: Callable[[str, str], Any]) -> str:
        mappings.add_or_update(self, key, value, update_fn)
        return self[key]


def default_string_set_serializer(string_set: Mapping[str, str]) -> str:
    """Render as { "k1":"v1", "k2":"v2" } in iteration order."""
    pairs = STRING_SET_SEPARATOR.join(f'"{key}":"{value}"' for key, value in string_set.items())
    return f"{STRING_SET_OPEN}{pairs}{STRING_SET_CLOSE}"


def to_string_set(source: Any, context: Optional[ReflectionContext] = None) -> StringSet:
    """
    Convert source into a StringSet.

    A StringSet is returned as is; a mapping is copied with its values
    stringified; any other object has its public members projected through
    the member cache.
    """
    if isinstance(source, StringSet):
        return source
    if isinstance(source, Mapping):
        return StringSet(source)
    return StringSet.from_object(source, context)
