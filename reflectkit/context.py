"""
Reflection context.

Owns the process-wide state: the per-type member cache and the default
string set serializer. Reassigning the serializer is not synchronized; keep
to one writer at a time.
"""

from typing import TYPE_CHECKING, Callable, Optional

from .cache import MemberCache

if TYPE_CHECKING:
    from .string_set import StringSet

Serializer = Callable[["StringSet"], str]


class ReflectionContext:
    """Member cache plus the serializer used when none is passed per call."""

    def __init__(self, member_cache: Optional[MemberCache] = None,
                 serializer: Optional[Serializer] = None):
        self.member_cache = member_cache if member_cache is not None else MemberCache()
        self._serializer = serializer

    @property
    def serializer(self) -> Serializer:
        if self._serializer is None:
            from .string_set import default_string_set_serializer
            return default_string_set_serializer
        return self._serializer

    @serializer.setter
    def serializer(self, value: Optional[Serializer]) -> None:
        self._serializer = value

    def reset_serializer(self) -> None:
        self._serializer = None


_default_context = ReflectionContext()


def default_context() -> ReflectionContext:
    """Get the process-wide context."""
    return _default_context


def set_default_serializer(serializer: Optional[Serializer]) -> None:
    """Swap the process-wide string set serializer; None restores the default."""
    _default_context.serializer = serializer


def reset_default_serializer() -> None:
    _default_context.reset_serializer()
