"""
Per-type member cache.

Projects an object's public members into an ordered string-to-string mapping.
The member list is computed once per concrete runtime type and kept for the
life of the cache; a type's member layout is assumed fixed once loaded.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import config
from .logging import get_bound_logger
from .members import MemberDescriptor, enumerate_members, get_value

logger = get_bound_logger("member_cache")


def stringify(value: Any, none_text: Optional[str] = None) -> str:
    """Render a value with its default string conversion; None becomes none_text."""
    if value is None:
        return config.none_text if none_text is None else none_text
    return str(value)


class MemberCache:
    """Memoizes each concrete type's public member list."""

    def __init__(self,
                 introspect: Callable[[type], List[MemberDescriptor]] = enumerate_members,
                 none_text: Optional[str] = None):
        """
        Initialize member cache.

        Args:
            introspect: Member enumeration used on a cache miss
            none_text: Text for None values (defaults to config.none_text)
        """
        self._introspect = introspect
        self.none_text = none_text
        self._cache: Dict[type, Tuple[MemberDescriptor, ...]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def members_for(self, type_: type) -> Tuple[MemberDescriptor, ...]:
        """Get the public members of a type, introspecting on first use."""
        members = self._cache.get(type_)
        if members is not None:
            self._hits += 1
            return members

        with self._lock:
            members = self._cache.get(type_)
            if members is None:
                self._misses += 1
                members = tuple(self._introspect(type_))
                self._cache[type_] = members
                logger.debug("cache.miss", type_name=type_.__qualname__, members=len(members))
            else:
                self._hits += 1
        return members

    def to_string_mapping(self, obj: Any) -> Dict[str, str]:
        """
        Project obj's public members to an ordered string mapping.

        Keyed by obj's runtime type, not the declared type of the reference.
        """
        return {
            member.name: stringify(get_value(member, obj), self.none_text)
            for member in self.members_for(type(obj))
        }

    def __contains__(self, type_: type) -> bool:
        return type_ in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def invalidate(self, type_: type) -> bool:
        """Remove a type's entry."""
        with self._lock:
            return self._cache.pop(type_, None) is not None

    def clear(self) -> None:
        """Clear all cached member lists and statistics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._hits + self._misses
        hit_rate = self._hits / total_requests if total_requests > 0 else 0

        return {
            "size": len(self._cache),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": hit_rate,
        }
