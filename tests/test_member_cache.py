#!/usr/bin/env python3
"""
Test suite for the per-type member cache

Verifies projection of objects into ordered string mappings and that each
concrete type is introspected exactly once.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional
from unittest.mock import Mock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reflectkit.cache import MemberCache, stringify
from reflectkit.members import enumerate_members


@dataclass
class Order:
    order_id: int
    customer: str
    note: Optional[str] = None

    @property
    def reference(self) -> str:
        return f"ORD-{self.order_id}"


@dataclass
class PriorityOrder(Order):
    priority: int = 1


@pytest.fixture
def introspect():
    """Member enumeration spy"""
    return Mock(wraps=enumerate_members)


@pytest.fixture
def cache(introspect):
    return MemberCache(introspect=introspect)


class TestToStringMapping:
    """Test object projection"""

    def test_projection(self, cache):
        mapping = cache.to_string_mapping(Order(7, "ada"))
        assert mapping == {"order_id": "7", "customer": "ada", "note": "", "reference": "ORD-7"}
        assert list(mapping) == ["order_id", "customer", "note", "reference"]

    def test_custom_none_text(self, introspect):
        cache = MemberCache(introspect=introspect, none_text="null")
        assert cache.to_string_mapping(Order(1, "b"))["note"] == "null"

    def test_values_use_default_string_conversion(self, cache):
        mapping = cache.to_string_mapping(Order(1, "b", note=["x"]))
        assert mapping["note"] == "['x']"


class TestCaching:
    """Test per-type memoization"""

    def test_introspects_once_per_type(self, cache, introspect):
        first = cache.to_string_mapping(Order(1, "a"))
        second = cache.to_string_mapping(Order(2, "b"))
        introspect.assert_called_once_with(Order)
        assert list(first) == list(second)
        assert cache.misses == 1
        assert cache.hits == 1

    def test_keyed_by_runtime_type(self, cache, introspect):
        """A subclass instance gets its own entry and its own members"""
        order: Order = PriorityOrder(3, "c", priority=2)
        mapping = cache.to_string_mapping(order)
        assert mapping["priority"] == "2"
        assert PriorityOrder in cache
        assert Order not in cache
        cache.to_string_mapping(Order(1, "a"))
        assert introspect.call_count == 2
        assert len(cache) == 2

    def test_members_for(self, cache):
        members = cache.members_for(Order)
        assert members is cache.members_for(Order)
        assert [m.name for m in members] == ["order_id", "customer", "note", "reference"]

    def test_invalidate(self, cache, introspect):
        cache.members_for(Order)
        assert cache.invalidate(Order)
        assert not cache.invalidate(Order)
        cache.members_for(Order)
        assert introspect.call_count == 2

    def test_clear_and_stats(self, cache):
        cache.members_for(Order)
        cache.members_for(Order)
        stats = cache.stats()
        assert stats == {"size": 1, "hits": 1, "misses": 1, "hit_rate": 0.5}
        cache.clear()
        assert cache.stats()["size"] == 0
        assert cache.hits == 0


class TestStringify:
    def test_none(self):
        assert stringify(None) == ""
        assert stringify(None, "-") == "-"

    def test_values(self):
        assert stringify(1.5) == "1.5"
        assert stringify(True) == "True"
