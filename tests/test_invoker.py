#!/usr/bin/env python3
"""
Test suite for generic method invocation

Tests binding of type arguments and pass-through invocation of instance,
static and class generic methods.
"""

import os
import sys
from typing import Dict, List, TypeVar

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reflectkit.exceptions import MethodNotFoundError
from reflectkit.introspection import find_generic_method
from reflectkit.invoker import bind_generic_method, invoke_generic, invoke_static_generic

X = TypeVar("X")
K = TypeVar("K")


class Registry:
    def __init__(self):
        self.entries: Dict[str, object] = {}

    def identity(self, x: X) -> X:
        return x

    def register(self, key: str, value: X) -> X:
        self.entries[key] = value
        return value

    def index(self, key: K, values: List[X], *, reverse: bool = False) -> Dict[K, List[X]]:
        return {key: list(reversed(values)) if reverse else values}

    def clear(self, value: X) -> None:
        self.entries.clear()

    def fail(self, value: X) -> X:
        raise ValueError(f"rejected {value}")

    def route(self, value: X, *, target: str = "", method_name: str = "",
              generic_arg_types: str = "") -> str:
        return f"{value}->{target}{method_name}{generic_arg_types}"

    @staticmethod
    def dispatch(value: X, *, type_or_instance: str = "") -> str:
        return f"{value}@{type_or_instance}"

    def _wrap(self, value: X) -> List[X]:
        return [value]

    @staticmethod
    def build(value: X) -> List[X]:
        return [value, value]

    @classmethod
    def label(cls, value: X) -> str:
        return f"{cls.__name__}:{value}"


class ChildRegistry(Registry):
    pass


class TestInvokeGeneric:
    """Test instance method invocation"""

    def test_identity(self):
        assert invoke_generic(Registry(), "identity", [int], 42) == 42

    def test_side_effects_on_target(self):
        registry = Registry()
        assert invoke_generic(registry, "register", [int], "answer", 42) == 42
        assert registry.entries == {"answer": 42}

    def test_keyword_arguments(self):
        result = invoke_generic(Registry(), "index", [str, int], "k", [1, 2], reverse=True)
        assert result == {"k": [2, 1]}

    def test_method_without_result(self):
        registry = Registry()
        registry.entries["a"] = 1
        assert invoke_generic(registry, "clear", [int], 0) is None
        assert registry.entries == {}

    def test_non_public_method(self):
        assert invoke_generic(Registry(), "_wrap", [str], "a") == ["a"]

    def test_resolves_against_runtime_type(self):
        assert invoke_generic(ChildRegistry(), "identity", [str], "x") == "x"

    def test_errors_propagate_unchanged(self):
        with pytest.raises(ValueError, match="rejected 5"):
            invoke_generic(Registry(), "fail", [int], 5)

    def test_method_not_found(self):
        with pytest.raises(MethodNotFoundError):
            invoke_generic(Registry(), "identity", [int, int], 1)
        with pytest.raises(MethodNotFoundError):
            invoke_generic(Registry(), "build", [int], 1)

    def test_keywords_named_like_invoker_parameters(self):
        """Keywords the invoker itself takes positionally reach the method"""
        assert invoke_generic(Registry(), "route", [int], 1, target="x") == "1->x"
        result = invoke_generic(Registry(), "route", [int], 2,
                                method_name="m", generic_arg_types="g")
        assert result == "2->mg"


class TestInvokeStaticGeneric:
    """Test static and class method invocation"""

    def test_static_on_type(self):
        assert invoke_static_generic(Registry, "build", [int], 3) == [3, 3]

    def test_static_on_instance(self):
        """An instance stands in for its runtime type"""
        assert invoke_static_generic(Registry(), "build", [str], "a") == ["a", "a"]

    def test_classmethod_receives_searched_type(self):
        assert invoke_static_generic(Registry, "label", [int], 5) == "Registry:5"
        assert invoke_static_generic(ChildRegistry, "label", [int], 5) == "ChildRegistry:5"

    def test_instance_method_not_static(self):
        with pytest.raises(MethodNotFoundError):
            invoke_static_generic(Registry, "identity", [int], 1)

    def test_keywords_named_like_invoker_parameters(self):
        assert invoke_static_generic(Registry, "dispatch", [int], 1, type_or_instance="t") == "1@t"


class TestBindGenericMethod:
    """Test binding type arguments"""

    def test_type_arguments(self):
        method = find_generic_method(Registry, "index", [str, int])
        bound = bind_generic_method(method, [str, int])
        assert dict(bound.type_arguments) == {K: str, X: int}
        assert bound.invoke(Registry(), "k", [1]) == {"k": [1]}

    def test_wrong_number_of_type_arguments(self):
        method = find_generic_method(Registry, "identity", [int])
        with pytest.raises(TypeError):
            bind_generic_method(method, [int, str])

    def test_instance_method_requires_target(self):
        bound = bind_generic_method(find_generic_method(Registry, "identity", [int]), [int])
        with pytest.raises(TypeError):
            bound.invoke(None, 1)

    def test_type_arguments_are_read_only(self):
        bound = bind_generic_method(find_generic_method(Registry, "identity", [int]), [int])
        with pytest.raises(TypeError):
            bound.type_arguments[X] = str

    def test_bound_invoke_forwards_target_keyword(self):
        bound = bind_generic_method(find_generic_method(Registry, "route", [int]), [int])
        assert bound.invoke(Registry(), 3, target="y") == "3->y"
