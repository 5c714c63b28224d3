#!/usr/bin/env python3
"""
Test suite for generic method resolution

Tests cover:
- Arity-based matching independent of the concrete type arguments
- Structural matching of TypeVars and parameter signatures
- Instance vs static scope and visibility filters
- First-match resolution between overloads and strict mode
- Shadowing across inheritance and generic class parameters
"""

import os
import sys
from typing import Callable, Generic, List, Tuple, TypeVar, get_overloads, overload
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reflectkit.config import config
from reflectkit.exceptions import AmbiguousMethodError, MethodNotFoundError
from reflectkit.introspection import (
    MethodScope,
    Visibility,
    enumerate_generic_methods,
    find_generic_method,
    find_static_generic_method,
)

X = TypeVar("X")
Y = TypeVar("Y")
T = TypeVar("T")


class Converter:
    def identity(self, x: X) -> X:
        return x

    def pair(self, a: X, b: Y) -> Tuple[X, Y]:
        return a, b

    def plain(self, value: int) -> int:
        return value

    def _secret(self, x: X) -> List[X]:
        return [x]

    @staticmethod
    def make(value: X) -> List[X]:
        return [value]

    @classmethod
    def describe(cls, value: X) -> str:
        return f"{cls.__name__}:{value}"


class Formatter:
    @overload
    def render(self, value: X) -> str: ...

    @overload
    def render(self, value: List[X]) -> str: ...

    def render(self, value):
        return f"rendered:{value}"


class Base:
    def convert(self, value: X) -> X:
        return value

    def base_only(self, value: X) -> X:
        return value


class Derived(Base):
    def convert(self, value: X) -> List[X]:
        return [value]


class Box(Generic[T]):
    def __init__(self, item: T):
        self.item = item

    def get(self) -> T:
        return self.item

    def map(self, fn: Callable[[T], X]) -> X:
        return fn(self.item)


class TestFindGenericMethod:
    """Test instance generic method lookup"""

    def test_matches_by_arity(self):
        """Any concrete type argument fills a single generic parameter"""
        for type_arg in (int, str, List[int]):
            method = find_generic_method(Converter, "identity", [type_arg])
            assert method.function is Converter.identity
            assert method.arity == 1
            assert method.generic_params == (X,)

    def test_arity_mismatch(self):
        with pytest.raises(MethodNotFoundError) as exc_info:
            find_generic_method(Converter, "identity", [int, str])
        assert exc_info.value.code == "METHOD_NOT_FOUND"
        assert exc_info.value.arity == 2

    def test_two_type_parameters(self):
        method = find_generic_method(Converter, "pair", [int, str])
        assert method.generic_params == (X, Y)
        assert method.parameter_types == (X, Y)

    def test_non_generic_method_is_not_found(self):
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "plain", [int])

    def test_unknown_name(self):
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "missing", [int])

    def test_requested_typevar_matches_structurally(self):
        """A freshly created TypeVar equal in name and bounds matches"""
        assert find_generic_method(Converter, "identity", [TypeVar("X")]).name == "identity"
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "identity", [TypeVar("Z")])

    def test_parameter_signature(self):
        """Declared parameter types are compared structurally, receiver excluded"""
        method = find_generic_method(Converter, "identity", [int], arg_types=[TypeVar("X")])
        assert method.name == "identity"
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "identity", [int], arg_types=[int])

    def test_visibility(self):
        """Non-public methods are found unless only public ones are requested"""
        assert find_generic_method(Converter, "_secret", [int]).name == "_secret"
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "_secret", [int], visibility=Visibility.PUBLIC)
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "identity", [int], visibility=Visibility.NON_PUBLIC)

    def test_static_methods_need_static_scope(self):
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Converter, "make", [int])
        method = find_generic_method(Converter, "make", [int], scope=MethodScope.STATIC)
        assert method.is_static
        assert not method.passes_owner

    def test_instance_methods_are_not_static(self):
        with pytest.raises(MethodNotFoundError):
            find_static_generic_method(Converter, "identity", [int])

    def test_classmethod_is_static_and_receives_owner(self):
        method = find_static_generic_method(Converter, "describe", [int])
        assert method.passes_owner
        assert method.parameter_types == (X,)


class TestOverloadResolution:
    """Test first-match resolution between overloads"""

    def test_first_overload_wins(self):
        """Both overloads match arity 1; declaration order decides"""
        method = find_generic_method(Formatter, "render", [int])
        assert method.signature_source is get_overloads(Formatter.render)[0]
        assert method.parameter_types == (X,)

    def test_ambiguity_is_logged(self):
        with patch("reflectkit.introspection.logger") as mock_logger:
            find_generic_method(Formatter, "render", [int])
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[0][0] == "method.ambiguous"

    def test_signature_selects_overload(self):
        method = find_generic_method(Formatter, "render", [int], arg_types=[List[X]])
        assert method.signature_source is get_overloads(Formatter.render)[1]
        assert method.function is Formatter.render

    def test_strict_argument(self):
        with pytest.raises(AmbiguousMethodError) as exc_info:
            find_generic_method(Formatter, "render", [int], strict=True)
        assert exc_info.value.candidates == 2

    def test_strict_config(self, monkeypatch):
        monkeypatch.setattr(config, "strict_method_resolution", True)
        with pytest.raises(AmbiguousMethodError):
            find_generic_method(Formatter, "render", [int])
        # An explicit argument overrides the setting
        assert find_generic_method(Formatter, "render", [int], strict=False).name == "render"

    def test_enumeration_lists_every_overload(self):
        methods = [m for m in enumerate_generic_methods(Formatter) if m.name == "render"]
        assert len(methods) == 2


class TestInheritance:
    """Test lookup across the MRO"""

    def test_subclass_definition_shadows_base(self):
        method = find_generic_method(Derived, "convert", [int])
        assert method.declared_on is Derived
        assert method.owner is Derived
        assert len([m for m in enumerate_generic_methods(Derived) if m.name == "convert"]) == 1

    def test_inherited_method(self):
        method = find_generic_method(Derived, "base_only", [int])
        assert method.declared_on is Base
        assert method.owner is Derived

    def test_enumeration_order_is_most_derived_first(self):
        names = [m.name for m in enumerate_generic_methods(Derived)]
        assert names == ["convert", "base_only"]

    def test_class_type_parameters_are_not_method_parameters(self):
        """Box.get only uses the class parameter T"""
        with pytest.raises(MethodNotFoundError):
            find_generic_method(Box, "get", [int])
        method = find_generic_method(Box, "map", [str])
        assert method.generic_params == (X,)

    def test_requires_class(self):
        with pytest.raises(TypeError):
            enumerate_generic_methods(Converter())
