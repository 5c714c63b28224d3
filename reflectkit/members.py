"""
Member access for arbitrary Python types.

A member is a public instance field or property. Fields come from dataclass
fields, pydantic model fields, __slots__ or class-level annotations;
properties are property and functools.cached_property descriptors. Both are
collected base-first across the MRO in declaration order.
"""

import dataclasses
import inspect
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, ClassVar, Dict, List, get_origin

from pydantic import BaseModel, ValidationError

from .exceptions import (
    InvalidTargetError,
    MemberNotFoundError,
    ReadOnlyMemberError,
    TypeMismatchError,
)
from .type_utils import (
    format_type_annotation,
    is_assignable,
    is_framework_class,
    resolve_type_hints_safely,
    unwrap_qualifiers,
)


class MemberKind(str, Enum):
    """Kind of an accessible member."""
    FIELD = "field"
    PROPERTY = "property"


@dataclass(frozen=True)
class MemberDescriptor:
    """A named, typed field-or-property resolved against a type."""

    name: str
    declared_type: Any
    kind: MemberKind
    owner: type
    accessor: Any = field(default=None, compare=False, repr=False)

    @property
    def is_property(self) -> bool:
        return self.kind is MemberKind.PROPERTY


def is_public_name(name: str) -> bool:
    return not name.startswith("_")


def _user_mro(type_: type) -> List[type]:
    """Base-first MRO without object and framework base classes."""
    return [cls for cls in reversed(type_.__mro__) if not is_framework_class(cls)]


def _is_class_var(hint: Any) -> bool:
    if isinstance(hint, str):
        return hint.startswith(("ClassVar", "typing.ClassVar"))
    return get_origin(hint) is ClassVar or hint is ClassVar


_NON_FIELD_ATTRIBUTES = (staticmethod, classmethod, property, cached_property)


def _is_method_like(attr: Any) -> bool:
    return inspect.isfunction(attr) or isinstance(attr, _NON_FIELD_ATTRIBUTES)


def _field_types(type_: type) -> Dict[str, Any]:
    """Ordered mapping of public field name to declared type."""
    if isinstance(type_, type) and issubclass(type_, BaseModel):
        return {
            name: info.annotation if info.annotation is not None else Any
            for name, info in type_.model_fields.items()
            if is_public_name(name)
        }

    hints = resolve_type_hints_safely(type_)
    fields: Dict[str, Any] = {}

    is_dataclass = dataclasses.is_dataclass(type_)
    if is_dataclass:
        for f in dataclasses.fields(type_):
            if is_public_name(f.name):
                fields[f.name] = unwrap_qualifiers(hints.get(f.name, Any))

    for cls in _user_mro(type_):
        # Annotations of decorated classes are already covered by fields()
        if is_dataclass and "__dataclass_fields__" in cls.__dict__:
            continue

        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if is_public_name(name) and name not in fields:
                fields[name] = unwrap_qualifiers(hints.get(name, Any))

        for name, raw_hint in inspect.get_annotations(cls).items():
            if not is_public_name(name) or name in fields:
                continue
            hint = hints.get(name, raw_hint)
            if _is_class_var(hint) or _is_class_var(raw_hint):
                continue
            # Annotated names that resolve to methods or properties are not fields
            if _is_method_like(inspect.getattr_static(type_, name, None)):
                continue
            fields[name] = unwrap_qualifiers(hint)

    return fields


def _property_type(accessor: Any) -> Any:
    getter = accessor.func if isinstance(accessor, cached_property) else accessor.fget
    if getter is None:
        return Any
    return resolve_type_hints_safely(getter).get("return", Any)


def enumerate_members(type_: type) -> List[MemberDescriptor]:
    """
    Enumerate the public instance members of a type.

    Fields come first, then properties, each group in base-first declaration
    order. An override keeps the position of the member it overrides.

    Args:
        type_: Class to inspect

    Returns:
        Ordered list of member descriptors
    """
    if not isinstance(type_, type):
        raise TypeError(f"Expected a class, got {type(type_).__name__}: {type_!r}")

    members = [
        MemberDescriptor(name, declared_type, MemberKind.FIELD, type_)
        for name, declared_type in _field_types(type_).items()
    ]

    seen = set()
    for cls in _user_mro(type_):
        for name, value in vars(cls).items():
            if name in seen or not is_public_name(name):
                continue
            if not isinstance(value, (property, cached_property)):
                continue
            # Resolve against the most derived class
            accessor = inspect.getattr_static(type_, name)
            if not isinstance(accessor, (property, cached_property)):
                continue
            seen.add(name)
            members.append(
                MemberDescriptor(name, _property_type(accessor), MemberKind.PROPERTY, type_, accessor)
            )

    return members


def get_member(type_: type, name: str) -> MemberDescriptor:
    """Get a public member of a type by name."""
    for member in enumerate_members(type_):
        if member.name == name:
            return member
    raise MemberNotFoundError(type_, name)


def get_member_type(member: MemberDescriptor) -> Any:
    """Return the field's type or the property's type."""
    return member.declared_type


def get_value(member: MemberDescriptor, target: Any) -> Any:
    """
    Read the current value of a member off a target.

    Raises:
        InvalidTargetError: If target does not possess the member
    """
    if not isinstance(target, member.owner):
        raise InvalidTargetError(member.owner, member.name, target)

    if member.is_property:
        accessor = member.accessor
        if isinstance(accessor, cached_property):
            return accessor.__get__(target, type(target))
        if accessor.fget is None:
            raise MemberNotFoundError(
                member.owner, member.name,
                message=f"Property {member.owner.__name__}.{member.name} has no getter"
            )
        return accessor.fget(target)

    try:
        return getattr(target, member.name)
    except AttributeError as e:
        raise InvalidTargetError(member.owner, member.name, target) from e


def _frozen_violation(error: ValidationError) -> bool:
    return any(item.get("type") == "frozen_instance" for item in error.errors())


def set_value(member: MemberDescriptor, target: Any, value: Any) -> None:
    """
    Write a value into a member on a target.

    Raises:
        InvalidTargetError: If target does not possess the member
        TypeMismatchError: If value is incompatible with the declared type
        ReadOnlyMemberError: For properties without setter and frozen instances
    """
    if not isinstance(target, member.owner):
        raise InvalidTargetError(member.owner, member.name, target)

    if not is_assignable(value, member.declared_type):
        raise TypeMismatchError(
            f"Cannot assign {type(value).__name__} to "
            f"{member.owner.__name__}.{member.name} of type {format_type_annotation(member.declared_type)}",
            details={"member": member.name, "value_type": type(value).__name__},
        )

    if member.is_property:
        accessor = member.accessor
        if isinstance(accessor, cached_property):
            try:
                vars(target)[member.name] = value
            except TypeError as e:
                raise ReadOnlyMemberError(member.owner, member.name) from e
            return
        if accessor.fset is None:
            raise ReadOnlyMemberError(member.owner, member.name)
        accessor.fset(target, value)
        return

    try:
        setattr(target, member.name, value)
    except dataclasses.FrozenInstanceError as e:
        raise ReadOnlyMemberError(member.owner, member.name) from e
    except ValidationError as e:
        if _frozen_violation(e):
            raise ReadOnlyMemberError(member.owner, member.name) from e
        raise TypeMismatchError(str(e), details={"member": member.name}) from e


def get_member_value(obj: Any, name: str) -> Any:
    """Read a public member of obj by name."""
    return get_value(get_member(type(obj), name), obj)


def set_member_value(obj: Any, name: str, value: Any) -> None:
    """Write a public member of obj by name."""
    set_value(get_member(type(obj), name), obj, value)
