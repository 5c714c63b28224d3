"""Common exception classes for reflectkit.

Provides the hierarchy of exceptions raised by member access, generic method
resolution and typed store retrieval.
"""

from typing import Optional, Dict, Any


class ReflectKitError(Exception):
    """Base exception for all reflectkit errors."""

    def __init__(self, message: str, code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        result = {"message": self.message}
        if self.code:
            result["code"] = self.code
        if self.details:
            result["details"] = self.details
        return result


class MemberNotFoundError(ReflectKitError):
    """Raised when a field or property is absent on a type."""

    def __init__(self, owner: type, member_name: str, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("code", "MEMBER_NOT_FOUND")
        message = message or f"{owner.__name__} has no public member: {member_name}"
        super().__init__(message, **kwargs)
        self.owner = owner
        self.member_name = member_name


class InvalidTargetError(MemberNotFoundError):
    """Raised when a target instance does not possess the requested member."""

    def __init__(self, owner: type, member_name: str, target: Any, **kwargs):
        message = (
            f"Target of type {type(target).__name__} does not possess "
            f"member {owner.__name__}.{member_name}"
        )
        super().__init__(owner, member_name, message=message, code="INVALID_TARGET", **kwargs)
        self.target = target


class ReadOnlyMemberError(ReflectKitError):
    """Raised when writing a property without setter or a frozen instance."""

    def __init__(self, owner: type, member_name: str, **kwargs):
        message = f"Member {owner.__name__}.{member_name} is read-only"
        super().__init__(message, code="READ_ONLY_MEMBER", **kwargs)
        self.owner = owner
        self.member_name = member_name


class TypeMismatchError(ReflectKitError):
    """Raised when a value is written into a member of an incompatible type."""

    def __init__(self, message: str = "Type mismatch", **kwargs):
        super().__init__(message, code="TYPE_MISMATCH", **kwargs)


class MethodNotFoundError(ReflectKitError):
    """Raised when no generic method matches name, arity and signature."""

    def __init__(self, owner: type, method_name: str, arity: int, **kwargs):
        message = (
            f"No generic method {owner.__name__}.{method_name} "
            f"with {arity} type parameter(s) matches the requested signature"
        )
        super().__init__(message, code="METHOD_NOT_FOUND", **kwargs)
        self.owner = owner
        self.method_name = method_name
        self.arity = arity


class AmbiguousMethodError(ReflectKitError):
    """Raised in strict resolution mode when several generic methods match."""

    def __init__(self, owner: type, method_name: str, candidates: int, **kwargs):
        message = (
            f"{candidates} generic methods named {owner.__name__}.{method_name} "
            f"match the requested signature"
        )
        super().__init__(message, code="AMBIGUOUS_METHOD", **kwargs)
        self.owner = owner
        self.method_name = method_name
        self.candidates = candidates


class InvalidCastError(ReflectKitError):
    """Raised when a stored value is not assignable to the requested type."""

    def __init__(self, value: Any, expected: Any, **kwargs):
        expected_name = getattr(expected, "__name__", repr(expected))
        message = f"Cannot cast value of type {type(value).__name__} to {expected_name}"
        super().__init__(message, code="INVALID_CAST", **kwargs)
        self.value = value
        self.expected = expected
