"""
Composable custom behaviors.

Every class here is an ordinary BehaviorBase subclass: the conformance
engine knows nothing about them beyond their conforms() method.

Usage:
    from rtguard import typed
    from rtguard.behaviors import or_, nilable, typed_list

    @typed([or_(int, float), nilable(str), typed_list(int)], returns=int)
    def total(scale, label, counts):
        ...
"""

from collections.abc import Mapping
from typing import Any, Tuple

from .conformance import conforms, is_valid_descriptor
from .descriptors import BehaviorBase, describe
from .errors import error_unknown_descriptor
from .messages import type_error_message, value_repr


def _validated(*descriptors: Any) -> Tuple[Any, ...]:
    for d in descriptors:
        if not is_valid_descriptor(d):
            raise error_unknown_descriptor(describe(d))
    return descriptors


class _Composite(BehaviorBase):
    """Shared storage and repr for behaviors over several descriptors."""

    def __init__(self, *descriptors: Any):
        if not descriptors:
            raise TypeError(f"{type(self).__name__} requires at least one descriptor")
        self.descriptors = _validated(*descriptors)

    def __repr__(self) -> str:
        inner = ", ".join(describe(d) for d in self.descriptors)
        return f"{type(self).__name__}({inner})"


class And(_Composite):
    """Conforms when every descriptor conforms."""

    def conforms(self, value: Any) -> bool:
        return all(conforms(d, value) for d in self.descriptors)

    def error_message(self, value: Any) -> str:
        parts = [type_error_message(d, value) for d in self.descriptors
                 if not conforms(d, value)]
        return "\nAND ".join(parts)


class Or(_Composite):
    """Conforms when at least one descriptor conforms."""

    def conforms(self, value: Any) -> bool:
        return any(conforms(d, value) for d in self.descriptors)

    def error_message(self, value: Any) -> str:
        return "\nOR ".join(type_error_message(d, value) for d in self.descriptors)


class Xor(_Composite):
    """Conforms when exactly one descriptor conforms."""

    def conforms(self, value: Any) -> bool:
        matched = 0
        for d in self.descriptors:
            if conforms(d, value):
                matched += 1
                if matched > 1:
                    return False
        return matched == 1

    def error_message(self, value: Any) -> str:
        return "\nXOR ".join(type_error_message(d, value) for d in self.descriptors)


class Not(BehaviorBase):
    """Conforms when the wrapped descriptor does not."""

    def __init__(self, descriptor: Any):
        (self.descriptor,) = _validated(descriptor)

    def conforms(self, value: Any) -> bool:
        return not conforms(self.descriptor, value)

    def error_message(self, value: Any) -> str:
        return f"NOT {type_error_message(self.descriptor, value)}"

    def __repr__(self) -> str:
        return f"Not({describe(self.descriptor)})"


class Nilable(BehaviorBase):
    """Conforms for None or for values matching the wrapped descriptor."""

    def __init__(self, descriptor: Any):
        (self.descriptor,) = _validated(descriptor)

    def conforms(self, value: Any) -> bool:
        return value is None or conforms(self.descriptor, value)

    def error_message(self, value: Any) -> str:
        return type_error_message(self.descriptor, value) + "\nOR " + \
            type_error_message(None, value)

    def __repr__(self) -> str:
        return f"Nilable({describe(self.descriptor)})"


class TypedSequence(BehaviorBase):
    """A list or tuple of any length whose elements all conform."""

    def __init__(self, element: Any):
        (self.element,) = _validated(element)

    def conforms(self, value: Any) -> bool:
        if not isinstance(value, (list, tuple)):
            return False
        return all(conforms(self.element, v) for v in value)

    def error_message(self, value: Any) -> str:
        return f"Expected {value_repr(value)} to be a sequence with elements of {describe(self.element)}"

    def __repr__(self) -> str:
        return f"TypedSequence({describe(self.element)})"


class TypedSet(BehaviorBase):
    """A set or frozenset whose members all conform."""

    def __init__(self, element: Any):
        (self.element,) = _validated(element)

    def conforms(self, value: Any) -> bool:
        if not isinstance(value, (set, frozenset)):
            return False
        return all(conforms(self.element, v) for v in value)

    def error_message(self, value: Any) -> str:
        return f"Expected {value_repr(value)} to be a set with members of {describe(self.element)}"

    def __repr__(self) -> str:
        return f"TypedSet({describe(self.element)})"


class TypedMapping(BehaviorBase):
    """A mapping whose keys and values all conform."""

    def __init__(self, key: Any, value: Any):
        self.key_descriptor, self.value_descriptor = _validated(key, value)

    def conforms(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        return all(conforms(self.key_descriptor, k) and conforms(self.value_descriptor, v)
                   for k, v in value.items())

    def error_message(self, value: Any) -> str:
        return (f"Expected {value_repr(value)} to be a mapping of "
                f"{describe(self.key_descriptor)} to {describe(self.value_descriptor)}")

    def __repr__(self) -> str:
        return f"TypedMapping({describe(self.key_descriptor)}, {describe(self.value_descriptor)})"


# Lowercase helpers

def and_(*descriptors: Any) -> And:
    return And(*descriptors)


def or_(*descriptors: Any) -> Or:
    return Or(*descriptors)


def xor(*descriptors: Any) -> Xor:
    return Xor(*descriptors)


def not_(descriptor: Any) -> Not:
    return Not(descriptor)


def nilable(descriptor: Any) -> Nilable:
    return Nilable(descriptor)


def typed_list(element: Any) -> TypedSequence:
    return TypedSequence(element)


def typed_set(element: Any) -> TypedSet:
    return TypedSet(element)


def typed_dict(key: Any, value: Any) -> TypedMapping:
    return TypedMapping(key, value)
