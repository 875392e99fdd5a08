"""
Type descriptor classification for rtguard.

A type descriptor is one of a closed set of kinds:
    NOMINAL     a class, ABC or runtime-checkable protocol
    CAPABILITY  an identifier string naming a method the value must expose
    PATTERN     a compiled regular expression matched against str(value)
    TUPLE       a list or tuple of nested descriptors, matched positionally
    TRUE/FALSE  the boolean literals, matched by truthiness
    INTERVAL    an Interval or a builtin range, matched by membership
    PREDICATE   any other callable, matched by the truthiness of its result
    BEHAVIOR    any object exposing conforms(value)

Anything else, including parameterized generics such as list[int], is
malformed and classifying it raises TypeSignatureError.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Protocol, get_origin, runtime_checkable

from .errors import error_unknown_descriptor


# Nominal descriptor accepting every value
ANY = object


class DescriptorKind(Enum):
    """The kind of a type descriptor."""
    NOMINAL = auto()
    CAPABILITY = auto()
    PATTERN = auto()
    TUPLE = auto()
    TRUE = auto()
    FALSE = auto()
    INTERVAL = auto()
    PREDICATE = auto()
    BEHAVIOR = auto()


# =============================================================================
# Custom behaviors
# =============================================================================

@runtime_checkable
class Behavior(Protocol):
    """Anything that can decide conformance on its own."""

    def conforms(self, value: Any) -> bool:
        ...


class BehaviorBase(ABC):
    """
    Convenience base class for custom behaviors.

    Subclasses implement `conforms`; overriding `error_message` gives
    the failure message a domain-specific wording.
    """

    @abstractmethod
    def conforms(self, value: Any) -> bool:
        """Return whether the value satisfies this behavior."""
        pass

    def error_message(self, value: Any) -> str:
        return f"Expected {value!r} to conform to {self!r}"


# =============================================================================
# Intervals
# =============================================================================

@dataclass(frozen=True)
class Interval:
    """
    A closed (or right-open) interval of comparable values.

    Either bound may be None, leaving that side unbounded.
    """
    lower: Any = None
    upper: Any = None
    exclusive: bool = False

    def __contains__(self, value: Any) -> bool:
        try:
            if self.lower is not None and not bool(self.lower <= value):
                return False
            if self.upper is not None:
                if self.exclusive:
                    return bool(value < self.upper)
                return bool(value <= self.upper)
        except (TypeError, ValueError):
            # Incomparable values, and array-like comparisons that cannot
            # be coerced to bool, are simply not members
            return False
        return True

    def __repr__(self) -> str:
        lower = "" if self.lower is None else repr(self.lower)
        upper = "" if self.upper is None else repr(self.upper)
        dots = "..." if self.exclusive else ".."
        return f"Interval({lower}{dots}{upper})"


def interval(lower: Any = None, upper: Any = None, exclusive: bool = False) -> Interval:
    """Create an interval; exclusive=True leaves out the upper bound."""
    return Interval(lower, upper, exclusive)


# =============================================================================
# Classification
# =============================================================================

def is_capability_name(descriptor: Any) -> bool:
    """Check if the descriptor is a usable capability tag."""
    return isinstance(descriptor, str) and descriptor.isidentifier()


def _is_generic_alias(descriptor: Any) -> bool:
    return get_origin(descriptor) is not None


def _is_behavior(descriptor: Any) -> bool:
    if isinstance(descriptor, BehaviorBase):
        return True
    # Classes are nominal even if they define conforms()
    return isinstance(descriptor, Behavior) and callable(getattr(descriptor, "conforms", None))


def try_classify(descriptor: Any) -> Optional[DescriptorKind]:
    """
    Determine the kind of a descriptor without validating nested parts.

    Returns None for malformed descriptors.
    """
    # Parameterized generics (list[int], Optional[int], int | str) are
    # annotations, not descriptors
    if _is_generic_alias(descriptor):
        return None
    elif isinstance(descriptor, type):
        return DescriptorKind.NOMINAL
    elif is_capability_name(descriptor):
        return DescriptorKind.CAPABILITY
    elif isinstance(descriptor, re.Pattern):
        return DescriptorKind.PATTERN
    elif isinstance(descriptor, (list, tuple)):
        return DescriptorKind.TUPLE
    elif descriptor is True:
        return DescriptorKind.TRUE
    elif descriptor is False:
        return DescriptorKind.FALSE
    elif isinstance(descriptor, (Interval, range)):
        return DescriptorKind.INTERVAL
    elif _is_behavior(descriptor):
        return DescriptorKind.BEHAVIOR
    elif callable(descriptor):
        return DescriptorKind.PREDICATE
    return None


def classify(descriptor: Any) -> DescriptorKind:
    """
    Determine the kind of a descriptor.

    Raises TypeSignatureError for malformed descriptors.
    """
    kind = try_classify(descriptor)
    if kind is None:
        raise error_unknown_descriptor(describe(descriptor))
    return kind


def describe(descriptor: Any) -> str:
    """Textual representation of a descriptor for messages."""
    if isinstance(descriptor, type) and not _is_generic_alias(descriptor):
        return descriptor.__qualname__
    if isinstance(descriptor, re.Pattern):
        return f"/{descriptor.pattern}/"
    if isinstance(descriptor, (list, tuple)):
        inner = ", ".join(describe(d) for d in descriptor)
        return f"[{inner}]" if isinstance(descriptor, list) else f"({inner})"
    if try_classify(descriptor) is DescriptorKind.PREDICATE:
        return getattr(descriptor, "__qualname__", None) or repr(descriptor)
    return repr(descriptor)
