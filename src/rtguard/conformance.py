"""
Conformance engine.

Decides whether a value conforms to a type descriptor. The procedure is
pure: it never mutates the descriptor or the value, and the only way it
fails is with TypeSignatureError for a malformed descriptor (or with
whatever a predicate or behavior raises).
"""

import inspect
from collections.abc import Sequence
from typing import Any

import numpy as np

from .descriptors import DescriptorKind, classify, try_classify


def is_ordered_sequence(value: Any) -> bool:
    """Check if a value can be matched against a tuple descriptor."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, np.ndarray):
        return value.ndim >= 1
    return isinstance(value, Sequence)


def responds_to(value: Any, name: str) -> bool:
    """
    Check if a value exposes a callable attribute called `name`.

    The lookup is static: properties and __getattr__ hooks are not run,
    so probing never executes user code.
    """
    try:
        attr = inspect.getattr_static(value, name)
    except AttributeError:
        return False
    if isinstance(attr, (staticmethod, classmethod)):
        attr = attr.__func__
    return callable(attr)


def conforms(descriptor: Any, value: Any) -> bool:
    """
    Check whether `value` conforms to `descriptor`.

    Tuple descriptors recurse; a non-sequence value or a length mismatch
    is a plain False. None is not a descriptor here: callers handle
    "no constraint" before calling.

    Raises:
        TypeSignatureError: If the descriptor (or a nested one) is malformed
    """
    kind = classify(descriptor)

    if kind is DescriptorKind.NOMINAL:
        return isinstance(value, descriptor)
    elif kind is DescriptorKind.CAPABILITY:
        return responds_to(value, descriptor)
    elif kind is DescriptorKind.PATTERN:
        return descriptor.search(str(value)) is not None
    elif kind is DescriptorKind.TUPLE:
        return _conforms_tuple(descriptor, value)
    elif kind is DescriptorKind.TRUE:
        return bool(value)
    elif kind is DescriptorKind.FALSE:
        return not value
    elif kind is DescriptorKind.INTERVAL:
        return value in descriptor
    elif kind is DescriptorKind.PREDICATE:
        return bool(descriptor(value))
    else:
        return bool(descriptor.conforms(value))


def _conforms_tuple(descriptor: Any, value: Any) -> bool:
    if not is_ordered_sequence(value):
        return False
    if len(descriptor) != len(value):
        return False
    for expected, element in zip(descriptor, value):
        if not conforms(expected, element):
            return False
    return True


def is_valid_descriptor(descriptor: Any) -> bool:
    """
    Check if a descriptor is well formed, including nested tuple elements.

    Unlike conforms(), this never raises for malformed input.
    """
    kind = try_classify(descriptor)
    if kind is None:
        return False
    if kind is DescriptorKind.TUPLE:
        return all(is_valid_descriptor(d) for d in descriptor)
    return True
