"""
Assertion protocols for guarded calls.

Each protocol checks a group of values against their descriptors and
raises on the first mismatch; nothing is collected or retried.
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from .conformance import conforms
from .descriptors import describe
from .errors import (
    error_argument_type,
    error_keyword_type,
    error_return_type,
    error_unexpected_return,
)
from .messages import (
    arg_type_error_message,
    kwarg_type_error_message,
    return_type_error_message,
    value_repr,
)

_log = logging.getLogger("rtguard.assertions")


def assert_arguments(expected: Sequence[Any], actual: Sequence[Any]) -> None:
    """
    Check positional values against positional descriptors.

    A None descriptor leaves its position unconstrained. Positions with
    no supplied value are not checked, so assert_arguments([int], [])
    passes; a missing value is not treated as a None value. Presence of
    required arguments is left to call binding (see rtguard.decorators).

    Raises:
        ArgumentTypeError: For the first position that does not conform
    """
    for index, descriptor in enumerate(expected):
        if descriptor is None or index >= len(actual):
            continue
        value = actual[index]
        if not conforms(descriptor, value):
            if _log.isEnabledFor(logging.DEBUG):
                _log.debug("argument %d rejected: %s !~ %s",
                           index, value_repr(value), describe(descriptor))
            raise error_argument_type(
                index,
                arg_type_error_message(index, descriptor, value),
                describe(descriptor),
                value_repr(value),
            )


def assert_keyword_arguments(expected_kwargs: Mapping[str, Any],
                             actual_kwargs: Mapping[str, Any]) -> None:
    """
    Check supplied keyword values against keyword descriptors.

    Only keys present in `actual_kwargs` are visited, in their order;
    expected keys that were not supplied are never checked.

    Raises:
        ArgumentTypeError: For the first keyword that does not conform
    """
    for key, value in actual_kwargs.items():
        descriptor = expected_kwargs.get(key)
        if descriptor is None:
            continue
        if not conforms(descriptor, value):
            if _log.isEnabledFor(logging.DEBUG):
                _log.debug("keyword %r rejected: %s !~ %s",
                           key, value_repr(value), describe(descriptor))
            raise error_keyword_type(
                key,
                kwarg_type_error_message(key, descriptor, value),
                describe(descriptor),
                value_repr(value),
            )


def assert_arguments_with_keywords(expected: Sequence[Any], actual: Sequence[Any],
                                   expected_kwargs: Mapping[str, Any],
                                   actual_kwargs: Mapping[str, Any]) -> None:
    """Positional checks, then keyword checks."""
    assert_arguments(expected, actual)
    assert_keyword_arguments(expected_kwargs, actual_kwargs)


def assert_return(expected: Optional[Any], actual: Any) -> None:
    """
    Check a return value.

    A None descriptor means the call must return None. This is stricter
    than the argument protocols, where None means "unconstrained".

    Raises:
        ReturnTypeError: If the value does not conform
    """
    if expected is None:
        if actual is not None:
            if _log.isEnabledFor(logging.DEBUG):
                _log.debug("unexpected return value %s", value_repr(actual))
            raise error_unexpected_return(
                return_type_error_message(None, actual),
                value_repr(actual),
            )
        return

    if not conforms(expected, actual):
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug("return rejected: %s !~ %s", value_repr(actual), describe(expected))
        raise error_return_type(
            return_type_error_message(expected, actual),
            describe(expected),
            value_repr(actual),
        )
