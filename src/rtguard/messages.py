"""
Error message construction for guard failures.

The assertion protocols hand over (index-or-key, expected descriptor,
actual value); everything about wording lives here.
"""

from typing import Any

from .config import get_settings
from .descriptors import DescriptorKind, classify, describe


def ordinalize(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def value_repr(value: Any) -> str:
    """repr() of a value, truncated to the configured limit."""
    text = repr(value)
    limit = get_settings().repr_limit
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _article(name: str) -> str:
    return "an" if name[:1].lower() in "aeiou" else "a"


def type_error_message(expected: Any, value: Any) -> str:
    """Describe why `value` does not conform to `expected`."""
    shown = value_repr(value)
    if expected is None:
        return f"Expected {shown} to be None"

    kind = classify(expected)
    if kind is DescriptorKind.NOMINAL:
        name = describe(expected)
        return f"Expected {shown} to be {_article(name)} {name}"
    elif kind is DescriptorKind.CAPABILITY:
        return f"Expected {shown} to respond to '{expected}'"
    elif kind is DescriptorKind.PATTERN:
        return f"Expected stringified {shown} to match regexp {describe(expected)}"
    elif kind is DescriptorKind.TUPLE:
        lines = [f"Expected {shown} to be a sequence with {len(expected)} elements:"]
        for i, element in enumerate(expected):
            lines.append(f"  - [{i}] {describe(element)}")
        return "\n".join(lines)
    elif kind is DescriptorKind.TRUE:
        return f"Expected {shown} to be a truthy value"
    elif kind is DescriptorKind.FALSE:
        return f"Expected {shown} to be a falsy value"
    elif kind is DescriptorKind.INTERVAL:
        return f"Expected {shown} to be included in range {describe(expected)}"
    elif kind is DescriptorKind.PREDICATE:
        return f"Expected {shown} to return a truthy value for predicate {describe(expected)}"
    else:
        custom = getattr(expected, "error_message", None)
        if callable(custom):
            return str(custom(value))
        return f"Expected {shown} to conform to {describe(expected)}"


def arg_type_error_message(index: int, expected: Any, value: Any) -> str:
    """Message for a positional argument at 0-based `index`."""
    return f"for {ordinalize(index + 1)} argument:\n" + type_error_message(expected, value)


def kwarg_type_error_message(key: str, expected: Any, value: Any) -> str:
    """Message for a keyword argument."""
    return f"for '{key}' argument:\n" + type_error_message(expected, value)


def return_type_error_message(expected: Any, value: Any) -> str:
    """Message for a return value."""
    return "for return:\n" + type_error_message(expected, value)
