"""
Type signatures for guarded callables.

A signature is declared as an argument list plus a return descriptor:

    [int, str]                      two positional descriptors
    [int, {"scale": float}]         one positional, one keyword
    {"scale": float}                keywords only
    returns=None                    the call must return None

Signatures are validated once, when they are declared, so a malformed
descriptor surfaces at definition time rather than on the first call.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from .conformance import is_valid_descriptor
from .descriptors import ANY, describe, is_capability_name
from .errors import (
    error_invalid_arguments_form,
    error_invalid_keyword_name,
    error_invalid_return,
    error_misplaced_keywords,
    error_none_argument,
    error_unknown_descriptor,
)


def _frozen_mapping(data: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class TypeSignature:
    """Validated descriptors for a callable's arguments and return value."""
    arguments: Tuple[Any, ...] = ()
    keywords: Mapping[str, Any] = field(default_factory=_frozen_mapping)
    returns: Optional[Any] = ANY

    @property
    def info(self) -> dict:
        """The signature in its declared shape."""
        args = list(self.arguments)
        if self.keywords:
            args.append(dict(self.keywords))
        return {"arguments": args, "returns": self.returns}

    def __repr__(self) -> str:
        parts = [describe(d) for d in self.arguments]
        parts.extend(f"{k}: {describe(v)}" for k, v in self.keywords.items())
        returns = "None" if self.returns is None else describe(self.returns)
        return f"({', '.join(parts)}) -> {returns}"


def _validate_descriptor(descriptor: Any) -> Any:
    if not is_valid_descriptor(descriptor):
        raise error_unknown_descriptor(describe(descriptor))
    return descriptor


def make_signature(arguments: Any = (), returns: Any = ANY) -> TypeSignature:
    """
    Validate a declared signature and build a TypeSignature.

    Raises:
        TypeSignatureError: If the signature or any descriptor is malformed
    """
    if isinstance(arguments, dict):
        arguments = [arguments]
    if not isinstance(arguments, (list, tuple)):
        raise error_invalid_arguments_form(repr(arguments))

    positional = list(arguments)
    keywords = {}
    if positional and isinstance(positional[-1], dict):
        keywords = positional.pop()
    if any(isinstance(d, dict) for d in positional):
        raise error_misplaced_keywords(repr(arguments))

    for index, descriptor in enumerate(positional):
        if descriptor is None:
            raise error_none_argument(index)
        _validate_descriptor(descriptor)

    for key, descriptor in keywords.items():
        if not is_capability_name(key):
            raise error_invalid_keyword_name(repr(key))
        _validate_descriptor(descriptor)

    if isinstance(returns, dict):
        raise error_invalid_return(repr(returns))
    if returns is not None:
        _validate_descriptor(returns)

    return TypeSignature(
        arguments=tuple(positional),
        keywords=_frozen_mapping(keywords),
        returns=returns,
    )
