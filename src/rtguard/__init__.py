"""
rtguard: runtime type conformance for Python callables.

This package provides:
- Descriptors: a closed grammar of type specifications
- Conformance engine: decides whether a value matches a descriptor
- Assertion protocols: argument, keyword and return checks that raise
- Behaviors: composable custom descriptors (and/or/xor/not/nilable/...)
- Decorators: @typed and typed_attribute for guarding code

Usage:
    from rtguard import typed, conforms, Interval
    import re

    conforms([int, re.compile(r"^\\d+$")], [1, "42"])   # True

    @typed([int, {"scale": Interval(0.0, 10.0)}], returns=float)
    def resize(size, scale=1.0):
        return size * scale

    resize(3, scale=2.0)     # 6.0
    resize("3")              # raises ArgumentTypeError
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rtguard")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .errors import (
    Diagnostic,
    RtguardError,
    TypeSignatureError,
    ArgumentTypeError,
    ReturnTypeError,
)

from .descriptors import (
    ANY,
    DescriptorKind,
    Behavior,
    BehaviorBase,
    Interval,
    interval,
    classify,
    describe,
)

from .conformance import (
    conforms,
    is_valid_descriptor,
)

from .assertions import (
    assert_arguments,
    assert_keyword_arguments,
    assert_arguments_with_keywords,
    assert_return,
)

from .messages import (
    type_error_message,
    arg_type_error_message,
    kwarg_type_error_message,
    return_type_error_message,
)

from .behaviors import (
    And, Or, Xor, Not, Nilable,
    TypedSequence, TypedSet, TypedMapping,
    and_, or_, xor, not_, nilable,
    typed_list, typed_set, typed_dict,
)

from .signature import (
    TypeSignature,
    make_signature,
)

from .decorators import (
    typed,
    typed_attribute,
    TypedAttribute,
    signature_of,
    is_typed,
)

from .config import (
    Settings,
    get_settings,
)

__all__ = [
    '__version__',

    # Errors
    'Diagnostic',
    'RtguardError',
    'TypeSignatureError',
    'ArgumentTypeError',
    'ReturnTypeError',

    # Descriptors
    'ANY',
    'DescriptorKind',
    'Behavior',
    'BehaviorBase',
    'Interval',
    'interval',
    'classify',
    'describe',

    # Conformance
    'conforms',
    'is_valid_descriptor',

    # Assertion protocols
    'assert_arguments',
    'assert_keyword_arguments',
    'assert_arguments_with_keywords',
    'assert_return',

    # Messages
    'type_error_message',
    'arg_type_error_message',
    'kwarg_type_error_message',
    'return_type_error_message',

    # Behaviors
    'And', 'Or', 'Xor', 'Not', 'Nilable',
    'TypedSequence', 'TypedSet', 'TypedMapping',
    'and_', 'or_', 'xor', 'not_', 'nilable',
    'typed_list', 'typed_set', 'typed_dict',

    # Signatures and guards
    'TypeSignature',
    'make_signature',
    'typed',
    'typed_attribute',
    'TypedAttribute',
    'signature_of',
    'is_typed',

    # Configuration
    'Settings',
    'get_settings',
]
