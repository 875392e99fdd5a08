"""
Guard-specific exceptions and error handling.

Error code ranges:
- E1xx: Type signature errors (malformed descriptors or signatures)
- E2xx: Argument type errors
- E3xx: Return type errors
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic describing why a guard rejected a call."""
    code: str                       # E101, E201, etc.
    message: str                    # Human-readable message
    location: str                   # "argument 0", "keyword 'a'", "return", "signature"
    expected: Optional[str] = None  # repr of the expected descriptor
    actual: Optional[str] = None    # repr of the offending value
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        parts = [f"{self.location}: error[{self.code}]: {self.message}"]
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def to_json(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "location": self.location,
            "expected": self.expected,
            "actual": self.actual,
            "hints": list(self.hints),
        }


class RtguardError(Exception):
    """Base exception for guard errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.message


class TypeSignatureError(RtguardError, TypeError):
    """A descriptor or signature is malformed (E1xx)."""
    pass


class ArgumentTypeError(RtguardError, TypeError):
    """A positional or keyword argument failed conformance (E2xx)."""

    def __init__(self, diagnostic: Diagnostic, position: Any = None):
        super().__init__(diagnostic)
        # int index for positional arguments, str key for keywords
        self.position = position


class ReturnTypeError(RtguardError):
    """A return value failed conformance (E3xx)."""
    pass


# --- Signature error codes ---

def error_unknown_descriptor(descriptor_repr: str) -> TypeSignatureError:
    """E101: Unknown type behavior."""
    diag = Diagnostic(
        code="E101",
        message=f"Invalid type signature: Unknown type behavior {descriptor_repr}",
        location="signature",
        expected=descriptor_repr,
        hints=["descriptors are classes, method names, compiled regexps, "
               "lists/tuples, True/False, intervals, callables or behaviors"],
    )
    return TypeSignatureError(diag)


def error_invalid_arguments_form(arguments_repr: str) -> TypeSignatureError:
    """E102: Argument signature is not a list or tuple."""
    diag = Diagnostic(
        code="E102",
        message=f"Invalid type signature: argument type must be a list or tuple, got {arguments_repr}",
        location="signature",
        actual=arguments_repr,
    )
    return TypeSignatureError(diag)


def error_misplaced_keywords(arguments_repr: str) -> TypeSignatureError:
    """E103: Keyword descriptors not in last position, or declared twice."""
    diag = Diagnostic(
        code="E103",
        message=f"Invalid type signature: keyword descriptors must be a single dict "
                f"in the last position, got {arguments_repr}",
        location="signature",
        actual=arguments_repr,
    )
    return TypeSignatureError(diag)


def error_none_argument(index: int) -> TypeSignatureError:
    """E104: None used as an argument descriptor."""
    diag = Diagnostic(
        code="E104",
        message=f"Invalid type signature: None cannot be used for argument {index}",
        location="signature",
        hints=["use ANY to accept any value"],
    )
    return TypeSignatureError(diag)


def error_invalid_keyword_name(key_repr: str) -> TypeSignatureError:
    """E105: Keyword descriptor key is not an identifier string."""
    diag = Diagnostic(
        code="E105",
        message=f"Invalid type signature: keyword name must be an identifier string, got {key_repr}",
        location="signature",
        actual=key_repr,
    )
    return TypeSignatureError(diag)


def error_invalid_return(returns_repr: str) -> TypeSignatureError:
    """E106: Return descriptor is a mapping."""
    diag = Diagnostic(
        code="E106",
        message=f"Invalid type signature: return type cannot be {returns_repr}",
        location="signature",
        actual=returns_repr,
    )
    return TypeSignatureError(diag)


def error_incompatible_default(name: str, default_repr: str,
                               expected_repr: str) -> TypeSignatureError:
    """E107: Declared default does not conform to its own descriptor."""
    diag = Diagnostic(
        code="E107",
        message=f"Invalid type signature: the default value for '{name}' "
                f"is incompatible with its descriptor {expected_repr}",
        location="signature",
        expected=expected_repr,
        actual=default_repr,
    )
    return TypeSignatureError(diag)


# --- Argument error codes ---

def error_argument_type(index: int, message: str, expected_repr: str,
                        actual_repr: str) -> ArgumentTypeError:
    """E201: Positional argument type mismatch."""
    diag = Diagnostic(
        code="E201",
        message=message,
        location=f"argument {index}",
        expected=expected_repr,
        actual=actual_repr,
    )
    return ArgumentTypeError(diag, position=index)


def error_keyword_type(key: str, message: str, expected_repr: str,
                       actual_repr: str) -> ArgumentTypeError:
    """E202: Keyword argument type mismatch."""
    diag = Diagnostic(
        code="E202",
        message=message,
        location=f"keyword '{key}'",
        expected=expected_repr,
        actual=actual_repr,
    )
    return ArgumentTypeError(diag, position=key)


# --- Return error codes ---

def error_return_type(message: str, expected_repr: str,
                      actual_repr: str) -> ReturnTypeError:
    """E301: Return value type mismatch."""
    diag = Diagnostic(
        code="E301",
        message=message,
        location="return",
        expected=expected_repr,
        actual=actual_repr,
    )
    return ReturnTypeError(diag)


def error_unexpected_return(message: str, actual_repr: str) -> ReturnTypeError:
    """E302: A value was returned where None was declared."""
    diag = Diagnostic(
        code="E302",
        message=message,
        location="return",
        expected="None",
        actual=actual_repr,
        hints=["the signature declares no return value"],
    )
    return ReturnTypeError(diag)
