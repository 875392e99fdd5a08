"""
Guard installation: the @typed decorator and typed attributes.

    @typed([int, {"scale": float}], returns=float)
    def resize(size, scale=1.0):
        return size * scale

The decorator validates the signature immediately, then checks every
call: positional values, supplied keyword values, and finally the return
value. Methods are supported by skipping a leading `self` or `cls`
parameter.
"""

import functools
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .assertions import (
    assert_arguments_with_keywords,
    assert_keyword_arguments,
    assert_return,
)
from .config import get_settings
from .conformance import conforms, is_valid_descriptor
from .descriptors import ANY, describe
from .errors import (
    error_incompatible_default,
    error_none_argument,
    error_unknown_descriptor,
)
from .messages import value_repr
from .signature import TypeSignature, make_signature

_log = logging.getLogger("rtguard.decorators")

SIGNATURE_ATTR = "__rtguard_signature__"

_RECEIVER_NAMES = ("self", "cls")
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

_MISSING = object()


class _CallPlan:
    """
    Maps the values of one call onto the signature's descriptors.

    Built once per decorated function; `expected_positional` is computed
    per call because *args can absorb any number of values.
    """

    def __init__(self, signature: TypeSignature, parameters: List[inspect.Parameter]):
        self.signature = signature
        self.named = [p for p in parameters if p.kind in _POSITIONAL_KINDS]

        keywords: Dict[str, Any] = dict(signature.keywords)
        for param, descriptor in zip(self.named, signature.arguments):
            # Positionally declared parameters may still be passed by name
            if param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
                keywords.setdefault(param.name, descriptor)
        self.expected_keywords = keywords

    def expected_positional(self, count: int) -> List[Optional[Any]]:
        expected: List[Optional[Any]] = []
        declared = self.signature.arguments
        for index in range(count):
            if index < len(declared):
                expected.append(declared[index])
            elif index < len(self.named):
                expected.append(self.signature.keywords.get(self.named[index].name))
            else:
                expected.append(None)
        return expected


def _receiver_offset(parameters: Sequence[inspect.Parameter]) -> int:
    if parameters and parameters[0].name in _RECEIVER_NAMES \
            and parameters[0].kind in _POSITIONAL_KINDS:
        return 1
    return 0


def _guard(func: Callable, signature: TypeSignature) -> Callable:
    settings = get_settings()
    if not settings.enabled:
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug("guards disabled, leaving %s unwrapped", func.__qualname__)
        setattr(func, SIGNATURE_ATTR, signature)
        return func

    py_signature = inspect.signature(func)
    parameters = list(py_signature.parameters.values())
    offset = _receiver_offset(parameters)
    plan = _CallPlan(signature, parameters[offset:])
    check_returns = settings.check_returns

    def check_call(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        # Missing or unexpected arguments raise the usual TypeError first
        py_signature.bind(*args, **kwargs)
        values = args[offset:]
        assert_arguments_with_keywords(
            plan.expected_positional(len(values)), values,
            plan.expected_keywords, kwargs,
        )

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            check_call(args, kwargs)
            result = await func(*args, **kwargs)
            if check_returns:
                assert_return(signature.returns, result)
            return result
        wrapper = async_wrapper
    else:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            check_call(args, kwargs)
            result = func(*args, **kwargs)
            if check_returns:
                assert_return(signature.returns, result)
            return result

    setattr(wrapper, SIGNATURE_ATTR, signature)
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug("guarding %s with %r", func.__qualname__, signature)
    return wrapper


def typed(arguments: Any = (), returns: Any = ANY) -> Callable[[Callable], Callable]:
    """
    Make a function or method typed.

    Args:
        arguments: Positional descriptors, optionally ending with a dict of
                   keyword descriptors (or a dict alone)
        returns: Return descriptor; None means the call must return None

    Raises:
        TypeSignatureError: At decoration time, if the signature is malformed
    """
    signature = make_signature(arguments, returns)

    def decorator(func):
        if isinstance(func, (staticmethod, classmethod)):
            return type(func)(_guard(func.__func__, signature))
        return _guard(func, signature)

    return decorator


def signature_of(func: Any) -> Optional[TypeSignature]:
    """Return the signature recorded on a typed callable, if any."""
    target = getattr(func, "__func__", func)
    return getattr(target, SIGNATURE_ATTR, None)


def is_typed(func: Any) -> bool:
    """Whether the callable was made typed with @typed."""
    return signature_of(func) is not None


class TypedAttribute:
    """
    A data descriptor checking assigned and read values.

    Assignment is checked like a keyword argument named after the
    attribute; reading is checked like a return value.
    """

    def __init__(self, descriptor: Any, default: Any = _MISSING):
        if descriptor is None:
            raise error_none_argument(0)
        if not is_valid_descriptor(descriptor):
            raise error_unknown_descriptor(describe(descriptor))
        self.descriptor = descriptor
        if default is not _MISSING and not conforms(descriptor, default):
            raise error_incompatible_default(
                "attribute", value_repr(default), describe(descriptor))
        self.default = default
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        try:
            value = instance.__dict__[self.name]
        except KeyError:
            if self.default is _MISSING:
                raise AttributeError(
                    f"{type(instance).__name__!r} object has no attribute {self.name!r}") from None
            value = self.default
        assert_return(self.descriptor, value)
        return value

    def __set__(self, instance: Any, value: Any) -> None:
        assert_keyword_arguments({self.name: self.descriptor}, {self.name: value})
        instance.__dict__[self.name] = value

    def __repr__(self) -> str:
        return f"TypedAttribute({describe(self.descriptor)})"


def typed_attribute(descriptor: Any, default: Any = _MISSING) -> TypedAttribute:
    """
    Declare a typed attribute on a class.

        class Part:
            name = typed_attribute(str)
            count = typed_attribute(rtguard.Interval(0, None), default=0)
    """
    return TypedAttribute(descriptor, default)
