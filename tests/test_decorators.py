"""
Tests for @typed and typed attributes.
"""

import asyncio
import re

import pytest

from rtguard import (
    ANY, ArgumentTypeError, BehaviorBase, Interval, ReturnTypeError,
    TypedAttribute, TypeSignatureError,
    is_typed, nilable, signature_of, typed, typed_attribute,
)
from rtguard import config


class Even(BehaviorBase):
    def conforms(self, value):
        return isinstance(value, int) and value % 2 == 0


def _make_class():
    class Sample:
        def return_arg(self, obj):
            return obj

        def return_nil(self, obj):
            return None

        def sum(self, a, b):
            return a + b

        def kwarg(self, *, a):
            return a

        def sum_kwargs(self, *, a, b):
            return a + b

        def arg_and_kwarg(self, a, *, b):
            pass

        def args_and_kwargs(self, a, b, *, c, d):
            pass

    return Sample


def _retype(cls, name, arguments, returns=ANY):
    """Apply @typed to an existing method, as a class body decorator would."""
    setattr(cls, name, typed(arguments, returns)(cls.__dict__[name]))


@pytest.fixture
def sample():
    return _make_class()


class TestFunctions:
    """Plain functions."""

    def test_arguments(self):
        @typed([str])
        def test_args(s):
            return s

        assert test_args("ok") == "ok"
        with pytest.raises(ArgumentTypeError):
            test_args(123)

    def test_return(self):
        @typed([], returns=str)
        def test_return():
            return 369

        with pytest.raises(ReturnTypeError):
            test_return()

    def test_wraps(self):
        @typed([int], returns=int)
        def double(x):
            """Double a number."""
            return x * 2

        assert double.__name__ == "double"
        assert double.__doc__ == "Double a number."
        assert double.__wrapped__(2) == 4

    def test_arguments_checked_before_body(self):
        calls = []

        @typed([int])
        def body(x):
            calls.append(x)

        with pytest.raises(ArgumentTypeError):
            body("x")
        assert calls == []

    def test_invalid_signature_at_decoration(self):
        with pytest.raises(TypeSignatureError):
            typed([123])
        with pytest.raises(TypeSignatureError):
            typed([None])
        with pytest.raises(TypeSignatureError):
            typed([], {})

    def test_generic_alias_rejected_at_decoration(self):
        with pytest.raises(TypeSignatureError) as exc:
            typed([list[int]])
        assert exc.value.code == "E101"


class TestDescriptorKinds:
    """Each descriptor kind through a guarded method."""

    @pytest.mark.parametrize("descriptor,good,bad", [
        (str, "This is a string!", 123),
        ("to_bytes", 123, "text"),
        (re.compile("cuba"), "cuba", "brazil"),
        (Interval(1, 10), 5, 1001),
        (["to_bytes", "to_bytes"], [123, 456], [123, "x"]),
        (lambda arg: arg is not None, 123, None),
        (True, 123, None),
        (False, None, 123),
        (Even(), 4, 3),
    ])
    def test_argument(self, sample, descriptor, good, bad):
        _retype(sample, "return_arg", [descriptor])
        instance = sample()
        assert instance.return_arg(good) == good
        with pytest.raises(ArgumentTypeError) as exc:
            instance.return_arg(bad)
        assert exc.value.position == 0

    @pytest.mark.parametrize("descriptor,result", [
        (str, "This is a string!"),
        ("is_integer", 123),
        (re.compile("cuba"), "cuba"),
        (Interval(1, 10), 5),
        (lambda arg: arg is not None, 123),
        (True, 123),
    ])
    def test_return_nil(self, sample, descriptor, result):
        """return_nil always returns None, which none of these accept."""
        _retype(sample, "return_nil", [ANY], descriptor)
        with pytest.raises(ReturnTypeError):
            sample().return_nil(result)

    def test_false_return(self, sample):
        _retype(sample, "return_arg", [ANY], False)
        with pytest.raises(ReturnTypeError):
            sample().return_arg(123)

    def test_tuple_return(self, sample):
        _retype(sample, "return_arg", [ANY], [int, float])
        with pytest.raises(ReturnTypeError):
            sample().return_arg([1, 2])
        assert sample().return_arg([1, 2.0]) == [1, 2.0]


class TestNoneReturn:
    """None as a return descriptor means the call must return None."""

    def test_only_none(self, sample):
        _retype(sample, "return_nil", [], None)
        sample().return_nil(123)

        _retype(sample, "return_arg", [], None)
        with pytest.raises(ReturnTypeError):
            sample().return_arg(123)

    def test_any_return(self, sample):
        _retype(sample, "return_arg", [], ANY)
        assert sample().return_arg("str") == "str"
        assert sample().return_arg(None) is None


class TestSignatures:
    """Positional and keyword signatures."""

    def test_nothing(self, sample):
        _retype(sample, "sum", [])
        instance = sample()
        instance.sum(1, 2)
        instance.sum(1, 2.0)
        instance.sum("a", "b")

    def test_two(self, sample):
        _retype(sample, "sum", [int, int])
        with pytest.raises(ArgumentTypeError) as exc:
            sample().sum(1, 2.0)
        assert exc.value.position == 1

    def test_one_keyword(self, sample):
        _retype(sample, "kwarg", {"a": float})
        with pytest.raises(ArgumentTypeError) as exc:
            sample().kwarg(a=1)
        assert exc.value.position == "a"

    def test_two_keywords(self, sample):
        _retype(sample, "sum_kwargs", {"a": int, "b": float})
        with pytest.raises(ArgumentTypeError) as exc:
            sample().sum_kwargs(a=1, b=2)
        assert exc.value.position == "b"

    def test_one_with_one_keyword(self, sample):
        _retype(sample, "arg_and_kwarg", [int, {"b": float}])
        with pytest.raises(ArgumentTypeError):
            sample().arg_and_kwarg(1, b=2)

    def test_two_with_two_keywords(self, sample):
        _retype(sample, "args_and_kwargs", [int, int, {"c": str, "d": str}])
        with pytest.raises(ArgumentTypeError) as exc:
            sample().args_and_kwargs(1, 2, c=3, d=4)
        assert exc.value.position == "c"

    def test_unsupplied_keyword_not_checked(self):
        @typed([int, {"b": str}])
        def f(a, b=None):
            return b

        assert f(1) is None

    def test_keyword_descriptor_for_positional_value(self):
        @typed({"b": str})
        def f(a, b):
            return b

        with pytest.raises(ArgumentTypeError) as exc:
            f(1, 2)
        assert exc.value.position == 1
        with pytest.raises(ArgumentTypeError) as exc:
            f(1, b=2)
        assert exc.value.position == "b"

    def test_positional_descriptor_for_keyword_value(self):
        @typed([int, str])
        def f(a, b):
            return b

        assert f(1, b="x") == "x"
        with pytest.raises(ArgumentTypeError) as exc:
            f(1, b=2)
        assert exc.value.position == "b"

    def test_missing_argument_is_plain_type_error(self):
        @typed([int, str])
        def f(a, b):
            return b

        with pytest.raises(TypeError) as exc:
            f(1)
        assert not isinstance(exc.value, ArgumentTypeError)

    def test_var_positional(self):
        @typed([int])
        def head(first, *rest):
            return first

        assert head(1, "x", object()) == 1

        @typed([int, str])
        def pair(*values):
            return values

        assert pair(1, "a") == (1, "a")
        with pytest.raises(ArgumentTypeError) as exc:
            pair(1, 2)
        assert exc.value.position == 1

    def test_var_keyword(self):
        @typed({"extra": int})
        def f(**options):
            return options

        assert f(other="x") == {"other": "x"}
        with pytest.raises(ArgumentTypeError):
            f(extra="x")

    def test_arguments_and_return(self, sample):
        _retype(sample, "return_nil", [float], None)
        with pytest.raises(ArgumentTypeError):
            sample().return_nil(123)
        _retype(sample, "return_nil", [int], int)
        with pytest.raises(ReturnTypeError):
            sample().return_nil(123)


class TestMethods:
    """Methods, classmethods and staticmethods."""

    def test_class_body(self):
        class Shape:
            @typed([Interval(0, None)], returns=float)
            def scale(self, factor):
                return 1.0 * factor

            @classmethod
            @typed([str])
            def named(cls, name):
                return name

            @typed([str])
            @classmethod
            def labelled(cls, label):
                return label

            @typed([int], returns=int)
            @staticmethod
            def twice(x):
                return 2 * x

        shape = Shape()
        assert shape.scale(2) == 2.0
        with pytest.raises(ArgumentTypeError):
            shape.scale(-1)
        assert Shape.named("a") == "a"
        with pytest.raises(ArgumentTypeError):
            Shape.named(1)
        assert Shape.labelled("b") == "b"
        with pytest.raises(ArgumentTypeError):
            Shape.labelled(2)
        assert Shape.twice(3) == 6
        with pytest.raises(ArgumentTypeError):
            Shape.twice("3")

    def test_signature_lookup(self):
        class Shape:
            @typed([int], returns=str)
            def label(self, n):
                return str(n)

            def plain(self):
                pass

        assert is_typed(Shape.label)
        assert is_typed(Shape().label)
        assert not is_typed(Shape.plain)
        sig = signature_of(Shape().label)
        assert sig.arguments == (int,)
        assert sig.returns is str
        assert signature_of(Shape.plain) is None


class TestBehaviorsInSignatures:
    """Custom behaviors work like built-in kinds."""

    def test_even(self):
        @typed([Even(), [Even(), str]], returns=nilable(Even()))
        def f(n, pair):
            return n if n > 2 else None

        assert f(4, [2, "x"]) == 4
        assert f(2, [2, "x"]) is None
        with pytest.raises(ArgumentTypeError) as exc:
            f(4, [3, "x"])
        assert exc.value.position == 1

    def test_reentrant_predicate(self):
        @typed([int], returns=bool)
        def is_small(n):
            return n < 10

        @typed([is_small])
        def use(n):
            return n

        assert use(3) == 3
        with pytest.raises(ArgumentTypeError):
            use(30)
        with pytest.raises(ArgumentTypeError):
            use("3")


class TestCoroutines:
    """Async functions are checked when awaited."""

    def test_async(self):
        @typed([int], returns=str)
        async def fetch(n):
            return n

        @typed([int], returns=int)
        async def good(n):
            return n

        assert asyncio.run(good(1)) == 1
        with pytest.raises(ReturnTypeError):
            asyncio.run(fetch(1))
        with pytest.raises(ArgumentTypeError):
            asyncio.run(good("1"))


class TestSettings:
    """Settings affect guard installation."""

    def test_disabled(self, monkeypatch):
        monkeypatch.setenv("RTGUARD_ENABLED", "0")
        config.clear_cache()

        def original(x):
            return x

        guarded = typed([int], returns=str)(original)
        assert guarded is original
        assert guarded("x") == "x"
        assert is_typed(guarded)

    def test_disabled_still_validates(self, monkeypatch):
        monkeypatch.setenv("RTGUARD_ENABLED", "0")
        config.clear_cache()
        with pytest.raises(TypeSignatureError):
            typed([123])

    def test_returns_unchecked(self, monkeypatch):
        monkeypatch.setenv("RTGUARD_CHECK_RETURNS", "false")
        config.clear_cache()

        @typed([int], returns=str)
        def f(x):
            return x

        assert f(1) == 1
        with pytest.raises(ArgumentTypeError):
            f("1")


class TestTypedAttribute:
    """Typed attributes check writes and reads."""

    def _part_class(self):
        class Part:
            name = typed_attribute(str)
            count = typed_attribute(Interval(0, None), default=0)

        return Part

    def test_default(self):
        part = self._part_class()()
        assert part.count == 0

    def test_missing(self):
        part = self._part_class()()
        with pytest.raises(AttributeError):
            part.name

    def test_write(self):
        part = self._part_class()()
        part.name = "bolt"
        assert part.name == "bolt"
        with pytest.raises(ArgumentTypeError) as exc:
            part.name = 5
        assert exc.value.position == "name"
        with pytest.raises(ArgumentTypeError):
            part.count = -1
        assert part.name == "bolt"

    def test_read(self):
        part = self._part_class()()
        part.__dict__["name"] = 5
        with pytest.raises(ReturnTypeError):
            part.name

    def test_class_access(self):
        Part = self._part_class()
        assert isinstance(Part.name, TypedAttribute)
        assert repr(Part.name) == "TypedAttribute(str)"

    def test_invalid(self):
        with pytest.raises(TypeSignatureError):
            typed_attribute(None)
        with pytest.raises(TypeSignatureError):
            typed_attribute(123)
        with pytest.raises(TypeSignatureError) as exc:
            typed_attribute(list[int])
        assert exc.value.code == "E101"
        with pytest.raises(TypeSignatureError) as exc:
            typed_attribute(int, default="x")
        assert exc.value.code == "E107"
