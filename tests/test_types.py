"""Tests for the Lox value representation."""
import pytest
from lox.types import (
    LoxValue, LoxType,
    lox_nil, lox_bool, lox_number, lox_string, lox_callable, lox_instance,
    from_literal, is_truthy, is_equal, format_number,
)
from lox.callables import NativeFunction, LoxClass, LoxInstance


def native(name="f"):
    return NativeFunction(name, 0, lambda interp, args: lox_nil())


class TestLoxValueCreation:
    def test_nil(self):
        v = lox_nil()
        assert v.type == LoxType.NIL
        assert v.value is None

    def test_number_is_float(self):
        v = lox_number(3)
        assert v.type == LoxType.NUMBER
        assert isinstance(v.value, float)

    def test_string(self):
        v = lox_string("hi")
        assert v.type == LoxType.STRING
        assert v.value == "hi"

    def test_from_literal(self):
        assert from_literal(None).type == LoxType.NIL
        assert from_literal(True).type == LoxType.BOOLEAN
        assert from_literal(2.5).type == LoxType.NUMBER
        assert from_literal("s").type == LoxType.STRING


class TestTruthiness:
    @pytest.mark.parametrize("value", [lox_nil(), lox_bool(False)])
    def test_falsy(self, value):
        assert is_truthy(value) is False

    @pytest.mark.parametrize("value", [
        lox_bool(True), lox_number(0), lox_string(""), lox_string("a"),
    ])
    def test_truthy(self, value):
        assert is_truthy(value) is True


class TestEquality:
    def test_nil_equals_nil(self):
        assert is_equal(lox_nil(), lox_nil())

    def test_nil_not_equal_false(self):
        assert not is_equal(lox_nil(), lox_bool(False))

    def test_numbers(self):
        assert is_equal(lox_number(1), lox_number(1.0))
        assert not is_equal(lox_number(1), lox_number(2))

    def test_nan_equals_itself(self):
        nan = float("nan")
        assert is_equal(lox_number(nan), lox_number(nan))

    def test_signed_zeros_differ(self):
        assert not is_equal(lox_number(0.0), lox_number(-0.0))

    def test_mixed_kinds_never_equal(self):
        assert not is_equal(lox_number(1), lox_string("1"))
        assert not is_equal(lox_bool(True), lox_number(1))
        assert not is_equal(lox_number(0), lox_bool(False))

    def test_callables_by_identity(self):
        f = native()
        assert is_equal(lox_callable(f), lox_callable(f))
        assert not is_equal(lox_callable(f), lox_callable(native()))

    def test_instances_by_identity(self):
        klass = LoxClass("A", None, {})
        a = LoxInstance(klass)
        assert is_equal(lox_instance(a), lox_instance(a))
        assert not is_equal(lox_instance(a), lox_instance(LoxInstance(klass)))


class TestDisplay:
    @pytest.mark.parametrize("number,text", [
        (3.0, "3"),
        (2.5, "2.5"),
        (-0.5, "-0.5"),
        (100.0, "100"),
        (1e21, "1.0E21"),
        (0.0001, "1.0E-4"),
        (-0.0, "-0"),
        (float("inf"), "Infinity"),
        (float("nan"), "NaN"),
    ])
    def test_format_number(self, number, text):
        assert format_number(number) == text

    def test_str(self):
        assert str(lox_nil()) == "nil"
        assert str(lox_bool(True)) == "true"
        assert str(lox_bool(False)) == "false"
        assert str(lox_number(7)) == "7"
        assert str(lox_string("x")) == "x"

    def test_callables_and_instances(self):
        klass = LoxClass("Point", None, {})
        assert str(lox_callable(native())) == "<native fn>"
        assert str(lox_callable(klass)) == "Point"
        assert str(lox_instance(LoxInstance(klass))) == "Point instance"
