"""Tests for the Lox variable and environment system."""
import pytest
from lox.variables import Variable, Environment, ScopeResolutionError
from lox.types import lox_number, lox_string, lox_nil, LoxType
from lox.tokens import Token, TokenType
from lox.errors import UndefinedVariableError, UninitializedVariableError


def name(lexeme: str, line: int = 1) -> Token:
    return Token(TokenType.IDENTIFIER, lexeme, None, line)


class TestVariable:
    def test_defaults_to_initialized_nil(self):
        v = Variable(name="x")
        assert v.initialized is True
        assert v.value.type == LoxType.NIL


class TestDefineAndGet:
    def test_define_and_get(self):
        env = Environment()
        env.define("a", lox_number(1))
        assert env.get(name("a")).value == 1

    def test_get_accepts_plain_name(self):
        env = Environment()
        env.define("a", lox_number(1))
        assert env.get("a").value == 1

    def test_redefine_in_same_scope(self):
        env = Environment()
        env.define("a", lox_number(1))
        env.define("a", lox_string("two"))
        assert env.get("a").value == "two"

    def test_get_walks_outward(self):
        outer = Environment()
        outer.define("a", lox_number(1))
        inner = Environment(outer)
        assert inner.get("a").value == 1

    def test_nearest_scope_wins(self):
        outer = Environment()
        outer.define("a", lox_string("global"))
        inner = Environment(outer)
        inner.define("a", lox_string("local"))
        assert inner.get("a").value == "local"
        assert outer.get("a").value == "global"

    def test_undefined(self):
        env = Environment()
        with pytest.raises(UndefinedVariableError) as exc:
            env.get(name("missing", line=7))
        assert exc.value.message == "Undefined variable 'missing'."
        assert exc.value.line == 7

    def test_declared_without_value_is_uninitialized(self):
        env = Environment()
        env.define("x")
        with pytest.raises(UninitializedVariableError) as exc:
            env.get(name("x"))
        assert exc.value.message == "Variable 'x' is uninitialized."

    def test_explicit_nil_is_initialized(self):
        env = Environment()
        env.define("x", lox_nil())
        assert env.get("x").type == LoxType.NIL


class TestAssign:
    def test_assign_updates_nearest(self):
        outer = Environment()
        outer.define("a", lox_number(1))
        inner = Environment(outer)
        inner.assign(name("a"), lox_number(2))
        assert outer.get("a").value == 2
        assert "a" not in inner.variables

    def test_assign_initializes(self):
        env = Environment()
        env.define("x")
        env.assign(name("x"), lox_nil())
        assert env.get("x").type == LoxType.NIL

    def test_assign_never_creates_binding(self):
        env = Environment()
        with pytest.raises(UndefinedVariableError):
            env.assign(name("nope"), lox_number(1))
        assert "nope" not in env.variables


class TestResolvedAccess:
    def make_chain(self):
        globals_ = Environment()
        globals_.define("a", lox_string("global"))
        middle = Environment(globals_)
        middle.define("a", lox_string("middle"))
        inner = Environment(middle)
        return globals_, middle, inner

    def test_get_at(self):
        _, _, inner = self.make_chain()
        assert inner.get_at(1, "a").value == "middle"
        assert inner.get_at(2, "a").value == "global"

    def test_assign_at(self):
        globals_, middle, inner = self.make_chain()
        inner.assign_at(2, name("a"), lox_string("changed"))
        assert globals_.get("a").value == "changed"
        assert middle.get("a").value == "middle"

    def test_get_at_missing_is_internal_error(self):
        _, _, inner = self.make_chain()
        with pytest.raises(ScopeResolutionError):
            inner.get_at(0, "a")

    def test_ancestor(self):
        globals_, middle, inner = self.make_chain()
        assert inner.ancestor(0) is inner
        assert inner.ancestor(1) is middle
        assert inner.ancestor(2) is globals_
        assert inner.enclosing is middle

    def test_ancestor_past_globals(self):
        globals_, _, _ = self.make_chain()
        with pytest.raises(ScopeResolutionError):
            globals_.ancestor(1)


class TestSharedScopes:
    def test_child_sees_later_changes_in_parent(self):
        parent = Environment()
        child = Environment(parent)
        parent.define("late", lox_number(5))
        assert child.get("late").value == 5
