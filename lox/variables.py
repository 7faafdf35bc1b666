"""Variable and Environment system for Lox."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Union

from .tokens import Token
from .types import LoxValue, lox_nil
from .errors import UndefinedVariableError, UninitializedVariableError


class ScopeResolutionError(LookupError):
    """A resolved lookup found no binding: the resolver and runtime disagree.

    An interpreter bug rather than a user error, so not a ``LoxRuntimeError``.
    """


@dataclass
class Variable:
    """One binding in a scope.

    ``initialized`` is False for ``var x;`` until something is assigned; a
    binding explicitly holding nil is initialized.
    """
    name: str
    value: LoxValue = field(default_factory=lox_nil)
    initialized: bool = True


Name = Union[Token, str]


def _lexeme(name: Name) -> str:
    return name.lexeme if isinstance(name, Token) else name


def _token(name: Name) -> Optional[Token]:
    return name if isinstance(name, Token) else None


class Environment:
    """Scoped variable storage.

    Scopes are shared: every closure created while a scope is active keeps a
    reference to it, so the scope lives as long as its longest-lived closure.
    """

    def __init__(self, enclosing: Optional[Environment] = None):
        self.enclosing = enclosing
        self.variables: dict[str, Variable] = {}

    def define(self, name: str, value: Optional[LoxValue] = None):
        """Bind ``name`` in this scope only, replacing any existing binding.

        Passing no value declares the name without initializing it.
        """
        if value is None:
            self.variables[name] = Variable(name, lox_nil(), initialized=False)
        else:
            self.variables[name] = Variable(name, value)

    def ancestor(self, distance: int) -> Environment:
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise ScopeResolutionError(f"No scope at distance {distance}")
            env = env.enclosing
        return env

    def lookup(self, name: str) -> Optional[Variable]:
        """Nearest binding of ``name`` walking outward, or None."""
        env = self
        while env is not None:
            var = env.variables.get(name)
            if var is not None:
                return var
            env = env.enclosing
        return None

    def get(self, name: Name) -> LoxValue:
        var = self.lookup(_lexeme(name))
        if var is None:
            raise UndefinedVariableError(_token(name), f"Undefined variable '{_lexeme(name)}'.")
        return _read(var, name)

    def get_at(self, distance: int, name: Name) -> LoxValue:
        scope = self.ancestor(distance)
        var = scope.variables.get(_lexeme(name))
        if var is None:
            raise ScopeResolutionError(
                f"'{_lexeme(name)}' not bound at resolved distance {distance}"
            )
        return _read(var, name)

    def assign(self, name: Name, value: LoxValue):
        var = self.lookup(_lexeme(name))
        if var is None:
            raise UndefinedVariableError(_token(name), f"Undefined variable '{_lexeme(name)}'.")
        var.value = value
        var.initialized = True

    def assign_at(self, distance: int, name: Name, value: LoxValue):
        scope = self.ancestor(distance)
        var = scope.variables.get(_lexeme(name))
        if var is None:
            raise ScopeResolutionError(
                f"'{_lexeme(name)}' not bound at resolved distance {distance}"
            )
        var.value = value
        var.initialized = True

    def __repr__(self):
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"Environment(depth={depth}, names={sorted(self.variables)})"


def _read(var: Variable, name: Name) -> LoxValue:
    if not var.initialized:
        raise UninitializedVariableError(_token(name), f"Variable '{var.name}' is uninitialized.")
    return var.value
