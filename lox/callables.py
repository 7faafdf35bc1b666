"""Runtime object model: functions, closures, classes and instances."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

from .ast_nodes import FunctionDecl
from .tokens import Token
from .types import LoxValue, lox_nil, lox_callable, lox_instance
from .variables import Environment
from .errors import UndefinedPropertyError

if TYPE_CHECKING:
    from .runtime import Interpreter


class ReturnSignal(Exception):
    """Unwinds a ``return`` statement up to the nearest call boundary.

    Not a runtime error: only ``LoxFunction.call`` catches it, and the
    resolver rejects ``return`` outside a function, so it never reaches
    ``Interpreter.interpret``.
    """
    def __init__(self, value: LoxValue):
        super().__init__()
        self.value = value


class LoxCallable(ABC):
    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: Interpreter, arguments: list[LoxValue]) -> LoxValue:
        ...


NativeFn = Callable[["Interpreter", list[LoxValue]], LoxValue]


class NativeFunction(LoxCallable):
    """A host-provided function, e.g. ``clock``."""

    def __init__(self, name: str, arity: int, fn: NativeFn):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Interpreter, arguments: list[LoxValue]) -> LoxValue:
        return self.fn(interpreter, arguments)

    def __str__(self):
        return "<native fn>"


class LoxFunction(LoxCallable):
    def __init__(self, declaration: FunctionDecl, closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """Return a copy of this method whose closure binds ``this`` to ``instance``."""
        env = Environment(self.closure)
        env.define("this", lox_instance(instance))
        return LoxFunction(self.declaration, env, self.is_initializer)

    def call(self, interpreter: Interpreter, arguments: list[LoxValue]) -> LoxValue:
        env = Environment(self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)

        try:
            interpreter.execute_block(self.declaration.body, env)
        except ReturnSignal as ret:
            if self.is_initializer:
                return self.closure.get_at(0, "this")
            return ret.value

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        return lox_nil()

    def __str__(self):
        return f"<fn {self.name}>"


class LoxClass(LoxCallable):
    def __init__(self, name: str, superclass: Optional[LoxClass], methods: dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """Search this class, then each ancestor in turn."""
        klass: Optional[LoxClass] = self
        while klass is not None:
            method = klass.methods.get(name)
            if method is not None:
                return method
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        return initializer.arity() if initializer else 0

    def call(self, interpreter: Interpreter, arguments: list[LoxValue]) -> LoxValue:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return lox_instance(instance)

    def __str__(self):
        return self.name


class LoxInstance:
    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: dict[str, LoxValue] = {}

    def get(self, name: Token) -> LoxValue:
        """Field first, then a method bound to this instance."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return lox_callable(method.bind(self))

        raise UndefinedPropertyError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: LoxValue):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"
