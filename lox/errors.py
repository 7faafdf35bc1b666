"""Runtime error types and the diagnostic sink shared by every phase."""
from __future__ import annotations
import sys
from typing import Callable, Optional

from .tokens import Token, TokenType


class LoxRuntimeError(Exception):
    """Runtime error in Lox. Aborts the whole run; caught once in ``interpret``."""
    def __init__(self, token: Optional[Token], message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> int:
        return self.token.line if self.token else 0


class OperandTypeError(LoxRuntimeError):
    """An operator was applied to operands of the wrong kind."""


class DivisionByZeroError(LoxRuntimeError):
    pass


class UndefinedVariableError(LoxRuntimeError):
    pass


class UninitializedVariableError(UndefinedVariableError):
    """The binding exists but was declared without a value and never assigned."""


class UndefinedPropertyError(LoxRuntimeError):
    pass


class NotCallableError(LoxRuntimeError):
    pass


class NotAnInstanceError(LoxRuntimeError):
    pass


class ArityMismatchError(LoxRuntimeError):
    def __init__(self, token: Optional[Token], expected: int, got: int):
        super().__init__(token, f"Expect {expected} arguments but got {got}.")
        self.expected = expected
        self.got = got


def _stderr(text: str):
    print(text, file=sys.stderr)


class ErrorReporter:
    """Collects static and runtime diagnostics and writes them to a sink.

    Reporting never alters control flow; callers check ``had_error`` /
    ``had_runtime_error`` to decide whether to go on.
    """

    def __init__(self, sink: Callable[[str], None] | None = None):
        self.sink = sink or _stderr
        self.had_error = False
        self.had_runtime_error = False
        self.messages: list[str] = []

    def error(self, line: int, message: str):
        self.report(line, "", message)

    def token_error(self, token: Token, message: str):
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def report(self, line: int, where: str, message: str):
        self._emit(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def runtime_error(self, error: LoxRuntimeError):
        self._emit(f"{error.message}\n[line {error.line}]")
        self.had_runtime_error = True

    def reset(self):
        """Forget static errors (the REPL calls this between lines)."""
        self.had_error = False

    def _emit(self, text: str):
        self.messages.append(text)
        self.sink(text)
