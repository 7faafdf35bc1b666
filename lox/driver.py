"""Runs Lox source through scan → parse → resolve → interpret."""
from __future__ import annotations
import logging
from typing import Callable, Optional

from .lexer import Lexer
from .parser import Parser
from .resolver import Resolver
from .runtime import Interpreter, Outcome
from .errors import ErrorReporter
from .ast_printer import AstPrinter

logger = logging.getLogger(__name__)


class Lox:
    """One evaluation session: an error reporter plus a persistent interpreter.

    ``flags`` (all optional): ``tokens`` dumps the token stream and ``ast``
    prints the syntax tree before execution, both to ``stdout``.
    """

    def __init__(self, flags: dict | None = None,
                 stdout: Callable[[str], None] | None = None,
                 stderr: Callable[[str], None] | None = None):
        self.flags = flags or {}
        self.stdout = stdout or print
        self.reporter = ErrorReporter(sink=stderr)
        self.interpreter = Interpreter(stdout=self.stdout, reporter=self.reporter)

    @property
    def had_error(self) -> bool:
        return self.reporter.had_error

    @property
    def had_runtime_error(self) -> bool:
        return self.reporter.had_runtime_error

    def run(self, source: str) -> Optional[Outcome]:
        """Run ``source``. Returns None when static errors prevented execution."""
        tokens = Lexer(source, self.reporter).tokenize()
        logger.debug("scanned %d tokens", len(tokens))
        if self.flags.get("tokens"):
            for token in tokens:
                self.stdout(str(token))

        statements = Parser(tokens, self.reporter).parse()
        logger.debug("parsed %d statements", len(statements))
        if self.reporter.had_error:
            return None

        Resolver(self.reporter).resolve(statements)
        if self.reporter.had_error:
            return None

        if self.flags.get("ast"):
            self.stdout(AstPrinter().print_program(statements))

        return self.interpreter.interpret(statements)
