"""Static resolution pass for Lox.

Walks the statement list once before execution and records, on every variable,
assignment, ``this`` and ``super`` node, how many scopes lie between the
reference and the scope declaring the name. The interpreter then reads and
writes locals at that exact distance; names left unresolved are globals.

The resolver also reports the errors that only make sense statically:
reading a local in its own initializer, ``return`` outside a function, and
misplaced ``this`` / ``super``.
"""
from __future__ import annotations
import logging
from enum import Enum, auto
from typing import Optional, Union

from .ast_nodes import *
from .errors import ErrorReporter
from .tokens import Token

logger = logging.getLogger(__name__)


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


Resolvable = Union[VariableAccess, Assignment, ThisExpr, SuperAccess]


class Resolver:
    def __init__(self, reporter: ErrorReporter | None = None):
        self.reporter = reporter or ErrorReporter()
        # name -> "fully defined?"; the global scope is never on this stack
        self.scopes: list[dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.resolved_count = 0

    def error(self, token: Token, msg: str):
        self.reporter.token_error(token, msg)

    # ================================================
    # Entry point
    # ================================================

    def resolve(self, statements: list[Statement]):
        for stmt in statements:
            self.resolve_statement(stmt)
        logger.debug("resolved %d local references", self.resolved_count)

    # ================================================
    # Scopes
    # ================================================

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if not self.scopes:
            return
        # Redeclaring in the same scope is allowed; it just shadows
        self.scopes[-1][name.lexeme] = False

    def define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, node: Resolvable, name: str):
        for distance, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                node.depth = distance
                self.resolved_count += 1
                return
        node.depth = None  # global

    def resolve_function(self, func: FunctionDecl, kind: FunctionType):
        enclosing_function = self.current_function
        self.current_function = kind
        self.begin_scope()
        for param in func.params:
            self.declare(param)
            self.define(param)
        for stmt in func.body:
            self.resolve_statement(stmt)
        self.end_scope()
        self.current_function = enclosing_function

    # ================================================
    # Statements
    # ================================================

    def resolve_statement(self, node: Statement):
        if isinstance(node, Block):
            self.begin_scope()
            for stmt in node.statements:
                self.resolve_statement(stmt)
            self.end_scope()
        elif isinstance(node, VarDeclaration):
            self.declare(node.name)
            if node.initializer is not None:
                self.resolve_expression(node.initializer)
            self.define(node.name)
        elif isinstance(node, FunctionDecl):
            # Defined before the body so the function can recurse
            self.declare(node.name)
            self.define(node.name)
            self.resolve_function(node, FunctionType.FUNCTION)
        elif isinstance(node, ClassDecl):
            self._resolve_class(node)
        elif isinstance(node, ExpressionStatement):
            self.resolve_expression(node.expression)
        elif isinstance(node, PrintStatement):
            self.resolve_expression(node.expression)
        elif isinstance(node, IfStatement):
            self.resolve_expression(node.condition)
            self.resolve_statement(node.then_branch)
            if node.else_branch is not None:
                self.resolve_statement(node.else_branch)
        elif isinstance(node, WhileLoop):
            self.resolve_expression(node.condition)
            self.resolve_statement(node.body)
        elif isinstance(node, ReturnStatement):
            if self.current_function == FunctionType.NONE:
                self.error(node.keyword, "Can't return from top-level code.")
            self.resolve_expression(node.value)
        else:
            raise TypeError(f"Unknown statement node {type(node).__name__}")

    def _resolve_class(self, node: ClassDecl):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(node.name)
        self.define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self.error(node.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expression(node.superclass)
            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True
        for method in node.methods:
            self.resolve_function(method, FunctionType.METHOD)
        self.end_scope()

        if node.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    # ================================================
    # Expressions
    # ================================================

    def resolve_expression(self, node: Optional[Expression]):
        if node is None:
            return
        if isinstance(node, VariableAccess):
            if self.scopes and self.scopes[-1].get(node.name.lexeme) is False:
                self.error(node.name, "Can't read local variable in its own initializer.")
            self.resolve_local(node, node.name.lexeme)
        elif isinstance(node, Assignment):
            self.resolve_expression(node.value)
            self.resolve_local(node, node.name.lexeme)
        elif isinstance(node, ThisExpr):
            if self.current_class == ClassType.NONE:
                self.error(node.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(node, "this")
        elif isinstance(node, SuperAccess):
            if self.current_class == ClassType.NONE:
                self.error(node.keyword, "Can't use 'super' outside of a class.")
                return
            if self.current_class != ClassType.SUBCLASS:
                self.error(node.keyword, "Can't use 'super' in a class with no superclass.")
                return
            self.resolve_local(node, "super")
        elif isinstance(node, (BinaryOp, LogicalOp)):
            self.resolve_expression(node.left)
            self.resolve_expression(node.right)
        elif isinstance(node, UnaryOp):
            self.resolve_expression(node.operand)
        elif isinstance(node, TernaryOp):
            self.resolve_expression(node.condition)
            self.resolve_expression(node.then_branch)
            self.resolve_expression(node.else_branch)
        elif isinstance(node, Grouping):
            self.resolve_expression(node.expression)
        elif isinstance(node, FunctionCall):
            self.resolve_expression(node.callee)
            for arg in node.arguments:
                self.resolve_expression(arg)
        elif isinstance(node, MemberAccess):
            self.resolve_expression(node.object)
        elif isinstance(node, MemberAssignment):
            self.resolve_expression(node.value)
            self.resolve_expression(node.object)
        elif isinstance(node, Literal):
            pass
        else:
            raise TypeError(f"Unknown expression node {type(node).__name__}")
