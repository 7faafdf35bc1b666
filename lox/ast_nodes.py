"""AST node definitions for Lox.

Nodes compare and hash by identity (``eq=False``): two syntactically identical
expressions are distinct objects. Reference nodes (variable access, assignment,
``this``, ``super``) carry a ``depth`` slot that the resolver fills in with the
number of scopes between the reference and its declaration; ``None`` means the
name is global.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional

from .tokens import Token


# ============================================================
# Base
# ============================================================

@dataclass(eq=False, kw_only=True)
class ASTNode:
    """Base for all AST nodes."""
    line: int = 0


@dataclass(eq=False, kw_only=True)
class Statement(ASTNode):
    """Base for statements."""


@dataclass(eq=False, kw_only=True)
class Expression(ASTNode):
    """Base for expressions."""


# ============================================================
# Expressions
# ============================================================

@dataclass(eq=False)
class Literal(Expression):
    # None, bool, float or str straight from the scanner
    value: Any = None


@dataclass(eq=False)
class Grouping(Expression):
    expression: Expression


@dataclass(eq=False)
class VariableAccess(Expression):
    name: Token
    depth: Optional[int] = None


@dataclass(eq=False)
class Assignment(Expression):
    name: Token
    value: Expression
    depth: Optional[int] = None


@dataclass(eq=False)
class UnaryOp(Expression):
    operator: Token
    operand: Expression


@dataclass(eq=False)
class BinaryOp(Expression):
    """Arithmetic, comparison, equality and the comma operator."""
    left: Expression
    operator: Token
    right: Expression


@dataclass(eq=False)
class LogicalOp(Expression):
    left: Expression
    operator: Token  # AND / OR
    right: Expression


@dataclass(eq=False)
class TernaryOp(Expression):
    condition: Expression
    then_branch: Expression
    else_branch: Expression


@dataclass(eq=False)
class FunctionCall(Expression):
    callee: Expression
    paren: Token  # closing paren, for error lines
    arguments: list[Expression] = field(default_factory=list)


@dataclass(eq=False)
class MemberAccess(Expression):
    object: Expression
    name: Token


@dataclass(eq=False)
class MemberAssignment(Expression):
    object: Expression
    name: Token
    value: Expression


@dataclass(eq=False)
class ThisExpr(Expression):
    keyword: Token
    depth: Optional[int] = None


@dataclass(eq=False)
class SuperAccess(Expression):
    keyword: Token
    method: Token
    depth: Optional[int] = None


# ============================================================
# Statements
# ============================================================

@dataclass(eq=False)
class ExpressionStatement(Statement):
    expression: Expression


@dataclass(eq=False)
class PrintStatement(Statement):
    expression: Expression


@dataclass(eq=False)
class VarDeclaration(Statement):
    name: Token
    initializer: Optional[Expression] = None


@dataclass(eq=False)
class Block(Statement):
    statements: list[Statement] = field(default_factory=list)


@dataclass(eq=False)
class IfStatement(Statement):
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None


@dataclass(eq=False)
class WhileLoop(Statement):
    condition: Expression
    body: Statement


@dataclass(eq=False)
class FunctionDecl(Statement):
    name: Token
    params: list[Token] = field(default_factory=list)
    body: list[Statement] = field(default_factory=list)


@dataclass(eq=False)
class ClassDecl(Statement):
    name: Token
    superclass: Optional[VariableAccess] = None
    methods: list[FunctionDecl] = field(default_factory=list)


@dataclass(eq=False)
class ReturnStatement(Statement):
    keyword: Token
    value: Optional[Expression] = None
