"""Renders Lox syntax trees in parenthesized prefix form, e.g. ``(+ 1 (group 2))``."""
from __future__ import annotations

from .ast_nodes import *
from .types import from_literal


class AstPrinter:
    def print(self, node: ASTNode) -> str:
        if isinstance(node, Statement):
            return self._statement(node)
        return self._expression(node)

    def print_program(self, statements: list[Statement]) -> str:
        return "\n".join(self.print(stmt) for stmt in statements)

    def parenthesize(self, name: str, *parts) -> str:
        pieces = [name]
        for part in parts:
            if isinstance(part, ASTNode):
                pieces.append(self.print(part))
            else:
                pieces.append(str(part))
        return "(" + " ".join(pieces) + ")"

    # ================================================
    # Expressions
    # ================================================

    def _expression(self, node: Expression) -> str:
        if isinstance(node, Literal):
            return str(from_literal(node.value))
        if isinstance(node, Grouping):
            return self.parenthesize("group", node.expression)
        if isinstance(node, VariableAccess):
            return node.name.lexeme
        if isinstance(node, Assignment):
            return self.parenthesize("=", node.name.lexeme, node.value)
        if isinstance(node, UnaryOp):
            return self.parenthesize(node.operator.lexeme, node.operand)
        if isinstance(node, (BinaryOp, LogicalOp)):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, TernaryOp):
            return self.parenthesize("?:", node.condition, node.then_branch, node.else_branch)
        if isinstance(node, FunctionCall):
            return self.parenthesize("call", node.callee, *node.arguments)
        if isinstance(node, MemberAccess):
            return self.parenthesize(".", node.object, node.name.lexeme)
        if isinstance(node, MemberAssignment):
            return self.parenthesize("=", self.parenthesize(".", node.object, node.name.lexeme), node.value)
        if isinstance(node, ThisExpr):
            return "this"
        if isinstance(node, SuperAccess):
            return self.parenthesize("super", node.method.lexeme)
        raise TypeError(f"Unknown expression node {type(node).__name__}")

    # ================================================
    # Statements
    # ================================================

    def _statement(self, node: Statement) -> str:
        if isinstance(node, ExpressionStatement):
            return self.parenthesize(";", node.expression)
        if isinstance(node, PrintStatement):
            return self.parenthesize("print", node.expression)
        if isinstance(node, VarDeclaration):
            if node.initializer is None:
                return self.parenthesize("var", node.name.lexeme)
            return self.parenthesize("var", node.name.lexeme, "=", node.initializer)
        if isinstance(node, Block):
            return self.parenthesize("block", *node.statements)
        if isinstance(node, IfStatement):
            if node.else_branch is None:
                return self.parenthesize("if", node.condition, node.then_branch)
            return self.parenthesize("if-else", node.condition, node.then_branch, node.else_branch)
        if isinstance(node, WhileLoop):
            return self.parenthesize("while", node.condition, node.body)
        if isinstance(node, FunctionDecl):
            params = "(" + " ".join(p.lexeme for p in node.params) + ")"
            return self.parenthesize("fun", node.name.lexeme + params, *node.body)
        if isinstance(node, ClassDecl):
            header = [node.name.lexeme]
            if node.superclass is not None:
                header += ["<", node.superclass.name.lexeme]
            return self.parenthesize("class", *header, *node.methods)
        if isinstance(node, ReturnStatement):
            if node.value is None:
                return "(return)"
            return self.parenthesize("return", node.value)
        raise TypeError(f"Unknown statement node {type(node).__name__}")
