"""Core interpreter runtime for Lox: statement execution and expression evaluation."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .ast_nodes import *
from .tokens import Token, TokenType
from .types import (
    LoxValue, LoxType, lox_nil, lox_bool, lox_number, lox_string, lox_callable,
    from_literal, is_truthy, is_equal,
)
from .variables import Environment
from .callables import (
    LoxCallable, LoxFunction, LoxClass, LoxInstance, NativeFunction, NativeFn,
    ReturnSignal,
)
from .errors import (
    ErrorReporter, LoxRuntimeError, OperandTypeError, DivisionByZeroError,
    NotCallableError, NotAnInstanceError, ArityMismatchError, UndefinedPropertyError,
)
from .stdlib import install_natives

logger = logging.getLogger(__name__)


# ================================================
# Outcome of a run
# ================================================

@dataclass
class Completed:
    """Every statement ran. ``value`` is the last top-level expression statement's value."""
    value: Optional[LoxValue] = None


@dataclass
class RuntimeFailure:
    message: str
    line: int


Outcome = Union[Completed, RuntimeFailure]

ARITHMETIC = {
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR: lambda a, b: a * b,
    TokenType.SLASH: lambda a, b: a / b,
}

COMPARISON = {
    TokenType.GREATER: lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS: lambda a, b: a < b,
    TokenType.LESS_EQUAL: lambda a, b: a <= b,
}


class Interpreter:
    """Executes resolved Lox statements against a persistent global scope.

    One instance is one evaluation context: a REPL keeps the same interpreter
    across lines, a script run builds a fresh one.
    """

    def __init__(self, stdout: Callable[[str], None] | None = None,
                 reporter: ErrorReporter | None = None):
        self.stdout = stdout or print
        self.reporter = reporter or ErrorReporter()
        self.globals = Environment()
        self.current_env = self.globals
        install_natives(self)

    def define_native(self, name: str, arity: int, fn: NativeFn):
        """Register a host function under a global name."""
        self.globals.define(name, lox_callable(NativeFunction(name, arity, fn)))
        logger.debug("registered native %s/%d", name, arity)

    # ================================================
    # Main execution
    # ================================================

    def interpret(self, statements: list[Statement]) -> Outcome:
        """Execute ``statements`` top to bottom; the first runtime error stops the run."""
        last = None
        try:
            for stmt in statements:
                if isinstance(stmt, ExpressionStatement):
                    last = self.evaluate(stmt.expression)
                else:
                    self.execute(stmt)
                    last = None
        except LoxRuntimeError as e:
            logger.debug("runtime error at line %d: %s", e.line, e.message)
            self.reporter.runtime_error(e)
            return RuntimeFailure(e.message, e.line)
        return Completed(last)

    # ================================================
    # Statement execution
    # ================================================

    def execute(self, node: Statement):
        """Execute a statement node."""
        if isinstance(node, ExpressionStatement):
            self.evaluate(node.expression)
        elif isinstance(node, PrintStatement):
            self._exec_print(node)
        elif isinstance(node, VarDeclaration):
            self._exec_var_decl(node)
        elif isinstance(node, Block):
            self.execute_block(node.statements, Environment(self.current_env))
        elif isinstance(node, IfStatement):
            self._exec_if(node)
        elif isinstance(node, WhileLoop):
            self._exec_while(node)
        elif isinstance(node, FunctionDecl):
            self._exec_func_decl(node)
        elif isinstance(node, ClassDecl):
            self._exec_class_decl(node)
        elif isinstance(node, ReturnStatement):
            self._exec_return(node)
        else:
            raise TypeError(f"Unknown statement node {type(node).__name__}")

    def execute_block(self, statements: list[Statement], env: Environment):
        """Run ``statements`` with ``env`` as the active scope.

        The previous scope is restored on every exit path: normal completion,
        a runtime error or a return signal.
        """
        old_env = self.current_env
        self.current_env = env
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.current_env = old_env

    def _exec_print(self, node: PrintStatement):
        value = self.evaluate(node.expression)
        self.stdout(str(value))

    def _exec_var_decl(self, node: VarDeclaration):
        if node.initializer is None:
            self.current_env.define(node.name.lexeme)
        else:
            self.current_env.define(node.name.lexeme, self.evaluate(node.initializer))

    def _exec_if(self, node: IfStatement):
        if is_truthy(self.evaluate(node.condition)):
            self.execute(node.then_branch)
        elif node.else_branch is not None:
            self.execute(node.else_branch)

    def _exec_while(self, node: WhileLoop):
        while is_truthy(self.evaluate(node.condition)):
            self.execute(node.body)

    def _exec_func_decl(self, node: FunctionDecl):
        function = LoxFunction(node, self.current_env)
        self.current_env.define(node.name.lexeme, lox_callable(function))

    def _exec_class_decl(self, node: ClassDecl):
        superclass = None
        if node.superclass is not None:
            value = self.evaluate(node.superclass)
            if value.type != LoxType.CALLABLE or not isinstance(value.value, LoxClass):
                raise OperandTypeError(node.superclass.name, "Superclass must be a class.")
            superclass = value.value

        # Declared first so methods can refer to the class by name
        self.current_env.define(node.name.lexeme)

        if superclass is not None:
            self.current_env = Environment(self.current_env)
            self.current_env.define("super", lox_callable(superclass))

        methods = {}
        for method in node.methods:
            is_init = method.name.lexeme == "init"
            methods[method.name.lexeme] = LoxFunction(method, self.current_env, is_init)

        klass = LoxClass(node.name.lexeme, superclass, methods)

        if superclass is not None:
            # The method closures keep the 'super' scope alive
            self.current_env = self.current_env.enclosing

        self.current_env.assign(node.name, lox_callable(klass))

    def _exec_return(self, node: ReturnStatement):
        value = self.evaluate(node.value) if node.value is not None else lox_nil()
        raise ReturnSignal(value)

    # ================================================
    # Expression evaluation
    # ================================================

    def evaluate(self, node: Expression) -> LoxValue:
        """Evaluate an expression node."""
        if isinstance(node, Literal):
            return from_literal(node.value)
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, VariableAccess):
            return self._look_up_variable(node.name, node.depth)
        if isinstance(node, Assignment):
            return self._eval_assignment(node)
        if isinstance(node, LogicalOp):
            return self._eval_logical(node)
        if isinstance(node, TernaryOp):
            return self._eval_ternary(node)
        if isinstance(node, UnaryOp):
            return self._eval_unary(node)
        if isinstance(node, BinaryOp):
            return self._eval_binary(node)
        if isinstance(node, FunctionCall):
            return self._eval_function_call(node)
        if isinstance(node, MemberAccess):
            return self._eval_member_access(node)
        if isinstance(node, MemberAssignment):
            return self._eval_member_assignment(node)
        if isinstance(node, ThisExpr):
            return self._look_up_variable(node.keyword, node.depth)
        if isinstance(node, SuperAccess):
            return self._eval_super(node)
        raise TypeError(f"Unknown expression node {type(node).__name__}")

    def _look_up_variable(self, name: Token, depth: Optional[int]) -> LoxValue:
        if depth is not None:
            return self.current_env.get_at(depth, name)
        return self.globals.get(name)

    def _eval_assignment(self, node: Assignment) -> LoxValue:
        value = self.evaluate(node.value)
        if node.depth is not None:
            self.current_env.assign_at(node.depth, node.name, value)
        else:
            self.globals.assign(node.name, value)
        return value

    def _eval_logical(self, node: LogicalOp) -> LoxValue:
        left = self.evaluate(node.left)
        if node.operator.type == TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.evaluate(node.right)

    def _eval_ternary(self, node: TernaryOp) -> LoxValue:
        if is_truthy(self.evaluate(node.condition)):
            return self.evaluate(node.then_branch)
        return self.evaluate(node.else_branch)

    def _eval_unary(self, node: UnaryOp) -> LoxValue:
        operand = self.evaluate(node.operand)
        if node.operator.type == TokenType.MINUS:
            if operand.type != LoxType.NUMBER:
                raise OperandTypeError(node.operator, "Operand must be a number.")
            return lox_number(-operand.value)
        if node.operator.type == TokenType.BANG:
            return lox_bool(not is_truthy(operand))
        raise TypeError(f"Unknown unary operator {node.operator.lexeme!r}")

    def _eval_binary(self, node: BinaryOp) -> LoxValue:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = node.operator.type

        if op == TokenType.COMMA:
            return right
        if op == TokenType.EQUAL_EQUAL:
            return lox_bool(is_equal(left, right))
        if op == TokenType.BANG_EQUAL:
            return lox_bool(not is_equal(left, right))
        if op == TokenType.PLUS:
            return self._add(node.operator, left, right)

        if left.type != LoxType.NUMBER or right.type != LoxType.NUMBER:
            raise OperandTypeError(node.operator, "Operands must be numbers.")

        if op in COMPARISON:
            return lox_bool(COMPARISON[op](left.value, right.value))
        if op == TokenType.SLASH and right.value == 0:
            raise DivisionByZeroError(node.operator, "Can't divide a number by zero.")
        if op in ARITHMETIC:
            return lox_number(ARITHMETIC[op](left.value, right.value))
        raise TypeError(f"Unknown binary operator {node.operator.lexeme!r}")

    def _add(self, operator: Token, left: LoxValue, right: LoxValue) -> LoxValue:
        if left.type == LoxType.NUMBER and right.type == LoxType.NUMBER:
            return lox_number(left.value + right.value)
        if left.type == LoxType.STRING and right.type == LoxType.STRING:
            return lox_string(left.value + right.value)
        # Mixed number and string: concatenate display forms
        if {left.type, right.type} == {LoxType.NUMBER, LoxType.STRING}:
            return lox_string(str(left) + str(right))
        raise OperandTypeError(operator, "Operands must be two numbers or two strings.")

    def _eval_function_call(self, node: FunctionCall) -> LoxValue:
        callee = self.evaluate(node.callee)
        arguments = [self.evaluate(arg) for arg in node.arguments]

        if callee.type != LoxType.CALLABLE:
            raise NotCallableError(node.paren, "Can only call functions and classes.")

        function: LoxCallable = callee.value
        if len(arguments) != function.arity():
            raise ArityMismatchError(node.paren, function.arity(), len(arguments))

        return function.call(self, arguments)

    def _eval_member_access(self, node: MemberAccess) -> LoxValue:
        obj = self.evaluate(node.object)
        if obj.type != LoxType.INSTANCE:
            raise NotAnInstanceError(node.name, "Only instances have properties.")
        return obj.value.get(node.name)

    def _eval_member_assignment(self, node: MemberAssignment) -> LoxValue:
        obj = self.evaluate(node.object)
        if obj.type != LoxType.INSTANCE:
            raise NotAnInstanceError(node.name, "Only instances have fields.")
        value = self.evaluate(node.value)
        obj.value.set(node.name, value)
        return value

    def _eval_super(self, node: SuperAccess) -> LoxValue:
        # 'super' lives one scope further out than 'this' (see _exec_class_decl)
        superclass: LoxClass = self.current_env.get_at(node.depth, node.keyword).value
        instance: LoxInstance = self.current_env.get_at(node.depth - 1, "this").value

        method = superclass.find_method(node.method.lexeme)
        if method is None:
            raise UndefinedPropertyError(node.method, f"Undefined property '{node.method.lexeme}'.")
        return lox_callable(method.bind(instance))
