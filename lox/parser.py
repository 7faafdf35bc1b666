"""Recursive descent parser for Lox.

Syntax errors are reported through the ``ErrorReporter`` and the parser
resynchronizes at the next statement boundary, so one pass reports as many
errors as it can. Statements that failed to parse are dropped from the result.
"""
from __future__ import annotations
from typing import Optional

from .tokens import Token, TokenType
from .errors import ErrorReporter
from .ast_nodes import *

MAX_ARGUMENTS = 8


class ParseError(Exception):
    def __init__(self, message: str, token: Token):
        super().__init__(f"[line {token.line}] Parse error: {message}")
        self.token = token


class Parser:
    def __init__(self, tokens: list[Token], reporter: ErrorReporter | None = None):
        self.tokens = tokens
        self.pos = 0
        self.reporter = reporter or ErrorReporter()

    # ================================================
    # Utilities
    # ================================================

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    @property
    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current.type == TokenType.EOF

    def check(self, ttype: TokenType) -> bool:
        if self.at_end():
            return False
        return self.current.type == ttype

    def advance(self) -> Token:
        if not self.at_end():
            self.pos += 1
        return self.previous

    def match(self, *types: TokenType) -> Optional[Token]:
        for ttype in types:
            if self.check(ttype):
                return self.advance()
        return None

    def expect(self, ttype: TokenType, msg: str) -> Token:
        if self.check(ttype):
            return self.advance()
        raise self.error(self.current, msg)

    def error(self, token: Token, msg: str) -> ParseError:
        """Report ``msg`` at ``token`` and return (not raise) a ParseError."""
        self.reporter.token_error(token, msg)
        return ParseError(msg, token)

    def synchronize(self):
        """Discard tokens until the start of the next statement."""
        self.advance()
        while not self.at_end():
            if self.previous.type == TokenType.SEMICOLON:
                return
            if self.current.type in (
                TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
                TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
            ):
                return
            self.advance()

    # ================================================
    # Top-level
    # ================================================

    def parse(self) -> list[Statement]:
        """Parse the entire program."""
        statements = []
        while not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_declaration(self) -> Optional[Statement]:
        try:
            if self.match(TokenType.CLASS):
                return self.parse_class_decl()
            if self.match(TokenType.FUN):
                return self.parse_function("function")
            if self.match(TokenType.VAR):
                return self.parse_var_declaration()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    def parse_class_decl(self) -> ClassDecl:
        name = self.expect(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self.match(TokenType.LESS):
            super_name = self.expect(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = VariableAccess(super_name, line=super_name.line)

        self.expect(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            methods.append(self.parse_function("method"))
        self.expect(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return ClassDecl(name, superclass, methods, line=name.line)

    def parse_function(self, kind: str) -> FunctionDecl:
        name = self.expect(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.expect(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: list[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.current, f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.expect(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.expect(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return FunctionDecl(name, params, body, line=name.line)

    def parse_var_declaration(self) -> VarDeclaration:
        name = self.expect(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDeclaration(name, initializer, line=name.line)

    # ================================================
    # Statements
    # ================================================

    def parse_statement(self) -> Statement:
        if self.match(TokenType.FOR):
            return self.parse_for()
        if self.match(TokenType.IF):
            return self.parse_if()
        if self.match(TokenType.PRINT):
            return self.parse_print()
        if self.match(TokenType.RETURN):
            return self.parse_return()
        if self.match(TokenType.WHILE):
            return self.parse_while()
        if self.match(TokenType.LEFT_BRACE):
            line = self.previous.line
            return Block(self.parse_block(), line=line)
        return self.parse_expression_statement()

    def parse_block(self) -> list[Statement]:
        """Parse declarations up to the closing brace (the '{' is consumed)."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.expect(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_for(self) -> Statement:
        """Desugar ``for (init; cond; incr) body`` into a while loop."""
        line = self.previous.line
        self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.parse_var_declaration()
        else:
            initializer = self.parse_expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = Block([body, ExpressionStatement(increment, line=increment.line)], line=line)
        if condition is None:
            condition = Literal(True, line=line)
        body = WhileLoop(condition, body, line=line)
        if initializer is not None:
            body = Block([initializer, body], line=line)
        return body

    def parse_if(self) -> IfStatement:
        line = self.previous.line
        self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return IfStatement(condition, then_branch, else_branch, line=line)

    def parse_print(self) -> PrintStatement:
        line = self.previous.line
        value = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStatement(value, line=line)

    def parse_return(self) -> ReturnStatement:
        keyword = self.previous
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ReturnStatement(keyword, value, line=keyword.line)

    def parse_while(self) -> WhileLoop:
        line = self.previous.line
        self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.expect(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return WhileLoop(condition, body, line=line)

    def parse_expression_statement(self) -> ExpressionStatement:
        expr = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expr, line=expr.line)

    # ================================================
    # Expressions
    # ================================================

    def parse_expression(self) -> Expression:
        """expression → assignment ( "," assignment )*"""
        expr = self.parse_assignment()
        while self.match(TokenType.COMMA):
            operator = self.previous
            right = self.parse_assignment()
            expr = BinaryOp(expr, operator, right, line=operator.line)
        return expr

    def parse_assignment(self) -> Expression:
        expr = self.parse_conditional()

        if self.match(TokenType.EQUAL):
            equals = self.previous
            value = self.parse_assignment()

            if isinstance(expr, VariableAccess):
                return Assignment(expr.name, value, line=expr.name.line)
            if isinstance(expr, MemberAccess):
                return MemberAssignment(expr.object, expr.name, value, line=expr.name.line)
            # Reported, but the parser is not confused: no need to synchronize
            self.error(equals, "Invalid assignment target.")

        return expr

    def parse_conditional(self) -> Expression:
        expr = self.parse_or()
        if self.match(TokenType.QUESTION):
            then_branch = self.parse_assignment()
            self.expect(TokenType.COLON, "Expect ':' after then branch of conditional expression.")
            else_branch = self.parse_conditional()
            return TernaryOp(expr, then_branch, else_branch, line=expr.line)
        return expr

    def parse_or(self) -> Expression:
        expr = self.parse_and()
        while self.match(TokenType.OR):
            operator = self.previous
            right = self.parse_and()
            expr = LogicalOp(expr, operator, right, line=operator.line)
        return expr

    def parse_and(self) -> Expression:
        expr = self.parse_equality()
        while self.match(TokenType.AND):
            operator = self.previous
            right = self.parse_equality()
            expr = LogicalOp(expr, operator, right, line=operator.line)
        return expr

    def _parse_binary(self, operand, *types: TokenType) -> Expression:
        expr = operand()
        while self.match(*types):
            operator = self.previous
            right = operand()
            expr = BinaryOp(expr, operator, right, line=operator.line)
        return expr

    def parse_equality(self) -> Expression:
        return self._parse_binary(self.parse_comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def parse_comparison(self) -> Expression:
        return self._parse_binary(
            self.parse_term,
            TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def parse_term(self) -> Expression:
        return self._parse_binary(self.parse_factor, TokenType.MINUS, TokenType.PLUS)

    def parse_factor(self) -> Expression:
        return self._parse_binary(self.parse_unary, TokenType.SLASH, TokenType.STAR)

    def parse_unary(self) -> Expression:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous
            operand = self.parse_unary()
            return UnaryOp(operator, operand, line=operator.line)
        return self.parse_call()

    def parse_call(self) -> Expression:
        expr = self.parse_primary()
        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.expect(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = MemberAccess(expr, name, line=name.line)
            else:
                break
        return expr

    def finish_call(self, callee: Expression) -> FunctionCall:
        arguments: list[Expression] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.current, f"Can't have more than {MAX_ARGUMENTS} arguments.")
                # No comma operator inside an argument list
                arguments.append(self.parse_assignment())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return FunctionCall(callee, paren, arguments, line=paren.line)

    def parse_primary(self) -> Expression:
        tok = self.current
        if self.match(TokenType.FALSE):
            return Literal(False, line=tok.line)
        if self.match(TokenType.TRUE):
            return Literal(True, line=tok.line)
        if self.match(TokenType.NIL):
            return Literal(None, line=tok.line)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(tok.literal, line=tok.line)

        if self.match(TokenType.SUPER):
            self.expect(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.expect(TokenType.IDENTIFIER, "Expect superclass method name.")
            return SuperAccess(tok, method, line=tok.line)

        if self.match(TokenType.THIS):
            return ThisExpr(tok, line=tok.line)

        if self.match(TokenType.IDENTIFIER):
            return VariableAccess(tok, line=tok.line)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.expect(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr, line=tok.line)

        raise self.error(tok, "Expect expression.")
