"""Lexer for Lox: tokenizes source into a stream of Tokens."""
from __future__ import annotations
from .tokens import Token, TokenType, KEYWORDS, SINGLE_CHAR_TOKENS, COMPARISON_TOKENS
from .errors import ErrorReporter


def _is_digit(ch: str) -> bool:
    # str.isdigit also accepts non-ASCII digits such as '²'
    return "0" <= ch <= "9"


def _is_alpha(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_"


def _is_alnum(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class Lexer:
    def __init__(self, source: str, reporter: ErrorReporter | None = None):
        self.source = source
        self.reporter = reporter or ErrorReporter()
        self.start = 0
        self.pos = 0
        self.line = 1
        self.column = 1
        self.start_column = 1
        self.tokens: list[Token] = []

    def error(self, msg: str):
        self.reporter.error(self.line, msg)

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        if self.pos >= len(self.source):
            return "\0"
        return self.source[self.pos]

    def peek(self, offset: int = 1) -> str:
        p = self.pos + offset
        if p >= len(self.source):
            return "\0"
        return self.source[p]

    def advance(self) -> str:
        ch = self.current
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def match(self, expected: str) -> bool:
        if self.current != expected or self.at_end():
            return False
        self.advance()
        return True

    def add_token(self, ttype: TokenType, literal=None, line: int | None = None):
        text = self.source[self.start : self.pos]
        self.tokens.append(Token(
            type=ttype,
            lexeme=text,
            literal=literal,
            line=self.line if line is None else line,
            column=self.start_column,
        ))

    def skip_comment(self):
        """Skip // to end of line."""
        while not self.at_end() and self.current != "\n":
            self.advance()

    def skip_block_comment(self):
        """Skip /* ... */, which may span lines."""
        while not self.at_end():
            if self.current == "*" and self.peek() == "/":
                self.advance()
                self.advance()
                return
            self.advance()
        self.error("Unterminated comment.")

    def read_string(self):
        """Read a double-quoted string literal. Strings may span lines."""
        start_line = self.line
        while not self.at_end() and self.current != '"':
            self.advance()
        if self.at_end():
            self.error("Unterminated string.")
            return
        self.advance()  # closing quote
        value = self.source[self.start + 1 : self.pos - 1]
        self.add_token(TokenType.STRING, value, line=start_line)

    def read_number(self):
        while _is_digit(self.current):
            self.advance()
        # A trailing '.' without digits is a DOT token, not part of the number
        if self.current == "." and _is_digit(self.peek()):
            self.advance()
            while _is_digit(self.current):
                self.advance()
        self.add_token(TokenType.NUMBER, float(self.source[self.start : self.pos]))

    def read_identifier(self):
        while _is_alnum(self.current):
            self.advance()
        text = self.source[self.start : self.pos]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def scan_token(self):
        ch = self.advance()

        if ch in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[ch])
            return

        if ch in COMPARISON_TOKENS:
            single, double = COMPARISON_TOKENS[ch]
            self.add_token(double if self.match("=") else single)
            return

        if ch == "/":
            if self.match("/"):
                self.skip_comment()
            elif self.match("*"):
                self.skip_block_comment()
            else:
                self.add_token(TokenType.SLASH)
            return

        if ch in (" ", "\r", "\t", "\n"):
            return

        if ch == '"':
            self.read_string()
            return

        if _is_digit(ch):
            self.read_number()
            return

        if _is_alpha(ch):
            self.read_identifier()
            return

        self.error("Unexpected character.")

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source into a list of Tokens ending in EOF."""
        self.tokens = []
        while not self.at_end():
            self.start = self.pos
            self.start_column = self.column
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.column))
        return self.tokens
