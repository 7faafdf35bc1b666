"""Tests for the Lox lexer."""
import pytest
from lox.lexer import Lexer
from lox.errors import ErrorReporter
from lox.tokens import TokenType


def lex(source: str, reporter=None) -> list:
    return Lexer(source, reporter).tokenize()


def token_types(source: str) -> list[TokenType]:
    return [t.type for t in lex(source) if t.type != TokenType.EOF]


def quiet_reporter() -> ErrorReporter:
    return ErrorReporter(sink=lambda text: None)


class TestLiterals:
    def test_integer(self):
        toks = lex("42")
        assert toks[0].type == TokenType.NUMBER
        assert toks[0].literal == 42.0
        assert isinstance(toks[0].literal, float)

    def test_float(self):
        toks = lex("3.14")
        assert toks[0].type == TokenType.NUMBER
        assert toks[0].literal == 3.14

    def test_trailing_dot_is_not_part_of_number(self):
        assert token_types("1.") == [TokenType.NUMBER, TokenType.DOT]

    def test_negative_number_is_minus_then_number(self):
        assert token_types("-7") == [TokenType.MINUS, TokenType.NUMBER]

    def test_string(self):
        toks = lex('"hello"')
        assert toks[0].type == TokenType.STRING
        assert toks[0].literal == "hello"
        assert toks[0].lexeme == '"hello"'

    def test_multiline_string_keeps_start_line(self):
        toks = lex('"a\nb" x')
        assert toks[0].literal == "a\nb"
        assert toks[0].line == 1
        assert toks[1].line == 2

    def test_identifier(self):
        toks = lex("foo_bar1")
        assert toks[0].type == TokenType.IDENTIFIER
        assert toks[0].lexeme == "foo_bar1"


class TestKeywords:
    @pytest.mark.parametrize("word,ttype", [
        ("and", TokenType.AND),
        ("class", TokenType.CLASS),
        ("fun", TokenType.FUN),
        ("nil", TokenType.NIL),
        ("super", TokenType.SUPER),
        ("this", TokenType.THIS),
        ("while", TokenType.WHILE),
    ])
    def test_keyword(self, word, ttype):
        assert token_types(word) == [ttype]

    def test_keyword_prefix_is_identifier(self):
        assert token_types("classy") == [TokenType.IDENTIFIER]


class TestOperators:
    def test_single_char(self):
        assert token_types("(){},.-+;*?:") == [
            TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
            TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
            TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS,
            TokenType.SEMICOLON, TokenType.STAR, TokenType.QUESTION, TokenType.COLON,
        ]

    def test_two_char(self):
        assert token_types("!= == >= <= ! = > <") == [
            TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL,
            TokenType.GREATER_EQUAL, TokenType.LESS_EQUAL,
            TokenType.BANG, TokenType.EQUAL, TokenType.GREATER, TokenType.LESS,
        ]

    def test_slash(self):
        assert token_types("a / b") == [TokenType.IDENTIFIER, TokenType.SLASH, TokenType.IDENTIFIER]


class TestCommentsAndLines:
    def test_line_comment(self):
        assert token_types("1 // ignored\n2") == [TokenType.NUMBER, TokenType.NUMBER]

    def test_block_comment(self):
        toks = lex("1 /* a\nb */ 2")
        assert [t.type for t in toks] == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]
        assert toks[1].line == 2

    def test_line_numbers(self):
        toks = lex("a\nb\n\nc")
        assert [t.line for t in toks[:3]] == [1, 2, 4]

    def test_eof_always_last(self):
        toks = lex("")
        assert len(toks) == 1
        assert toks[0].type == TokenType.EOF


class TestErrors:
    def test_unexpected_character_reported_and_skipped(self):
        reporter = quiet_reporter()
        toks = lex("1 @ 2", reporter)
        assert reporter.had_error
        assert "[line 1] Error: Unexpected character." in reporter.messages
        assert [t.type for t in toks] == [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF]

    def test_non_ascii_letters_are_not_identifiers(self):
        reporter = quiet_reporter()
        toks = lex("caf\u00e9", reporter)
        assert reporter.messages == ["[line 1] Error: Unexpected character."]
        assert toks[0].type == TokenType.IDENTIFIER
        assert toks[0].lexeme == "caf"

    def test_non_ascii_digit_does_not_continue_identifier(self):
        reporter = quiet_reporter()
        toks = lex("x\u00b2", reporter)
        assert reporter.had_error
        assert [t.lexeme for t in toks] == ["x", ""]

    def test_unterminated_string(self):
        reporter = quiet_reporter()
        lex('"oops', reporter)
        assert reporter.had_error
        assert reporter.messages == ["[line 1] Error: Unterminated string."]

    def test_unterminated_block_comment(self):
        reporter = quiet_reporter()
        lex("/* never closed", reporter)
        assert reporter.messages == ["[line 1] Error: Unterminated comment."]
