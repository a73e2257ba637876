from __future__ import annotations

import io

import pytest

from loxterp import ModuleInfo, scan
from loxterp.helpers import stringify
from loxterp.tokens import TokenType as T


def _scan(source: str):
    err = io.StringIO()
    info = ModuleInfo(stream=err)
    tokens = scan(source, info)
    return tokens, info, err.getvalue()


def _kinds(source: str):
    tokens, _, _ = _scan(source)
    return [t.type for t in tokens]


def test_punctuation_and_operators():
    assert _kinds("(){},.:-+;*/%") == [
        T.LEFT_PAREN,
        T.RIGHT_PAREN,
        T.LEFT_BRACE,
        T.RIGHT_BRACE,
        T.COMMA,
        T.DOT,
        T.COLON,
        T.MINUS,
        T.PLUS,
        T.SEMICOLON,
        T.STAR,
        T.SLASH,
        T.PERCENT,
        T.EOF,
    ]


def test_two_character_operators_use_one_char_lookahead():
    assert _kinds("!= == <= >= ! = < >") == [
        T.BANG_EQUAL,
        T.EQUAL_EQUAL,
        T.LESS_EQUAL,
        T.GREATER_EQUAL,
        T.BANG,
        T.EQUAL,
        T.LESS,
        T.GREATER,
        T.EOF,
    ]


def test_keywords_and_identifiers():
    tokens, _, _ = _scan("class fun def lambda const import as and or break continue foo _bar9")
    assert [t.type for t in tokens] == [
        T.CLASS,
        T.FUN,
        T.DEF,
        T.LAMBDA,
        T.CONST,
        T.IMPORT,
        T.AS,
        T.AND,
        T.OR,
        T.BREAK,
        T.CONTINUE,
        T.IDENTIFIER,
        T.IDENTIFIER,
        T.EOF,
    ]
    assert tokens[-2].lexeme == "_bar9"


@pytest.mark.parametrize(
    "lexeme, canonical",
    [
        ("10", "10"),
        ("007", "7"),
        ("1.50", "1.5"),
        ("3.14159", "3.14159"),
        ("0.1", "0.1"),
        ("123456.0", "123456"),
    ],
)
def test_number_literal_round_trip(lexeme, canonical):
    tokens, info, _ = _scan(lexeme)
    assert not info.had_error
    assert tokens[0].type is T.NUMBER
    assert tokens[0].lexeme == lexeme
    assert isinstance(tokens[0].literal, float)
    assert stringify(tokens[0].literal) == canonical


def test_number_without_fraction_digits_leaves_the_dot():
    assert _kinds("1.") == [T.NUMBER, T.DOT, T.EOF]
    assert _kinds("1.e") == [T.NUMBER, T.DOT, T.IDENTIFIER, T.EOF]


def test_string_escapes_are_decoded():
    tokens, info, _ = _scan(r'"a\nb\tc\\d\"e\'f"')
    assert not info.had_error
    assert tokens[0].type is T.STRING
    assert tokens[0].literal == "a\nb\tc\\d\"e'f"


def test_escaped_backslash_before_closing_quote_ends_the_string():
    tokens, info, _ = _scan(r'"dir\\" x')
    assert not info.had_error
    assert tokens[0].literal == "dir\\"
    assert [t.type for t in tokens] == [T.STRING, T.IDENTIFIER, T.EOF]


def test_escaped_quote_does_not_end_the_string():
    tokens, _, _ = _scan(r'"say \"hi\""')
    assert tokens[0].literal == 'say "hi"'
    assert len(tokens) == 2


def test_invalid_escape_is_reported_and_scanning_continues():
    tokens, info, err = _scan(r'"a\qb" 1')
    assert info.had_error
    assert err == "[line 1] Error: Invalid escape sequence: '\\q'.\n"
    assert [t.type for t in tokens] == [T.STRING, T.NUMBER, T.EOF]
    assert tokens[0].literal == "ab"


def test_unterminated_string():
    tokens, info, err = _scan('print "abc')
    assert info.had_error
    assert err == "[line 1] Error: Unterminated string.\n"
    assert [t.type for t in tokens] == [T.PRINT, T.EOF]


def test_unexpected_character_does_not_abort():
    tokens, info, err = _scan("1 @ 2 # 3")
    assert info.had_error
    assert err.splitlines() == [
        "[line 1] Error: Unexpected character '@'.",
        "[line 1] Error: Unexpected character '#'.",
    ]
    assert [t.type for t in tokens] == [T.NUMBER, T.NUMBER, T.NUMBER, T.EOF]


def test_comments_whitespace_and_line_numbers():
    tokens, _, _ = _scan("// heading\nvar x;\t\r\n\nx // trailing")
    assert [(t.type, t.line) for t in tokens] == [
        (T.VAR, 2),
        (T.IDENTIFIER, 2),
        (T.SEMICOLON, 2),
        (T.IDENTIFIER, 4),
        (T.EOF, 4),
    ]


def test_multiline_string_advances_line_counter():
    tokens, _, _ = _scan('"one\ntwo" after')
    assert tokens[0].literal == "one\ntwo"
    assert tokens[1].line == 2


def test_always_ends_with_single_eof():
    tokens, _, _ = _scan("")
    assert [t.type for t in tokens] == [T.EOF]
    assert tokens[0].line == 1
