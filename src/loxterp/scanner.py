from __future__ import annotations

from typing import Any

from .module_info import ModuleInfo
from .tokens import KEYWORDS, Token, TokenType

_SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
    "%": TokenType.PERCENT,
}

# first char -> (kind when followed by '=', kind otherwise)
_EQUAL_SUFFIX_TOKENS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "'": "'",
    '"': '"',
    "\\": "\\",
}


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Scanner:
    """
    Turns source text into a flat token list terminated by a single EOF token.

    Lexical errors are reported through `module_info` and scanning carries on,
    so one pass can surface several independent problems.
    """

    def __init__(self, source: str, module_info: ModuleInfo):
        self.source = source
        self.module_info = module_info
        self.tokens: list[Token] = []

        self._start = 0
        self._current = 0
        self.line = 1

    def scan_tokens(self) -> list[Token]:
        while not self._at_end():
            self._start = self._current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def _scan_token(self) -> None:
        c = self._advance()

        kind = _SINGLE_CHAR_TOKENS.get(c)
        if kind is not None:
            self._add_token(kind)
            return

        pair = _EQUAL_SUFFIX_TOKENS.get(c)
        if pair is not None:
            self._add_token(pair[0] if self._match("=") else pair[1])
            return

        if c == "/":
            if self._match("/"):
                # A comment goes until the end of the line.
                while self._peek() != "\n" and not self._at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
        elif c in (" ", "\r", "\t"):
            pass
        elif c == "\n":
            self.line += 1
        elif c == '"':
            self._string()
        elif _is_digit(c):
            self._number()
        elif _is_alpha(c):
            self._identifier()
        else:
            self.module_info.error(self.line, f"Unexpected character '{c}'.")

    def _identifier(self) -> None:
        while _is_alnum(self._peek()):
            self._advance()

        text = self.source[self._start : self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()

        # Look for a fractional part.
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self._start : self._current]))

    def _string(self) -> None:
        chars: list[str] = []
        # Number of consecutive backslashes immediately before the current char.
        backslashes = 0
        while not self._at_end():
            c = self._peek()
            if c == '"' and backslashes % 2 == 0:
                break
            if c == "\n":
                self.line += 1
            self._advance()

            if backslashes % 2 == 1:
                decoded = ESCAPES.get(c)
                if decoded is None:
                    self.module_info.error(self.line, f"Invalid escape sequence: '\\{c}'.")
                else:
                    chars.append(decoded)
                backslashes = 0
            elif c == "\\":
                backslashes += 1
            else:
                chars.append(c)
                backslashes = 0

        if self._at_end():
            self.module_info.error(self.line, "Unterminated string.")
            return

        # The closing quote.
        self._advance()
        self._add_token(TokenType.STRING, "".join(chars))

    def _match(self, expected: str) -> bool:
        if self._at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self._current]

    def _peek_next(self) -> str:
        if self._current + 1 >= len(self.source):
            return "\0"
        return self.source[self._current + 1]

    def _at_end(self) -> bool:
        return self._current >= len(self.source)

    def _advance(self) -> str:
        c = self.source[self._current]
        self._current += 1
        return c

    def _add_token(self, kind: TokenType, literal: Any = None) -> None:
        text = self.source[self._start : self._current]
        self.tokens.append(Token(kind, text, literal, self.line))


def scan(source: str, module_info: ModuleInfo) -> list[Token]:
    return Scanner(source, module_info).scan_tokens()
