"""Lexer for group expressions."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from .exceptions import ExpressionSyntaxError


class TokenType(Enum):
    """Types of tokens in group expressions."""

    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    NULL = auto()
    IDENTIFIER = auto()

    # Comparison operators
    EQ = auto()  # ==
    NEQ = auto()  # !=
    LT = auto()  # <
    GT = auto()  # >
    LTE = auto()  # <=
    GTE = auto()  # >=

    # Logical operators
    AND = auto()
    OR = auto()
    NOT = auto()
    IN = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()

    EOF = auto()


KEYWORDS = {
    "true": (TokenType.BOOLEAN, True),
    "false": (TokenType.BOOLEAN, False),
    "null": (TokenType.NULL, None),
    "and": (TokenType.AND, "and"),
    "or": (TokenType.OR, "or"),
    "not": (TokenType.NOT, "not"),
    "in": (TokenType.IN, "in"),
}

# str.isdigit() also accepts characters such as "²" that int() rejects
DIGITS = frozenset("0123456789")

ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", "'": "'", '"': '"'}


@dataclass
class Token:
    """A single token in the expression."""

    type: TokenType
    value: str | int | float | bool | None
    position: int


class Lexer:
    """Tokenizes expression strings."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.current_char = self.text[0] if self.text else None

    def error(self, message: str) -> None:
        """Raise a syntax error at the current position."""
        raise ExpressionSyntaxError(message, self.pos)

    def advance(self) -> None:
        """Move one character forward."""
        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek(self) -> str | None:
        """Look at the next character without moving."""
        peek_pos = self.pos + 1
        return self.text[peek_pos] if peek_pos < len(self.text) else None

    def skip_whitespace(self) -> None:
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def _number(self) -> Token:
        """Parse integer or float, with an optional leading minus."""
        start_pos = self.pos
        result = ""
        if self.current_char == "-":
            result += "-"
            self.advance()

        while self.current_char in DIGITS:
            result += self.current_char
            self.advance()

        if self.current_char == "." and self.peek() in DIGITS:
            result += "."
            self.advance()
            while self.current_char in DIGITS:
                result += self.current_char
                self.advance()
            return Token(TokenType.FLOAT, float(result), start_pos)

        return Token(TokenType.INTEGER, int(result), start_pos)

    def _string(self) -> Token:
        """Parse a quoted string, honouring backslash escapes."""
        start_pos = self.pos
        quote_char = self.current_char
        self.advance()

        result = ""
        while self.current_char is not None and self.current_char != quote_char:
            if self.current_char == "\\":
                self.advance()
                if self.current_char is None:
                    break
                result += ESCAPES.get(self.current_char, self.current_char)
            else:
                result += self.current_char
            self.advance()

        if self.current_char is None:
            raise ExpressionSyntaxError("Unterminated string literal", start_pos)

        self.advance()
        return Token(TokenType.STRING, result, start_pos)

    def _identifier(self) -> Token:
        """Parse identifier or keyword."""
        start_pos = self.pos
        result = ""
        # Dots separate nested attribute names (system_info.network.hostname)
        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char in "_."
        ):
            result += self.current_char
            self.advance()

        if result.endswith(".") or ".." in result:
            raise ExpressionSyntaxError(f"Invalid attribute reference '{result}'", start_pos)

        if result in KEYWORDS:
            token_type, value = KEYWORDS[result]
            return Token(token_type, value, start_pos)

        return Token(TokenType.IDENTIFIER, result, start_pos)

    def get_next_token(self) -> Token:  # noqa: C901
        """Get the next token from input."""
        while self.current_char is not None:

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char in DIGITS or (
                self.current_char == "-" and self.peek() in DIGITS
            ):
                return self._number()

            if self.current_char in ("'", '"'):
                return self._string()

            if self.current_char.isalpha() or self.current_char == "_":
                return self._identifier()

            start_pos = self.pos

            if self.current_char == "=":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.EQ, "==", start_pos)
                self.error("Unexpected character '='. Did you mean '=='?")

            if self.current_char == "!":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.NEQ, "!=", start_pos)
                self.error("Unexpected character '!'. Did you mean '!='?")

            if self.current_char == "<":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.LTE, "<=", start_pos)
                self.advance()
                return Token(TokenType.LT, "<", start_pos)

            if self.current_char == ">":
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(TokenType.GTE, ">=", start_pos)
                self.advance()
                return Token(TokenType.GT, ">", start_pos)

            single = {
                "(": TokenType.LPAREN,
                ")": TokenType.RPAREN,
                "[": TokenType.LBRACKET,
                "]": TokenType.RBRACKET,
                ",": TokenType.COMMA,
            }
            if self.current_char in single:
                char = self.current_char
                self.advance()
                return Token(single[char], char, start_pos)

            self.error(f"Invalid character '{self.current_char}'")

        return Token(TokenType.EOF, None, self.pos)

    def tokenize(self) -> Iterator[Token]:
        """Generator that yields all tokens."""
        while True:
            token = self.get_next_token()
            yield token
            if token.type == TokenType.EOF:
                break
