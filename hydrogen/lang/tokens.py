"""Token kinds and the Token data structure produced by the lexer."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class TokenKind(Enum):
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()
    BOOLEAN = auto()
    EQUALS = auto()            # =
    END_OF_STATEMENT = auto()  # newline or ;
    END_OF_INPUT = auto()


DESCRIPTIONS = {
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.NUMBER: "number",
    TokenKind.STRING: "string",
    TokenKind.BOOLEAN: "boolean",
    TokenKind.EQUALS: "'='",
    TokenKind.END_OF_STATEMENT: "end of statement",
    TokenKind.END_OF_INPUT: "end of input",
}

KEYWORDS = {"true": True, "false": False}  # carved out of identifiers
TERMINATORS = ("\n", ";")
COMMENT = "#"
ESCAPES = {"\"": "\"", "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "0": "\0"}


@dataclass(frozen=True)
class Token:
    """A classified lexeme. text is the lexeme exactly as in source, value is its resolved payload (identifier name,
    number text, string with escapes resolved, bool), and source[start:end] == text.
    """
    kind: TokenKind
    text: str
    value: Any
    start: int
    end: int

    def describe(self):
        """Human readable form used in error messages."""
        if self.kind in (TokenKind.END_OF_STATEMENT, TokenKind.END_OF_INPUT, TokenKind.EQUALS):
            return DESCRIPTIONS[self.kind]
        return f"{DESCRIPTIONS[self.kind]} '{self.text}'"

    def __repr__(self):
        return f"Token({self.kind.name}, {self.text!r}, {self.start}:{self.end})"


UNESCAPES = {char: escape for escape, char in ESCAPES.items()}


def quote(text):
    """Inverse of string scanning: returns text as a double-quoted string literal with escapes re-applied."""
    return "\"" + "".join("\\" + UNESCAPES[char] if char in UNESCAPES else char for char in text) + "\""
