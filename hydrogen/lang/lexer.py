"""Lexical analysis for the Hydrogen language. The lexer is pull-based: tokens are scanned one at a time as they are
requested, so memory stays proportional to the parser's lookahead rather than to the size of the source.

Lexical grammar:

```
<identifier> ::= (<letter> | "_") (<letter> | <digit> | "_")*   ; "true" and "false" are booleans instead
<number>     ::= <digit>+ ("." <digit>+)?                        ; ASCII digits only
<string>     ::= '"' (<char> | <escape>)* '"'                    ; may span lines
<escape>     ::= "\" ('"' | "\" | "n" | "t" | "r" | "0" | newline)  ; "\" newline continues the line
<equals>     ::= "="
<end_stmt>   ::= newline | ";"
<comment>    ::= "#" <char>*                                     ; up to (not including) the newline
```
"""

import logging

from hydrogen.lang.error import LexError, LexErrorKind
from hydrogen.lang.tokens import COMMENT, ESCAPES, KEYWORDS, TERMINATORS, Token, TokenKind

logger = logging.getLogger(__name__)

DIGITS = "0123456789"


def is_identifier_start(char):
    return char.isalpha() or char == "_"


def is_identifier_char(char):
    return char.isalnum() or char == "_"


class Lexer:
    """Scans source from left to right, producing one Token per call to next_token. Once the end of the input has been
    reached, every further call returns an end-of-input token again. A LexError is terminal: the same error is raised
    on every later call.
    """

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.error = None

    def peek(self, offset=0):
        """Returns character offset positions ahead, or "" past the end of the source."""
        idx = self.pos + offset
        return self.source[idx] if idx < len(self.source) else ""

    def skip_ignored(self):
        """Skips whitespace (other than newlines) and comments."""
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == COMMENT:
                end = self.source.find("\n", self.pos)
                self.pos = end if end != -1 else len(self.source)
            elif char.isspace() and char not in TERMINATORS:
                self.pos += 1
            else:
                break

    def next_token(self):
        if self.error is not None:
            raise self.error

        try:
            token = self._scan()
        except LexError as error:
            self.error = error
            raise

        logger.debug("scanned %r", token)
        return token

    def _scan(self):
        self.skip_ignored()

        start = self.pos
        char = self.peek()

        if not char:
            return Token(TokenKind.END_OF_INPUT, "", None, start, start)

        if char in TERMINATORS:
            self.pos += 1
            return Token(TokenKind.END_OF_STATEMENT, char, None, start, self.pos)

        if char == "=":
            self.pos += 1
            return Token(TokenKind.EQUALS, char, None, start, self.pos)

        if char == "\"":
            return self.scan_string()

        if char in DIGITS:
            return self.scan_number()

        if is_identifier_start(char):
            return self.scan_identifier()

        raise LexError(LexErrorKind.UNRECOGNIZED_CHARACTER, char, start)

    def scan_identifier(self):
        start = self.pos
        while self.peek() and is_identifier_char(self.peek()):
            self.pos += 1

        text = self.source[start:self.pos]
        if text in KEYWORDS:
            return Token(TokenKind.BOOLEAN, text, KEYWORDS[text], start, self.pos)
        return Token(TokenKind.IDENTIFIER, text, text, start, self.pos)

    def scan_number(self):
        """Scans <digit>+ ("." <digit>+)?. The token's value is the source text itself, so that the exact integer or
        floating form survives until evaluation.
        """
        start = self.pos
        self._skip_digits()

        if self.peek() == ".":
            self.pos += 1
            if not self.peek() or self.peek() not in DIGITS:
                self._malformed_number(start)  # trailing point
            self._skip_digits()

        if self.peek() == "." or (self.peek() and is_identifier_char(self.peek())):
            self._malformed_number(start)

        text = self.source[start:self.pos]
        return Token(TokenKind.NUMBER, text, text, start, self.pos)

    def _skip_digits(self):
        while self.peek() and self.peek() in DIGITS:
            self.pos += 1

    def _malformed_number(self, start):
        """Consumes the rest of the number-like run and raises a LexError naming all of it."""
        while self.peek() and (self.peek() == "." or is_identifier_char(self.peek())):
            self.pos += 1
        raise LexError(LexErrorKind.MALFORMED_NUMBER, self.source[start:self.pos], start)

    def scan_string(self):
        start = self.pos
        self.pos += 1  # opening quote
        chars = []

        while True:
            char = self.peek()
            if not char:
                raise LexError(LexErrorKind.UNTERMINATED_STRING, self.source[start:], start)

            if char == "\"":
                self.pos += 1
                break

            if char == "\\":
                escape = self.peek(1)
                if not escape:
                    raise LexError(LexErrorKind.UNTERMINATED_STRING, self.source[start:], start)
                if escape == "\n":
                    self.pos += 2  # line continuation
                    continue
                if escape not in ESCAPES:
                    raise LexError(LexErrorKind.INVALID_ESCAPE, "\\" + escape, self.pos)
                chars.append(ESCAPES[escape])
                self.pos += 2
            else:
                chars.append(char)
                self.pos += 1

        return Token(TokenKind.STRING, self.source[start:self.pos], "".join(chars), start, self.pos)

    def __iter__(self):
        """Yields tokens up to and including the first end-of-input token."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.END_OF_INPUT:
                return


def tokenize(source):
    """Returns a lazy iterator over the tokens of source. LexErrors are raised when the offending token is reached."""
    return iter(Lexer(source))
