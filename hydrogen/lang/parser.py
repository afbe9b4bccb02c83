"""Recursive-descent parser for the Hydrogen language, with one token of lookahead.

`<identifier> "=" <expression>` is syntactically identical whether it introduces a name or rebinds it, so the parser
always produces an Assignment for it and leaves declare vs. update to the evaluator.
"""

import logging

from hydrogen.lang.ast import (Assignment, BooleanLiteral, ExpressionStatement, Identifier, NumberLiteral, Program,
                               StringLiteral)
from hydrogen.lang.error import ParseError
from hydrogen.lang.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class TokenStream:
    """One-token lookahead buffer over any iterable of Tokens. If the iterable ends without an end-of-input token, one
    is synthesized right after the last token seen. Reads past the end keep returning end-of-input.
    """

    def __init__(self, tokens):
        self._tokens = iter(tokens)
        self._current = None
        self._last_end = 0

    def peek(self):
        if self._current is None:
            self._current = next(self._tokens, None)
            if self._current is None:
                self._current = Token(TokenKind.END_OF_INPUT, "", None, self._last_end, self._last_end)
            self._last_end = self._current.end
        return self._current

    def advance(self):
        token = self.peek()
        if token.kind is not TokenKind.END_OF_INPUT:
            self._current = None
        return token

    def at(self, *kinds):
        return self.peek().kind in kinds


class Parser:
    """Builds a Program from a token stream. The first error aborts parsing entirely."""
    EXPRESSIONS = {
        TokenKind.NUMBER: NumberLiteral,
        TokenKind.STRING: StringLiteral,
        TokenKind.BOOLEAN: BooleanLiteral,
        TokenKind.IDENTIFIER: Identifier,
    }

    def __init__(self, tokens):
        self.stream = TokenStream(tokens)

    def parse_program(self):
        statements = []
        while True:
            if self.stream.at(TokenKind.END_OF_STATEMENT):
                self.stream.advance()  # blank statement
                continue
            if self.stream.at(TokenKind.END_OF_INPUT):
                break

            statement = self.parse_statement()
            logger.debug("parsed %r", statement)
            statements.append(statement)

            if not self.stream.at(TokenKind.END_OF_STATEMENT, TokenKind.END_OF_INPUT):
                raise ParseError("end of statement", self.stream.peek())

        return Program(statements)

    def parse_statement(self):
        if not self.stream.at(TokenKind.IDENTIFIER):
            return ExpressionStatement(self.parse_expression())

        name = self.stream.advance()
        if self.stream.at(TokenKind.EQUALS):
            self.stream.advance()
            return Assignment(name.value, self.parse_expression())
        return ExpressionStatement(Identifier(name.value, name.start))

    def parse_expression(self):
        token = self.stream.peek()
        node = Parser.EXPRESSIONS.get(token.kind)
        if node is None:
            raise ParseError("expression", token)

        self.stream.advance()
        return node(token.value, token.start)


def parse(tokens):
    """Parses an iterable of Tokens into a Program. Raises ParseError on the first unexpected token (and lets a
    LexError from a lazy token stream propagate).
    """
    return Parser(tokens).parse_program()
