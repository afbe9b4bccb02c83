"""Abstract syntax tree for the Hydrogen language: the contract between the parser and the evaluator.

```
<program>    ::= (<statement> <end_stmt>)*
<statement>  ::= <identifier> "=" <expression>   ; Assignment (also covers first-time declaration)
               | <expression>                    ; ExpressionStatement
<expression> ::= <identifier> | <number> | <string> | <boolean>
```

All nodes are frozen: the evaluator never mutates the tree, only its environment. Expressions remember the offset of
their first character in the source (used for error messages), but that offset does not take part in equality.
"""

from dataclasses import dataclass, field

from hydrogen.lang.tokens import quote

INDENT = "    "


class Node:
    """Superclass of every AST node."""

    @property
    def _cls(self):
        return type(self).__name__

    def display(self, indents=0):
        """Recursively displays the node with readable format."""
        raise NotImplementedError

    def __str__(self):
        return self.display()


class Expression(Node):
    """Identifier, NumberLiteral, StringLiteral or BooleanLiteral."""

    def source(self):
        """Returns the expression as it would be written in source."""
        raise NotImplementedError

    def display(self, indents=0):
        return f"{INDENT * indents}{self._cls}({self.source()})"


@dataclass(frozen=True)
class Identifier(Expression):
    name: str
    start: int = field(default=-1, compare=False, repr=False)

    def source(self):
        return self.name


@dataclass(frozen=True)
class NumberLiteral(Expression):
    """value is the literal's source text (e.g. '3.14', '10'), which keeps integer vs. floating form intact."""
    value: str
    start: int = field(default=-1, compare=False, repr=False)

    def source(self):
        return self.value


@dataclass(frozen=True)
class StringLiteral(Expression):
    """value has its escape sequences resolved."""
    value: str
    start: int = field(default=-1, compare=False, repr=False)

    def source(self):
        return quote(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool
    start: int = field(default=-1, compare=False, repr=False)

    def source(self):
        return "true" if self.value else "false"


class Statement(Node):
    """VariableDeclaration, Assignment or ExpressionStatement."""


class Binding(Statement):
    """Any statement of the form <identifier> "=" <expression>. The evaluator treats every Binding the same way:
    evaluate the expression, then (re)bind the name.
    """

    @property
    def expr(self):
        raise NotImplementedError

    def display(self, indents=0):
        return f"{INDENT * indents}{self._cls}(name='{self.name}',\n{self.expr.display(indents + 1)})"


@dataclass(frozen=True)
class VariableDeclaration(Binding):
    name: str
    initializer: Expression

    @property
    def expr(self):
        return self.initializer


@dataclass(frozen=True)
class Assignment(Binding):
    name: str
    value: Expression

    @property
    def expr(self):
        return self.value


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expr: Expression

    def display(self, indents=0):
        return f"{INDENT * indents}{self._cls}(\n{self.expr.display(indents + 1)})"


class Program(tuple):
    """Ordered, immutable sequence of Statements: the parser's sole output."""

    def display(self, indents=0):
        """Format:
        Program([
            <Statement>(
                <Expression>(<source>)),
            ...
        ])
        """
        if not self:
            return f"{INDENT * indents}Program([])"

        result = f"{INDENT * indents}Program(["
        for statement in self:
            result += "\n" + statement.display(indents + 1) + ","
        return result + f"\n{INDENT * indents}])"

    def __repr__(self):
        return f"Program({list(self)!r})"

    def __str__(self):
        return self.display()
