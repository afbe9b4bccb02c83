"""Tree-walking evaluator for the Hydrogen language.

Values are what evaluation produces and are kept apart from the AST literals that parsing produces, even though their
shapes currently coincide. Value is a closed set: Number, String, Boolean.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from hydrogen.lang.ast import (Binding, BooleanLiteral, ExpressionStatement, Identifier, NumberLiteral,
                               StringLiteral)
from hydrogen.lang.error import EvalError, EvalErrorKind
from hydrogen.lang.tokens import quote

logger = logging.getLogger(__name__)


class Value:
    """Superclass of the runtime values. str(value) renders it the way it would be written in source."""


@dataclass(frozen=True, init=False)
class Number(Value):
    """Exact decimal compared by value. text is the literal it came from (e.g. '007', '0.0000001') and is what gets
    rendered, so a number always prints back exactly as written.
    """
    value: Decimal
    text: str = field(compare=False, repr=False)

    def __init__(self, value, text=None):
        value = value if isinstance(value, Decimal) else Decimal(str(value))
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "text", text if text is not None else format(value, "f"))

    def __str__(self):
        return self.text


@dataclass(frozen=True)
class String(Value):
    value: str

    def __str__(self):
        return quote(self.value)


@dataclass(frozen=True)
class Boolean(Value):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


class Environment(dict):
    """Mapping of variable name: Value. Keys are unique and the last write wins; there is no nesting since the language
    has no blocks.
    """

    def bind(self, name, value):
        logger.debug("bind %s = %s", name, value)
        self[name] = value

    def lookup(self, name, start=-1):
        try:
            return self[name]
        except KeyError:
            raise EvalError(EvalErrorKind.UNDEFINED_VARIABLE, name, start) from None

    def display(self):
        """One 'name = value' line per binding, in order of first binding."""
        return "\n".join(f"{name} = {value}" for name, value in self.items())


class Evaluator:
    """Executes statements in order against env. An EvalError aborts the remaining statements, while statements that
    already ran keep their effect on env.
    """

    def __init__(self, env=None):
        self.env = env if env is not None else Environment()

    def execute(self, statement):
        """Executes statement. Returns its Value for an ExpressionStatement, None for a Binding."""
        if isinstance(statement, Binding):
            self.env.bind(statement.name, self.evaluate(statement.expr))
            return None
        if isinstance(statement, ExpressionStatement):
            return self.evaluate(statement.expr)
        raise TypeError(f"not a statement: {statement!r}")

    def evaluate(self, expr):
        """Evaluates a single expression to a Value."""
        if isinstance(expr, Identifier):
            return self.env.lookup(expr.name, expr.start)
        if isinstance(expr, NumberLiteral):
            return Number(Decimal(expr.value), expr.value)
        if isinstance(expr, StringLiteral):
            return String(expr.value)
        if isinstance(expr, BooleanLiteral):
            return Boolean(expr.value)
        raise TypeError(f"not an expression: {expr!r}")

    def run(self, program):
        results = []
        for statement in program:
            value = self.execute(statement)
            if isinstance(statement, ExpressionStatement):
                results.append(value)
        return results


def evaluate(program, env):
    """Runs program against env (fresh or continued), mutating env, and returns the Values of its expression
    statements in order.
    """
    return Evaluator(env).run(program)
