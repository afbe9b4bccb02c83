"""Hydrogen: a minimal interpreter for a toy language of bindings and literal/identifier expressions.

Pipeline: source text -> tokenize -> parse -> evaluate.
"""

from hydrogen.lang.error import EvalError, HydrogenError, LexError, ParseError
from hydrogen.lang.evaluator import Boolean, Environment, Number, String, evaluate
from hydrogen.lang.lexer import tokenize
from hydrogen.lang.parser import parse

__version__ = "0.1.0"

__all__ = ["tokenize", "parse", "evaluate", "Environment", "Number", "String", "Boolean", "HydrogenError",
           "LexError", "ParseError", "EvalError"]
