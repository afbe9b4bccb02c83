"""Error handling for the Hydrogen language. Only HydrogenErrors should be encountered during running: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Each stage of the pipeline has exactly one error class:
    - LexError: unrecognized character, unterminated string, malformed number, invalid escape
    - ParseError: unexpected token given an expected grammar production
    - EvalError: undefined variable
"""

import logging
import sys
from enum import Enum

from termcolor import colored

logger = logging.getLogger(__name__)


class HydrogenError(Exception):
    """Base of all Hydrogen errors. start and end are offsets into the source text that produced the error, used to
    point at the offending span when the error is displayed.
    """

    def __init__(self, msg, start=0, end=-1, diagnosis=True, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.start = start
        self.end = end if end != -1 else start + 1

        self.diagnosis = diagnosis
        self.internal = internal

    def __str__(self):
        return self.msg


class LexErrorKind(Enum):
    UNRECOGNIZED_CHARACTER = "unrecognized character"
    UNTERMINATED_STRING = "unterminated string"
    MALFORMED_NUMBER = "malformed number"
    INVALID_ESCAPE = "invalid escape sequence"


class LexError(HydrogenError):
    """Scanning failed at text, which spans source[start:end]."""

    def __init__(self, kind, text, start, end=-1):
        super().__init__(f"{kind.value} '{text}'", start, end if end != -1 else start + len(text))
        self.kind = kind
        self.text = text

    @property
    def character(self):
        """Offending character (first character of the offending span)."""
        return self.text[:1]

    @property
    def offset(self):
        return self.start


class ParseError(HydrogenError):
    """token was found where the production named by expected was required."""

    def __init__(self, expected, token):
        super().__init__(f"expected {expected}, got {token.describe()}", token.start, max(token.end, token.start + 1))
        self.expected = expected
        self.token = token


class EvalErrorKind(Enum):
    UNDEFINED_VARIABLE = "undefined variable"


class EvalError(HydrogenError):
    """Evaluation failed on name. UndefinedVariable is the only kind in the core language."""

    def __init__(self, kind, name, start=-1):
        super().__init__(f"{kind.value} '{name}'", max(start, 0), max(start, 0) + len(name), diagnosis=start >= 0)
        self.kind = kind
        self.name = name


class ErrorHandler:
    """Context manager that reports Hydrogen errors, and any other Python error as an internal one. When fatal, the
    process exits after the report; otherwise the error is suppressed and control returns to the caller.
    """
    ERROR = "red"

    def __init__(self, fatal=True, color=True, stream=None):
        self.fatal = fatal
        self.color = color
        self.stream = stream
        self.sources = {}  # dict of path: (source, first line number)
        self.path = None   # path of the source currently being processed

    def register_source(self, path, source, line_num=1):
        """Registers source (a whole file or a single shell line) as the origin of any error raised until the next
        registration. line_num is the line number of the first line of source.
        """
        self.sources[path] = (source, line_num)
        self.path = path

    def remove_source(self, path):
        """Forgets path. Should be called after source from path was processed without errors."""
        self.sources.pop(path, None)
        if self.path == path:
            self.path = None

    def _colored(self, text, color=None, attrs=None):
        return colored(text, color, attrs=attrs, no_color=not self.color)

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stdout)

    def locate(self, error):
        """Returns (line text, line number, column) of error.start within the registered source."""
        source, first_line = self.sources[self.path]
        start = min(error.start, len(source))

        line_start = source.rfind("\n", 0, start) + 1
        line_end = source.find("\n", start)
        if line_end == -1:
            line_end = len(source)

        return source[line_start:line_end], first_line + source.count("\n", 0, start), start - line_start

    def diagnose(self, error):
        """Returns offending line of the source with error's span highlighted and underlined."""
        color = ErrorHandler.ERROR
        line, __, col = self.locate(error)

        end = min(col + max(error.end - error.start, 1), max(len(line), col + 1))

        diagnosis = "  " + line[:col]
        diagnosis += self._colored(line[col:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * col
        diagnosis += self._colored("^" + "~" * (end - col - 1), color, attrs=["bold"])

        return diagnosis

    def format(self, error):
        """Returns the full report for error: location header, message and (if possible) diagnosis."""
        msg = ""

        located = self.path in self.sources and not error.internal
        if located:
            __, line_num, col = self.locate(error)
            msg += self._colored(f"{self.path}:{line_num}:{col + 1}: ", attrs=["bold"])

        if error.internal:
            msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        msg += self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg

        if located and error.diagnosis:
            msg += "\n" + self.diagnose(error)

        return msg

    def throw(self, error):
        """Prints error, which must be a HydrogenError. Exits if this handler is fatal."""
        logger.debug("throwing %r", error)
        self._print(self.format(error))

        if self.fatal:
            sys.exit(1)
        self.sources = {}  # if error occurred, reset sources (no need if error is fatal)
        self.path = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(HydrogenError("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, HydrogenError):
            self.throw(exc_val)
        elif exc_type is not None:
            logger.debug("internal error", exc_info=(exc_type, exc_val, exc_tb))
            self.throw(HydrogenError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = self.fatal

        return not do_exit
