"""Session control for the Hydrogen language. Runs the lexer, parser and evaluator over source coming from a file or
from the command line, keeping one environment alive across all of it.
"""

import logging

from hydrogen.lang.ast import ExpressionStatement
from hydrogen.lang.error import HydrogenError, LexError, LexErrorKind
from hydrogen.lang.evaluator import Environment, Evaluator
from hydrogen.lang.lexer import tokenize
from hydrogen.lang.parser import parse

logger = logging.getLogger(__name__)


class Session:
    """Governs a Hydrogen session, with control over its environment."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, show_tree=False):
        self.error_handler = error_handler

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.show_tree = show_tree  # whether or not to print each program's AST before running it

        self.env = Environment()
        self.to_exec = []   # list of (source, line num, Program) waiting to be run
        self.results = []   # Values produced by run, oldest first
        self.line_num = 0   # number of lines added so far

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise HydrogenError(f"'{path}' could not be opened", diagnosis=False)

            self.add(source)

        elif not cmd_line:
            raise HydrogenError("'<in>' is a reserved filename", diagnosis=False)

    @staticmethod
    def incomplete(source):
        """Whether or not source stops in the middle of a string literal, i.e. more input is needed to finish it."""
        try:
            for __ in tokenize(source):
                pass
        except LexError as error:
            return error.kind is LexErrorKind.UNTERMINATED_STRING
        return False

    def add(self, source):
        """Tokenizes and parses source, queueing the resulting Program. Evaluation is delayed until run is called."""
        line_num = self.line_num + 1
        self.line_num += source.count("\n") + (not source.endswith("\n"))

        self.error_handler.register_source(self.path, source, line_num)  # in case error is raised
        program = parse(tokenize(source))
        logger.debug("%s:%d: parsed %d statement(s)", self.path, line_num, len(program))

        if self.show_tree:
            print(program.display())

        self.to_exec.append((source, line_num, program))
        self.error_handler.remove_source(self.path)  # error was not raised
        return program

    def run(self):
        """Runs every queued Program against this session's environment. Will raise any errors that are encountered;
        statements that ran before the error keep their effect on the environment.
        """
        while self.to_exec:
            source, line_num, program = self.to_exec.pop(0)
            self.error_handler.register_source(self.path, source, line_num)

            evaluator = Evaluator(self.env)
            for statement in program:
                value = evaluator.execute(statement)
                if isinstance(statement, ExpressionStatement):
                    self.results.append(value)

            self.error_handler.remove_source(self.path)

        return self.results

    def pop(self):
        """Removes and returns the oldest result."""
        return self.results.pop(0)

    def reset(self):
        """Discards the environment, pending programs and results."""
        self.env = Environment()
        self.to_exec = []
        self.results = []
