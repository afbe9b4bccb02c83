"""Handles interactive/command-line mode for the Hydrogen interpreter. Uses cmd as backend."""

import cmd

from hydrogen.lang.lexer import tokenize
from hydrogen.lang.parser import parse


class Shell(cmd.Cmd):
    """Hydrogen interpreter shell."""
    intro = "Hydrogen interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self._tmp_line = ""

    def _print(self, *args):
        print(*args, file=self.stdout)

    def default(self, line):
        """Executes arbitrary Hydrogen source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = self._tmp_line + line

            if self.sess.incomplete(line):
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(line)
                self.sess.run()
            finally:
                while self.sess.results:
                    self._print(self.sess.pop())

    def emptyline(self):
        """Do not repeat previous command on empty line, but keep empty lines inside an open string."""
        if self._tmp_line:
            return self.default("")
        return ""

    def do_env(self, arg):
        """Prints every variable bound in this session as 'name = value'."""
        if self.sess.env:
            self._print(self.sess.env.display())

    def do_tree(self, arg):
        """Prints the syntax tree of the given source without running it. Example: tree x = "hi" """
        with self.sess.error_handler:
            self.sess.error_handler.register_source(self.sess.path, arg)
            self._print(parse(tokenize(arg)).display())
            self.sess.error_handler.remove_source(self.sess.path)

    def do_reset(self, arg):
        """Forgets every variable bound in this session."""
        self.sess.reset()
        self._tmp_line = ""
        self.prompt = self._tmp_prompt

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return super().do_help(arg)

        self._print("Welcome to the Hydrogen interpreter!\n\n"
                    "Every line is a statement: either a binding such as 'x = 5' or an expression \n"
                    "such as 'x', '3.14', '\"text\"' or 'true'. Expressions are evaluated and their \n"
                    "value is printed. Bindings overwrite any previous value of the same name.\n\n"
                    "Shell commands: env (list bindings), tree SOURCE (show syntax tree), reset, \n"
                    "exit. Note that these names cannot start a statement in the shell.")

    def do_EOF(self, arg):
        """Exits interpreter."""
        self._print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
