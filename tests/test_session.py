import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from hydrogen.lang.error import ErrorHandler, HydrogenError, LexError, LexErrorKind
from hydrogen.lang.evaluator import Number, String
from hydrogen.lang.session import Session
from hydrogen.lang.shell import Shell
from hydrogen.main import main


def write_source(source):
    file = tempfile.NamedTemporaryFile("w", suffix=".hy", delete=False, encoding="utf-8")
    with file:
        file.write(source)
    return file.name


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.error_handler = ErrorHandler(fatal=False, color=False, stream=self.out)

    def test_diagnose(self):
        with self.error_handler:
            self.error_handler.register_source("prog.hy", "a = 1\nb = 2 @\n", 1)
            raise LexError(LexErrorKind.UNRECOGNIZED_CHARACTER, "@", 12)

        self.assertEqual("prog.hy:2:7: error: unrecognized character '@'\n"
                         "  b = 2 @\n"
                         "        ^\n", self.out.getvalue())

    def test_span(self):
        with self.error_handler:
            self.error_handler.register_source("<in>", "x = 1.2.3", 4)
            raise LexError(LexErrorKind.MALFORMED_NUMBER, "1.2.3", 4)

        self.assertEqual("<in>:4:5: error: malformed number '1.2.3'\n"
                         "  x = 1.2.3\n"
                         "      ^~~~~\n", self.out.getvalue())

    def test_unlocated(self):
        with self.error_handler:
            raise HydrogenError("'missing.hy' could not be opened", diagnosis=False)
        self.assertEqual("error: 'missing.hy' could not be opened\n", self.out.getvalue())

    def test_internal(self):
        with self.error_handler:
            raise ValueError("boom")
        self.assertEqual("[internal] error: unknown error: 'ValueError: boom'\n", self.out.getvalue())

    def test_internal_fatal(self):
        error_handler = ErrorHandler(color=False, stream=self.out)
        with self.assertRaises(SystemExit) as context:
            with error_handler:
                raise ValueError("boom")
        self.assertEqual(1, context.exception.code)
        self.assertEqual("[internal] error: unknown error: 'ValueError: boom'\n", self.out.getvalue())

    def test_fatal(self):
        error_handler = ErrorHandler(color=False, stream=self.out)
        with self.assertRaises(SystemExit) as context:
            with error_handler:
                raise HydrogenError("bad")
        self.assertEqual(1, context.exception.code)
        self.assertEqual("error: bad\n", self.out.getvalue())


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.error_handler = ErrorHandler(fatal=False, color=False, stream=self.out)
        self.sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)

    def test_add_run(self):
        self.sess.add("x = 5")
        self.sess.run()
        self.sess.add("x")
        self.sess.add("s = \"hi\"; s")
        self.sess.run()

        self.assertEqual(Number(5), self.sess.pop())
        self.assertEqual(String("hi"), self.sess.pop())
        self.assertEqual([], self.sess.results)
        self.assertEqual({"x": Number(5), "s": String("hi")}, self.sess.env)

    def test_errors_report_line(self):
        with self.error_handler:
            self.sess.add("x = 1")
            self.sess.run()
            self.sess.add("x = @")

        with self.error_handler:
            self.sess.add("y")
            self.sess.run()

        self.assertEqual("<in>:2:5: error: unrecognized character '@'\n"
                         "  x = @\n"
                         "      ^\n"
                         "<in>:3:1: error: undefined variable 'y'\n"
                         "  y\n"
                         "  ^\n", self.out.getvalue())
        self.assertEqual({"x": Number(1)}, self.sess.env)

    def test_incomplete(self):
        cases = {"x = \"abc": True, "\"a\\": True, "x = \"abc\"": False, "x = @": False, "": False}
        for case, expected in cases.items():
            self.assertEqual(expected, Session.incomplete(case), case)

    def test_reset(self):
        self.sess.add("x = 5\nx")
        self.sess.run()
        self.sess.reset()
        self.assertEqual({}, self.sess.env)
        self.assertEqual([], self.sess.results)

    def test_file(self):
        path = write_source("a = 1\nb = c\nd = 2\n")
        self.addCleanup(os.remove, path)

        with self.error_handler:
            sess = Session(self.error_handler, path, cmd_line=False)
            sess.run()

        self.assertEqual(f"{path}:2:5: error: undefined variable 'c'\n"
                         "  b = c\n"
                         "      ^\n", self.out.getvalue())
        self.assertEqual({"a": Number(1)}, sess.env)

    def test_missing_file(self):
        self.assertRaises(HydrogenError, Session, self.error_handler, os.path.join(tempfile.gettempdir(), "no", "x.hy"),
                          cmd_line=False)
        self.assertRaises(HydrogenError, Session, self.error_handler, Session.SH_FILE, cmd_line=False)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.errors = io.StringIO()
        error_handler = ErrorHandler(color=False, stream=self.errors)
        self.shell = Shell(Session(error_handler, Session.SH_FILE, cmd_line=True), stdout=self.out)

    def test_default(self):
        for line in ["x = 5", "x", "\"text\"", "true"]:
            self.shell.onecmd(line)
        self.assertEqual("5\n\"text\"\ntrue\n", self.out.getvalue())

    def test_continuation(self):
        self.shell.onecmd("s = \"first")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.shell.onecmd("")
        self.shell.onecmd("last\"")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

        self.shell.onecmd("s")
        self.assertEqual("\"first\\n\\nlast\"\n", self.out.getvalue())

    def test_backslash_continuation(self):
        self.shell.onecmd("s = \"abc\\")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.shell.onecmd("def\"")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

        self.shell.onecmd("s")
        self.assertEqual("\"abcdef\"\n", self.out.getvalue())
        self.assertEqual("", self.errors.getvalue())

    def test_internal_error_keeps_running(self):
        with mock.patch.object(self.shell.sess, "run", side_effect=ValueError("boom")):
            self.assertFalse(self.shell.onecmd("x = 1"))
        self.assertIn("[internal] error: unknown error: 'ValueError: boom'", self.errors.getvalue())

        self.shell.onecmd("x = 2")
        self.shell.onecmd("x")
        self.assertEqual("2\n", self.out.getvalue())

    def test_error_keeps_running(self):
        self.assertFalse(self.shell.onecmd("y"))
        self.shell.onecmd("y = 1")
        self.shell.onecmd("y")
        self.assertEqual("1\n", self.out.getvalue())
        self.assertIn("error: undefined variable 'y'", self.errors.getvalue())

    def test_commands(self):
        self.shell.onecmd("x = 5")
        self.shell.onecmd("b = false")
        self.shell.onecmd("env")
        self.shell.onecmd("tree x = \"hi\"")
        self.assertEqual("x = 5\nb = false\n"
                         "Program([\n"
                         "    Assignment(name='x',\n"
                         "        StringLiteral(\"hi\")),\n"
                         "])\n", self.out.getvalue())

        self.shell.onecmd("reset")
        self.assertEqual({}, self.shell.sess.env)
        self.assertTrue(self.shell.onecmd("exit"))


class MainTestCase(unittest.TestCase):

    def run_main(self, *args):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            main(["--no-color", *args])
        return out.getvalue()

    def test_run_file(self):
        path = write_source("x = 5\nx\n\"hi\"\nx = 2.50\nx\n")
        self.addCleanup(os.remove, path)
        self.assertEqual("5\n\"hi\"\n2.50\n", self.run_main(path))

    def test_tree(self):
        path = write_source("x = 1\nx")
        self.addCleanup(os.remove, path)
        self.assertEqual("Program([\n"
                         "    Assignment(name='x',\n"
                         "        NumberLiteral(1)),\n"
                         "    ExpressionStatement(\n"
                         "        Identifier(x)),\n"
                         "])\n"
                         "1\n", self.run_main("--tree", path))

    def test_error_exits(self):
        path = write_source("x = 1\nx\ny\n")
        self.addCleanup(os.remove, path)

        out = io.StringIO()
        with contextlib.redirect_stdout(out), self.assertRaises(SystemExit) as context:
            main(["--no-color", path])

        self.assertEqual(1, context.exception.code)
        self.assertEqual(f"1\n{path}:3:1: error: undefined variable 'y'\n  y\n  ^\n", out.getvalue())


if __name__ == '__main__':
    unittest.main()
