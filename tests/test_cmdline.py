import io
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr
from pathlib import Path
from unittest import mock

from lox import cmdline

def _session(*argv):
	return cmdline.Session(cmdline.parser.parse_args(list(argv)))

class SessionTests(unittest.TestCase):

	def run_text(self, session, text):
		out, err = io.StringIO(), io.StringIO()
		with redirect_stdout(out), redirect_stderr(err):
			status = session.run_text(text)
		return status, out.getvalue(), err.getvalue()

	def test_good_program(self):
		status, out, err = self.run_text(_session(), "print 1 + 2;")
		self.assertEqual(0, status)
		self.assertEqual("3\n", out)
		self.assertEqual("", err)

	def test_static_error_blocks_the_run(self):
		status, out, err = self.run_text(_session(), 'print "side effect";\nvar a = a;')
		self.assertEqual(cmdline.EXIT_STATIC, status)
		self.assertEqual("", out)
		self.assertIn("[line 2] Error at 'a': Can't read local variable in its own initializer.", err)

	def test_runtime_error(self):
		status, out, err = self.run_text(_session(), 'print "before";\nprint -"x";')
		self.assertEqual(cmdline.EXIT_RUNTIME, status)
		self.assertEqual("before\n", out)
		self.assertIn("Operand must be a number.\n[line 2]", err)

	def test_check_only(self):
		status, out, err = self.run_text(_session("-c"), 'print "not printed";')
		self.assertEqual(0, status)
		self.assertEqual("", out)

	def test_print_ast(self):
		status, out, err = self.run_text(_session("-p"), "print 1 + 2;")
		self.assertEqual(0, status)
		self.assertEqual("(print (+ 1 2))\n", out)

	def test_globals_survive_between_units(self):
		session = _session()
		self.run_text(session, "var x = 1; fun bump() { x = x + 1; }")
		self.run_text(session, "bump();")
		session.report.reset()
		status, out, err = self.run_text(session, "print x;")
		self.assertEqual("2\n", out)

	def test_prompt_loop_keeps_going_after_errors(self):
		session = _session()
		lines = iter(["var x = 10;", "print x +;", "print nil + 1;", "print x;"])
		def fake_input(prompt):
			try: return next(lines)
			except StopIteration: raise EOFError
		out, err = io.StringIO(), io.StringIO()
		with mock.patch("builtins.input", fake_input), redirect_stdout(out), redirect_stderr(err):
			status = session.prompt()
		self.assertEqual(0, status)
		self.assertEqual("10\n\n", out.getvalue())
		self.assertIn("Expect expression.", err.getvalue())
		self.assertIn("Operands must be two numbers or two strings.", err.getvalue())

	def test_run_file(self):
		with tempfile.TemporaryDirectory() as folder:
			path = Path(folder) / "hello.lox"
			path.write_text('print "hello from a file";', encoding="utf-8")
			out = io.StringIO()
			with redirect_stdout(out):
				status = cmdline.run(cmdline.parser.parse_args([str(path)]))
		self.assertEqual(0, status)
		self.assertEqual("hello from a file\n", out.getvalue())

	def test_deep_recursion_from_the_command_line(self):
		text = "fun f(n) { if (n > 0) return f(n - 1) + 1; return 0; }\nprint f(3000);"
		with tempfile.TemporaryDirectory() as folder:
			path = Path(folder) / "deep.lox"
			path.write_text(text, encoding="utf-8")
			out = io.StringIO()
			with redirect_stdout(out):
				status = cmdline.run_with_deep_stack(cmdline.parser.parse_args([str(path)]))
		self.assertEqual(0, status)
		self.assertEqual("3000\n", out.getvalue())

	def test_runaway_recursion_from_the_command_line(self):
		err = io.StringIO()
		with tempfile.TemporaryDirectory() as folder:
			path = Path(folder) / "runaway.lox"
			path.write_text("fun f() { f(); }\nf();", encoding="utf-8")
			with redirect_stderr(err):
				status = cmdline.run_with_deep_stack(cmdline.parser.parse_args([str(path)]))
		self.assertEqual(cmdline.EXIT_RUNTIME, status)
		self.assertIn("Stack overflow.", err.getvalue())

	def test_missing_file(self):
		err = io.StringIO()
		with redirect_stderr(err):
			status = cmdline.run(cmdline.parser.parse_args(["/no/such/file.lox"]))
		self.assertEqual(cmdline.EXIT_USAGE, status)

if __name__ == '__main__':
	unittest.main()
