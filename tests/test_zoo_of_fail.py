import io
import unittest
from unittest import mock

from lox.diagnostics import Report, TooManyIssues
from lox.resolution import RoadMap, Yuck
from lox.tokens import Token
from lox.tree_walker.executive import run_program

class Silence(Report):
	def __init__(self, max_issues=30):
		super().__init__(verbose=False, max_issues=max_issues)
		self.complain_to_console = mock.Mock()

def _identify_problem(text:str):
	report = Silence()
	out = io.StringIO()
	try:
		roadmap = RoadMap(text, report)
	except Yuck as ex:
		assert 0 == report.complain_to_console.call_count
		assert report.sick()
		return ex.args[0], report
	else:
		report.assert_no_issues("Resolved without raising, yet has issues.")
		run_program(roadmap, report, out=out)
		if report.crashed(): return "runtime", report
		else: return "failed to fail", report

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """

	def expect(self, phase, cases):
		for text, message in cases:
			with self.subTest(text):
				got, report = _identify_problem(text)
				self.assertEqual(phase, got)
				self.assertIn(message, [i.message for i in report.issues])

	def test_00_lexical_error(self):
		self.expect("parse", [
			('print "never closed;', "Unterminated string."),
			("print 1 @ 2;", "Unexpected character."),
		])

	def test_01_syntax_error(self):
		self.expect("parse", [
			("print 1 +;", "Expect expression."),
			("var = 1;", "Expect variable name."),
			("print 1", "Expect ';' after value."),
			("1 = 2;", "Invalid assignment target."),
			("a + b = c;", "Invalid assignment target."),
			("fun f( {}", "Expect parameter name."),
			("class { }", "Expect class name."),
			("class A < { }", "Expect superclass name."),
			("if x print 1;", "Expect '(' after 'if'."),
			("while (true print 1;", "Expect ')' after condition."),
			("for (var i = 0; i < 1) print i;", "Expect ';' after loop condition."),
			("{ print 1;", "Expect '}' after block."),
			("f(1, 2;", "Expect ')' after arguments."),
			("a.;", "Expect property name after '.'."),
			("super;", "Expect '.' after 'super'."),
		])

	def test_02_resolve(self):
		self.expect("resolve", [
			("var a = a;", "Can't read local variable in its own initializer."),
			("{ var a = a; }", "Can't read local variable in its own initializer."),
			("fun f() { var a = 1 + a; }", "Can't read local variable in its own initializer."),
			("{ var a = 1; var a = 2; }", "Already a variable with this name in this scope."),
			("fun f(a, a) {}", "Already a variable with this name in this scope."),
			("fun f(a) { var a; }", "Already a variable with this name in this scope."),
			("return 1;", "Can't return from top-level code."),
			("return;", "Can't return from top-level code."),
			("class C { init() { return 1; } }", "Can't return a value from an initializer."),
			("print this;", "Can't use 'this' outside of a class."),
			("fun f() { return this; }", "Can't use 'this' outside of a class."),
			("super.x();", "Can't use 'super' outside of a class."),
			("class C { m() { super.m(); } }", "Can't use 'super' in a class with no superclass."),
			("class C < C {}", "A class can't inherit from itself."),
		])

	def test_03_runtime(self):
		got, report = _identify_problem("print -nil;")
		self.assertEqual("runtime", got)
		self.assertEqual(("Operand must be a number.", 1), report.runtime_failure)

	def test_bare_return_in_initializer_is_fine(self):
		got, _ = _identify_problem("class C { init() { return; } }")
		self.assertEqual("failed to fail", got)

	def test_initializer_cannot_see_its_outer_namesake(self):
		got, _ = _identify_problem("var a = 1; { var a = a; }")
		self.assertEqual("resolve", got)
		got, _ = _identify_problem("var a = 1; { var b = a; var a = b; }")
		self.assertEqual("failed to fail", got)

	def test_global_initializer_cannot_read_the_old_binding(self):
		got, report = _identify_problem("var a = 1;\nvar a = a + 1;")
		self.assertEqual("resolve", got)
		self.assertEqual(2, report.issues[0].line)
		got, _ = _identify_problem("var a = 1; var a = 2; var b = a + 1;")
		self.assertEqual("failed to fail", got)

	def test_static_errors_carry_their_line(self):
		got, report = _identify_problem('print "fine";\nvar a = a;')
		self.assertEqual("resolve", got)
		self.assertEqual(2, report.issues[0].line)
		self.assertEqual(" at 'a'", report.issues[0].where)

	def test_run_program_refuses_a_sick_report(self):
		report = Silence()
		roadmap = RoadMap("print 1;", report)
		report.error(_token(), "Trouble from elsewhere.")
		with self.assertRaises(AssertionError):
			run_program(roadmap, report)

class Recovery(unittest.TestCase):
	""" The parser reports many independent errors in one pass. """

	def issues(self, text):
		report = Silence()
		with self.assertRaises(Yuck) as cm:
			RoadMap(text, report)
		self.assertEqual("parse", cm.exception.args[0])
		return report.issues

	def test_synchronize_on_semicolon_and_keywords(self):
		issues = self.issues("print 1 +;\nvar = 2;\nprint 3")
		self.assertEqual(["Expect expression.", "Expect variable name.", "Expect ';' after value."], [i.message for i in issues])
		self.assertEqual([" at ';'", " at '='", " at end"], [i.where for i in issues])
		self.assertEqual([1, 2, 3], [i.line for i in issues])

	def test_synchronize_at_statement_keyword(self):
		issues = self.issues("var x = (1 + print 2;\nfun () {}\nclass C { m( }")
		self.assertEqual(3, len(issues))

	def test_invalid_target_does_not_derail(self):
		issues = self.issues('1 = 2; print "still parsing" print;')
		self.assertEqual(["Invalid assignment target.", "Expect ';' after value."], [i.message for i in issues])

	def test_argument_cap(self):
		args = ", ".join(["1"] * 256)
		issues = self.issues("f(%s);" % args)
		self.assertEqual(["Can't have more than 255 arguments."], [i.message for i in issues])

	def test_parameter_cap(self):
		params = ", ".join("p%d" % i for i in range(256))
		issues = self.issues("fun f(%s) {}" % params)
		self.assertEqual(["Can't have more than 255 parameters."], [i.message for i in issues])
		self.assertEqual(" at 'p255'", issues[0].where)

	def test_exactly_255_is_fine(self):
		args = ", ".join(["nil"] * 255)
		report = Silence()
		RoadMap("fun f() {} f(%s);" % args, report)
		self.assertFalse(report.sick())

	def test_scan_errors_do_not_stop_scanning(self):
		issues = self.issues("@ # print 1;")
		self.assertEqual(["Unexpected character.", "Unexpected character."], [i.message for i in issues])

	def test_deep_nesting_is_an_issue_not_a_crash(self):
		depth = 5000
		issues = self.issues("print " + "(" * depth + "1" + ")" * depth + ";\nprint 2 +;")
		self.assertEqual(["Too much nesting.", "Expect expression."], [i.message for i in issues])
		self.assertEqual([1, 2], [i.line for i in issues])

	def test_too_many_issues(self):
		report = Silence(max_issues=3)
		with self.assertRaises(TooManyIssues):
			RoadMap("@ @ @ @ @", report)
		self.assertEqual(3, len(report.issues))

def _token():
	return Token("IDENTIFIER", "x", None, 1)

if __name__ == '__main__':
	unittest.main()
