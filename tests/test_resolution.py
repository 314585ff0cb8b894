import unittest
from unittest import mock

from lox import syntax
from lox.diagnostics import Report
from lox.front_end import parse_text
from lox.resolution import resolve_program

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()

def _resolve(text):
	report = Silence()
	statements = parse_text(text, report)
	report.assert_no_issues("Parse trouble in a resolution test")
	distances = resolve_program(statements, report)
	report.assert_no_issues("Unexpected resolution trouble")
	return statements, distances

class DistanceTests(unittest.TestCase):

	def test_globals_stay_unresolved(self):
		statements, distances = _resolve("var g = 1; print g; g = 2;")
		self.assertNotIn(statements[1].expr, distances)
		self.assertNotIn(statements[2].expr, distances)
		self.assertEqual({}, distances)

	def test_each_reference_resolves_separately(self):
		[block], distances = _resolve("{ var a = 1; print a; { print a; } }")
		near = block.statements[1].expr
		far = block.statements[2].statements[0].expr
		self.assertIsInstance(near, syntax.Variable)
		self.assertEqual(0, distances[near])
		self.assertEqual(1, distances[far])

	def test_assignment_resolves(self):
		[block], distances = _resolve("{ var a; { a = 1; } }")
		assign = block.statements[1].statements[0].expr
		self.assertIsInstance(assign, syntax.Assign)
		self.assertEqual(1, distances[assign])

	def test_parameters_live_in_the_body_frame(self):
		[fn], distances = _resolve("fun f(x) { return x; }")
		self.assertEqual(0, distances[fn.body[0].value])

	def test_closure_reaches_enclosing_call(self):
		[outer], distances = _resolve("fun outer() { var n = 0; fun inner() { return n; } }")
		inner = outer.body[1]
		self.assertEqual(1, distances[inner.body[0].value])

	def test_this_and_super(self):
		[base, derived], distances = _resolve("""
			class A { m() { return this; } }
			class B < A { m() { return super.m(); } }
		""")
		this = base.methods[0].body[0].value
		self.assertIsInstance(this, syntax.This)
		self.assertEqual(1, distances[this])
		call = derived.methods[0].body[0].value
		self.assertIsInstance(call.callee, syntax.Super)
		self.assertEqual(2, distances[call.callee])
		# The superclass name itself is a plain global reference.
		self.assertNotIn(derived.superclass, distances)

	def test_function_may_call_itself(self):
		[block], distances = _resolve("{ fun f() { f(); } }")
		call = block.statements[0].body[0].expr
		self.assertEqual(1, distances[call.callee])

	def test_errors_do_not_stop_the_walk(self):
		report = Silence()
		statements = parse_text("return 1;\n{ var a = a; }\nprint this;", report)
		resolve_program(statements, report)
		self.assertEqual([1, 2, 3], [i.line for i in report.issues])

if __name__ == '__main__':
	unittest.main()
