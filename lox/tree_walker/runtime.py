import sys
import math
import operator
import time
from typing import Iterable, TextIO
from .. import syntax
from ..environment import Environment
from ..tokens import Token
from .evaluator import LoxRuntimeError, Returning, OUTCOME, attach_evaluation_methods
from .types import LoxCallable, VALUE
from .values import Primitive, Closure, LoxClass, Instance

def _divide(a:float, b:float) -> float:
	# IEEE-754 rather than ZeroDivisionError.
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or a != a: return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

ARITHMETIC = {
	"-": operator.sub,
	"*": operator.mul,
	"/": _divide,
	">": operator.gt,
	">=": operator.ge,
	"<": operator.lt,
	"<=": operator.le,
}

def is_truthy(value:VALUE) -> bool:
	return not (value is None or value is False)

def is_equal(a:VALUE, b:VALUE) -> bool:
	# No coercion: in particular, true is not 1.
	if type(a) is not type(b): return False
	if type(a) is float: return _same_number(a, b)
	return a == b

def _same_number(a:float, b:float) -> bool:
	""" Numbers compare by value, except NaN equals itself and zero differs from negative zero. """
	if a != a: return b != b
	return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if isinstance(value, float):
		if value != value: return "NaN"
		if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
		text = repr(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _is_number(value:VALUE) -> bool:
	return type(value) is float

def _check_number_operand(op:Token, operand:VALUE):
	if not _is_number(operand):
		raise LoxRuntimeError(op, "Operand must be a number.")

def _check_number_operands(op:Token, left:VALUE, right:VALUE):
	if not (_is_number(left) and _is_number(right)):
		raise LoxRuntimeError(op, "Operands must be numbers.")

def _native_clock():
	return float(time.time())

@attach_evaluation_methods
class Interpreter:
	"""
	Owns the global frame and the accumulated map of binding distances.
	The frame active at any moment is passed along explicitly,
	so leaving a block (by any route) is just returning to the caller's frame.
	"""
	EVALUATE: dict
	EXECUTE: dict

	def __init__(self, out:TextIO=None):
		self.globals = Environment()
		self.globals.define("clock", Primitive("clock", 0, _native_clock))
		self._distances = {}
		self._out = out

	def resolve(self, distances:dict[syntax.Expr, int]):
		""" Distances accumulate, so the prompt loop can keep its definitions between lines. """
		self._distances.update(distances)

	def interpret(self, statements:Iterable[syntax.Stmt]):
		""" Raises LoxRuntimeError if the program goes wrong. """
		for stmt in statements:
			outcome = self.execute(stmt, self.globals)
			assert outcome is None, outcome

	def evaluate(self, expr:syntax.Expr, frame:Environment) -> VALUE:
		return self.EVALUATE[type(expr)](self, expr, frame)

	def execute(self, stmt:syntax.Stmt, frame:Environment) -> OUTCOME:
		return self.EXECUTE[type(stmt)](self, stmt, frame)

	def execute_body(self, statements:Iterable[syntax.Stmt], frame:Environment) -> OUTCOME:
		for stmt in statements:
			outcome = self.execute(stmt, frame)
			if outcome is not None: return outcome
		return None

	def _look_up(self, name:Token, expr:syntax.Expr, frame:Environment) -> VALUE:
		distance = self._distances.get(expr)
		if distance is None: return self.globals.get(name)
		return frame.get_at(distance, name.lexeme)

	def _write(self, text:str):
		print(text, file=self._out or sys.stdout)

	###########################################################################

	def _eval_literal(self, expr:syntax.Literal, frame:Environment):
		return expr.value

	def _eval_grouping(self, expr:syntax.Grouping, frame:Environment):
		return self.evaluate(expr.inner, frame)

	def _eval_unary(self, expr:syntax.Unary, frame:Environment):
		arg = self.evaluate(expr.arg, frame)
		if expr.op.kind == "-":
			_check_number_operand(expr.op, arg)
			return -arg
		return not is_truthy(arg)

	def _eval_binary(self, expr:syntax.Binary, frame:Environment):
		lhs = self.evaluate(expr.lhs, frame)
		rhs = self.evaluate(expr.rhs, frame)
		op = expr.op
		if op.kind == "==": return is_equal(lhs, rhs)
		if op.kind == "!=": return not is_equal(lhs, rhs)
		if op.kind == "+":
			if _is_number(lhs) and _is_number(rhs): return lhs + rhs
			if isinstance(lhs, str) and isinstance(rhs, str): return lhs + rhs
			raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")
		_check_number_operands(op, lhs, rhs)
		return ARITHMETIC[op.kind](lhs, rhs)

	def _eval_logical(self, expr:syntax.Logical, frame:Environment):
		lhs = self.evaluate(expr.lhs, frame)
		if expr.op.kind == "OR":
			if is_truthy(lhs): return lhs
		elif not is_truthy(lhs): return lhs
		return self.evaluate(expr.rhs, frame)

	def _eval_variable(self, expr:syntax.Variable, frame:Environment):
		return self._look_up(expr.name, expr, frame)

	def _eval_assign(self, expr:syntax.Assign, frame:Environment):
		value = self.evaluate(expr.value, frame)
		distance = self._distances.get(expr)
		if distance is None: self.globals.assign(expr.name, value)
		else: frame.assign_at(distance, expr.name.lexeme, value)
		return value

	def _eval_call(self, expr:syntax.Call, frame:Environment):
		callee = self.evaluate(expr.callee, frame)
		args = [self.evaluate(a, frame) for a in expr.args]
		if not isinstance(callee, LoxCallable):
			raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
		if len(args) != callee.arity():
			message = "Expected %d arguments but got %d." % (callee.arity(), len(args))
			raise LoxRuntimeError(expr.paren, message)
		try: return callee.call(self, args)
		except RecursionError:
			raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

	def _eval_get(self, expr:syntax.Get, frame:Environment):
		lhs = self.evaluate(expr.lhs, frame)
		if isinstance(lhs, Instance): return lhs.get(expr.name)
		raise LoxRuntimeError(expr.name, "Only instances have properties.")

	def _eval_set(self, expr:syntax.Set, frame:Environment):
		lhs = self.evaluate(expr.lhs, frame)
		if not isinstance(lhs, Instance):
			raise LoxRuntimeError(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value, frame)
		lhs.set(expr.name, value)
		return value

	def _eval_this(self, expr:syntax.This, frame:Environment):
		return self._look_up(expr.keyword, expr, frame)

	def _eval_super(self, expr:syntax.Super, frame:Environment):
		distance = self._distances[expr]
		superclass = frame.get_at(distance, "super")
		# The `this` frame sits just inside the `super` frame.
		instance = frame.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method.lexeme)
		if method is None:
			raise LoxRuntimeError(expr.method, "Undefined property '%s'." % expr.method.lexeme)
		return method.bind(instance)

	###########################################################################

	def _exec_expr_stmt(self, stmt:syntax.ExprStmt, frame:Environment):
		self.evaluate(stmt.expr, frame)

	def _exec_print_stmt(self, stmt:syntax.PrintStmt, frame:Environment):
		self._write(stringify(self.evaluate(stmt.expr, frame)))

	def _exec_var_decl(self, stmt:syntax.VarDecl, frame:Environment):
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer, frame)
		frame.define(stmt.name.lexeme, value)

	def _exec_block(self, stmt:syntax.Block, frame:Environment):
		return self.execute_body(stmt.statements, Environment(frame))

	def _exec_if_stmt(self, stmt:syntax.IfStmt, frame:Environment):
		if is_truthy(self.evaluate(stmt.condition, frame)):
			return self.execute(stmt.then_part, frame)
		elif stmt.else_part is not None:
			return self.execute(stmt.else_part, frame)

	def _exec_while_stmt(self, stmt:syntax.WhileStmt, frame:Environment):
		while is_truthy(self.evaluate(stmt.condition, frame)):
			outcome = self.execute(stmt.body, frame)
			if outcome is not None: return outcome

	def _exec_function_decl(self, stmt:syntax.FunctionDecl, frame:Environment):
		frame.define(stmt.name.lexeme, Closure(stmt, frame))

	def _exec_return_stmt(self, stmt:syntax.ReturnStmt, frame:Environment):
		value = None if stmt.value is None else self.evaluate(stmt.value, frame)
		return Returning(value)

	def _exec_class_decl(self, stmt:syntax.ClassDecl, frame:Environment):
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass, frame)
			if not isinstance(superclass, LoxClass):
				raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

		# First the name, so methods can refer to their own class...
		frame.define(stmt.name.lexeme, None)
		method_frame = frame
		if superclass is not None:
			method_frame = Environment(frame)
			method_frame.define("super", superclass)
		methods = {
			m.name.lexeme: Closure(m, method_frame, m.name.lexeme == "init")
			for m in stmt.methods
		}
		# ...and then the class itself.
		frame.assign(stmt.name, LoxClass(stmt.name.lexeme, superclass, methods))
