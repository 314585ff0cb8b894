"""
Static resolution: a single walk over the tree before anything runs.

For every variable reference (and every `this`, `super`, and assignment)
that binds to a local scope, this records how many scopes out the binding lives.
References with no local binding are left out of the map: they mean globals,
which the interpreter looks up by name when the moment comes.

Along the way it rejects the things that are wrong no matter what happens at
run-time: reading a variable in its own initializer, declaring a name twice
in one scope, returning from outside a function, returning a value from an
initializer, and misplaced `this` or `super`.
"""
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional
from boozetools.support.foundation import Visitor
from . import syntax
from .tokens import Token
from .diagnostics import Report
from .front_end import parse_text

DISTANCES = dict[syntax.Expr, int]

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

class FunctionKind(Enum):
	NONE = "none"
	FUNCTION = "function"
	METHOD = "method"
	INITIALIZER = "initializer"

class ClassKind(Enum):
	NONE = "none"
	CLASS = "class"
	SUBCLASS = "subclass"

class RoadMap:
	"""
	Scan, parse, and resolve one unit of source text.
	If any of that goes wrong, the issues land in the report and this raises Yuck.
	Otherwise the statements and the map of binding distances are ready to run.
	"""
	statements: list[syntax.Stmt]
	distances: DISTANCES

	def __init__(self, text:str, report:Report, path:Optional[Path]=None):
		report.attach_source(text, None if path is None else str(path))
		self.statements = parse_text(text, report)
		if report.sick(): raise Yuck("parse")
		self.distances = resolve_program(self.statements, report)
		if report.sick(): raise Yuck("resolve")

def resolve_program(statements:Iterable[syntax.Stmt], report:Report) -> DISTANCES:
	resolver = Resolver(report)
	resolver.tour(statements)
	report.info("Resolved %d local references." % len(resolver.distances))
	return resolver.distances

class Resolver(Visitor):
	"""
	The scope stack holds one dictionary per local scope, innermost last.
	Each maps a name to whether its definition is complete yet.
	The global scope is deliberately absent from the stack.
	"""
	distances: DISTANCES
	_scopes: list[dict[str, bool]]
	_pending_globals: set[str]
	_function: FunctionKind
	_class: ClassKind

	def __init__(self, report:Report):
		self.report = report
		self.distances = {}
		self._scopes = []
		self._pending_globals = set()
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE

	def tour(self, items:Iterable):
		for i in items:
			self.visit(i)

	# ---------- Scope bookkeeping ----------

	def _begin_scope(self, *predefined:str):
		self._scopes.append(dict.fromkeys(predefined, True))

	def _end_scope(self):
		self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.lexeme in scope:
			self.report.error(name, "Already a variable with this name in this scope.")
		scope[name.lexeme] = False

	def _define(self, name:Token):
		if self._scopes: self._scopes[-1][name.lexeme] = True

	def _resolve_local(self, expr:syntax.Expr, name:str) -> bool:
		for depth, scope in enumerate(reversed(self._scopes)):
			if name in scope:
				self.distances[expr] = depth
				return True
		return False

	# ---------- Statements ----------

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()

	def visit_VarDecl(self, stmt:syntax.VarDecl):
		name = stmt.name
		self._declare(name)
		if stmt.initializer is not None:
			# Globals are not on the scope stack, so they need their own reminder.
			is_global = not self._scopes
			if is_global: self._pending_globals.add(name.lexeme)
			self.visit(stmt.initializer)
			if is_global: self._pending_globals.discard(name.lexeme)
		self._define(name)

	def visit_FunctionDecl(self, stmt:syntax.FunctionDecl):
		# Defined before the body, so the function may call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionKind.FUNCTION)

	def _resolve_function(self, fn:syntax.FunctionDecl, kind:FunctionKind):
		enclosing = self._function
		self._function = kind
		self._begin_scope()
		for param in fn.params:
			self._declare(param)
			self._define(param)
		self.tour(fn.body)
		self._end_scope()
		self._function = enclosing

	def visit_ClassDecl(self, stmt:syntax.ClassDecl):
		enclosing = self._class
		self._class = ClassKind.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self.report.error(stmt.superclass.name, "A class can't inherit from itself.")
			self._class = ClassKind.SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope("super")

		self._begin_scope("this")
		for method in stmt.methods:
			kind = FunctionKind.INITIALIZER if method.name.lexeme == "init" else FunctionKind.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None: self._end_scope()
		self._class = enclosing

	def visit_ExprStmt(self, stmt:syntax.ExprStmt):
		self.visit(stmt.expr)

	def visit_PrintStmt(self, stmt:syntax.PrintStmt):
		self.visit(stmt.expr)

	def visit_IfStmt(self, stmt:syntax.IfStmt):
		self.visit(stmt.condition)
		self.visit(stmt.then_part)
		if stmt.else_part is not None: self.visit(stmt.else_part)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt):
		self.visit(stmt.condition)
		self.visit(stmt.body)

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt):
		if self._function is FunctionKind.NONE:
			self.report.error(stmt.keyword, "Can't return from top-level code.")
		if stmt.value is not None:
			if self._function is FunctionKind.INITIALIZER:
				self.report.error(stmt.keyword, "Can't return a value from an initializer.")
			self.visit(stmt.value)

	# ---------- Expressions ----------

	def visit_Variable(self, expr:syntax.Variable):
		name = expr.name.lexeme
		if self._scopes and self._scopes[-1].get(name) is False:
			self.report.error(expr.name, "Can't read local variable in its own initializer.")
		if not self._resolve_local(expr, name) and name in self._pending_globals:
			self.report.error(expr.name, "Can't read local variable in its own initializer.")

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name.lexeme)

	def visit_Literal(self, expr:syntax.Literal): pass

	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.inner)

	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.arg)

	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.args)

	def visit_Get(self, expr:syntax.Get):
		# Property names are dynamic; only the object expression resolves.
		self.visit(expr.lhs)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.lhs)

	def visit_This(self, expr:syntax.This):
		if self._class is ClassKind.NONE:
			self.report.error(expr.keyword, "Can't use 'this' outside of a class.")
			return
		self._resolve_local(expr, "this")

	def visit_Super(self, expr:syntax.Super):
		if self._class is ClassKind.NONE:
			self.report.error(expr.keyword, "Can't use 'super' outside of a class.")
		elif self._class is not ClassKind.SUBCLASS:
			self.report.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
		self._resolve_local(expr, "super")
