"""
Render syntax trees as parenthesized prefix notation, for debugging the parser.
Since for-loops are gone by the time there is a tree, they show up as the while-loops they became.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .tree_walker.runtime import stringify

def render(node) -> str:
	return _Printer().visit(node)

class _Printer(Visitor):
	def _wrap(self, head, *parts):
		return "(%s)" % " ".join([head, *(self.visit(p) if not isinstance(p, str) else p for p in parts)])

	def visit_Literal(self, expr:syntax.Literal):
		if isinstance(expr.value, str): return '"%s"' % expr.value
		return stringify(expr.value)

	def visit_Grouping(self, expr:syntax.Grouping): return self._wrap("group", expr.inner)
	def visit_Unary(self, expr:syntax.Unary): return self._wrap(expr.op.lexeme, expr.arg)
	def visit_Binary(self, expr:syntax.Binary): return self._wrap(expr.op.lexeme, expr.lhs, expr.rhs)
	def visit_Logical(self, expr:syntax.Logical): return self._wrap(expr.op.lexeme, expr.lhs, expr.rhs)
	def visit_Variable(self, expr:syntax.Variable): return expr.name.lexeme
	def visit_Assign(self, expr:syntax.Assign): return self._wrap("=", expr.name.lexeme, expr.value)
	def visit_Call(self, expr:syntax.Call): return self._wrap("call", expr.callee, *expr.args)
	def visit_Get(self, expr:syntax.Get): return self._wrap(".", expr.lhs, expr.name.lexeme)
	def visit_Set(self, expr:syntax.Set): return self._wrap("=", expr.lhs, expr.name.lexeme, expr.value)
	def visit_This(self, expr:syntax.This): return "this"
	def visit_Super(self, expr:syntax.Super): return self._wrap("super", expr.method.lexeme)

	def visit_ExprStmt(self, stmt:syntax.ExprStmt): return self._wrap(";", stmt.expr)
	def visit_PrintStmt(self, stmt:syntax.PrintStmt): return self._wrap("print", stmt.expr)

	def visit_VarDecl(self, stmt:syntax.VarDecl):
		if stmt.initializer is None: return self._wrap("var", stmt.name.lexeme)
		return self._wrap("var", stmt.name.lexeme, "=", stmt.initializer)

	def visit_Block(self, stmt:syntax.Block): return self._wrap("block", *stmt.statements)

	def visit_IfStmt(self, stmt:syntax.IfStmt):
		if stmt.else_part is None: return self._wrap("if", stmt.condition, stmt.then_part)
		return self._wrap("if-else", stmt.condition, stmt.then_part, stmt.else_part)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt): return self._wrap("while", stmt.condition, stmt.body)

	def visit_FunctionDecl(self, stmt:syntax.FunctionDecl):
		params = "(%s)" % " ".join(p.lexeme for p in stmt.params)
		return self._wrap("fun", stmt.name.lexeme, params, *stmt.body)

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt):
		if stmt.value is None: return "(return)"
		return self._wrap("return", stmt.value)

	def visit_ClassDecl(self, stmt:syntax.ClassDecl):
		head = [stmt.name.lexeme]
		if stmt.superclass is not None: head += ["<", stmt.superclass.name.lexeme]
		return self._wrap("class", *head, *stmt.methods)
