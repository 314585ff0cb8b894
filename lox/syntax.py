"""
The set of parse-nodes in simple form.

The parser builds these and nothing changes them afterward.
In particular the resolver does not write distances into the tree:
it keys a separate map on node identity, which is why none of these
classes defines __eq__ or __hash__. Two occurrences of `x` in the text
are two distinct Variable objects with two independent resolutions.
"""
from typing import Any, Optional, Sequence
from .tokens import Token

class Expr:
	""" Root of the expression node classes """

class Stmt:
	""" Root of the statement node classes """

###############################################################################

class Literal(Expr):
	value: Any
	def __init__(self, value): self.value = value
	def __repr__(self): return "<Literal %r>" % (self.value,)

class Grouping(Expr):
	def __init__(self, inner:Expr): self.inner = inner

class Unary(Expr):
	def __init__(self, op:Token, arg:Expr):
		self.op, self.arg = op, arg

class Binary(Expr):
	def __init__(self, lhs:Expr, op:Token, rhs:Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs

class Logical(Expr):
	""" `and` / `or`, which short-circuit, so they do not share Binary's evaluation rule. """
	def __init__(self, lhs:Expr, op:Token, rhs:Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs

class Variable(Expr):
	def __init__(self, name:Token): self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.lexeme

class Assign(Expr):
	def __init__(self, name:Token, value:Expr):
		self.name, self.value = name, value

class Call(Expr):
	# The closing parenthesis locates runtime errors about the call.
	def __init__(self, callee:Expr, paren:Token, args:Sequence[Expr]):
		self.callee, self.paren, self.args = callee, paren, tuple(args)

class Get(Expr):
	def __init__(self, lhs:Expr, name:Token):
		self.lhs, self.name = lhs, name

class Set(Expr):
	def __init__(self, lhs:Expr, name:Token, value:Expr):
		self.lhs, self.name, self.value = lhs, name, value

class This(Expr):
	def __init__(self, keyword:Token): self.keyword = keyword
	def __repr__(self): return "<this>"

class Super(Expr):
	def __init__(self, keyword:Token, method:Token):
		self.keyword, self.method = keyword, method
	def __repr__(self): return "<super.%s>" % self.method.lexeme

###############################################################################

class ExprStmt(Stmt):
	def __init__(self, expr:Expr): self.expr = expr

class PrintStmt(Stmt):
	def __init__(self, expr:Expr): self.expr = expr

class VarDecl(Stmt):
	def __init__(self, name:Token, initializer:Optional[Expr]):
		self.name, self.initializer = name, initializer
	def __repr__(self): return "<var %s>" % self.name.lexeme

class Block(Stmt):
	def __init__(self, statements:Sequence[Stmt]): self.statements = tuple(statements)

class IfStmt(Stmt):
	def __init__(self, condition:Expr, then_part:Stmt, else_part:Optional[Stmt]):
		self.condition, self.then_part, self.else_part = condition, then_part, else_part

class WhileStmt(Stmt):
	def __init__(self, condition:Expr, body:Stmt):
		self.condition, self.body = condition, body

class FunctionDecl(Stmt):
	""" Serves for free-standing functions and for methods alike. """
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Stmt]):
		self.name, self.params, self.body = name, tuple(params), tuple(body)
	def __repr__(self): return "<fun %s/%d>" % (self.name.lexeme, len(self.params))

class ReturnStmt(Stmt):
	def __init__(self, keyword:Token, value:Optional[Expr]):
		self.keyword, self.value = keyword, value

class ClassDecl(Stmt):
	def __init__(self, name:Token, superclass:Optional[Variable], methods:Sequence[FunctionDecl]):
		self.name, self.superclass, self.methods = name, superclass, tuple(methods)
	def __repr__(self): return "<class %s>" % self.name.lexeme

EXPRESSION_KINDS = tuple(Expr.__subclasses__())
STATEMENT_KINDS = tuple(Stmt.__subclasses__())
