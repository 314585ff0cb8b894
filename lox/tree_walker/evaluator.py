"""
The generic machinery that everything needs,
without the specific methods corresponding to particular syntax.
"""
from typing import Any, NamedTuple, Optional
from .. import syntax
from ..tokens import Token

class LoxRuntimeError(Exception):
	""" Unwinds the whole program. The token says where to point the finger. """
	def __init__(self, token:Optional[Token], message:str):
		super().__init__(message)
		self.token = token
		self.message = message

	def line(self) -> Optional[int]:
		return None if self.token is None else self.token.line

class Returning(NamedTuple):
	"""
	Executing a statement yields None in the normal case.
	A `return` statement yields one of these instead, and every statement that
	contains other statements passes it straight up, until a function call takes it.
	"""
	value: Any

OUTCOME = Optional[Returning]

def attach_evaluation_methods(cls):
	"""
	Class decorator: Collect the `_eval_*` and `_exec_*` methods into dispatch tables
	keyed on the node class named in each method's annotation.
	Refuses to finish if any node class lacks a method, or has two.
	"""
	cls.EVALUATE = _dispatch_table(cls, "_eval_", "expr", syntax.EXPRESSION_KINDS)
	cls.EXECUTE = _dispatch_table(cls, "_exec_", "stmt", syntax.STATEMENT_KINDS)
	return cls

def _dispatch_table(cls, prefix, parameter, kinds):
	table = {}
	for _k, _v in list(vars(cls).items()):
		if _k.startswith(prefix):
			_t = _v.__annotations__[parameter]
			assert isinstance(_t, type), (_k, _t)
			assert _t not in table, (_k, _t)
			table[_t] = _v
	missing = set(kinds) - set(table)
	assert not missing, missing
	return table
