"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but special things like closures need more help.
"""
from typing import Callable, Optional
from .. import syntax
from ..environment import Environment
from ..tokens import Token
from .evaluator import LoxRuntimeError
from .types import LoxValue, LoxCallable, ARGS, VALUE

class Primitive(LoxCallable):
	""" A function supplied by the host rather than written in Lox. """
	def __init__(self, name:str, arity:int, fn:Callable):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native fn>"

	def arity(self): return self._arity

	def call(self, interpreter, args:ARGS) -> VALUE:
		return self._fn(*args)

class Closure(LoxCallable):
	"""
	The run-time manifestation of a function declaration: a callable value tied to its natal environment.
	The same class serves for plain functions, methods, and bound methods.
	"""
	def __init__(self, declaration:syntax.FunctionDecl, captured:Environment, is_initializer:bool=False):
		self._declaration = declaration
		self._captured = captured
		self.is_initializer = is_initializer

	def __str__(self): return "<fn %s>" % self._declaration.name.lexeme

	def arity(self): return len(self._declaration.params)

	def bind(self, instance:"Instance") -> "Closure":
		""" A fresh closure whose captured frame also holds `this`. """
		frame = Environment(self._captured)
		frame.define("this", instance)
		return Closure(self._declaration, frame, self.is_initializer)

	def call(self, interpreter, args:ARGS) -> VALUE:
		frame = Environment(self._captured)
		for param, arg in zip(self._declaration.params, args):
			frame.define(param.lexeme, arg)
		# The body runs directly in the parameter frame, not in a nested block.
		outcome = interpreter.execute_body(self._declaration.body, frame)
		if self.is_initializer:
			return self._captured.get_at(0, "this")
		if outcome is None: return None
		return outcome.value

class LoxClass(LoxCallable):
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self): return self.name

	def find_method(self, name:str) -> Optional[Closure]:
		klass = self
		while klass is not None:
			if name in klass._methods: return klass._methods[name]
			klass = klass.superclass
		return None

	def arity(self):
		initializer = self.find_method("init")
		return 0 if initializer is None else initializer.arity()

	def call(self, interpreter, args:ARGS) -> VALUE:
		instance = Instance(self)
		initializer = self.find_method("init")
		if initializer is not None:
			initializer.bind(instance).call(interpreter, args)
		return instance

class Instance(LoxValue):
	def __init__(self, klass:LoxClass):
		self.klass = klass
		self._fields = {}

	def __str__(self): return "%s instance" % self.klass.name

	def get(self, name:Token) -> VALUE:
		# Fields shadow methods.
		try: return self._fields[name.lexeme]
		except KeyError: pass
		method = self.klass.find_method(name.lexeme)
		if method is None:
			raise LoxRuntimeError(name, "Undefined property '%s'." % name.lexeme)
		return method.bind(self)

	def set(self, name:Token, value:VALUE):
		self._fields[name.lexeme] = value
