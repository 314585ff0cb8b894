"""
Scope frames for the tree-walker.

A frame is a plain dictionary plus a static link to the frame that encloses it.
Frames are ordinary heap objects: a closure that captures one keeps it alive
after the block that made it is finished, and any change made through one
reference shows through all the others.

Nothing here searches the chain. Either the resolver already said how many
links to follow, or the name is a global and goes straight to the global frame.
"""
from typing import Any, Optional
from .tokens import Token
from .tree_walker.evaluator import LoxRuntimeError

class Environment:
	_bindings: dict[str, Any]
	static_link: Optional["Environment"]

	def __init__(self, static_link:Optional["Environment"]=None):
		self._bindings = {}
		self.static_link = static_link

	def __repr__(self):
		return "<Environment %s>" % ", ".join(self._bindings)

	def define(self, name:str, value:Any):
		""" Shadowing and re-binding are both fine within one frame. """
		self._bindings[name] = value

	def get(self, name:Token) -> Any:
		try: return self._bindings[name.lexeme]
		except KeyError: raise _undefined(name) from None

	def assign(self, name:Token, value:Any):
		if name.lexeme not in self._bindings: raise _undefined(name)
		self._bindings[name.lexeme] = value

	def ancestor(self, distance:int) -> "Environment":
		frame = self
		for _ in range(distance): frame = frame.static_link
		return frame

	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance)._bindings[name]

	def assign_at(self, distance:int, name:str, value:Any):
		self.ancestor(distance)._bindings[name] = value

def _undefined(name:Token):
	return LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)
