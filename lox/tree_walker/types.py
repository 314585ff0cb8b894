"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.

Basic values play themselves:
nil is None, booleans are bool, numbers are float, and strings are str.
"""

from abc import ABC, abstractmethod
from typing import Sequence, Union, TYPE_CHECKING

if TYPE_CHECKING:
	from .runtime import Interpreter

class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """

class LoxCallable(LoxValue):
	""" Functions and classes: things a call expression may apply to arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, interpreter:"Interpreter", args:"ARGS") -> "VALUE": pass

NATIVE_DATA = Union[None, bool, float, str]
VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[VALUE]
