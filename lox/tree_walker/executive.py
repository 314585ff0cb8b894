"""
I decided to factor out the run-time from the executive.
This is the overall control for the run-time.
"""
from typing import Optional, TextIO
from ..diagnostics import Report
from ..resolution import RoadMap
from .evaluator import LoxRuntimeError
from .runtime import Interpreter

def run_program(roadmap:RoadMap, report:Report, interpreter:Optional[Interpreter]=None, out:TextIO=None) -> Interpreter:
	"""
	Run a successfully resolved program. A runtime error ends the run and
	lands in the report; nothing else escapes. Pass in an interpreter
	to keep the globals from some previous run, as the prompt loop does.
	"""
	assert not report.sick(), "Refusing to run a program that failed to resolve."
	if interpreter is None: interpreter = Interpreter(out)
	interpreter.resolve(roadmap.distances)
	try:
		interpreter.interpret(roadmap.statements)
	except LoxRuntimeError as ex:
		report.runtime_error(ex.message, ex.line())
	return interpreter
