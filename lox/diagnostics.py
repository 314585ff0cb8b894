"""
The diagnostics sink.

Every pass reports trouble here instead of printing it.
Static trouble (scanning, parsing, resolution) piles up as issues;
a runtime error is recorded once, since it ends the run.
Whoever drives the passes decides when to complain to the console.
"""
import sys
from typing import NamedTuple, Optional
from boozetools.support.failureprone import SourceText, illustration

from .tokens import Token, END

class TooManyIssues(Exception):
	pass

class Issue(NamedTuple):
	""" One static complaint: where in the text, what context, and what went wrong. """
	line: int
	where: str
	message: str
	offset: Optional[int] = None
	width: int = 1

	def headline(self):
		return "[line %d] Error%s: %s" % (self.line, self.where, self.message)

class Report:
	_issues : list[Issue]

	def __init__(self, *, verbose:int=0, max_issues=50):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self._source = None
		self.runtime_failure = None

	@property
	def issues(self) -> list[Issue]: return self._issues

	def sick(self): return bool(self._issues)
	def crashed(self): return self.runtime_failure is not None

	def issue(self, it:Issue):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		""" The prompt loop forgives and forgets between lines. """
		self._issues.clear()
		self.runtime_failure = None

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def attach_source(self, text:str, filename:str=None):
		""" Lets complaints show the offending line of text. """
		self._source = SourceText(text, filename=filename)

	# Methods the scanner calls:
	def lexical_error(self, line:int, offset:int, message:str):
		self.issue(Issue(line, "", message, offset))

	# Methods the parser and resolver call:
	def error(self, token:Token, message:str):
		if token.kind == END:
			self.issue(Issue(token.line, " at end", message))
		else:
			where = " at '%s'" % token.lexeme
			self.issue(Issue(token.line, where, message, token.offset, max(1, len(token.lexeme))))

	# Method the executive calls:
	def runtime_error(self, message:str, line:Optional[int]):
		self.runtime_failure = (message, line)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		if self._issues:
			print("*"*60, file=sys.stderr)
		for i in self._issues:
			print(i.headline(), file=sys.stderr)
			if i.offset is not None and self._source is not None:
				print(self._illustrate(i), file=sys.stderr)
		if self.runtime_failure is not None:
			message, line = self.runtime_failure
			print(message, file=sys.stderr)
			if line is not None:
				print("[line %d]" % line, file=sys.stderr)
		sys.stderr.flush()

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(message)

	def _illustrate(self, i:Issue):
		row, col = self._source.find_row_col(i.offset)
		single_line = self._source.line_of_text(row)
		return illustration(single_line, col, i.width, prefix='% 6d |' % row, caption=i.message)
