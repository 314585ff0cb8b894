"""
Characters in, tokens out.

The scanner never gives up: an unexpected character or an unterminated string
becomes an issue in the report, and scanning carries on from the next character.
"""
from .tokens import Token, NUMBER, STRING, END, keyword_or_identifier
from .diagnostics import Report

SINGLE = frozenset("(){},.-+;*")
MAYBE_EQUALS = frozenset("!=<>")
BLANK = frozenset(" \r\t")

def _is_digit(c): return "0" <= c <= "9"
def _is_alpha(c): return "a" <= c <= "z" or "A" <= c <= "Z" or c == "_"
def _is_alphanumeric(c): return _is_alpha(c) or _is_digit(c)

class Scanner:
	def __init__(self, source:str, report:Report):
		self._source = source
		self._report = report
		self._tokens = []
		self._start = 0
		self._current = 0
		self._line = 1

	def scan_tokens(self) -> list[Token]:
		while not self._at_end():
			self._start = self._current
			self._scan_token()
		self._tokens.append(Token(END, "", None, self._line, len(self._source)))
		return self._tokens

	def _scan_token(self):
		c = self._advance()
		if c in SINGLE: self._add(c)
		elif c in MAYBE_EQUALS: self._add(c+"=" if self._match("=") else c)
		elif c == "/":
			if self._match("/"):
				while self._peek() != "\n" and not self._at_end(): self._advance()
			else: self._add("/")
		elif c in BLANK: pass
		elif c == "\n": self._line += 1
		elif c == '"': self._string()
		elif _is_digit(c): self._number()
		elif _is_alpha(c): self._identifier()
		else: self._report.lexical_error(self._line, self._start, "Unexpected character.")

	def _string(self):
		while self._peek() != '"' and not self._at_end():
			if self._peek() == "\n": self._line += 1
			self._advance()
		if self._at_end():
			self._report.lexical_error(self._line, self._start, "Unterminated string.")
			return
		self._advance()  # The closing quote.
		self._add(STRING, self._source[self._start+1:self._current-1])

	def _number(self):
		while _is_digit(self._peek()): self._advance()
		# A dot only belongs to the number if a digit follows it.
		if self._peek() == "." and _is_digit(self._peek_next()):
			self._advance()
			while _is_digit(self._peek()): self._advance()
		self._add(NUMBER, float(self._source[self._start:self._current]))

	def _identifier(self):
		while _is_alphanumeric(self._peek()): self._advance()
		self._add(keyword_or_identifier(self._source[self._start:self._current]))

	def _add(self, kind:str, literal=None):
		text = self._source[self._start:self._current]
		self._tokens.append(Token(kind, text, literal, self._line, self._start))

	def _at_end(self): return self._current >= len(self._source)

	def _advance(self):
		self._current += 1
		return self._source[self._current - 1]

	def _match(self, expected):
		if self._at_end() or self._source[self._current] != expected: return False
		self._current += 1
		return True

	def _peek(self):
		return "\0" if self._at_end() else self._source[self._current]

	def _peek_next(self):
		return "\0" if self._current + 1 >= len(self._source) else self._source[self._current + 1]

def scan(source:str, report:Report) -> list[Token]:
	return Scanner(source, report).scan_tokens()
