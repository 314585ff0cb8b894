"""
Token vocabulary shared by the scanner, the parser, and everything downstream.

Token kinds are plain interned strings:
punctuation is its own text, reserved words are upper-case,
and the three open-ended classes are IDENTIFIER, NUMBER, and STRING.
"""
import sys
from typing import NamedTuple, Any

IDENTIFIER = "IDENTIFIER"
NUMBER = "NUMBER"
STRING = "STRING"
END = "<END>"

RESERVED = frozenset("""
	and class else false for fun if nil or print return super this true var while
""".upper().split())

# Tokens that can begin a fresh statement; the parser resynchronizes on these.
STATEMENT_STARTERS = frozenset(["CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN"])

class Token(NamedTuple):
	kind: str
	lexeme: str
	literal: Any
	line: int
	offset: int = 0

	def __repr__(self): return "<%s %r @%d>" % (self.kind, self.lexeme, self.line)

def keyword_or_identifier(text:str) -> str:
	upper = text.upper()
	if upper in RESERVED and text.islower(): return sys.intern(upper)
	return IDENTIFIER

