"""
Recursive-descent parser: one token of look-ahead, no backtracking.

Grammar, from lowest precedence to highest:

	program     → declaration* <END>
	declaration → classDecl | funDecl | varDecl | statement
	classDecl   → "class" IDENTIFIER ( "<" IDENTIFIER )? "{" function* "}"
	funDecl     → "fun" function
	function    → IDENTIFIER "(" parameters? ")" block
	varDecl     → "var" IDENTIFIER ( "=" expression )? ";"
	statement   → exprStmt | forStmt | ifStmt | printStmt | returnStmt | whileStmt | block
	expression  → assignment
	assignment  → ( call "." )? IDENTIFIER "=" assignment | logic_or
	logic_or    → logic_and ( "or" logic_and )*
	logic_and   → equality ( "and" equality )*
	equality    → comparison ( ( "!=" | "==" ) comparison )*
	comparison  → term ( ( ">" | ">=" | "<" | "<=" ) term )*
	term        → factor ( ( "-" | "+" ) factor )*
	factor      → unary ( ( "/" | "*" ) unary )*
	unary       → ( "!" | "-" ) unary | call
	call        → primary ( "(" arguments? ")" | "." IDENTIFIER )*
	primary     → NUMBER | STRING | "true" | "false" | "nil" | "this"
	            | "(" expression ")" | IDENTIFIER | "super" "." IDENTIFIER

A mismatch raises ParseError, which unwinds to the nearest declaration.
There the parser discards tokens up to a statement boundary and carries on,
so that a single pass can report many independent mistakes.
Nesting deep enough to exhaust the Python stack is reported the same way,
though recovery then resumes only at the top level.
"""
from typing import Optional
from . import syntax
from .tokens import Token, IDENTIFIER, NUMBER, STRING, END, STATEMENT_STARTERS
from .diagnostics import Report
from .scanner import scan

MAX_ARITY = 255

class ParseError(Exception):
	pass

class Parser:
	def __init__(self, tokens:list[Token], report:Report):
		assert tokens and tokens[-1].kind == END
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[syntax.Stmt]:
		statements = []
		while not self._at_end():
			try: stmt = self._declaration()
			except RecursionError:
				# Caught out here, where the stack has room again.
				self._error(self._peek(), "Too much nesting.")
				self._synchronize()
				continue
			if stmt is not None: statements.append(stmt)
		return statements

	# ---------- DECLARATIONS ----------

	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match("CLASS"): return self._class_declaration()
			if self._match("FUN"): return self._function("function")
			if self._match("VAR"): return self._var_declaration()
			return self._statement()
		except ParseError:
			self._synchronize()
			return None

	def _class_declaration(self):
		name = self._consume(IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match("<"):
			self._consume(IDENTIFIER, "Expect superclass name.")
			superclass = syntax.Variable(self._previous())
		self._consume("{", "Expect '{' before class body.")
		methods = []
		while not self._check("}") and not self._at_end():
			methods.append(self._function("method"))
		self._consume("}", "Expect '}' after class body.")
		return syntax.ClassDecl(name, superclass, methods)

	def _function(self, kind:str) -> syntax.FunctionDecl:
		name = self._consume(IDENTIFIER, "Expect %s name." % kind)
		self._consume("(", "Expect '(' after %s name." % kind)
		params = []
		if not self._check(")"):
			while True:
				if len(params) >= MAX_ARITY:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARITY)
				params.append(self._consume(IDENTIFIER, "Expect parameter name."))
				if not self._match(","): break
		self._consume(")", "Expect ')' after parameters.")
		self._consume("{", "Expect '{' before %s body." % kind)
		return syntax.FunctionDecl(name, params, self._block())

	def _var_declaration(self):
		name = self._consume(IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match("=") else None
		self._consume(";", "Expect ';' after variable declaration.")
		return syntax.VarDecl(name, initializer)

	# ---------- STATEMENTS ----------

	def _statement(self) -> syntax.Stmt:
		if self._match("FOR"): return self._for_statement()
		if self._match("IF"): return self._if_statement()
		if self._match("PRINT"): return self._print_statement()
		if self._match("RETURN"): return self._return_statement()
		if self._match("WHILE"): return self._while_statement()
		if self._match("{"): return syntax.Block(self._block())
		return self._expression_statement()

	def _for_statement(self):
		"""
		There is no for-loop node. This builds the equivalent while-loop:
		the increment joins the end of the body, a missing condition means `true`,
		and an initializer gets a block of its own around the whole thing.
		"""
		self._consume("(", "Expect '(' after 'for'.")
		if self._match(";"): initializer = None
		elif self._match("VAR"): initializer = self._var_declaration()
		else: initializer = self._expression_statement()

		condition = None if self._check(";") else self._expression()
		self._consume(";", "Expect ';' after loop condition.")
		increment = None if self._check(")") else self._expression()
		self._consume(")", "Expect ')' after for clauses.")
		body = self._statement()

		if increment is not None:
			body = syntax.Block([body, syntax.ExprStmt(increment)])
		if condition is None:
			condition = syntax.Literal(True)
		body = syntax.WhileStmt(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body

	def _if_statement(self):
		self._consume("(", "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(")", "Expect ')' after if condition.")
		then_part = self._statement()
		else_part = self._statement() if self._match("ELSE") else None
		return syntax.IfStmt(condition, then_part, else_part)

	def _print_statement(self):
		value = self._expression()
		self._consume(";", "Expect ';' after value.")
		return syntax.PrintStmt(value)

	def _return_statement(self):
		keyword = self._previous()
		value = None if self._check(";") else self._expression()
		self._consume(";", "Expect ';' after return value.")
		return syntax.ReturnStmt(keyword, value)

	def _while_statement(self):
		self._consume("(", "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(")", "Expect ')' after condition.")
		return syntax.WhileStmt(condition, self._statement())

	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check("}") and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume("}", "Expect '}' after block.")
		return statements

	def _expression_statement(self):
		expr = self._expression()
		self._consume(";", "Expect ';' after expression.")
		return syntax.ExprStmt(expr)

	# ---------- EXPRESSIONS ----------

	def _expression(self) -> syntax.Expr:
		return self._assignment()

	def _assignment(self):
		expr = self._or()
		if self._match("="):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.lhs, expr.name, value)
			# Reported, but not thrown: the parser is not confused.
			self._error(equals, "Invalid assignment target.")
		return expr

	def _or(self):
		expr = self._and()
		while self._match("OR"):
			expr = syntax.Logical(expr, self._previous(), self._and())
		return expr

	def _and(self):
		expr = self._equality()
		while self._match("AND"):
			expr = syntax.Logical(expr, self._previous(), self._equality())
		return expr

	def _left_associative(self, operand, *operators):
		expr = operand()
		while self._match(*operators):
			expr = syntax.Binary(expr, self._previous(), operand())
		return expr

	def _equality(self): return self._left_associative(self._comparison, "!=", "==")
	def _comparison(self): return self._left_associative(self._term, ">", ">=", "<", "<=")
	def _term(self): return self._left_associative(self._factor, "-", "+")
	def _factor(self): return self._left_associative(self._unary, "/", "*")

	def _unary(self):
		if self._match("!", "-"):
			return syntax.Unary(self._previous(), self._unary())
		return self._call()

	def _call(self):
		expr = self._primary()
		while True:
			if self._match("("):
				expr = self._finish_call(expr)
			elif self._match("."):
				name = self._consume(IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee):
		args = []
		if not self._check(")"):
			while True:
				if len(args) >= MAX_ARITY:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARITY)
				args.append(self._expression())
				if not self._match(","): break
		paren = self._consume(")", "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)

	def _primary(self):
		if self._match("FALSE"): return syntax.Literal(False)
		if self._match("TRUE"): return syntax.Literal(True)
		if self._match("NIL"): return syntax.Literal(None)
		if self._match(NUMBER, STRING): return syntax.Literal(self._previous().literal)
		if self._match("THIS"): return syntax.This(self._previous())
		if self._match("SUPER"):
			keyword = self._previous()
			self._consume(".", "Expect '.' after 'super'.")
			method = self._consume(IDENTIFIER, "Expect superclass method name.")
			return syntax.Super(keyword, method)
		if self._match(IDENTIFIER): return syntax.Variable(self._previous())
		if self._match("("):
			expr = self._expression()
			self._consume(")", "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(self._peek(), "Expect expression.")

	# ---------- TOKEN HANDLING ----------

	def _consume(self, kind:str, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _error(self, token:Token, message:str) -> ParseError:
		""" Report the problem; the caller decides whether to throw the result. """
		self._report.error(token, message)
		return ParseError(token, message)

	def _match(self, *kinds:str) -> bool:
		for kind in kinds:
			if self._check(kind):
				self._advance()
				return True
		return False

	def _check(self, kind:str) -> bool:
		return not self._at_end() and self._peek().kind == kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _at_end(self): return self._peek().kind == END
	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]

	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind == ";": return
			if self._peek().kind in STATEMENT_STARTERS: return
			self._advance()

def parse_text(text:str, report:Report) -> list[syntax.Stmt]:
	""" Scan and parse. Check the report afterward: the statement list omits whatever failed. """
	tokens = scan(text, report)
	report.info("Scanned %d tokens." % len(tokens))
	return Parser(tokens, report).parse()
