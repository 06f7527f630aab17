"""Filter expression language used by DataTable.select.

A DataTable only hands each row's name-to-value mapping to a predicate and
reads back a boolean. ``SQLExpression`` is the predicate used when ``select``
receives a string; anything with an ``eval(mapping)`` method, or any callable
taking the mapping, can be used instead.

Grammar (keywords are case-insensitive)::

    expression : expression OR expression
               | expression AND expression
               | NOT expression
               | ( expression )
               | name op value          op: = == != <> < <= > >=
               | name [NOT] LIKE 'pattern'
               | name [NOT] IN (value, ...)
               | name IS [NOT] NULL

Names are bare identifiers, `backticked` or [bracketed]. Values are
integers, floats, 'single' or "double" quoted strings, true, false, null.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable

import ply.lex as lex
import ply.yacc as yacc

from .errors import DataTableKeyError, DataTableTypeError, ExpressionSyntaxError
from .naming import name_key


@runtime_checkable
class Predicate(Protocol):
	"""Anything that decides, from one row's name-to-value mapping, whether the row matches."""

	def eval(self, items: dict[str, Any]) -> bool:
		...


@dataclass
class NullValue:
	"""The null literal."""

	pass


@dataclass
class Condition:
	"""A comparison of one column against a literal."""

	field: str
	operator: str  # eq, neq, lt, lte, gt, gte, like, in, is_null
	value: Any = None
	negate: bool = False


@dataclass
class CompoundCondition:
	"""A compound condition (AND/OR)."""

	left: Any
	operator: str  # and, or
	right: Any


@dataclass
class NotCondition:
	operand: Any


@dataclass
class InList:
	values: list = field(default_factory=list)


_BACKSLASH_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _unescape(match) -> str:
	return _ESCAPES.get(match.group(1), match.group(1))


class ExpressionLexer:
	"""Lexer for filter expressions."""

	reserved = {
		"and": "AND",
		"or": "OR",
		"not": "NOT",
		"like": "LIKE",
		"in": "IN",
		"is": "IS",
		"null": "NULL",
		"true": "TRUE",
		"false": "FALSE",
	}

	tokens = [
		"IDENTIFIER",
		"INTEGER",
		"FLOAT",
		"STRING",
		"EQ",
		"NEQ",
		"LT",
		"LTE",
		"GT",
		"GTE",
		"LPAREN",
		"RPAREN",
		"COMMA",
		"MINUS",
	] + list(reserved.values())

	t_NEQ = r"!=|<>"
	t_EQ = r"==|="
	t_LTE = r"<="
	t_GTE = r">="
	t_LT = r"<"
	t_GT = r">"
	t_LPAREN = r"\("
	t_RPAREN = r"\)"
	t_COMMA = r","
	t_MINUS = r"-"

	t_ignore = " \t\r\n"

	def __init__(self) -> None:
		self.lexer: lex.Lexer = None  # type: ignore

	def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
		r"(\d+\.\d*|\.\d+)([eE][-+]?\d+)?|\d+[eE][-+]?\d+"
		t.value = float(t.value)
		return t

	def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
		r"\d+"
		t.value = int(t.value)
		return t

	def t_SQ_STRING(self, t: lex.LexToken) -> lex.LexToken:
		r"'([^']|'')*'"
		# SQL style: a doubled quote stands for one quote
		t.value = t.value[1:-1].replace("''", "'")
		t.type = "STRING"
		return t

	def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
		r'"([^"\\]|\\.)*"'
		t.value = _BACKSLASH_ESCAPE.sub(_unescape, t.value[1:-1])
		return t

	def t_QUOTED_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
		r"`[^`]+`|\[[^\]]+\]"
		# Always an IDENTIFIER, bypassing keyword lookup
		t.value = t.value[1:-1]
		t.type = "IDENTIFIER"
		return t

	def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
		r"[^\W\d]\w*"
		t.type = self.reserved.get(t.value.lower(), "IDENTIFIER")
		return t

	def t_error(self, t: lex.LexToken) -> None:
		raise ExpressionSyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

	def build(self, **kwargs) -> None:  # type: ignore
		"""Build the lexer."""
		self.lexer = lex.lex(module=self, **kwargs)

	def tokenize(self, data: str) -> list[lex.LexToken]:
		"""Tokenize the input and return all tokens."""
		self.lexer.input(data)
		tokens = []
		while True:
			tok = self.lexer.token()
			if tok is None:
				break
			tokens.append(tok)
		return tokens


class ExpressionParser:
	"""Parser turning a filter expression into a condition tree."""

	tokens = ExpressionLexer.tokens

	precedence = (
		("left", "OR"),
		("left", "AND"),
		("right", "NOT"),
	)

	def __init__(self) -> None:
		self.lexer = ExpressionLexer()
		self.lexer.build()
		self.parser: yacc.LRParser = None  # type: ignore

	def p_expression_or(self, p: yacc.YaccProduction) -> None:
		"""expression : expression OR expression"""
		p[0] = CompoundCondition(left=p[1], operator="or", right=p[3])

	def p_expression_and(self, p: yacc.YaccProduction) -> None:
		"""expression : expression AND expression"""
		p[0] = CompoundCondition(left=p[1], operator="and", right=p[3])

	def p_expression_not(self, p: yacc.YaccProduction) -> None:
		"""expression : NOT expression"""
		p[0] = NotCondition(operand=p[2])

	def p_expression_paren(self, p: yacc.YaccProduction) -> None:
		"""expression : LPAREN expression RPAREN"""
		p[0] = p[2]

	def p_expression_comparison(self, p: yacc.YaccProduction) -> None:
		"""expression : IDENTIFIER EQ value
		              | IDENTIFIER NEQ value
		              | IDENTIFIER LT value
		              | IDENTIFIER LTE value
		              | IDENTIFIER GT value
		              | IDENTIFIER GTE value"""
		op_map = {"=": "eq", "==": "eq", "!=": "neq", "<>": "neq",
			"<": "lt", "<=": "lte", ">": "gt", ">=": "gte"}
		p[0] = Condition(field=p[1], operator=op_map[p[2]], value=p[3])

	def p_expression_like(self, p: yacc.YaccProduction) -> None:
		"""expression : IDENTIFIER LIKE STRING
		              | IDENTIFIER NOT LIKE STRING"""
		if len(p) == 4:
			p[0] = Condition(field=p[1], operator="like", value=p[3])
		else:
			p[0] = Condition(field=p[1], operator="like", value=p[4], negate=True)

	def p_expression_in(self, p: yacc.YaccProduction) -> None:
		"""expression : IDENTIFIER IN LPAREN value_list RPAREN
		              | IDENTIFIER NOT IN LPAREN value_list RPAREN"""
		if len(p) == 6:
			p[0] = Condition(field=p[1], operator="in", value=InList(p[4]))
		else:
			p[0] = Condition(field=p[1], operator="in", value=InList(p[5]), negate=True)

	def p_expression_is_null(self, p: yacc.YaccProduction) -> None:
		"""expression : IDENTIFIER IS NULL
		              | IDENTIFIER IS NOT NULL"""
		p[0] = Condition(field=p[1], operator="is_null", negate=len(p) == 5)

	def p_value_list_single(self, p: yacc.YaccProduction) -> None:
		"""value_list : value"""
		p[0] = [p[1]]

	def p_value_list_multiple(self, p: yacc.YaccProduction) -> None:
		"""value_list : value_list COMMA value"""
		p[0] = p[1] + [p[3]]

	def p_value_number(self, p: yacc.YaccProduction) -> None:
		"""value : INTEGER
		         | FLOAT"""
		p[0] = p[1]

	def p_value_negative(self, p: yacc.YaccProduction) -> None:
		"""value : MINUS INTEGER
		         | MINUS FLOAT"""
		p[0] = -p[2]

	def p_value_string(self, p: yacc.YaccProduction) -> None:
		"""value : STRING"""
		p[0] = p[1]

	def p_value_bool(self, p: yacc.YaccProduction) -> None:
		"""value : TRUE
		         | FALSE"""
		p[0] = p[1].lower() == "true"

	def p_value_null(self, p: yacc.YaccProduction) -> None:
		"""value : NULL"""
		p[0] = NullValue()

	def p_error(self, p: yacc.YaccProduction) -> None:
		if p:
			raise ExpressionSyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
		else:
			raise ExpressionSyntaxError("Syntax error at end of input")

	def build(self, **kwargs: Any) -> None:
		"""Build the parser."""
		self.parser = yacc.yacc(module=self, start="expression", **kwargs)

	def parse(self, data: str):
		"""Parse an expression string into a condition tree."""
		if self.parser is None:
			self.build(debug=False, write_tables=False)

		if not data.strip():
			raise ExpressionSyntaxError("Empty filter expression")
		return self.parser.parse(data, lexer=self.lexer.lexer)


_PARSER = None


def parse_expression(expression: str):
	"""Parse with a process-wide parser, built on first use."""
	global _PARSER
	if _PARSER is None:
		_PARSER = ExpressionParser()
	return _PARSER.parse(expression)


def _like_to_regex(pattern: str):
	parts = []
	for ch in pattern:
		if ch == "%":
			parts.append(".*")
		elif ch == "_":
			parts.append(".")
		else:
			parts.append(re.escape(ch))
	return re.compile("".join(parts), re.DOTALL)


def _align(field_value, literal):
	"""Bring a cell value and a literal to comparable forms where possible."""
	if isinstance(literal, bool) or isinstance(field_value, bool):
		if isinstance(field_value, str):
			return field_value.strip().lower() == "true", literal
		return field_value, literal
	if isinstance(literal, (int, float)) and isinstance(field_value, str):
		return float(field_value), literal
	if isinstance(literal, str) and isinstance(field_value, (int, float)):
		return field_value, float(literal)
	if isinstance(literal, str) and isinstance(field_value, date):
		parsed = datetime.fromisoformat(literal)
		if not isinstance(field_value, datetime):
			parsed = parsed.date()
		return field_value, parsed
	return field_value, literal


class SQLExpression:
	"""
	Compiled filter expression.

	>>> SQLExpression("age >= 18 and name like 'A%'").eval({"name": "Ann", "age": 20})
	True
	"""

	def __init__(self, expression: str):
		if not isinstance(expression, str):
			raise DataTableTypeError(f"Filter expression must be a string, not {type(expression).__name__}")
		self.expression = expression
		self.tree = parse_expression(expression)

	def eval(self, items: dict[str, Any]) -> bool:
		"""Evaluate against one row's name-to-value mapping."""
		lookup = {name_key(k): v for k, v in items.items()}
		return self._evaluate(self.tree, lookup)

	def __call__(self, items: dict[str, Any]) -> bool:
		return self.eval(items)

	def _evaluate(self, node, lookup) -> bool:
		if isinstance(node, CompoundCondition):
			if node.operator == "and":
				return self._evaluate(node.left, lookup) and self._evaluate(node.right, lookup)
			return self._evaluate(node.left, lookup) or self._evaluate(node.right, lookup)
		if isinstance(node, NotCondition):
			return not self._evaluate(node.operand, lookup)

		key = name_key(node.field)
		if key not in lookup:
			raise DataTableKeyError(f"Column '{node.field}' not found in filter mapping")
		result = self._compare(lookup[key], node)
		return not result if node.negate else result

	def _compare(self, field_value, node: Condition) -> bool:
		op = node.operator
		value = node.value
		if op == "is_null":
			return field_value is None
		if isinstance(value, NullValue):
			if op == "eq":
				return field_value is None
			if op == "neq":
				return field_value is not None
			return False
		if field_value is None:
			return False
		if op == "in":
			return any(self._compare(field_value, Condition(node.field, "eq", v)) for v in value.values)
		if op == "like":
			return _like_to_regex(value).fullmatch(str(field_value)) is not None
		try:
			left, right = _align(field_value, value)
			if op == "eq":
				return left == right
			elif op == "neq":
				return left != right
			elif op == "lt":
				return left < right
			elif op == "lte":
				return left <= right
			elif op == "gt":
				return left > right
			elif op == "gte":
				return left >= right
		except (TypeError, ValueError):
			# Values that cannot be compared are never equal
			return op == "neq"
		return False

	def __repr__(self):
		return f"SQLExpression({self.expression!r})"
