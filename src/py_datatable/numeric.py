"""Decimal-exact arithmetic helpers for float values."""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP, localcontext

from .errors import DataTableValueError


# Digits kept after the point by div() when no scale is given
DEFAULT_DIV_SCALE = 10


def _dec(value) -> Decimal:
	# Going through str() keeps the shortest repr, e.g. 0.1 -> Decimal('0.1')
	return Decimal(str(value))


def _check_scale(scale):
	if not isinstance(scale, int) or isinstance(scale, bool):
		raise DataTableValueError(f"Scale must be an integer, got {type(scale).__name__}")
	if scale < 0:
		raise DataTableValueError("The scale must be a positive integer or zero")


def add(d1: float, d2: float) -> float:
	"""
	>>> add(0.1, 0.2)
	0.3
	"""
	return float(_dec(d1) + _dec(d2))


def sub(d1: float, d2: float) -> float:
	return float(_dec(d1) - _dec(d2))


def mul(d1: float, d2: float) -> float:
	return float(_dec(d1) * _dec(d2))


def div(d1: float, d2: float, scale: int = DEFAULT_DIV_SCALE) -> float:
	"""Divide, rounding half-up to ``scale`` fractional digits.

	Raises DataTableValueError for a negative scale and ZeroDivisionError
	when ``d2`` is zero.
	"""
	_check_scale(scale)
	if _dec(d2) == 0:
		raise ZeroDivisionError("division by zero")
	return float(quantize(_dec(d1) / _dec(d2), scale))


def pow(d1: float, n: int) -> float:
	return float(_dec(d1) ** n)


def quantize(value, scale: int) -> Decimal:
	"""Round half-up to ``scale`` fractional digits."""
	_check_scale(scale)
	if not isinstance(value, Decimal):
		value = _dec(value)
	with localcontext() as ctx:
		# Room for every integer digit plus the requested fraction
		ctx.prec = max(ctx.prec, value.adjusted() + scale + 2)
		ctx.rounding = ROUND_HALF_UP
		return value.quantize(Decimal(1).scaleb(-scale))


def format_fixed(value, scale: int) -> str:
	"""Fixed-point text with exactly ``scale`` fractional digits.

	>>> format_fixed("3.14159", 2)
	'3.14'
	"""
	return f"{quantize(_dec(value), scale):f}"


def is_numeric(text) -> bool:
	"""True when ``text`` parses as a finite number."""
	try:
		return _dec(str(text).strip()).is_finite()
	except ArithmeticError:
		return False
