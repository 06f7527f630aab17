"""Text rendering and repr logic for DataTable."""

from __future__ import annotations
import math
import os
from datetime import date
from typing import List

from .errors import DataTableValueError, UnsetValueError
from .numeric import format_fixed, is_numeric
from .typing import DataType


# How many rows/columns to show before inserting "..."
MAX_HEAD_ROWS = 5
MAX_HEAD_COLS = 5

DELIMITER = ","


def _cell_text(value, column, row_pos) -> str:
	"""Natural text form of a cell; an unset cell cannot be rendered."""
	if value is None:
		raise UnsetValueError(
			f"Cell ({row_pos}, '{column.name}') has no value and cannot be rendered"
		)
	return str(value)


def _fixed_text(value, column, row_pos, decimal_places) -> str:
	text = _cell_text(value, column, row_pos)
	if column.dtype is not DataType.FLOAT:
		return text
	if is_numeric(text):
		return format_fixed(text, decimal_places)
	return ""


def render_lines(table, decimal_places=None, delimiter=DELIMITER):
	"""Yield the header line, then one delimited line per row.

	With ``decimal_places`` set, FLOAT columns are written with exactly that
	many fractional digits; non-numeric text in such a column becomes an
	empty field.
	"""
	if decimal_places is not None and decimal_places < 0:
		raise DataTableValueError(f"Decimal places must be zero or positive, got {decimal_places}")

	columns = list(table.columns)
	yield delimiter.join(col.name for col in columns)
	for row_pos, row in enumerate(table.rows):
		if decimal_places is None:
			cells = [_cell_text(row.get_value(col.name), col, row_pos) for col in columns]
		else:
			cells = [_fixed_text(row.get_value(col.name), col, row_pos, decimal_places)
				for col in columns]
		yield delimiter.join(cells)


def to_string(table, decimal_places=None) -> str:
	return os.linesep.join(render_lines(table, decimal_places))


def _needs_quoting(name: str) -> bool:
	"""A name needs quoting if it contains anything outside [A-Za-z0-9_]
	OR has leading/trailing whitespace."""
	if not name:
		return False
	if name != name.strip():
		return True
	return not all(c.isalnum() or c == "_" for c in name)


def _format_value(v, dtype) -> str:
	if v is None:
		return "None"
	if v == '...':
		return '...'
	if dtype is DataType.FLOAT and isinstance(v, float) and math.isfinite(v):
		return f"{v:.1f}" if v == int(v) else f"{v:g}"
	if isinstance(v, date):
		return v.isoformat()
	if dtype is DataType.STRING:
		return repr(v)
	return str(v)


def _format_column(values, dtype, max_preview: int = MAX_HEAD_ROWS) -> List[str]:
	"""Returns a list of strings representing that column, truncated for display."""
	if len(values) > max_preview * 2:
		preview = list(values[:max_preview]) + ['...'] + list(values[-max_preview:])
	else:
		preview = list(values)
	return [_format_value(v, dtype) for v in preview]


def _footer(nrows, dtype_names) -> str:
	return f"# {nrows}×{len(dtype_names)} table <{', '.join(dtype_names)}>"


def _repr_table(table) -> str:
	"""Pretty repr for a DataTable."""
	columns = list(table.columns)
	num_cols = len(columns)
	if num_cols == 0:
		return f"# {len(table.rows)}×0 table"

	truncated = num_cols > MAX_HEAD_COLS * 2
	if truncated:
		col_indices = list(range(MAX_HEAD_COLS)) + list(range(num_cols - MAX_HEAD_COLS, num_cols))
	else:
		col_indices = list(range(num_cols))

	rows = list(table.rows)
	headers = []
	bodies = []
	numeric = []
	for idx in col_indices:
		col = columns[idx]
		headers.append(repr(col.name) if _needs_quoting(col.name) else col.name)
		bodies.append(_format_column([row.get_value(idx) for row in rows], col.dtype))
		numeric.append(col.dtype.is_numeric)

	if truncated:
		headers.insert(MAX_HEAD_COLS, "...")
		bodies.insert(MAX_HEAD_COLS, ["..."] * len(bodies[0]))
		numeric.insert(MAX_HEAD_COLS, False)

	# Align: numeric right, others left
	lines_by_col = []
	for header, body, is_num in zip(headers, bodies, numeric):
		width = max([len(header)] + [len(s) for s in body])
		pad = str.rjust if is_num else str.ljust
		lines_by_col.append([pad(header, width)] + [pad(s, width) for s in body])

	lines = ["  ".join(parts).rstrip() for parts in zip(*lines_by_col)]
	lines.append("")
	lines.append(_footer(len(rows), [col.dtype.name.lower() for col in columns]))
	return "\n".join(lines)
