"""Attribute-table fields: DataColumns re-expressed as dBase-style field types."""

from __future__ import annotations

from .column import DataColumn
from .typing import DataType


# dBase field type code and default (length, decimal count) per DataType
FIELD_TYPES = {
	DataType.STRING: ("C", 255, 0),
	DataType.INTEGER: ("N", 18, 0),
	DataType.FLOAT: ("N", 18, 6),
	DataType.BOOLEAN: ("L", 1, 0),
	DataType.DATE: ("D", 8, 0),
	DataType.OBJECT: ("C", 255, 0),
}


class Field(DataColumn):
	"""
	A DataColumn that also carries the storage description an attribute
	table of a vector layer needs: a one-letter field type, a width and a
	decimal count.
	"""

	def __init__(self, name, dtype=DataType.STRING, caption=None, read_only=False,
			joined=False, length=None, decimal_count=None):
		super().__init__(name, dtype, caption=caption, read_only=read_only, joined=joined)
		field_type, default_length, default_decimals = FIELD_TYPES[self.dtype]
		self.field_type = field_type
		self.length = default_length if length is None else length
		self.decimal_count = default_decimals if decimal_count is None else decimal_count

	@classmethod
	def from_column(cls, column: DataColumn) -> "Field":
		"""Translate a column, keeping name, caption, position and read-only flag."""
		field = cls(column.name, column.dtype, caption=column.caption, read_only=column.read_only)
		field.column_index = column.column_index
		return field

	def __repr__(self):
		return f"Field({self.name!r}, {self.field_type}({self.length},{self.decimal_count}))"
