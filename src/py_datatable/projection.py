"""Column projections: one column's values materialized across a row sequence."""

from __future__ import annotations
from typing import Any, Iterator, List

from .column import DataColumn
from .typing import DataType


def _as_text(value) -> str:
	if value is None:
		return ""
	if isinstance(value, bool):
		return "True" if value else "False"
	return str(value)


class ColumnData:
	"""
	Snapshot of one column's values paired with its descriptor.

	A ColumnData does not track the table it was read from; any later
	structural change on that table leaves it stale.
	"""

	def __init__(self, column: DataColumn, values=()):
		self._column = column
		self._data: List[Any] = list(values)

	@property
	def column(self) -> DataColumn:
		return self._column

	@property
	def name(self) -> str:
		return self._column.name

	@property
	def dtype(self) -> DataType:
		return self._column.dtype

	@property
	def data(self) -> List[Any]:
		return list(self._data)

	def add_data(self, value):
		self._data.append(value)

	def get_value(self, index: int):
		return self._data[index]

	def as_text(self) -> List[str]:
		"""Values as text, the form join keys are compared in."""
		return [_as_text(v) for v in self._data]

	def index_of(self, value) -> int:
		"""First position holding ``value``, or -1."""
		for idx, v in enumerate(self._data):
			if v == value:
				return idx
		return -1

	def _numeric(self) -> List[Any]:
		return [v for v in self._data
			if isinstance(v, (int, float)) and not isinstance(v, bool)]

	def max(self):
		"""Largest numeric value, or None if there is none."""
		clean = self._numeric()
		return max(clean) if clean else None

	def min(self):
		clean = self._numeric()
		return min(clean) if clean else None

	def sum(self):
		return sum(self._numeric())

	def mean(self):
		"""Arithmetic mean of the numeric values, or None."""
		clean = self._numeric()
		return sum(clean) / len(clean) if clean else None

	def __getitem__(self, index):
		return self._data[index]

	def __iter__(self) -> Iterator[Any]:
		return iter(self._data)

	def __len__(self):
		return len(self._data)

	def __repr__(self):
		preview = ", ".join(repr(v) for v in self._data[:5])
		if len(self._data) > 5:
			preview += ", ..."
		return f"ColumnData({self.name!r}, <{self.dtype.name.lower()}>, [{preview}])"
