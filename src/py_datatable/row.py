"""Rows and the ordered row store of a DataTable."""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict, Iterator, List

from .column import DataColumn, _missing_col_error
from .errors import DataTableIndexError, DataTableTypeError, DataTableValueError
from .naming import build_attribute_map, name_key
from .typing import DataType, validate_scalar


class DataRow:
	"""
	One ordered tuple of cell values.

	A row keeps its own slot layout (name and declared type per slot) next to
	the values, so ``len(row)`` always equals the number of slots. Inside a
	DataTable the layout mirrors the table's columns; the table forwards every
	column insert/remove/rename to each of its rows. A detached row (built
	with its own column list) can later be handed to ``DataTable.append_row``.

	Values are addressable by position, by column name (case-insensitive),
	by DataColumn, or as attributes using sanitized names.
	"""

	def __init__(self, columns=()):
		object.__setattr__(self, "_keys", [])
		object.__setattr__(self, "_dtypes", [])
		object.__setattr__(self, "_values", [])
		object.__setattr__(self, "_key_map", {})
		object.__setattr__(self, "_attr_map", None)
		object.__setattr__(self, "table", None)
		object.__setattr__(self, "row_index", -1)
		for col in columns:
			if isinstance(col, str):
				col = DataColumn(col, DataType.OBJECT)
			self._insert_slot(len(self._keys), col.name, col.dtype, None)

	def __setattr__(self, attr, value):
		if attr in ("table", "row_index"):
			object.__setattr__(self, attr, value)
			return
		raise AttributeError(f"Cannot set attribute '{attr}' on a row; use row['{attr}'] = value")

	# ------------------------------------------------------------------
	# Slot layout
	# ------------------------------------------------------------------

	def _rebuild_maps(self):
		object.__setattr__(self, "_key_map", {name_key(k): i for i, k in enumerate(self._keys)})
		object.__setattr__(self, "_attr_map", None)

	def _insert_slot(self, index, name, dtype, value):
		self._keys.insert(index, name)
		self._dtypes.insert(index, dtype)
		self._values.insert(index, value)
		self._rebuild_maps()

	def _position(self, key) -> int:
		"""Resolve a position, name or DataColumn to a slot position, or raise."""
		if isinstance(key, bool):
			raise DataTableTypeError("Row keys must be int, str or DataColumn, not bool")
		if isinstance(key, int):
			n = len(self._values)
			pos = key + n if key < 0 else key
			if not 0 <= pos < n:
				raise DataTableIndexError(f"Column position {key} out of range for {n} values")
			return pos
		if isinstance(key, DataColumn):
			key = key.name
		if isinstance(key, str):
			pos = self._key_map.get(name_key(key))
			if pos is None:
				raise _missing_col_error(key, context="DataRow")
			return pos
		raise DataTableTypeError(f"Row keys must be int, str or DataColumn, not {type(key).__name__}")

	def _add_slot(self, column: DataColumn, value: Any = None, index: int = None):
		if index is None:
			index = len(self._keys)
		self._insert_slot(index, column.name, column.dtype, validate_scalar(value, column.dtype))

	def _remove_slot(self, column):
		pos = self._position(column)
		del self._keys[pos]
		del self._dtypes[pos]
		del self._values[pos]
		self._rebuild_maps()

	def _rename_slot(self, old_name: str, new_name: str):
		pos = self._position(old_name)
		self._keys[pos] = new_name
		self._rebuild_maps()

	def _check_detached(self):
		if self.table is not None:
			raise DataTableValueError(
				"Row belongs to a table; change columns through the table instead"
			)

	def add_column(self, column: DataColumn, value: Any = None, index: int = None):
		"""Add a value slot for ``column`` (appended unless ``index`` is given).

		Slot edits are only allowed on detached rows, like every method below.
		"""
		self._check_detached()
		self._add_slot(column, value, index)

	def insert_column(self, index: int, column: DataColumn, value: Any = None):
		self._check_detached()
		if not 0 <= index <= len(self._keys):
			raise DataTableIndexError(f"Column position {index} out of range [0, {len(self._keys)}]")
		self._add_slot(column, value, index)

	def remove_column(self, column):
		"""Drop the value slot of a column (by name, position or DataColumn)."""
		self._check_detached()
		self._remove_slot(column)

	def rename_column(self, old_name: str, new_name: str):
		"""Change a slot's addressing key; order and value stay put."""
		self._check_detached()
		self._rename_slot(old_name, new_name)

	def has_column(self, name) -> bool:
		if isinstance(name, DataColumn):
			name = name.name
		return isinstance(name, str) and name_key(name) in self._key_map

	@property
	def column_names(self) -> List[str]:
		return list(self._keys)

	# ------------------------------------------------------------------
	# Values
	# ------------------------------------------------------------------

	def get_value(self, key) -> Any:
		return self._values[self._position(key)]

	def set_value(self, key, value: Any):
		pos = self._position(key)
		self._values[pos] = validate_scalar(value, self._dtypes[pos])

	def values(self) -> List[Any]:
		return list(self._values)

	def item_map(self) -> Dict[str, Any]:
		"""Snapshot mapping of column name to value, in column order."""
		return dict(zip(self._keys, self._values))

	def copy_from(self, other: "DataRow", deep: bool = False):
		"""Copy values for every column present in both rows.

		Columns the other row lacks keep their current values. With ``deep``
		the values are deep-copied, so OBJECT cells are not shared.
		"""
		for pos, key in enumerate(self._keys):
			if other.has_column(key):
				value = other.get_value(key)
				if deep:
					value = deepcopy(value)
				self._values[pos] = validate_scalar(value, self._dtypes[pos])

	def _rebind(self, columns, fill):
		"""Re-lay the row out to ``columns``, keeping values by name.

		Columns the row does not have get ``fill(column)``. Nothing changes
		if a value is rejected by its new column type.
		"""
		keys, dtypes, values = [], [], []
		for col in columns:
			if self.has_column(col.name):
				value = self.get_value(col.name)
			else:
				value = fill(col)
			keys.append(col.name)
			dtypes.append(col.dtype)
			values.append(validate_scalar(value, col.dtype))
		object.__setattr__(self, "_keys", keys)
		object.__setattr__(self, "_dtypes", dtypes)
		object.__setattr__(self, "_values", values)
		self._rebuild_maps()

	# ------------------------------------------------------------------
	# Python protocol
	# ------------------------------------------------------------------

	def __getitem__(self, key):
		return self.get_value(key)

	def __setitem__(self, key, value):
		self.set_value(key, value)

	def __getattr__(self, attr):
		"""Access values by sanitized attribute name."""
		if attr.startswith("_"):
			raise AttributeError(attr)
		attr_map = self._attr_map
		if attr_map is None:
			attr_map = build_attribute_map(self._keys)
			object.__setattr__(self, "_attr_map", attr_map)
		pos = attr_map.get(attr.lower())
		if pos is None:
			raise AttributeError(f"Row has no attribute '{attr}'")
		return self._values[pos]

	def __dir__(self):
		names = build_attribute_map(self._keys).keys()
		return sorted(set(object.__dir__(self)) | set(names))

	def __iter__(self) -> Iterator[Any]:
		return iter(list(self._values))

	def __len__(self):
		return len(self._values)

	def __repr__(self):
		values = [repr(v) for v in self._values]
		return f"Row({self.row_index}: {', '.join(values)})"


class DataRowCollection:
	"""Ordered store of the rows of one DataTable."""

	def __init__(self):
		self._rows: List[DataRow] = []

	def append(self, row: DataRow) -> DataRow:
		self._rows.append(row)
		return row

	def remove_at(self, position: int) -> DataRow:
		try:
			return self._rows.pop(position)
		except IndexError:
			raise DataTableIndexError(
				f"Row position {position} out of range for {len(self._rows)} rows"
			) from None

	def index(self, row: DataRow) -> int:
		"""Current position of ``row`` (by identity), or -1."""
		for pos, candidate in enumerate(self._rows):
			if candidate is row:
				return pos
		return -1

	def __getitem__(self, key):
		if isinstance(key, slice):
			return self._rows[key]
		try:
			return self._rows[key]
		except IndexError:
			raise DataTableIndexError(
				f"Row position {key} out of range for {len(self._rows)} rows"
			) from None

	def __iter__(self) -> Iterator[DataRow]:
		return iter(list(self._rows))

	def __len__(self):
		return len(self._rows)

	def __repr__(self):
		return f"DataRowCollection({len(self._rows)} rows)"
