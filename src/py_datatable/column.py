"""Column descriptors and the ordered, name-unique column registry."""

from __future__ import annotations
from typing import Iterator, List, Optional

from .errors import DataTableIndexError, DataTableKeyError, DataTableTypeError, DuplicateNameError
from .naming import name_key
from .typing import DataType


def _missing_col_error(name, context="DataTable"):
	return DataTableKeyError(f"Column '{name}' not found in {context}")


class DataColumn:
	"""
	Named, typed schema slot of a DataTable.

	Parameters
	----------
	name : str
		Column name, unique (case-insensitively) within a table
	dtype : DataType, type or str
		Declared type; drives row-creation defaults and rendering
	caption : str, optional
		Display caption, defaults to the name
	read_only : bool
	joined : bool
		True when the column was added by DataTable.join
	"""

	def __init__(self, name, dtype=DataType.STRING, caption=None, read_only=False, joined=False):
		if not isinstance(name, str):
			raise DataTableTypeError(f"Column name must be a string, not {type(name).__name__}")
		self._name = name
		self._dtype = DataType.parse(dtype)
		self._caption = caption
		self.read_only = read_only
		self.joined = joined
		# Maintained by the owning DataColumnCollection
		self.column_index = -1

	@property
	def name(self) -> str:
		return self._name

	@property
	def dtype(self) -> DataType:
		return self._dtype

	@property
	def caption(self) -> str:
		return self._name if self._caption is None else self._caption

	@caption.setter
	def caption(self, value):
		self._caption = value

	def clone(self):
		"""Return a detached copy carrying the same name, type and flags."""
		col = self.__class__.__new__(self.__class__)
		col.__dict__.update(self.__dict__)
		col.column_index = self.column_index
		return col

	def __repr__(self):
		flags = []
		if self.read_only:
			flags.append("read-only")
		if self.joined:
			flags.append("joined")
		suffix = f" [{', '.join(flags)}]" if flags else ""
		return f"{self.__class__.__name__}({self._name!r}, <{self._dtype.name.lower()}>{suffix})"


class DataColumnCollection:
	"""
	Ordered, name-unique sequence of DataColumn descriptors.

	Every structural change re-indexes the descriptors so that
	``column.column_index`` equals the column's offset. The collection does
	not know about rows; DataTable forwards each change to its rows. Structural
	changes are private to DataTable; callers read the registry only.
	"""

	def __init__(self, columns=()):
		self._columns: List[DataColumn] = []
		self._lookup = {}
		for col in columns:
			self._add(col)

	def _reindex(self):
		self._lookup = {}
		for idx, col in enumerate(self._columns):
			col.column_index = idx
			self._lookup[name_key(col.name)] = col

	def _check_free(self, name, ignore=None):
		existing = self._lookup.get(name_key(name))
		if existing is not None and existing is not ignore:
			raise DuplicateNameError(f"Column '{name}' already exists")

	def _resolve(self, column) -> DataColumn:
		"""Return the registered descriptor for a name or descriptor, or raise."""
		if isinstance(column, DataColumn):
			for col in self._columns:
				if col is column:
					return col
			found = self.find(column.name)
		else:
			found = self.find(column)
		if found is None:
			name = column.name if isinstance(column, DataColumn) else column
			raise _missing_col_error(name)
		return found

	def _add(self, column: DataColumn) -> DataColumn:
		"""Append a descriptor; raises DuplicateNameError if the name is taken."""
		self._check_free(column.name)
		self._columns.append(column)
		self._reindex()
		return column

	def _insert(self, index: int, column: DataColumn) -> DataColumn:
		"""Insert a descriptor at ``index`` (0 <= index <= len)."""
		if not 0 <= index <= len(self._columns):
			raise DataTableIndexError(
				f"Column position {index} out of range [0, {len(self._columns)}]"
			)
		self._check_free(column.name)
		self._columns.insert(index, column)
		self._reindex()
		return column

	def _remove(self, column) -> int:
		"""Remove a descriptor by name or identity; returns its former position."""
		col = self._resolve(column)
		idx = col.column_index
		del self._columns[idx]
		col.column_index = -1
		self._reindex()
		return idx

	def _rename(self, column, new_name: str) -> str:
		"""Change a descriptor's name in place; returns the old name.

		Order and position do not change.
		"""
		if not isinstance(new_name, str):
			raise DataTableTypeError(f"Column name must be a string, not {type(new_name).__name__}")
		col = self._resolve(column)
		self._check_free(new_name, ignore=col)
		old_name = col.name
		col._name = new_name
		self._reindex()
		return old_name

	def find(self, name) -> Optional[DataColumn]:
		"""Look a column up by name; returns None when absent."""
		if not isinstance(name, str):
			return None
		return self._lookup.get(name_key(name))

	def index_of(self, name) -> int:
		"""Position of the named column, or -1."""
		col = self.find(name)
		return -1 if col is None else col.column_index

	def names(self) -> List[str]:
		return [col.name for col in self._columns]

	def joined(self) -> List[DataColumn]:
		return [col for col in self._columns if col.joined]

	def __getitem__(self, key) -> DataColumn:
		if isinstance(key, int):
			try:
				return self._columns[key]
			except IndexError:
				raise DataTableIndexError(
					f"Column position {key} out of range for {len(self._columns)} columns"
				) from None
		if isinstance(key, str):
			col = self.find(key)
			if col is None:
				raise _missing_col_error(key)
			return col
		raise DataTableTypeError(f"Column key must be int or str, not {type(key).__name__}")

	def __contains__(self, item) -> bool:
		if isinstance(item, DataColumn):
			return any(col is item for col in self._columns)
		return self.find(item) is not None

	def __iter__(self) -> Iterator[DataColumn]:
		return iter(list(self._columns))

	def __len__(self):
		return len(self._columns)

	def __repr__(self):
		return f"DataColumnCollection({', '.join(repr(n) for n in self.names())})"
