import warnings

from .column import DataColumn, DataColumnCollection, _missing_col_error
from .errors import (
	ConstructionError,
	DataTableError,
	DataTableTypeError,
	DataTableValueError,
	JoinKeyWarning,
)
from .expression import SQLExpression
from .field import Field
from .projection import ColumnData
from .row import DataRow, DataRowCollection
from .typing import DataType, default_value, infer_dtype


def _unset(column):
	return None


def _type_default(column):
	return default_value(column.dtype)


def _as_predicate(predicate):
	"""Turn an expression string, an object with eval(), or a callable into a callable."""
	if isinstance(predicate, str):
		return SQLExpression(predicate).eval
	evaluate = getattr(predicate, "eval", None)
	if callable(evaluate):
		return evaluate
	if callable(predicate):
		return predicate
	raise DataTableTypeError(
		f"Predicate must be an expression string, an object with eval(), or a callable, "
		f"not {type(predicate).__name__}"
	)


class DataTable:
	"""
	In-memory table of typed columns and rows.

	The table is the only place schema changes happen: adding, removing or
	renaming a column updates the column registry and then every row, so
	each row always holds exactly one value per column.

	Examples
	--------
	>>> t = DataTable("stations")
	>>> t.add_column("id", DataType.INTEGER)
	DataColumn('id', <integer>)
	>>> row = t.add_row()
	>>> row["id"]
	0
	"""

	def __init__(self, name="", tag=None, read_only=False):
		self.name = name
		self.tag = tag
		self.read_only = read_only
		self._columns = DataColumnCollection()
		self._rows = DataRowCollection()
		self._next_row_index = 0

	@classmethod
	def from_dict(cls, data, name="", dtypes=None):
		"""
		Build a table from ``{column name: values}``.

		Column types are inferred from the values unless given in ``dtypes``
		(``{column name: DataType}``). All value lists must have the same
		length.
		"""
		dtypes = dtypes or {}
		lengths = {len(values) for values in data.values()}
		if len(lengths) > 1:
			raise DataTableValueError(f"All columns must have the same length, got {sorted(lengths)}")

		table = cls(name)
		for col_name, values in data.items():
			table.add_column(col_name, dtypes.get(col_name) or infer_dtype(values))
		nrows = lengths.pop() if lengths else 0
		for i in range(nrows):
			row = table.add_row()
			for col_name, values in data.items():
				row.set_value(col_name, values[i])
		return table

	# ------------------------------------------------------------------
	# Shape and lookup
	# ------------------------------------------------------------------

	@property
	def columns(self) -> DataColumnCollection:
		return self._columns

	@property
	def rows(self) -> DataRowCollection:
		return self._rows

	@property
	def row_count(self) -> int:
		return len(self._rows)

	@property
	def column_count(self) -> int:
		return len(self._columns)

	@property
	def total_count(self) -> int:
		"""Number of cells, rows times columns."""
		return len(self._rows) * len(self._columns)

	def column_names(self):
		return self._columns.names()

	def find_column(self, name):
		"""Column with this name (case-insensitive), or None."""
		if isinstance(name, DataColumn):
			name = name.name
		return self._columns.find(name)

	def _require_column(self, column) -> DataColumn:
		col = self.find_column(column)
		if col is None:
			name = column.name if isinstance(column, DataColumn) else column
			raise _missing_col_error(name, context=f"DataTable '{self.name}'")
		return col

	def get_value(self, row: int, column):
		return self._rows[row].get_value(column)

	def set_value(self, row: int, column, value):
		self._rows[row].set_value(column, value)

	# ------------------------------------------------------------------
	# Schema mutation
	# ------------------------------------------------------------------

	def _insert_column(self, column: DataColumn, index, fill):
		if index is None:
			self._columns._add(column)
		else:
			self._columns._insert(index, column)
		for row in self._rows:
			row._add_slot(column, fill(column), index=column.column_index)
		return column

	def add_column(self, column, dtype=DataType.STRING, index=None) -> DataColumn:
		"""
		Add a column and give every existing row a default-typed value for it.

		Parameters
		----------
		column : str or DataColumn
			Name of the new column, or a ready descriptor (``dtype`` is then
			ignored)
		dtype : DataType, type or str
		index : int, optional
			Insert position; appended when omitted

		Raises
		------
		DuplicateNameError
			If a column with that name (case-insensitively) exists
		"""
		if isinstance(column, DataColumn):
			if column.column_index >= 0:
				# Registered in another table; give this table its own descriptor
				column = column.clone()
		else:
			column = DataColumn(column, dtype)
		return self._insert_column(column, index, _type_default)

	def remove_column(self, column):
		"""Remove a column (by name or descriptor) and its value from every row."""
		col = self._require_column(column)
		position = self._columns._remove(col)
		for row in self._rows:
			row._remove_slot(position)
		return col

	def rename_column(self, column, new_name):
		"""Rename a column; position and values are unchanged."""
		col = self._require_column(column)
		old_name = self._columns._rename(col, new_name)
		for row in self._rows:
			row._rename_slot(old_name, new_name)
		return col

	# ------------------------------------------------------------------
	# Rows
	# ------------------------------------------------------------------

	def _take_row_index(self) -> int:
		# Stays ahead of the row count even after rows were removed
		self._next_row_index = max(self._next_row_index, len(self._rows))
		index = self._next_row_index
		self._next_row_index += 1
		return index

	def new_row(self) -> DataRow:
		"""
		Create a row laid out like this table, holding type-directed defaults.

		The row is not stored yet; pass it to ``add_row`` once filled.
		"""
		row = DataRow(self._columns)
		for col in self._columns:
			row.set_value(col.column_index, default_value(col.dtype))
		return row

	def _attach(self, row: DataRow, fill):
		if not isinstance(row, DataRow):
			raise DataTableTypeError(f"Expected a DataRow, got {type(row).__name__}")
		if row.table is not None:
			raise DataTableValueError("Row already belongs to a table")
		try:
			row._rebind(self._columns, fill)
		except DataTableError as exc:
			raise ConstructionError(f"Row does not fit table '{self.name}': {exc}") from exc
		row.row_index = self._take_row_index()
		row.table = self
		self._rows.append(row)
		return row

	def add_row(self, row=None) -> DataRow:
		"""
		Store a row, assigning it the next row index.

		Without an argument a fresh ``new_row()`` is stored. Columns the row
		lacks get type-directed defaults.
		"""
		if row is None:
			row = self.new_row()
		return self._attach(row, _type_default)

	def append_row(self, row: DataRow) -> DataRow:
		"""
		Store an externally built row whose columns may be a subset of the
		table's. Missing columns are left unset (None), unlike ``add_row``.
		"""
		return self._attach(row, _unset)

	def remove_row(self, position: int) -> DataRow:
		"""Remove the row at ``position``. Other rows keep their row index."""
		row = self._rows.remove_at(position)
		row.table = None
		return row

	# ------------------------------------------------------------------
	# Selection
	# ------------------------------------------------------------------

	def select(self, predicate, columns=None):
		"""
		Rows for which ``predicate`` holds, in table order.

		``predicate`` is an expression string (see ``SQLExpression``), an
		object with ``eval(mapping)``, or a callable taking the mapping. Each
		row's ``row_index`` is reset to its current position on the way.

		With ``columns`` (names or descriptors) a new DataTable holding just
		those columns, in that order, is returned instead.
		"""
		evaluate = _as_predicate(predicate)
		selected = []
		for position, row in enumerate(self._rows):
			row.row_index = position
			if evaluate(row.item_map()):
				selected.append(row)

		if columns is None:
			return selected
		return self._rows_to_table(selected, columns)

	def _rows_to_table(self, rows, columns):
		result = DataTable(self.name)
		for column in columns:
			template = column if isinstance(column, DataColumn) else self._require_column(column)
			result.add_column(DataColumn(template.name, template.dtype, caption=template.caption))

		for position, source in enumerate(rows):
			try:
				row = result.new_row()
				row.copy_from(source)
				result.add_row(row)
			except DataTableError as exc:
				raise ConstructionError(
					f"Could not copy selected row {position}: {exc}", partial=result
				) from exc
		return result

	# ------------------------------------------------------------------
	# Join
	# ------------------------------------------------------------------

	def join(self, other, this_key, other_key=None, update_existing=False) -> bool:
		"""
		Pull the columns of ``other`` into this table, matching rows on keys.

		Columns of ``other`` missing here are appended and flagged
		``joined``. Each row of this table is matched to the FIRST row of
		``other`` whose key has the same text; later duplicates in ``other``
		are never used. On a match the joined columns are filled in, or,
		with ``update_existing``, every column the tables share is
		overwritten. Unmatched rows hold None in the joined columns.

		If a key column does not exist a JoinKeyWarning is issued, nothing
		changes, and False is returned.
		"""
		if other_key is None:
			other_key = this_key
		col_this = self.find_column(this_key)
		if col_this is None:
			warnings.warn(f"There is no column '{this_key}' in this table; join skipped",
				JoinKeyWarning, stacklevel=2)
			return False
		col_in = other.find_column(other_key)
		if col_in is None:
			warnings.warn(f"There is no column '{other_key}' in the joined table; join skipped",
				JoinKeyWarning, stacklevel=2)
			return False

		values_this = self.get_column_data(col_this).as_text()
		values_in = other.get_column_data(col_in).as_text()

		new_names = []
		for col in other.columns:
			if self.find_column(col.name) is None:
				new_col = DataColumn(col.name, col.dtype, caption=col.caption, joined=True)
				self._insert_column(new_col, None, _unset)
				new_names.append(col.name)

		names = other.column_names() if update_existing else new_names
		for i, row in enumerate(self._rows):
			try:
				idx = values_in.index(values_this[i])
			except ValueError:
				continue
			source = other.rows[idx]
			for name in names:
				row.set_value(name, source.get_value(name))
		return True

	def remove_join(self):
		"""Drop every column added by ``join``.

		Values an ``update_existing`` join wrote into shared columns stay.
		"""
		for col in self._columns.joined():
			self.remove_column(col)

	# ------------------------------------------------------------------
	# Column projections
	# ------------------------------------------------------------------

	def get_column_data(self, column, rows=None) -> ColumnData:
		"""Values of one column across ``rows`` (default: all rows), in order."""
		col = self._require_column(column)
		if rows is None:
			rows = self._rows
		return ColumnData(col, (row.get_value(col.name) for row in rows))

	def add_column_data(self, column_data: ColumnData) -> DataColumn:
		"""
		Add a column from a projection, writing values row by row.

		Extra projection values are dropped; rows beyond the projection keep
		their defaults.
		"""
		col = self.add_column(column_data.name, column_data.dtype)
		for i, row in enumerate(self._rows):
			if i >= len(column_data):
				break
			row.set_value(col.column_index, column_data[i])
		return col

	def _column_stat(self, column, where, stat):
		rows = self._rows if where is None else self.select(where)
		return stat(self.get_column_data(column, rows))

	def max(self, column, where=None):
		"""Largest numeric value of a column, optionally over selected rows."""
		return self._column_stat(column, where, ColumnData.max)

	def min(self, column, where=None):
		return self._column_stat(column, where, ColumnData.min)

	def avg(self, column, where=None):
		return self._column_stat(column, where, ColumnData.mean)

	# ------------------------------------------------------------------
	# Copies
	# ------------------------------------------------------------------

	def _copy_rows_into(self, table):
		for position, source in enumerate(self._rows):
			try:
				row = table.new_row()
				row.copy_from(source, deep=True)
				table.add_row(row)
			except DataTableError as exc:
				raise ConstructionError(
					f"Could not copy row {position}: {exc}", partial=table
				) from exc
			row.row_index = source.row_index
		table._next_row_index = self._next_row_index
		return table

	def clone(self) -> "DataTable":
		"""Independent deep copy: same schema, same values, same row indices."""
		table = DataTable(self.name, tag=self.tag, read_only=self.read_only)
		for col in self._columns:
			table.add_column(col.clone())
		return self._copy_rows_into(table)

	def clone_table_field(self) -> "DataTable":
		"""Copy whose columns are attribute-table Fields.

		Name, caption, position and read-only flag carry over; the joined
		flag does not.
		"""
		table = DataTable(self.name, tag=self.tag, read_only=self.read_only)
		for col in self._columns:
			table.add_column(Field.from_column(col))
		return self._copy_rows_into(table)

	def __copy__(self):
		return self.clone()

	def __deepcopy__(self, memo):
		return self.clone()

	# ------------------------------------------------------------------
	# Text
	# ------------------------------------------------------------------

	def to_string(self, decimal_places=None) -> str:
		"""
		Header line of column names, then one comma-separated line per row.

		With ``decimal_places``, FLOAT columns are written with that many
		fractional digits (non-numeric text there becomes an empty field).
		Raises UnsetValueError if any cell is unset.
		"""
		from .display import to_string
		return to_string(self, decimal_places)

	def save_as_csv(self, file_name):
		from .csv import save_as_csv
		return save_as_csv(self, file_name)

	def __str__(self):
		return self.to_string()

	def __repr__(self):
		from .display import _repr_table
		return _repr_table(self)

	# ------------------------------------------------------------------
	# Python protocol
	# ------------------------------------------------------------------

	def __len__(self):
		return len(self._rows)

	def __iter__(self):
		return iter(self._rows)

	def __contains__(self, name):
		return self.find_column(name) is not None

	def __getitem__(self, key):
		"""
		``t[i]`` -> row, ``t['name']`` -> ColumnData, ``t[i, 'name']`` -> value.
		"""
		if isinstance(key, tuple):
			if len(key) != 2:
				raise DataTableTypeError("Cell indexing takes exactly (row, column)")
			return self.get_value(*key)
		if isinstance(key, (str, DataColumn)):
			return self.get_column_data(key)
		if isinstance(key, int) and not isinstance(key, bool):
			return self._rows[key]
		raise DataTableTypeError(f"Table indices must be int, str or (row, column), not {type(key).__name__}")

	def __setitem__(self, key, value):
		if not (isinstance(key, tuple) and len(key) == 2):
			raise DataTableTypeError("Only single cells can be assigned: t[row, column] = value")
		self.set_value(key[0], key[1], value)

