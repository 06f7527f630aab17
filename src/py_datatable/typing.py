"""
DataType system for DataTable columns.

Closed design:
  - DataType is a closed set of column kinds (text, integer, float,
    boolean, date/time, generic object)
  - Cells hold one of a closed set of scalar kinds, or None when unset
  - A cell's kind does not have to match its column's declared type;
    the declared type drives defaults and rendering
"""

from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Optional, Type

from .errors import DataTableTypeError, DataTableValueError


class DataType(Enum):
	"""
	Declared type of a DataColumn.

	The member value is the Python kind a well-formed cell of that column
	holds.

	Examples
	--------
	>>> DataType.INTEGER.kind
	<class 'int'>
	>>> DataType.parse("double")
	<DataType.FLOAT>
	"""

	STRING = str
	INTEGER = int
	FLOAT = float
	BOOLEAN = bool
	DATE = datetime
	OBJECT = object

	def __repr__(self):
		return f"<DataType.{self.name}>"

	@property
	def kind(self) -> Type[Any]:
		return self.value

	@property
	def is_numeric(self) -> bool:
		"""True for INTEGER and FLOAT."""
		return self in (DataType.INTEGER, DataType.FLOAT)

	@property
	def is_temporal(self) -> bool:
		return self is DataType.DATE

	@classmethod
	def parse(cls, value) -> "DataType":
		"""
		Resolve a DataType from a member, a Python type or a type name.

		Raises
		------
		DataTableValueError
			If the name is unknown
		DataTableTypeError
			If ``value`` is neither a DataType, a type, nor a string
		"""
		if isinstance(value, DataType):
			return value
		if isinstance(value, type):
			for member in cls:
				if member.kind is value:
					return member
			if issubclass(value, date):
				return cls.DATE
			return cls.OBJECT
		if isinstance(value, str):
			member = _TYPE_NAMES.get(value.strip().lower())
			if member is None:
				raise DataTableValueError(f"Unknown data type name '{value}'")
			return member
		raise DataTableTypeError(
			f"Data type must be a DataType, a type or a name, not {type(value).__name__}"
		)


_TYPE_NAMES = {
	"string": DataType.STRING,
	"str": DataType.STRING,
	"text": DataType.STRING,
	"int": DataType.INTEGER,
	"integer": DataType.INTEGER,
	"long": DataType.INTEGER,
	"short": DataType.INTEGER,
	"float": DataType.FLOAT,
	"double": DataType.FLOAT,
	"decimal": DataType.FLOAT,
	"bool": DataType.BOOLEAN,
	"boolean": DataType.BOOLEAN,
	"date": DataType.DATE,
	"datetime": DataType.DATE,
	"object": DataType.OBJECT,
}


def infer_kind(value: Any) -> Optional[Type]:
	"""
	Classify a single scalar into the closed cell kind set.

	Returns None for None values and ``object`` for anything outside the
	set.
	"""
	if value is None:
		return None

	# Check bool BEFORE int (bool is subclass of int)
	if isinstance(value, bool):
		return bool
	if isinstance(value, int):
		return int
	if isinstance(value, float):
		return float
	if isinstance(value, str):
		return str

	# datetime is a subclass of date; both count as date/time cells
	if isinstance(value, date):
		return datetime

	return object


def infer_dtype(values: Iterable[Any]) -> DataType:
	"""
	Infer the DataType for a column from an iterable of scalars.

	None values are skipped; int and float promote to FLOAT; any other mix
	degrades to OBJECT.

	>>> infer_dtype([1, 2, 3])
	<DataType.INTEGER>
	>>> infer_dtype([1, 2.5, None])
	<DataType.FLOAT>
	>>> infer_dtype([1, "a"])
	<DataType.OBJECT>
	"""
	kinds = {infer_kind(v) for v in values} - {None}
	if not kinds:
		return DataType.OBJECT
	if kinds == {int, float}:
		return DataType.FLOAT
	if len(kinds) == 1:
		return DataType.parse(kinds.pop())
	return DataType.OBJECT


def validate_scalar(value: Any, dtype: DataType) -> Any:
	"""
	Validate a scalar before writing it into a cell of a ``dtype`` column.

	Any kind of the closed cell set is accepted in any column. Values
	outside the set are only allowed in OBJECT columns.

	Raises
	------
	DataTableTypeError
		If value is not a supported cell kind
	"""
	if infer_kind(value) is object and dtype is not DataType.OBJECT:
		raise DataTableTypeError(
			f"Unsupported cell value {value!r} of type {type(value).__name__} "
			f"for column<{dtype.name.lower()}>"
		)
	return value


def default_value(dtype: DataType) -> Any:
	"""
	Value a freshly created row holds for a column of this type.

	>>> default_value(DataType.STRING)
	''
	>>> default_value(DataType.BOOLEAN)
	True
	>>> default_value(DataType.FLOAT)
	0
	"""
	if dtype is DataType.STRING:
		return ""
	if dtype is DataType.DATE:
		return datetime.now()
	if dtype is DataType.BOOLEAN:
		return True
	return 0
