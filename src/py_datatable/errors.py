class DataTableError(Exception):
	"""Base exception for py-datatable library."""
	pass


class DataTableKeyError(DataTableError, KeyError):
	"""Raised when a column/key is missing."""
	pass


class DataTableTypeError(DataTableError, TypeError):
	"""Raised for invalid types in API calls or unsupported cell values."""
	pass


class DataTableValueError(DataTableError, ValueError):
	"""Raised for invalid values or arguments."""
	pass


class DataTableIndexError(DataTableError, IndexError):
	"""Raised for invalid row or column positions."""
	pass


class DuplicateNameError(DataTableValueError):
	"""Raised when a column name is already taken."""
	pass


class ConstructionError(DataTableError):
	"""Raised when a row or column could not be built during clone/append flows.

	``partial`` holds the target table as far as it got; rows committed before
	the failure stay in it.
	"""

	def __init__(self, message, partial=None):
		super().__init__(message)
		self.partial = partial


class UnsetValueError(DataTableError):
	"""Raised when a cell without a value has to be rendered."""
	pass


class ExpressionSyntaxError(DataTableError, SyntaxError):
	"""Raised for malformed filter expressions."""
	pass


class DataTableWarning(UserWarning):
	"""Base warning for py-datatable diagnostics."""
	pass


class JoinKeyWarning(DataTableWarning):
	"""Emitted when a join key column does not exist; the join is skipped."""
	pass
