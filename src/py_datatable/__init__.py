"""
py-datatable: an in-memory table of typed columns and rows

Built for analysis code that needs a small, mutable, schema-aware table:
columns can be added, inserted, removed and renamed at any time, rows are
filtered with a SQL-like expression (or any predicate), and two tables can
be joined on a key column.

Main classes:
    - DataTable: the table; all schema and row mutation goes through it
    - DataColumn / DataColumnCollection: column descriptors and registry
    - DataRow / DataRowCollection: rows and the row store
    - ColumnData: one column's values materialized across rows
    - SQLExpression: the default filter expression predicate
    - Field: attribute-table column produced by DataTable.clone_table_field
"""

from .column import DataColumn, DataColumnCollection
from .errors import (
	ConstructionError,
	DataTableError,
	DataTableIndexError,
	DataTableKeyError,
	DataTableTypeError,
	DataTableValueError,
	DataTableWarning,
	DuplicateNameError,
	ExpressionSyntaxError,
	JoinKeyWarning,
	UnsetValueError,
)
from .expression import Predicate, SQLExpression
from .field import Field
from .projection import ColumnData
from .row import DataRow, DataRowCollection
from .table import DataTable
from .typing import DataType

__version__ = "0.1.0"
__all__ = [
	"DataTable",
	"DataColumn",
	"DataColumnCollection",
	"DataRow",
	"DataRowCollection",
	"ColumnData",
	"DataType",
	"Field",
	"Predicate",
	"SQLExpression",
	"ConstructionError",
	"DataTableError",
	"DataTableIndexError",
	"DataTableKeyError",
	"DataTableTypeError",
	"DataTableValueError",
	"DataTableWarning",
	"DuplicateNameError",
	"ExpressionSyntaxError",
	"JoinKeyWarning",
	"UnsetValueError",
]
