"""
Row selection through predicates.
"""

import pytest
from py_datatable import DataTable, DataType, SQLExpression
from py_datatable.errors import ConstructionError, DataTableKeyError, DataTableTypeError


def _people():
	return DataTable.from_dict({
		"name": ["Alice", "Bob", "Charlie", "Dana"],
		"age": [34, 19, 52, 27],
		"city": ["Oslo", "Rome", "Oslo", "Lima"],
	}, name="people")


class TestSelectRows:

	def test_expression_preserves_order(self):
		t = _people()
		rows = t.select("age > 20")
		assert [r["name"] for r in rows] == ["Alice", "Charlie", "Dana"]

	def test_returns_the_stored_rows(self):
		t = _people()
		rows = t.select("city = 'Rome'")
		assert rows[0] is t.rows[1]

	def test_nothing_matches(self):
		assert _people().select("age > 100") == []

	def test_everything_matches(self):
		t = _people()
		assert t.select("age >= 0") == list(t.rows)

	def test_callable_predicate(self):
		t = _people()
		rows = t.select(lambda items: items["city"] == "Oslo")
		assert [r["name"] for r in rows] == ["Alice", "Charlie"]

	def test_predicate_object(self):
		class StartsWith:
			def __init__(self, letter):
				self.letter = letter

			def eval(self, items):
				return items["name"].startswith(self.letter)

		rows = _people().select(StartsWith("D"))
		assert [r["name"] for r in rows] == ["Dana"]

	def test_compiled_expression(self):
		expr = SQLExpression("city = 'Oslo' and age < 40")
		assert [r["name"] for r in _people().select(expr)] == ["Alice"]

	def test_mapping_covers_current_columns(self):
		t = _people()
		t.add_column("vip", DataType.BOOLEAN)
		t.remove_column("city")
		seen = []
		t.select(lambda items: seen.append(sorted(items)) or True)
		assert seen[0] == ["age", "name", "vip"]

	def test_row_index_reset_to_position(self):
		t = _people()
		t.remove_row(0)
		assert [r.row_index for r in t.rows] == [1, 2, 3]
		t.select("age > 0")
		assert [r.row_index for r in t.rows] == [0, 1, 2]

	def test_unknown_column_in_expression(self):
		with pytest.raises(DataTableKeyError):
			_people().select("height > 3")

	def test_bad_predicate_type(self):
		with pytest.raises(DataTableTypeError):
			_people().select(42)


class TestSelectIntoTable:

	def test_restricts_and_orders_columns(self):
		t = _people()
		result = t.select("city = 'Oslo'", ["age", "name"])
		assert isinstance(result, DataTable)
		assert result.column_names() == ["age", "name"]
		assert [r.values() for r in result.rows] == [[34, "Alice"], [52, "Charlie"]]

	def test_result_is_independent(self):
		t = _people()
		result = t.select("age > 0", ["name"])
		result.set_value(0, "name", "Zed")
		assert t.get_value(0, "name") == "Alice"

	def test_descriptor_templates_keep_defaults_for_missing_columns(self):
		from py_datatable import DataColumn
		t = _people()
		result = t.select("age < 20", [t.columns["name"], DataColumn("score", DataType.FLOAT)])
		assert result.rows[0].values() == ["Bob", 0]

	def test_unknown_column_name(self):
		with pytest.raises(DataTableKeyError):
			_people().select("age > 0", ["height"])

	def test_copy_failure_reports_partial_table(self):
		from py_datatable import DataColumn
		t = DataTable()
		t.add_column("v", DataType.OBJECT)
		t.add_row()["v"] = 1
		t.add_row()["v"] = {"not": "scalar"}
		with pytest.raises(ConstructionError) as info:
			t.select(lambda items: True, [DataColumn("v", DataType.INTEGER)])
		assert info.value.partial.row_count == 1


def test_select_with_non_ascii_literal():
	t = DataTable.from_dict({"name": ["José", "Bob"]})
	assert [r["name"] for r in t.select('name = "José"')] == ["José"]
