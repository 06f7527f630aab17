"""
Cloning and text rendering.
"""

import copy
import math
import os
from datetime import datetime

import pytest
from py_datatable import DataRow, DataTable, DataType, Field
from py_datatable.errors import DataTableValueError, UnsetValueError


def _table():
	t = DataTable.from_dict({
		"id": [1, 2],
		"name": ["a", "b"],
		"value": [1.25, 2.5],
		"ok": [True, False],
	}, name="sample")
	t.tag = "layer-1"
	return t


class TestClone:

	def test_clone_is_identical(self):
		t = _table()
		c = t.clone()
		assert c.name == "sample"
		assert c.tag == "layer-1"
		assert c.column_names() == t.column_names()
		assert [col.dtype for col in c.columns] == [col.dtype for col in t.columns]
		assert [r.values() for r in c.rows] == [r.values() for r in t.rows]
		assert [r.row_index for r in c.rows] == [r.row_index for r in t.rows]

	def test_clone_is_independent(self):
		t = _table()
		c = t.clone()
		c.set_value(0, "name", "z")
		c.add_column("extra", DataType.INTEGER)
		c.rename_column("id", "key")
		c.remove_row(1)
		assert t.column_names() == ["id", "name", "value", "ok"]
		assert t.get_value(0, "name") == "a"
		assert t.row_count == 2
		assert len(t.rows[0]) == 4

	def test_clone_does_not_share_object_cells(self):
		t = DataTable()
		t.add_column("payload", DataType.OBJECT)
		t.add_row()["payload"] = {"k": [1]}
		c = t.clone()
		c.get_value(0, "payload")["k"].append(2)
		assert t.get_value(0, "payload") == {"k": [1]}

	def test_copy_module(self):
		t = _table()
		assert copy.copy(t).column_names() == t.column_names()
		assert copy.deepcopy(t) is not t

	def test_clone_keeps_join_flag_and_row_counter(self):
		t = _table()
		t.join(DataTable.from_dict({"id": [1], "w": [3]}), "id")
		t.remove_row(0)
		c = t.clone()
		assert c.columns["w"].joined
		assert c.add_row().row_index == t.add_row().row_index


class TestCloneTableField:

	def test_columns_become_fields(self):
		t = _table()
		t.columns["name"].read_only = True
		t.columns["name"].caption = "Name"
		c = t.clone_table_field()
		assert all(isinstance(col, Field) for col in c.columns)
		name = c.columns["name"]
		assert name.read_only
		assert name.caption == "Name"
		assert name.column_index == 1
		assert name.field_type == "C"
		assert c.columns["value"].field_type == "N"
		assert c.columns["value"].decimal_count == 6
		assert c.columns["ok"].field_type == "L"
		assert [r.values() for r in c.rows] == [r.values() for r in t.rows]


class TestToString:

	def test_header_and_rows(self):
		lines = _table().to_string().split(os.linesep)
		assert lines == ["id,name,value,ok", "1,a,1.25,True", "2,b,2.5,False"]

	def test_str_matches_to_string(self):
		t = _table()
		assert str(t) == t.to_string()

	def test_decimal_places(self):
		t = DataTable()
		t.add_column("f", DataType.FLOAT)
		t.add_column("n", DataType.INTEGER)
		for value in ["3.14159", "abc", 2.5]:
			row = t.add_row()
			row["f"] = value
			row["n"] = 7
		lines = t.to_string(2).split(os.linesep)
		assert lines == ["f,n", "3.14,7", ",7", "2.50,7"]

	def test_decimal_places_zero(self):
		t = DataTable.from_dict({"f": [2.5, 0.4]})
		assert t.to_string(0).split(os.linesep)[1:] == ["3", "0"]

	def test_decimal_places_on_large_values(self):
		t = DataTable.from_dict({"f": [1e30, 123456789012345678.0]})
		assert t.to_string(2).split(os.linesep)[1] == "1" + "0" * 30 + ".00"
		assert t.to_string(12).split(os.linesep)[2] == "123456789012345680.000000000000"

	def test_negative_decimal_places(self):
		with pytest.raises(DataTableValueError):
			_table().to_string(-1)

	def test_unset_cell_is_fatal(self):
		t = _table()
		t.append_row(DataRow(["id"]))
		with pytest.raises(UnsetValueError):
			t.to_string()
		with pytest.raises(UnsetValueError):
			t.to_string(2)

	def test_empty_table(self):
		t = DataTable()
		t.add_column("a")
		assert t.to_string() == "a"

	def test_repr_preview(self):
		text = repr(_table())
		assert text.splitlines()[0].split() == ["id", "name", "value", "ok"]
		assert text.endswith("# 2×4 table <integer, string, float, boolean>")

	def test_repr_with_non_finite_floats(self):
		t = DataTable.from_dict({"f": [1.0, math.nan, math.inf, -math.inf]})
		body = [line.strip() for line in repr(t).splitlines()[1:5]]
		assert body == ["1.0", "nan", "inf", "-inf"]

	def test_repr_shows_unset_cells(self):
		t = DataTable.from_dict({"a": [1]})
		t.add_column("b", DataType.STRING)
		t.set_value(0, "b", None)
		assert "None" in repr(t)


class TestSaveAsCSV:

	def test_appends_extension(self, tmp_path):
		path = _table().save_as_csv(tmp_path / "out")
		assert path.name == "out.csv"
		with open(path, newline="") as f:
			assert f.read() == os.linesep.join(["id,name,value,ok", "1,a,1.25,True", "2,b,2.5,False"])

	def test_keeps_existing_extension(self, tmp_path):
		path = _table().save_as_csv(str(tmp_path / "data.csv"))
		assert path.name == "data.csv"

	def test_unset_cell_writes_nothing(self, tmp_path):
		t = DataTable()
		t.add_column("a", DataType.DATE)
		t.add_row()
		t.set_value(0, "a", None)
		with pytest.raises(UnsetValueError):
			t.save_as_csv(tmp_path / "bad")
		assert not (tmp_path / "bad.csv").exists()


def test_date_default_renders():
	t = DataTable()
	t.add_column("when", DataType.DATE)
	t.add_row()
	value = t.get_value(0, "when")
	assert isinstance(value, datetime)
	assert t.to_string().split(os.linesep)[1] == str(value)
