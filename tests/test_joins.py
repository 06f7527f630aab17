import pytest
from py_datatable import DataTable, DataType
from py_datatable.errors import JoinKeyWarning, UnsetValueError


def _left():
	return DataTable.from_dict({"id": [1, 2, 3], "name": ["a", "b", "c"]}, name="A")


def _right():
	return DataTable.from_dict({"id": [2, 3, 3], "x": [20, 30, 31]}, name="B")


def test_join_first_match_wins():
	"""Rows pick the first matching key in the other table"""
	a = _left()
	assert a.join(_right(), "id") is True
	assert a.column_names() == ["id", "name", "x"]
	assert list(a["x"]) == [None, 20, 30]


def test_joined_columns_are_flagged():
	a = _left()
	a.join(_right(), "id")
	assert a.columns["x"].joined
	assert a.columns["x"].dtype is DataType.INTEGER
	assert not a.columns["id"].joined


def test_join_different_key_names():
	a = _left()
	b = DataTable.from_dict({"key": ["3", "1"], "label": ["three", "one"]})
	a.join(b, "id", "key")
	# Keys are compared as text, so integer 3 matches "3"
	assert list(a["label"]) == ["one", None, "three"]
	assert list(a["key"]) == ["1", None, "3"]


def test_join_without_update_leaves_common_columns():
	a = _left()
	b = DataTable.from_dict({"id": [1], "name": ["ONE"], "x": [10]})
	a.join(b, "id")
	assert list(a["name"]) == ["a", "b", "c"]
	assert list(a["x"]) == [10, None, None]


def test_join_with_update_overwrites_common_columns():
	a = _left()
	b = DataTable.from_dict({"id": [1], "name": ["ONE"], "x": [10]})
	a.join(b, "id", update_existing=True)
	assert list(a["name"]) == ["ONE", "b", "c"]
	assert list(a["x"]) == [10, None, None]


def test_remove_join_restores_column_count():
	a = _left()
	a.join(_right(), "id")
	a.remove_join()
	assert a.column_names() == ["id", "name"]
	for row in a.rows:
		assert len(row) == 2


def test_remove_join_does_not_revert_updates():
	a = _left()
	b = DataTable.from_dict({"id": [2], "name": ["TWO"], "extra": [True]})
	a.join(b, "id", update_existing=True)
	a.remove_join()
	assert a.column_names() == ["id", "name"]
	assert list(a["name"]) == ["a", "TWO", "c"]


def test_remove_join_keeps_columns_added_afterwards():
	a = _left()
	a.join(_right(), "id")
	a.add_column("mine", DataType.STRING)
	a.remove_join()
	assert a.column_names() == ["id", "name", "mine"]


@pytest.mark.parametrize("this_key, other_key", [("nope", "id"), ("id", "nope")])
def test_missing_key_warns_and_changes_nothing(this_key, other_key):
	a = _left()
	b = _right()
	with pytest.warns(JoinKeyWarning):
		assert a.join(b, this_key, other_key) is False
	assert a.column_names() == ["id", "name"]
	assert b.column_names() == ["id", "x"]


def test_unmatched_rows_render_fails_until_filled():
	a = _left()
	a.join(_right(), "id")
	with pytest.raises(UnsetValueError):
		a.to_string()
	a.set_value(0, "x", 0)
	assert a.to_string().splitlines()[1] == "1,a,0"
