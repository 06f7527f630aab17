from datetime import date, datetime

import pytest

from py_datatable import DataRow, DataType
from py_datatable.errors import DataTableTypeError, DataTableValueError
from py_datatable.naming import build_attribute_map
from py_datatable.typing import default_value, infer_dtype, validate_scalar


@pytest.mark.parametrize("spec, expected", [
	(DataType.FLOAT, DataType.FLOAT),
	(int, DataType.INTEGER),
	(date, DataType.DATE),
	(dict, DataType.OBJECT),
	("Double", DataType.FLOAT),
	(" text ", DataType.STRING),
	("long", DataType.INTEGER),
])
def test_parse(spec, expected):
	assert DataType.parse(spec) is expected


def test_parse_rejects_unknown():
	with pytest.raises(DataTableValueError):
		DataType.parse("money")
	with pytest.raises(DataTableTypeError):
		DataType.parse(3)


def test_infer_dtype():
	assert infer_dtype([1, 2]) is DataType.INTEGER
	assert infer_dtype([1, 2.5, None]) is DataType.FLOAT
	assert infer_dtype([True, False]) is DataType.BOOLEAN
	assert infer_dtype([date(2020, 1, 1)]) is DataType.DATE
	assert infer_dtype(["a", 1]) is DataType.OBJECT
	assert infer_dtype([]) is DataType.OBJECT


def test_defaults():
	assert default_value(DataType.STRING) == ""
	assert default_value(DataType.INTEGER) == 0
	assert default_value(DataType.FLOAT) == 0
	assert default_value(DataType.OBJECT) == 0
	assert default_value(DataType.BOOLEAN) is True
	assert isinstance(default_value(DataType.DATE), datetime)


def test_cell_kind_need_not_match_column():
	assert validate_scalar("12", DataType.INTEGER) == "12"
	assert validate_scalar(None, DataType.DATE) is None
	with pytest.raises(DataTableTypeError):
		validate_scalar(object(), DataType.STRING)


def test_attribute_names():
	names = ["Station ID", "station-id", "2nd", "!!!"]
	assert build_attribute_map(names) == {
		"station_id": 0,
		"station_id__2": 1,
		"c2nd": 2,
		"col3_": 3,
	}


def test_row_attribute_access():
	row = DataRow(["Station ID", "value"])
	row["Station ID"] = "A1"
	assert row.station_id == "A1"
	assert row.VALUE is None
	with pytest.raises(AttributeError):
		row.missing
	with pytest.raises(AttributeError):
		row.value = 3
