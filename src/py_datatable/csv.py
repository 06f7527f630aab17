"""Comma-delimited export of a DataTable."""

from __future__ import annotations
import os
from pathlib import Path

from .display import render_lines


CSV_EXTENSION = ".csv"


def save_as_csv(table, file_name) -> Path:
	"""Write the table as CSV and return the path written.

	``.csv`` is appended when the name does not already end with it. Lines
	are separated with the platform line separator. Every cell must hold a
	value (see ``DataTable.to_string``).
	"""
	file_name = os.fspath(file_name)
	if not file_name.endswith(CSV_EXTENSION):
		file_name = file_name + CSV_EXTENSION

	# Render before opening so a failing cell leaves no half-written file
	text = os.linesep.join(render_lines(table))
	path = Path(file_name)
	with open(path, "w", newline="", encoding="utf-8") as f:
		f.write(text)
	return path
