"""Column name matching and the attribute names rows expose."""

from __future__ import annotations
import re


_NON_IDENT = re.compile(r'[^a-z0-9_]+')


def _attribute_base(name) -> str | None:
	"""Lowercased identifier form of a column name, or None if nothing is left.

	"Station ID" -> "station_id", "2nd" -> "c2nd", "!!!" -> None
	"""
	base = _NON_IDENT.sub('_', str(name).lower()).strip('_')
	if not base:
		return None
	if base[0].isdigit():
		base = "c" + base
	return base


def _next_free(base: str, taken: set[str]) -> str:
	# station_id, station_id__2, station_id__3, ...
	candidate = base
	n = 1
	while candidate in taken:
		n += 1
		candidate = f"{base}__{n}"
	return candidate


def build_attribute_map(names) -> dict[str, int]:
	"""Map attribute names to column positions.

	Columns whose name has no identifier characters get the system name
	``col{idx}_``.
	"""
	attribute_map = {}
	taken = set()
	for idx, name in enumerate(names):
		base = None if name is None else _attribute_base(name)
		if base is None:
			attribute_map[f'col{idx}_'] = idx
			continue
		attr = _next_free(base, taken)
		taken.add(attr)
		attribute_map[attr] = idx
	return attribute_map


def name_key(name: str) -> str:
	"""Lookup key for a column name; all name matching is case-insensitive."""
	return name.lower()
