"""File boundary for raw snapshots and normalized artifacts (JSON / YAML)."""

from .json_store import (
	load_compare_input,
	load_document,
	load_raw_snapshot,
	save_json,
	save_normalized_snapshot,
)

__all__ = [
	"load_compare_input",
	"load_document",
	"load_raw_snapshot",
	"save_json",
	"save_normalized_snapshot",
]
