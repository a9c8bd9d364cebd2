"""Scalar coercers and relationship type canonicalization."""

from .rel_types import CANONICAL_REL_TYPES, is_canonical_rel_type, normalize_rel_type
from .scalars import parse_date, to_flag, to_number, to_text, to_text_list

__all__ = [
    "CANONICAL_REL_TYPES",
    "is_canonical_rel_type",
    "normalize_rel_type",
    "parse_date",
    "to_flag",
    "to_number",
    "to_text",
    "to_text_list",
]
