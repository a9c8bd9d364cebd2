"""Relationship type canonicalization (``PR_FS`` -> ``FS``)."""
from __future__ import annotations

from typing import Any, FrozenSet

CANONICAL_REL_TYPES: FrozenSet[str] = frozenset({"FS", "SS", "FF", "SF"})


def normalize_rel_type(raw: Any) -> Any:
    """Strip a vendor prefix, keeping the token after the last underscore.

    Falsy input is returned unchanged. Membership in the canonical vocabulary
    is not enforced here.
    """

    if not raw:
        return raw
    text = raw if isinstance(raw, str) else str(raw)
    _, separator, suffix = text.rpartition("_")
    return suffix if separator else text


def is_canonical_rel_type(value: Any) -> bool:
    return isinstance(value, str) and value in CANONICAL_REL_TYPES
