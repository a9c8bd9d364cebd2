"""Read-only raw record container with tagged value variants.

Raw schedule exports arrive as decoded JSON-like trees whose field names and
value types differ per vendor. ``RawRecord`` wraps one decoded object and
exposes every field as a ``RawValue`` so resolution and coercion work over a
closed set of kinds instead of ad-hoc ``isinstance`` checks.
"""
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterator, Mapping

logger = logging.getLogger(__name__)


class ValueKind(str, Enum):
    ABSENT = "absent"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    DATETIME = "datetime"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True, slots=True)
class RawValue:
    """Single raw field value tagged with its kind."""

    kind: ValueKind
    payload: Any = None

    @classmethod
    def absent(cls) -> "RawValue":
        return _ABSENT

    @classmethod
    def of(cls, obj: Any) -> "RawValue":
        if obj is None:
            return cls(ValueKind.NULL)
        # bool subclasses int, so it has to be checked first
        if isinstance(obj, bool):
            return cls(ValueKind.BOOLEAN, obj)
        if isinstance(obj, numbers.Number):
            return cls(ValueKind.NUMBER, obj)
        if isinstance(obj, str):
            return cls(ValueKind.STRING, obj)
        if isinstance(obj, date):
            return cls(ValueKind.DATETIME, obj)
        if isinstance(obj, (list, tuple)):
            return cls(ValueKind.ARRAY, obj)
        return cls(ValueKind.OBJECT, obj)

    @property
    def is_empty(self) -> bool:
        if self.kind in (ValueKind.ABSENT, ValueKind.NULL):
            return True
        return self.kind is ValueKind.STRING and self.payload == ""

    @property
    def is_nan(self) -> bool:
        if self.kind is not ValueKind.NUMBER:
            return False
        try:
            return math.isnan(self.payload)
        except TypeError:
            return False


_ABSENT = RawValue(ValueKind.ABSENT)


class RawRecord(Mapping[str, Any]):
    """Read-only view over one decoded record.

    Item access returns the plain decoded value, which keeps custom resolver
    functions simple; ``value()`` returns the tagged ``RawValue``.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data

    @classmethod
    def wrap(cls, item: Any) -> "RawRecord":
        if isinstance(item, RawRecord):
            return item
        if isinstance(item, Mapping):
            return cls(item)
        logger.debug("Treating non-object record of type %s as empty", type(item).__name__)
        return cls({})

    def value(self, key: str) -> RawValue:
        if key not in self._data:
            return RawValue.absent()
        return RawValue.of(self._data[key])

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RawRecord({dict(self._data)!r})"
