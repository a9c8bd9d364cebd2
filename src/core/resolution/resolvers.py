"""Field resolver variants: ordered candidate names or a custom function."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Mapping, Optional, Sequence, Tuple, Union

from common.errors import BackendError, ErrorCode
from common.records import RawRecord


class ResolverKind(str, Enum):
    CANDIDATE_LIST = "candidate_list"
    CUSTOM_FN = "custom_fn"


@dataclass(frozen=True, slots=True)
class CandidateList:
    """Returns the first candidate field holding a non-empty value."""

    kind: ClassVar[ResolverKind] = ResolverKind.CANDIDATE_LIST

    names: Tuple[str, ...]

    def resolve(self, record: RawRecord) -> Any:
        for name in self.names:
            value = record.value(name)
            if not value.is_empty:
                return value.payload
        return None


@dataclass(frozen=True, slots=True)
class CustomResolver:
    """Delegates to a caller-supplied extraction function.

    The result is returned verbatim and exceptions raised by ``fn`` propagate
    to the caller untouched.
    """

    kind: ClassVar[ResolverKind] = ResolverKind.CUSTOM_FN

    fn: Callable[[RawRecord], Any]

    def resolve(self, record: RawRecord) -> Any:
        return self.fn(record)


FieldResolver = Union[CandidateList, CustomResolver]
ResolverSpec = Union[FieldResolver, str, Sequence[str], Callable[[RawRecord], Any], None]


def resolve(record: Union[RawRecord, Mapping[str, Any]], resolver: Optional[FieldResolver]) -> Any:
    """Resolve one canonical field out of a raw record.

    An absent resolver yields ``None`` without inspecting the record.
    """

    if resolver is None:
        return None
    return resolver.resolve(RawRecord.wrap(record))


def as_resolver(spec: ResolverSpec, *, field: str = "") -> Optional[FieldResolver]:
    """Build a resolver variant from configuration input."""

    if spec is None:
        return None
    if isinstance(spec, (CandidateList, CustomResolver)):
        return spec
    if isinstance(spec, str):
        return CandidateList((spec,))
    if callable(spec):
        return CustomResolver(spec)
    if isinstance(spec, Sequence):
        names = tuple(spec)
        bad = [name for name in names if not isinstance(name, str)]
        if bad:
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Candidate names for '{field}' must be strings, got {bad!r}",
                context={"field": field},
            )
        return CandidateList(names)
    raise BackendError(
        ErrorCode.CONFIG_ERROR,
        f"Unsupported resolver for '{field}': {type(spec).__name__}",
        context={"field": field},
    )
