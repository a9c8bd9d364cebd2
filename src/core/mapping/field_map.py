"""Field map configuration: canonical field -> resolver, per entity group."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from common.errors import BackendError, ErrorCode
from common.models import DEFAULT_FIELD_NAMES, FIELD_GROUPS
from core.resolution import CandidateList, FieldResolver, as_resolver

ResolverGroup = Dict[str, Optional[FieldResolver]]
PartialFieldMap = Mapping[str, Optional[Mapping[str, Any]]]


@dataclass(slots=True)
class FieldMap:
    """Resolvers for the ``task``, ``rel`` and ``wbs`` groups."""

    task: ResolverGroup = field(default_factory=dict)
    rel: ResolverGroup = field(default_factory=dict)
    wbs: ResolverGroup = field(default_factory=dict)

    def group(self, name: str) -> ResolverGroup:
        if name not in FIELD_GROUPS:
            raise BackendError(ErrorCode.CONFIG_ERROR, f"Unknown field map group '{name}'")
        return getattr(self, name)

    def copy(self) -> "FieldMap":
        """Structural clone; resolver variants are immutable and shared."""

        return FieldMap(task=dict(self.task), rel=dict(self.rel), wbs=dict(self.wbs))


def _build_defaults() -> FieldMap:
    groups = {
        group: {name: CandidateList(tuple(candidates)) for name, candidates in fields.items()}
        for group, fields in DEFAULT_FIELD_NAMES.items()
    }
    return FieldMap(**groups)


_DEFAULT_FIELD_MAP = _build_defaults()


def default_field_map() -> FieldMap:
    return _DEFAULT_FIELD_MAP.copy()


def merge_field_map(partial: Union[PartialFieldMap, FieldMap, None] = None) -> FieldMap:
    """Overlay a partial configuration onto the defaults.

    Within each group the override replaces resolvers field by field; fields
    the override does not mention keep their default resolver. The result is
    always a fresh object that callers may mutate.
    """

    merged = default_field_map()
    if partial is None:
        return merged
    if isinstance(partial, FieldMap):
        partial = {name: partial.group(name) for name in FIELD_GROUPS}
    if not isinstance(partial, Mapping):
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Field map override must be a mapping, got {type(partial).__name__}",
        )
    for group_name, overrides in partial.items():
        if group_name not in FIELD_GROUPS:
            allowed = ", ".join(FIELD_GROUPS)
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Unknown field map group '{group_name}'. Allowed: {allowed}",
                context={"group": group_name},
            )
        if overrides is None:
            continue
        if not isinstance(overrides, Mapping):
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Field map group '{group_name}' must be a mapping",
                context={"group": group_name},
            )
        group = merged.group(group_name)
        for field_name, spec in overrides.items():
            if field_name not in FIELD_GROUPS[group_name]:
                raise BackendError(
                    ErrorCode.CONFIG_ERROR,
                    f"Unknown canonical field '{group_name}.{field_name}'",
                    context={"group": group_name, "field": field_name},
                )
            group[field_name] = as_resolver(spec, field=f"{group_name}.{field_name}")
    return merged
