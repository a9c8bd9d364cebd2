"""Field map <-> plain dict conversion for config files and CLI output."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from common.errors import BackendError, ErrorCode
from common.models import FIELD_GROUPS
from common.versioning import FIELD_MAP_ARTIFACT_VERSION
from core.resolution import ResolverKind

from .field_map import FieldMap, merge_field_map


def field_map_to_dict(field_map: FieldMap) -> Dict[str, object]:
    """Serialize candidate-list resolvers; function resolvers cannot be written out."""

    payload: Dict[str, object] = {"version": FIELD_MAP_ARTIFACT_VERSION}
    for group_name in FIELD_GROUPS:
        group: Dict[str, Optional[List[str]]] = {}
        for field_name, resolver in field_map.group(group_name).items():
            if resolver is None:
                group[field_name] = None
            elif resolver.kind is ResolverKind.CANDIDATE_LIST:
                group[field_name] = list(resolver.names)
            else:
                raise BackendError(
                    ErrorCode.CONFIG_ERROR,
                    f"Field '{group_name}.{field_name}' uses a custom function and cannot be serialized",
                    context={"group": group_name, "field": field_name},
                )
        payload[group_name] = group
    return payload


def field_map_from_dict(data: Mapping[str, Any]) -> FieldMap:
    """Merge a serialized (possibly partial) field map onto the defaults."""

    groups = {key: value for key, value in data.items() if key != "version"}
    return merge_field_map(groups)
