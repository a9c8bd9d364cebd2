"""Field map configuration with built-in defaults and partial overrides."""

from .field_map import FieldMap, PartialFieldMap, ResolverGroup, default_field_map, merge_field_map
from .serialization import field_map_from_dict, field_map_to_dict

__all__ = [
    "FieldMap",
    "PartialFieldMap",
    "ResolverGroup",
    "default_field_map",
    "field_map_from_dict",
    "field_map_to_dict",
    "merge_field_map",
]
