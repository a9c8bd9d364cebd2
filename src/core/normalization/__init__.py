"""Entity and snapshot normalizers built on the field resolver."""

from .entities import normalize_relationships, normalize_tasks, normalize_wbs
from .service import ScheduleNormalizer, normalize_snapshot

__all__ = [
    "ScheduleNormalizer",
    "normalize_relationships",
    "normalize_snapshot",
    "normalize_tasks",
    "normalize_wbs",
]
