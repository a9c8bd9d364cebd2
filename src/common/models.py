"""Data models shared across the resolver, normalizers, validator and CLI."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import BackendError, ErrorCode

DEFAULT_HOURS_PER_DAY = 8.0

TASK_FIELDS: Tuple[str, ...] = (
    "id",
    "name",
    "wbsId",
    "start",
    "finish",
    "durationDays",
    "durationHours",
    "percentComplete",
    "critical",
    "predecessors",
    "activityId",
)
REL_FIELDS: Tuple[str, ...] = ("source", "target", "type", "lagHours")
WBS_FIELDS: Tuple[str, ...] = ("id", "parentId", "name")

FIELD_GROUPS: Dict[str, Tuple[str, ...]] = {
    "task": TASK_FIELDS,
    "rel": REL_FIELDS,
    "wbs": WBS_FIELDS,
}

# Fields a record needs for it to count as well-formed.
REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "task": ("id", "name", "start", "finish"),
    "rel": ("source", "target", "type"),
    "wbs": ("id", "name"),
}

# Primavera P6 style export names, first match wins.
DEFAULT_FIELD_NAMES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "task": {
        "id": ("task_id",),
        "name": ("task_name",),
        "wbsId": ("wbs_id",),
        "start": ("act_start_date", "early_start_date", "target_start_date"),
        "finish": ("act_end_date", "early_end_date", "target_end_date"),
        "durationDays": ("task_drtn_days",),
        "durationHours": ("target_drtn_hr_cnt", "orig_duration_hr_cnt"),
        "percentComplete": ("phys_complete_pct",),
        "critical": ("critical_path",),
        "predecessors": ("predecessors",),
        "activityId": ("activity_id",),
    },
    "rel": {
        "source": ("pred_task_id",),
        "target": ("task_id",),
        "type": ("pred_type",),
        "lagHours": ("lag_hr_cnt",),
    },
    "wbs": {
        "id": ("wbs_id",),
        "parentId": ("parent_wbs_id",),
        "name": ("wbs_name",),
    },
}


@dataclass(frozen=True, slots=True)
class NormalizeOptions:
    """Knobs applied while normalizing a snapshot."""

    hours_per_day: float = DEFAULT_HOURS_PER_DAY

    def __post_init__(self) -> None:
        value = self.hours_per_day
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise BackendError(ErrorCode.CONFIG_ERROR, f"hours_per_day must be a number, got {value!r}")
        if math.isnan(value) or value <= 0:
            raise BackendError(ErrorCode.CONFIG_ERROR, f"hours_per_day must be greater than zero, got {value!r}")


@dataclass(frozen=True, slots=True)
class NormalizedTask:
    """Canonical task; ``start``/``finish`` are epoch milliseconds, ``duration`` is in days."""

    id: str
    name: str
    wbs_id: str
    start: float
    finish: float
    duration: float
    percent_complete: Optional[float] = None
    critical: Optional[bool] = None
    predecessors: Tuple[str, ...] = ()
    activity_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class NormalizedRelationship:
    """Predecessor -> successor link; ``lag`` is in hours."""

    source: str
    target: str
    type: str
    lag: float = 0.0


@dataclass(frozen=True, slots=True)
class NormalizedWbs:
    id: str
    name: str
    parent_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class NormalizedSnapshot:
    """Uniform schedule model handed to downstream consumers."""

    tasks: Tuple[NormalizedTask, ...] = ()
    wbs: Tuple[NormalizedWbs, ...] = ()
    relationships: Tuple[NormalizedRelationship, ...] = ()
    metadata: Any = None


@dataclass(frozen=True, slots=True)
class NormalizedComparison:
    """Baseline and update snapshots of the same schedule."""

    baseline: NormalizedSnapshot
    update: NormalizedSnapshot


class IssueLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    level: IssueLevel
    message: str
    collection: str = ""
    index: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Advisory lint result; ``valid`` is false only when an error-level issue exists."""

    valid: bool
    issues: Tuple[ValidationIssue, ...] = ()

    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.level is IssueLevel.ERROR]

    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.level is IssueLevel.WARN]


class MatchStrategy(str, Enum):
    TASK_ID = "task_id"
    ACTIVITY_ID = "activity_id"
    NAME_WBS = "name_wbs"


@dataclass(frozen=True, slots=True)
class TaskMatch:
    baseline: NormalizedTask
    update: NormalizedTask


@dataclass(frozen=True, slots=True)
class TaskComparison:
    """Pairing of baseline and update tasks under a match strategy."""

    strategy: MatchStrategy
    matched: Tuple[TaskMatch, ...] = ()
    added: Tuple[NormalizedTask, ...] = ()
    removed: Tuple[NormalizedTask, ...] = ()


@dataclass(slots=True)
class GlobalSettings:
    """Global knobs that apply across profiles."""

    hours_per_day: float = DEFAULT_HOURS_PER_DAY
    match_strategy: str = MatchStrategy.TASK_ID.value
    extended_validation: bool = False


@dataclass(slots=True)
class ProfileSettings:
    """Per-source-tool field map overrides."""

    name: str
    description: str = ""
    field_map: Dict[str, Dict[str, Optional[List[str]]]] = field(default_factory=dict)
    hours_per_day: Optional[float] = None


@dataclass(slots=True)
class RuntimeConfig:
    """Resolved configuration for a single run."""

    global_settings: GlobalSettings
    profile: ProfileSettings

    @property
    def hours_per_day(self) -> float:
        if self.profile.hours_per_day is not None:
            return self.profile.hours_per_day
        return self.global_settings.hours_per_day

    def normalize_options(self) -> NormalizeOptions:
        return NormalizeOptions(hours_per_day=self.hours_per_day)
