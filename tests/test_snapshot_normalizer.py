"""End-to-end tests for snapshot normalization and the service facade."""
from __future__ import annotations

from typing import List

import pytest

from common.errors import BackendError, ErrorCode
from common.models import NormalizedComparison, NormalizedSnapshot, NormalizeOptions
from core.mapping import merge_field_map
from core.normalization import ScheduleNormalizer, normalize_snapshot


def sample_snapshot() -> dict:
    return {
        "metadata": {"schedule_id": 3, "data_date": "2021-11-08"},
        "tasks": [
            {
                "task_id": "1",
                "task_name": "Task A",
                "wbs_id": "w1",
                "act_start_date": "2023-08-02 08:00",
                "act_end_date": "2023-08-03 17:00",
                "task_drtn_days": 1,
                "phys_complete_pct": "50",
                "critical_path": True,
                "predecessors": ["0"],
            }
        ],
        "wbs": [{"wbs_id": "w1", "wbs_name": "Root", "parent_wbs_id": None}],
        "relationships": [{"pred_task_id": "0", "task_id": "1", "pred_type": "PR_FS", "lag_hr_cnt": 0}],
    }


def test_normalizes_sample_with_default_map() -> None:
    normalized = normalize_snapshot(sample_snapshot(), merge_field_map())

    assert len(normalized.tasks) == 1
    task = normalized.tasks[0]
    assert task.id == "1"
    assert task.name == "Task A"
    assert task.duration == 1
    assert task.critical is True
    assert task.predecessors == ("0",)
    assert task.percent_complete == 50.0
    assert isinstance(task.start, int)
    assert task.finish > task.start
    assert len(normalized.relationships) == 1
    assert normalized.relationships[0].type == "FS"
    assert normalized.wbs[0].parent_id is None
    assert normalized.metadata == {"schedule_id": 3, "data_date": "2021-11-08"}


def test_custom_aliases_with_hour_durations() -> None:
    snapshot = {
        "tasks": [
            {"id": "t", "name": "Custom", "wbs": "w", "start": "2023-01-01 00:00", "end": "2023-01-02 00:00", "hours": 8}
        ],
        "wbs": [],
        "relationships": [],
    }
    field_map = merge_field_map(
        {
            "task": {
                "id": ["id"],
                "name": ["name"],
                "wbsId": ["wbs"],
                "start": ["start"],
                "finish": ["end"],
                "durationHours": ["hours"],
            }
        }
    )
    normalized = normalize_snapshot(snapshot, field_map)
    assert normalized.tasks[0].duration == 1
    assert normalized.tasks[0].finish - normalized.tasks[0].start == 24 * 3600 * 1000


def test_normalization_is_idempotent() -> None:
    field_map = merge_field_map()
    raw = sample_snapshot()
    assert normalize_snapshot(raw, field_map) == normalize_snapshot(raw, field_map)
    assert raw == sample_snapshot()


def test_missing_collections_become_empty() -> None:
    normalized = normalize_snapshot({"metadata": {"source": "p6"}})
    assert normalized == NormalizedSnapshot(metadata={"source": "p6"})
    assert normalize_snapshot(None) == NormalizedSnapshot()


def test_non_array_collection_is_ignored() -> None:
    normalized = normalize_snapshot({"tasks": {"task_id": "1"}, "wbs": None})
    assert normalized.tasks == ()


def test_custom_resolver_errors_reach_the_caller() -> None:
    def explode(record) -> str:
        raise ValueError("bad export")

    field_map = merge_field_map({"task": {"name": explode}})
    with pytest.raises(ValueError, match="bad export"):
        normalize_snapshot(sample_snapshot(), field_map)


def test_service_reports_validation_failure_and_still_normalizes() -> None:
    errors: List[BackendError] = []
    normalizer = ScheduleNormalizer(on_error=errors.append)
    raw = {"tasks": [{"task_name": "No id"}]}

    result = normalizer.load(raw)

    assert isinstance(result, NormalizedSnapshot)
    assert result.tasks[0].name == "No id"
    assert len(errors) == 1
    assert errors[0].code == ErrorCode.SCHEMA_ERROR


def test_service_compare_mode_validates_update_only() -> None:
    errors: List[BackendError] = []
    normalizer = ScheduleNormalizer(options=NormalizeOptions(hours_per_day=10), on_error=errors.append)
    baseline = {"tasks": [{"task_name": "missing id in baseline"}]}
    update = sample_snapshot()

    result = normalizer.load({"baseline": baseline, "update": update}, mode="compare")

    assert isinstance(result, NormalizedComparison)
    assert result.update.tasks[0].id == "1"
    assert errors == []


def test_service_update_field_map() -> None:
    normalizer = ScheduleNormalizer()
    normalizer.update_field_map({"task": {"id": ["code"]}})
    snapshot = normalizer.normalize({"tasks": [{"code": "X1", "task_id": "1"}]})
    assert snapshot.tasks[0].id == "X1"


def test_service_rejects_unknown_mode() -> None:
    with pytest.raises(BackendError):
        ScheduleNormalizer().load({}, mode="gantt")
