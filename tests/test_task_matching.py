"""Tests for baseline/update task matching."""
from __future__ import annotations

import pytest

from common.errors import BackendError
from common.models import MatchStrategy, NormalizedSnapshot, NormalizedTask
from core.comparison import match_tasks


def _task(task_id: str, name: str = "", wbs_id: str = "w1", activity_id: str | None = None) -> NormalizedTask:
    return NormalizedTask(
        id=task_id,
        name=name or f"Task {task_id}",
        wbs_id=wbs_id,
        start=0,
        finish=0,
        duration=0.0,
        activity_id=activity_id,
    )


def test_match_by_task_id() -> None:
    baseline = NormalizedSnapshot(tasks=(_task("1"), _task("2")))
    update = NormalizedSnapshot(tasks=(_task("2"), _task("3")))

    result = match_tasks(baseline, update)

    assert result.strategy is MatchStrategy.TASK_ID
    assert [(m.baseline.id, m.update.id) for m in result.matched] == [("2", "2")]
    assert [task.id for task in result.added] == ["3"]
    assert [task.id for task in result.removed] == ["1"]


def test_match_by_activity_id_when_ids_are_reissued() -> None:
    baseline = NormalizedSnapshot(tasks=(_task("100", activity_id="A1000"), _task("101")))
    update = NormalizedSnapshot(tasks=(_task("900", activity_id="A1000"), _task("901")))

    result = match_tasks(baseline, update, "activity_id")

    assert [(m.baseline.id, m.update.id) for m in result.matched] == [("100", "900")]
    assert [task.id for task in result.added] == ["901"]
    assert [task.id for task in result.removed] == ["101"]


def test_match_by_name_and_wbs() -> None:
    baseline = NormalizedSnapshot(tasks=(_task("1", "Pour", "w1"), _task("2", "Pour", "w2")))
    update = NormalizedSnapshot(tasks=(_task("9", "Pour", "w2"),))

    result = match_tasks(baseline, update, MatchStrategy.NAME_WBS)

    assert [(m.baseline.id, m.update.id) for m in result.matched] == [("2", "9")]


def test_duplicate_keys_first_wins() -> None:
    baseline = NormalizedSnapshot(tasks=(_task("1"), _task("1", "Copy")))
    update = NormalizedSnapshot(tasks=(_task("1"), _task("1", "Copy")))

    result = match_tasks(baseline, update)

    assert len(result.matched) == 1
    assert result.matched[0].baseline.name == "Task 1"
    assert [task.name for task in result.added] == ["Copy"]
    assert [task.name for task in result.removed] == ["Copy"]


def test_unknown_strategy_rejected() -> None:
    with pytest.raises(BackendError):
        match_tasks(NormalizedSnapshot(), NormalizedSnapshot(), "fuzzy")
