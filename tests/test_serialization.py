from __future__ import annotations

from common.models import (
    IssueLevel,
    MatchStrategy,
    NormalizedRelationship,
    NormalizedSnapshot,
    NormalizedTask,
    NormalizedWbs,
    TaskComparison,
    TaskMatch,
    ValidationIssue,
    ValidationReport,
)
from common.serialization import (
    report_to_dict,
    snapshot_from_dict,
    snapshot_to_dict,
    task_comparison_to_dict,
)
from common.versioning import SNAPSHOT_ARTIFACT_VERSION


def _build_snapshot() -> NormalizedSnapshot:
    return NormalizedSnapshot(
        tasks=(
            NormalizedTask(
                id="1",
                name="Task A",
                wbs_id="w1",
                start=1690963200000,
                finish=1691082000000,
                duration=1,
                percent_complete=50.0,
                critical=True,
                predecessors=("0",),
            ),
        ),
        wbs=(NormalizedWbs(id="w1", name="Root"),),
        relationships=(NormalizedRelationship(source="0", target="1", type="FS"),),
        metadata={"schedule_id": 3},
    )


def test_snapshot_dict_uses_canonical_field_names() -> None:
    payload = snapshot_to_dict(_build_snapshot())

    assert payload["version"] == SNAPSHOT_ARTIFACT_VERSION
    task = payload["tasks"][0]
    assert task["wbsId"] == "w1"
    assert task["percentComplete"] == 50.0
    assert task["predecessors"] == ["0"]
    assert "activityId" not in task
    assert payload["wbs"][0] == {"id": "w1", "parentId": None, "name": "Root"}
    assert payload["relationships"][0] == {"source": "0", "target": "1", "type": "FS", "lag": 0.0}
    assert payload["metadata"] == {"schedule_id": 3}


def test_snapshot_round_trip() -> None:
    snapshot = _build_snapshot()
    assert snapshot_from_dict(snapshot_to_dict(snapshot)) == snapshot


def test_report_to_dict() -> None:
    report = ValidationReport(
        valid=False,
        issues=(ValidationIssue(level=IssueLevel.ERROR, message="Task missing id", collection="tasks", index=0),),
    )
    assert report_to_dict(report) == {
        "valid": False,
        "issues": [{"level": "error", "message": "Task missing id", "collection": "tasks", "index": 0}],
    }


def test_task_comparison_to_dict() -> None:
    snapshot = _build_snapshot()
    task = snapshot.tasks[0]
    comparison = TaskComparison(
        strategy=MatchStrategy.ACTIVITY_ID,
        matched=(TaskMatch(baseline=task, update=task),),
    )
    assert task_comparison_to_dict(comparison) == {
        "strategy": "activity_id",
        "matched": [{"baseline": "1", "update": "1"}],
        "added": [],
        "removed": [],
    }
