"""JSON-ready dict conversion for normalized snapshots and reports."""
from __future__ import annotations

from typing import Any, Dict, List

from .models import (
    NormalizedComparison,
    NormalizedRelationship,
    NormalizedSnapshot,
    NormalizedTask,
    NormalizedWbs,
    TaskComparison,
    ValidationIssue,
    ValidationReport,
)
from .versioning import SNAPSHOT_ARTIFACT_VERSION


def snapshot_to_dict(snapshot: NormalizedSnapshot) -> Dict[str, object]:
    return {
        "version": SNAPSHOT_ARTIFACT_VERSION,
        "tasks": [serialize_task(task) for task in snapshot.tasks],
        "wbs": [serialize_wbs(node) for node in snapshot.wbs],
        "relationships": [serialize_relationship(rel) for rel in snapshot.relationships],
        "metadata": snapshot.metadata,
    }


def snapshot_from_dict(data: Dict[str, Any]) -> NormalizedSnapshot:
    return NormalizedSnapshot(
        tasks=tuple(deserialize_task(item) for item in data.get("tasks", [])),
        wbs=tuple(deserialize_wbs(item) for item in data.get("wbs", [])),
        relationships=tuple(deserialize_relationship(item) for item in data.get("relationships", [])),
        metadata=data.get("metadata"),
    )


def comparison_to_dict(comparison: NormalizedComparison) -> Dict[str, object]:
    return {
        "baseline": snapshot_to_dict(comparison.baseline),
        "update": snapshot_to_dict(comparison.update),
    }


def serialize_task(task: NormalizedTask) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "id": task.id,
        "name": task.name,
        "wbsId": task.wbs_id,
        "start": task.start,
        "finish": task.finish,
        "duration": task.duration,
        "predecessors": list(task.predecessors),
    }
    # Unknown optional values are left out rather than written as null.
    if task.percent_complete is not None:
        payload["percentComplete"] = task.percent_complete
    if task.critical is not None:
        payload["critical"] = task.critical
    if task.activity_id is not None:
        payload["activityId"] = task.activity_id
    return payload


def deserialize_task(data: Dict[str, Any]) -> NormalizedTask:
    return NormalizedTask(
        id=data.get("id"),
        name=data.get("name"),
        wbs_id=data.get("wbsId"),
        start=data.get("start", 0),
        finish=data.get("finish", data.get("start", 0)),
        duration=data.get("duration", 0.0),
        percent_complete=data.get("percentComplete"),
        critical=data.get("critical"),
        predecessors=tuple(data.get("predecessors", [])),
        activity_id=data.get("activityId"),
    )


def serialize_relationship(rel: NormalizedRelationship) -> Dict[str, object]:
    return {"source": rel.source, "target": rel.target, "type": rel.type, "lag": rel.lag}


def deserialize_relationship(data: Dict[str, Any]) -> NormalizedRelationship:
    return NormalizedRelationship(
        source=data.get("source"),
        target=data.get("target"),
        type=data.get("type"),
        lag=data.get("lag", 0.0),
    )


def serialize_wbs(node: NormalizedWbs) -> Dict[str, object]:
    return {"id": node.id, "parentId": node.parent_id, "name": node.name}


def deserialize_wbs(data: Dict[str, Any]) -> NormalizedWbs:
    return NormalizedWbs(id=data.get("id"), name=data.get("name"), parent_id=data.get("parentId"))


def report_to_dict(report: ValidationReport) -> Dict[str, object]:
    return {
        "valid": report.valid,
        "issues": [serialize_issue(issue) for issue in report.issues],
    }


def serialize_issue(issue: ValidationIssue) -> Dict[str, object]:
    return {
        "level": issue.level.value,
        "message": issue.message,
        "collection": issue.collection,
        "index": issue.index,
    }


def task_comparison_to_dict(comparison: TaskComparison) -> Dict[str, object]:
    matched: List[Dict[str, object]] = [
        {"baseline": match.baseline.id, "update": match.update.id} for match in comparison.matched
    ]
    return {
        "strategy": comparison.strategy.value,
        "matched": matched,
        "added": [task.id for task in comparison.added],
        "removed": [task.id for task in comparison.removed],
    }
