"""Advisory lint of raw snapshots against a field map.

Validation reads the raw records through the configured resolvers, never the
normalized output, and never raises for missing data. Normalization does not
consult the report; callers decide what to do with it.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from common.models import IssueLevel, ValidationIssue, ValidationReport
from common.records import RawRecord
from core.coercion import is_canonical_rel_type, normalize_rel_type, to_text
from core.mapping import FieldMap, merge_field_map
from core.resolution import resolve

logger = logging.getLogger(__name__)


def validate_snapshot(
    snapshot: Mapping[str, Any] | None,
    field_map: FieldMap | None = None,
    *,
    extended: bool = False,
) -> ValidationReport:
    """Report per-record structural issues.

    The base checks flag tasks without an id (error) or name (warning) and
    relationships missing an endpoint (warning). ``extended`` adds
    referential and vocabulary checks, all advisory.
    """

    field_map = field_map or merge_field_map()
    snapshot = snapshot or {}
    tasks = _records(snapshot.get("tasks"))
    relationships = _records(snapshot.get("relationships"))

    issues: List[ValidationIssue] = []
    task_ids: List[Optional[str]] = []
    for index, record in enumerate(tasks):
        task_id = resolve(record, field_map.task.get("id"))
        task_ids.append(to_text(task_id) if task_id else None)
        if not task_id:
            issues.append(_issue(IssueLevel.ERROR, "Task missing id", "tasks", index))
        name = resolve(record, field_map.task.get("name"))
        if not name:
            label = task_id if task_id else "?"
            issues.append(_issue(IssueLevel.WARN, f"Task {label} missing name", "tasks", index))

    for index, record in enumerate(relationships):
        source = resolve(record, field_map.rel.get("source"))
        target = resolve(record, field_map.rel.get("target"))
        if not source or not target:
            issues.append(_issue(IssueLevel.WARN, "Relationship missing endpoints", "relationships", index))

    if extended:
        wbs = _records(snapshot.get("wbs"))
        issues.extend(_extended_checks(tasks, task_ids, wbs, relationships, field_map))

    valid = not any(issue.level is IssueLevel.ERROR for issue in issues)
    if not valid:
        logger.debug("Snapshot validation found %d issue(s)", len(issues))
    return ValidationReport(valid=valid, issues=tuple(issues))


def _extended_checks(
    tasks: Sequence[RawRecord],
    task_ids: Sequence[Optional[str]],
    wbs: Sequence[RawRecord],
    relationships: Sequence[RawRecord],
    field_map: FieldMap,
) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []

    counts = Counter(task_id for task_id in task_ids if task_id)
    for index, task_id in enumerate(task_ids):
        if task_id and counts[task_id] > 1:
            issues.append(_issue(IssueLevel.WARN, f"Duplicate task id {task_id}", "tasks", index))

    wbs_ids: List[Optional[str]] = []
    for index, record in enumerate(wbs):
        wbs_id = resolve(record, field_map.wbs.get("id"))
        wbs_ids.append(to_text(wbs_id) if wbs_id else None)
        if not wbs_id:
            issues.append(_issue(IssueLevel.ERROR, "WBS node missing id", "wbs", index))
        if not resolve(record, field_map.wbs.get("name")):
            label = wbs_id if wbs_id else "?"
            issues.append(_issue(IssueLevel.WARN, f"WBS node {label} missing name", "wbs", index))
    wbs_counts = Counter(wbs_id for wbs_id in wbs_ids if wbs_id)
    for index, wbs_id in enumerate(wbs_ids):
        if wbs_id and wbs_counts[wbs_id] > 1:
            issues.append(_issue(IssueLevel.WARN, f"Duplicate WBS id {wbs_id}", "wbs", index))

    if wbs_counts:
        for index, record in enumerate(tasks):
            ref = to_text(resolve(record, field_map.task.get("wbsId")))
            if ref and ref not in wbs_counts:
                issues.append(
                    _issue(IssueLevel.WARN, f"Task {task_ids[index] or '?'} references unknown WBS {ref}", "tasks", index)
                )

    known_tasks = set(counts)
    for index, record in enumerate(relationships):
        for endpoint in ("source", "target"):
            ref = to_text(resolve(record, field_map.rel.get(endpoint)))
            if ref and known_tasks and ref not in known_tasks:
                issues.append(
                    _issue(IssueLevel.WARN, f"Relationship {endpoint} {ref} is not a known task", "relationships", index)
                )
        raw_type = resolve(record, field_map.rel.get("type"))
        rel_type = normalize_rel_type(raw_type)
        if not is_canonical_rel_type(rel_type):
            issues.append(
                _issue(IssueLevel.WARN, f"Unrecognized relationship type {raw_type!r}", "relationships", index)
            )
    return issues


def _records(collection: Any) -> List[RawRecord]:
    if not isinstance(collection, (list, tuple)):
        return []
    return [RawRecord.wrap(item) for item in collection]


def _issue(level: IssueLevel, message: str, collection: str, index: int) -> ValidationIssue:
    return ValidationIssue(level=level, message=message, collection=collection, index=index)
