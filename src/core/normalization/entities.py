"""Per-entity normalizers: raw vendor records -> canonical value objects."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from common.models import (
    NormalizedRelationship,
    NormalizedTask,
    NormalizedWbs,
    NormalizeOptions,
)
from common.records import RawRecord
from core.coercion import (
    normalize_rel_type,
    parse_date,
    to_flag,
    to_number,
    to_text,
    to_text_list,
)
from core.resolution import FieldResolver, resolve

logger = logging.getLogger(__name__)

ResolverGroup = Mapping[str, Optional[FieldResolver]]


def normalize_tasks(
    raw: Iterable[Any],
    resolvers: ResolverGroup,
    options: NormalizeOptions | None = None,
) -> List[NormalizedTask]:
    options = options or NormalizeOptions()
    tasks = [_normalize_task(RawRecord.wrap(item), resolvers, options) for item in raw]
    logger.debug("Normalized %d task record(s)", len(tasks))
    return tasks


def normalize_relationships(raw: Iterable[Any], resolvers: ResolverGroup) -> List[NormalizedRelationship]:
    relationships = [_normalize_relationship(RawRecord.wrap(item), resolvers) for item in raw]
    logger.debug("Normalized %d relationship record(s)", len(relationships))
    return relationships


def normalize_wbs(raw: Iterable[Any], resolvers: ResolverGroup) -> List[NormalizedWbs]:
    nodes = [_normalize_wbs_node(RawRecord.wrap(item), resolvers) for item in raw]
    logger.debug("Normalized %d WBS record(s)", len(nodes))
    return nodes


def _normalize_task(record: RawRecord, resolvers: ResolverGroup, options: NormalizeOptions) -> NormalizedTask:
    # Missing id/name/wbsId are kept as None; only the validator reports them.
    start = parse_date(resolve(record, resolvers.get("start")))
    if start is None:
        start = 0
    finish = parse_date(resolve(record, resolvers.get("finish")))
    if finish is None:
        finish = start

    return NormalizedTask(
        id=to_text(resolve(record, resolvers.get("id"))),
        name=to_text(resolve(record, resolvers.get("name"))),
        wbs_id=to_text(resolve(record, resolvers.get("wbsId"))),
        start=start,
        finish=finish,
        duration=_duration_days(record, resolvers, options.hours_per_day),
        percent_complete=to_number(resolve(record, resolvers.get("percentComplete"))),
        critical=to_flag(resolve(record, resolvers.get("critical"))),
        predecessors=to_text_list(resolve(record, resolvers.get("predecessors"))),
        activity_id=to_text(resolve(record, resolvers.get("activityId"))),
    )


def _duration_days(record: RawRecord, resolvers: ResolverGroup, hours_per_day: float) -> float:
    days = to_number(resolve(record, resolvers.get("durationDays")))
    if days is not None:
        return days
    hours = to_number(resolve(record, resolvers.get("durationHours")))
    if hours is not None:
        return hours / hours_per_day
    return 0.0


def _normalize_relationship(record: RawRecord, resolvers: ResolverGroup) -> NormalizedRelationship:
    lag = to_number(resolve(record, resolvers.get("lagHours")))
    return NormalizedRelationship(
        source=to_text(resolve(record, resolvers.get("source"))),
        target=to_text(resolve(record, resolvers.get("target"))),
        type=normalize_rel_type(resolve(record, resolvers.get("type"))),
        lag=0.0 if lag is None else lag,
    )


def _normalize_wbs_node(record: RawRecord, resolvers: ResolverGroup) -> NormalizedWbs:
    return NormalizedWbs(
        id=to_text(resolve(record, resolvers.get("id"))),
        name=to_text(resolve(record, resolvers.get("name"))),
        parent_id=to_text(resolve(record, resolvers.get("parentId"))),
    )
