"""Pair tasks of a baseline snapshot with the tasks of an update snapshot."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Hashable, List, Optional, Union

from common.errors import BackendError, ErrorCode
from common.models import (
    MatchStrategy,
    NormalizedSnapshot,
    NormalizedTask,
    TaskComparison,
    TaskMatch,
)

logger = logging.getLogger(__name__)

TaskKey = Callable[[NormalizedTask], Optional[Hashable]]


def _by_task_id(task: NormalizedTask) -> Optional[Hashable]:
    return task.id or None


def _by_activity_id(task: NormalizedTask) -> Optional[Hashable]:
    return task.activity_id or None


def _by_name_and_wbs(task: NormalizedTask) -> Optional[Hashable]:
    if not task.name:
        return None
    return (task.name, task.wbs_id)


_KEY_FUNCTIONS: Dict[MatchStrategy, TaskKey] = {
    MatchStrategy.TASK_ID: _by_task_id,
    MatchStrategy.ACTIVITY_ID: _by_activity_id,
    MatchStrategy.NAME_WBS: _by_name_and_wbs,
}


def parse_match_strategy(value: Union[str, MatchStrategy]) -> MatchStrategy:
    try:
        return MatchStrategy(value)
    except ValueError as exc:
        allowed = ", ".join(strategy.value for strategy in MatchStrategy)
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Unsupported match strategy '{value}'. Allowed: {allowed}",
        ) from exc


def match_tasks(
    baseline: NormalizedSnapshot,
    update: NormalizedSnapshot,
    strategy: Union[str, MatchStrategy] = MatchStrategy.TASK_ID,
) -> TaskComparison:
    """Match tasks across two snapshots of the same schedule.

    Tasks without a key under the strategy stay unmatched. When several
    tasks share a key the first one wins and the rest stay unmatched.
    """

    strategy = parse_match_strategy(strategy)
    key_of = _KEY_FUNCTIONS[strategy]

    baseline_index: Dict[Hashable, NormalizedTask] = {}
    for task in baseline.tasks:
        key = key_of(task)
        if key is None:
            continue
        if key in baseline_index:
            logger.debug("Duplicate baseline key %r under %s", key, strategy.value)
            continue
        baseline_index[key] = task

    matched: List[TaskMatch] = []
    added: List[NormalizedTask] = []
    claimed = set()
    for task in update.tasks:
        key = key_of(task)
        if key is None or key in claimed or key not in baseline_index:
            added.append(task)
            continue
        claimed.add(key)
        matched.append(TaskMatch(baseline=baseline_index[key], update=task))

    paired = {id(match.baseline) for match in matched}
    removed = [task for task in baseline.tasks if id(task) not in paired]
    logger.debug(
        "Matched %d task(s) by %s (%d added, %d removed)",
        len(matched),
        strategy.value,
        len(added),
        len(removed),
    )
    return TaskComparison(
        strategy=strategy,
        matched=tuple(matched),
        added=tuple(added),
        removed=tuple(removed),
    )
