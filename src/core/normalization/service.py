"""Snapshot normalization and the service facade used by the CLI."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from common.errors import BackendError, ErrorCode
from common.models import (
    NormalizedComparison,
    NormalizedSnapshot,
    NormalizeOptions,
    RuntimeConfig,
    ValidationReport,
)
from core.mapping import FieldMap, PartialFieldMap, merge_field_map
from core.validation import validate_snapshot

from .entities import normalize_relationships, normalize_tasks, normalize_wbs

logger = logging.getLogger(__name__)

VIEW_MODE = "view"
COMPARE_MODE = "compare"


def normalize_snapshot(
    snapshot: Mapping[str, Any] | None,
    field_map: FieldMap | None = None,
    options: NormalizeOptions | None = None,
) -> NormalizedSnapshot:
    """Normalize one raw snapshot into the canonical model.

    Absent ``tasks``/``wbs``/``relationships`` collections count as empty and
    ``metadata`` is passed through untouched. Only exceptions raised by
    custom resolver functions escape.
    """

    field_map = field_map or merge_field_map()
    snapshot = snapshot or {}
    tasks = normalize_tasks(_collection(snapshot, "tasks"), field_map.task, options)
    wbs = normalize_wbs(_collection(snapshot, "wbs"), field_map.wbs)
    relationships = normalize_relationships(_collection(snapshot, "relationships"), field_map.rel)
    return NormalizedSnapshot(
        tasks=tuple(tasks),
        wbs=tuple(wbs),
        relationships=tuple(relationships),
        metadata=snapshot.get("metadata"),
    )


def _collection(snapshot: Mapping[str, Any], key: str) -> List[Any]:
    value = snapshot.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning("Ignoring '%s': expected an array, got %s", key, type(value).__name__)
        return []
    return list(value)


class ScheduleNormalizer:
    """Holds a field map and options and applies them to snapshots.

    ``on_error`` receives a ``BackendError`` whenever a validated snapshot
    fails validation; normalization proceeds regardless.
    """

    def __init__(
        self,
        field_map: Union[FieldMap, PartialFieldMap, None] = None,
        *,
        options: NormalizeOptions | None = None,
        on_error: Optional[Callable[[BackendError], None]] = None,
    ) -> None:
        self.field_map = merge_field_map(field_map)
        self.options = options or NormalizeOptions()
        self.on_error = on_error

    @classmethod
    def from_config(
        cls,
        runtime: RuntimeConfig,
        *,
        on_error: Optional[Callable[[BackendError], None]] = None,
    ) -> "ScheduleNormalizer":
        return cls(runtime.profile.field_map, options=runtime.normalize_options(), on_error=on_error)

    def normalize(self, snapshot: Mapping[str, Any] | None) -> NormalizedSnapshot:
        return normalize_snapshot(snapshot, self.field_map, self.options)

    def validate(self, snapshot: Mapping[str, Any] | None, *, extended: bool = False) -> ValidationReport:
        report = validate_snapshot(snapshot, self.field_map, extended=extended)
        if not report.valid:
            errors = report.errors()
            logger.warning("Snapshot validation failed with %d error(s)", len(errors))
            if self.on_error:
                self.on_error(
                    BackendError(
                        ErrorCode.SCHEMA_ERROR,
                        "Snapshot validation failed",
                        context={"issues": [issue.message for issue in errors]},
                    )
                )
        return report

    def normalize_comparison(
        self,
        baseline: Mapping[str, Any] | None,
        update: Mapping[str, Any] | None,
    ) -> NormalizedComparison:
        self.validate(update)
        return NormalizedComparison(baseline=self.normalize(baseline), update=self.normalize(update))

    def load(
        self,
        data: Mapping[str, Any],
        mode: str = VIEW_MODE,
    ) -> Union[NormalizedSnapshot, NormalizedComparison]:
        """Validate and normalize either a single snapshot or a ``{baseline, update}`` pair."""

        if mode == COMPARE_MODE:
            return self.normalize_comparison(data.get("baseline"), data.get("update"))
        if mode != VIEW_MODE:
            raise BackendError(ErrorCode.CONFIG_ERROR, f"Unsupported mode '{mode}'")
        self.validate(data)
        return self.normalize(data)

    def update_field_map(self, partial: Union[FieldMap, PartialFieldMap, None]) -> None:
        self.field_map = merge_field_map(partial)
