"""Tests for field map defaults, partial overrides and serialization."""
from __future__ import annotations

import pytest

from common.errors import BackendError, ErrorCode
from common.models import DEFAULT_FIELD_NAMES
from core.mapping import (
    FieldMap,
    default_field_map,
    field_map_from_dict,
    field_map_to_dict,
    merge_field_map,
)
from core.resolution import CandidateList, CustomResolver


def test_defaults_match_field_name_table() -> None:
    field_map = merge_field_map()
    assert field_map.task["start"] == CandidateList(("act_start_date", "early_start_date", "target_start_date"))
    assert field_map.rel["type"] == CandidateList(("pred_type",))
    assert field_map.wbs["parentId"] == CandidateList(("parent_wbs_id",))
    for group, fields in DEFAULT_FIELD_NAMES.items():
        assert set(field_map.group(group)) == set(fields)


def test_partial_override_replaces_only_named_fields() -> None:
    field_map = merge_field_map({"task": {"id": ["custom_id"]}})
    assert field_map.task["id"] == CandidateList(("custom_id",))
    assert field_map.task["name"] == CandidateList(("task_name",))
    assert field_map.rel == default_field_map().rel


def test_merge_returns_mutation_safe_copies() -> None:
    first = merge_field_map()
    first.task["id"] = CandidateList(("mutated",))
    first.rel.clear()
    second = merge_field_map()
    assert second.task["id"] == CandidateList(("task_id",))
    assert second.rel["source"] == CandidateList(("pred_task_id",))


def test_function_resolvers_survive_copy() -> None:
    fn = lambda record: record.get("x")  # noqa: E731
    field_map = merge_field_map({"wbs": {"name": fn}})
    clone = field_map.copy()
    assert clone.wbs["name"] == CustomResolver(fn)
    assert clone.wbs is not field_map.wbs


def test_none_removes_a_resolver() -> None:
    field_map = merge_field_map({"task": {"activityId": None}, "rel": None})
    assert field_map.task["activityId"] is None
    assert field_map.rel["source"] == CandidateList(("pred_task_id",))


def test_unknown_group_or_field_rejected() -> None:
    with pytest.raises(BackendError) as exc:
        merge_field_map({"tasks": {"id": ["x"]}})
    assert exc.value.code == ErrorCode.CONFIG_ERROR
    with pytest.raises(BackendError):
        merge_field_map({"task": {"identifier": ["x"]}})
    with pytest.raises(BackendError):
        merge_field_map({"task": ["x"]})


def test_merge_accepts_field_map_instance() -> None:
    custom = default_field_map()
    custom.task["name"] = CandidateList(("title",))
    merged = merge_field_map(custom)
    assert merged.task["name"] == CandidateList(("title",))
    assert merged.task is not custom.task


def test_field_map_dict_round_trip() -> None:
    payload = field_map_to_dict(merge_field_map({"task": {"id": ["custom_id"]}}))
    assert payload["task"]["id"] == ["custom_id"]
    assert "version" in payload
    restored = field_map_from_dict(payload)
    assert restored.task["id"] == CandidateList(("custom_id",))


def test_custom_function_cannot_be_serialized() -> None:
    field_map = merge_field_map({"task": {"id": lambda record: "x"}})
    with pytest.raises(BackendError) as exc:
        field_map_to_dict(field_map)
    assert exc.value.code == ErrorCode.CONFIG_ERROR


def test_group_lookup_rejects_unknown_name() -> None:
    with pytest.raises(BackendError):
        FieldMap().group("links")
