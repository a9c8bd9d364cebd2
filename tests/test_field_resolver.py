"""Tests for field resolution over raw records."""
from __future__ import annotations

import pytest

from common.errors import BackendError, ErrorCode
from common.records import RawRecord, RawValue, ValueKind
from core.resolution import CandidateList, CustomResolver, ResolverKind, as_resolver, resolve


def test_first_non_empty_candidate_wins() -> None:
    record = {"act_start_date": None, "early_start_date": "", "target_start_date": "2023-01-02"}
    resolver = CandidateList(("act_start_date", "early_start_date", "target_start_date"))
    assert resolve(record, resolver) == "2023-01-02"


def test_candidate_order_is_priority_order() -> None:
    record = {"act_start_date": "2023-08-02 08:00", "early_start_date": "2023-07-01 08:00"}
    resolver = CandidateList(("act_start_date", "early_start_date"))
    assert resolve(record, resolver) == "2023-08-02 08:00"


def test_zero_and_false_are_not_empty() -> None:
    assert resolve({"lag": 0}, CandidateList(("lag",))) == 0
    assert resolve({"flag": False}, CandidateList(("flag",))) is False


def test_no_match_returns_none() -> None:
    assert resolve({"other": 1}, CandidateList(("task_id",))) is None


def test_absent_resolver_skips_record() -> None:
    class Exploding(dict):
        def __getitem__(self, key):  # type: ignore[override]
            raise AssertionError("record must not be inspected")

    assert resolve(Exploding(), None) is None


def test_custom_function_result_returned_verbatim() -> None:
    resolver = CustomResolver(lambda record: record.get("code", "").upper() or None)
    assert resolver.kind is ResolverKind.CUSTOM_FN
    assert resolve({"code": "a-1"}, resolver) == "A-1"
    assert resolve({"code": ""}, CustomResolver(lambda record: "")) == ""


def test_custom_function_exceptions_propagate() -> None:
    def broken(record: RawRecord) -> str:
        raise KeyError("boom")

    with pytest.raises(KeyError):
        resolve({}, CustomResolver(broken))


def test_resolution_does_not_mutate_record() -> None:
    record = {"task_id": "1", "task_name": ""}
    snapshot = dict(record)
    resolve(record, CandidateList(("task_name", "task_id")))
    assert record == snapshot


def test_as_resolver_builds_variants() -> None:
    assert as_resolver(["a", "b"]) == CandidateList(("a", "b"))
    assert as_resolver("a") == CandidateList(("a",))
    assert as_resolver(None) is None
    fn = lambda record: 1  # noqa: E731
    assert as_resolver(fn) == CustomResolver(fn)


def test_as_resolver_rejects_non_string_candidates() -> None:
    with pytest.raises(BackendError) as exc:
        as_resolver(["a", 3], field="task.id")
    assert exc.value.code == ErrorCode.CONFIG_ERROR
    with pytest.raises(BackendError):
        as_resolver(42, field="task.id")


def test_raw_value_kinds() -> None:
    record = RawRecord.wrap({"b": True, "n": 2.5, "s": "", "a": [1], "o": {"x": 1}, "z": None})
    assert record.value("b").kind is ValueKind.BOOLEAN
    assert record.value("n").kind is ValueKind.NUMBER
    assert record.value("s").is_empty
    assert record.value("a").kind is ValueKind.ARRAY
    assert record.value("o").kind is ValueKind.OBJECT
    assert record.value("z").kind is ValueKind.NULL
    assert record.value("missing").kind is ValueKind.ABSENT
    assert RawValue.of(float("nan")).is_nan


def test_non_mapping_record_wraps_as_empty() -> None:
    record = RawRecord.wrap("not a record")
    assert len(record) == 0
    assert resolve("not a record", CandidateList(("task_id",))) is None
