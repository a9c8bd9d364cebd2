"""CLI shell covering Normalize, Validate, Compare and field map inspection."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from common.config import DEFAULT_PROFILE, load_runtime_config
from common.errors import BackendError
from common.log import setup_logging
from common.models import FIELD_GROUPS, MatchStrategy, RuntimeConfig
from common.serialization import report_to_dict, snapshot_to_dict, task_comparison_to_dict
from core.comparison import match_tasks
from core.mapping import field_map_to_dict
from core.normalization import ScheduleNormalizer
from storage import load_compare_input, load_document, load_raw_snapshot, save_json

logger = logging.getLogger(__name__)


def command_normalize(args: argparse.Namespace) -> int:
    runtime = load_runtime(args)
    normalizer = build_normalizer(runtime, args.field_map)
    raw = load_raw_snapshot(Path(args.input))
    report = normalizer.validate(raw, extended=runtime.global_settings.extended_validation)
    for issue in report.issues:
        logger.warning("[%s] %s (%s #%s)", issue.level.value, issue.message, issue.collection, issue.index)
    snapshot = normalizer.normalize(raw)
    emit(snapshot_to_dict(snapshot), args.output)
    logger.info(
        "Normalized %d task(s), %d WBS node(s), %d relationship(s)",
        len(snapshot.tasks),
        len(snapshot.wbs),
        len(snapshot.relationships),
    )
    return 0


def command_validate(args: argparse.Namespace) -> int:
    runtime = load_runtime(args)
    normalizer = build_normalizer(runtime, args.field_map)
    raw = load_raw_snapshot(Path(args.input))
    extended = args.extended or runtime.global_settings.extended_validation
    report = normalizer.validate(raw, extended=extended)
    emit(report_to_dict(report), args.output)
    return 0 if report.valid else 1


def command_compare(args: argparse.Namespace) -> int:
    runtime = load_runtime(args)
    normalizer = build_normalizer(runtime, args.field_map)
    if args.update:
        baseline = load_raw_snapshot(Path(args.baseline))
        update = load_raw_snapshot(Path(args.update))
    else:
        baseline, update = load_compare_input(Path(args.baseline))
    comparison = normalizer.normalize_comparison(baseline, update)
    strategy = args.match or runtime.global_settings.match_strategy
    result = match_tasks(comparison.baseline, comparison.update, strategy)
    payload: Dict[str, Any] = {"matches": task_comparison_to_dict(result)}
    if args.include_snapshots:
        payload["baseline"] = snapshot_to_dict(comparison.baseline)
        payload["update"] = snapshot_to_dict(comparison.update)
    emit(payload, args.output)
    return 0


def command_field_map(args: argparse.Namespace) -> int:
    runtime = load_runtime(args)
    normalizer = build_normalizer(runtime, args.field_map)
    emit(field_map_to_dict(normalizer.field_map), args.output)
    return 0


def load_runtime(args: argparse.Namespace) -> RuntimeConfig:
    overrides: Dict[str, Dict[str, Any]] = {}
    if args.hours_per_day is not None:
        overrides["profile"] = {"hours_per_day": args.hours_per_day}
    config_path = Path(args.config) if args.config else None
    return load_runtime_config(args.profile, config_path=config_path, overrides=overrides)


def build_normalizer(runtime: RuntimeConfig, field_map_path: Optional[str]) -> ScheduleNormalizer:
    normalizer = ScheduleNormalizer.from_config(runtime)
    if field_map_path:
        file_map = load_document(Path(field_map_path))
        normalizer.update_field_map(combine_field_maps(runtime.profile.field_map, file_map))
    return normalizer


def combine_field_maps(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Overlay a field map file onto profile overrides, group by group."""

    combined: Dict[str, Dict[str, Any]] = {group: dict(base.get(group) or {}) for group in base}
    for group, fields in overlay.items():
        if group == "version":
            continue
        if group not in FIELD_GROUPS or not isinstance(fields, Mapping):
            # Let merge_field_map report the malformed group.
            combined[group] = fields
            continue
        combined.setdefault(group, {}).update(fields)
    return combined


def emit(payload: Any, output: Optional[str]) -> None:
    if output:
        save_json(payload, Path(output))
        return
    json.dump(payload, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedule-normalize",
        description="Normalize schedule exports (tasks, WBS, relationships) into one canonical model",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="Path to a JSON/YAML configuration document")
    common.add_argument("--profile", default=DEFAULT_PROFILE, help="Configuration profile to use")
    common.add_argument("--field-map", help="JSON/YAML file with field map overrides")
    common.add_argument("--hours-per-day", type=float, help="Working hours per day for hour-based durations")
    common.add_argument("--output", help="Write JSON output to this path instead of stdout")

    subparsers = parser.add_subparsers(dest="command")

    normalize = subparsers.add_parser("normalize", parents=[common], help="Normalize one raw snapshot")
    normalize.add_argument("input", help="Raw snapshot (JSON/YAML)")
    normalize.set_defaults(func=command_normalize)

    validate = subparsers.add_parser("validate", parents=[common], help="Lint a raw snapshot")
    validate.add_argument("input", help="Raw snapshot (JSON/YAML)")
    validate.add_argument("--extended", action="store_true", help="Also check references and types")
    validate.set_defaults(func=command_validate)

    compare = subparsers.add_parser("compare", parents=[common], help="Match tasks between two snapshots")
    compare.add_argument("baseline", help="Baseline snapshot, or a {baseline, update} document")
    compare.add_argument("update", nargs="?", help="Update snapshot (JSON/YAML)")
    compare.add_argument(
        "--match",
        choices=[strategy.value for strategy in MatchStrategy],
        help="How tasks are paired across snapshots",
    )
    compare.add_argument("--include-snapshots", action="store_true", help="Include normalized snapshots")
    compare.set_defaults(func=command_compare)

    field_map = subparsers.add_parser("field-map", parents=[common], help="Print the effective field map")
    field_map.set_defaults(func=command_field_map)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    setup_logging(verbose=args.verbose)
    try:
        return args.func(args)
    except BackendError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
