"""JSON/YAML file helpers for raw snapshots and normalized artifacts."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from common.errors import BackendError, ErrorCode
from common.models import NormalizedSnapshot
from common.serialization import snapshot_to_dict

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def load_document(path: Path) -> Dict[str, Any]:
    """Decode a JSON (or YAML, by suffix) document whose top level is an object."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(handle)
            else:
                data = json.load(handle)
    except OSError as exc:
        raise BackendError(ErrorCode.IO_ERROR, f"Cannot read '{path}': {exc}", context={"path": str(path)}) from exc
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise BackendError(ErrorCode.IO_ERROR, f"Cannot decode '{path}': {exc}", context={"path": str(path)}) from exc
    if not isinstance(data, dict):
        raise BackendError(
            ErrorCode.SCHEMA_ERROR,
            f"'{path}' must contain an object at the top level, got {type(data).__name__}",
            context={"path": str(path)},
        )
    logger.info("Loaded %s", path)
    return data


def load_raw_snapshot(path: Path) -> Dict[str, Any]:
    return load_document(path)


def load_compare_input(path: Path) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Read a ``{"baseline": ..., "update": ...}`` document."""

    data = load_document(path)
    missing = [key for key in ("baseline", "update") if not isinstance(data.get(key), dict)]
    if missing:
        raise BackendError(
            ErrorCode.SCHEMA_ERROR,
            f"'{path}' is missing snapshot object(s) {missing}",
            context={"path": str(path)},
        )
    return data["baseline"], data["update"]


def save_json(payload: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Wrote %s", path)


def save_normalized_snapshot(snapshot: NormalizedSnapshot, path: Path) -> None:
    save_json(snapshot_to_dict(snapshot), path)
