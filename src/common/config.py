"""Helpers for loading normalizer configuration profiles."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import BackendError, ErrorCode
from .models import (
    FIELD_GROUPS,
    GlobalSettings,
    MatchStrategy,
    ProfileSettings,
    RuntimeConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/defaults.json")
DEFAULT_PROFILE = "primavera"
YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass(slots=True)
class ConfigDocument:
    source: Optional[Path]
    version: int
    global_settings: GlobalSettings
    profiles: Dict[str, ProfileSettings]


def load_runtime_config(
    profile: str = DEFAULT_PROFILE,
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> RuntimeConfig:
    """Load a configuration document, validate it, and resolve a specific profile."""

    document = load_config_document(
        profile_name=profile,
        config_path=config_path,
        overrides=overrides,
    )
    try:
        profile_settings = document.profiles[profile]
    except KeyError as exc:  # pragma: no cover - guarded earlier but defensive
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{profile}' not found in {document.source}",
        ) from exc
    return RuntimeConfig(global_settings=document.global_settings, profile=profile_settings)


def load_config_document(
    *,
    profile_name: Optional[str] = None,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ConfigDocument:
    if config_path is None and not DEFAULT_CONFIG_PATH.exists():
        logger.debug("No config at %s, using built-in defaults", DEFAULT_CONFIG_PATH)
        raw: Mapping[str, Any] = builtin_config()
        cfg_path: Optional[Path] = None
    else:
        cfg_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        raw = read_config_file(cfg_path)

    source = cfg_path or Path("<builtin>")
    version = _require_positive_int(raw.get("version"), "version", source)
    global_section = raw.get("global", {}) or {}
    if not isinstance(global_section, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'global' section must be an object in {source}")

    overrides = overrides or {}
    global_data = {**global_section, **(overrides.get("global") or {})}
    global_settings = _build_global_settings(global_data, source)

    profiles_section = raw.get("profiles")
    if not isinstance(profiles_section, Mapping) or not profiles_section:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'profiles' section missing in {source}")

    profile_overrides = overrides.get("profile") or {}
    profiles: Dict[str, ProfileSettings] = {}
    for name, profile_data in profiles_section.items():
        if not isinstance(profile_data, Mapping):
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Profile '{name}' must be an object in {source}",
            )
        merged = dict(profile_data)
        if profile_name and name == profile_name and profile_overrides:
            merged = {**merged, **profile_overrides}
        profiles[name] = _build_profile_settings(name, merged, source)

    if profile_name and profile_name not in profiles:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{profile_name}' not found in {source}",
        )

    return ConfigDocument(
        source=cfg_path,
        version=version,
        global_settings=global_settings,
        profiles=profiles,
    )


def builtin_config() -> Dict[str, Any]:
    """Configuration used when no file is available: defaults only."""

    return {
        "version": 1,
        "global": {},
        "profiles": {
            DEFAULT_PROFILE: {"description": "Primavera P6 export field names (built-in defaults)"},
        },
    }


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a JSON or YAML configuration file into a dict."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(handle)
            else:
                data = json.load(handle)
    except FileNotFoundError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' not found") from exc
    except json.JSONDecodeError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' is not valid JSON: {exc}") from exc
    except yaml.YAMLError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' must contain an object")
    return data


# ---------------------------------------------------------------------------
# Internal helpers


def _build_global_settings(data: Mapping[str, Any], source: Path) -> GlobalSettings:
    defaults = GlobalSettings()
    hours_per_day = _require_positive_number(
        data.get("hours_per_day", defaults.hours_per_day), "global.hours_per_day", source
    )
    match_strategy = _normalize_match_strategy(data.get("match_strategy", defaults.match_strategy), source)
    extended = data.get("extended_validation", defaults.extended_validation)
    if not isinstance(extended, bool):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"global.extended_validation must be a boolean in {source}")
    return GlobalSettings(
        hours_per_day=hours_per_day,
        match_strategy=match_strategy,
        extended_validation=extended,
    )


def _build_profile_settings(name: str, data: Mapping[str, Any], source: Path) -> ProfileSettings:
    prefix = f"profiles.{name}"
    description = data.get("description", "")
    if not isinstance(description, str):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{prefix}.description must be a string in {source}")

    hours_per_day = data.get("hours_per_day")
    if hours_per_day is not None:
        hours_per_day = _require_positive_number(hours_per_day, f"{prefix}.hours_per_day", source)

    return ProfileSettings(
        name=name,
        description=description.strip(),
        field_map=_build_field_map_overrides(data.get("field_map"), f"{prefix}.field_map", source),
        hours_per_day=hours_per_day,
    )


def _build_field_map_overrides(
    value: Any, field: str, source: Path
) -> Dict[str, Dict[str, Optional[List[str]]]]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be an object in {source}")
    overrides: Dict[str, Dict[str, Optional[List[str]]]] = {}
    for group, fields in value.items():
        if group not in FIELD_GROUPS:
            allowed = ", ".join(FIELD_GROUPS)
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Unknown group '{group}' in {field} ({source}). Allowed: {allowed}",
            )
        if not isinstance(fields, Mapping):
            raise BackendError(ErrorCode.CONFIG_ERROR, f"{field}.{group} must be an object in {source}")
        group_overrides: Dict[str, Optional[List[str]]] = {}
        for canonical, names in fields.items():
            if canonical not in FIELD_GROUPS[group]:
                raise BackendError(
                    ErrorCode.CONFIG_ERROR,
                    f"Unknown canonical field '{group}.{canonical}' in {field} ({source})",
                )
            group_overrides[canonical] = _require_name_list(names, f"{field}.{group}.{canonical}", source)
        overrides[group] = group_overrides
    return overrides


def _require_name_list(value: Any, field: str, source: Path) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be a list of non-empty strings in {source}",
        )
    return [item.strip() for item in value]


def _normalize_match_strategy(value: Any, source: Path) -> str:
    allowed = {strategy.value for strategy in MatchStrategy}
    if not isinstance(value, str) or value.strip().lower() not in allowed:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Unsupported match_strategy '{value}' in {source}. Allowed: {', '.join(sorted(allowed))}",
        )
    return value.strip().lower()


def _require_positive_number(value: Any, field: str, source: Path) -> float:
    if isinstance(value, bool):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be a number in {source}")
    try:
        num = float(value)
    except (TypeError, ValueError) as exc:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be a number in {source}",
        ) from exc
    if math.isnan(num) or num <= 0:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be greater than zero in {source}",
        )
    return num


def _require_positive_int(value: Any, field: str, source: Path) -> int:
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be an integer in {source}",
        ) from exc
    if num <= 0:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be greater than zero in {source}",
        )
    return num
