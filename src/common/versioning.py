"""Centralized version constants for serialized artifacts."""
from __future__ import annotations

FIELD_MAP_ARTIFACT_VERSION = "1.0.0"
SNAPSHOT_ARTIFACT_VERSION = "1.0.0"
