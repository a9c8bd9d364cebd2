"""Advisory validation of raw schedule snapshots."""

from .snapshot import validate_snapshot

__all__ = ["validate_snapshot"]
