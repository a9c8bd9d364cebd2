"""Cross-snapshot task matching for baseline/update comparisons."""

from .matching import match_tasks, parse_match_strategy

__all__ = ["match_tasks", "parse_match_strategy"]
