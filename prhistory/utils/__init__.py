"""
Utility package exports
"""

from prhistory.utils.helpers import ensure_utc, parse_since

__all__ = ["ensure_utc", "parse_since"]
