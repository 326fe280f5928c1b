"""Shared utility functions for skyclock.

Provides angle normalization helpers and filesystem cache management.
"""

from skyclock.utils._angle import (
    degrees_to_dms,
    hours_to_hms,
    normalize,
    normalize_degrees,
    signed_degrees,
)
from skyclock.utils.caching import (
    file_age_seconds,
    get_cache_dir,
    get_eop_cache_dir,
    is_file_stale,
)

__all__ = [
    "degrees_to_dms",
    "file_age_seconds",
    "get_cache_dir",
    "get_eop_cache_dir",
    "hours_to_hms",
    "is_file_stale",
    "normalize",
    "normalize_degrees",
    "signed_degrees",
]
