"""Shared utilities: datetime and generators."""

from wastems.shared.utils.datetime import ensure_utc, isoformat_z, parse_timestamp, utc_now
from wastems.shared.utils.generators import generate_id

__all__ = [
    "ensure_utc",
    "generate_id",
    "isoformat_z",
    "parse_timestamp",
    "utc_now",
]
