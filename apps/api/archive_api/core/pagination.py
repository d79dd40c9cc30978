from datetime import datetime, timezone
from typing import Tuple

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

def iso_utc(dt: datetime) -> str:
    """ Convert datetime to ISO 8601 UTC string with 'Z' suffix. """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

def parse_timestamp(value) -> datetime | None:
    """ Accept a datetime or an ISO 8601 string; anything else is None. """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None

def page_window(page: int, page_size: int) -> Tuple[int, int]:
    """ Convert a 1-based page number and page size into (offset, limit). """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 0:
        raise ValueError(f"page_size must be >= 0, got {page_size}")
    return (page - 1) * page_size, page_size
