from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Storefront 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value) -> Optional[datetime]:
    """
    Read a timestamp from the remote store as a naive UTC datetime.

    None or blank gives None. Date-only strings ("2025-03-07") are midnight
    UTC; offsets, including a trailing Z, are folded into UTC.

    Raises ValueError for anything fromisoformat() cannot read.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Wire form, whole seconds with a trailing Z. Naive values are UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"


def format_display_date(dt: Optional[datetime]) -> Optional[str]:
    """Customer-facing date, e.g. '07 Mar 2025'."""
    if dt is None:
        return None
    return dt.strftime("%d %b %Y")
