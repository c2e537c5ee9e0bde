from __future__ import annotations

from datetime import datetime
from typing import Optional

from dailypaper.records import parse_iso, utc_now


def format_time_ago(published_at: str, now: Optional[datetime] = None) -> str:
    """Relative label for an ISO timestamp: ``Just now``, ``5m ago``, ``3h ago``, ``2d ago``."""
    now = now or utc_now()
    seconds = int((now - parse_iso(published_at)).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"
