# app/views/projections.py
"""View-model helpers computed on read and never stored."""
import re
from datetime import datetime

from app.core.timeutils import as_utc, utcnow

URGENT_KEYWORDS = ("emergency", "accident", "violence", "threat", "assault", "police", "injur", "unsafe")
HIGH_KEYWORDS = ("complaint", "harass", "rude", "overcharg", "refund", "lost", "stolen", "fraud")
LOW_KEYWORDS = ("feedback", "suggestion", "question", "how do i", "info")


def time_ago(value: datetime | None, now: datetime | None = None) -> str:
    """``12m ago`` / ``3h ago`` / ``2d ago``, rounded down."""
    if value is None:
        return ""
    now = as_utc(now) if now else utcnow()
    minutes = max(0, int((now - as_utc(value)).total_seconds() // 60))
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 1440:
        return f"{minutes // 60}h ago"
    return f"{minutes // 1440}d ago"


def _contains(text: str, keywords) -> bool:
    return any(re.search(rf"\b{re.escape(k)}", text) for k in keywords)


def suggest_priority(*texts: str | None) -> str:
    """Keyword guess at a ticket's priority, shown next to the stored one."""
    text = " ".join(t for t in texts if t).lower()
    if _contains(text, URGENT_KEYWORDS):
        return "urgent"
    if _contains(text, HIGH_KEYWORDS):
        return "high"
    if _contains(text, LOW_KEYWORDS):
        return "low"
    return "normal"
