# app/ticket/categorize.py
"""
Subject-line category guess.

New tickets carry an explicit category; this heuristic only exists to fill
legacy rows whose ``category`` is still null.
"""
import re

from app.ticket.models import TicketCategory

_RULES = (
    (TicketCategory.COMPLAINT, re.compile(r"\b(complain|rude|harass|behavio|unsafe|late\b|attitude)")),
    (TicketCategory.BILLING, re.compile(r"\b(payment|charge|overcharg|fare\b|refund|wallet|invoice|billing|price|receipt)")),
    (TicketCategory.TECHNICAL, re.compile(r"\b(app\b|crash|bug\b|error|login|log in|gps\b|technical|not working|otp\b)")),
)


def infer_category(subject: str | None) -> TicketCategory:
    text = (subject or "").lower()
    for category, pattern in _RULES:
        if pattern.search(text):
            return category
    return TicketCategory.GENERAL
