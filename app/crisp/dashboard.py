"""
Read-side helpers for the interviewer dashboard, the welcome-back dialog and
the question timer. Pure functions over Candidate objects so they can be
tested without Streamlit.
"""

from __future__ import annotations
from typing import Iterable, Literal

from .models import QUESTION_COUNT, Candidate

SortKey = Literal["score", "name"]


def filter_and_sort(
    candidates: Iterable[Candidate], search: str = "", sort_by: SortKey = "score"
) -> list[Candidate]:
    """Case-insensitive name search; best score first, or A-Z by name."""
    needle = (search or "").strip().lower()
    rows = [c for c in candidates if needle in (c.name or "").lower()]
    if sort_by == "name":
        return sorted(rows, key=lambda c: (c.name or "").lower())
    return sorted(rows, key=lambda c: c.final_score or 0, reverse=True)


def answered_count(candidate: Candidate) -> int:
    return sum(1 for a in candidate.answers if a.is_answered)


def interview_progress(candidate: Candidate) -> int:
    """Percentage of the six questions already behind the candidate."""
    return round(min(candidate.current_question, QUESTION_COUNT) / QUESTION_COUNT * 100)


def format_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def timer_level(remaining: int, total: int) -> str:
    """normal / warning (last quarter) / critical (last ten seconds)."""
    if remaining <= 10:
        return "critical"
    if total and remaining <= total * 0.25:
        return "warning"
    return "normal"
