"""Question generation prompts (per-tier question, resume question set)."""

from __future__ import annotations

from ..models import Difficulty
from .common import clip_text, exemplar_block, single_question_rules, tier_rules

MAX_RESUME_CHARS = 6000


def question_system(*, role: str) -> str:
    return (
        f"You are a technical interviewer hiring a {role}.\n"
        "You write short, unambiguous interview questions for a timed chat "
        "interview. The candidate types the answer against a countdown.\n"
        + single_question_rules()
    )


def question_instruction(*, difficulty: Difficulty, role: str) -> str:
    return (
        f"Generate one {difficulty.value} level interview question for a {role}.\n"
        f"{tier_rules(difficulty)}"
        f"{exemplar_block(difficulty)}\n"
        "Only return the question text, nothing else."
    )


def question_set_instruction(*, resume_text: str, count: int) -> str:
    resume = clip_text((resume_text or "").strip(), MAX_RESUME_CHARS)
    return (
        f"Read this resume:\n{resume or '(empty resume)'}\n\n"
        f"Generate {count} interview questions relevant to this candidate.\n"
        "Only return the questions as a numbered list, one per line."
    )
