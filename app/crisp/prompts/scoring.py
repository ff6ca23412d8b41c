"""Scoring prompts: per-answer grade and end-of-interview summary."""

from __future__ import annotations
from textwrap import dedent
from typing import Sequence

from ..models import Answer
from .common import clip_text


def scoring_system() -> str:
    return (
        "You are a technical interview grader.\n"
        "Rules:\n"
        "- Be objective and concise.\n"
        "- Judge only what the candidate wrote; never invent content.\n"
        "- Answers were typed under a short time limit; reward correctness over polish.\n"
        "- When asked to return JSON, return EXACTLY one JSON object and nothing else."
    )


def scoring_instruction(*, question: str, answer: str) -> str:
    return dedent(
        f"""\
        Grade the candidate's answer to the question on an integer 1..10 scale.

        Question:
        {question or "(not available)"}

        Candidate answer:
        {answer or "(no answer)"}

        Output ONLY this JSON object (no code fences, no commentary):
        {{"score": <integer 1..10>, "reason": "<= 25 words"}}
        """
    )


def render_transcript(answers: Sequence[Answer], max_chars: int = 5000) -> str:
    lines: list[str] = []
    for i, a in enumerate(answers, 1):
        score = "-" if a.score is None else f"{a.score}/10"
        lines.append(
            f"Q{i} ({a.difficulty.value}, {a.time_spent}s, score {score}): "
            f"{a.question}\nA{i}: {(a.answer or '').strip() or '(no answer)'}"
        )
    return clip_text("\n\n".join(lines), max_chars)


def summary_instruction(*, answers: Sequence[Answer], final_score: int) -> str:
    return (
        "Write a short evaluation of this timed technical interview for the "
        "hiring team.\n"
        f"Final score: {final_score}/10.\n\n"
        f"TRANSCRIPT:\n{render_transcript(answers)}\n\n"
        "Output 2 to 4 plain sentences: overall level, strongest area, "
        "weakest area. No headings, no bullet points, no markdown."
    )
