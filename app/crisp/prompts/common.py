"""Shared prompt helpers used across prompt modules."""

from __future__ import annotations
from textwrap import dedent

from ..models import Difficulty


def tier_rules(difficulty: Difficulty) -> str:
    if difficulty == Difficulty.EASY:
        return (
            "Easy question (20 seconds to answer).\n"
            "- A single core concept that can be explained in one or two sentences.\n"
            "- No code writing, no multi-part asks.\n"
        )
    if difficulty == Difficulty.MEDIUM:
        return (
            "Medium question (60 seconds to answer).\n"
            "- Practical usage, trade-offs, or comparing two approaches.\n"
            "- Answerable in a short paragraph.\n"
        )
    return (
        "Hard question (120 seconds to answer).\n"
        "- Internals, architecture, performance, or a small design problem.\n"
        "- Expect reasoning, not a memorised definition.\n"
    )


_EXEMPLARS = {
    Difficulty.EASY: [
        "What is the difference between let and const in JavaScript?",
        "What does the key prop do when rendering a list in React?",
    ],
    Difficulty.MEDIUM: [
        "When would you reach for useMemo, and what does it cost you?",
        "How does CSS specificity decide which rule wins?",
    ],
    Difficulty.HARD: [
        "How would you design client-side caching for a paginated API in a React app?",
        "Walk through what happens between typing a URL and the first paint.",
    ],
}


def exemplar_block(difficulty: Difficulty, max_examples: int = 2) -> str:
    examples = _EXEMPLARS.get(difficulty, [])[:max_examples]
    if not examples:
        return ""
    lines = [f"Question exemplars ({difficulty.value}). Do not copy verbatim:"]
    lines += [f"- {q}" for q in examples]
    return "\n".join(lines)


def single_question_rules() -> str:
    return dedent(
        """\
        Rules:
        - Output exactly ONE question and nothing else.
        - No numbering, no quotes, no preamble, no markdown.
        - Keep it under 35 words.
        """
    )


def clip_text(s: str, max_chars: int) -> str:
    """Clip text to max_chars, adding ellipsis if clipped."""
    s = s or ""
    if len(s) <= max_chars:
        return s
    return s[: max_chars - 1].rstrip() + "…"
