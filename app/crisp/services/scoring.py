"""
Purpose: Grade answers 1..10 and write the end-of-interview summary.

What is inside:
- LLMAnswerScorer: asks the model for {"score": n} and a short summary.
- HeuristicAnswerScorer: deterministic stand-in used when the model is
  unavailable or fails (and as the default when no API key is set).
- clamp_score / floor_average helpers.

Testing: Known answers against the heuristic; fake LLM replies for parsing.
"""

from __future__ import annotations
import logging
import re
from typing import Any, Sequence

from ..interfaces import LLMClient
from ..models import Answer, LLMSettings
from ..prompts import DefaultPromptFactory
from ..utils.llm_json import extract_json

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10

_WORD = re.compile(r"[A-Za-z][A-Za-z0-9+#.-]*")
_STOPWORDS = {
    "a", "an", "and", "are", "does", "do", "explain", "for", "how", "in", "is",
    "it", "of", "on", "or", "the", "to", "what", "when", "why", "with", "would",
    "you", "your", "between", "difference", "work", "works", "use", "cases",
}


def clamp_score(value: Any) -> int:
    """Coerce any value into an integer score within [1, 10]."""
    try:
        n = int(round(float(value)))
    except (TypeError, ValueError):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, n))


def floor_average(scores: Sequence[int | None]) -> int:
    """Integer floor of the mean; ungraded slots count as zero."""
    if not scores:
        return 0
    return sum(s or 0 for s in scores) // len(scores)


def default_summary(answers: Sequence[Answer], final_score: int) -> str:
    return (
        f"Candidate completed {len(answers)} questions with an average score "
        f"of {final_score}/10."
    )


def _keywords(text: str) -> set[str]:
    return {
        w.lower().rstrip(".")
        for w in _WORD.findall(text or "")
        if len(w) > 2 and w.lower() not in _STOPWORDS
    }


class HeuristicAnswerScorer:
    """Length plus keyword overlap with the question. Deterministic."""

    def score(self, question: str, answer: str) -> int:
        words = _WORD.findall(answer or "")
        if not words:
            return MIN_SCORE
        length_points = min(6, 1 + len(words) // 8)
        overlap = len(_keywords(question) & _keywords(answer))
        return clamp_score(length_points + min(4, overlap))

    def summarize(self, answers: Sequence[Answer], final_score: int) -> str:
        answered = sum(1 for a in answers if (a.answer or "").strip())
        text = default_summary(answers, final_score)
        if answered < len(answers):
            text += f" {len(answers) - answered} question(s) were left unanswered."
        return text


class LLMAnswerScorer:
    def __init__(self, llm: LLMClient, settings: LLMSettings):
        self.llm = llm
        self.settings = settings
        self.prompts = DefaultPromptFactory()

    def score(self, question: str, answer: str) -> int:
        if not (answer or "").strip():
            return MIN_SCORE

        text, _meta = self.llm.chat(
            messages=[
                {
                    "role": "user",
                    "content": self.prompts.scoring_instruction(
                        question=question, answer=answer
                    ),
                }
            ],
            settings=LLMSettings(
                model=self.settings.model,
                temperature=min(self.settings.temperature, 0.3),
                top_p=self.settings.top_p,
                max_tokens=120,
            ),
            system=self.prompts.scoring_system(),
        )
        obj = extract_json(text) if text else {}
        if not isinstance(obj, dict) or "score" not in obj:
            raise ValueError("LLM did not return a score object.")
        return clamp_score(obj["score"])

    def summarize(self, answers: Sequence[Answer], final_score: int) -> str:
        text, _meta = self.llm.chat(
            messages=[
                {
                    "role": "user",
                    "content": self.prompts.summary_instruction(
                        answers=answers, final_score=final_score
                    ),
                }
            ],
            settings=LLMSettings(
                model=self.settings.model,
                temperature=min(self.settings.temperature, 0.5),
                top_p=self.settings.top_p,
                max_tokens=220,
            ),
            system=self.prompts.scoring_system(),
        )
        summary = (text or "").strip()
        if not summary:
            raise ValueError("LLM returned an empty summary.")
        return summary
