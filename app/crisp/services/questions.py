"""
Purpose: Produce interview questions per difficulty tier, and resume-driven
question sets. Keeps the LLM details out of the store.

What is inside:
- Built-in fallback pools used whenever the provider fails.
- LLMQuestionProvider: OpenAI-backed QuestionProvider.
- question_or_fallback / question_set_or_fallback: the recovery the store
  relies on; callers never see a provider error.

Testing: Fake LLM replies; a failing provider must yield a pool entry.
"""

from __future__ import annotations
import logging
import random
from typing import Optional

from ..interfaces import LLMClient, QuestionProvider
from ..models import Difficulty, LLMSettings
from ..prompts import DefaultPromptFactory
from ..utils.llm_json import clean_single_line, split_numbered_list

logger = logging.getLogger(__name__)

FALLBACK_QUESTIONS: dict[Difficulty, tuple[str, ...]] = {
    Difficulty.EASY: (
        "Explain the React reconciliation process.",
        "What is the Virtual DOM in React?",
        "How does event handling work in JavaScript?",
    ),
    Difficulty.MEDIUM: (
        "Explain React hooks and their use cases.",
        "How would you optimize a slow React app?",
        "Difference between controlled and uncontrolled components.",
    ),
    Difficulty.HARD: (
        "Explain closure in JavaScript with examples.",
        "How does React fiber architecture work?",
        "Implement a debounce function in JS and explain.",
    ),
}

FALLBACK_QUESTION_SET: tuple[str, ...] = (
    "What are your key technical strengths?",
    "Explain a challenging project you worked on.",
    "How do you handle debugging complex issues?",
    "What frameworks are you most comfortable with?",
    "Where do you see yourself improving technically?",
)


class LLMQuestionProvider:
    def __init__(
        self,
        llm: LLMClient,
        settings: LLMSettings,
        *,
        role: str = "frontend developer",
    ):
        self.llm = llm
        self.settings = settings
        self.role = role
        self.prompts = DefaultPromptFactory()

    def fetch_question(self, difficulty: Difficulty) -> str:
        difficulty = Difficulty(difficulty)
        text, _meta = self.llm.chat(
            messages=[
                {
                    "role": "user",
                    "content": self.prompts.question_instruction(
                        difficulty=difficulty, role=self.role
                    ),
                }
            ],
            settings=LLMSettings(
                model=self.settings.model,
                temperature=self.settings.temperature,
                top_p=self.settings.top_p,
                max_tokens=120,
            ),
            system=self.prompts.question_system(role=self.role),
        )
        question = clean_single_line(text)
        if not question:
            raise ValueError("Empty response from question model.")
        return question

    def fetch_question_set(self, resume_text: str, count: int) -> list[str]:
        text, _meta = self.llm.chat(
            messages=[
                {
                    "role": "user",
                    "content": self.prompts.question_set_instruction(
                        resume_text=resume_text, count=count
                    ),
                }
            ],
            settings=LLMSettings(
                model=self.settings.model,
                temperature=self.settings.temperature,
                top_p=self.settings.top_p,
                max_tokens=60 * max(1, count),
            ),
            system=self.prompts.question_system(role=self.role),
        )
        return split_numbered_list(text)[:count]


def question_or_fallback(
    provider: QuestionProvider,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> str:
    """Ask the provider for one question; on any failure pick from the pool."""
    difficulty = Difficulty(difficulty)
    try:
        question = (provider.fetch_question(difficulty) or "").strip()
        if question:
            return question
        logger.warning("Question provider returned nothing for %s", difficulty.value)
    except Exception as e:
        logger.warning(
            "Question provider failed for %s: %s", difficulty.value, e, exc_info=True
        )
    return (rng or random).choice(FALLBACK_QUESTIONS[difficulty])


def question_set_or_fallback(
    provider: QuestionProvider, resume_text: str, count: int = 5
) -> list[str]:
    """Resume-driven question set; the fixed list is used on failure."""
    try:
        questions = [
            q.strip()
            for q in provider.fetch_question_set(resume_text, count) or []
            if q and q.strip()
        ]
        if questions:
            return questions[:count]
        logger.warning("Question provider returned an empty question set")
    except Exception as e:
        logger.warning("Question set generation failed: %s", e, exc_info=True)
    return list(FALLBACK_QUESTION_SET)
