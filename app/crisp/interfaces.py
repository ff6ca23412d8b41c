"""
Abstractions for pluggable collaborators. The store depends on these
Protocols, not on concrete services, so tests can inject deterministic fakes
and the OpenAI-backed services can be swapped later.

Common protocols:
- LLMClient.chat(messages, settings) -> (reply, meta)
- QuestionProvider.fetch_question(tier) / fetch_question_set(resume, count)
- AnswerScorer.score(question, answer) / summarize(answers, final_score)
- StateStore.load() / save(blob)

Testing: Use simple fake implementations to test the store without network calls.
"""

from __future__ import annotations
from typing import Any, Optional, Protocol, Sequence
from .models import Answer, Difficulty, LLMSettings


class LLMClient(Protocol):
    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
        system: Optional[str] = None,
    ) -> tuple[str, dict]: ...


class QuestionProvider(Protocol):
    def fetch_question(self, difficulty: Difficulty) -> str: ...

    def fetch_question_set(self, resume_text: str, count: int) -> list[str]: ...


class AnswerScorer(Protocol):
    def score(self, question: str, answer: str) -> int: ...

    def summarize(self, answers: Sequence[Answer], final_score: int) -> str: ...


class StateStore(Protocol):
    def load(self) -> Optional[dict[str, Any]]: ...

    def save(self, blob: dict[str, Any]) -> None: ...
