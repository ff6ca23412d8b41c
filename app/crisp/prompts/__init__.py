"""Facade over the prompt modules used by the question and scoring services."""

from __future__ import annotations
from typing import Sequence

from ..models import Answer, Difficulty
from . import questions as _questions
from . import scoring as _scoring


class DefaultPromptFactory:
    # QUESTIONS
    def question_system(self, *, role: str) -> str:
        return _questions.question_system(role=role)

    def question_instruction(self, *, difficulty: Difficulty, role: str) -> str:
        return _questions.question_instruction(difficulty=difficulty, role=role)

    def question_set_instruction(self, *, resume_text: str, count: int) -> str:
        return _questions.question_set_instruction(
            resume_text=resume_text, count=count
        )

    # SCORING
    def scoring_system(self) -> str:
        return _scoring.scoring_system()

    def scoring_instruction(self, *, question: str, answer: str) -> str:
        return _scoring.scoring_instruction(question=question, answer=answer)

    def summary_instruction(
        self, *, answers: Sequence[Answer], final_score: int
    ) -> str:
        return _scoring.summary_instruction(answers=answers, final_score=final_score)
