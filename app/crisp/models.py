"""
Canonical data shapes for the interview session store.

Typical contents:
- Candidate (contact fields, lifecycle status, six answer slots, result).
- Answer (question, difficulty tier, response, timing, score).
- InterviewState (roster, focused candidate, in-progress flag, UI panel).
- LLMSettings (model, temperature, top_p, max_tokens).

Testing: Trivial; mostly types. Tier/time helpers are covered by store tests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum
from datetime import datetime


class CandidateStatus(str, Enum):
    UPLOADING = "uploading"
    COLLECTING_INFO = "collecting-info"
    INTERVIEWING = "interviewing"
    COMPLETED = "completed"
    PAUSED = "paused"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActivePanel(str, Enum):
    INTERVIEWEE = "interviewee"
    INTERVIEWER = "interviewer"


TIME_LIMITS: dict[Difficulty, int] = {
    Difficulty.EASY: 20,
    Difficulty.MEDIUM: 60,
    Difficulty.HARD: 120,
}

QUESTION_TIERS: tuple[Difficulty, ...] = (
    Difficulty.EASY,
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.MEDIUM,
    Difficulty.HARD,
    Difficulty.HARD,
)

QUESTION_COUNT = len(QUESTION_TIERS)

CONTACT_FIELDS = ("name", "email", "phone")


def time_limit(difficulty: Difficulty | str) -> int:
    """Seconds allotted to a question of the given tier."""
    return TIME_LIMITS[Difficulty(difficulty)]


@dataclass
class Answer:
    question: str
    difficulty: Difficulty
    answer: str = ""
    time_spent: int = 0
    score: Optional[int] = None

    @property
    def is_answered(self) -> bool:
        return self.score is not None


@dataclass
class Candidate:
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    status: CandidateStatus = CandidateStatus.COLLECTING_INFO
    current_question: int = 0
    time_remaining: int = 0
    answers: list[Answer] = field(default_factory=list)
    resume_name: Optional[str] = None
    resume_text: Optional[str] = None
    resume_questions: list[str] = field(default_factory=list)
    final_score: Optional[int] = None
    summary: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    def has_contact_info(self) -> bool:
        return all((getattr(self, f) or "").strip() for f in CONTACT_FIELDS)


@dataclass
class InterviewState:
    candidates: dict[str, Candidate] = field(default_factory=dict)
    current_candidate_id: Optional[str] = None
    is_interview_active: bool = False
    active_panel: ActivePanel = ActivePanel.INTERVIEWEE


@dataclass(frozen=True)
class QuestionView:
    """Read-only view of the active slot, as the chat UI shows it."""

    question: str
    difficulty: Difficulty
    number: int
    total: int
    time_limit: int


@dataclass
class LLMSettings:
    model: str
    temperature: float = 0.7
    top_p: float = 1.0
    max_tokens: int = 512
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    response_format: Optional[dict] = None
