"""
Purpose: The single owner of interview state. Holds the candidate roster and
drives each interview through its fixed six-question progression.
Keeps the UI from knowing how questions are fetched, answers graded, or
state persisted.

Key responsibilities:
- Roster management (add, patch, delete, focus).
- Interview lifecycle: start -> submit x6 -> completed, with pause/resume.
- Per-question timing (allotment per tier, one-second decrements).
- Scoring aggregation (floor of the mean of six per-answer scores).
- Load the persisted snapshot on init and save it after every mutation.
- Safe to share between UI sessions: mutations hold a re-entrant lock.

Lookups of unknown candidate ids are silent no-ops; use has_candidate() when
the caller needs to know. Collaborator failures fall back to built-in content
and are logged, never raised.

Testing: Pure unit tests with fakes: scripted QuestionProvider, fixed-sequence
AnswerScorer, InMemoryStateStore and a fixed clock.
"""

from __future__ import annotations
import dataclasses
import functools
import logging
import random
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Optional

from .interfaces import AnswerScorer, QuestionProvider, StateStore
from .models import (
    QUESTION_TIERS,
    ActivePanel,
    Answer,
    Candidate,
    CandidateStatus,
    Difficulty,
    InterviewState,
    QuestionView,
    time_limit,
)
from .persistence.codec import decode_state, encode_state
from .services.questions import question_or_fallback, question_set_or_fallback
from .services.scoring import HeuristicAnswerScorer, clamp_score, floor_average
from .utils.logging import ElapsedTimeLogger

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id", "created_at"}
_CANDIDATE_FIELDS = {f.name for f in dataclasses.fields(Candidate)}


def _synchronized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class InterviewSessionStore:
    def __init__(
        self,
        questions: QuestionProvider,
        scorer: AnswerScorer,
        *,
        persistence: Optional[StateStore] = None,
        fallback_scorer: Optional[AnswerScorer] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
        max_workers: int = len(QUESTION_TIERS),
    ):
        self.questions: QuestionProvider = questions
        self.scorer: AnswerScorer = scorer
        self.fallback_scorer: AnswerScorer = fallback_scorer or HeuristicAnswerScorer()
        self.persistence: Optional[StateStore] = persistence
        self._clock = clock or datetime.now
        self._rng = rng or random.Random()
        self._max_workers = max(1, int(max_workers))
        self._lock = threading.RLock()
        self.state = InterviewState()
        self._load()

    # ---------------------------
    # Queries
    # ---------------------------
    @property
    def candidates(self) -> list[Candidate]:
        """Roster in insertion order."""
        return list(self.state.candidates.values())

    @property
    def current_candidate(self) -> Optional[Candidate]:
        cid = self.state.current_candidate_id
        return self.state.candidates.get(cid) if cid else None

    @property
    def is_interview_active(self) -> bool:
        return self.state.is_interview_active

    @property
    def active_panel(self) -> ActivePanel:
        return self.state.active_panel

    def has_candidate(self, candidate_id: str) -> bool:
        return candidate_id in self.state.candidates

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        return self.state.candidates.get(candidate_id)

    def current_question(self, candidate_id: str) -> Optional[QuestionView]:
        """The active slot of a candidate, numbered from 1 for display."""
        c = self._lookup(candidate_id, "current_question")
        if c is None or not (0 <= c.current_question < len(c.answers)):
            return None
        slot = c.answers[c.current_question]
        return QuestionView(
            question=slot.question,
            difficulty=slot.difficulty,
            number=c.current_question + 1,
            total=len(c.answers),
            time_limit=time_limit(slot.difficulty),
        )

    # ---------------------------
    # Roster
    # ---------------------------
    @_synchronized
    def add_candidate(self, **fields: Any) -> Candidate:
        """
        Create a candidate, append it to the roster and focus it.
        Status is `uploading` when name, email and phone are all known
        (e.g. pre-filled from the resume), otherwise `collecting-info`;
        an explicit `status` field wins.
        """
        data = self._clean_fields(fields)
        candidate = Candidate(id=uuid.uuid4().hex, created_at=self._clock(), **data)
        if "status" not in data:
            candidate.status = (
                CandidateStatus.UPLOADING
                if candidate.has_contact_info()
                else CandidateStatus.COLLECTING_INFO
            )
        self.state.candidates[candidate.id] = candidate
        self.state.current_candidate_id = candidate.id
        logger.info("Added candidate %s (%s)", candidate.id, candidate.status.value)
        self._save()
        return candidate

    @_synchronized
    def update_candidate(self, candidate_id: str, **fields: Any) -> None:
        """Merge fields into a candidate. No validation; unknown id is a no-op."""
        c = self._lookup(candidate_id, "update_candidate")
        if c is None:
            return
        for key, value in self._clean_fields(fields).items():
            setattr(c, key, value)
        self._save()

    @_synchronized
    def delete_candidate(self, candidate_id: str) -> None:
        """Remove a candidate; clears focus if it was focused. Idempotent."""
        if self.state.candidates.pop(candidate_id, None) is None:
            logger.debug("delete_candidate: unknown candidate %s", candidate_id)
            return
        if self.state.current_candidate_id == candidate_id:
            self.state.current_candidate_id = None
            self.state.is_interview_active = False
        logger.info("Deleted candidate %s", candidate_id)
        self._save()

    @_synchronized
    def set_current_candidate(self, candidate_id: Optional[str]) -> None:
        """
        Move focus. A focused candidate that is mid-interview when focus moves
        away becomes `paused`.
        """
        if candidate_id is not None and not self.has_candidate(candidate_id):
            logger.debug("set_current_candidate: unknown candidate %s", candidate_id)
            return
        previous = self.current_candidate
        if (
            previous is not None
            and previous.id != candidate_id
            and previous.status == CandidateStatus.INTERVIEWING
        ):
            previous.status = CandidateStatus.PAUSED
            self.state.is_interview_active = False
            logger.info("Paused interview of %s on focus change", previous.id)
        self.state.current_candidate_id = candidate_id
        self._save()

    @_synchronized
    def set_active_panel(self, panel: ActivePanel | str) -> None:
        self.state.active_panel = ActivePanel(panel)
        self._save()

    @_synchronized
    def set_collaborators(
        self, questions: QuestionProvider, scorer: AnswerScorer
    ) -> None:
        """Swap the question provider and grader, e.g. once an API key is entered."""
        self.questions = questions
        self.scorer = scorer

    # ---------------------------
    # Interview lifecycle
    # ---------------------------
    def start_interview(self, candidate_id: str) -> Optional[Candidate]:
        """
        Fetch six questions (easy, easy, medium, medium, hard, hard) and put
        the candidate on the first slot. Blocks until all six are in; provider
        failures are replaced by fallback questions.
        """
        with self._lock:
            if self._lookup(candidate_id, "start_interview") is None:
                return None
            self.state.is_interview_active = True
            provider = self.questions

        with ElapsedTimeLogger(f"question fetch for {candidate_id}", logger):
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                questions = list(
                    pool.map(
                        lambda tier: question_or_fallback(provider, tier, self._rng),
                        QUESTION_TIERS,
                    )
                )

        with self._lock:
            return self._begin(candidate_id, questions)

    def _begin(self, candidate_id: str, questions: list[str]) -> Optional[Candidate]:
        # the roster may have changed while questions were being fetched
        c = self._lookup(candidate_id, "start_interview")
        if c is None:
            self.state.is_interview_active = False
            return None

        c.answers = [
            Answer(question=q, difficulty=tier)
            for q, tier in zip(questions, QUESTION_TIERS)
        ]
        c.status = CandidateStatus.INTERVIEWING
        c.current_question = 0
        c.time_remaining = time_limit(QUESTION_TIERS[0])
        c.final_score = None
        c.summary = None
        c.completed_at = None
        self.state.current_candidate_id = c.id
        logger.info("Started interview for %s", c.id)
        self._save()
        return c

    @_synchronized
    def submit_answer(
        self,
        candidate_id: str,
        answer_text: str,
        *,
        expected_index: Optional[int] = None,
    ) -> Optional[Candidate]:
        """
        Record the answer for the active slot, grade it, then advance to the
        next slot or complete the interview after the sixth.

        `expected_index` is the slot the caller believes is active; if the
        interview already moved on (e.g. a manual submit landed in the same
        tick as a time-up auto-submit) the call is ignored.
        """
        c = self._lookup(candidate_id, "submit_answer")
        if c is None:
            return None
        if c.status != CandidateStatus.INTERVIEWING:
            logger.debug("submit_answer: %s is %s", c.id, c.status.value)
            return None
        idx = c.current_question
        if expected_index is not None and expected_index != idx:
            logger.info(
                "Ignoring stale submit for %s (slot %s, active %s)",
                c.id,
                expected_index,
                idx,
            )
            return None
        if not (0 <= idx < len(c.answers)):
            logger.debug("submit_answer: %s has no slot %s", c.id, idx)
            return None

        slot = c.answers[idx]
        text = answer_text or ""
        c.answers[idx] = dataclasses.replace(
            slot,
            answer=text,
            time_spent=max(0, time_limit(slot.difficulty) - c.time_remaining),
            score=self._score(slot.question, text),
        )

        if idx < len(c.answers) - 1:
            self._next_question(c)
        else:
            self._complete(c)
        self._save()
        return c

    @_synchronized
    def pause_interview(self) -> None:
        """Stop the clock: clears the in-progress flag, status untouched."""
        self.state.is_interview_active = False
        self._save()

    @_synchronized
    def resume_interview(self, candidate_id: str) -> Optional[Candidate]:
        """Continue a paused interview where it left off."""
        c = self._lookup(candidate_id, "resume_interview")
        if c is None or c.status != CandidateStatus.PAUSED:
            return None
        c.status = CandidateStatus.INTERVIEWING
        self.state.current_candidate_id = c.id
        self.state.is_interview_active = True
        logger.info("Resumed interview for %s at slot %s", c.id, c.current_question)
        self._save()
        return c

    @_synchronized
    def restart_interview(self, candidate_id: str) -> Optional[Candidate]:
        """Discard progress; the candidate is ready to start again."""
        c = self._lookup(candidate_id, "restart_interview")
        if c is None:
            return None
        c.status = CandidateStatus.UPLOADING
        c.current_question = 0
        c.time_remaining = 0
        c.answers = []
        c.final_score = None
        c.summary = None
        c.completed_at = None
        if self.state.current_candidate_id == c.id:
            self.state.is_interview_active = False
        self._save()
        return c

    @_synchronized
    def decrement_timer(self, candidate_id: str) -> Optional[int]:
        """One tick of the question clock, floored at zero. Returns the new value."""
        c = self._lookup(candidate_id, "decrement_timer")
        if c is None:
            return None
        c.time_remaining = max(0, c.time_remaining - 1)
        self._save()
        return c.time_remaining

    def generate_resume_questions(
        self, candidate_id: str, count: int = 5
    ) -> Optional[list[str]]:
        """Questions tailored to the candidate's resume, for the interviewer."""
        with self._lock:
            c = self._lookup(candidate_id, "generate_resume_questions")
            if c is None:
                return None
            resume_text, provider = c.resume_text or "", self.questions
        questions = question_set_or_fallback(provider, resume_text, count)
        with self._lock:
            c = self._lookup(candidate_id, "generate_resume_questions")
            if c is None:
                return None
            c.resume_questions = questions
            self._save()
        return questions

    # ---------------------------
    # Snapshots
    # ---------------------------
    @_synchronized
    def snapshot(self) -> dict[str, Any]:
        return encode_state(self.state)

    @_synchronized
    def restore(self, blob: dict[str, Any]) -> None:
        """Replace the whole state from a snapshot (migrating older layouts)."""
        self.state = decode_state(blob)

    # ---------------------------
    # Internals
    # ---------------------------
    def _lookup(self, candidate_id: str, op: str) -> Optional[Candidate]:
        c = self.state.candidates.get(candidate_id)
        if c is None:
            logger.debug("%s: unknown candidate %s", op, candidate_id)
        return c

    def _clean_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in fields.items():
            if key in _IMMUTABLE_FIELDS or key not in _CANDIDATE_FIELDS:
                logger.debug("Ignoring candidate field %r", key)
                continue
            if key == "status":
                try:
                    value = CandidateStatus(value)
                except ValueError:
                    logger.warning("Ignoring unknown candidate status %r", value)
                    continue
            elif key == "answers":
                value = [
                    a
                    if isinstance(a, Answer)
                    else Answer(**{**a, "difficulty": Difficulty(a["difficulty"])})
                    for a in value or []
                ]
            out[key] = value
        return out

    def _next_question(self, c: Candidate) -> None:
        nxt = c.current_question + 1
        if nxt >= len(c.answers):
            return
        c.current_question = nxt
        c.time_remaining = time_limit(c.answers[nxt].difficulty)

    def _complete(self, c: Candidate) -> None:
        final_score = floor_average([a.score for a in c.answers])
        c.summary = self._summarize(c.answers, final_score)
        c.final_score = final_score
        c.status = CandidateStatus.COMPLETED
        c.completed_at = self._clock()
        self.state.is_interview_active = False
        logger.info("Completed interview for %s with score %s", c.id, final_score)

    def _score(self, question: str, answer: str) -> int:
        try:
            return clamp_score(self.scorer.score(question, answer))
        except Exception as e:
            logger.warning("Answer scoring failed, using fallback: %s", e, exc_info=True)
            return self.fallback_scorer.score(question, answer)

    def _summarize(self, answers: list[Answer], final_score: int) -> str:
        try:
            return self.scorer.summarize(answers, final_score)
        except Exception as e:
            logger.warning("Summary failed, using fallback: %s", e, exc_info=True)
            return self.fallback_scorer.summarize(answers, final_score)

    def _suspend_running_interviews(self) -> None:
        """A reload interrupts any running clock: interviewing becomes paused."""
        for c in self.state.candidates.values():
            if c.status == CandidateStatus.INTERVIEWING:
                c.status = CandidateStatus.PAUSED
        self.state.is_interview_active = False

    def _load(self) -> None:
        if self.persistence is None:
            return
        blob = self.persistence.load()
        if not blob:
            return
        try:
            self.restore(blob)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable saved state: %s", e)
            self.state = InterviewState()
            return
        self._suspend_running_interviews()
        logger.info("Restored %d candidate(s)", len(self.state.candidates))

    def _save(self) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.save(self.snapshot())
        except Exception as e:
            logger.warning("Saving interview state failed: %s", e, exc_info=True)
