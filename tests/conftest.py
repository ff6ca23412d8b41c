from datetime import datetime, timedelta
import random

import pytest

from crisp.models import Difficulty
from crisp.persistence.session_store import InMemoryStateStore
from crisp.store import InterviewSessionStore


class ScriptedQuestions:
    """Returns '<tier> question N'; can be told to fail for some tiers."""

    def __init__(self, fail_tiers=(), question_set=None, fail_set=False):
        self.fail_tiers = {Difficulty(t) for t in fail_tiers}
        self.question_set = question_set
        self.fail_set = fail_set
        self.calls = []

    def fetch_question(self, difficulty):
        self.calls.append(difficulty)
        if difficulty in self.fail_tiers:
            raise RuntimeError("provider down")
        return f"{difficulty.value} question {len(self.calls)}"

    def fetch_question_set(self, resume_text, count):
        if self.fail_set:
            raise RuntimeError("provider down")
        if self.question_set is not None:
            return self.question_set
        return [f"resume question {i}" for i in range(1, count + 1)]


class FailingQuestions(ScriptedQuestions):
    def __init__(self):
        super().__init__(fail_tiers=list(Difficulty), fail_set=True)


class SequenceScorer:
    """Hands out scores from a fixed list, in submission order."""

    def __init__(self, scores, summary="Solid fundamentals."):
        self.scores = list(scores)
        self.summary = summary
        self.graded = []

    def score(self, question, answer):
        self.graded.append((question, answer))
        return self.scores.pop(0)

    def summarize(self, answers, final_score):
        return f"{self.summary} ({final_score}/10)"


class BrokenScorer:
    def score(self, question, answer):
        raise RuntimeError("scorer down")

    def summarize(self, answers, final_score):
        raise RuntimeError("scorer down")


class FixedClock:
    def __init__(self, start=datetime(2024, 5, 1, 9, 30)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class FakeLLM:
    """LLMClient returning canned replies in order; records the prompts."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def chat(self, messages, settings, system=None):
        self.calls.append({"messages": messages, "settings": settings, "system": system})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply, {"tokens_in": 1, "tokens_out": 1, "model": settings.model}


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def persistence():
    return InMemoryStateStore()


@pytest.fixture
def make_store(clock, persistence):
    def _make(questions=None, scorer=None, **kwargs):
        kwargs.setdefault("persistence", persistence)
        return InterviewSessionStore(
            questions or ScriptedQuestions(),
            scorer or SequenceScorer([7, 8, 6, 9, 5, 7]),
            clock=clock,
            rng=random.Random(7),
            **kwargs,
        )

    return _make


@pytest.fixture
def ready_candidate_fields():
    return {"name": "Jo", "email": "jo@x.com", "phone": "555-1000"}
