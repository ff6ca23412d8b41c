import json
from datetime import datetime

import pytest

from crisp.models import CandidateStatus, Difficulty
from crisp.persistence.codec import (
    STATE_VERSION,
    decode_state,
    encode_state,
    migrate,
)
from crisp.persistence.session_store import InMemoryStateStore, JsonFileStateStore

from conftest import SequenceScorer


def roster_view(store):
    return [
        (
            c.id,
            c.status,
            c.current_question,
            [(a.question, a.difficulty, a.answer, a.time_spent, a.score) for a in c.answers],
            c.final_score,
            c.summary,
            c.created_at,
            c.completed_at,
        )
        for c in store.candidates
    ]


def test_round_trip_through_json(make_store, ready_candidate_fields, tmp_path):
    file_store = JsonFileStateStore(tmp_path / "state.json")
    store = make_store(
        scorer=SequenceScorer([7, 8, 6, 9, 5, 7]), persistence=file_store
    )
    done = store.add_candidate(**ready_candidate_fields)
    store.start_interview(done.id)
    for i in range(6):
        store.submit_answer(done.id, f"answer {i}")
    store.add_candidate(name="", email="", phone="", resume_text="cv")

    reloaded = make_store(persistence=file_store)
    assert roster_view(reloaded) == roster_view(store)
    assert reloaded.current_candidate.id == store.current_candidate.id
    assert isinstance(reloaded.get_candidate(done.id).completed_at, datetime)
    assert reloaded.get_candidate(done.id).final_score == 7


def test_restore_of_snapshot_is_identity(make_store, ready_candidate_fields):
    store = make_store(scorer=SequenceScorer([7, 8, 6, 9, 5, 7, 4]))
    done = store.add_candidate(**ready_candidate_fields)
    store.start_interview(done.id)
    for i in range(6):
        store.submit_answer(done.id, f"answer {i}")
    running = store.add_candidate(**ready_candidate_fields)
    store.start_interview(running.id)
    store.submit_answer(running.id, "first")
    before = roster_view(store)

    store.restore(store.snapshot())

    assert roster_view(store) == before
    assert store.get_candidate(running.id).status == CandidateStatus.INTERVIEWING
    assert store.get_candidate(running.id).current_question == 1
    assert store.is_interview_active
    assert store.current_candidate.id == running.id


def test_snapshot_is_json_safe_and_versioned(make_store, ready_candidate_fields):
    store = make_store()
    c = store.add_candidate(**ready_candidate_fields)
    store.start_interview(c.id)
    blob = json.loads(json.dumps(store.snapshot()))
    assert blob["version"] == STATE_VERSION
    assert blob["state"]["current_candidate_id"] == c.id
    assert blob["state"]["is_interview_active"] is True
    saved = blob["state"]["candidates"][0]
    assert saved["status"] == "interviewing"
    assert [a["difficulty"] for a in saved["answers"]] == [
        "easy", "easy", "medium", "medium", "hard", "hard"
    ]


def test_every_mutation_is_saved(make_store, persistence):
    store = make_store()
    c = store.add_candidate()
    assert persistence.load()["state"]["candidates"][0]["id"] == c.id
    store.update_candidate(c.id, name="Jo")
    assert persistence.load()["state"]["candidates"][0]["name"] == "Jo"


def test_reload_pauses_running_interview(make_store, ready_candidate_fields, persistence):
    store = make_store()
    c = store.add_candidate(**ready_candidate_fields)
    store.start_interview(c.id)
    store.submit_answer(c.id, "one")

    reloaded = make_store()
    again = reloaded.get_candidate(c.id)
    assert again.status == CandidateStatus.PAUSED
    assert again.current_question == 1
    assert not reloaded.is_interview_active
    reloaded.resume_interview(c.id)
    assert again.status == CandidateStatus.INTERVIEWING


def test_failed_save_does_not_break_the_store(make_store, ready_candidate_fields):
    class ExplodingStore(InMemoryStateStore):
        def save(self, blob):
            raise OSError("disk full")

    store = make_store(persistence=ExplodingStore())
    c = store.add_candidate(**ready_candidate_fields)
    store.start_interview(c.id)
    assert c.status == CandidateStatus.INTERVIEWING


def test_unreadable_saved_state_starts_empty(make_store):
    bad = InMemoryStateStore({"version": 1, "state": {"candidates": [{"no_id": 1}]}})
    store = make_store(persistence=bad)
    assert store.candidates == []


def test_future_version_is_rejected():
    with pytest.raises(ValueError):
        migrate({"version": STATE_VERSION + 1, "state": {}})


def test_migrates_camel_case_layout():
    legacy = {
        "state": {
            "candidates": [
                {
                    "id": "abc123",
                    "name": "Ana",
                    "email": "ana@example.com",
                    "phone": "555 0100",
                    "status": "completed",
                    "currentQuestion": 5,
                    "timeRemaining": 0,
                    "answers": [
                        {
                            "question": "What is the Virtual DOM in React?",
                            "answer": "A copy of the DOM",
                            "timeSpent": 12,
                            "difficulty": "easy",
                            "score": 6,
                        }
                    ],
                    "questions": ["Tell me about your last project."],
                    "finalScore": 6,
                    "summary": "ok",
                    "createdAt": "2024-05-01T09:30:00.000Z",
                    "completedAt": "2024-05-01T09:45:00.000Z",
                }
            ],
            "activeTab": "interviewer",
            "currentCandidateId": "abc123",
            "isInterviewActive": False,
        }
    }
    state = decode_state(legacy)
    c = state.candidates["abc123"]
    assert c.status == CandidateStatus.COMPLETED
    assert c.final_score == 6
    assert c.answers[0].time_spent == 12
    assert c.answers[0].difficulty == Difficulty.EASY
    assert c.resume_questions == ["Tell me about your last project."]
    assert c.created_at.year == 2024 and c.created_at.tzinfo is not None
    assert state.current_candidate_id == "abc123"
    assert state.active_panel.value == "interviewer"
    assert encode_state(state)["version"] == STATE_VERSION


def test_dangling_focus_is_dropped():
    state = decode_state(
        {"version": 1, "state": {"candidates": [], "current_candidate_id": "ghost"}}
    )
    assert state.current_candidate_id is None


class TestJsonFileStateStore:
    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFileStateStore(tmp_path / "nope.json").load() is None

    def test_corrupt_file_loads_none(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileStateStore(path).load() is None

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "state.json"
        store = JsonFileStateStore(path)
        store.save({"version": 1, "state": {}})
        assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1
        assert list(path.parent.glob("*.tmp")) == []

    def test_reset(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "state.json")
        store.save({"version": 1})
        store.reset()
        assert store.load() is None
