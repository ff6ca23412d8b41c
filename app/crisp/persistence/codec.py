"""
Purpose: Turn InterviewState into a plain, versioned, JSON-safe blob and back.

Layout (version 1):
    {"version": 1,
     "state": {"candidates": [...], "current_candidate_id": str | None,
               "is_interview_active": bool, "active_panel": str}}

Timestamps are ISO-8601 strings and are revived to datetime on decode.
Older layouts are upgraded one step at a time through MIGRATIONS; version 0
is the camelCase layout written by the first browser build.
"""

from __future__ import annotations
from dataclasses import asdict
from datetime import datetime
from typing import Any, Callable, Optional

from ..models import (
    ActivePanel,
    Answer,
    Candidate,
    CandidateStatus,
    Difficulty,
    InterviewState,
)

STATE_VERSION = 1


def _dt_out(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _dt_in(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def candidate_to_dict(c: Candidate) -> dict[str, Any]:
    data = asdict(c)
    data["status"] = c.status.value
    data["answers"] = [
        {**asdict(a), "difficulty": a.difficulty.value} for a in c.answers
    ]
    data["created_at"] = _dt_out(c.created_at)
    data["completed_at"] = _dt_out(c.completed_at)
    return data


def candidate_from_dict(data: dict[str, Any]) -> Candidate:
    answers = [
        Answer(
            question=a.get("question", ""),
            difficulty=Difficulty(a.get("difficulty", Difficulty.EASY.value)),
            answer=a.get("answer") or "",
            time_spent=int(a.get("time_spent") or 0),
            score=None if a.get("score") is None else int(a["score"]),
        )
        for a in data.get("answers") or []
    ]
    return Candidate(
        id=str(data["id"]),
        name=data.get("name") or "",
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        status=CandidateStatus(data.get("status", CandidateStatus.COLLECTING_INFO)),
        current_question=int(data.get("current_question") or 0),
        time_remaining=int(data.get("time_remaining") or 0),
        answers=answers,
        resume_name=data.get("resume_name"),
        resume_text=data.get("resume_text"),
        resume_questions=list(data.get("resume_questions") or []),
        final_score=(
            None if data.get("final_score") is None else int(data["final_score"])
        ),
        summary=data.get("summary"),
        created_at=_dt_in(data.get("created_at")) or datetime.now(),
        completed_at=_dt_in(data.get("completed_at")),
    )


def encode_state(state: InterviewState) -> dict[str, Any]:
    return {
        "version": STATE_VERSION,
        "state": {
            "candidates": [candidate_to_dict(c) for c in state.candidates.values()],
            "current_candidate_id": state.current_candidate_id,
            "is_interview_active": state.is_interview_active,
            "active_panel": state.active_panel.value,
        },
    }


def decode_state(blob: dict[str, Any]) -> InterviewState:
    blob = migrate(blob)
    raw = blob.get("state") or {}
    candidates = [candidate_from_dict(c) for c in raw.get("candidates") or []]
    current = raw.get("current_candidate_id")
    ids = {c.id for c in candidates}
    return InterviewState(
        candidates={c.id: c for c in candidates},
        current_candidate_id=current if current in ids else None,
        is_interview_active=bool(raw.get("is_interview_active", False)),
        active_panel=ActivePanel(
            raw.get("active_panel") or ActivePanel.INTERVIEWEE.value
        ),
    )


# ---------------------------
# Migrations
# ---------------------------
_V0_CANDIDATE_KEYS = {
    "currentQuestion": "current_question",
    "timeRemaining": "time_remaining",
    "resumeText": "resume_text",
    "questions": "resume_questions",
    "finalScore": "final_score",
    "createdAt": "created_at",
    "completedAt": "completed_at",
}


def _v0_to_v1(blob: dict[str, Any]) -> dict[str, Any]:
    raw = blob.get("state") or {}
    candidates = []
    for c in raw.get("candidates") or []:
        out = {_V0_CANDIDATE_KEYS.get(k, k): v for k, v in c.items()}
        out["answers"] = [
            {
                "question": a.get("question", ""),
                "difficulty": a.get("difficulty", Difficulty.EASY.value),
                "answer": a.get("answer", ""),
                "time_spent": a.get("timeSpent", 0),
                "score": a.get("score"),
            }
            for a in c.get("answers") or []
        ]
        out.pop("resumeFile", None)
        candidates.append(out)
    return {
        "version": 1,
        "state": {
            "candidates": candidates,
            "current_candidate_id": raw.get("currentCandidateId"),
            "is_interview_active": raw.get("isInterviewActive", False),
            "active_panel": raw.get("activeTab") or ActivePanel.INTERVIEWEE.value,
        },
    }


MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    0: _v0_to_v1,
}


def migrate(blob: dict[str, Any]) -> dict[str, Any]:
    """Upgrade a persisted blob to STATE_VERSION. Unknown future versions raise."""
    version = int(blob.get("version", 0))
    if version > STATE_VERSION:
        raise ValueError(
            f"State version {version} is newer than supported {STATE_VERSION}."
        )
    while version < STATE_VERSION:
        blob = MIGRATIONS[version](blob)
        version = int(blob["version"])
    return blob
