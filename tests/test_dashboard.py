from crisp.dashboard import (
    answered_count,
    filter_and_sort,
    format_time,
    interview_progress,
    timer_level,
)
from crisp.models import Answer, Candidate, Difficulty


def cand(cid, name, score=None, current=0, answers=()):
    return Candidate(
        id=cid, name=name, final_score=score, current_question=current, answers=list(answers)
    )


ROSTER = [
    cand("1", "bruno", 6),
    cand("2", "Ana", 9),
    cand("3", "Carla"),
    cand("4", "", 3),
]


def test_sort_by_score_descending_missing_as_zero():
    assert [c.id for c in filter_and_sort(ROSTER)] == ["2", "1", "4", "3"]


def test_sort_by_name_case_insensitive():
    assert [c.name for c in filter_and_sort(ROSTER, sort_by="name")] == [
        "",
        "Ana",
        "bruno",
        "Carla",
    ]


def test_search_is_case_insensitive():
    assert [c.id for c in filter_and_sort(ROSTER, search="AR")] == ["3"]
    assert filter_and_sort(ROSTER, search="zzz") == []


def test_progress_and_answered():
    answers = [Answer("q", Difficulty.EASY, score=5)] * 2 + [
        Answer("q", Difficulty.MEDIUM)
    ] * 4
    c = cand("x", "X", current=2, answers=answers)
    assert interview_progress(c) == 33
    assert answered_count(c) == 2
    assert interview_progress(cand("y", "Y")) == 0


def test_format_time():
    assert format_time(0) == "0:00"
    assert format_time(65) == "1:05"
    assert format_time(120) == "2:00"
    assert format_time(-3) == "0:00"


def test_timer_level():
    assert timer_level(120, 120) == "normal"
    assert timer_level(30, 120) == "warning"
    assert timer_level(10, 120) == "critical"
    assert timer_level(15, 20) == "normal"
    assert timer_level(5, 20) == "critical"
