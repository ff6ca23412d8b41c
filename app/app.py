"""
UI layer
Purpose: Streamlit-only glue. Renders the interviewee chat and the interviewer
dashboard, collects user inputs, and delegates all state changes to the
InterviewSessionStore so the interview logic can be unit tested without
Streamlit.
"""

import time
from typing import Optional

import streamlit as st

from crisp.config import get_settings
from crisp.dashboard import (
    answered_count,
    filter_and_sort,
    format_time,
    interview_progress,
    timer_level,
)
from crisp.models import (
    QUESTION_COUNT,
    ActivePanel,
    CandidateStatus,
    LLMSettings,
)
from crisp.persistence.session_store import JsonFileStateStore
from crisp.services.llm_openai import OpenAILLMClient
from crisp.services.questions import LLMQuestionProvider
from crisp.services.resume import (
    extract_contact_fields,
    extract_resume_text,
    validate_resume_upload,
)
from crisp.services.scoring import HeuristicAnswerScorer, LLMAnswerScorer
from crisp.services.validation import missing_contact_fields, validate_contact
from crisp.store import InterviewSessionStore
from crisp.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.CRISP_LOG_LEVEL)

# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title="Crisp Interview Assistant",
    page_icon="🧑‍💻",
    layout="wide",
    initial_sidebar_state="expanded",
)
# ---------------------------
# UI constants
# ---------------------------
PANELS = {
    ActivePanel.INTERVIEWEE: "Interviewee",
    ActivePanel.INTERVIEWER: "Interviewer",
}
MODELS = ["gpt-4o-mini", "gpt-4o", "gpt-4.1-mini"]
SORT_OPTIONS = {"Score (high to low)": "score", "Name (A-Z)": "name"}
TIMER_COLORS = {"normal": "green", "warning": "orange", "critical": "red"}
DRAFT_HINT = (
    "Press Ctrl+Enter or click outside the box to save your draft. "
    "When time runs out, the last saved draft is submitted."
)


class _OfflineQuestions:
    """Used until an API key is entered: every call falls back to the pool."""

    def fetch_question(self, difficulty):
        raise RuntimeError("No OpenAI API key configured.")

    def fetch_question_set(self, resume_text, count):
        raise RuntimeError("No OpenAI API key configured.")


# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("store", None)
st_session.setdefault("panel", None)
st_session.setdefault("api_key_set", False)
st_session.setdefault("model", settings.CRISP_MODEL)
st_session.setdefault("last_tick", None)
st_session.setdefault("dismissed_welcome", set())
st_session.setdefault("search", "")


# ---------------------------
# Helpers
# ---------------------------
def build_collaborators(api_key: Optional[str], model: str):
    """OpenAI question provider and grader when a key is present, offline fallbacks otherwise."""
    if api_key:
        llm = OpenAILLMClient(api_key=api_key)
        llm_settings = LLMSettings(model=model, temperature=0.7, top_p=0.9)
        questions = LLMQuestionProvider(
            llm, llm_settings, role=settings.CRISP_JOB_ROLE
        )
        return questions, LLMAnswerScorer(llm, llm_settings)
    return _OfflineQuestions(), HeuristicAnswerScorer()


@st.cache_resource
def shared_store(state_path: str) -> InterviewSessionStore:
    """One store per state file, shared by every browser session of the server."""
    questions, scorer = build_collaborators(settings.OPENAI_API_KEY, settings.CRISP_MODEL)
    return InterviewSessionStore(
        questions,
        scorer,
        persistence=JsonFileStateStore(state_path),
        max_workers=settings.CRISP_QUESTION_WORKERS,
    )


def get_store() -> InterviewSessionStore:
    if st_session.store is None:
        st_session.store = shared_store(str(settings.CRISP_STATE_PATH))
        st_session.api_key_set = bool(settings.OPENAI_API_KEY)
        st_session.panel = st_session.store.active_panel
    return st_session.store


def status_label(status: CandidateStatus) -> str:
    return status.value.replace("-", " ").capitalize()


def draft_key(candidate_id: str, index: int) -> str:
    return f"answer_{candidate_id}_{index}"


def submit_current(candidate_id: str, index: int) -> None:
    """Submit whatever is typed for the slot the UI was showing."""
    store = get_store()
    text = (st_session.get(draft_key(candidate_id, index)) or "").strip()
    with st.spinner("Grading your answer…"):
        store.submit_answer(candidate_id, text, expected_index=index)
    st_session.last_tick = time.monotonic()


# ---------------------------
# SIDEBAR: settings
# ---------------------------
with st.sidebar:
    st.markdown("# Settings")

    st.markdown("## OpenAI API Key")
    user_api_key = st.text_input(
        "Enter your API key",
        type="password",
        help="Without a key, built-in questions and local scoring are used.",
    )
    st_session.model = st.selectbox(
        "Model",
        MODELS,
        index=MODELS.index(st_session.model) if st_session.model in MODELS else 0,
    )
    if user_api_key and not st_session.api_key_set:
        try:
            get_store().set_collaborators(
                *build_collaborators(user_api_key, st_session.model)
            )
            st_session.api_key_set = True
            st.toast("OpenAI connected.", icon="✅")
        except RuntimeError as e:
            st.error(f"OpenAI client init failed: {e}")
    if not st_session.api_key_set:
        st.caption("Running offline: questions come from the built-in bank.")
    st.divider()

    store = get_store()
    panel_values = list(PANELS)
    chosen = st.radio(
        "View",
        panel_values,
        index=panel_values.index(st_session.panel),
        format_func=PANELS.get,
    )
    if chosen != st_session.panel:
        st_session.panel = chosen
        store.set_active_panel(chosen)

    if store.current_candidate:
        st.divider()
        if st.button("New candidate"):
            store.pause_interview()
            store.set_current_candidate(None)
            st.rerun()

st.title("Crisp Interview Assistant")
store = get_store()


# ---------------------------
# Interviewee panel pieces
# ---------------------------
def render_resume_upload() -> None:
    st.subheader("Start your interview")
    st.write("Upload your resume (PDF or DOCX, up to 10MB) to get started.")
    uploaded = st.file_uploader("Resume", type=["pdf", "docx", "doc"])
    if uploaded is None:
        return
    try:
        validate_resume_upload(uploaded.name, uploaded.size, uploaded.type)
    except ValueError as e:
        st.error(str(e))
        return
    if st.button("Continue", type="primary"):
        text = extract_resume_text(uploaded, uploaded.name)
        fields = extract_contact_fields(text)
        candidate = store.add_candidate(
            resume_name=uploaded.name, resume_text=text, **fields
        )
        store.generate_resume_questions(candidate.id)
        st.toast("Resume uploaded successfully", icon="📄")
        st.rerun()


def render_collect_info(candidate) -> None:
    st.subheader("Complete your profile")
    missing = missing_contact_fields(candidate.name, candidate.email, candidate.phone)
    if missing:
        st.info("We could not find: " + ", ".join(missing) + ".")
    with st.form("contact_form"):
        name = st.text_input("Full name", value=candidate.name)
        email = st.text_input("Email address", value=candidate.email)
        phone = st.text_input("Phone number", value=candidate.phone)
        submitted = st.form_submit_button("Continue", type="primary")
    if not submitted:
        return
    errors = validate_contact(name, email, phone)
    if errors:
        for message in errors.values():
            st.error(message)
        return
    store.update_candidate(
        candidate.id,
        name=name.strip(),
        email=email.strip(),
        phone=phone.strip(),
        status=CandidateStatus.UPLOADING,
    )
    st.rerun()


def render_ready(candidate) -> None:
    st.subheader(f"Welcome, {candidate.name}!")
    st.write(
        f"This interview has {QUESTION_COUNT} questions: 2 Easy (20s each), "
        "2 Medium (60s each) and 2 Hard (120s each). When the time runs out, "
        "whatever you typed is submitted automatically."
    )
    if st.button("Start interview", type="primary"):
        with st.spinner("Preparing your questions…"):
            store.start_interview(candidate.id)
        st_session.last_tick = time.monotonic()
        st.rerun()


@st.dialog("Welcome back!")
def welcome_back_dialog(candidate) -> None:
    st.write(
        f"We found your previous interview session, {candidate.name}. "
        "Would you like to continue where you left off?"
    )
    st.metric("Interview progress", f"{interview_progress(candidate)}%")
    st.caption(
        f"Questions answered: {answered_count(candidate)}/{QUESTION_COUNT} · "
        f"Time remaining on current question: {format_time(candidate.time_remaining)}"
    )
    c1, c2 = st.columns(2)
    if c1.button("Resume", type="primary"):
        store.resume_interview(candidate.id)
        st_session.last_tick = time.monotonic()
        st.rerun()
    if c2.button("Start over"):
        store.restart_interview(candidate.id)
        st.rerun()


def render_transcript(candidate) -> None:
    for i, a in enumerate(candidate.answers[: candidate.current_question]):
        with st.chat_message("assistant"):
            st.markdown(
                f"**Question {i + 1}/{len(candidate.answers)} "
                f"({a.difficulty.value.upper()})**: {a.question}"
            )
        with st.chat_message("user"):
            st.markdown(a.answer or "_(no answer)_")


@st.fragment(run_every=1)
def question_timer(candidate_id: str, index: int) -> None:
    """Ticks once a second; auto-submits the draft when the clock hits zero."""
    candidate = store.get_candidate(candidate_id)
    if (
        candidate is None
        or candidate.status != CandidateStatus.INTERVIEWING
        or candidate.current_question != index
    ):
        return

    now = time.monotonic()
    last = st_session.last_tick or now
    for _ in range(int(now - last)):
        store.decrement_timer(candidate_id)
    if now - last >= 1 or st_session.last_tick is None:
        st_session.last_tick = now - ((now - last) % 1)

    view = store.current_question(candidate_id)
    remaining = candidate.time_remaining
    level = timer_level(remaining, view.time_limit)
    st.markdown(
        f"⏱️ :{TIMER_COLORS[level]}[**{format_time(remaining)}**] "
        f"of {format_time(view.time_limit)}"
    )
    st.progress((view.time_limit - remaining) / view.time_limit)

    if remaining == 0 and store.is_interview_active:
        submit_current(candidate_id, index)
        st.rerun(scope="app")


def render_interview(candidate) -> None:
    view = store.current_question(candidate.id)
    if view is None:
        return
    st.caption(
        f"Question {view.number}/{view.total} · {interview_progress(candidate)}% done"
    )
    render_transcript(candidate)
    with st.chat_message("assistant"):
        st.markdown(
            f"**Question {view.number}/{view.total} "
            f"({view.difficulty.value.upper()})**: {view.question}"
        )

    question_timer(candidate.id, candidate.current_question)

    index = candidate.current_question
    st.text_area(
        "Your answer",
        key=draft_key(candidate.id, index),
        height=140,
        disabled=candidate.time_remaining == 0,
    )
    st.caption(DRAFT_HINT)
    if st.button(
        "Submit answer",
        type="primary",
        disabled=candidate.time_remaining == 0,
    ):
        if not (st_session.get(draft_key(candidate.id, index)) or "").strip():
            st.toast("Please type an answer first.", icon="⚠️")
        else:
            submit_current(candidate.id, index)
            st.rerun()


def render_completed(candidate) -> None:
    st.success("Interview completed! Thank you for your time.")
    st.metric("Final score", f"{candidate.final_score}/10")
    if candidate.summary:
        st.write(candidate.summary)


def render_interviewee() -> None:
    candidate = store.current_candidate
    if candidate is None:
        render_resume_upload()
        return

    if (
        candidate.status == CandidateStatus.PAUSED
        and candidate.id not in st_session.dismissed_welcome
    ):
        st_session.dismissed_welcome.add(candidate.id)
        welcome_back_dialog(candidate)

    if candidate.status == CandidateStatus.COLLECTING_INFO:
        render_collect_info(candidate)
    elif candidate.status == CandidateStatus.UPLOADING:
        if candidate.has_contact_info():
            render_ready(candidate)
        else:
            render_collect_info(candidate)
    elif candidate.status == CandidateStatus.INTERVIEWING:
        render_interview(candidate)
    elif candidate.status == CandidateStatus.PAUSED:
        st.info("Your interview is paused.")
        if st.button("Resume interview", type="primary"):
            store.resume_interview(candidate.id)
            st_session.last_tick = time.monotonic()
            st.rerun()
    else:
        render_completed(candidate)


# ---------------------------
# Interviewer panel
# ---------------------------
def render_candidate_detail(candidate) -> None:
    c1, c2, c3 = st.columns(3)
    c1.metric("Status", status_label(candidate.status))
    c2.metric(
        "Final score",
        "—" if candidate.final_score is None else f"{candidate.final_score}/10",
    )
    c3.metric("Answered", f"{answered_count(candidate)}/{QUESTION_COUNT}")
    st.caption(f"{candidate.email} · {candidate.phone}")
    if candidate.summary:
        st.markdown(f"**Summary:** {candidate.summary}")

    for i, a in enumerate(candidate.answers, 1):
        score = "—" if a.score is None else f"{a.score}/10"
        st.markdown(
            f"**Q{i} ({a.difficulty.value}, {a.time_spent}s, {score})** {a.question}"
        )
        st.text(a.answer or "(no answer)")

    if candidate.resume_questions:
        with st.expander("Suggested follow-ups from resume"):
            for q in candidate.resume_questions:
                st.markdown(f"- {q}")

    if st.button("Delete candidate", key=f"delete_{candidate.id}"):
        store.delete_candidate(candidate.id)
        st.rerun()


def render_interviewer() -> None:
    st.subheader("Candidates")
    c1, c2 = st.columns([3, 1])
    search = c1.text_input("Search by name", key="search")
    sort_label = c2.selectbox("Sort by", list(SORT_OPTIONS))
    rows = filter_and_sort(store.candidates, search, SORT_OPTIONS[sort_label])
    if not rows:
        st.info("No candidates yet.")
        return

    st.dataframe(
        [
            {
                "Name": c.name or "(unnamed)",
                "Email": c.email,
                "Status": status_label(c.status),
                "Score": c.final_score,
                "Created": f"{c.created_at:%Y-%m-%d %H:%M}",
            }
            for c in rows
        ],
        hide_index=True,
        use_container_width=True,
    )
    for c in rows:
        with st.expander(f"{c.name or '(unnamed)'} · {status_label(c.status)}"):
            render_candidate_detail(c)


if st_session.panel == ActivePanel.INTERVIEWER:
    render_interviewer()
else:
    render_interviewee()
