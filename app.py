"""
StreakPath - Gamified micro-learning

Streamlit application: a unit path of lessons, each played as a session of
challenges with retries for missed questions, hearts, XP and streaks.

Usage:
    python scripts/compile_curriculum.py
    streamlit run app.py
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import streamlit as st

from streakpath.classroom import (
    CurriculumLoader,
    LessonSession,
    Navigator,
    ProgressTracker,
    effective_options,
)
from streakpath.schemas import LessonAvailability, QuestionType, SubmissionStatus
from streakpath.utils import load_engine_config
from streakpath.viewer import (
    CueBuffer,
    FeedbackEmitter,
    get_quiz_css,
    render_challenge,
    render_completion,
    render_content_error,
    render_feedback,
    render_progress_bar,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

DEFAULT_DB_PATH = Path("data/curriculum.db")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="StreakPath",
    page_icon="⚡",
    layout="centered",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_feedback_executor() -> ThreadPoolExecutor:
    """One cue worker shared by every browser session."""
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="feedback")


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "config" not in st.session_state:
        st.session_state.config = load_engine_config()

    config = st.session_state.config

    if "loader" not in st.session_state:
        if DEFAULT_DB_PATH.exists():
            st.session_state.loader = CurriculumLoader(DEFAULT_DB_PATH)
        else:
            st.session_state.loader = None

    if "progress" not in st.session_state:
        st.session_state.progress = ProgressTracker(config=config)

    if "navigator" not in st.session_state and st.session_state.loader:
        st.session_state.navigator = Navigator(
            st.session_state.loader,
            st.session_state.progress,
        )

    if "cues" not in st.session_state:
        st.session_state.cues = CueBuffer()
        st.session_state.emitter = FeedbackEmitter(
            st.session_state.cues,
            enabled=config.feedback_enabled,
            volume=config.feedback_volume,
            executor=get_feedback_executor(),
        )

    if "lesson_session" not in st.session_state:
        st.session_state.lesson_session = None

    if "confirm_exit" not in st.session_state:
        st.session_state.confirm_exit = False

    if "confirm_reset" not in st.session_state:
        st.session_state.confirm_reset = False


def handle_completion(event):
    """Persist a finished lesson and refresh the unlock view."""
    progress = st.session_state.progress.record_completion(event)
    st.session_state.navigator.apply_completed(progress.completed_lesson_ids)


# -----------------------------------------------------------------------------
# Sidebar: Stats and Unit Path
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with user stats and the unit path."""
    st.sidebar.title("⚡ StreakPath")

    if not st.session_state.loader:
        st.sidebar.error("Curriculum database not found. Run scripts/compile_curriculum.py first.")
        return

    user = st.session_state.progress.get_user_progress()
    col1, col2, col3 = st.sidebar.columns(3)
    col1.metric("XP", user.xp)
    col2.metric("Hearts", user.hearts)
    col3.metric("Streak", user.streak)

    stats = st.session_state.navigator.get_progress_summary()
    st.sidebar.markdown(
        f"**Progress:** {stats['completed']}/{stats['total_lessons']} lessons "
        f"({stats['completion_percent']}%)"
    )
    st.sidebar.progress(stats["completion_percent"] / 100)

    st.sidebar.divider()
    render_unit_path()

    st.sidebar.divider()
    render_reset_section()


def render_unit_path():
    """Render units and lessons; locked lessons cannot be started."""
    nav = st.session_state.navigator
    in_session = st.session_state.lesson_session is not None

    for nav_unit in nav.get_navigation_tree():
        unit = nav_unit.unit
        unit_progress = f"({nav_unit.completed_count}/{nav_unit.total_count})"
        with st.sidebar.expander(f"**{unit.title}** {unit_progress}", expanded=True):
            if unit.description:
                st.caption(unit.description)
            for nav_lesson in nav_unit.lessons:
                lesson = nav_lesson.lesson
                indicator = nav.get_status_indicator(lesson.id)
                locked = nav_lesson.availability == LessonAvailability.LOCKED
                if st.button(
                    f"{indicator} {lesson.title}",
                    key=f"lesson_{lesson.id}",
                    disabled=locked or in_session,
                    use_container_width=True,
                ):
                    start_lesson(lesson.id)


def render_reset_section():
    if not st.session_state.confirm_reset:
        if st.sidebar.button("Reset progress", use_container_width=True):
            st.session_state.confirm_reset = True
            st.rerun()
        return

    st.sidebar.warning("Reset all XP, hearts and completed lessons?")
    col1, col2 = st.sidebar.columns(2)
    if col1.button("Reset", type="primary"):
        st.session_state.progress.reset_progress()
        st.session_state.navigator.refresh()
        st.session_state.confirm_reset = False
        st.rerun()
    if col2.button("Cancel"):
        st.session_state.confirm_reset = False
        st.rerun()


def start_lesson(lesson_id: str):
    """Open a fresh session for a lesson."""
    nav = st.session_state.navigator
    if not nav.is_lesson_available(lesson_id):
        return
    lesson = st.session_state.loader.get_lesson(lesson_id)
    if lesson is None:
        st.error(f"Lesson not found: {lesson_id}")
        return
    st.session_state.lesson_session = LessonSession(
        lesson,
        config=st.session_state.config,
        emitter=st.session_state.emitter,
        on_complete=handle_completion,
    )
    st.session_state.confirm_exit = False
    st.rerun()


def close_session():
    """Discard the session; nothing is committed for an unfinished lesson."""
    st.session_state.lesson_session = None
    st.session_state.confirm_exit = False
    st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Lesson Session
# -----------------------------------------------------------------------------

def play_pending_cues():
    for _kind, data in st.session_state.cues.drain():
        st.audio(data, format="audio/wav", autoplay=True)


def render_exit_bar(session: LessonSession):
    col1, col2 = st.columns([1, 9])
    with col1:
        if st.button("✕", help="Exit lesson"):
            st.session_state.confirm_exit = True
            st.rerun()
    with col2:
        st.markdown(render_progress_bar(session.progress), unsafe_allow_html=True)

    if st.session_state.confirm_exit:
        st.warning("Leave this lesson? Progress in this session will be lost.")
        col1, col2 = st.columns(2)
        if col1.button("Leave", type="primary"):
            close_session()
        if col2.button("Keep learning"):
            st.session_state.confirm_exit = False
            st.rerun()


def render_answer_inputs(session: LessonSession):
    """Option buttons or blank inputs for the current challenge."""
    challenge = session.challenge
    state = session.state
    answered = state.status != SubmissionStatus.UNANSWERED

    if challenge.type == QuestionType.FILL_BLANK:
        count = len(state.blank_inputs)
        for idx in range(count):
            placeholder = f"Answer for blank {idx + 1}..." if count > 1 else "Type your answer..."
            value = st.text_input(
                f"{idx + 1}.",
                value=state.blank_inputs[idx],
                key=f"blank_{state.current_index}_{idx}",
                placeholder=placeholder,
                disabled=answered,
            )
            if not answered and value != state.blank_inputs[idx]:
                session.set_blank(idx, value)
        return

    for option in effective_options(challenge, session.config):
        selected = state.selected_option_id == option.id
        label = f"{option.id.upper()}  {option.text}"
        if st.button(
            label,
            key=f"option_{state.current_index}_{option.id}",
            type="primary" if selected else "secondary",
            disabled=answered,
            use_container_width=True,
        ):
            session.select_option(option.id)
            st.rerun()


def render_lesson_view():
    """Render the active lesson session or a prompt to pick one."""
    if not st.session_state.loader:
        st.error("Curriculum database not found.")
        st.code("python scripts/compile_curriculum.py --curriculum data/curriculum.yaml --output data/curriculum.db")
        return

    session = st.session_state.lesson_session
    if session is None:
        st.title("Pick a lesson")
        recommended = st.session_state.navigator.get_recommended_lesson_id()
        if recommended:
            lesson = st.session_state.navigator.get_lesson(recommended)
            if st.button(f"Continue: {lesson.title}", type="primary"):
                start_lesson(recommended)
        else:
            st.success("Every unlocked lesson is complete!")
        return

    st.markdown(get_quiz_css(), unsafe_allow_html=True)
    play_pending_cues()

    if session.completion_event is not None:
        st.markdown(render_completion(session.completion_event), unsafe_allow_html=True)
        if st.button("Back to path", type="primary", use_container_width=True):
            close_session()
        return

    if session.state.is_empty:
        st.info("This lesson has no questions yet.")
        if st.button("Back to path", use_container_width=True):
            close_session()
        return

    render_exit_bar(session)
    challenge = session.challenge
    state = session.state

    st.markdown(render_challenge(challenge), unsafe_allow_html=True)

    if state.content_error:
        st.markdown(render_content_error(state.content_error), unsafe_allow_html=True)
        if st.button("Skip this question", use_container_width=True):
            session.skip()
            st.rerun()
        return

    render_answer_inputs(session)
    st.markdown(render_feedback(challenge, state.status, session.config), unsafe_allow_html=True)

    if state.status == SubmissionStatus.UNANSWERED:
        if st.button("Check", type="primary", disabled=not session.can_submit, use_container_width=True):
            session.submit()
            st.rerun()
    else:
        if st.button("Continue", type="primary", use_container_width=True):
            session.advance()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    render_lesson_view()


if __name__ == "__main__":
    main()
