"""
StreakPath Classroom - Runtime components for playing lessons.

This module provides:
- Answer validation per question type
- Lesson session state machine with retry queue
- Lock propagation and navigation across the curriculum
- CurriculumLoader / compiler for curriculum.db
- ProgressTracker: persist user progress
"""

from .validator import (
    ContentError,
    is_correct,
    check_content,
    effective_options,
    split_blanks,
    correct_answer_display,
)

from .session import (
    SessionError,
    LessonSession,
    start_session,
    current_challenge,
    select_option,
    set_blank,
    can_submit,
    submit,
    advance,
    skip,
    progress_snapshot,
)

from .loader import CurriculumLoader

from .compiler import (
    SCHEMA,
    parse_curriculum,
    load_curriculum_file,
    run_integrity_checks,
    compile_curriculum,
)

from .progress import (
    ProgressTracker,
    fold_completion,
    starting_progress,
    DEFAULT_PROGRESS_DIR,
    DEFAULT_PROGRESS_DB,
)

from .navigator import (
    Navigator,
    NavigationLesson,
    NavigationUnit,
    recompute_lock_state,
    lesson_availability,
)

__all__ = [
    # Validator
    "ContentError",
    "is_correct",
    "check_content",
    "effective_options",
    "split_blanks",
    "correct_answer_display",
    # Session
    "SessionError",
    "LessonSession",
    "start_session",
    "current_challenge",
    "select_option",
    "set_blank",
    "can_submit",
    "submit",
    "advance",
    "skip",
    "progress_snapshot",
    # Loader / compiler
    "CurriculumLoader",
    "SCHEMA",
    "parse_curriculum",
    "load_curriculum_file",
    "run_integrity_checks",
    "compile_curriculum",
    # Progress
    "ProgressTracker",
    "fold_completion",
    "starting_progress",
    "DEFAULT_PROGRESS_DIR",
    "DEFAULT_PROGRESS_DB",
    # Navigator
    "Navigator",
    "NavigationLesson",
    "NavigationUnit",
    "recompute_lock_state",
    "lesson_availability",
]
