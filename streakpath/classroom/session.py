"""
Lesson session - Drive one lesson attempt from first challenge to completion.

Provides:
- Reducer functions over an immutable SessionState
- Retry policy: every missed challenge is appended once to the queue tail
- LessonSession: stateful wrapper that fires feedback cues and hands the
  completion event to its owner
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from streakpath.schemas import (
    Challenge,
    ChallengeQueue,
    CompletionEvent,
    Lesson,
    QuestionType,
    SessionProgress,
    SessionState,
    SubmissionStatus,
)
from streakpath.utils.config import EngineConfig

from .validator import ContentError, check_content, is_correct, split_blanks

logger = logging.getLogger(__name__)


class SessionError(RuntimeError):
    """Transition not allowed in the current session state."""


def _replace(state: SessionState, **changes) -> SessionState:
    # Rebuild instead of model_copy so the cursor invariant is re-validated
    return SessionState(**{**dict(state), **changes})


def _fresh_inputs(challenge: Optional[Challenge], config: EngineConfig) -> tuple[str, ...]:
    if challenge is None or challenge.type != QuestionType.FILL_BLANK:
        return ()
    return ("",) * len(split_blanks(challenge, config))


def _content_error(challenge: Optional[Challenge], config: EngineConfig) -> Optional[str]:
    if challenge is None:
        return None
    try:
        check_content(challenge, config)
    except ContentError as e:
        logger.warning(f"Unanswerable challenge, offering skip: {e}")
        return str(e)
    return None


def _require_active(state: SessionState):
    if state.completed:
        raise SessionError("Session already completed")
    if state.is_empty:
        raise SessionError("Lesson has no challenges")


# -----------------------------------------------------------------------------
# Reducer
# -----------------------------------------------------------------------------

def start_session(lesson: Lesson, config: Optional[EngineConfig] = None) -> SessionState:
    """Create the initial state for a lesson; the queue starts as the lesson's challenges."""
    config = config or EngineConfig()
    queue = ChallengeQueue(items=tuple(lesson.challenges))
    first = queue[0] if len(queue) else None
    return SessionState(
        lesson_id=lesson.id,
        queue=queue,
        blank_inputs=_fresh_inputs(first, config),
        content_error=_content_error(first, config),
    )


def current_challenge(state: SessionState) -> Optional[Challenge]:
    if state.completed or state.current_index >= len(state.queue):
        return None
    return state.queue[state.current_index]


def select_option(state: SessionState, option_id: str) -> SessionState:
    """Record the chosen option; ignored once the answer has been checked."""
    _require_active(state)
    if state.status != SubmissionStatus.UNANSWERED:
        return state
    return _replace(state, selected_option_id=option_id)


def set_blank(state: SessionState, index: int, text: str) -> SessionState:
    """Update one fill-in-the-blank input; ignored once checked."""
    _require_active(state)
    if state.status != SubmissionStatus.UNANSWERED:
        return state
    if not 0 <= index < len(state.blank_inputs):
        raise IndexError(f"Blank {index} out of range (0..{len(state.blank_inputs) - 1})")
    inputs = list(state.blank_inputs)
    inputs[index] = text
    return _replace(state, blank_inputs=tuple(inputs))


def can_submit(state: SessionState) -> bool:
    """
    Whether the check control is enabled.

    Choice types need a selected option; fill-in-the-blank needs every
    blank non-empty after trimming. This gates submission only.
    """
    challenge = current_challenge(state)
    if challenge is None or state.content_error:
        return False
    if state.status != SubmissionStatus.UNANSWERED:
        return False
    if challenge.type == QuestionType.FILL_BLANK:
        return bool(state.blank_inputs) and all(t.strip() for t in state.blank_inputs)
    return state.selected_option_id is not None


def submit(state: SessionState, config: Optional[EngineConfig] = None) -> SessionState:
    """
    Grade the pending answer.

    Raises:
        SessionError: If the answer was already checked or inputs are incomplete
    """
    config = config or EngineConfig()
    _require_active(state)
    if state.status != SubmissionStatus.UNANSWERED:
        raise SessionError("Answer already checked; advance first")
    if not can_submit(state):
        raise SessionError("Answer incomplete")

    challenge = current_challenge(state)
    if challenge.type == QuestionType.FILL_BLANK:
        submission = list(state.blank_inputs)
    else:
        submission = state.selected_option_id

    try:
        correct = is_correct(challenge, submission, config)
    except ContentError as e:
        logger.warning(f"Unanswerable challenge, offering skip: {e}")
        return _replace(state, content_error=str(e))

    status = SubmissionStatus.CORRECT if correct else SubmissionStatus.INCORRECT
    return _replace(state, status=status)


def _move_on(
    state: SessionState,
    queue: ChallengeQueue,
    exhausted: bool,
    config: EngineConfig,
) -> tuple[SessionState, Optional[CompletionEvent]]:
    next_index = state.current_index + 1
    if exhausted:
        logger.info(f"Lesson {state.lesson_id} completed after {next_index} challenges")
        done = _replace(
            state,
            queue=queue,
            current_index=next_index,
            status=SubmissionStatus.UNANSWERED,
            selected_option_id=None,
            blank_inputs=(),
            content_error=None,
            completed=True,
        )
        event = CompletionEvent(
            lesson_id=state.lesson_id,
            xp_delta=config.xp_per_lesson,
            hearts_delta=config.hearts_per_lesson,
            completed_at=datetime.now(timezone.utc),
            challenge_ids=tuple(dict.fromkeys(c.id for c in queue)),
        )
        return done, event

    upcoming = queue[next_index]
    return _replace(
        state,
        queue=queue,
        current_index=next_index,
        status=SubmissionStatus.UNANSWERED,
        selected_option_id=None,
        blank_inputs=_fresh_inputs(upcoming, config),
        content_error=_content_error(upcoming, config),
    ), None


def advance(state: SessionState, config: Optional[EngineConfig] = None) -> tuple[SessionState, Optional[CompletionEvent]]:
    """
    Continue after feedback.

    An incorrect answer appends a retry copy to the queue tail. Exhaustion
    is decided against the queue length before that append, so missing the
    last queued challenge still completes the session.

    Returns:
        Tuple of (new state, completion event or None)
    """
    config = config or EngineConfig()
    _require_active(state)
    if state.status == SubmissionStatus.UNANSWERED:
        raise SessionError("Nothing checked yet; submit or skip first")

    exhausted = state.current_index + 1 >= len(state.queue)
    queue = state.queue
    if state.status == SubmissionStatus.INCORRECT:
        queue = queue.with_retry(state.queue[state.current_index])
        logger.info(
            f"Requeued challenge {state.queue[state.current_index].id} "
            f"(queue length {len(queue)})"
        )
    return _move_on(state, queue, exhausted, config)


def skip(state: SessionState, config: Optional[EngineConfig] = None) -> tuple[SessionState, Optional[CompletionEvent]]:
    """
    Skip an unanswerable challenge.

    Only allowed while the current challenge is in content-error state.
    Not graded and not requeued.
    """
    config = config or EngineConfig()
    _require_active(state)
    if not state.content_error:
        raise SessionError("Only unanswerable challenges can be skipped")
    exhausted = state.current_index + 1 >= len(state.queue)
    return _move_on(state, state.queue, exhausted, config)


def progress_snapshot(state: SessionState) -> SessionProgress:
    return SessionProgress(
        current_index=state.current_index,
        queue_length=len(state.queue),
        status=state.status,
        completed=state.completed,
    )


# -----------------------------------------------------------------------------
# Stateful controller
# -----------------------------------------------------------------------------

class LessonSession:
    """
    Own the live SessionState for one lesson attempt.

    Feedback cues and the completion callback are side channels: their
    failures are logged and never undo a transition.
    """

    def __init__(
        self,
        lesson: Lesson,
        config: Optional[EngineConfig] = None,
        emitter=None,
        on_complete: Optional[Callable[[CompletionEvent], None]] = None,
    ):
        """
        Initialize a session.

        Args:
            lesson: Lesson to play
            config: Engine configuration
            emitter: Object with emit(kind), e.g. FeedbackEmitter
            on_complete: Called once with the CompletionEvent
        """
        self.lesson = lesson
        self.config = config or EngineConfig()
        self.emitter = emitter
        self.on_complete = on_complete
        self.state = start_session(lesson, self.config)
        self.completion_event: Optional[CompletionEvent] = None
        self._busy = False

    @property
    def challenge(self) -> Optional[Challenge]:
        return current_challenge(self.state)

    @property
    def progress(self) -> SessionProgress:
        return progress_snapshot(self.state)

    @property
    def can_submit(self) -> bool:
        return not self._busy and can_submit(self.state)

    def select_option(self, option_id: str):
        self.state = select_option(self.state, option_id)

    def set_blank(self, index: int, text: str):
        self.state = set_blank(self.state, index, text)

    def submit(self) -> SubmissionStatus:
        """
        Check the pending answer.

        Re-entrant or duplicate submits are ignored and return the current
        status unchanged.
        """
        if self._busy or not can_submit(self.state):
            logger.debug(f"Ignored submit on lesson {self.lesson.id} (status {self.state.status.value})")
            return self.state.status

        self._busy = True
        try:
            self.state = submit(self.state, self.config)
        finally:
            self._busy = False

        if self.state.status == SubmissionStatus.CORRECT:
            self._emit("correct")
        elif self.state.status == SubmissionStatus.INCORRECT:
            self._emit("incorrect")
        return self.state.status

    def advance(self) -> Optional[CompletionEvent]:
        self.state, event = advance(self.state, self.config)
        return self._finish(event)

    def skip(self) -> Optional[CompletionEvent]:
        self.state, event = skip(self.state, self.config)
        return self._finish(event)

    def _finish(self, event: Optional[CompletionEvent]) -> Optional[CompletionEvent]:
        if event is None:
            return None
        self.completion_event = event
        self._emit("complete")
        if self.on_complete is not None:
            try:
                self.on_complete(event)
            except Exception:
                logger.warning(f"Completion handler failed for lesson {event.lesson_id}", exc_info=True)
        return event

    def _emit(self, kind: str):
        if self.emitter is None:
            return
        try:
            self.emitter.emit(kind)
        except Exception:
            logger.warning(f"Feedback cue '{kind}' failed", exc_info=True)
