"""
Schema validation tests for StreakPath.

Tests the Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import datetime, timezone

from streakpath.schemas import (
    # Challenge
    QuestionType,
    Option,
    Challenge,
    # Curriculum
    Lesson,
    Unit,
    # Progress
    UserProgress,
    CompletionEvent,
    # Session
    SubmissionStatus,
    ChallengeQueue,
    SessionState,
    SessionProgress,
)


def make_challenge(**overrides) -> Challenge:
    data = {
        "id": "q1",
        "type": "multiple_choice",
        "question": "Pick b",
        "options": [{"id": "a", "text": "A"}, {"id": "b", "text": "B"}],
        "correct_answer": "b",
        "explanation": "Because b.",
    }
    data.update(overrides)
    return Challenge(**data)


class TestChallengeSchemas:
    """Test challenge-related schemas."""

    def test_challenge_valid(self):
        challenge = make_challenge()
        assert challenge.type == QuestionType.MULTIPLE_CHOICE
        assert challenge.options[1] == Option(id="b", text="B")
        assert challenge.is_retry is False
        assert challenge.is_choice

    def test_type_tag_is_case_insensitive(self):
        challenge = make_challenge(type="TRUE_FALSE", options=[])
        assert challenge.type is QuestionType.TRUE_FALSE

    def test_unknown_type_kept_as_string(self):
        challenge = make_challenge(type="essay")
        assert challenge.type == "essay"
        assert not isinstance(challenge.type, QuestionType)
        assert not challenge.is_choice

    def test_challenge_is_frozen(self):
        challenge = make_challenge()
        with pytest.raises(ValueError):
            challenge.question = "changed"

    def test_as_retry_copies_without_mutating(self):
        original = make_challenge()
        retry = original.as_retry()
        assert retry.is_retry is True
        assert original.is_retry is False
        assert retry.id == original.id
        assert retry.question == original.question
        assert retry.options == original.options
        assert retry.correct_answer == original.correct_answer


class TestCurriculumSchemas:
    """Test lesson and unit schemas."""

    def test_lesson_defaults(self):
        lesson = Lesson(id="l1", title="Lesson 1")
        assert lesson.challenges == []
        assert lesson.completed is False
        assert lesson.locked is False
        assert lesson.stars == 0

    def test_lesson_stars_bounds(self):
        Lesson(id="l1", title="Lesson 1", stars=3)
        with pytest.raises(ValueError):
            Lesson(id="l1", title="Lesson 1", stars=4)
        with pytest.raises(ValueError):
            Lesson(id="l1", title="Lesson 1", stars=-1)

    def test_unit_valid(self):
        unit = Unit(
            id="u1",
            title="Unit 1",
            color="green",
            lessons=[Lesson(id="l1", title="Lesson 1", challenges=[make_challenge()])],
        )
        assert unit.lessons[0].challenges[0].id == "q1"


class TestProgressSchemas:
    """Test user progress schemas."""

    def test_user_progress_defaults(self):
        progress = UserProgress()
        assert progress.xp == 0
        assert progress.hearts == 5
        assert progress.streak == 1
        assert progress.completed_lesson_ids == []

    def test_user_progress_bounds(self):
        with pytest.raises(ValueError):
            UserProgress(xp=-1)
        with pytest.raises(ValueError):
            UserProgress(hearts=-1)
        with pytest.raises(ValueError):
            UserProgress(streak=0)

    def test_completion_event_defaults(self):
        event = CompletionEvent(lesson_id="l1", completed_at=datetime.now(timezone.utc))
        assert event.xp_delta == 10
        assert event.hearts_delta == 1


class TestSessionSchemas:
    """Test queue and session state schemas."""

    def test_queue_with_retry_grows_by_one(self):
        queue = ChallengeQueue(items=(make_challenge(id="q1"), make_challenge(id="q2")))
        grown = queue.with_retry(queue[0])
        assert len(queue) == 2
        assert len(grown) == 3
        assert grown[2].is_retry
        assert grown[2].id == "q1"
        assert [c.id for c in grown] == ["q1", "q2", "q1"]

    def test_cursor_beyond_queue_rejected(self):
        queue = ChallengeQueue(items=(make_challenge(),))
        SessionState(lesson_id="l1", queue=queue, current_index=1, completed=True)
        with pytest.raises(ValueError):
            SessionState(lesson_id="l1", queue=queue, current_index=2)

    def test_negative_cursor_rejected(self):
        with pytest.raises(ValueError):
            SessionState(lesson_id="l1", queue=ChallengeQueue(), current_index=-1)

    def test_completed_requires_advanced_cursor(self):
        queue = ChallengeQueue(items=(make_challenge(),))
        with pytest.raises(ValueError):
            SessionState(lesson_id="l1", queue=queue, current_index=0, completed=True)

    def test_completed_with_trailing_retry(self):
        queue = ChallengeQueue(items=(make_challenge(),)).with_retry(make_challenge())
        state = SessionState(lesson_id="l1", queue=queue, current_index=1, completed=True)
        assert len(state.queue) == 2

    def test_completed_progress_is_full(self):
        progress = SessionProgress(
            current_index=2, queue_length=3, status=SubmissionStatus.UNANSWERED, completed=True
        )
        assert progress.percent == 100.0

    def test_session_progress_percent(self):
        progress = SessionProgress(current_index=1, queue_length=4, status=SubmissionStatus.UNANSWERED)
        assert progress.percent == 25.0

    def test_session_progress_empty_queue(self):
        progress = SessionProgress(current_index=0, queue_length=0, status=SubmissionStatus.UNANSWERED)
        assert progress.percent == 0.0
