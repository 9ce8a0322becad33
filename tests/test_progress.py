"""
Progress tracking tests for StreakPath.
"""

from datetime import datetime, timedelta, timezone

from streakpath.classroom import ProgressTracker, fold_completion, starting_progress
from streakpath.schemas import CompletionEvent, UserProgress
from streakpath.utils import EngineConfig


def make_event(lesson_id: str = "l0", **overrides) -> CompletionEvent:
    data = {"lesson_id": lesson_id, "completed_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)}
    data.update(overrides)
    return CompletionEvent(**data)


class TestFoldCompletion:
    """Applying completion events to user progress."""

    def test_first_completion(self):
        progress = fold_completion(UserProgress(), make_event())
        assert progress.xp == 10
        assert progress.hearts == 6
        assert progress.streak == 1
        assert progress.completed_lesson_ids == ["l0"]
        assert progress.last_active == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_repeat_completion_still_rewards(self):
        progress = fold_completion(UserProgress(), make_event())
        progress = fold_completion(progress, make_event())
        assert progress.xp == 20
        assert progress.hearts == 7
        assert progress.completed_lesson_ids == ["l0"]

    def test_completion_order_preserved(self):
        progress = UserProgress()
        for lesson_id in ["b", "a", "c", "a"]:
            progress = fold_completion(progress, make_event(lesson_id))
        assert progress.completed_lesson_ids == ["b", "a", "c"]

    def test_input_not_modified(self):
        original = UserProgress()
        fold_completion(original, make_event())
        assert original.xp == 0
        assert original.completed_lesson_ids == []

    def test_custom_deltas(self):
        progress = fold_completion(UserProgress(), make_event(xp_delta=25, hearts_delta=0))
        assert progress.xp == 25
        assert progress.hearts == 5


class TestProgressTracker:
    """SQLite-backed progress store."""

    def test_starting_values(self, tmp_path):
        tracker = ProgressTracker(db_path=tmp_path / "progress.db")
        progress = tracker.get_user_progress()
        assert progress == starting_progress()
        assert tracker.get_completed_lesson_ids() == []

    def test_starting_values_from_config(self, tmp_path):
        config = EngineConfig(starting_xp=100, starting_hearts=3, starting_streak=7)
        tracker = ProgressTracker(db_path=tmp_path / "progress.db", config=config)
        progress = tracker.get_user_progress()
        assert (progress.xp, progress.hearts, progress.streak) == (100, 3, 7)

    def test_record_completion_persists(self, tmp_path):
        db_path = tmp_path / "progress.db"
        ProgressTracker(db_path=db_path).record_completion(make_event("l0"))

        reopened = ProgressTracker(db_path=db_path)
        progress = reopened.get_user_progress()
        assert progress.xp == 10
        assert progress.hearts == 6
        assert progress.completed_lesson_ids == ["l0"]
        assert progress.last_active == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert reopened.is_lesson_completed("l0")
        assert not reopened.is_lesson_completed("l1")

    def test_completion_order_kept_across_saves(self, tmp_path):
        tracker = ProgressTracker(db_path=tmp_path / "progress.db")
        start = datetime(2024, 5, 1, tzinfo=timezone.utc)
        for offset, lesson_id in enumerate(["l2", "l0", "l1", "l0"]):
            tracker.record_completion(make_event(lesson_id, completed_at=start + timedelta(hours=offset)))
        assert tracker.get_completed_lesson_ids() == ["l2", "l0", "l1"]
        assert tracker.get_user_progress().xp == 40

    def test_save_overwrites(self, tmp_path):
        tracker = ProgressTracker(db_path=tmp_path / "progress.db")
        tracker.record_completion(make_event("l0"))
        tracker.save_user_progress(UserProgress(xp=3, hearts=2, streak=4, completed_lesson_ids=["x", "x", "y"]))
        progress = tracker.get_user_progress()
        assert (progress.xp, progress.hearts, progress.streak) == (3, 2, 4)
        assert progress.completed_lesson_ids == ["x", "y"]

    def test_students_are_isolated(self, tmp_path):
        db_path = tmp_path / "progress.db"
        ProgressTracker(db_path=db_path, student_id="ana").record_completion(make_event("l0"))
        other = ProgressTracker(db_path=db_path, student_id="ben")
        assert other.get_completed_lesson_ids() == []
        assert other.get_user_progress().xp == 0

    def test_reset(self, tmp_path):
        tracker = ProgressTracker(db_path=tmp_path / "progress.db")
        tracker.record_completion(make_event("l0"))
        reset = tracker.reset_progress()
        assert reset == starting_progress()
        assert tracker.get_user_progress() == starting_progress()
        assert tracker.get_completed_lesson_ids() == []

    def test_completion_stats(self, tmp_path):
        tracker = ProgressTracker(db_path=tmp_path / "progress.db")
        tracker.record_completion(make_event("l0"))
        stats = tracker.get_completion_stats(total_lessons=4)
        assert stats["completed"] == 1
        assert stats["completion_percent"] == 25.0
        assert stats["xp"] == 10
        assert ProgressTracker(db_path=tmp_path / "other.db").get_completion_stats(0)["completion_percent"] == 0
