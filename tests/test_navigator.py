"""
Lock propagation and navigation tests for StreakPath.
"""

from datetime import datetime, timezone

from streakpath.classroom import (
    CurriculumLoader,
    Navigator,
    ProgressTracker,
    compile_curriculum,
    lesson_availability,
    parse_curriculum,
    recompute_lock_state,
)
from streakpath.schemas import CompletionEvent, Lesson, LessonAvailability, Unit


def make_units() -> list[Unit]:
    return [
        Unit(id="u0", title="Unit 0", lessons=[
            Lesson(id="l0", title="L0", locked=False),
            Lesson(id="l1", title="L1", locked=True),
            Lesson(id="l2", title="L2", locked=True),
        ]),
        Unit(id="u1", title="Unit 1", lessons=[
            Lesson(id="m0", title="M0", locked=True),
            Lesson(id="m1", title="M1", locked=True),
        ]),
    ]


def flags(units: list[Unit]) -> dict[str, tuple[bool, bool]]:
    return {l.id: (l.completed, l.locked) for u in units for l in u.lessons}


class TestRecomputeLockState:
    """Completion unlocks the next lesson of the same unit only."""

    def test_nothing_completed(self):
        result = flags(recompute_lock_state(make_units(), []))
        assert result["l0"] == (False, False)
        assert result["l1"] == (False, True)
        assert result["m0"] == (False, True)

    def test_completing_first_lesson_unlocks_second(self):
        result = flags(recompute_lock_state(make_units(), ["l0"]))
        assert result["l0"] == (True, False)
        assert result["l1"] == (False, False)
        assert result["l2"] == (False, True)

    def test_other_units_unaffected(self):
        result = flags(recompute_lock_state(make_units(), ["l0", "l1", "l2"]))
        assert result["m0"] == (False, True)
        assert result["m1"] == (False, True)

    def test_completed_locked_lesson_becomes_unlocked(self):
        result = flags(recompute_lock_state(make_units(), ["m1"]))
        assert result["m1"] == (True, False)
        assert result["m0"] == (False, True)

    def test_idempotent(self):
        once = recompute_lock_state(make_units(), ["l0", "m0"])
        twice = recompute_lock_state(once, ["l0", "m0"])
        assert flags(once) == flags(twice)

    def test_monotone_never_relocks(self):
        unlocked = recompute_lock_state(make_units(), ["l0"])
        again = recompute_lock_state(unlocked, [])
        assert flags(again)["l1"] == (False, False)

    def test_unknown_ids_ignored(self):
        result = recompute_lock_state(make_units(), ["nope"])
        assert flags(result) == flags(recompute_lock_state(make_units(), []))

    def test_input_not_modified(self):
        units = make_units()
        recompute_lock_state(units, ["l0"])
        assert units[0].lessons[1].locked is True
        assert units[0].lessons[0].completed is False

    def test_availability(self):
        units = recompute_lock_state(make_units(), ["l0"])
        lessons = units[0].lessons
        assert lesson_availability(lessons[0]) == LessonAvailability.COMPLETED
        assert lesson_availability(lessons[1]) == LessonAvailability.AVAILABLE
        assert lesson_availability(lessons[2]) == LessonAvailability.LOCKED


class TestSeedLocking:
    """Default lock values when the curriculum does not set them."""

    def test_only_first_lesson_of_first_unit_unlocked(self):
        units = parse_curriculum({
            "units": [
                {"id": "u0", "title": "U0", "lessons": [{"id": "a", "title": "A"}, {"id": "b", "title": "B"}]},
                {"id": "u1", "title": "U1", "lessons": [{"id": "c", "title": "C"}]},
            ]
        })
        assert [l.locked for u in units for l in u.lessons] == [False, True, True]

    def test_explicit_lock_value_kept(self):
        units = parse_curriculum({
            "units": [{"id": "u0", "title": "U0", "lessons": [
                {"id": "a", "title": "A", "locked": True},
                {"id": "b", "title": "B", "locked": False},
            ]}]
        })
        assert [l.locked for l in units[0].lessons] == [True, False]


class TestNavigator:
    """Navigator over a compiled curriculum and a progress database."""

    def make_navigator(self, tmp_path) -> Navigator:
        db_path = tmp_path / "curriculum.db"
        compile_curriculum(make_units(), db_path)
        loader = CurriculumLoader(db_path)
        tracker = ProgressTracker(db_path=tmp_path / "progress.db")
        return Navigator(loader, tracker)

    def complete(self, nav: Navigator, lesson_id: str):
        event = CompletionEvent(lesson_id=lesson_id, completed_at=datetime.now(timezone.utc))
        progress = nav.progress.record_completion(event)
        nav.apply_completed(progress.completed_lesson_ids)

    def test_initial_view(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        assert nav.total_lessons == 5
        assert nav.is_lesson_available("l0")
        assert not nav.is_lesson_available("l1")
        assert nav.get_recommended_lesson_id() == "l0"
        assert nav.get_status_indicator("l0") == "○"
        assert nav.get_status_indicator("l1") == "◌"

    def test_completion_unlocks_next(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        self.complete(nav, "l0")
        assert nav.get_lesson_availability("l0") == LessonAvailability.COMPLETED
        assert nav.is_lesson_available("l1")
        assert nav.get_recommended_lesson_id() == "l1"
        assert nav.get_status_indicator("l0") == "✓"

    def test_refresh_reads_persisted_progress(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        self.complete(nav, "l0")
        fresh = Navigator(nav.loader, ProgressTracker(db_path=tmp_path / "progress.db"))
        assert fresh.is_lesson_available("l1")

    def test_reset_relocks_via_refresh(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        self.complete(nav, "l0")
        nav.progress.reset_progress()
        nav.refresh()
        assert not nav.is_lesson_available("l1")

    def test_unknown_lesson_is_locked(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        assert nav.get_lesson("missing") is None
        assert not nav.is_lesson_available("missing")

    def test_next_and_position(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        assert nav.get_next_lesson_id("l2") == "m0"
        assert nav.get_next_lesson_id("m1") is None
        assert nav.get_lesson_position("m0") == (4, 5)
        assert nav.get_lesson_position("missing") == (0, 5)
        assert nav.get_unit_id("m1") == "u1"

    def test_progress_summary(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        self.complete(nav, "l0")
        summary = nav.get_progress_summary()
        assert summary["completed"] == 1
        assert summary["total_lessons"] == 5
        assert summary["completion_percent"] == 20.0
        assert summary["units"][0] == {"id": "u0", "title": "Unit 0", "completed": 1, "total": 3}

    def test_navigation_tree(self, tmp_path):
        nav = self.make_navigator(tmp_path)
        tree = nav.get_navigation_tree()
        assert [u.unit.id for u in tree] == ["u0", "u1"]
        assert tree[0].total_count == 3
        assert tree[0].lessons[0].availability == LessonAvailability.AVAILABLE
        assert tree[1].lessons[0].unit_id == "u1"
