"""
Navigator - Lock propagation, lesson availability and navigation.

Provides:
- recompute_lock_state: derive lesson locked/completed flags from the
  completed lesson ids
- Next lesson / recommended lesson lookup
- Curriculum tree with status indicators
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from streakpath.schemas import Lesson, LessonAvailability, Unit

from .loader import CurriculumLoader
from .progress import ProgressTracker

logger = logging.getLogger(__name__)


def recompute_lock_state(units: list[Unit], completed_lesson_ids: Iterable[str]) -> list[Unit]:
    """
    Recompute lesson flags across the curriculum.

    For the lesson at position i of a unit:
    - completed = its id is in completed_lesson_ids
    - locked = previous value, forced to False when completed or when the
      lesson at i-1 of the same unit is completed

    Only ever unlocks, so applying it again with the same ids changes
    nothing. Ids that match no lesson are ignored.

    Args:
        units: Current curriculum view
        completed_lesson_ids: The user's completed lesson ids

    Returns:
        New list of units; the input is not modified
    """
    completed = set(completed_lesson_ids)

    known = {lesson.id for unit in units for lesson in unit.lessons}
    unknown = completed - known
    if unknown:
        logger.debug(f"Ignoring completed ids not in curriculum: {sorted(unknown)}")

    result = []
    for unit in units:
        lessons = []
        for idx, lesson in enumerate(unit.lessons):
            is_completed = lesson.id in completed
            is_locked = lesson.locked
            if is_completed:
                is_locked = False
            if idx > 0 and unit.lessons[idx - 1].id in completed:
                is_locked = False
            lessons.append(lesson.model_copy(update={
                "completed": is_completed,
                "locked": is_locked,
            }))
        result.append(unit.model_copy(update={"lessons": lessons}))
    return result


def lesson_availability(lesson: Lesson) -> LessonAvailability:
    if lesson.completed:
        return LessonAvailability.COMPLETED
    if lesson.locked:
        return LessonAvailability.LOCKED
    return LessonAvailability.AVAILABLE


@dataclass
class NavigationLesson:
    """Lesson with navigation metadata."""
    lesson: Lesson
    unit_id: str
    availability: LessonAvailability


@dataclass
class NavigationUnit:
    """Unit with lessons and navigation metadata."""
    unit: Unit
    lessons: list[NavigationLesson]
    completed_count: int
    total_count: int


class Navigator:
    """
    Navigate through the curriculum with lock checking.

    Combines CurriculumLoader (content) with ProgressTracker (user state).
    The lock view is recomputed from the tracker's completed ids on refresh.
    """

    def __init__(self, loader: CurriculumLoader, progress: ProgressTracker):
        """
        Initialize navigator.

        Args:
            loader: CurriculumLoader instance for content access
            progress: ProgressTracker instance for user progress
        """
        self.loader = loader
        self.progress = progress
        self.units: list[Unit] = []
        self._lesson_order: list[str] = []
        self._lesson_index: dict[str, int] = {}
        self._lesson_unit: dict[str, str] = {}
        self.refresh()

    def refresh(self):
        """Reload content and reapply the completed lesson ids."""
        self.units = recompute_lock_state(
            self.loader.get_units(),
            self.progress.get_completed_lesson_ids(),
        )
        self._lesson_order = [lesson.id for unit in self.units for lesson in unit.lessons]
        self._lesson_index = {lid: idx for idx, lid in enumerate(self._lesson_order)}
        self._lesson_unit = {lesson.id: unit.id for unit in self.units for lesson in unit.lessons}

    def apply_completed(self, completed_lesson_ids: Iterable[str]):
        """Replace the curriculum view after the completed ids changed."""
        self.units = recompute_lock_state(self.units, completed_lesson_ids)

    @property
    def total_lessons(self) -> int:
        return len(self._lesson_order)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        for unit in self.units:
            for lesson in unit.lessons:
                if lesson.id == lesson_id:
                    return lesson
        return None

    def get_unit_id(self, lesson_id: str) -> Optional[str]:
        return self._lesson_unit.get(lesson_id)

    def get_lesson_availability(self, lesson_id: str) -> LessonAvailability:
        lesson = self.get_lesson(lesson_id)
        if not lesson:
            return LessonAvailability.LOCKED
        return lesson_availability(lesson)

    def is_lesson_available(self, lesson_id: str) -> bool:
        """Check if a lesson can be started."""
        return self.get_lesson_availability(lesson_id) != LessonAvailability.LOCKED

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def get_next_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the next lesson in curriculum order."""
        if current_id not in self._lesson_index:
            return None
        current_idx = self._lesson_index[current_id]
        if current_idx + 1 >= len(self._lesson_order):
            return None
        return self._lesson_order[current_idx + 1]

    def get_recommended_lesson_id(self) -> Optional[str]:
        """
        Get the recommended next lesson.

        First available lesson that is not completed, else None.
        """
        for lesson_id in self._lesson_order:
            if self.get_lesson_availability(lesson_id) == LessonAvailability.AVAILABLE:
                return lesson_id
        return None

    def get_lesson_position(self, lesson_id: str) -> tuple[int, int]:
        """
        Get lesson position as (current, total).

        Returns (0, total) if lesson not found.
        """
        if lesson_id not in self._lesson_index:
            return (0, len(self._lesson_order))
        return (self._lesson_index[lesson_id] + 1, len(self._lesson_order))

    # -------------------------------------------------------------------------
    # Curriculum Tree
    # -------------------------------------------------------------------------

    def get_navigation_tree(self) -> list[NavigationUnit]:
        tree = []
        for unit in self.units:
            nav_lessons = []
            completed_count = 0
            for lesson in unit.lessons:
                availability = lesson_availability(lesson)
                if availability == LessonAvailability.COMPLETED:
                    completed_count += 1
                nav_lessons.append(NavigationLesson(
                    lesson=lesson,
                    unit_id=unit.id,
                    availability=availability,
                ))
            tree.append(NavigationUnit(
                unit=unit,
                lessons=nav_lessons,
                completed_count=completed_count,
                total_count=len(unit.lessons),
            ))
        return tree

    def get_status_indicator(self, lesson_id: str) -> str:
        """
        Get status indicator for sidebar display.

        Returns:
            ✓ for completed
            ○ for available
            ◌ for locked
        """
        availability = self.get_lesson_availability(lesson_id)
        if availability == LessonAvailability.COMPLETED:
            return "✓"
        elif availability == LessonAvailability.AVAILABLE:
            return "○"
        else:
            return "◌"

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        tree = self.get_navigation_tree()
        completed = sum(nav_unit.completed_count for nav_unit in tree)
        total = self.total_lessons

        unit_stats = []
        for nav_unit in tree:
            unit_stats.append({
                "id": nav_unit.unit.id,
                "title": nav_unit.unit.title,
                "completed": nav_unit.completed_count,
                "total": nav_unit.total_count,
            })

        return {
            "total_lessons": total,
            "completed": completed,
            "completion_percent": round(completed / total * 100, 1) if total > 0 else 0,
            "units": unit_stats,
            "recommended_lesson_id": self.get_recommended_lesson_id(),
        }
