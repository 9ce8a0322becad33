"""
ProgressTracker - Track user progress in ~/.streakpath/progress.db.

Stores user progress separately from curriculum content:
- XP, hearts and streak
- Completed lesson ids with completion time
- Last activity

Writes are last-write-wins; there is no merging of concurrent sessions.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from streakpath.schemas import CompletionEvent, UserProgress
from streakpath.utils.config import EngineConfig

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_DIR = Path.home() / ".streakpath"
DEFAULT_PROGRESS_DB = DEFAULT_PROGRESS_DIR / "progress.db"


def fold_completion(progress: UserProgress, event: CompletionEvent) -> UserProgress:
    """
    Apply a completion event to user progress.

    XP and hearts are awarded on every completion; the lesson id is only
    appended the first time.
    """
    completed = list(progress.completed_lesson_ids)
    if event.lesson_id not in completed:
        completed.append(event.lesson_id)
    return UserProgress(
        xp=progress.xp + event.xp_delta,
        hearts=progress.hearts + event.hearts_delta,
        streak=progress.streak,
        completed_lesson_ids=completed,
        last_active=event.completed_at,
    )


def starting_progress(config: Optional[EngineConfig] = None) -> UserProgress:
    config = config or EngineConfig()
    return UserProgress(
        xp=config.starting_xp,
        hearts=config.starting_hearts,
        streak=config.starting_streak,
    )


class ProgressTracker:
    """
    Track user progress in SQLite database.

    Progress is stored separately from content (curriculum.db) so that:
    - Content can be updated without losing progress
    - Progress is user-specific, content is shared
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        student_id: str = "default",
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize progress tracker.

        Args:
            db_path: Path to progress.db (default: ~/.streakpath/progress.db)
            student_id: Student identifier for multi-user support
            config: Engine config providing starting values
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self.student_id = student_id
        self.config = config or EngineConfig()
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS user_progress (
                    student_id TEXT PRIMARY KEY,
                    xp INTEGER NOT NULL DEFAULT 0,
                    hearts INTEGER NOT NULL DEFAULT 5,
                    streak INTEGER NOT NULL DEFAULT 1,
                    last_active TEXT
                );

                CREATE TABLE IF NOT EXISTS completed_lessons (
                    student_id TEXT NOT NULL,
                    lesson_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    completed_at TEXT,
                    PRIMARY KEY (student_id, lesson_id)
                );

                CREATE INDEX IF NOT EXISTS idx_completed_lessons_student
                ON completed_lessons(student_id);
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def get_completed_lesson_ids(self) -> list[str]:
        """Completed lesson ids in completion order."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """SELECT lesson_id FROM completed_lessons
                   WHERE student_id = ?
                   ORDER BY position""",
                (self.student_id,)
            )
            return [row["lesson_id"] for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_user_progress(self) -> UserProgress:
        """Get progress for the student, or starting values if none saved."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                """SELECT xp, hearts, streak, last_active
                   FROM user_progress WHERE student_id = ?""",
                (self.student_id,)
            ).fetchone()
        finally:
            conn.close()

        if not row:
            return starting_progress(self.config)

        return UserProgress(
            xp=row["xp"],
            hearts=row["hearts"],
            streak=row["streak"],
            completed_lesson_ids=self.get_completed_lesson_ids(),
            last_active=datetime.fromisoformat(row["last_active"]) if row["last_active"] else None,
        )

    def is_lesson_completed(self, lesson_id: str) -> bool:
        return lesson_id in self.get_completed_lesson_ids()

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def save_user_progress(self, progress: UserProgress):
        """Overwrite stored progress with the given snapshot (last write wins)."""
        conn = self._get_connection()
        try:
            last_active = progress.last_active.isoformat() if progress.last_active else None
            conn.execute(
                """INSERT INTO user_progress (student_id, xp, hearts, streak, last_active)
                   VALUES (?, ?, ?, ?, ?)
                   ON CONFLICT(student_id) DO UPDATE SET
                     xp = excluded.xp,
                     hearts = excluded.hearts,
                     streak = excluded.streak,
                     last_active = excluded.last_active""",
                (self.student_id, progress.xp, progress.hearts, progress.streak, last_active)
            )
            completed_at = {
                row["lesson_id"]: row["completed_at"]
                for row in conn.execute(
                    "SELECT lesson_id, completed_at FROM completed_lessons WHERE student_id = ?",
                    (self.student_id,)
                )
            }
            conn.execute(
                "DELETE FROM completed_lessons WHERE student_id = ?",
                (self.student_id,)
            )
            conn.executemany(
                """INSERT INTO completed_lessons (student_id, lesson_id, position, completed_at)
                   VALUES (?, ?, ?, ?)""",
                [
                    (self.student_id, lesson_id, position, completed_at.get(lesson_id, last_active))
                    for position, lesson_id in enumerate(dict.fromkeys(progress.completed_lesson_ids))
                ]
            )
            conn.commit()
        finally:
            conn.close()

    def record_completion(self, event: CompletionEvent) -> UserProgress:
        """
        Fold a completion event into stored progress and persist it.

        Returns:
            The updated progress
        """
        progress = fold_completion(self.get_user_progress(), event)
        self.save_user_progress(progress)
        logger.info(
            f"Recorded completion of {event.lesson_id} for {self.student_id}: "
            f"xp={progress.xp} hearts={progress.hearts}"
        )
        return progress

    def reset_progress(self) -> UserProgress:
        """Reset the student to starting values."""
        conn = self._get_connection()
        try:
            conn.execute(
                "DELETE FROM completed_lessons WHERE student_id = ?",
                (self.student_id,)
            )
            conn.execute(
                "DELETE FROM user_progress WHERE student_id = ?",
                (self.student_id,)
            )
            conn.commit()
        finally:
            conn.close()
        return starting_progress(self.config)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_completion_stats(self, total_lessons: int) -> dict:
        """
        Get completion statistics.

        Args:
            total_lessons: Total number of lessons in curriculum

        Returns:
            Dictionary with completion stats
        """
        progress = self.get_user_progress()
        completed = len(progress.completed_lesson_ids)
        return {
            "total_lessons": total_lessons,
            "completed": completed,
            "completion_percent": round(completed / total_lessons * 100, 1) if total_lessons > 0 else 0,
            "xp": progress.xp,
            "hearts": progress.hearts,
            "streak": progress.streak,
        }
