"""
CurriculumLoader - Load units, lessons and challenges from curriculum.db.

Read-only access to the compiled curriculum. Each method opens its own
connection.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from streakpath.schemas import Challenge, Lesson, Unit

logger = logging.getLogger(__name__)


class CurriculumLoader:
    """
    Load curriculum data from SQLite database.

    Thread-safe for read operations. Each method creates a new connection.
    """

    def __init__(self, db_path: str | Path):
        """
        Initialize loader with path to curriculum.db.

        Args:
            db_path: Path to curriculum.db file
        """
        self.db_path = Path(db_path)
        if not self.db_path.exists():
            raise FileNotFoundError(f"Curriculum database not found: {db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def get_metadata(self, key: str) -> Optional[str]:
        """Get metadata value by key."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM metadata WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Challenges
    # -------------------------------------------------------------------------

    def _row_to_challenge(self, row: sqlite3.Row) -> Optional[Challenge]:
        try:
            return Challenge(
                id=row["id"],
                type=row["type"],
                question=row["question"],
                image_url=row["image_url"],
                options=json.loads(row["options"]) if row["options"] else [],
                correct_answer=row["correct_answer"] or "",
                explanation=row["explanation"] or "",
            )
        except (ValidationError, json.JSONDecodeError) as e:
            logger.warning(f"Skipping malformed challenge {row['id']}: {e}")
            return None

    def get_challenges(self, lesson_id: str) -> list[Challenge]:
        """Get a lesson's challenges in authored order."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """SELECT id, type, question, image_url, options, correct_answer, explanation
                   FROM challenges WHERE lesson_id = ? ORDER BY position""",
                (lesson_id,)
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        challenges = [self._row_to_challenge(row) for row in rows]
        return [c for c in challenges if c is not None]

    # -------------------------------------------------------------------------
    # Lessons and Units
    # -------------------------------------------------------------------------

    def _row_to_lesson(self, row: sqlite3.Row) -> Lesson:
        return Lesson(
            id=row["id"],
            title=row["title"],
            challenges=self.get_challenges(row["id"]),
            locked=bool(row["locked"]),
            stars=row["stars"] or 0,
        )

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        """Get one lesson with its challenges."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT id, title, locked, stars FROM lessons WHERE id = ?",
                (lesson_id,)
            ).fetchone()
        finally:
            conn.close()
        return self._row_to_lesson(row) if row else None

    def get_lessons_for_unit(self, unit_id: str) -> list[Lesson]:
        """Get all lessons in a unit ordered by position."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                """SELECT id, title, locked, stars FROM lessons
                   WHERE unit_id = ? ORDER BY position""",
                (unit_id,)
            ).fetchall()
        finally:
            conn.close()
        return [self._row_to_lesson(row) for row in rows]

    def get_units(self) -> list[Unit]:
        """Get all units, with lessons and challenges, ordered by position."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                "SELECT id, title, description, color FROM units ORDER BY position"
            ).fetchall()
        finally:
            conn.close()

        return [
            Unit(
                id=row["id"],
                title=row["title"],
                description=row["description"],
                color=row["color"],
                lessons=self.get_lessons_for_unit(row["id"]),
            )
            for row in rows
        ]

    def get_lesson_count(self) -> int:
        conn = self._get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM lessons").fetchone()[0]
        finally:
            conn.close()
