"""
Curriculum compiler - Bundle a curriculum into curriculum.db.

Provides:
- YAML curriculum parsing into validated Unit models
- SQLite schema and population
- Integrity checks reported as warnings, not failures
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from streakpath.schemas import QuestionType, Unit
from streakpath.utils.config import EngineConfig

from .validator import ContentError, check_content

logger = logging.getLogger(__name__)


SCHEMA = """
-- Units table
CREATE TABLE IF NOT EXISTS units (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    color TEXT,
    position INTEGER NOT NULL
);

-- Lessons table
CREATE TABLE IF NOT EXISTS lessons (
    id TEXT PRIMARY KEY,
    unit_id TEXT NOT NULL REFERENCES units(id),
    title TEXT NOT NULL,
    position INTEGER NOT NULL,
    locked INTEGER NOT NULL DEFAULT 0,
    stars INTEGER NOT NULL DEFAULT 0
);

-- Challenges table (ids are unique within a lesson)
CREATE TABLE IF NOT EXISTS challenges (
    lesson_id TEXT NOT NULL REFERENCES lessons(id),
    id TEXT NOT NULL,
    position INTEGER NOT NULL,
    type TEXT NOT NULL,
    question TEXT NOT NULL,
    image_url TEXT,
    options JSON NOT NULL DEFAULT '[]',
    correct_answer TEXT NOT NULL,
    explanation TEXT,
    PRIMARY KEY (lesson_id, id)
);

-- Metadata table
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE INDEX IF NOT EXISTS idx_lessons_unit ON lessons(unit_id);
CREATE INDEX IF NOT EXISTS idx_challenges_lesson ON challenges(lesson_id);
"""


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------

def parse_curriculum(data: dict[str, Any]) -> list[Unit]:
    """
    Build units from a parsed curriculum document.

    Lessons without an explicit `locked` value are seeded locked, except
    the first lesson of the first unit.
    """
    units = []
    for unit_idx, raw_unit in enumerate(data.get("units", [])):
        lessons = []
        for lesson_idx, raw_lesson in enumerate(raw_unit.get("lessons", [])):
            lesson = dict(raw_lesson)
            lesson.setdefault("locked", not (unit_idx == 0 and lesson_idx == 0))
            lessons.append(lesson)
        units.append(Unit(**{**raw_unit, "lessons": lessons}))
    return units


def load_curriculum_file(path: Path) -> list[Unit]:
    """
    Load a YAML (or JSON) curriculum file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        pydantic.ValidationError: If the content doesn't fit the schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Curriculum file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return parse_curriculum(data)


# -----------------------------------------------------------------------------
# Integrity Checks
# -----------------------------------------------------------------------------

def run_integrity_checks(units: list[Unit], config: EngineConfig | None = None) -> list[str]:
    """Find content problems that would surface as unanswerable challenges."""
    config = config or EngineConfig()
    issues = []
    seen_lessons: set[str] = set()

    for unit in units:
        if not unit.lessons:
            issues.append(f"Unit {unit.id} has no lessons")
        for lesson in unit.lessons:
            if lesson.id in seen_lessons:
                issues.append(f"Duplicate lesson id: {lesson.id}")
            seen_lessons.add(lesson.id)

            seen_challenges: set[str] = set()
            for challenge in lesson.challenges:
                if challenge.id in seen_challenges:
                    issues.append(f"Lesson {lesson.id} has duplicate challenge id: {challenge.id}")
                seen_challenges.add(challenge.id)
                try:
                    check_content(challenge, config)
                except ContentError as e:
                    issues.append(f"Lesson {lesson.id}: {e.reason} ({challenge.id})")

    return issues


# -----------------------------------------------------------------------------
# Database
# -----------------------------------------------------------------------------

def create_database(db_path: Path) -> sqlite3.Connection:
    """Create a fresh database with the curriculum schema."""
    if db_path.exists():
        db_path.unlink()
        logger.info(f"Removed existing database: {db_path}")
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.executescript(SCHEMA)
    conn.commit()
    logger.info(f"Created database schema: {db_path}")
    return conn


def populate(conn: sqlite3.Connection, units: list[Unit]) -> dict:
    """Insert units, lessons and challenges; returns counts."""
    lesson_count = 0
    challenge_count = 0
    seen_lessons: set[str] = set()

    for unit_pos, unit in enumerate(units):
        conn.execute(
            "INSERT INTO units (id, title, description, color, position) VALUES (?, ?, ?, ?, ?)",
            (unit.id, unit.title, unit.description, unit.color, unit_pos)
        )
        for lesson_pos, lesson in enumerate(unit.lessons):
            if lesson.id in seen_lessons:
                continue
            seen_lessons.add(lesson.id)
            conn.execute(
                """INSERT INTO lessons (id, unit_id, title, position, locked, stars)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (lesson.id, unit.id, lesson.title, lesson_pos, int(lesson.locked), lesson.stars)
            )
            lesson_count += 1
            for challenge_pos, challenge in enumerate(lesson.challenges):
                type_value = challenge.type.value if isinstance(challenge.type, QuestionType) else challenge.type
                conn.execute(
                    """INSERT OR REPLACE INTO challenges
                       (lesson_id, id, position, type, question, image_url, options, correct_answer, explanation)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        lesson.id,
                        challenge.id,
                        challenge_pos,
                        type_value,
                        challenge.question,
                        challenge.image_url,
                        json.dumps([o.model_dump() for o in challenge.options], ensure_ascii=False),
                        challenge.correct_answer,
                        challenge.explanation,
                    )
                )
                challenge_count += 1

    stats = {
        "compiled_at": datetime.now().isoformat(),
        "total_units": len(units),
        "total_lessons": lesson_count,
        "total_challenges": challenge_count,
    }
    conn.executemany(
        "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
        [(key, str(value)) for key, value in stats.items()]
    )
    conn.commit()
    logger.info(f"Inserted {len(units)} units, {lesson_count} lessons, {challenge_count} challenges")
    return stats


def compile_curriculum(units: list[Unit], db_path: Path, config: EngineConfig | None = None) -> dict:
    """
    Write units to a fresh curriculum.db.

    Returns:
        Stats dict including the list of integrity issues
    """
    issues = run_integrity_checks(units, config)
    if issues:
        logger.warning(f"Found {len(issues)} integrity issues:")
        for issue in issues[:10]:
            logger.warning(f"  - {issue}")
        if len(issues) > 10:
            logger.warning(f"  ... and {len(issues) - 10} more")

    conn = create_database(Path(db_path))
    try:
        stats = populate(conn, units)
    finally:
        conn.close()
    stats["issues"] = issues
    return stats
