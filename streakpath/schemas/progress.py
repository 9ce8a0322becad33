"""
Progress tracking schemas for StreakPath.

Defines Pydantic models for user progress including:
- XP, hearts and streak counters
- Completed lesson ids (source of truth for unlocks)
- Completion events emitted by a finished lesson session
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LessonAvailability(str, Enum):
    """Lesson availability status for UI display."""
    LOCKED = "locked"           # Previous lesson not completed
    AVAILABLE = "available"     # Can start
    COMPLETED = "completed"     # Finished at least once


class UserProgress(BaseModel):
    xp: int = Field(default=0, ge=0)
    hearts: int = Field(default=5, ge=0)
    streak: int = Field(default=1, ge=1)
    completed_lesson_ids: list[str] = []  # insertion order, no duplicates
    last_active: Optional[datetime] = None


class CompletionEvent(BaseModel):
    """Emitted once when a lesson session reaches the completed state."""
    model_config = ConfigDict(frozen=True)

    lesson_id: str
    xp_delta: int = 10
    hearts_delta: int = 1
    completed_at: datetime
    challenge_ids: tuple[str, ...] = ()
