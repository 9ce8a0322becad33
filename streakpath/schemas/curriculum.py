"""
Curriculum schemas for StreakPath.

Defines Pydantic models for the curriculum graph:
- Lessons (ordered challenge lists with derived lock/completion flags)
- Units (ordered lesson containers)
"""

from typing import Optional

from pydantic import BaseModel, Field

from .challenge import Challenge


class Lesson(BaseModel):
    """
    A lesson in a unit.

    `completed` and `locked` are a view recomputed from the user's completed
    lesson ids; they are never the source of truth.
    """
    id: str
    title: str
    challenges: list[Challenge] = []
    completed: bool = False
    locked: bool = False
    stars: int = Field(default=0, ge=0, le=3)


class Unit(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    color: Optional[str] = None  # display hint, e.g. "green"
    lessons: list[Lesson] = []
