"""
StreakPath Schemas - Pydantic models for the micro-learning engine.

This module exports all schema classes for:
- Challenge: question types, options, challenges
- Curriculum: lessons and units
- Progress: user progress and completion events
- Session: challenge queue and session state
"""

# Challenge schemas
from .challenge import (
    QuestionType,
    CHOICE_TYPES,
    Option,
    Challenge,
)

# Curriculum schemas
from .curriculum import (
    Lesson,
    Unit,
)

# Progress schemas
from .progress import (
    LessonAvailability,
    UserProgress,
    CompletionEvent,
)

# Session schemas
from .session import (
    SubmissionStatus,
    ChallengeQueue,
    SessionState,
    SessionProgress,
)

__all__ = [
    # Challenge
    'QuestionType',
    'CHOICE_TYPES',
    'Option',
    'Challenge',
    # Curriculum
    'Lesson',
    'Unit',
    # Progress
    'LessonAvailability',
    'UserProgress',
    'CompletionEvent',
    # Session
    'SubmissionStatus',
    'ChallengeQueue',
    'SessionState',
    'SessionProgress',
]
