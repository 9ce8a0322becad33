"""
Challenge schemas for StreakPath.

Defines Pydantic models for a single gradable question:
- Question types (choice, true/false, fill-in-the-blank)
- Answer options
- Challenge content with retry marker
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    FILL_BLANK = "fill_blank"


CHOICE_TYPES = frozenset({
    QuestionType.SINGLE_CHOICE,
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.TRUE_FALSE,
})


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str


class Challenge(BaseModel):
    """
    One question inside a lesson.

    `type` keeps unrecognised tags as plain strings so that bad content
    surfaces as a content error during the session instead of at load time.
    A retry copy is a new instance with `is_retry=True`; challenges are
    never mutated.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    type: Union[QuestionType, str] = Field(union_mode="left_to_right")
    question: str
    image_url: Optional[str] = None
    options: tuple[Option, ...] = ()
    correct_answer: str
    explanation: str = ""
    is_retry: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        if isinstance(value, str) and not isinstance(value, QuestionType):
            return value.strip().lower()
        return value

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_TYPES

    def as_retry(self) -> "Challenge":
        """Shallow copy flagged for the retry tail of the queue."""
        return self.model_copy(update={"is_retry": True})
