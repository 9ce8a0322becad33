"""
Session schemas for StreakPath.

Defines Pydantic models for one lesson attempt:
- ChallengeQueue: append-only challenge sequence
- SessionState: queue cursor, submission status and pending inputs
- SessionProgress: what the progress bar needs
"""

from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .challenge import Challenge


class SubmissionStatus(str, Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class ChallengeQueue(BaseModel):
    """
    Ordered challenges for the active lesson.

    Grows by `with_retry` only; nothing is ever removed.
    """
    model_config = ConfigDict(frozen=True)

    items: tuple[Challenge, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Challenge:
        return self.items[index]

    def __iter__(self) -> Iterator[Challenge]:
        return iter(self.items)

    def with_retry(self, challenge: Challenge) -> "ChallengeQueue":
        return ChallengeQueue(items=self.items + (challenge.as_retry(),))


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    lesson_id: str
    queue: ChallengeQueue
    current_index: int = Field(default=0, ge=0)
    status: SubmissionStatus = SubmissionStatus.UNANSWERED
    selected_option_id: Optional[str] = None
    blank_inputs: tuple[str, ...] = ()
    content_error: Optional[str] = None
    completed: bool = False

    @model_validator(mode="after")
    def check_cursor(self) -> "SessionState":
        if self.current_index > len(self.queue):
            raise ValueError(
                f"current_index {self.current_index} beyond queue length {len(self.queue)}"
            )
        if self.completed and self.current_index == 0:
            raise ValueError("completed session must have advanced past a challenge")
        return self

    @property
    def is_empty(self) -> bool:
        return len(self.queue) == 0


class SessionProgress(BaseModel):
    current_index: int
    queue_length: int
    status: SubmissionStatus
    completed: bool = False

    @property
    def percent(self) -> float:
        """Share of the (possibly grown) queue already passed, 0-100."""
        if self.completed:
            return 100.0
        if self.queue_length == 0:
            return 0.0
        return self.current_index / self.queue_length * 100
