"""User progress record: the profile document the streak tracker operates on."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# First event after sign-up is always treated as a new day
EPOCH = datetime(1970, 1, 1)

DEFAULT_LEARNING_GOAL = "Get fluent in English for my career."

_COUNTER_FIELDS = (
    "current_streak",
    "daily_speaking_seconds",
    "daily_vocab_learned",
    "daily_sessions_completed",
    "practice_sessions_completed",
    "words_learned",
    "milestone_achieved",
)


class DifficultyLevel(StrEnum):
    """Practice difficulty chosen by the learner."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class UserProgressRecord(BaseModel):
    """Snapshot of a learner's profile and daily/lifetime counters.

    Instances are frozen. Tracker operations return a new record built with
    ``model_copy(update=...)`` and never mutate their input.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None
    learning_goal: str = DEFAULT_LEARNING_GOAL
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    created_at: datetime = Field(default_factory=datetime.now)

    current_streak: int = Field(default=0, ge=0)
    last_practice_date: datetime = EPOCH
    daily_streak_awarded: bool = False
    daily_speaking_seconds: float = Field(default=0, ge=0)
    daily_vocab_learned: int = Field(default=0, ge=0)
    daily_sessions_completed: int = Field(default=0, ge=0)
    practice_sessions_completed: int = Field(default=0, ge=0)
    words_learned: int = Field(default=0, ge=0)
    milestone_achieved: int = Field(default=0, ge=0)  # 0 = none pending
    last_daily_challenge_date: datetime = EPOCH

    @field_validator(*_COUNTER_FIELDS, mode="before")
    @classmethod
    def _missing_counter_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("daily_streak_awarded", mode="before")
    @classmethod
    def _missing_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("last_practice_date", "last_daily_challenge_date", mode="before")
    @classmethod
    def _missing_date_is_epoch(cls, value: Any) -> Any:
        return EPOCH if value in (None, "") else value
