"""Request and response bodies for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from english_progress_tracker.models.history import LearningMode
from english_progress_tracker.models.progress import DifficultyLevel, UserProgressRecord


class PracticeCompletionRequest(BaseModel):
    amount: float = Field(default=0, allow_inf_nan=False)
    is_vocabulary: bool = False


class SessionRequest(BaseModel):
    mode: LearningMode
    score: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    difficulty: DifficultyLevel | None = None
    prompt: str | None = None
    user_response: str | None = None
    feedback: str | dict[str, Any] | None = None


class ProfileUpdateRequest(BaseModel):
    learning_goal: str | None = Field(default=None, min_length=1)
    difficulty_level: DifficultyLevel | None = None


class VocabularyWordRequest(BaseModel):
    word: str = Field(min_length=1)
    bangla_meaning: str = ""
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)
    example_sentence: str = ""
    usage_context: str = ""


class ProgressResponse(BaseModel):
    record: UserProgressRecord
    milestone: int
    daily_challenge_due: bool


class SavedWordResponse(ProgressResponse):
    word_id: str
