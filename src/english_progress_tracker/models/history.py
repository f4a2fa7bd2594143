"""Practice history and saved vocabulary models."""

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from english_progress_tracker.models.progress import DifficultyLevel


class LearningMode(StrEnum):
    """Practice activities offered to the learner."""

    SPEAKING = "speaking"
    WRITING = "writing"
    READING = "reading"
    LISTENING = "listening"
    GRAMMAR = "grammar"
    VOCABULARY = "vocabulary"


def _new_id() -> str:
    return str(uuid.uuid4())


class PracticeSession(BaseModel):
    """A completed practice activity kept in the learner's history."""

    session_id: str = Field(default_factory=_new_id)
    user_id: str
    mode: LearningMode
    difficulty: DifficultyLevel = DifficultyLevel.BEGINNER
    score: float | None = None  # pronunciation score, speaking only
    prompt: str | None = None
    user_response: str | None = None
    feedback: str | dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class VocabularyWord(BaseModel):
    """A word the learner saved to their vocabulary list."""

    word_id: str = Field(default_factory=_new_id)
    user_id: str | None = None
    word: str
    bangla_meaning: str = ""
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)
    example_sentence: str = ""
    usage_context: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
