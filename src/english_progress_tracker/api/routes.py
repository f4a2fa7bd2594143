"""REST API routes for progress, practice history and vocabulary."""

import functools
import re

import structlog
from fastapi import APIRouter, HTTPException

from english_progress_tracker.api.schemas import (
    PracticeCompletionRequest,
    ProfileUpdateRequest,
    ProgressResponse,
    SavedWordResponse,
    SessionRequest,
    VocabularyWordRequest,
)
from english_progress_tracker.config import get_settings
from english_progress_tracker.models.history import PracticeSession, VocabularyWord
from english_progress_tracker.models.progress import UserProgressRecord
from english_progress_tracker.services.progress import ProgressService, ProgressUpdate
from english_progress_tracker.storage.errors import StorageError
from english_progress_tracker.tracker.summary import DailyProgressSummary

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


@functools.lru_cache
def get_service() -> ProgressService:
    return ProgressService(get_settings())


def validate_user_id(user_id: str) -> str:
    if not _USER_ID_RE.match(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID format")
    return user_id


def _progress_response(update: ProgressUpdate) -> ProgressResponse:
    return ProgressResponse(
        record=update.record,
        milestone=update.milestone,
        daily_challenge_due=update.daily_challenge_due,
    )


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/users/{user_id}/progress")
async def get_progress(user_id: str) -> UserProgressRecord:
    """Return the user's progress record, creating it on first access."""
    return get_service().get_profile(validate_user_id(user_id))


@router.get("/users/{user_id}/progress/today")
async def get_daily_summary(user_id: str) -> DailyProgressSummary:
    return get_service().daily_summary(validate_user_id(user_id))


@router.post("/users/{user_id}/practice")
async def complete_practice(user_id: str, body: PracticeCompletionRequest) -> ProgressResponse:
    """Count one completed practice toward today's goals and the streak."""
    update = get_service().complete_practice(
        validate_user_id(user_id), body.amount, is_vocabulary=body.is_vocabulary
    )
    return _progress_response(update)


@router.post("/users/{user_id}/sessions")
async def record_session(user_id: str, body: SessionRequest) -> ProgressResponse:
    update = get_service().record_session(
        validate_user_id(user_id),
        body.mode,
        score=body.score,
        difficulty=body.difficulty,
        prompt=body.prompt,
        user_response=body.user_response,
        feedback=body.feedback,
    )
    return _progress_response(update)


@router.get("/users/{user_id}/sessions")
async def list_sessions(user_id: str, limit: int | None = None) -> list[PracticeSession]:
    """List recent practice sessions, newest first."""
    if limit is not None and limit < 1:
        raise HTTPException(status_code=400, detail="limit must be positive")
    return get_service().get_practice_history(validate_user_id(user_id), limit)


@router.post("/users/{user_id}/milestone/acknowledge")
async def acknowledge_milestone(user_id: str) -> UserProgressRecord:
    return get_service().acknowledge_milestone(validate_user_id(user_id))


@router.get("/users/{user_id}/daily-challenge")
async def daily_challenge_status(user_id: str) -> dict:
    return {"due": get_service().is_daily_challenge_due(validate_user_id(user_id))}


@router.post("/users/{user_id}/daily-challenge/close")
async def close_daily_challenge(user_id: str) -> UserProgressRecord:
    return get_service().close_daily_challenge(validate_user_id(user_id))


@router.patch("/users/{user_id}/profile")
async def update_profile(user_id: str, body: ProfileUpdateRequest) -> UserProgressRecord:
    """Change the learning goal and/or difficulty level."""
    user_id = validate_user_id(user_id)
    service = get_service()
    record = service.get_profile(user_id)
    if body.learning_goal is not None:
        record = service.update_learning_goal(user_id, body.learning_goal)
    if body.difficulty_level is not None:
        record = service.update_difficulty(user_id, body.difficulty_level)
    return record


@router.get("/users/{user_id}/vocabulary")
async def list_vocabulary(user_id: str) -> list[VocabularyWord]:
    return get_service().saved_words(validate_user_id(user_id))


@router.post("/users/{user_id}/vocabulary")
async def save_vocabulary_word(user_id: str, body: VocabularyWordRequest) -> SavedWordResponse:
    """Save a word; each saved word counts toward the daily vocabulary goal."""
    word_id, update = get_service().save_vocabulary_word(
        validate_user_id(user_id), VocabularyWord(**body.model_dump())
    )
    return SavedWordResponse(word_id=word_id, **_progress_response(update).model_dump())


@router.delete("/users/{user_id}/vocabulary/{word_id}")
async def delete_vocabulary_word(user_id: str, word_id: str) -> dict:
    try:
        get_service().delete_vocabulary_word(validate_user_id(user_id), word_id)
    except StorageError as e:
        logger.warning("vocabulary_delete_failed", user_id=user_id, word_id=word_id)
        raise HTTPException(status_code=404, detail=str(e))
    return {"deleted": word_id}
