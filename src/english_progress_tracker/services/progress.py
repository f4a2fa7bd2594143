"""Progress event handlers: the read-modify-write cycle around the tracker."""

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog

from english_progress_tracker.config import Settings
from english_progress_tracker.models.history import LearningMode, PracticeSession, VocabularyWord
from english_progress_tracker.models.progress import DifficultyLevel, UserProgressRecord
from english_progress_tracker.storage import practice_history, user_progress, vocabulary
from english_progress_tracker.tracker import streak
from english_progress_tracker.tracker.milestones import apply_milestone
from english_progress_tracker.tracker.summary import DailyProgressSummary, summarize_daily_progress

logger = structlog.get_logger()

# Logged in history but not counted as completed practice
UNCOUNTED_MODES = frozenset({LearningMode.READING, LearningMode.LISTENING})


@dataclass(frozen=True)
class ProgressUpdate:
    """Result of a practice event, for the UI to render."""

    record: UserProgressRecord
    milestone: int  # 0 when no celebration is pending
    daily_challenge_due: bool


class ProgressService:
    """Applies progress events to stored records, one writer per user at a time.

    Args:
        settings: Application settings (goals, milestone thresholds, storage dirs).
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        # Entries disappear once no thread holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._registry_lock = threading.Lock()

    @contextmanager
    def _user_lock(self, user_id: str) -> Iterator[None]:
        with self._registry_lock:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
        with lock:
            yield

    def _load(self, user_id: str) -> UserProgressRecord:
        return user_progress.get_or_create_record(self.settings.progress_dir, user_id)

    def _save(self, record: UserProgressRecord) -> None:
        user_progress.save_record(self.settings.progress_dir, record)

    def get_profile(self, user_id: str, email: str | None = None) -> UserProgressRecord:
        with self._user_lock(user_id):
            return user_progress.get_or_create_record(self.settings.progress_dir, user_id, email)

    def complete_practice(
        self,
        user_id: str,
        amount: float,
        is_vocabulary: bool = False,
        now: datetime | None = None,
    ) -> ProgressUpdate:
        """Record one completed practice and persist the new progress."""
        now = now or datetime.now()
        with self._user_lock(user_id):
            previous = self._load(user_id)
            updated = streak.record_practice_completion(
                previous, now, amount, is_vocabulary, self.settings.daily_goals
            )
            updated = apply_milestone(previous, updated, self.settings.milestone_thresholds)
            self._save(updated)

        if updated.current_streak != previous.current_streak:
            logger.info(
                "streak_changed",
                user_id=user_id,
                previous=previous.current_streak,
                current=updated.current_streak,
            )
        if updated.daily_streak_awarded and not previous.daily_streak_awarded:
            logger.info("daily_goals_met", user_id=user_id, streak=updated.current_streak)
        if updated.milestone_achieved != previous.milestone_achieved and updated.milestone_achieved:
            logger.info("milestone_reached", user_id=user_id, milestone=updated.milestone_achieved)

        return ProgressUpdate(
            record=updated,
            milestone=updated.milestone_achieved,
            daily_challenge_due=streak.is_daily_challenge_due(updated, now),
        )

    def record_session(
        self,
        user_id: str,
        mode: LearningMode,
        score: float | None = None,
        difficulty: DifficultyLevel | None = None,
        prompt: str | None = None,
        user_response: str | None = None,
        feedback: str | dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> ProgressUpdate:
        """Store a finished session in history and count it toward progress.

        Only speaking scores feed the speaking counter. Writing, grammar and
        vocabulary count as a session with no speaking time. Reading and
        listening are kept in history only and leave progress unchanged.
        """
        now = now or datetime.now()
        if difficulty is None:
            difficulty = self.get_profile(user_id).difficulty_level
        session = PracticeSession(
            user_id=user_id,
            mode=mode,
            difficulty=difficulty,
            score=score,
            prompt=prompt,
            user_response=user_response,
            feedback=feedback,
            created_at=now,
        )
        practice_history.append_practice_session(self.settings.history_dir, session)
        if mode in UNCOUNTED_MODES:
            record = self.get_profile(user_id)
            return ProgressUpdate(
                record=record,
                milestone=record.milestone_achieved,
                daily_challenge_due=streak.is_daily_challenge_due(record, now),
            )
        amount = (score or 0) if mode == LearningMode.SPEAKING else 0
        return self.complete_practice(user_id, amount, now=now)

    def get_practice_history(self, user_id: str, limit: int | None = None) -> list[PracticeSession]:
        return practice_history.read_practice_history(
            self.settings.history_dir, user_id, limit or self.settings.history_limit
        )

    def saved_words(self, user_id: str) -> list[VocabularyWord]:
        return vocabulary.get_saved_words(self.settings.vocabulary_dir, user_id)

    def save_vocabulary_word(
        self, user_id: str, word: VocabularyWord, now: datetime | None = None
    ) -> tuple[str, ProgressUpdate]:
        """Save a word and count it as one vocabulary event."""
        word_id = vocabulary.save_word(self.settings.vocabulary_dir, user_id, word)
        logger.info("vocabulary_word_saved", user_id=user_id, word=word.word)
        return word_id, self.complete_practice(user_id, 0, is_vocabulary=True, now=now)

    def delete_vocabulary_word(self, user_id: str, word_id: str) -> None:
        vocabulary.delete_word(self.settings.vocabulary_dir, user_id, word_id)

    def acknowledge_milestone(self, user_id: str) -> UserProgressRecord:
        with self._user_lock(user_id):
            record = self._load(user_id)
            updated = streak.acknowledge_milestone(record)
            if updated is not record:
                self._save(updated)
        return updated

    def close_daily_challenge(self, user_id: str, now: datetime | None = None) -> UserProgressRecord:
        now = now or datetime.now()
        with self._user_lock(user_id):
            updated = streak.close_daily_challenge(self._load(user_id), now)
            self._save(updated)
        return updated

    def is_daily_challenge_due(self, user_id: str, now: datetime | None = None) -> bool:
        return streak.is_daily_challenge_due(self.get_profile(user_id), now or datetime.now())

    def update_learning_goal(self, user_id: str, goal: str) -> UserProgressRecord:
        return self._update_field(user_id, "learning_goal", goal)

    def update_difficulty(self, user_id: str, level: DifficultyLevel) -> UserProgressRecord:
        return self._update_field(user_id, "difficulty_level", level)

    def _update_field(self, user_id: str, field: str, value: Any) -> UserProgressRecord:
        with self._user_lock(user_id):
            record = self._load(user_id)
            if getattr(record, field) == value:
                return record
            updated = user_progress.update_record(
                self.settings.progress_dir, user_id, **{field: value}
            )
        logger.info("profile_updated", user_id=user_id, field=field)
        return updated

    def daily_summary(self, user_id: str, now: datetime | None = None) -> DailyProgressSummary:
        return summarize_daily_progress(
            self.get_profile(user_id), now or datetime.now(), self.settings.daily_goals
        )
