"""Read-only view of today's progress for dashboards."""

from datetime import datetime

from pydantic import BaseModel

from english_progress_tracker.models.progress import UserProgressRecord
from english_progress_tracker.tracker.streak import (
    DEFAULT_GOALS,
    DailyGoals,
    is_new_day,
    is_yesterday,
)


class DailyProgressSummary(BaseModel):
    speaking_minutes: float
    speaking_goal_minutes: float
    speaking_percent: float
    vocab_learned: int
    vocab_goal: int
    vocab_percent: float
    sessions_today: int
    goals_met: bool
    current_streak: int


def _percent(value: float, goal: float) -> float:
    if goal <= 0:
        return 100.0
    return round(min(value / goal * 100, 100.0), 1)


def summarize_daily_progress(
    record: UserProgressRecord,
    now: datetime,
    goals: DailyGoals = DEFAULT_GOALS,
) -> DailyProgressSummary:
    """Summarize the record as seen on ``now``'s calendar day.

    Stale daily counters from an earlier day are reported as zero, and a
    streak that can no longer continue is reported as 0. The record is not
    modified; the reset itself still happens on the next practice event.
    """
    stale = is_new_day(record.last_practice_date, now)
    if stale:
        speaking_seconds: float = 0
        vocab_learned = 0
        sessions_today = 0
        met = False
    else:
        speaking_seconds = record.daily_speaking_seconds
        vocab_learned = record.daily_vocab_learned
        sessions_today = record.daily_sessions_completed
        met = record.daily_streak_awarded

    streak = record.current_streak
    if stale and not (is_yesterday(record.last_practice_date, now) and record.daily_streak_awarded):
        streak = 0

    return DailyProgressSummary(
        speaking_minutes=round(speaking_seconds / 60, 1),
        speaking_goal_minutes=round(goals.speaking_seconds / 60, 1),
        speaking_percent=_percent(speaking_seconds, goals.speaking_seconds),
        vocab_learned=vocab_learned,
        vocab_goal=goals.vocab_words,
        vocab_percent=_percent(vocab_learned, goals.vocab_words),
        sessions_today=sessions_today,
        goals_met=met,
        current_streak=streak,
    )
