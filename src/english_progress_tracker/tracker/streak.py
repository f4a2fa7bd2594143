"""Daily progress and streak bookkeeping.

Pure functions over :class:`UserProgressRecord`. Every call takes a snapshot
and returns a new one; nothing here performs I/O or raises for well-typed
input. Day boundaries are detected lazily: daily counters are reset by the
first event whose calendar date differs from ``last_practice_date``.

Per calendar day ``daily_streak_awarded`` moves one way, NOT_MET -> MET, when
both daily goals are reached. ``current_streak`` only moves on the first
event of a new day: +1 if the previous practice day was yesterday and ended
in MET, otherwise it restarts at 1.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

import structlog

from english_progress_tracker.models.progress import UserProgressRecord

logger = structlog.get_logger()

SPEAKING_GOAL_SECONDS = 10 * 60
VOCAB_GOAL_WORDS = 5

# Pronunciation score -> speaking seconds. The 600 s goal is calibrated
# against this divisor, so it stays even though a score is not a duration.
SPEAKING_SECONDS_DIVISOR = 10


@dataclass(frozen=True)
class DailyGoals:
    """Per-day thresholds that must both be met to keep a streak."""

    speaking_seconds: float = SPEAKING_GOAL_SECONDS
    vocab_words: int = VOCAB_GOAL_WORDS


DEFAULT_GOALS = DailyGoals()


def _day(moment: datetime) -> date:
    return moment.date()


def is_new_day(last: datetime, now: datetime) -> bool:
    """True when ``now`` falls on a different calendar date than ``last``."""
    return _day(now) != _day(last)


def is_yesterday(last: datetime, now: datetime) -> bool:
    """True when ``last`` falls on the calendar day before ``now``."""
    return _day(last) == _day(now) - timedelta(days=1)


def goals_met(record: UserProgressRecord, goals: DailyGoals = DEFAULT_GOALS) -> bool:
    return (
        record.daily_speaking_seconds >= goals.speaking_seconds
        and record.daily_vocab_learned >= goals.vocab_words
    )


def record_practice_completion(
    record: UserProgressRecord,
    now: datetime,
    amount: float,
    is_vocabulary: bool,
    goals: DailyGoals = DEFAULT_GOALS,
) -> UserProgressRecord:
    """Apply one practice-completion event and return the updated record.

    Args:
        record: Current progress snapshot.
        now: Wall-clock instant of the event.
        amount: Pronunciation score for speaking practice, converted to
            speaking seconds as ``amount / 10``. Ignored for vocabulary
            events and when not positive.
        is_vocabulary: The event saved one new vocabulary word.
        goals: Daily thresholds.

    Returns:
        A new record. ``milestone_achieved`` is left untouched; milestone
        policy belongs to the caller.
    """
    new_day = is_new_day(record.last_practice_date, now)

    if new_day:
        speaking_seconds: float = 0
        vocab_learned = 0
        sessions_today = 1
        streak_awarded = False
    else:
        speaking_seconds = record.daily_speaking_seconds
        vocab_learned = record.daily_vocab_learned
        sessions_today = record.daily_sessions_completed + 1
        streak_awarded = record.daily_streak_awarded

    words_learned = record.words_learned
    if is_vocabulary:
        vocab_learned += 1
        words_learned += 1
    elif amount > 0:
        speaking_seconds += amount / SPEAKING_SECONDS_DIVISOR

    if (
        not streak_awarded
        and speaking_seconds >= goals.speaking_seconds
        and vocab_learned >= goals.vocab_words
    ):
        streak_awarded = True
        logger.debug("daily_goals_met", user_id=record.user_id)

    current_streak = record.current_streak
    if new_day:
        # Judged on the previous practice day, before this event's reset
        if is_yesterday(record.last_practice_date, now) and record.daily_streak_awarded:
            current_streak = record.current_streak + 1
        else:
            current_streak = 1
        logger.debug(
            "streak_day_transition",
            user_id=record.user_id,
            previous=record.current_streak,
            current=current_streak,
        )

    return record.model_copy(
        update={
            "last_practice_date": now,
            "practice_sessions_completed": record.practice_sessions_completed + 1,
            "daily_sessions_completed": sessions_today,
            "daily_speaking_seconds": speaking_seconds,
            "daily_vocab_learned": vocab_learned,
            "daily_streak_awarded": streak_awarded,
            "words_learned": words_learned,
            "current_streak": current_streak,
        }
    )


def acknowledge_milestone(record: UserProgressRecord) -> UserProgressRecord:
    """Clear a displayed milestone celebration."""
    if record.milestone_achieved == 0:
        return record
    return record.model_copy(update={"milestone_achieved": 0})


def close_daily_challenge(record: UserProgressRecord, now: datetime) -> UserProgressRecord:
    """Mark the daily challenge as shown for ``now``'s calendar day."""
    return record.model_copy(update={"last_daily_challenge_date": now})


def is_daily_challenge_due(record: UserProgressRecord, now: datetime) -> bool:
    """The challenge is shown once per calendar day."""
    return is_new_day(record.last_daily_challenge_date, now)
