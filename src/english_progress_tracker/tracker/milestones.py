"""Streak milestone policy (which streak lengths earn a celebration)."""

from collections.abc import Iterable

from english_progress_tracker.models.progress import UserProgressRecord

DEFAULT_MILESTONES: tuple[int, ...] = (3, 7, 30)


def crossed_milestone(
    previous_streak: int,
    new_streak: int,
    thresholds: Iterable[int] = DEFAULT_MILESTONES,
) -> int:
    """Return the largest threshold passed going from previous to new streak, else 0."""
    crossed = [t for t in thresholds if previous_streak < t <= new_streak]
    return max(crossed, default=0)


def apply_milestone(
    previous: UserProgressRecord,
    updated: UserProgressRecord,
    thresholds: Iterable[int] = DEFAULT_MILESTONES,
) -> UserProgressRecord:
    """Flag a celebration on ``updated`` if its streak crossed a threshold.

    A pending milestone that was not acknowledged yet is kept unless a newer
    one replaces it.
    """
    milestone = crossed_milestone(previous.current_streak, updated.current_streak, thresholds)
    if not milestone:
        return updated
    return updated.model_copy(update={"milestone_achieved": milestone})
