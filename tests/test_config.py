"""Tests for settings loading."""

from english_progress_tracker.config import Settings, flatten_yaml_settings
from english_progress_tracker.tracker.streak import DailyGoals


def test_flatten_yaml_settings():
    flattened = flatten_yaml_settings({
        "server": {"host": "127.0.0.1", "port": 9000},
        "goals": {"speaking_seconds": 300, "vocab_words": 3},
        "milestones": {"streak_days": [5, 10]},
        "storage": {"history_limit": 20},
    })
    assert flattened == {
        "host": "127.0.0.1",
        "port": 9000,
        "speaking_goal_seconds": 300,
        "vocab_goal_words": 3,
        "milestone_thresholds": [5, 10],
        "history_limit": 20,
    }


def test_flatten_drops_missing_values():
    assert flatten_yaml_settings({"goals": {"vocab_words": 7}}) == {"vocab_goal_words": 7}


def test_daily_goals_from_settings(tmp_path):
    settings = Settings(data_dir=tmp_path, speaking_goal_seconds=120, vocab_goal_words=2)
    assert settings.daily_goals == DailyGoals(speaking_seconds=120, vocab_words=2)


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("VOCAB_GOAL_WORDS", "8")
    settings = Settings(data_dir=tmp_path)
    assert settings.vocab_goal_words == 8


def test_storage_dirs_created(tmp_path):
    settings = Settings(data_dir=tmp_path / "data")
    assert settings.progress_dir.is_dir()
    assert settings.history_dir.is_dir()
    assert settings.vocabulary_dir.is_dir()
