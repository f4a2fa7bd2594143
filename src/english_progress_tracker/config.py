"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from english_progress_tracker.tracker.milestones import DEFAULT_MILESTONES
from english_progress_tracker.tracker.streak import (
    SPEAKING_GOAL_SECONDS,
    VOCAB_GOAL_WORDS,
    DailyGoals,
)


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from config/settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load settings from YAML file."""
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return flatten_yaml_settings(data)


def flatten_yaml_settings(data: dict[str, Any]) -> dict[str, Any]:
    """Map the nested settings.yaml layout onto Settings field names."""
    flattened = {}
    if 'server' in data:
        flattened['host'] = data['server'].get('host')
        flattened['port'] = data['server'].get('port')
    if 'goals' in data:
        flattened['speaking_goal_seconds'] = data['goals'].get('speaking_seconds')
        flattened['vocab_goal_words'] = data['goals'].get('vocab_words')
    if 'milestones' in data:
        flattened['milestone_thresholds'] = data['milestones'].get('streak_days')
    if 'storage' in data:
        flattened['data_dir'] = data['storage'].get('data_dir')
        flattened['history_limit'] = data['storage'].get('history_limit')

    # Remove None values
    return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Authentication (optional: None disables auth)
    app_secret: str | None = Field(default=None)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Daily goals
    speaking_goal_seconds: float = Field(default=SPEAKING_GOAL_SECONDS, gt=0)
    vocab_goal_words: int = Field(default=VOCAB_GOAL_WORDS, gt=0)

    # Streak lengths that trigger a celebration
    milestone_thresholds: tuple[int, ...] = Field(default=DEFAULT_MILESTONES)

    # Storage
    history_limit: int = Field(default=50, gt=0)
    project_root: Path = Field(default_factory=_find_project_root)
    data_dir: Path | None = Field(default=None)

    @property
    def storage_dir(self) -> Path:
        d = self.data_dir or self.project_root / "data"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @property
    def progress_dir(self) -> Path:
        d = self.storage_dir / "user_progress"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @property
    def history_dir(self) -> Path:
        d = self.storage_dir / "history"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @property
    def vocabulary_dir(self) -> Path:
        d = self.storage_dir / "vocabulary"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @property
    def daily_goals(self) -> DailyGoals:
        return DailyGoals(
            speaking_seconds=self.speaking_goal_seconds,
            vocab_words=self.vocab_goal_words,
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


@functools.lru_cache
def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()
