"""Practice history persistence, one append-only JSON document per user."""

import fcntl
import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from ..models.history import PracticeSession

logger = structlog.get_logger()


def _history_path(history_dir: Path, user_id: str) -> Path:
    return history_dir / f"{user_id}.json"


def append_practice_session(history_dir: Path, session: PracticeSession) -> None:
    """Append a completed session to the user's history file."""
    history_path = _history_path(history_dir, session.user_id)

    lock_path = history_dir / f"{session.user_id}.json.lock"
    with open(lock_path, "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)

        if history_path.exists():
            data = json.loads(history_path.read_text())
        else:
            data = {"sessions": []}

        data["sessions"].append(session.model_dump(mode="json"))
        with tempfile.NamedTemporaryFile(
            "w", dir=history_dir, delete=False, suffix=".json"
        ) as tmp:
            json.dump(data, tmp, indent=2)
        os.replace(tmp.name, history_path)


def read_practice_history(history_dir: Path, user_id: str, limit: int = 50) -> list[PracticeSession]:
    """Return up to ``limit`` sessions, newest first. Empty if no history yet."""
    history_path = _history_path(history_dir, user_id)
    if not history_path.exists():
        return []
    data = json.loads(history_path.read_text())

    sessions = []
    for entry in data.get("sessions", []):
        try:
            sessions.append(PracticeSession(**entry))
        except ValidationError:
            logger.warning("history_entry_parse_error", user_id=user_id, entry=entry)
    sessions.sort(key=lambda s: s.created_at, reverse=True)
    return sessions[:limit]
