"""User progress persistence (JSON + fcntl.flock + atomic write)."""

import fcntl
import json
import os
import tempfile
from pathlib import Path

import structlog

from ..models.progress import UserProgressRecord
from .errors import RecordNotFoundError

logger = structlog.get_logger()


def get_record_path(progress_dir: Path, user_id: str) -> Path:
    return progress_dir / f"{user_id}.json"


def load_record(progress_dir: Path, user_id: str) -> UserProgressRecord | None:
    path = get_record_path(progress_dir, user_id)
    if not path.exists():
        return None
    with open(path) as f:
        fcntl.flock(f, fcntl.LOCK_SH)
        data = json.load(f)
        fcntl.flock(f, fcntl.LOCK_UN)
    data.setdefault("user_id", user_id)
    return UserProgressRecord(**data)


def save_record(progress_dir: Path, record: UserProgressRecord) -> None:
    path = get_record_path(progress_dir, record.user_id)
    with tempfile.NamedTemporaryFile("w", dir=path.parent, delete=False, suffix=".json") as tmp:
        json.dump(record.model_dump(mode="json"), tmp)
    os.replace(tmp.name, path)


def create_record(progress_dir: Path, user_id: str, email: str | None = None) -> UserProgressRecord:
    """Create and persist a zeroed record for a first sign-in."""
    record = UserProgressRecord(user_id=user_id, email=email)
    save_record(progress_dir, record)
    logger.info("progress_record_created", user_id=user_id)
    return record


def get_or_create_record(
    progress_dir: Path, user_id: str, email: str | None = None
) -> UserProgressRecord:
    record = load_record(progress_dir, user_id)
    if record is None:
        record = create_record(progress_dir, user_id, email)
    return record


def update_record(progress_dir: Path, user_id: str, **changes) -> UserProgressRecord:
    """Merge ``changes`` into the stored record and save it."""
    record = load_record(progress_dir, user_id)
    if record is None:
        raise RecordNotFoundError(user_id)
    data = record.model_dump()
    data.update(changes)
    updated = UserProgressRecord(**data)
    save_record(progress_dir, updated)
    return updated
