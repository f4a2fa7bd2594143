"""Saved vocabulary persistence."""

import fcntl
import json
import os
import tempfile
from pathlib import Path

from ..models.history import VocabularyWord
from .errors import WordNotFoundError


def _words_path(vocabulary_dir: Path, user_id: str) -> Path:
    return vocabulary_dir / f"{user_id}.json"


def _read_words(path: Path) -> list[dict]:
    if not path.exists():
        return []
    return json.loads(path.read_text()).get("words", [])


def _write_words(path: Path, words: list[dict]) -> None:
    with tempfile.NamedTemporaryFile("w", dir=path.parent, delete=False, suffix=".json") as tmp:
        json.dump({"words": words}, tmp, indent=2)
    os.replace(tmp.name, path)


def get_saved_words(vocabulary_dir: Path, user_id: str) -> list[VocabularyWord]:
    words = [VocabularyWord(**w) for w in _read_words(_words_path(vocabulary_dir, user_id))]
    words.sort(key=lambda w: w.created_at, reverse=True)
    return words


def save_word(vocabulary_dir: Path, user_id: str, word: VocabularyWord) -> str:
    """Store ``word`` for ``user_id`` and return its id."""
    path = _words_path(vocabulary_dir, user_id)
    stored = word.model_copy(update={"user_id": user_id})
    with open(vocabulary_dir / f"{user_id}.json.lock", "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        words = _read_words(path)
        words.append(stored.model_dump(mode="json"))
        _write_words(path, words)
    return stored.word_id


def delete_word(vocabulary_dir: Path, user_id: str, word_id: str) -> None:
    path = _words_path(vocabulary_dir, user_id)
    with open(vocabulary_dir / f"{user_id}.json.lock", "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        words = _read_words(path)
        remaining = [w for w in words if w.get("word_id") != word_id]
        if len(remaining) == len(words):
            raise WordNotFoundError(user_id, word_id)
        _write_words(path, remaining)
