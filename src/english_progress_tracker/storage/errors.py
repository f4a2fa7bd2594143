"""Storage exceptions."""


class StorageError(LookupError):
    """Base class for missing or unreadable stored documents."""


class RecordNotFoundError(StorageError):
    def __init__(self, user_id: str):
        super().__init__(f"No progress record for user {user_id!r}")
        self.user_id = user_id


class WordNotFoundError(StorageError):
    def __init__(self, user_id: str, word_id: str):
        super().__init__(f"Word {word_id!r} not found for user {user_id!r}")
        self.user_id = user_id
        self.word_id = word_id
