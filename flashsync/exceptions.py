from typing import Optional


class FlashsyncError(Exception):
    """Base exception for flashcard synchronization errors."""

    def __init__(
        self, message: str, original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.original_exception = original_exception


class ConfigurationError(FlashsyncError):
    """Raised when a sync cannot start (no document, no deck name)."""

    pass


class DocumentError(FlashsyncError):
    """Raised when the Markdown document cannot be read."""

    pass


class DocumentWriteError(DocumentError):
    """Raised when the rewritten document cannot be saved.

    Notes added before the failure already exist in Anki but their ids
    were never recorded in the file.
    """

    pass


class StoreError(FlashsyncError):
    """Raised for errors returned by AnkiConnect."""

    pass


class StoreConnectionError(StoreError):
    """Raised when AnkiConnect cannot be reached."""

    pass


class DuplicateNoteError(StoreError):
    """Raised when Anki rejects a note because its content already exists."""

    pass


class DeckCreationError(StoreError):
    """Raised when the target deck cannot be ensured."""

    pass


class NoteSyncError(FlashsyncError):
    """Indicates a failed add or update that aborted the sync."""

    def __init__(
        self,
        message: str,
        line_index: int,
        front: str,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message, original_exception)
        self.line_index = line_index
        self.front = front
