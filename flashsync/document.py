import logging
from pathlib import Path
from typing import Union

from .exceptions import DocumentError, DocumentWriteError

logger = logging.getLogger(__name__)


class MarkdownDocument:
    """A Markdown file on disk holding flashcard lines."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"MarkdownDocument({str(self.path)!r})"

    def read(self) -> str:
        """
        Read the document as UTF-8 without newline translation.

        Raises:
            DocumentError: If the file is missing or unreadable.
        """
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            raise DocumentError(f"File not found: {self.path}") from None
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(f"Could not read {self.path}: {e}", e) from e

    def write(self, text: str) -> None:
        """
        Replace the document's content with `text`.

        Raises:
            DocumentWriteError: If the file cannot be written.
        """
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise DocumentWriteError(
                f"Could not write {self.path}: {e}", e
            ) from e
        logger.info(f"File updated successfully: {self.path}")
