"""
Line grammar and AnkiConnect defaults.

The annotation formats are persisted inside user documents, so the literal
forms here must not change.
"""
import re
from typing import FrozenSet, Iterable

# Separates the front of a card from its back. Only the first occurrence counts.
CARD_DELIMITER: str = " ::: "

# Example: <!-- noteId:123 -->
NOTE_ID_PATTERN = re.compile(r"<!--\s*noteId:(\d+)\s*-->")

# Example: <!-- validNoteIds: 123, 456 -->
VALID_IDS_PATTERN = re.compile(r"<!--\s*validNoteIds:\s*([\d,\s]+)\s*-->")

# AnkiConnect
DEFAULT_ANKI_CONNECT_URL: str = "http://127.0.0.1:8765"
ANKI_CONNECT_VERSION: int = 6
DEFAULT_TIMEOUT_SECONDS: float = 30.0
DEFAULT_NOTE_TYPE: str = "Basic"
DEFAULT_TAGS: FrozenSet[str] = frozenset({"obsidian"})

# Substring AnkiConnect uses when rejecting duplicate content, e.g.
# "cannot create note because it is a duplicate".
DUPLICATE_ERROR_MARKER: str = "duplicate"


def render_note_id(note_id: int) -> str:
    return f"<!-- noteId:{note_id} -->"


def render_valid_ids(note_ids: Iterable[int]) -> str:
    return f"<!-- validNoteIds: {','.join(str(i) for i in note_ids)} -->"
