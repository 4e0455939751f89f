"""
Pydantic models and dataclasses shared by the parser, reconciler and CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_ANKI_CONNECT_URL,
    DEFAULT_NOTE_TYPE,
    DEFAULT_TAGS,
    DEFAULT_TIMEOUT_SECONDS,
)


class FlashcardRecord(BaseModel):
    """
    One front/back pair extracted from a single document line.

    `line_index` is recomputed on every parse and never persisted. A record
    without `note_id` has not been synced yet.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    line_index: int = Field(
        ..., ge=0, description="Zero-based position in the document lines."
    )
    front: str = Field(
        ..., min_length=1, description="Trimmed text before the delimiter."
    )
    back: str = Field(
        ...,
        min_length=1,
        description="Trimmed text after the delimiter, noteId comment removed.",
    )
    note_id: Optional[int] = Field(
        default=None,
        ge=0,
        description="Anki note id recorded in the line's noteId comment.",
    )

    @property
    def is_synced(self) -> bool:
        return self.note_id is not None


@dataclass
class ParsedDocument:
    """Result of scanning a document: its lines, cards and previous id set."""

    lines: List[str]
    records: List[FlashcardRecord] = field(default_factory=list)
    previous_note_ids: List[int] = field(default_factory=list)


@dataclass
class SyncPlan:
    """Store-free preview of what a sync would do to a document."""

    to_add: List[FlashcardRecord]
    to_update: List[FlashcardRecord]
    to_delete: List[int]


class SyncConfig(BaseModel):
    """Connection and note settings for a sync run."""

    model_config = ConfigDict(extra="forbid")

    anki_connect_url: str = Field(
        default=DEFAULT_ANKI_CONNECT_URL,
        min_length=1,
        description="AnkiConnect endpoint.",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Per-request timeout in seconds.",
    )
    note_type: str = Field(
        default=DEFAULT_NOTE_TYPE,
        min_length=1,
        description="Anki note type with 'Front' and 'Back' fields.",
    )
    tags: Set[str] = Field(
        default_factory=lambda: set(DEFAULT_TAGS),
        description="Tags attached to every added note.",
    )

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        """Strip tag strings and drop empty ones; other values pass through."""
        if isinstance(v, (list, set, tuple, frozenset)):
            return {
                tag.strip() if isinstance(tag, str) else tag
                for tag in v
                if not (isinstance(tag, str) and not tag.strip())
            }
        return v


class SyncResult(BaseModel):
    """Outcome of one document sync."""

    deck_name: str
    added: List[int] = Field(default_factory=list)
    updated: List[int] = Field(default_factory=list)
    skipped_duplicates: List[str] = Field(
        default_factory=list,
        description="Fronts of cards Anki rejected as duplicates.",
    )
    deleted: List[int] = Field(default_factory=list)
    delete_error: Optional[str] = None
    note_ids: List[int] = Field(
        default_factory=list,
        description="Ids written to the validNoteIds line, in document order.",
    )
    content: str = ""
    changed: bool = False
    written: bool = False

    def summary(self) -> str:
        parts = [
            f"{len(self.added)} added",
            f"{len(self.updated)} updated",
            f"{len(self.skipped_duplicates)} skipped",
            f"{len(self.deleted)} deleted",
        ]
        if self.delete_error:
            parts.append("deletion failed")
        return ", ".join(parts)
