"""
Reconciliation of parsed flashcards against the note store.

Cards are processed one at a time in document order. Unsynced cards are
added and get a noteId comment; synced cards are always re-sent as updates;
ids from the previous validNoteIds set that no card reproduced are deleted
in a single call afterwards.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .exceptions import DuplicateNoteError, FlashsyncError, NoteSyncError
from .models import FlashcardRecord, ParsedDocument
from .serializer import annotate_line
from .store import NoteStore


@dataclass
class ReconcileOutcome:
    """Line list and bookkeeping produced by one reconciliation pass."""

    lines: List[str]
    note_ids: List[int] = field(default_factory=list)
    added: List[int] = field(default_factory=list)
    updated: List[int] = field(default_factory=list)
    skipped_duplicates: List[str] = field(default_factory=list)
    deleted: List[int] = field(default_factory=list)
    delete_error: Optional[str] = None


def find_deleted_ids(
    previous_ids: Iterable[int], current_ids: Iterable[int]
) -> List[int]:
    """
    Ids present in `previous_ids` but not in `current_ids`.

    Order follows `previous_ids`; repeated ids are reported once.
    """
    current = set(current_ids)
    deleted: List[int] = []
    for note_id in previous_ids:
        if note_id not in current and note_id not in deleted:
            deleted.append(note_id)
    return deleted


class Reconciler:
    def __init__(
        self,
        store: NoteStore,
        deck_name: str,
        tags: Iterable[str] = (),
        logger: Optional[logging.Logger] = None,
    ):
        """
        Parameters:
            store (NoteStore): Store receiving add/update/delete calls.
            deck_name (str): Deck that new notes are added to. It must already
                exist; ensuring it is the caller's job.
            tags (Iterable[str]): Tags attached to every added note.
            logger (Optional[logging.Logger]): Destination for progress and
                warnings. Defaults to this module's logger.
        """
        self.store = store
        self.deck_name = deck_name
        self.tags = set(tags)
        self.logger = logger or logging.getLogger(__name__)

    def reconcile(self, parsed: ParsedDocument) -> ReconcileOutcome:
        """
        Push every card of `parsed` to the store and delete removed notes.

        The document lines are copied; newly added cards get their noteId
        comment in the copy. `parsed` itself is not modified.

        Raises:
            NoteSyncError: If an add (other than a duplicate rejection) or an
                update fails. Remaining cards and the deletion step are skipped.
        """
        outcome = ReconcileOutcome(lines=list(parsed.lines))

        for record in parsed.records:
            if record.is_synced:
                self._update(record, outcome)
            else:
                self._add(record, outcome)

        deleted_ids = find_deleted_ids(
            parsed.previous_note_ids, outcome.note_ids
        )
        if deleted_ids:
            self._delete(deleted_ids, outcome)

        self.logger.debug(
            f"Reconciliation finished: {len(outcome.added)} added, "
            f"{len(outcome.updated)} updated, "
            f"{len(outcome.skipped_duplicates)} skipped, "
            f"{len(outcome.deleted)} deleted"
        )
        return outcome

    def _add(self, record: FlashcardRecord, outcome: ReconcileOutcome) -> None:
        self.logger.info(f"Adding new note with front: {record.front!r}")
        try:
            note_id = self.store.add_note(
                self.deck_name, record.front, record.back, self.tags
            )
        except DuplicateNoteError:
            self.logger.warning(
                f"Duplicate note detected for front: {record.front!r}. "
                "Skipping add."
            )
            outcome.skipped_duplicates.append(record.front)
            return
        except FlashsyncError as e:
            self.logger.error(
                f"Failed to add note on line {record.line_index + 1} "
                f"with front {record.front!r}: {e}"
            )
            raise NoteSyncError(
                f"Failed to add note on line {record.line_index + 1}: {e}",
                line_index=record.line_index,
                front=record.front,
                original_exception=e,
            ) from e

        index = record.line_index
        outcome.lines[index] = annotate_line(outcome.lines[index], note_id)
        outcome.note_ids.append(note_id)
        outcome.added.append(note_id)

    def _update(
        self, record: FlashcardRecord, outcome: ReconcileOutcome
    ) -> None:
        note_id = record.note_id
        self.logger.info(f"Updating noteId {note_id}")
        try:
            self.store.update_note(note_id, record.front, record.back)
        except FlashsyncError as e:
            self.logger.error(f"Failed to update noteId {note_id}: {e}")
            raise NoteSyncError(
                f"Failed to update noteId {note_id} "
                f"on line {record.line_index + 1}: {e}",
                line_index=record.line_index,
                front=record.front,
                original_exception=e,
            ) from e
        outcome.note_ids.append(note_id)
        outcome.updated.append(note_id)

    def _delete(self, note_ids: List[int], outcome: ReconcileOutcome) -> None:
        ids_text = ", ".join(map(str, note_ids))
        self.logger.warning(f"Deleting notes with IDs: {ids_text}")
        try:
            self.store.delete_notes(note_ids)
        except FlashsyncError as e:
            self.logger.error(f"Failed to delete notes with IDs {ids_text}: {e}")
            outcome.delete_error = f"Failed to delete notes {ids_text}: {e}"
            return
        outcome.deleted.extend(note_ids)
