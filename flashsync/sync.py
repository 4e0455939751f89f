"""
Entry points that run a full flashcard sync for one document.

`sync_text` works on text in memory; `sync` adds the file read, the deck
lookup and the write-back around it. Neither depends on how the sync was
triggered.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .document import MarkdownDocument
from .exceptions import ConfigurationError, DeckCreationError, StoreError
from .frontmatter import get_deck_name
from .models import SyncConfig, SyncPlan, SyncResult
from .parser import parse_document
from .reconciler import Reconciler, find_deleted_ids
from .serializer import render_document
from .store import AnkiConnectStore, NoteStore


DocumentLike = Union[MarkdownDocument, str, Path]


def ensure_deck(store: NoteStore, deck_name: str) -> None:
    """
    Create the deck if needed. Creating an existing deck is a no-op in Anki.

    Raises:
        DeckCreationError: If the store rejects the request.
    """
    try:
        store.create_deck(deck_name)
    except StoreError as e:
        raise DeckCreationError(
            f"Could not ensure deck '{deck_name}': {e}", e
        ) from e


def sync_text(
    text: str,
    store: NoteStore,
    deck_name: str,
    config: Optional[SyncConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> SyncResult:
    """
    Synchronize the flashcards in `text` and return the rewritten document.

    Parameters:
        text (str): Full document content.
        store (NoteStore): Store receiving deck, add, update and delete calls.
        deck_name (str): Target deck, ensured before any card is processed.
        config (Optional[SyncConfig]): Supplies the tags for added notes.
        logger (Optional[logging.Logger]): Passed through to the reconciler.

    Returns:
        SyncResult: Counts, the new validNoteIds set and the rewritten content.
        `written` is always False here.

    Raises:
        DeckCreationError: If the deck cannot be ensured; no card is touched.
        NoteSyncError: If an add or update fails; later cards are skipped.
    """
    config = config or SyncConfig()
    ensure_deck(store, deck_name)

    parsed = parse_document(text)
    reconciler = Reconciler(
        store, deck_name, tags=config.tags, logger=logger
    )
    outcome = reconciler.reconcile(parsed)
    content = render_document(outcome.lines, outcome.note_ids)

    return SyncResult(
        deck_name=deck_name,
        added=outcome.added,
        updated=outcome.updated,
        skipped_duplicates=outcome.skipped_duplicates,
        deleted=outcome.deleted,
        delete_error=outcome.delete_error,
        note_ids=outcome.note_ids,
        content=content,
        changed=content != text,
    )


def _as_document(document: Optional[DocumentLike]) -> MarkdownDocument:
    if document is None:
        raise ConfigurationError("No active file open.")
    if isinstance(document, MarkdownDocument):
        return document
    return MarkdownDocument(document)


def sync(
    document: Optional[DocumentLike],
    store: Optional[NoteStore] = None,
    config: Optional[SyncConfig] = None,
    deck_name: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> SyncResult:
    """
    Synchronize a Markdown file with Anki and save the updated annotations.

    The deck comes from `deck_name` when given, otherwise from the `deck`
    field of the file's frontmatter. Without `store`, an AnkiConnectStore is
    built from `config`. The file is written only when the content changed
    and only after the whole pass succeeded; any earlier error leaves it
    untouched.

    Raises:
        ConfigurationError: No document, or no deck name can be derived.
        DocumentError: The file cannot be read.
        DeckCreationError: The deck cannot be ensured.
        NoteSyncError: An add or update failed.
        DocumentWriteError: The rewritten file cannot be saved. Notes added
            during this pass then exist in Anki without a recorded id.
    """
    doc = _as_document(document)
    config = config or SyncConfig()

    text = doc.read()
    deck = deck_name or get_deck_name(text)
    if store is None:
        store = AnkiConnectStore.from_config(config)

    result = sync_text(text, store, deck, config=config, logger=logger)

    if result.changed:
        doc.write(result.content)
        result.written = True
    else:
        (logger or logging.getLogger(__name__)).info(
            f"No changes to write for {doc.path}"
        )
    return result


def plan_document(text: str) -> SyncPlan:
    """
    Preview a sync without contacting the store.

    Unsynced cards would be added, synced cards updated, and previous ids that
    no card carries any more would be deleted.
    """
    parsed = parse_document(text)
    to_add = [r for r in parsed.records if not r.is_synced]
    to_update = [r for r in parsed.records if r.is_synced]
    to_delete = find_deleted_ids(
        parsed.previous_note_ids, [r.note_id for r in to_update]
    )
    return SyncPlan(to_add=to_add, to_update=to_update, to_delete=to_delete)
