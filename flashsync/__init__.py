"""Flashsync - keep one-line Markdown flashcards in sync with Anki."""

from .models import FlashcardRecord, ParsedDocument, SyncConfig, SyncPlan, SyncResult
from .parser import parse_document
from .serializer import render_document
from .reconciler import Reconciler
from .store import AnkiConnectStore, NoteStore
from .document import MarkdownDocument
from .sync import plan_document, sync, sync_text

__all__ = [
    "FlashcardRecord",
    "ParsedDocument",
    "SyncConfig",
    "SyncPlan",
    "SyncResult",
    "parse_document",
    "render_document",
    "Reconciler",
    "AnkiConnectStore",
    "NoteStore",
    "MarkdownDocument",
    "plan_document",
    "sync",
    "sync_text",
]
