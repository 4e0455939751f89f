"""
Note store interface and its AnkiConnect implementation.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence

import requests

from .constants import (
    ANKI_CONNECT_VERSION,
    DEFAULT_ANKI_CONNECT_URL,
    DEFAULT_NOTE_TYPE,
    DEFAULT_TIMEOUT_SECONDS,
    DUPLICATE_ERROR_MARKER,
)
from .exceptions import DuplicateNoteError, StoreConnectionError, StoreError
from .models import SyncConfig

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    """Operations the reconciler needs from a spaced-repetition store."""

    def create_deck(self, name: str) -> None:
        ...

    def add_note(
        self, deck_name: str, front: str, back: str, tags: Iterable[str]
    ) -> int:
        ...

    def update_note(self, note_id: int, front: str, back: str) -> None:
        ...

    def delete_notes(self, note_ids: Sequence[int]) -> None:
        ...


class AnkiConnectStore:
    """Talks to a local Anki instance through the AnkiConnect add-on."""

    def __init__(
        self,
        url: str = DEFAULT_ANKI_CONNECT_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        note_type: str = DEFAULT_NOTE_TYPE,
    ):
        self.url = url
        self.timeout = timeout
        self.note_type = note_type

    @classmethod
    def from_config(cls, config: SyncConfig) -> "AnkiConnectStore":
        return cls(
            url=config.anki_connect_url,
            timeout=config.timeout,
            note_type=config.note_type,
        )

    def invoke(
        self, action: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """
        Send one AnkiConnect action and return its `result`.

        Raises:
            StoreConnectionError: If the endpoint cannot be reached, times out,
                or answers with something other than AnkiConnect JSON.
            DuplicateNoteError: If AnkiConnect reports duplicate content.
            StoreError: For any other error reported by AnkiConnect.
        """
        payload: dict = {"action": action, "version": ANKI_CONNECT_VERSION}
        if params:
            payload["params"] = dict(params)
        logger.debug(f"AnkiConnect request: action={action}, params={params}")

        try:
            response = requests.post(
                self.url, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException
            raise StoreConnectionError(
                f"AnkiConnect at {self.url} returned invalid JSON", e
            ) from e
        except requests.exceptions.RequestException as e:
            raise StoreConnectionError(
                f"Could not reach AnkiConnect at {self.url}: {e}", e
            ) from e

        if not isinstance(body, dict) or "error" not in body:
            raise StoreConnectionError(
                f"Unexpected AnkiConnect response for '{action}': {body!r}"
            )

        error = body.get("error")
        if error is not None:
            message = str(error)
            logger.debug(f"AnkiConnect error for action={action}: {message}")
            if DUPLICATE_ERROR_MARKER in message.lower():
                raise DuplicateNoteError(message)
            raise StoreError(f"AnkiConnect error on '{action}': {message}")

        result = body.get("result")
        logger.debug(f"AnkiConnect result for action={action}: {result!r}")
        return result

    def version(self) -> int:
        return int(self.invoke("version"))

    def create_deck(self, name: str) -> None:
        logger.info(f"Ensuring deck exists: {name}")
        self.invoke("createDeck", {"deck": name})

    def add_note(
        self, deck_name: str, front: str, back: str, tags: Iterable[str]
    ) -> int:
        note_id = self.invoke(
            "addNote",
            {
                "note": {
                    "deckName": deck_name,
                    "modelName": self.note_type,
                    "fields": {"Front": front, "Back": back},
                    "tags": sorted(tags),
                }
            },
        )
        if note_id is None:
            raise StoreError("addNote returned no note id")
        return int(note_id)

    def update_note(self, note_id: int, front: str, back: str) -> None:
        self.invoke(
            "updateNoteFields",
            {"note": {"id": note_id, "fields": {"Front": front, "Back": back}}},
        )

    def delete_notes(self, note_ids: Sequence[int]) -> None:
        notes: List[int] = list(note_ids)
        logger.info(f"Deleting notes: {', '.join(map(str, notes))}")
        self.invoke("deleteNotes", {"notes": notes})
