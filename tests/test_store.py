"""
Tests for the AnkiConnect note store.
"""

from unittest.mock import MagicMock

import pytest
import requests

from flashsync.exceptions import (
    DuplicateNoteError,
    StoreConnectionError,
    StoreError,
)
from flashsync.models import SyncConfig
from flashsync.store import AnkiConnectStore


def _response(body):
    response = MagicMock(spec=requests.Response)
    response.json.return_value = body
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def mock_post(mocker):
    """Patch requests.post and answer with a successful null result."""
    return mocker.patch(
        "flashsync.store.requests.post",
        return_value=_response({"result": None, "error": None}),
    )


@pytest.fixture
def store() -> AnkiConnectStore:
    return AnkiConnectStore(url="http://anki.test:8765", timeout=5.0)


def _sent_payload(mock_post):
    return mock_post.call_args.kwargs["json"]


def test_create_deck_payload(store, mock_post):
    store.create_deck("Geography")

    mock_post.assert_called_once_with(
        "http://anki.test:8765",
        json={"action": "createDeck", "version": 6, "params": {"deck": "Geography"}},
        timeout=5.0,
    )


def test_add_note_returns_id(store, mock_post):
    mock_post.return_value = _response({"result": 1496198395707, "error": None})

    note_id = store.add_note("Geography", "Front", "Back", {"b-tag", "a-tag"})

    assert note_id == 1496198395707
    assert _sent_payload(mock_post) == {
        "action": "addNote",
        "version": 6,
        "params": {
            "note": {
                "deckName": "Geography",
                "modelName": "Basic",
                "fields": {"Front": "Front", "Back": "Back"},
                "tags": ["a-tag", "b-tag"],
            }
        },
    }


def test_add_note_without_id_is_an_error(store, mock_post):
    with pytest.raises(StoreError, match="addNote returned no note id"):
        store.add_note("Deck", "F", "B", [])


def test_duplicate_error_is_distinguished(store, mock_post):
    mock_post.return_value = _response(
        {"result": None, "error": "cannot create note because it is a duplicate"}
    )
    with pytest.raises(DuplicateNoteError):
        store.add_note("Deck", "F", "B", [])


def test_other_errors_raise_store_error(store, mock_post):
    mock_post.return_value = _response(
        {"result": None, "error": "model was not found: Basic"}
    )
    with pytest.raises(StoreError, match="model was not found") as exc_info:
        store.add_note("Deck", "F", "B", [])
    assert not isinstance(exc_info.value, DuplicateNoteError)


def test_update_note_payload(store, mock_post):
    store.update_note(5, "New front", "New back")

    assert _sent_payload(mock_post) == {
        "action": "updateNoteFields",
        "version": 6,
        "params": {
            "note": {"id": 5, "fields": {"Front": "New front", "Back": "New back"}}
        },
    }


def test_delete_notes_payload(store, mock_post):
    store.delete_notes((2, 3))

    assert _sent_payload(mock_post) == {
        "action": "deleteNotes",
        "version": 6,
        "params": {"notes": [2, 3]},
    }


def test_version_has_no_params(store, mock_post):
    mock_post.return_value = _response({"result": 6, "error": None})

    assert store.version() == 6
    assert _sent_payload(mock_post) == {"action": "version", "version": 6}


def test_connection_error(store, mocker):
    mocker.patch(
        "flashsync.store.requests.post",
        side_effect=requests.exceptions.ConnectionError("refused"),
    )
    with pytest.raises(StoreConnectionError, match="Could not reach AnkiConnect"):
        store.create_deck("Deck")


def test_http_error_status(store, mock_post):
    mock_post.return_value.raise_for_status.side_effect = requests.HTTPError(
        "500 Server Error"
    )
    with pytest.raises(StoreConnectionError, match="500 Server Error"):
        store.create_deck("Deck")


def test_invalid_json(store, mock_post):
    mock_post.return_value.json.side_effect = ValueError("Expecting value")
    with pytest.raises(StoreConnectionError, match="invalid JSON"):
        store.create_deck("Deck")


def test_unexpected_response_shape(store, mock_post):
    mock_post.return_value = _response(["not", "a", "dict"])
    with pytest.raises(StoreConnectionError, match="Unexpected AnkiConnect response"):
        store.create_deck("Deck")


def test_from_config():
    config = SyncConfig(
        anki_connect_url="http://other:1234", timeout=2.5, note_type="Basic (and reversed card)"
    )
    store = AnkiConnectStore.from_config(config)
    assert store.url == "http://other:1234"
    assert store.timeout == 2.5
    assert store.note_type == "Basic (and reversed card)"
