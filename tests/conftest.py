import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from flashsync.exceptions import DuplicateNoteError, StoreError


class FakeStore:
    """
    In-memory note store recording every call in order.

    Added notes receive ids from `next_ids` (in order) or from an incrementing
    counter. Fronts listed in `duplicates` are rejected as duplicate content;
    `fail_on` maps an operation name to the exception it should raise.
    """

    def __init__(
        self,
        next_ids: Optional[Iterable[int]] = None,
        duplicates: Iterable[str] = (),
        fail_on: Optional[Dict[str, Exception]] = None,
    ):
        self.next_ids: List[int] = list(next_ids or [])
        self.duplicates = set(duplicates)
        self.fail_on: Dict[str, Exception] = dict(fail_on or {})
        self.calls: List[Tuple] = []
        self.decks: set = set()
        self.notes: Dict[int, Tuple[str, str, str, frozenset]] = {}
        self._counter = 1000

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def create_deck(self, name: str) -> None:
        self.calls.append(("create_deck", name))
        self._maybe_fail("create_deck")
        self.decks.add(name)

    def add_note(
        self, deck_name: str, front: str, back: str, tags: Iterable[str]
    ) -> int:
        self.calls.append(("add_note", deck_name, front, back, frozenset(tags)))
        if front in self.duplicates:
            raise DuplicateNoteError(
                "cannot create note because it is a duplicate"
            )
        self._maybe_fail("add_note")
        if self.next_ids:
            note_id = self.next_ids.pop(0)
        else:
            self._counter += 1
            note_id = self._counter
        self.notes[note_id] = (deck_name, front, back, frozenset(tags))
        return note_id

    def update_note(self, note_id: int, front: str, back: str) -> None:
        self.calls.append(("update_note", note_id, front, back))
        self._maybe_fail("update_note")
        if note_id in self.notes:
            deck, _, _, tags = self.notes[note_id]
            self.notes[note_id] = (deck, front, back, tags)

    def delete_notes(self, note_ids: Sequence[int]) -> None:
        self.calls.append(("delete_notes", list(note_ids)))
        self._maybe_fail("delete_notes")
        for note_id in note_ids:
            self.notes.pop(note_id, None)

    def calls_named(self, operation: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == operation]


@pytest.fixture
def fake_store() -> FakeStore:
    """
    Provide an empty FakeStore that assigns ids from an internal counter.

    Returns:
        FakeStore: Store with no notes, no duplicates and no injected failures.
    """
    return FakeStore()


@pytest.fixture
def make_store():
    """
    Build FakeStore instances.

    Returns:
        Callable[..., FakeStore]: Positional operation names make the store
        raise StoreError for those operations; keyword arguments are forwarded
        to FakeStore.
    """

    def _factory(*failing_operations: str, **kwargs) -> FakeStore:
        fail_on = {
            op: StoreError(f"AnkiConnect error on '{op}': boom")
            for op in failing_operations
        }
        return FakeStore(fail_on=fail_on, **kwargs)

    return _factory


@pytest.fixture
def quiet_logger() -> logging.Logger:
    """Logger that swallows records; used where log output is irrelevant."""
    test_logger = logging.getLogger("flashsync.tests.quiet")
    test_logger.addHandler(logging.NullHandler())
    test_logger.propagate = False
    return test_logger


@pytest.fixture
def markdown_file(tmp_path):
    """
    Write a Markdown document with frontmatter to a temporary file.

    Returns:
        Callable[[str, str], Path]: Takes the body text and an optional deck
        name (None omits the frontmatter) and returns the file path.
    """

    def _write(body: str, deck: Optional[str] = "Geography", name: str = "note.md"):
        path = tmp_path / name
        if deck is None:
            content = body
        else:
            content = f"---\ndeck: {deck}\n---\n{body}"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def restore_package_logger():
    """
    Undo logging changes made by CLI runs so caplog sees flashsync records.
    """
    package_logger = logging.getLogger("flashsync")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
