import logging
from typing import List, Optional

from .constants import CARD_DELIMITER, NOTE_ID_PATTERN, VALID_IDS_PATTERN
from .models import FlashcardRecord, ParsedDocument

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    """
    Split document text on "\\n" only.

    Carriage returns and other whitespace stay attached to their lines so the
    rewritten document keeps the original bytes of untouched lines.
    """
    return text.split("\n")


def is_valid_ids_line(line: str) -> bool:
    return VALID_IDS_PATTERN.search(line) is not None


def parse_line(line: str, index: int) -> Optional[FlashcardRecord]:
    """
    Extract a flashcard from a single line.

    Parameters:
        line (str): Raw document line.
        index (int): Zero-based position of the line in the document.

    Returns:
        Optional[FlashcardRecord]: The record, or None when the line has no
        delimiter, is a validNoteIds annotation, or has an empty front or back
        once trimmed and stripped of its noteId comment.
    """
    if is_valid_ids_line(line):
        return None

    split_at = line.find(CARD_DELIMITER)
    if split_at == -1:
        return None

    front = line[:split_at].strip()
    raw_back = line[split_at + len(CARD_DELIMITER):]

    note_id: Optional[int] = None
    match = NOTE_ID_PATTERN.search(raw_back)
    if match:
        note_id = int(match.group(1))
        raw_back = raw_back[: match.start()] + raw_back[match.end():]
    back = raw_back.strip()

    if not front or not back:
        return None

    return FlashcardRecord(
        line_index=index, front=front, back=back, note_id=note_id
    )


def parse_valid_note_ids(text: str) -> List[int]:
    """
    Read the previous validNoteIds set from the first annotation in `text`.

    Tokens that are not integers are dropped; duplicates are kept as given.
    Returns an empty list when the document has no annotation.
    """
    for line in split_lines(text):
        match = VALID_IDS_PATTERN.search(line)
        if match:
            break
    else:
        return []

    note_ids: List[int] = []
    for token in match.group(1).split(","):
        token = token.strip()
        if not token:
            continue
        try:
            note_ids.append(int(token))
        except ValueError:
            logger.debug(f"Ignoring malformed validNoteIds token: {token!r}")
    return note_ids


def parse_document(text: str) -> ParsedDocument:
    """
    Scan a document for flashcard lines and its previous validNoteIds set.

    Records are returned in document order, one per qualifying line.
    """
    lines = split_lines(text)
    records: List[FlashcardRecord] = []
    for index, line in enumerate(lines):
        record = parse_line(line, index)
        if record is not None:
            records.append(record)

    previous_note_ids = parse_valid_note_ids(text)
    logger.debug(
        f"Parsed {len(records)} flashcard(s); "
        f"previous validNoteIds: {previous_note_ids}"
    )
    return ParsedDocument(
        lines=lines, records=records, previous_note_ids=previous_note_ids
    )
