"""
Rendering of the synchronized line list back into document text.
"""

from typing import Iterable, List

from .constants import render_note_id, render_valid_ids
from .parser import is_valid_ids_line


def annotate_line(line: str, note_id: int) -> str:
    """
    Append a noteId comment to a flashcard line, separated by one space.

    A trailing carriage return stays at the end of the line.
    """
    if line.endswith("\r"):
        return f"{line[:-1]} {render_note_id(note_id)}\r"
    return f"{line} {render_note_id(note_id)}"


def render_document(lines: Iterable[str], note_ids: Iterable[int]) -> str:
    """
    Produce the final document text.

    Every validNoteIds line is dropped and exactly one fresh annotation built
    from `note_ids` (in the given order) is appended as the last line. All
    other lines are reproduced verbatim and in order.
    """
    kept: List[str] = [line for line in lines if not is_valid_ids_line(line)]
    kept.append(render_valid_ids(note_ids))
    return "\n".join(kept)
