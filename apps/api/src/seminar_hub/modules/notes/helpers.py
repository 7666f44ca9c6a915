"""
Student Note Views

Classification and ordering used by the notes screens.
"""

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from enum import Enum

from seminar_hub.modules.notes.models import StudentNote
from seminar_hub.modules.shared.enums import Priority
from seminar_hub.modules.shared.models import utc_now

RECENT_WINDOW = timedelta(days=7)
FLAGGED_TAG = "flagged"

PRIORITY_WEIGHT: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class NoteView(str, Enum):
    ALL = "all"
    CONFIDENTIAL = "confidential"
    RECENT = "recent"
    FLAGGED = "flagged"


class NoteSort(str, Enum):
    RECENT = "recent"
    ALPHABETICAL = "alphabetical"
    PRIORITY = "priority"


def in_view(note: StudentNote, view: NoteView, now: datetime | None = None) -> bool:
    if view == NoteView.CONFIDENTIAL:
        return note.is_confidential
    if view == NoteView.RECENT:
        return note.created_at >= (now or utc_now()) - RECENT_WINDOW
    if view == NoteView.FLAGGED:
        return FLAGGED_TAG in (note.tags or [])
    return True


def classify(
    notes: Iterable[StudentNote],
    view: NoteView = NoteView.ALL,
    now: datetime | None = None,
) -> list[StudentNote]:
    now = now or utc_now()
    return [note for note in notes if in_view(note, view, now)]


_SORT_KEYS: dict[NoteSort, tuple[Callable[[StudentNote], object], bool]] = {
    NoteSort.RECENT: (lambda note: note.created_at, True),
    NoteSort.ALPHABETICAL: (lambda note: note.title.lower(), False),
    NoteSort.PRIORITY: (lambda note: PRIORITY_WEIGHT.get(Priority(note.priority), 0), True),
}


def sort_notes(notes: Iterable[StudentNote], order: NoteSort = NoteSort.RECENT) -> list[StudentNote]:
    """Stable sort; ties keep their incoming (newest first) order."""
    key, reverse = _SORT_KEYS[order]
    return sorted(notes, key=key, reverse=reverse)
