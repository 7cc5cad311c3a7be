"""In-memory note store.

Notes live only for the lifetime of the process. The store is owned by
whoever constructs it and is handed to the MCP handlers, so tests can
build isolated stores.

The store does no locking. ``create`` never awaits, so on a single
asyncio event loop two creates cannot interleave; running handlers on
multiple threads would break that assumption.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Note:
    title: str
    content: str


SEED_NOTES = {
    "1": Note(title="First Note", content="This is note 1"),
    "2": Note(title="Second Note", content="This is note 2"),
}


class NoteNotFoundError(KeyError):
    """Raised when a note id is not in the store."""

    def __init__(self, note_id: str):
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"Note {self.note_id} not found"


class InvalidNoteError(ValueError):
    """Raised when a note is created without a title or content."""
    pass


class NoteStore:
    def __init__(self, seed: Optional[Dict[str, Note]] = None):
        self._notes: Dict[str, Note] = dict(SEED_NOTES if seed is None else seed)
        # Ids are never handed out twice, even if notes were ever removed.
        numeric_ids = [int(note_id) for note_id in self._notes if note_id.isdigit()]
        self._next_id = max(numeric_ids, default=0) + 1

    def __len__(self) -> int:
        return len(self._notes)

    def list(self) -> List[Tuple[str, Note]]:
        """Return ``(id, note)`` pairs in insertion order."""
        return list(self._notes.items())

    def get(self, note_id: str) -> Note:
        try:
            return self._notes[note_id]
        except KeyError:
            raise NoteNotFoundError(note_id) from None

    def read(self, note_id: str) -> str:
        """Return the content of a note.

        Raises:
            NoteNotFoundError: If no note has this id
        """
        return self.get(note_id).content

    def create(self, title: str, content: str) -> str:
        """Store a new note and return its id.

        Args:
            title: Note title, must be non-empty
            content: Note body, must be non-empty

        Returns:
            The textual integer id assigned to the note

        Raises:
            InvalidNoteError: If title or content is empty
        """
        if not title or not content:
            raise InvalidNoteError("Title and content are required")

        note_id = str(self._next_id)
        self._next_id += 1
        self._notes[note_id] = Note(title=title, content=content)
        return note_id
