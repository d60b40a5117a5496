from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional
from ..models import Note

class NoteStore:
    """In-process note storage scoped by owner."""

    def __init__(self) -> None:
        self._notes: Dict[str, Note] = {}

    def create(self, *, user: str, title: str, content: str, tags: List[str], summary: List[str]) -> Note:
        now = datetime.now(timezone.utc)
        note = Note(
            id=uuid.uuid4().hex,
            user=user,
            title=title,
            content=content,
            tags=list(tags),
            summary=summary,
            created_at=now,
            updated_at=now,
        )
        self._notes[note.id] = note
        return note

    def get(self, note_id: str, *, user: str) -> Optional[Note]:
        note = self._notes.get(note_id)
        if note is None or note.user != user:
            return None
        return note

    def update(
        self,
        note_id: str,
        *,
        user: str,
        title: str | None = None,
        content: str | None = None,
        tags: List[str] | None = None,
        summary: List[str] | None = None,
    ) -> Optional[Note]:
        note = self.get(note_id, user=user)
        if note is None:
            return None
        changes = {"updated_at": datetime.now(timezone.utc)}
        if title is not None:
            changes["title"] = title
        if content is not None:
            changes["content"] = content
        if tags is not None:
            changes["tags"] = list(tags)
        if summary is not None:
            changes["summary"] = summary
        updated = note.model_copy(update=changes)
        self._notes[note_id] = updated
        return updated

    def delete(self, note_id: str, *, user: str) -> Optional[Note]:
        if self.get(note_id, user=user) is None:
            return None
        return self._notes.pop(note_id)

    def list_for_user(self, user: str) -> List[Note]:
        notes = [n for n in self._notes.values() if n.user == user]
        return sorted(notes, key=lambda n: n.created_at)

    def search(self, user: str, *, q: str | None = None, tag: str | None = None) -> List[Note]:
        """
        Title substring match (case-insensitive) and/or exact tag match.
        Returns nothing when neither filter is usable.
        """
        q = (q or "").strip()
        if not q and not tag:
            return []
        needle = q.lower()
        out = []
        for n in self.list_for_user(user):
            if needle and needle not in n.title.lower():
                continue
            if tag and tag not in n.tags:
                continue
            out.append(n)
        return out

store = NoteStore()
