from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from ..core.errors import NoteNotFoundError
from .base import NoteHandle, NoteHost, decode_data_url, join_content


@dataclass
class StoredNote:
    name: str
    content: str = ""
    media: list[tuple[str, bytes]] = field(default_factory=list)


class InMemoryHost(NoteHost):
    """Note host that keeps everything in process memory."""

    URL_SCHEME = "memory"

    def __init__(self) -> None:
        self.notes: dict[str, StoredNote] = {}

    def _get(self, handle: NoteHandle) -> StoredNote:
        note = self.notes.get(handle.uuid)
        if note is None:
            raise NoteNotFoundError(f"Note '{handle.name}' ({handle.uuid}) not found")
        return note

    async def find_note(self, uuid_or_name: str) -> NoteHandle:
        if uuid_or_name in self.notes:
            return NoteHandle(uuid=uuid_or_name, name=self.notes[uuid_or_name].name)
        for note_uuid, note in self.notes.items():
            if note.name == uuid_or_name:
                return NoteHandle(uuid=note_uuid, name=note.name)
        raise NoteNotFoundError(f"Note '{uuid_or_name}' not found")

    async def create_note(self, name: str) -> NoteHandle:
        note_uuid = str(uuid.uuid4())
        self.notes[note_uuid] = StoredNote(name=name)
        return NoteHandle(uuid=note_uuid, name=name)

    async def get_note_content(self, handle: NoteHandle) -> str:
        return self._get(handle).content

    async def insert_note_content(
        self, handle: NoteHandle, content: str, at_end: bool = True
    ) -> None:
        note = self._get(handle)
        note.content = join_content(note.content, content, at_end)

    async def attach_note_media(self, handle: NoteHandle, data_url: str) -> str:
        note = self._get(handle)
        note.media.append(decode_data_url(data_url))
        return f"{self.URL_SCHEME}://{handle.uuid}/media/{len(note.media)}"
