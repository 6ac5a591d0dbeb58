"""Note host interface consumed by report generation.

The host application owns note storage. Reports only ever look notes up,
read and insert content, and attach media; everything else is the host's
business.
"""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..core.errors import NoteNotFoundError


@dataclass(frozen=True)
class NoteHandle:
    """Reference to a note owned by the host."""

    uuid: str
    name: str


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a ``data:`` URL into (mime type, payload bytes).

    An empty string decodes to ``("", b"")`` so failed charts still attach.

    Raises:
        ValueError: If the value is not a data URL
    """
    if not data_url:
        return "", b""
    if not data_url.startswith("data:") or "," not in data_url:
        raise ValueError("Not a data URL")
    header, payload = data_url[5:].split(",", 1)
    parts = header.split(";")
    mime_type = parts[0] or "text/plain"
    if "base64" in parts[1:]:
        try:
            return mime_type, base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload in data URL: {e}") from e
    return mime_type, payload.encode("utf-8")


class NoteHost(ABC):
    """Abstract base class for note-taking hosts.

    Implementations must be safe to call sequentially from a single task;
    report generation never issues overlapping calls.
    """

    @abstractmethod
    async def find_note(self, uuid_or_name: str) -> NoteHandle:
        """Look a note up by UUID, falling back to its name.

        Raises:
            NoteNotFoundError: If no note matches
        """

    @abstractmethod
    async def create_note(self, name: str) -> NoteHandle:
        """Create an empty note and return its handle."""

    @abstractmethod
    async def get_note_content(self, handle: NoteHandle) -> str:
        """Return the markdown content of a note."""

    @abstractmethod
    async def insert_note_content(
        self, handle: NoteHandle, content: str, at_end: bool = True
    ) -> None:
        """Insert markdown into a note, at the end or the beginning."""

    @abstractmethod
    async def attach_note_media(self, handle: NoteHandle, data_url: str) -> str:
        """Attach a data URL to a note and return the URL the media is served from."""

    async def find_or_create_note(self, name: str) -> NoteHandle:
        try:
            return await self.find_note(name)
        except NoteNotFoundError:
            return await self.create_note(name)


def join_content(existing: str, content: str, at_end: bool) -> str:
    """Join inserted content to existing note text with a blank line between blocks."""
    if not existing:
        return content
    if not content:
        return existing
    if at_end:
        return existing.rstrip("\n") + "\n\n" + content
    return content.rstrip("\n") + "\n\n" + existing
