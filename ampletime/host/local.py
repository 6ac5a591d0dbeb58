"""Directory-backed note host.

Each note is a markdown file named after a slug of the note name; attached
media is written to ``media/`` beside the notes and linked by relative path.
"""

from __future__ import annotations

import mimetypes
import re
from pathlib import Path

from ..core.errors import NoteNotFoundError
from ..core.logging_config import get_logger
from .base import NoteHandle, NoteHost, decode_data_url, join_content

logger = get_logger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    slug = _SLUG_RE.sub("-", name.lower()).strip("-")
    return slug or "note"


class LocalNoteHost(NoteHost):
    """Note host storing notes as markdown files in a directory."""

    MEDIA_DIR = "media"

    def __init__(self, notes_dir: str | Path):
        self.notes_dir = Path(notes_dir)
        self.notes_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, handle: NoteHandle) -> Path:
        return self.notes_dir / f"{handle.uuid}.md"

    def _existing_path(self, handle: NoteHandle) -> Path:
        path = self._path(handle)
        if not path.exists():
            raise NoteNotFoundError(f"Note '{handle.name}' not found in {self.notes_dir}")
        return path

    async def find_note(self, uuid_or_name: str) -> NoteHandle:
        # Note UUIDs are slugs, so a slug lookup covers both forms
        stem = slugify(uuid_or_name)
        path = self.notes_dir / f"{stem}.md"
        if path.exists():
            return NoteHandle(uuid=stem, name=self._read_name(path))
        raise NoteNotFoundError(f"Note '{uuid_or_name}' not found in {self.notes_dir}")

    def _read_name(self, path: Path) -> str:
        # Title is the first "# " heading, if any
        with path.open("r", encoding="utf-8") as f:
            first = f.readline().strip()
        return first[2:].strip() if first.startswith("# ") else path.stem

    async def create_note(self, name: str) -> NoteHandle:
        stem = slugify(name)
        path = self.notes_dir / f"{stem}.md"
        path.write_text(f"# {name}\n", encoding="utf-8")
        logger.info("Created note", extra={"note": name, "path": str(path)})
        return NoteHandle(uuid=stem, name=name)

    async def get_note_content(self, handle: NoteHandle) -> str:
        return self._existing_path(handle).read_text(encoding="utf-8")

    async def insert_note_content(
        self, handle: NoteHandle, content: str, at_end: bool = True
    ) -> None:
        path = self._existing_path(handle)
        existing = path.read_text(encoding="utf-8")
        if not at_end and existing.startswith("# "):
            # Keep the title heading first
            title, _, body = existing.partition("\n")
            updated = title + "\n\n" + join_content(body.strip("\n"), content, at_end=False)
        else:
            updated = join_content(existing, content, at_end)
        path.write_text(updated.rstrip("\n") + "\n", encoding="utf-8")

    @staticmethod
    def _next_media_index(media_dir: Path, handle: NoteHandle) -> int:
        # One past the highest "<uuid>-<n>" file, so gaps never get reused
        pattern = re.compile(rf"{re.escape(handle.uuid)}-(\d+)")
        highest = 0
        for path in media_dir.glob(f"{handle.uuid}-*"):
            match = pattern.fullmatch(path.stem)
            if match:
                highest = max(highest, int(match.group(1)))
        return highest + 1

    async def attach_note_media(self, handle: NoteHandle, data_url: str) -> str:
        self._existing_path(handle)
        mime_type, payload = decode_data_url(data_url)
        extension = (mimetypes.guess_extension(mime_type) if mime_type else None) or ".png"

        media_dir = self.notes_dir / self.MEDIA_DIR
        media_dir.mkdir(parents=True, exist_ok=True)
        index = self._next_media_index(media_dir, handle)
        filename = f"{handle.uuid}-{index}{extension}"
        (media_dir / filename).write_bytes(payload)
        logger.debug(
            "Attached media",
            extra={"note": handle.name, "file": filename, "bytes": len(payload)},
        )
        return f"{self.MEDIA_DIR}/{filename}"
