"""Note host implementations."""

from .base import NoteHandle, NoteHost, decode_data_url
from .local import LocalNoteHost
from .memory import InMemoryHost

__all__ = ["InMemoryHost", "LocalNoteHost", "NoteHandle", "NoteHost", "decode_data_url"]
