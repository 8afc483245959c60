"""Key-value backed persistence for users, reports and summaries."""

from .backend import DirectoryBackend, KeyValueBackend, MemoryBackend, create_backend
from .local_store import LocalDataStore, attach_author_names
from .session import Session

__all__ = [
    "DirectoryBackend",
    "KeyValueBackend",
    "LocalDataStore",
    "MemoryBackend",
    "Session",
    "attach_author_names",
    "create_backend",
]
