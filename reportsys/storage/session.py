"""The current-user slot of one client context."""

from __future__ import annotations

from ..models import User
from .backend import KeyValueBackend
from .documents import CURRENT_USER_KEY, parse_record, read_document, write_document


class Session:
    """Holds at most one logged-in user.

    The host creates the session at startup and hands it to the store; the
    store sets it on login/registration and the host clears it on logout.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend

    def get(self) -> User | None:
        data = read_document(self.backend, CURRENT_USER_KEY)
        if data is None:
            return None
        return parse_record(User, CURRENT_USER_KEY, data)

    def set(self, user: User) -> None:
        write_document(self.backend, CURRENT_USER_KEY, user.to_document())

    def clear(self) -> None:
        self.backend.remove(CURRENT_USER_KEY)


__all__ = ["Session"]
