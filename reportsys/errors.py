"""Error taxonomy raised by the store and the summarizer."""

from __future__ import annotations


class ReportsysError(Exception):
    """Base class for every domain error."""


class ValidationError(ReportsysError):
    """Malformed input rejected before anything is written."""


class InvalidEmail(ValidationError):
    pass


class WeakPassword(ValidationError):
    pass


class InvalidName(ValidationError):
    pass


class MissingSection(ValidationError):
    """A report section marked required by the caller is empty."""


class ConflictError(ReportsysError):
    pass


class DuplicateEmail(ConflictError):
    pass


class NotFoundError(ReportsysError):
    pass


class UserNotFound(NotFoundError):
    pass


class ReportNotFound(NotFoundError):
    pass


class NoActiveSession(NotFoundError):
    """The operation needs a logged-in user and the session slot is empty."""


class AuthenticationError(ReportsysError):
    pass


class NoSuchUser(AuthenticationError):
    pass


class BadCredential(AuthenticationError):
    pass


class StorageUnavailable(ReportsysError):
    """The key-value medium failed or holds a document that cannot be decoded."""


class SummaryUnavailable(ReportsysError):
    """The summarization API is not configured or returned nothing usable."""


__all__ = [
    "AuthenticationError",
    "BadCredential",
    "ConflictError",
    "DuplicateEmail",
    "InvalidEmail",
    "InvalidName",
    "MissingSection",
    "NoActiveSession",
    "NoSuchUser",
    "NotFoundError",
    "ReportNotFound",
    "ReportsysError",
    "StorageUnavailable",
    "SummaryUnavailable",
    "UserNotFound",
    "ValidationError",
    "WeakPassword",
]
