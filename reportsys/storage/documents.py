"""Stable keys and JSON (de)serialisation of the stored collections."""

from __future__ import annotations

import json
from typing import Any, Iterable, TypeVar

from pydantic import TypeAdapter, ValidationError as ModelValidationError

from ..errors import StorageUnavailable
from ..models import Record
from .backend import KeyValueBackend

USERS_KEY = "daily_report_users"
CURRENT_USER_KEY = "daily_report_current_user"
REPORTS_KEY = "daily_report_reports"
AI_SUMMARIES_KEY = "daily_report_ai_summaries"
PASSWORDS_KEY = "daily_report_passwords"

# Export name -> storage key
STORAGE_KEYS: dict[str, str] = {
    "USERS": USERS_KEY,
    "CURRENT_USER": CURRENT_USER_KEY,
    "REPORTS": REPORTS_KEY,
    "AI_SUMMARIES": AI_SUMMARIES_KEY,
    "USER_PASSWORDS": PASSWORDS_KEY,
}

R = TypeVar("R", bound=Record)


def read_document(backend: KeyValueBackend, key: str) -> Any | None:
    raw = backend.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageUnavailable(f"Stored document {key} is corrupted; fix before writing") from exc


def write_document(backend: KeyValueBackend, key: str, value: Any) -> None:
    backend.set(key, json.dumps(value, ensure_ascii=False))


def parse_record(model: type[R], key: str, data: Any) -> R:
    try:
        return model.model_validate(data)
    except ModelValidationError as exc:
        raise StorageUnavailable(f"Stored document {key} does not match {model.__name__}") from exc


def read_records(backend: KeyValueBackend, key: str, model: type[R]) -> list[R]:
    """Load a whole collection; a missing key is an empty collection."""
    data = read_document(backend, key)
    if data is None:
        return []
    try:
        return TypeAdapter(list[model]).validate_python(data)
    except ModelValidationError as exc:
        raise StorageUnavailable(f"Stored collection {key} does not match {model.__name__}") from exc


def write_records(backend: KeyValueBackend, key: str, records: Iterable[Record]) -> None:
    """Persist the full collection snapshot."""
    write_document(backend, key, [record.to_document() for record in records])


__all__ = [
    "AI_SUMMARIES_KEY",
    "CURRENT_USER_KEY",
    "PASSWORDS_KEY",
    "REPORTS_KEY",
    "STORAGE_KEYS",
    "USERS_KEY",
    "parse_record",
    "read_document",
    "read_records",
    "write_document",
    "write_records",
]
