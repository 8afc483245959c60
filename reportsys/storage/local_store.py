"""Users, credentials, daily reports and AI summaries over a key-value medium."""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from pydantic import TypeAdapter, ValidationError as ModelValidationError

from ..errors import (
    BadCredential,
    DuplicateEmail,
    InvalidEmail,
    InvalidName,
    NoActiveSession,
    NoSuchUser,
    ReportNotFound,
    StorageUnavailable,
    UserNotFound,
    ValidationError,
    WeakPassword,
)
from ..models import (
    AISummary,
    DailyReport,
    DailyReportDraft,
    DailyReportWithAuthor,
    ExportData,
    ReportStats,
    User,
)
from ..passwords import hash_password, needs_rehash, verify_password
from .backend import KeyValueBackend
from .documents import (
    AI_SUMMARIES_KEY,
    PASSWORDS_KEY,
    REPORTS_KEY,
    STORAGE_KEYS,
    USERS_KEY,
    read_document,
    read_records,
    write_document,
    write_records,
)
from .session import Session

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2

UNKNOWN_AUTHOR = "Unknown"

DEMO_USER_ID = "demo_user_1"
DEMO_EMAIL = "demo@company.com"
DEMO_PASSWORD = "demo123"
DEMO_NAME = "Demo User"

_BACKUP_MODELS: dict[str, Any] = {
    "USERS": TypeAdapter(list[User]),
    "CURRENT_USER": TypeAdapter(User),
    "REPORTS": TypeAdapter(list[DailyReport]),
    "AI_SUMMARIES": TypeAdapter(list[AISummary]),
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Not an ISO calendar date: {value!r}") from exc


def _check_email(email: str) -> None:
    if not EMAIL_PATTERN.fullmatch(email):
        raise InvalidEmail(f"Invalid email address: {email!r}")


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPassword(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if len(cleaned) < MIN_NAME_LENGTH:
        raise InvalidName(f"Name must be at least {MIN_NAME_LENGTH} characters")
    return cleaned


def _first_repeat(values: Iterable[Any]) -> Any | None:
    seen = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None


def _check_backup_invariants(
    parsed: Mapping[str, Any], passwords: Mapping[str, str] | None
) -> None:
    """Reject a backup that would break the uniqueness rules the store keeps."""
    users: list[User] | None = parsed.get("USERS")
    if users is not None:
        email = _first_repeat(normalize_email(user.email) for user in users)
        if email is not None:
            raise ValidationError(f"Backup lists {email} more than once")
        user_id = _first_repeat(user.id for user in users)
        if user_id is not None:
            raise ValidationError(f"Backup lists user id {user_id} more than once")

    reports: list[DailyReport] | None = parsed.get("REPORTS")
    if reports is not None:
        pair = _first_repeat((report.user_id, report.date) for report in reports)
        if pair is not None:
            raise ValidationError(f"Backup has two reports by {pair[0]} on {pair[1]}")

    summaries: list[AISummary] | None = parsed.get("AI_SUMMARIES")
    if summaries is not None:
        day = _first_repeat(summary.date for summary in summaries)
        if day is not None:
            raise ValidationError(f"Backup has two summaries for {day}")

    if users is not None and passwords is not None:
        user_ids = {user.id for user in users}
        if user_ids != set(passwords):
            mismatched = sorted(user_ids.symmetric_difference(passwords))
            raise ValidationError(f"Users and credentials disagree for: {', '.join(mismatched)}")


def attach_author_names(
    reports: Iterable[DailyReport], users: Iterable[User]
) -> list[DailyReportWithAuthor]:
    """Pair each report with its author's current display name.

    Reports whose user no longer exists get ``UNKNOWN_AUTHOR``.
    """
    names = {user.id: user.name for user in users}
    return [
        DailyReportWithAuthor(
            **report.model_dump(),
            author_name=names.get(report.user_id, UNKNOWN_AUTHOR),
        )
        for report in reports
    ]


class LocalDataStore:
    """Repository over the five stored collections.

    Every mutation rewrites the whole affected collection. The store is meant
    for one caller at a time; concurrent writers are not coordinated.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        session: Session | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.backend = backend
        self.session = session if session is not None else Session(backend)
        self._clock = clock or _utcnow

    # Collections ----------------------------------------------------------

    def _users(self) -> list[User]:
        return read_records(self.backend, USERS_KEY, User)

    def _save_users(self, users: list[User]) -> None:
        write_records(self.backend, USERS_KEY, users)

    def _passwords(self) -> dict[str, str]:
        data = read_document(self.backend, PASSWORDS_KEY)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageUnavailable(f"Stored document {PASSWORDS_KEY} is not a mapping")
        return data

    def _save_passwords(self, passwords: dict[str, str]) -> None:
        write_document(self.backend, PASSWORDS_KEY, passwords)

    def _reports(self) -> list[DailyReport]:
        return read_records(self.backend, REPORTS_KEY, DailyReport)

    def _save_reports(self, reports: list[DailyReport]) -> None:
        write_records(self.backend, REPORTS_KEY, reports)

    def _summaries(self) -> list[AISummary]:
        return read_records(self.backend, AI_SUMMARIES_KEY, AISummary)

    def _save_summaries(self, summaries: list[AISummary]) -> None:
        write_records(self.backend, AI_SUMMARIES_KEY, summaries)

    @staticmethod
    def _find_by_email(users: Iterable[User], email: str) -> User | None:
        return next((user for user in users if normalize_email(user.email) == email), None)

    # Auth -----------------------------------------------------------------

    def register(self, email: str, password: str, name: str) -> User:
        """Create an account, store its credential and log it in."""
        users = self._users()
        normalized = normalize_email(email)
        if self._find_by_email(users, normalized) is not None:
            raise DuplicateEmail(f"Email already registered: {normalized}")
        _check_email(normalized)
        _check_password(password)
        cleaned_name = _clean_name(name)

        user = User(
            id=_new_id("user"),
            email=normalized,
            name=cleaned_name,
            created_at=self._clock(),
        )
        users.append(user)
        self._save_users(users)

        passwords = self._passwords()
        passwords[user.id] = hash_password(password)
        self._save_passwords(passwords)

        self.session.set(user)
        return user

    def login(self, email: str, password: str) -> User:
        user = self._find_by_email(self._users(), normalize_email(email))
        if user is None:
            raise NoSuchUser(f"No account for {normalize_email(email)}")

        passwords = self._passwords()
        stored = passwords.get(user.id)
        if stored is None or not verify_password(password, stored):
            raise BadCredential("Password does not match")

        if needs_rehash(stored):
            passwords[user.id] = hash_password(password)
            self._save_passwords(passwords)

        self.session.set(user)
        return user

    def current_user(self) -> User | None:
        return self.session.get()

    def logout(self) -> None:
        self.session.clear()

    def update_profile(
        self,
        user_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
    ) -> User:
        """Change the supplied fields of a user and keep the session copy in sync."""
        users = self._users()
        index = next((i for i, user in enumerate(users) if user.id == user_id), None)
        if index is None:
            raise UserNotFound(f"Unknown user id: {user_id}")

        current = users[index]
        updates: dict[str, str] = {}
        if email is not None:
            normalized = normalize_email(email)
            if normalized != normalize_email(current.email):
                clash = any(
                    user.id != user_id and normalize_email(user.email) == normalized
                    for user in users
                )
                if clash:
                    raise DuplicateEmail(f"Email already in use: {normalized}")
            _check_email(normalized)
            updates["email"] = normalized
        if name is not None:
            updates["name"] = _clean_name(name)

        updated = current.model_copy(update=updates)
        users[index] = updated
        self._save_users(users)

        session_user = self.session.get()
        if session_user is not None and session_user.id == user_id:
            self.session.set(updated)
        return updated

    def list_all_users(self) -> list[User]:
        return self._users()

    # Reports --------------------------------------------------------------

    def upsert_daily_report(self, draft: DailyReportDraft) -> DailyReport:
        """Store the report for (user_id, date), keeping id and created_at of an earlier one."""
        fields = draft.model_dump(include=set(DailyReportDraft.model_fields))
        reports = self._reports()
        index = next(
            (
                i
                for i, report in enumerate(reports)
                if report.user_id == draft.user_id and report.date == draft.date
            ),
            None,
        )

        if index is None:
            stored = DailyReport(**fields, id=_new_id("report"), created_at=self._clock())
            reports.append(stored)
        else:
            existing = reports[index]
            stored = DailyReport(**fields, id=existing.id, created_at=existing.created_at)
            reports[index] = stored

        self._save_reports(reports)
        return stored

    def get_daily_reports(self, day: date | str) -> list[DailyReportWithAuthor]:
        day = _as_date(day)
        reports = [report for report in self._reports() if report.date == day]
        return attach_author_names(reports, self._users())

    def delete_daily_report(self, report_id: str) -> None:
        """Delete one of the session user's reports."""
        user = self.session.get()
        if user is None:
            raise NoActiveSession("Log in before deleting a report")

        reports = self._reports()
        remaining = [
            report
            for report in reports
            if not (report.id == report_id and report.user_id == user.id)
        ]
        if len(remaining) == len(reports):
            raise ReportNotFound(f"No report {report_id} owned by {user.email}")
        self._save_reports(remaining)

    def user_report_stats(self, user_id: str) -> ReportStats:
        dates = [report.date for report in self._reports() if report.user_id == user_id]
        return ReportStats(total_reports=len(dates), last_report_date=max(dates, default=None))

    # AI summaries ---------------------------------------------------------

    def create_or_replace_ai_summary(self, summary: AISummary) -> AISummary:
        summaries = [item for item in self._summaries() if item.date != summary.date]
        summaries.append(summary)
        self._save_summaries(summaries)
        return summary

    def get_ai_summary(self, day: date | str) -> AISummary | None:
        day = _as_date(day)
        return next((item for item in self._summaries() if item.date == day), None)

    # Maintenance ----------------------------------------------------------

    def seed_demo_user(self) -> User | None:
        """Create the demo account when the store has no users yet."""
        if self._users():
            return None
        demo = User(id=DEMO_USER_ID, email=DEMO_EMAIL, name=DEMO_NAME, created_at=self._clock())
        self._save_users([demo])
        passwords = self._passwords()
        passwords[demo.id] = hash_password(DEMO_PASSWORD)
        self._save_passwords(passwords)
        return demo

    def export_data(self) -> ExportData:
        present: dict[str, Any] = {}
        for name, key in STORAGE_KEYS.items():
            value = read_document(self.backend, key)
            if value is not None:
                present[name] = value
        return ExportData.model_validate(present)

    def import_data(self, data: ExportData | Mapping[str, Any]) -> None:
        """Overwrite every collection present in ``data``; others are left alone."""
        if not isinstance(data, ExportData):
            try:
                data = ExportData.model_validate(data)
            except ModelValidationError as exc:
                raise ValidationError(f"Malformed backup: {exc}") from exc

        document = data.to_document()
        parsed: dict[str, Any] = {}
        for name, value in document.items():
            adapter = _BACKUP_MODELS.get(name)
            if adapter is None:
                continue
            try:
                parsed[name] = adapter.validate_python(value)
            except ModelValidationError as exc:
                raise ValidationError(f"Malformed {name} in backup: {exc}") from exc
        _check_backup_invariants(parsed, document.get("USER_PASSWORDS"))

        for name, value in document.items():
            write_document(self.backend, STORAGE_KEYS[name], value)

    def clear_all_data(self) -> None:
        for key in STORAGE_KEYS.values():
            self.backend.remove(key)


__all__ = [
    "DEMO_EMAIL",
    "DEMO_NAME",
    "DEMO_PASSWORD",
    "LocalDataStore",
    "UNKNOWN_AUTHOR",
    "attach_author_names",
    "normalize_email",
]
