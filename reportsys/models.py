"""Records persisted by the local store."""

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from .errors import MissingSection
from .fields import ACHIEVEMENTS, COMPLETED_TASKS, TOMORROW_TASKS


class Record(BaseModel):
    """Immutable JSON document; unknown keys written by other clients are dropped."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class User(Record):
    id: str
    email: str
    name: str
    created_at: dt.datetime


class DailyReportDraft(Record):
    """A report as submitted, before the store assigns its identity."""

    user_id: str
    date: dt.date
    achievements: str = ""
    completed_tasks: str = ""
    ideas_suggestions: str = ""
    tomorrow_tasks: str = ""


class DailyReport(DailyReportDraft):
    id: str
    created_at: dt.datetime


class DailyReportWithAuthor(DailyReport):
    author_name: str


class AISummary(Record):
    id: str
    date: dt.date
    content: str
    report_count: int = 0
    created_at: dt.datetime


class ReportStats(Record):
    total_reports: int
    last_report_date: dt.date | None = None


class ExportData(BaseModel):
    """Backup of every collection, keyed the same way as the original export format."""

    model_config = ConfigDict(populate_by_name=True)

    users: list[dict[str, Any]] | None = Field(default=None, alias="USERS")
    current_user: dict[str, Any] | None = Field(default=None, alias="CURRENT_USER")
    reports: list[dict[str, Any]] | None = Field(default=None, alias="REPORTS")
    ai_summaries: list[dict[str, Any]] | None = Field(default=None, alias="AI_SUMMARIES")
    user_passwords: dict[str, str] | None = Field(default=None, alias="USER_PASSWORDS")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Sections the report form insists on; ideas are optional.
REQUIRED_SECTIONS = (ACHIEVEMENTS, COMPLETED_TASKS, TOMORROW_TASKS)


def require_sections(draft: DailyReportDraft, required: Iterable[str] = REQUIRED_SECTIONS) -> None:
    """Raise MissingSection if any of ``required`` is blank in ``draft``."""
    missing = [name for name in required if not getattr(draft, name).strip()]
    if missing:
        raise MissingSection(f"Required report sections are empty: {', '.join(missing)}")


__all__ = [
    "AISummary",
    "DailyReport",
    "DailyReportDraft",
    "DailyReportWithAuthor",
    "ExportData",
    "REQUIRED_SECTIONS",
    "Record",
    "ReportStats",
    "User",
    "require_sections",
]
