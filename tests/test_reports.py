"""Daily report upserts, the author join and per-user statistics."""

from datetime import date, datetime, timezone

import pytest

from reportsys.errors import MissingSection, NoActiveSession, ReportNotFound, ValidationError
from reportsys.models import DailyReport, DailyReportDraft, User, require_sections
from reportsys.storage.documents import USERS_KEY, write_document
from reportsys.storage.local_store import UNKNOWN_AUTHOR, attach_author_names


def _draft(user_id, day, **sections):
    return DailyReportDraft(user_id=user_id, date=day, **sections)


class TestUpsertDailyReport:
    def test_first_submission_gets_identity(self, store):
        user = store.register("a@b.com", "secret1", "Jo")

        report = store.upsert_daily_report(_draft(user.id, date(2024, 3, 4), achievements="Shipped"))

        assert report.id.startswith("report_")
        assert report.created_at is not None
        assert report.achievements == "Shipped"
        assert report.ideas_suggestions == ""

    def test_second_submission_replaces_content(self, store):
        user = store.register("a@b.com", "secret1", "Jo")
        day = date(2024, 3, 4)

        first = store.upsert_daily_report(_draft(user.id, day, achievements="v1", tomorrow_tasks="plan"))
        second = store.upsert_daily_report(_draft(user.id, day, achievements="v2"))

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.achievements == "v2"
        assert second.tomorrow_tasks == ""

        stored = store.get_daily_reports(day)
        assert len(stored) == 1
        assert stored[0].id == first.id
        assert stored[0].achievements == "v2"

    def test_distinct_dates_and_users_are_separate(self, store):
        jo = store.register("jo@b.com", "secret1", "Jo")
        max_ = store.register("max@b.com", "secret1", "Max")

        a = store.upsert_daily_report(_draft(jo.id, date(2024, 3, 4)))
        b = store.upsert_daily_report(_draft(jo.id, date(2024, 3, 5)))
        c = store.upsert_daily_report(_draft(max_.id, date(2024, 3, 4)))

        assert len({a.id, b.id, c.id}) == 3

    def test_passing_a_stored_report_keeps_original_identity(self, store):
        user = store.register("a@b.com", "secret1", "Jo")
        first = store.upsert_daily_report(_draft(user.id, date(2024, 3, 4), achievements="v1"))

        again = store.upsert_daily_report(first.model_copy(update={"achievements": "v2", "id": "forged"}))

        assert again.id == first.id
        assert again.achievements == "v2"


class TestGetDailyReports:
    def test_only_exact_date(self, store):
        user = store.register("a@b.com", "secret1", "Jo")
        for day in (date(2024, 3, 3), date(2024, 3, 4), date(2024, 3, 5)):
            store.upsert_daily_report(_draft(user.id, day, achievements=day.isoformat()))

        found = store.get_daily_reports(date(2024, 3, 4))

        assert [report.achievements for report in found] == ["2024-03-04"]

    def test_accepts_iso_string(self, store):
        user = store.register("a@b.com", "secret1", "Jo")
        store.upsert_daily_report(_draft(user.id, date(2024, 3, 4)))

        assert len(store.get_daily_reports("2024-03-04")) == 1

    def test_rejects_malformed_date(self, store):
        with pytest.raises(ValidationError):
            store.get_daily_reports("04/03/2024")

    def test_uses_current_author_name(self, store):
        user = store.register("a@b.com", "secret1", "Jo")
        store.upsert_daily_report(_draft(user.id, date(2024, 3, 4)))
        store.update_profile(user.id, name="Joanna")

        (report,) = store.get_daily_reports(date(2024, 3, 4))

        assert report.author_name == "Joanna"

    def test_orphan_report_gets_unknown_author(self, store, backend):
        user = store.register("a@b.com", "secret1", "Jo")
        store.upsert_daily_report(_draft(user.id, date(2024, 3, 4)))
        write_document(backend, USERS_KEY, [])

        (report,) = store.get_daily_reports(date(2024, 3, 4))

        assert report.author_name == UNKNOWN_AUTHOR

    def test_empty_day(self, store):
        assert store.get_daily_reports(date(2024, 3, 4)) == []


def test_attach_author_names_is_pure():
    created = datetime(2024, 3, 4, tzinfo=timezone.utc)
    users = [User(id="u1", email="a@b.com", name="Jo", created_at=created)]
    reports = [
        DailyReport(id="r1", user_id="u1", date=date(2024, 3, 4), created_at=created),
        DailyReport(id="r2", user_id="gone", date=date(2024, 3, 4), created_at=created),
    ]

    joined = attach_author_names(reports, users)

    assert [item.author_name for item in joined] == ["Jo", UNKNOWN_AUTHOR]
    assert [item.id for item in joined] == ["r1", "r2"]
    assert not hasattr(reports[0], "author_name")


class TestDeleteDailyReport:
    def test_delete_own_report(self, store):
        user = store.register("a@b.com", "secret1", "Jo")
        report = store.upsert_daily_report(_draft(user.id, date(2024, 3, 4)))

        store.delete_daily_report(report.id)

        assert store.get_daily_reports(date(2024, 3, 4)) == []

    def test_cannot_delete_someone_elses_report(self, store):
        other = store.register("other@b.com", "secret1", "Other")
        report = store.upsert_daily_report(_draft(other.id, date(2024, 3, 4)))
        store.register("me@b.com", "secret1", "Me")

        with pytest.raises(ReportNotFound):
            store.delete_daily_report(report.id)
        assert len(store.get_daily_reports(date(2024, 3, 4))) == 1

    def test_requires_session(self, store):
        with pytest.raises(NoActiveSession):
            store.delete_daily_report("report_x")


class TestUserReportStats:
    def test_no_reports(self, store):
        stats = store.user_report_stats("user_missing")

        assert stats.total_reports == 0
        assert stats.last_report_date is None

    def test_counts_and_latest_date(self, store):
        jo = store.register("jo@b.com", "secret1", "Jo")
        max_ = store.register("max@b.com", "secret1", "Max")
        for day in (date(2024, 3, 5), date(2024, 2, 28), date(2024, 3, 1)):
            store.upsert_daily_report(_draft(jo.id, day))
        store.upsert_daily_report(_draft(max_.id, date(2024, 4, 1)))

        stats = store.user_report_stats(jo.id)

        assert stats.total_reports == 3
        assert stats.last_report_date == date(2024, 3, 5)


class TestRequireSections:
    def test_ideas_are_optional(self):
        require_sections(
            _draft("u1", date(2024, 3, 4), achievements="a", completed_tasks="b", tomorrow_tasks="c")
        )

    def test_blank_required_section(self):
        draft = _draft("u1", date(2024, 3, 4), achievements="a", completed_tasks="   ", tomorrow_tasks="c")

        with pytest.raises(MissingSection, match="completed_tasks"):
            require_sections(draft)
