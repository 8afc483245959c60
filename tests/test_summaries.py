"""AI summary storage and the Gemini summarizer."""

from datetime import date, datetime, timezone

import pytest

from reportsys.config import SummaryConfig
from reportsys.errors import SummaryUnavailable
from reportsys.models import AISummary, DailyReportDraft
from reportsys.summary import (
    NO_REPORTS_MESSAGE,
    build_prompt,
    format_reports,
    generate_summary,
    summarize_day,
)

from .conftest import FakeGenaiClient


def _summary(day, content, count=1, summary_id="summary_1"):
    return AISummary(
        id=summary_id,
        date=day,
        content=content,
        report_count=count,
        created_at=datetime(2024, 3, 4, 18, 0, tzinfo=timezone.utc),
    )


class TestSummaryStore:
    def test_missing_summary(self, store):
        assert store.get_ai_summary(date(2024, 3, 4)) is None

    def test_latest_upsert_wins(self, store):
        day = date(2024, 3, 4)
        store.create_or_replace_ai_summary(_summary(day, "first", summary_id="summary_1"))
        store.create_or_replace_ai_summary(_summary(day, "second", count=3, summary_id="summary_2"))
        store.create_or_replace_ai_summary(_summary(date(2024, 3, 5), "other day", summary_id="summary_3"))

        stored = store.get_ai_summary("2024-03-04")

        assert stored.content == "second"
        assert stored.report_count == 3
        assert len(store.export_data().ai_summaries) == 2


@pytest.fixture
def populated(store):
    jo = store.register("jo@b.com", "secret1", "Jo")
    store.upsert_daily_report(
        DailyReportDraft(
            user_id=jo.id,
            date=date(2024, 3, 4),
            achievements="Closed the Q1 deal",
            completed_tasks="Contract review",
            tomorrow_tasks="Kick-off meeting",
        )
    )
    max_ = store.register("max@b.com", "secret1", "Max")
    store.upsert_daily_report(
        DailyReportDraft(
            user_id=max_.id,
            date=date(2024, 3, 4),
            ideas_suggestions="Automate the weekly export",
        )
    )
    return store


class TestPrompt:
    def test_format_reports_skips_empty_sections(self, populated):
        text = format_reports(populated.get_daily_reports(date(2024, 3, 4)))

        assert "[Jo]\nAchievements: Closed the Q1 deal\nCompleted tasks: Contract review\n" in text
        assert "[Max]\nIdeas and suggestions: Automate the weekly export\n" in text
        assert "\n---\n\n" in text
        assert "Tomorrow's tasks: Kick-off meeting" in text
        assert text.count("Achievements:") == 1

    def test_build_prompt_names_language_and_sections(self, populated):
        prompt = build_prompt(populated.get_daily_reports(date(2024, 3, 4)), language="English")

        assert "in English" in prompt
        assert "## ✅ Completed work" in prompt
        assert "[Max]" in prompt


class TestGenerateSummary:
    def test_no_reports_skips_api(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        assert generate_summary([]) == NO_REPORTS_MESSAGE

    def test_missing_api_key(self, populated, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        with pytest.raises(SummaryUnavailable):
            generate_summary(populated.get_daily_reports(date(2024, 3, 4)))

    def test_passes_config_to_client(self, populated, fake_client):
        text = generate_summary(
            populated.get_daily_reports(date(2024, 3, 4)),
            model="gemini-test",
            client=fake_client,
            temperature=0.2,
            max_output_tokens=256,
        )

        assert text == "## 📊 Team achievements\n- Shipped the release"
        (call,) = fake_client.models.calls
        assert call["model"] == "gemini-test"
        assert "[Jo]" in call["contents"]
        assert call["config"].temperature == 0.2
        assert call["config"].max_output_tokens == 256

    def test_empty_response(self, populated):
        with pytest.raises(SummaryUnavailable):
            generate_summary(
                populated.get_daily_reports(date(2024, 3, 4)),
                client=FakeGenaiClient(text="   "),
            )


class TestSummarizeDay:
    def test_stores_summary_with_report_count(self, populated, fake_client):
        stored = summarize_day(populated, date(2024, 3, 4), SummaryConfig(), client=fake_client)

        assert stored.report_count == 2
        assert stored.date == date(2024, 3, 4)
        assert populated.get_ai_summary(date(2024, 3, 4)) == stored

    def test_rerun_replaces_previous_summary(self, populated):
        day = date(2024, 3, 4)
        summarize_day(populated, day, SummaryConfig(), client=FakeGenaiClient(text="old"))
        summarize_day(populated, day, SummaryConfig(), client=FakeGenaiClient(text="new"))

        assert populated.get_ai_summary(day).content == "new"
        assert len(populated.export_data().ai_summaries) == 1

    def test_empty_day_stores_placeholder(self, store, fake_client):
        stored = summarize_day(store, date(2024, 3, 4), SummaryConfig(), client=fake_client)

        assert stored.content == NO_REPORTS_MESSAGE
        assert stored.report_count == 0
        assert fake_client.models.calls == []
