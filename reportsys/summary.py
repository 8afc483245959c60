from __future__ import annotations

import os
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from loguru import logger

from .config import SummaryConfig
from .errors import SummaryUnavailable
from .fields import ACHIEVEMENTS, COMPLETED_TASKS, IDEAS_SUGGESTIONS, TOMORROW_TASKS
from .models import AISummary, DailyReportWithAuthor
from .storage import LocalDataStore

NO_REPORTS_MESSAGE = "There are no reports to analyze."

SECTION_LABELS = {
    ACHIEVEMENTS: "Achievements",
    COMPLETED_TASKS: "Completed tasks",
    IDEAS_SUGGESTIONS: "Ideas and suggestions",
    TOMORROW_TASKS: "Tomorrow's tasks",
}

system_instruction = (
    "You are an expert in analysing team work. You read the daily reports of "
    "team members and produce useful, insightful summaries."
)

summary_format = """
## 📊 Team achievements
- The main things the team accomplished

## ✅ Completed work
- Important work the team finished

## 💡 Ideas and suggestions
- Improvement ideas and proposals raised by team members

## 📋 Plans for tomorrow
- The team's main plans for the next working day

## 🎯 Insights and recommendations
- Analysis of the team's performance and suggested directions
"""


# -------------- Helper functions --------------

def _make_client(api_key: Optional[str] = None) -> genai.Client:
    """Create a genai.Client, reading GEMINI_API_KEY from the environment when no key is given."""
    if api_key is None:
        api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise SummaryUnavailable(
            "GEMINI_API_KEY not found. Please set it in environment or .env file, or pass api_key parameter."
        )
    return genai.Client(api_key=api_key)


def format_reports(reports: Iterable[DailyReportWithAuthor]) -> str:
    """Render reports as ``[author]`` blocks listing their non-empty sections."""
    blocks = []
    for report in reports:
        lines = [
            f"{label}: {getattr(report, field).strip()}"
            for field, label in SECTION_LABELS.items()
            if getattr(report, field).strip()
        ]
        blocks.append(f"[{report.author_name}]\n" + "\n".join(lines) + "\n")
    return "\n---\n\n".join(blocks)


def build_prompt(reports: Sequence[DailyReportWithAuthor], language: str = "Korean") -> str:
    return (
        "Below are the daily work reports of the team members. Analyse them and "
        f"write a comprehensive summary in {language}.\n\n"
        f"{format_reports(reports)}\n"
        "Use the following format:\n"
        f"{summary_format}\n"
        "Keep every section short and clear but concrete. Mention team members by "
        "name where appropriate so individual contributions are recognised."
    )


def generate_summary(
    reports: Sequence[DailyReportWithAuthor],
    *,
    model: str = "gemini-2.5-flash",
    api_key: Optional[str] = None,
    client: Optional[genai.Client] = None,
    temperature: float = 0.7,
    max_output_tokens: int = 1500,
    language: str = "Korean",
) -> str:
    """
    Ask Gemini for a team summary of ``reports``.

    Returns NO_REPORTS_MESSAGE without calling the API when there is nothing to
    summarise. Raises SummaryUnavailable when no API key is configured, the API
    call fails, or the response carries no text.
    """
    if not reports:
        return NO_REPORTS_MESSAGE

    if client is None:
        client = _make_client(api_key=api_key)

    prompt = build_prompt(reports, language=language)
    logger.info("Requesting summary of {} reports from {}", len(reports), model)
    try:
        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        )
    except genai_errors.APIError as exc:
        logger.error("Gemini API error {}: {}", exc.code, exc.message)
        raise SummaryUnavailable(f"Gemini API error {exc.code}: {exc.message}") from exc

    text = getattr(response, "text", None)
    if not text or not text.strip():
        raise SummaryUnavailable("Gemini returned an empty summary")
    return text.strip()


def summarize_day(
    store: LocalDataStore,
    day: date,
    config: SummaryConfig,
    *,
    api_key: Optional[str] = None,
    client: Optional[genai.Client] = None,
) -> AISummary:
    """Summarise the reports of ``day`` and store the result, replacing any earlier one."""
    reports = store.get_daily_reports(day)
    content = generate_summary(
        reports,
        model=config.model,
        api_key=api_key,
        client=client,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
        language=config.language,
    )
    summary = AISummary(
        id=f"summary_{uuid.uuid4().hex}",
        date=day,
        content=content,
        report_count=len(reports),
        created_at=datetime.now(timezone.utc),
    )
    stored = store.create_or_replace_ai_summary(summary)
    logger.success("Stored summary of {} reports for {}", len(reports), day)
    return stored


__all__ = [
    "NO_REPORTS_MESSAGE",
    "build_prompt",
    "format_reports",
    "generate_summary",
    "summarize_day",
]
