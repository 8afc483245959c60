"""Field names used in the persisted JSON documents."""

ID = "id"
EMAIL = "email"
NAME = "name"
CREATED_AT = "created_at"

USER_ID = "user_id"
DATE = "date"
ACHIEVEMENTS = "achievements"
COMPLETED_TASKS = "completed_tasks"
IDEAS_SUGGESTIONS = "ideas_suggestions"
TOMORROW_TASKS = "tomorrow_tasks"
AUTHOR_NAME = "author_name"

CONTENT = "content"
REPORT_COUNT = "report_count"

REPORT_SECTIONS = (ACHIEVEMENTS, COMPLETED_TASKS, IDEAS_SUGGESTIONS, TOMORROW_TASKS)
