from __future__ import annotations

from datetime import datetime

CATEGORIES = ("Work", "Personal", "Health", "Urgent", "Leisure")

SYSTEM_PROMPT = (
    "You turn schedules and short notes into calendar tasks. "
    "Reply with JSON only, no prose and no code fences."
)


def _now_line(now: datetime) -> str:
    return f"Current date/time: {now.strftime('%A, %B %d, %Y %H:%M')}"


def quick_add_prompt(text: str, now: datetime) -> str:
    categories = " | ".join(f'"{c}"' for c in CATEGORIES)
    return f"""{_now_line(now)}
Parse this task into a JSON object: "{text}"
Use this structure:
{{
  "title": "Task title",
  "start": "HH:MM" (24h),
  "end": "HH:MM" (24h),
  "category": {categories},
  "priority": 1 | 2 | 3,
  "date": "YYYY-MM-DD" (relative to the current date, default today),
  "recurring": {{"type": "none" | "daily" | "weekdays" | "custom", "days": [0-6] (custom only, 0 is Sunday)}}
}}
"every day" or "daily" means type "daily".
"weekdays" or "mon-fri" means type "weekdays".
Named days such as "every Monday" mean type "custom" with days [1].
Without a duration assume one hour."""


def image_extraction_prompt(now: datetime) -> str:
    categories = " | ".join(f'"{c}"' for c in CATEGORIES)
    return f"""{_now_line(now)}
Analyze this image of a schedule or calendar.
Return every visible entry as a JSON array of objects:
{{
  "title": "Task title",
  "start": "HH:MM" (24h),
  "end": "HH:MM" (24h),
  "date": "YYYY-MM-DD" (the actual date of each entry as shown in the image),
  "category": {categories},
  "priority": 2
}}
Skip entries for "Out of Office", "OOO", "PTO" or "DTO"."""
