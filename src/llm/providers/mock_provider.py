from __future__ import annotations
import json
from typing import Optional

from llm.providers.base import ImageInput, LLMProvider

class MockProvider(LLMProvider):
    def generate(self, *, system: str, user: str, image: Optional[ImageInput] = None) -> str:
        """
        Returns dummy JSON responses based on the prompt content.
        """
        if image is not None or "Analyze this image" in user:
            return json.dumps([
                {
                    "title": "Team standup",
                    "start": "09:30",
                    "end": "09:45",
                    "date": None,
                    "category": "Work",
                    "priority": 2,
                },
                {
                    "title": "Lunch",
                    "start": "13:00",
                    "end": "14:00",
                    "date": None,
                    "category": "Personal",
                    "priority": 2,
                },
            ])

        if "Parse this task" in user:
            # crude title guess from the quoted note
            title = user.split('"')[1] if '"' in user else "New task"
            lower = title.lower()
            recurring = {"type": "none"}
            if "every day" in lower or "daily" in lower:
                recurring = {"type": "daily"}
            elif "weekdays" in lower:
                recurring = {"type": "weekdays"}
            return json.dumps({
                "title": title[:60] or "New task",
                "start": "09:00",
                "end": "10:00",
                "category": "Personal",
                "priority": 2,
                "date": None,
                "recurring": recurring,
            })

        # Default fallback
        return "{}"
