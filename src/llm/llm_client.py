from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any, Optional

import httpx

from llm.prompts import SYSTEM_PROMPT, image_extraction_prompt, quick_add_prompt
from llm.providers.base import ImageInput, LLMProvider
from timeline_planner.config import LLM_PROVIDER
from timeline_planner.errors import ExtractionError

logger = logging.getLogger(__name__)

EMPTY_RESULT = '{"tasks": []}'

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def get_provider(name: str = LLM_PROVIDER) -> LLMProvider:
    if name == "openai":
        from llm.providers.openai_provider import OpenAIProvider
        return OpenAIProvider()
    if name == "ollama":
        from llm.providers.ollama_provider import OllamaProvider
        return OllamaProvider()
    if name == "gemini":
        from llm.providers.gemini_provider import GeminiProvider
        return GeminiProvider()
    from llm.providers.mock_provider import MockProvider
    return MockProvider()


def _extract_json(text: str) -> Any:
    """Find the JSON payload in model output that may carry fences or chatter."""
    cleaned = _FENCE_RE.sub("", text or "").strip()
    try:
        return json.loads(cleaned)
    except ValueError:
        pass

    openers = []
    for opener, closer in (("{", "}"), ("[", "]")):
        idx = cleaned.find(opener)
        if idx != -1:
            openers.append((idx, closer))
    # whichever bracket opens first decides between an object and an array
    for start, closer in sorted(openers):
        end = cleaned.rfind(closer)
        if end > start:
            try:
                return json.loads(cleaned[start:end + 1])
            except ValueError:
                continue
    return None


def _as_records(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, dict):
        if isinstance(payload.get("tasks"), list):
            payload = payload["tasks"]
        elif isinstance(payload.get("task"), dict):
            payload = [payload["task"]]
        elif payload:
            payload = [payload]
        else:
            payload = []
    if not isinstance(payload, list):
        return []
    return [r for r in payload if isinstance(r, dict)]


class LLMClient:
    """Thin wrapper around an LLM provider for the task extraction collaborators.

    Providers return free text; this class finds the JSON in it and hands back
    plain dicts. Validation into TaskCandidate happens in TaskExtractor.
    """

    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider or get_provider()

    def _generate(self, user: str, image: Optional[ImageInput] = None) -> str:
        try:
            return self.provider.generate(system=SYSTEM_PROMPT, user=user, image=image)
        except httpx.HTTPError as e:
            logger.error(f"LLM provider request failed: {e}")
            raise ExtractionError(str(e)) from e

    def complete(self, user: str, image: Optional[ImageInput] = None) -> str:
        """Raw JSON text from the model, or an empty task list when none is found."""
        payload = _extract_json(self._generate(user, image=image))
        if payload is None:
            logger.warning("LLM output contained no JSON, using empty result")
            return EMPTY_RESULT
        return json.dumps(payload)

    def parse_task(self, text: str, now: Optional[datetime] = None) -> Optional[dict[str, Any]]:
        records = _as_records(json.loads(self.complete(quick_add_prompt(text, now or datetime.now()))))
        return records[0] if records else None

    def extract_tasks_from_image(self, image: ImageInput, now: Optional[datetime] = None) -> list[dict[str, Any]]:
        raw = self.complete(image_extraction_prompt(now or datetime.now()), image=image)
        return _as_records(json.loads(raw))
