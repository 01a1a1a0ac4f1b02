from __future__ import annotations
import os
from typing import Optional

import httpx
from .base import ImageInput, LLMProvider


class GeminiProvider(LLMProvider):
    def __init__(self):
        self.api_key = os.getenv("GEMINI_API_KEY", "").strip()
        self.model = os.getenv("GEMINI_MODEL", "gemini-2.0-flash").strip()
        self.base_url = os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ).strip()

        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is missing")

    def generate(self, *, system: str, user: str, image: Optional[ImageInput] = None) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        parts = [{"text": user}]
        if image is not None:
            parts.append({"inline_data": {"mime_type": image.mime_type, "data": image.data_b64}})
        payload = {
            "system_instruction": {"parts": [{"text": system}]},
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": 0.2},
        }

        with httpx.Client(timeout=60.0) as client:
            r = client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        return "".join(p.get("text", "") for p in data["candidates"][0]["content"]["parts"])
