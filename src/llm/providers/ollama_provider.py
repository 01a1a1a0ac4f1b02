from __future__ import annotations
import os
from typing import Optional

import httpx
from .base import ImageInput, LLMProvider

class OllamaProvider(LLMProvider):
    def __init__(self):
        self.model = os.getenv("OLLAMA_MODEL", "llama3.2-vision").strip()
        self.base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").strip()

    def generate(self, *, system: str, user: str, image: Optional[ImageInput] = None) -> str:
        url = f"{self.base_url}/api/chat"
        user_message = {"role": "user", "content": user}
        if image is not None:
            user_message["images"] = [image.data_b64]
        payload = {
            "model": self.model,
            "stream": False,
            "messages": [
                {"role": "system", "content": system},
                user_message,
            ],
            "options": {"temperature": 0.2},
        }

        with httpx.Client(timeout=60.0) as client:
            r = client.post(url, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["message"]["content"]
