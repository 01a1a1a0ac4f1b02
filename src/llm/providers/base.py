from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageInput:
    data_b64: str
    mime_type: str = "image/jpeg"


class LLMProvider(ABC):
    @abstractmethod
    def generate(self, *, system: str, user: str, image: Optional[ImageInput] = None) -> str:
        """
        Must return the model output as TEXT (we'll parse/validate JSON in LLMClient).
        """
        raise NotImplementedError
