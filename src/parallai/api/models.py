from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from parallai.api.base import ApiObject


@dataclass
class Usage(ApiObject):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


def join_texts(texts: Iterable[str | None]) -> str:
    """Trim each generated text and join them with newlines."""
    return "\n".join((text or "").strip() for text in texts)
