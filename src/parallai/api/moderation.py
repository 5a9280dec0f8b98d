from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Mapping

from parallai.api.base import ApiObject, Requester
from parallai.errors import InputRequired, ModelRequired


@dataclass
class ModerationRequest(Requester):
    """
    Request for /moderations.

    Attributes:
        input (str): Text to classify (required)
        model (str): "text-moderation-stable" or "text-moderation-latest" (required)
    """

    input: str = ""
    model: str = ""

    def validate(self) -> None:
        if not self.input:
            raise InputRequired("input")
        if not self.model:
            raise ModelRequired("model")


@dataclass
class ModerationResult(ApiObject):
    categories: dict[str, bool] = field(default_factory=dict)
    category_scores: dict[str, float] = field(default_factory=dict)
    flagged: bool = False


@dataclass
class ModerationResponse(ApiObject):
    id: str = ""
    model: str = ""
    results: list[ModerationResult] = field(default_factory=list)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"results": ModerationResult}

    def is_flagged(self) -> bool:
        """True if the input was flagged under any category."""
        return any(result.flagged for result in self.results)
