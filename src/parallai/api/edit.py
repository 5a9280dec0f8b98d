from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Mapping

from parallai.api.base import ApiObject, Requester
from parallai.api.models import Usage, join_texts
from parallai.errors import InstructionRequired, ModelRequired


@dataclass
class EditRequest(Requester):
    model: str = ""
    instruction: str = ""
    input: str | None = None
    temperature: float | None = None
    top_p: float | None = None

    def validate(self) -> None:
        if not self.model:
            raise ModelRequired("model")
        if not self.instruction:
            raise InstructionRequired("instruction")


@dataclass
class EditChoice(ApiObject):
    text: str = ""
    index: int = 0


@dataclass
class EditResponse(ApiObject):
    id: str = ""
    object: str = ""
    created: int = 0
    choices: list[EditChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"choices": EditChoice, "usage": Usage}

    def text(self) -> str:
        return join_texts(choice.text for choice in self.choices)
