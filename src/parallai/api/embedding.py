from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from parallai.api.base import ApiObject, Requester
from parallai.api.models import Usage
from parallai.errors import InputRequired, ModelRequired


@dataclass
class EmbeddingRequest(Requester):
    """
    Request for /embeddings.

    Attributes:
        model (str): ID of the model to use (required)
        input (Any): A string, list of strings, or token arrays to embed (required)
        user (str | None): Identifier of the end-user
    """

    model: str = ""
    input: Any = None
    user: str | None = None

    def validate(self) -> None:
        if not self.model:
            raise ModelRequired("model")
        if self.input is None:
            raise InputRequired("input")


@dataclass
class Embedding(ApiObject):
    object: str = ""
    embedding: list[float] = field(default_factory=list)
    index: int = 0


@dataclass
class EmbeddingResponse(ApiObject):
    object: str = ""
    data: list[Embedding] = field(default_factory=list)
    model: str = ""
    usage: Usage = field(default_factory=Usage)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"data": Embedding, "usage": Usage}
