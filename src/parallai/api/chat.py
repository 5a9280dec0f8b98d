from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Mapping

from parallai.api.base import ApiObject, Requester
from parallai.api.models import Usage, join_texts
from parallai.errors import InvalidRole, MessageRequired, ModelRequired, PromptRequired

ROLES = ("system", "user", "assistant")
DEFAULT_ROLE = "user"


@dataclass
class ChatMessage(ApiObject):
    role: str = DEFAULT_ROLE
    content: str = ""
    name: str | None = None


@dataclass
class ChatCompletionRequest(Requester):
    """
    Request for /chat/completions.

    Attributes:
        model (str): ID of the model to use (required)
        messages (list[ChatMessage]): The conversation so far (required)
        max_tokens (int | None): Maximum number of tokens to generate
        temperature (float | None): Sampling temperature
        top_p (float | None): Nucleus sampling probability mass
        frequency_penalty (float | None): Penalty for frequent tokens
        presence_penalty (float | None): Penalty for tokens already present
        logit_bias (dict[str, float] | None): Per-token likelihood adjustments
    """

    model: str = ""
    messages: list[ChatMessage] = field(default_factory=list)
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    logit_bias: dict[str, float] | None = None

    def validate(self) -> None:
        if not self.model:
            raise ModelRequired("model")
        if not self.messages:
            raise MessageRequired("messages")
        for message in self.messages:
            if message.role not in ROLES:
                raise InvalidRole("role", f"invalid role: {message.role!r}")
            if not message.content:
                raise PromptRequired("content")


@dataclass
class ChatCompletionChoice(ApiObject):
    index: int = 0
    message: ChatMessage = field(default_factory=ChatMessage)
    finish_reason: str = ""

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"message": ChatMessage}


@dataclass
class ChatCompletionResponse(ApiObject):
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatCompletionChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {
        "choices": ChatCompletionChoice,
        "usage": Usage,
    }

    def text(self) -> str:
        """Content of every choice, trimmed and joined by newlines."""
        return join_texts(choice.message.content for choice in self.choices)
