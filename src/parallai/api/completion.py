from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from parallai.api.base import ApiObject, Requester
from parallai.api.models import Usage, join_texts
from parallai.errors import ModelRequired


@dataclass
class CompletionRequest(Requester):
    """
    Request for /completions.

    Attributes:
        model (str): ID of the model to use (required)
        prompt (Any): A string, list of strings, list of tokens or list of token lists
        suffix (str | None): Text that comes after the completion
        max_tokens (int | None): Maximum number of tokens to generate
        temperature (float | None): Sampling temperature
        top_p (float | None): Nucleus sampling probability mass
        n (int | None): Number of completions to generate
        logprobs (int | None): Number of most likely tokens to return probabilities for
        echo (bool | None): Echo back the prompt with the completion
        stop (Any): Up to four sequences where generation stops
        presence_penalty (float | None): Penalty for tokens already present
        frequency_penalty (float | None): Penalty for frequent tokens
        best_of (int | None): Generate this many completions server-side and return the best
        logit_bias (dict[str, float] | None): Per-token likelihood adjustments
        user (str | None): Identifier of the end-user
    """

    model: str = ""
    prompt: Any = None
    suffix: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    n: int | None = None
    logprobs: int | None = None
    echo: bool | None = None
    stop: Any = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    best_of: int | None = None
    logit_bias: dict[str, float] | None = None
    user: str | None = None

    def validate(self) -> None:
        if not self.model:
            raise ModelRequired("model")


@dataclass
class CompletionChoice(ApiObject):
    text: str = ""
    index: int = 0
    logprobs: Any = None
    finish_reason: str = ""


@dataclass
class CompletionResponse(ApiObject):
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[CompletionChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {
        "choices": CompletionChoice,
        "usage": Usage,
    }

    def text(self) -> str:
        return join_texts(choice.text for choice in self.choices)
