from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar

from parallai.api.base import ApiObject, FieldKind, FormField, Requester, UploadFile
from parallai.errors import FileRequired, ModelRequired


@dataclass
class AudioTranscriptionRequest(Requester):
    """
    Request for /audio/transcriptions (multipart).

    Attributes:
        file (UploadFile | None): Audio in mp3, mp4, mpeg, mpga, m4a, wav or webm (required)
        model (str): ID of the model to use (required)
        prompt (str | None): Text to guide the style or continue a previous segment
        response_format (str | None): json, text, srt, verbose_json or vtt
        temperature (float | None): Sampling temperature between 0 and 1
        language (str | None): ISO-639-1 language of the audio
    """

    file: UploadFile | None = None
    model: str = ""
    prompt: str | None = None
    response_format: str | None = None
    temperature: float | None = None
    language: str | None = None

    FORM_FIELDS: ClassVar[tuple[FormField, ...]] = (
        FormField("file", FieldKind.FILE),
        FormField("model"),
        FormField("prompt"),
        FormField("response_format"),
        FormField("temperature"),
        FormField("language"),
    )

    def open_audio_file(self, path: str | os.PathLike[str]) -> None:
        self._open_file("file", path)

    def close_audio_file(self) -> None:
        self._close_file("file")

    def validate(self) -> None:
        if self.file is None:
            raise FileRequired("file")
        if not self.model:
            raise ModelRequired("model")


@dataclass
class AudioTranslationRequest(Requester):
    """Request for /audio/translations (multipart); the audio is translated into English."""

    file: UploadFile | None = None
    model: str = ""
    prompt: str | None = None
    response_format: str | None = None
    temperature: float | None = None

    FORM_FIELDS: ClassVar[tuple[FormField, ...]] = (
        FormField("file", FieldKind.FILE),
        FormField("model"),
        FormField("prompt"),
        FormField("response_format"),
        FormField("temperature"),
    )

    def open_audio_file(self, path: str | os.PathLike[str]) -> None:
        self._open_file("file", path)

    def close_audio_file(self) -> None:
        self._close_file("file")

    def validate(self) -> None:
        if self.file is None:
            raise FileRequired("file")
        if not self.model:
            raise ModelRequired("model")


@dataclass
class AudioResponse(ApiObject):
    text: str = ""
