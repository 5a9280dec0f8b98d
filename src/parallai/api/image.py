from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import ClassVar, Mapping

from aiohttp import ClientSession

from parallai.api.base import ApiObject, FieldKind, FormField, Requester, UploadFile
from parallai.core.artifacts import save_images
from parallai.errors import ImageRequired, InvalidResponseFormat, InvalidSize, PromptRequired
from parallai.utils import default_parallel_tasks

RESPONSE_FORMATS = ("url", "b64_json")
SIZES = ("256x256", "512x512", "1024x1024")

_IMAGE_OPTION_FIELDS = (
    FormField("n"),
    FormField("size"),
    FormField("response_format"),
    FormField("user"),
)


def _check_image_options(response_format: str | None, size: str | None) -> None:
    if response_format and response_format not in RESPONSE_FORMATS:
        raise InvalidResponseFormat(
            "response_format", f"invalid response format: {response_format!r}"
        )
    if size and size not in SIZES:
        raise InvalidSize("size", f"invalid size: {size!r}")


@dataclass
class ImageGenerationRequest(Requester):
    """
    Request for /images/generations.

    Attributes:
        prompt (str): Text description of the desired image(s) (required)
        n (int | None): Number of images to generate
        size (str | None): One of 256x256, 512x512 or 1024x1024
        response_format (str | None): "url" or "b64_json"
        user (str | None): Identifier of the end-user
    """

    prompt: str = ""
    n: int | None = None
    size: str | None = None
    response_format: str | None = None
    user: str | None = None

    def validate(self) -> None:
        if not self.prompt:
            raise PromptRequired("prompt")
        _check_image_options(self.response_format, self.size)


@dataclass
class ImageEditRequest(Requester):
    """
    Request for /images/edits (multipart).

    The image is a square PNG under 4MB; the optional mask marks, with its
    transparent areas, where the image should be edited.
    """

    image: UploadFile | None = None
    mask: UploadFile | None = None
    prompt: str = ""
    n: int | None = None
    size: str | None = None
    response_format: str | None = None
    user: str | None = None

    FORM_FIELDS: ClassVar[tuple[FormField, ...]] = (
        FormField("image", FieldKind.FILE),
        FormField("mask", FieldKind.FILE),
        FormField("prompt"),
        *_IMAGE_OPTION_FIELDS,
    )

    def open_image_file(self, path: str | os.PathLike[str]) -> None:
        self._open_file("image", path)

    def open_mask_file(self, path: str | os.PathLike[str]) -> None:
        self._open_file("mask", path)

    def close_image_file(self) -> None:
        self._close_file("image")

    def close_mask_file(self) -> None:
        self._close_file("mask")

    def validate(self) -> None:
        if self.image is None:
            raise ImageRequired("image")
        if not self.prompt:
            raise PromptRequired("prompt")
        _check_image_options(self.response_format, self.size)


@dataclass
class ImageVariationRequest(Requester):
    """Request for /images/variations (multipart)."""

    image: UploadFile | None = None
    n: int | None = None
    size: str | None = None
    response_format: str | None = None
    user: str | None = None

    FORM_FIELDS: ClassVar[tuple[FormField, ...]] = (
        FormField("image", FieldKind.FILE),
        *_IMAGE_OPTION_FIELDS,
    )

    def open_image_file(self, path: str | os.PathLike[str]) -> None:
        self._open_file("image", path)

    def close_image_file(self) -> None:
        self._close_file("image")

    def validate(self) -> None:
        if self.image is None:
            raise ImageRequired("image")
        _check_image_options(self.response_format, self.size)


@dataclass
class ImageData(ApiObject):
    """A generated image: either a URL to fetch or base64-encoded PNG data."""

    url: str | None = None
    b64_json: str | None = None


@dataclass
class ImageResponse(ApiObject):
    """
    Response of the image generation, edit and variation endpoints.

    Attributes:
        created (int): Unix time the images were created
        data (list[ImageData]): The generated images
        parallel_tasks (int | None): Concurrency used by save(); set by the client
        show_progress (bool): Show a progress bar in save(); set by the client
    """

    created: int = 0
    data: list[ImageData] = field(default_factory=list)
    parallel_tasks: int | None = field(default=None, init=False, repr=False, compare=False)
    show_progress: bool = field(default=False, init=False, repr=False, compare=False)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"data": ImageData}

    async def save(
        self, path: str | os.PathLike[str], session: ClientSession | None = None
    ) -> None:
        """
        Save every image to a local file.

        Args:
            path (str | os.PathLike[str]): Destination directory, or a .png file path
                (several images get "_<index>" suffixes)
            session (ClientSession | None): Session used to download URL images

        Raises:
            ArtifactWriteFailed: If any image could not be saved
        """
        await save_images(
            path,
            self.parallel_tasks or default_parallel_tasks(),
            self.data,
            session=session,
            progress=self.show_progress,
        )
