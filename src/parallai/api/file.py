from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import ClassVar, Mapping

from parallai.api.base import ApiObject, FieldKind, FormField, Requester, UploadFile
from parallai.errors import FileRequired, PurposeRequired


@dataclass
class FileDetails(ApiObject):
    """
    An uploaded file.

    Attributes:
        id (str): Unique identifier of the file
        object (str): Always "file"
        bytes (int): Size of the file in bytes
        created_at (int): Unix time the file was created
        filename (str): Name of the uploaded file
        purpose (str): Intended purpose, e.g. "fine-tune"
    """

    id: str = ""
    object: str = ""
    bytes: int = 0
    created_at: int = 0
    filename: str = ""
    purpose: str = ""

    @property
    def name(self) -> str:
        return self.filename


class FilesData(list[FileDetails]):
    def names(self) -> list[str]:
        return [f.name for f in self]


@dataclass
class FileListResponse(ApiObject):
    object: str = ""
    data: list[FileDetails] = field(default_factory=list)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"data": FileDetails}


@dataclass
class FileDeleteResponse(ApiObject):
    id: str = ""
    object: str = ""
    deleted: bool = False


@dataclass
class FileUploadRequest(Requester):
    """
    Request for uploading a file to /files (multipart).

    For purpose "fine-tune" each line of the JSON Lines file is a record with
    "prompt" and "completion" fields.
    """

    file: UploadFile | None = None
    purpose: str = ""

    FORM_FIELDS: ClassVar[tuple[FormField, ...]] = (
        FormField("file", FieldKind.FILE),
        FormField("purpose"),
    )

    def open_file(self, path: str | os.PathLike[str]) -> None:
        self._open_file("file", path)

    def close_file(self) -> None:
        self._close_file("file")

    def validate(self) -> None:
        if self.file is None:
            raise FileRequired("file")
        if not self.purpose:
            raise PurposeRequired("purpose")
