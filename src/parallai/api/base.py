from __future__ import annotations

import io
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, BinaryIO, ClassVar, Iterator, Mapping, TypeVar

T = TypeVar("T", bound="ApiObject")


class UploadFile:
    """
    A local file owned by a request object for the duration of an upload.

    Closing is idempotent, and reading a closed file raises ValueError.

    Example:
        >>> with UploadFile.open("image.png") as image:
        ...     request = ImageVariationRequest(image=image)
    """

    def __init__(self, fileobj: BinaryIO, name: str | None = None) -> None:
        self._fileobj = fileobj
        self._name = name if name is not None else str(getattr(fileobj, "name", "file"))

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> "UploadFile":
        return cls(open(path, "rb"), os.fspath(path))

    @classmethod
    def from_bytes(cls, data: bytes, filename: str) -> "UploadFile":
        return cls(io.BytesIO(data), filename)

    @property
    def filename(self) -> str:
        """Base name of the file, used as the attachment filename."""
        return os.path.basename(self._name)

    @property
    def closed(self) -> bool:
        return self._fileobj.closed

    def read(self) -> bytes:
        """Read the full remaining contents of the file."""
        return self._fileobj.read()

    def close(self) -> None:
        if not self._fileobj.closed:
            self._fileobj.close()

    def __enter__(self) -> "UploadFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"UploadFile({self.filename!r}, {state})"


class FieldKind(Enum):
    """How a request attribute is written into a multipart body."""

    FILE = "file"
    VALUE = "value"


@dataclass(frozen=True)
class FormField:
    """
    Declarative mapping from a request attribute to a multipart form field.

    Attributes:
        name (str): Wire name of the form field
        kind (FieldKind): FILE for UploadFile attributes, VALUE for everything else
        attr (str): Attribute on the request holding the value (defaults to name)
    """

    name: str
    kind: FieldKind = FieldKind.VALUE
    attr: str = ""

    def get(self, request: object) -> Any:
        return getattr(request, self.attr or self.name)


class Requester(ABC):
    """
    Contract every request object satisfies.

    Requests validate themselves before any network call and release the
    files they hold with flush(). Multipart requests declare their form
    layout in FORM_FIELDS; JSON requests are serialized from their dataclass
    fields with to_dict().

    Requests are context managers; leaving the block flushes them:

        >>> with ImageEditRequest(prompt="A red hat") as request:
        ...     request.open_image_file("hat.png")
        ...     response = await client.image_edit(request)
    """

    FORM_FIELDS: ClassVar[tuple[FormField, ...]] = ()

    @abstractmethod
    def validate(self) -> None:
        """
        Check the request before it is sent.

        Raises:
            ValidationFailed: A subclass naming the first invalid field
        """
        ...

    def flush(self) -> None:
        """Close every file held by the request. Safe to call repeatedly."""
        for form_field in self.FORM_FIELDS:
            if form_field.kind is FieldKind.FILE:
                upload = form_field.get(self)
                if upload is not None:
                    upload.close()

    def _open_file(self, attr: str, path: str | os.PathLike[str]) -> UploadFile:
        # A previously opened file for the same field is released first.
        self._close_file(attr)
        upload = UploadFile.open(path)
        setattr(self, attr, upload)
        return upload

    def _close_file(self, attr: str) -> None:
        upload = getattr(self, attr)
        if upload is not None:
            upload.close()

    def form_values(self) -> Iterator[tuple[FormField, Any]]:
        """Yield (field, current value) pairs in declaration order."""
        for form_field in self.FORM_FIELDS:
            yield form_field, form_field.get(self)

    def to_dict(self) -> dict[str, Any]:
        """JSON body of the request; None-valued fields are left out."""
        return _to_wire(self)

    def __enter__(self: Any) -> Any:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush()


def _to_wire(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _to_wire(getattr(value, f.name))
            for f in fields(value)
            if getattr(value, f.name) is not None
            and not isinstance(getattr(value, f.name), UploadFile)
        }
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    if isinstance(value, Mapping):
        return {k: _to_wire(v) for k, v in value.items()}
    return value


class ApiObject:
    """
    Base for response types decoded from JSON objects.

    Subclasses are dataclasses whose field names match the wire names.
    Unknown keys are ignored and missing keys keep the field default.
    Nested objects (single or lists) are declared in _nested.
    """

    _nested: ClassVar[Mapping[str, type["ApiObject"]]] = {}

    @classmethod
    def from_dict(cls: type[T], data: Any) -> T:
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

        kwargs: dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            if not f.init or f.name not in data:
                continue
            value = data[f.name]
            nested = cls._nested.get(f.name)
            if nested is not None and value is not None:
                if isinstance(value, list):
                    value = [nested.from_dict(item) for item in value]
                else:
                    value = nested.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)
