from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Mapping, Sequence, TypeVar

if TYPE_CHECKING:
    from aiohttp import ClientSession

API_BASE_URL = "https://api.openai.com/v1"
REQUEST_TIMEOUT_SECONDS = 60.0

K = TypeVar("K")
R = TypeVar("R")


@dataclass
class ClientConfig:
    """
    Configuration for the API client.

    Every field is optional. When a config is applied to a client, unset
    (None) fields keep the client's current value, falling back to defaults.

    Attributes:
        api_key (str): Secret key for bearer authorization
        org_id (str): Organization identifier sent as OpenAI-Organization
        api_base_url (str): Base URL of the API (default: https://api.openai.com/v1)
        parallel_tasks (int): Concurrency limit for fan-out and image saving
            (default: twice the number of processors)
        request_timeout (float): Per-request timeout in seconds (default: 60)
        http_headers (Mapping[str, str | Sequence[str]]): Extra static headers,
            added to every request; several values per name are all sent
        session (ClientSession): Transport to use; the client creates and owns
            one when not given
        logging_level (int | str): Loguru level; when set the client installs its log sink
        show_progress (bool): Show tqdm progress bars for fan-out and image saving
    """

    api_key: str | None = None
    org_id: str | None = None
    api_base_url: str | None = None
    parallel_tasks: int | None = None
    request_timeout: float | None = None
    http_headers: Mapping[str, str | Sequence[str]] | None = None
    session: ClientSession | None = None
    logging_level: int | str | None = None
    show_progress: bool | None = None


@dataclass
class Outcome(Generic[K, R]):
    """
    Result of one item of a fan-out.

    Exactly one of value/error is meaningful: error is None on success.

    Attributes:
        key (K): Input key of the item
        value (R | None): Result of the operation on success
        error (Exception | None): Failure raised by the operation
    """

    key: K
    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
