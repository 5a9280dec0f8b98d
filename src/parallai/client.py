from __future__ import annotations

from typing import Any, Mapping, Sequence, TypeVar

from aiohttp import ClientSession
from loguru import logger

from parallai.api.audio import AudioResponse, AudioTranscriptionRequest, AudioTranslationRequest
from parallai.api.base import Requester
from parallai.api.chat import ChatCompletionRequest, ChatCompletionResponse
from parallai.api.completion import CompletionRequest, CompletionResponse
from parallai.api.edit import EditRequest, EditResponse
from parallai.api.embedding import EmbeddingRequest, EmbeddingResponse
from parallai.api.file import (
    FileDeleteResponse,
    FileDetails,
    FileListResponse,
    FilesData,
    FileUploadRequest,
)
from parallai.api.fine_tune import (
    FineTuneEvent,
    FineTuneEventListResponse,
    FineTuneListResponse,
    FineTuneRequest,
    FineTuneResponse,
    FineTunesData,
)
from parallai.api.image import (
    ImageEditRequest,
    ImageGenerationRequest,
    ImageResponse,
    ImageVariationRequest,
)
from parallai.api.model import ModelDeleteResponse, ModelDetails, ModelListResponse, ModelsData
from parallai.api.moderation import ModerationRequest, ModerationResponse
from parallai.core.fanout import fan_out
from parallai.core.marshal import (
    Credentials,
    OutboundRequest,
    build_json_request,
    build_multipart_request,
)
from parallai.core.models import API_BASE_URL, REQUEST_TIMEOUT_SECONDS, ClientConfig
from parallai.core.transport import Decodable, execute
from parallai.errors import ConfigurationInvalid, InvalidBaseURL
from parallai.utils import default_parallel_tasks, setup_logger, url_build

"""
Async client for the OpenAI-compatible REST API.

One method per endpoint. Methods taking several IDs fan the lookups out
over a bounded number of concurrent requests; without IDs they list
everything with a single request.
"""

T = TypeVar("T")


class Client:
    """
    Async API client.

    The client owns the aiohttp session it creates; a session passed in the
    config stays owned by the caller. Use it as an async context manager or
    call close() when done.

    Example:
        >>> async with Client(ClientConfig(api_key="sk-...")) as client:
        ...     models = await client.models("gpt-4o", "gpt-4o-mini")
        ...     print(models.names())
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        self.api_key = ""
        self.org_id = ""
        self.api_base_url = API_BASE_URL
        self.parallel_tasks = default_parallel_tasks()
        self.request_timeout = REQUEST_TIMEOUT_SECONDS
        self.http_headers: Mapping[str, str | Sequence[str]] = {}
        self.show_progress = False

        self._session: ClientSession | None = None
        self._owned_session: ClientSession | None = None

        if config is not None:
            self.configure(config)

    def configure(self, config: ClientConfig) -> None:
        """
        Apply a configuration; unset (None) fields keep their current value.

        Args:
            config (ClientConfig): Fields to update
        """
        if config.api_key is not None:
            self.api_key = config.api_key
        if config.org_id is not None:
            self.org_id = config.org_id
        if config.api_base_url is not None:
            self.api_base_url = config.api_base_url
        if config.parallel_tasks is not None:
            self.parallel_tasks = config.parallel_tasks
        if config.request_timeout is not None:
            self.request_timeout = config.request_timeout
        if config.http_headers is not None:
            self.http_headers = config.http_headers
        if config.session is not None:
            self._session = config.session
        if config.show_progress is not None:
            self.show_progress = config.show_progress
        if config.logging_level is not None:
            setup_logger(config.logging_level)
            logger.debug(f"Logging initialized at level {config.logging_level}")

    def check(self) -> None:
        """
        Verify the configuration is usable.

        Raises:
            ConfigurationInvalid: If the API key or base URL is missing, or
                parallel_tasks / request_timeout are not positive
            InvalidBaseURL: If the base URL is not an absolute http(s) URL
        """
        if not self.api_key:
            raise ConfigurationInvalid("API key is not set")
        if not self.api_base_url:
            raise ConfigurationInvalid("API base URL is not set")
        if self.parallel_tasks < 1:
            raise ConfigurationInvalid(
                f"parallel_tasks must be at least 1, got {self.parallel_tasks}"
            )
        if self.request_timeout <= 0:
            raise ConfigurationInvalid(
                f"request_timeout must be positive, got {self.request_timeout}"
            )
        url_build(self.api_base_url)

    def endpoint(self, *parts: str) -> str:
        """Absolute URL for the given path segments under the base URL."""
        return url_build(self.api_base_url, *parts)

    @property
    def session(self) -> ClientSession:
        """Session used for requests; created on first use when none was configured."""
        if self._session is not None:
            return self._session
        if self._owned_session is None or self._owned_session.closed:
            self._owned_session = ClientSession()
        return self._owned_session

    async def close(self) -> None:
        """Close the session created by the client, if any."""
        if self._owned_session is not None and not self._owned_session.closed:
            await self._owned_session.close()
        self._owned_session = None

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _credentials(self) -> Credentials:
        return Credentials(
            api_key=self.api_key, org_id=self.org_id, http_headers=self.http_headers
        )

    def _prepare(
        self,
        method: str,
        path: Sequence[str],
        body: Requester | Mapping[str, Any] | None,
        multipart: bool,
    ) -> OutboundRequest:
        self.check()
        if isinstance(body, Requester):
            body.validate()

        url = self.endpoint(*path)
        if multipart:
            assert isinstance(body, Requester)
            return build_multipart_request(self._credentials(), method, url, body)
        return build_json_request(self._credentials(), method, url, body)

    async def _call(
        self,
        method: str,
        path: Sequence[str],
        result_type: Decodable[T],
        body: Requester | Mapping[str, Any] | None = None,
        multipart: bool = False,
    ) -> T:
        request = self._prepare(method, path, body, multipart)
        _, result = await execute(
            self.session, request, result_type, timeout=self.request_timeout
        )
        assert result is not None
        return result

    async def _raw(self, method: str, path: Sequence[str]) -> bytes:
        request = self._prepare(method, path, None, False)
        body, _ = await execute(self.session, request, timeout=self.request_timeout)
        return body

    def _with_save_options(self, response: ImageResponse) -> ImageResponse:
        response.parallel_tasks = self.parallel_tasks
        response.show_progress = self.show_progress
        return response

    # Models

    async def models(self, *ids: str) -> ModelsData:
        """
        Get models by ID, or every available model when no ID is given.

        IDs are fetched concurrently; the result keeps the order of the IDs.

        Raises:
            RemoteError: For the first failing ID, in the order given
        """
        self.check()
        if not ids:
            listing = await self._call("GET", ("models",), ModelListResponse)
            return ModelsData(listing.data)

        async def _get(model_id: str) -> ModelDetails:
            return await self._call("GET", ("models", model_id), ModelDetails)

        return ModelsData(
            await fan_out(ids, self.parallel_tasks, _get, progress=self.show_progress)
        )

    async def model_delete(self, model_id: str) -> ModelDeleteResponse:
        """Delete a fine-tuned model owned by the organization."""
        return await self._call("DELETE", ("models", model_id), ModelDeleteResponse)

    # Text

    async def completion(self, request: CompletionRequest) -> CompletionResponse:
        return await self._call("POST", ("completions",), CompletionResponse, request)

    async def chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        return await self._call(
            "POST", ("chat", "completions"), ChatCompletionResponse, request
        )

    async def edit(self, request: EditRequest) -> EditResponse:
        return await self._call("POST", ("edits",), EditResponse, request)

    async def embedding(self, request: EmbeddingRequest) -> EmbeddingResponse:
        return await self._call("POST", ("embeddings",), EmbeddingResponse, request)

    async def moderation(self, request: ModerationRequest) -> ModerationResponse:
        return await self._call("POST", ("moderations",), ModerationResponse, request)

    # Images

    async def image_generation(self, request: ImageGenerationRequest) -> ImageResponse:
        response = await self._call(
            "POST", ("images", "generations"), ImageResponse, request
        )
        return self._with_save_options(response)

    async def image_edit(self, request: ImageEditRequest) -> ImageResponse:
        response = await self._call(
            "POST", ("images", "edits"), ImageResponse, request, multipart=True
        )
        return self._with_save_options(response)

    async def image_variation(self, request: ImageVariationRequest) -> ImageResponse:
        response = await self._call(
            "POST", ("images", "variations"), ImageResponse, request, multipart=True
        )
        return self._with_save_options(response)

    # Audio

    async def audio_transcription(self, request: AudioTranscriptionRequest) -> AudioResponse:
        return await self._call(
            "POST", ("audio", "transcriptions"), AudioResponse, request, multipart=True
        )

    async def audio_translation(self, request: AudioTranslationRequest) -> AudioResponse:
        return await self._call(
            "POST", ("audio", "translations"), AudioResponse, request, multipart=True
        )

    # Files

    async def files(self, *ids: str) -> FilesData:
        """
        Get uploaded files by ID, or every file when no ID is given.

        Raises:
            RemoteError: For the first failing ID, in the order given
        """
        self.check()
        if not ids:
            listing = await self._call("GET", ("files",), FileListResponse)
            return FilesData(listing.data)

        async def _get(file_id: str) -> FileDetails:
            return await self._call("GET", ("files", file_id), FileDetails)

        return FilesData(
            await fan_out(ids, self.parallel_tasks, _get, progress=self.show_progress)
        )

    async def file_delete(self, file_id: str) -> FileDeleteResponse:
        return await self._call("DELETE", ("files", file_id), FileDeleteResponse)

    async def file_upload(self, request: FileUploadRequest) -> FileDetails:
        return await self._call("POST", ("files",), FileDetails, request, multipart=True)

    async def file_content(self, file_id: str) -> str:
        """
        Contents of an uploaded file as text, never parsed as JSON.

        Bytes that are not valid UTF-8 are replaced with U+FFFD.
        """
        body = await self._raw("GET", ("files", file_id, "content"))
        return body.decode("utf-8", errors="replace")

    # Fine-tunes

    async def fine_tune(self, request: FineTuneRequest) -> FineTuneResponse:
        return await self._call("POST", ("fine-tunes",), FineTuneResponse, request)

    async def fine_tunes(self, *ids: str) -> FineTunesData:
        """Get fine-tuning jobs by ID, or every job of the organization when no ID is given."""
        self.check()
        if not ids:
            listing = await self._call("GET", ("fine-tunes",), FineTuneListResponse)
            return FineTunesData(listing.data)

        async def _get(job_id: str) -> FineTuneResponse:
            return await self._call("GET", ("fine-tunes", job_id), FineTuneResponse)

        return FineTunesData(
            await fan_out(ids, self.parallel_tasks, _get, progress=self.show_progress)
        )

    async def fine_tune_cancel(self, job_id: str) -> FineTuneResponse:
        return await self._call("POST", ("fine-tunes", job_id, "cancel"), FineTuneResponse)

    async def fine_tune_events(self, job_id: str) -> list[FineTuneEvent]:
        listing = await self._call(
            "GET", ("fine-tunes", job_id, "events"), FineTuneEventListResponse
        )
        return listing.data


def new_client(api_key: str, org_id: str = "", *base_url_parts: str) -> Client:
    """
    Create a client from plain parameters.

    Args:
        api_key (str): Secret API key
        org_id (str): Organization identifier (optional)
        *base_url_parts (str): Base URL followed by extra path segments, e.g.
            ("https://example.com", "openai", "v1"); the default base URL
            is used when none are given

    Returns:
        Client: A new client; an invalid base URL is reported by check()
    """
    base_url = None
    if base_url_parts:
        try:
            base_url = url_build(base_url_parts[0], *base_url_parts[1:])
        except InvalidBaseURL:
            base_url = base_url_parts[0]
    return Client(ClientConfig(api_key=api_key, org_id=org_id, api_base_url=base_url))
