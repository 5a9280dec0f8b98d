"""Request and response types for every API endpoint."""

from parallai.api.audio import AudioResponse, AudioTranscriptionRequest, AudioTranslationRequest
from parallai.api.base import ApiObject, FieldKind, FormField, Requester, UploadFile
from parallai.api.chat import (
    ChatCompletionChoice,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
)
from parallai.api.completion import CompletionChoice, CompletionRequest, CompletionResponse
from parallai.api.edit import EditChoice, EditRequest, EditResponse
from parallai.api.embedding import Embedding, EmbeddingRequest, EmbeddingResponse
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
    Hyperparameters,
)
from parallai.api.image import (
    ImageData,
    ImageEditRequest,
    ImageGenerationRequest,
    ImageResponse,
    ImageVariationRequest,
)
from parallai.api.model import (
    ModelDeleteResponse,
    ModelDetails,
    ModelListResponse,
    ModelPermission,
    ModelsData,
)
from parallai.api.models import Usage
from parallai.api.moderation import ModerationRequest, ModerationResponse, ModerationResult

__all__ = [
    # Base types
    "ApiObject",
    "Requester",
    "UploadFile",
    "FormField",
    "FieldKind",
    "Usage",
    # Models
    "ModelPermission",
    "ModelDetails",
    "ModelsData",
    "ModelListResponse",
    "ModelDeleteResponse",
    # Text
    "CompletionRequest",
    "CompletionChoice",
    "CompletionResponse",
    "ChatMessage",
    "ChatCompletionRequest",
    "ChatCompletionChoice",
    "ChatCompletionResponse",
    "EditRequest",
    "EditChoice",
    "EditResponse",
    "EmbeddingRequest",
    "Embedding",
    "EmbeddingResponse",
    "ModerationRequest",
    "ModerationResult",
    "ModerationResponse",
    # Images
    "ImageGenerationRequest",
    "ImageEditRequest",
    "ImageVariationRequest",
    "ImageData",
    "ImageResponse",
    # Audio
    "AudioTranscriptionRequest",
    "AudioTranslationRequest",
    "AudioResponse",
    # Files
    "FileDetails",
    "FilesData",
    "FileListResponse",
    "FileDeleteResponse",
    "FileUploadRequest",
    # Fine-tunes
    "FineTuneRequest",
    "FineTuneEvent",
    "Hyperparameters",
    "FineTuneResponse",
    "FineTunesData",
    "FineTuneListResponse",
    "FineTuneEventListResponse",
]
