from pathlib import Path

import pytest

from parallai.api.audio import AudioTranscriptionRequest, AudioTranslationRequest
from parallai.api.base import Requester, UploadFile
from parallai.api.chat import ChatCompletionRequest, ChatCompletionResponse, ChatMessage
from parallai.api.completion import CompletionRequest, CompletionResponse
from parallai.api.edit import EditRequest
from parallai.api.embedding import EmbeddingRequest
from parallai.api.file import FilesData, FileDetails, FileUploadRequest
from parallai.api.fine_tune import FineTuneRequest, FineTuneResponse
from parallai.api.image import ImageEditRequest, ImageGenerationRequest, ImageVariationRequest
from parallai.api.model import ModelDetails, ModelListResponse, ModelsData
from parallai.api.moderation import ModerationRequest, ModerationResponse
from parallai.errors import (
    FileRequired,
    ImageRequired,
    InputRequired,
    InstructionRequired,
    InvalidResponseFormat,
    InvalidRole,
    InvalidSize,
    MessageRequired,
    ModelRequired,
    PromptRequired,
    PurposeRequired,
    ValidationFailed,
)


def _upload(name: str = "a.png") -> UploadFile:
    return UploadFile.from_bytes(b"data", name)


class TestValidation:
    """Tests for pre-flight validation of request objects."""

    @pytest.mark.parametrize(
        argnames="request_obj,error,field",
        argvalues=[
            (CompletionRequest(), ModelRequired, "model"),
            (ChatCompletionRequest(), ModelRequired, "model"),
            (ChatCompletionRequest(model="gpt-4o"), MessageRequired, "messages"),
            (
                ChatCompletionRequest(
                    model="gpt-4o", messages=[ChatMessage(role="robot", content="hi")]
                ),
                InvalidRole,
                "role",
            ),
            (
                ChatCompletionRequest(model="gpt-4o", messages=[ChatMessage(content="")]),
                PromptRequired,
                "content",
            ),
            (EditRequest(), ModelRequired, "model"),
            (EditRequest(model="text-davinci-edit-001"), InstructionRequired, "instruction"),
            (EmbeddingRequest(), ModelRequired, "model"),
            (EmbeddingRequest(model="text-embedding-3-small"), InputRequired, "input"),
            (ModerationRequest(), InputRequired, "input"),
            (ModerationRequest(input="hello"), ModelRequired, "model"),
            (ImageGenerationRequest(), PromptRequired, "prompt"),
            (
                ImageGenerationRequest(prompt="cat", response_format="jpeg"),
                InvalidResponseFormat,
                "response_format",
            ),
            (ImageGenerationRequest(prompt="cat", size="100x100"), InvalidSize, "size"),
            (ImageEditRequest(prompt="cat"), ImageRequired, "image"),
            (ImageEditRequest(image=_upload()), PromptRequired, "prompt"),
            (ImageEditRequest(image=_upload(), prompt="cat", size="2x2"), InvalidSize, "size"),
            (ImageVariationRequest(), ImageRequired, "image"),
            (
                ImageVariationRequest(image=_upload(), response_format="gif"),
                InvalidResponseFormat,
                "response_format",
            ),
            (AudioTranscriptionRequest(model="whisper-1"), FileRequired, "file"),
            (AudioTranscriptionRequest(file=_upload("a.mp3")), ModelRequired, "model"),
            (AudioTranslationRequest(model="whisper-1"), FileRequired, "file"),
            (AudioTranslationRequest(file=_upload("a.mp3")), ModelRequired, "model"),
            (FileUploadRequest(purpose="fine-tune"), FileRequired, "file"),
            (FileUploadRequest(file=_upload("d.jsonl")), PurposeRequired, "purpose"),
        ],
    )
    def test_invalid_requests(
        self, request_obj: Requester, error: type[ValidationFailed], field: str
    ) -> None:
        """Test that each invalid request raises its specific error naming the field."""
        with pytest.raises(error) as exc_info:
            request_obj.validate()

        assert exc_info.value.field == field

    @pytest.mark.parametrize(
        argnames="request_obj",
        argvalues=[
            CompletionRequest(model="gpt-3.5-turbo-instruct"),
            ChatCompletionRequest(
                model="gpt-4o",
                messages=[
                    ChatMessage(role="system", content="Be brief"),
                    ChatMessage(content="Hi"),
                ],
            ),
            EditRequest(model="text-davinci-edit-001", instruction="Fix spelling"),
            EmbeddingRequest(model="text-embedding-3-small", input=["a", "b"]),
            ModerationRequest(input="hello", model="text-moderation-latest"),
            ImageGenerationRequest(prompt="cat", size="", response_format=None),
            ImageGenerationRequest(prompt="cat", size="1024x1024", response_format="b64_json"),
            ImageEditRequest(image=_upload(), prompt="cat", response_format="url"),
            ImageVariationRequest(image=_upload(), size="512x512"),
            AudioTranscriptionRequest(file=_upload("a.mp3"), model="whisper-1"),
            FileUploadRequest(file=_upload("d.jsonl"), purpose="fine-tune"),
            FineTuneRequest(),
        ],
    )
    def test_valid_requests(self, request_obj: Requester) -> None:
        """Test that complete requests pass validation."""
        request_obj.validate()


class TestFiles:
    """Tests for files owned by request objects."""

    def test_double_flush_on_unopened_request(self) -> None:
        """Test that flushing a request without files, twice, is harmless."""
        request = ImageEditRequest(prompt="cat")

        request.flush()
        request.flush()

    def test_flush_closes_every_file(self) -> None:
        """Test that flush closes both the image and the mask."""
        image, mask = _upload("i.png"), _upload("m.png")
        request = ImageEditRequest(image=image, mask=mask, prompt="cat")

        request.flush()
        request.flush()

        assert image.closed
        assert mask.closed

    def test_context_manager_flushes(self, tmp_path: Path) -> None:
        """Test that leaving the with block closes files opened by the request."""
        (tmp_path / "img.png").write_bytes(b"png")

        with ImageVariationRequest() as request:
            request.open_image_file(tmp_path / "img.png")
            assert request.image is not None
            assert request.image.filename == "img.png"

        assert request.image.closed

    def test_reopening_closes_previous_file(self, tmp_path: Path) -> None:
        """Test that opening a new file for a field closes the previous one."""
        (tmp_path / "a.mp3").write_bytes(b"a")
        (tmp_path / "b.mp3").write_bytes(b"b")
        request = AudioTranscriptionRequest(model="whisper-1")

        request.open_audio_file(tmp_path / "a.mp3")
        first = request.file
        request.open_audio_file(tmp_path / "b.mp3")

        assert first is not None and first.closed
        assert request.file is not None and request.file.read() == b"b"
        request.flush()

    def test_close_mask_leaves_image_open(self, tmp_path: Path) -> None:
        """Test that closing the mask does not touch the image."""
        (tmp_path / "i.png").write_bytes(b"i")
        (tmp_path / "m.png").write_bytes(b"m")
        request = ImageEditRequest(prompt="cat")
        request.open_image_file(tmp_path / "i.png")
        request.open_mask_file(tmp_path / "m.png")

        request.close_mask_file()

        assert request.mask is not None and request.mask.closed
        assert request.image is not None and not request.image.closed
        request.close_image_file()
        assert request.image.closed

    def test_open_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that opening a missing file raises FileNotFoundError."""
        request = FileUploadRequest(purpose="fine-tune")

        with pytest.raises(FileNotFoundError):
            request.open_file(tmp_path / "missing.jsonl")


class TestSerialization:
    """Tests for JSON bodies and decoding of responses."""

    def test_to_dict_drops_unset_fields(self) -> None:
        """Test that None fields are left out and nested objects are converted."""
        request = FineTuneRequest(training_file="file-1", n_epochs=2, classification_betas=[0.5])

        assert request.to_dict() == {
            "training_file": "file-1",
            "n_epochs": 2,
            "classification_betas": [0.5],
        }

    def test_chat_response_text(self) -> None:
        """Test that choice contents are trimmed and joined by newlines."""
        response = ChatCompletionResponse.from_dict(
            {
                "id": "chatcmpl-1",
                "choices": [
                    {"index": 0, "message": {"role": "assistant", "content": "  Hello \n"}},
                    {"index": 1, "message": {"role": "assistant", "content": "World"}},
                ],
                "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
            }
        )

        assert response.text() == "Hello\nWorld"
        assert response.usage.total_tokens == 5
        assert isinstance(response.choices[0].message, ChatMessage)

    def test_completion_response_text(self) -> None:
        response = CompletionResponse.from_dict({"choices": [{"text": "\n\nDone."}]})

        assert response.text() == "Done."

    def test_moderation_flagged(self) -> None:
        """Test that any flagged result flags the response."""
        response = ModerationResponse.from_dict(
            {"results": [{"flagged": False}, {"flagged": True, "categories": {"hate": True}}]}
        )

        assert response.is_flagged()
        assert response.results[1].categories == {"hate": True}

    def test_model_names(self) -> None:
        listing = ModelListResponse.from_dict(
            {
                "object": "list",
                "data": [{"id": "gpt-4o", "permission": [{"id": "p1"}]}, {"id": "gpt-4o-mini"}],
            }
        )

        assert ModelsData(listing.data).names() == ["gpt-4o", "gpt-4o-mini"]
        assert listing.data[0].permission[0].id == "p1"
        assert isinstance(listing.data[1], ModelDetails)

    def test_file_names(self) -> None:
        files = FilesData(
            [
                FileDetails.from_dict({"id": "f1", "filename": "a.jsonl"}),
                FileDetails(filename="b.jsonl"),
            ]
        )

        assert files.names() == ["a.jsonl", "b.jsonl"]

    def test_fine_tune_nested_objects(self) -> None:
        """Test that events, hyperparameters and training files are decoded."""
        job = FineTuneResponse.from_dict(
            {
                "id": "ft-1",
                "events": [{"level": "info", "message": "created"}],
                "hyperparams": {"n_epochs": 4},
                "training_files": [{"id": "file-1", "filename": "train.jsonl"}],
                "fine_tuned_model": None,
            }
        )

        assert job.events[0].message == "created"
        assert job.hyperparams.n_epochs == 4
        assert job.training_files[0].name == "train.jsonl"
        assert job.fine_tuned_model is None

    def test_from_dict_rejects_non_objects(self) -> None:
        """Test that a JSON value that is not an object cannot be decoded."""
        with pytest.raises(TypeError):
            ModelDetails.from_dict(["gpt-4o"])
