import base64
from pathlib import Path

import pytest
from aiohttp import web

from parallai.api.image import ImageData, ImageResponse
from parallai.core.artifacts import save_images, to_image_path
from parallai.errors import ArtifactWriteFailed

PNG_BYTES = [b"\x89PNG\r\n\x1a\nfirst", b"\x89PNG\r\n\x1a\nsecond", b"\x89PNG\r\n\x1a\nthird"]


def _b64(data: bytes) -> ImageData:
    return ImageData(b64_json=base64.b64encode(data).decode())


class TestImagePath:
    """Tests for resolving image destinations."""

    def test_directory_gets_unique_png_names(self, tmp_path: Path) -> None:
        """Test that a directory yields distinct random .png files inside it."""
        first = to_image_path(0, tmp_path, total=2)
        second = to_image_path(1, tmp_path, total=2)

        assert first.parent == tmp_path
        assert first.suffix == ".png"
        assert first != second

    def test_trailing_separator_is_a_directory(self, tmp_path: Path) -> None:
        """Test that a path ending with a separator is treated as a directory."""
        destination = to_image_path(0, f"{tmp_path}/")

        assert destination.parent == tmp_path

    def test_single_file_path_is_used_as_is(self, tmp_path: Path) -> None:
        """Test that one image written to a .png path keeps that exact name."""
        assert to_image_path(0, tmp_path / "cat.png") == tmp_path / "cat.png"

    @pytest.mark.parametrize(argnames="index", argvalues=[0, 1, 4])
    def test_batch_file_path_gets_index_suffix(self, tmp_path: Path, index: int) -> None:
        """Test that batches written to a .png path get "_<index>" before the extension."""
        destination = to_image_path(index, tmp_path / "cat.png", total=5)

        assert destination == tmp_path / f"cat_{index}.png"

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        """Test that a non-.png path that does not exist is rejected."""
        with pytest.raises(FileNotFoundError):
            to_image_path(0, tmp_path / "missing")

    def test_home_is_expanded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a leading "~" resolves to the home directory."""
        monkeypatch.setenv("HOME", str(tmp_path))

        assert to_image_path(0, "~/out.png") == tmp_path / "out.png"


class TestSaveBase64:
    """Tests for saving base64-encoded images."""

    async def test_three_images_into_directory(self, tmp_path: Path) -> None:
        """Test that three descriptors give three distinct files with the decoded bytes."""
        await save_images(tmp_path, 2, [_b64(data) for data in PNG_BYTES])

        files = sorted(tmp_path.glob("*.png"))
        assert len(files) == 3
        assert sorted(f.read_bytes() for f in files) == sorted(PNG_BYTES)

    async def test_empty_list_creates_nothing(self, tmp_path: Path) -> None:
        """Test that no descriptors means no files and no error."""
        await save_images(tmp_path, 2, [])

        assert list(tmp_path.iterdir()) == []

    async def test_descriptor_without_data_is_a_no_op(self, tmp_path: Path) -> None:
        """Test that a first descriptor with neither URL nor data saves nothing."""
        await save_images(tmp_path, 2, [ImageData()])

        assert list(tmp_path.iterdir()) == []

    async def test_invalid_base64_raises(self, tmp_path: Path) -> None:
        """Test that undecodable data raises ArtifactWriteFailed after the batch."""
        descriptors = [_b64(PNG_BYTES[0]), ImageData(b64_json="***not base64***")]

        with pytest.raises(ArtifactWriteFailed):
            await save_images(tmp_path, 2, descriptors)

        assert len(list(tmp_path.glob("*.png"))) == 1

    @pytest.mark.parametrize(
        argnames="second",
        argvalues=[ImageData(), ImageData(b64_json=""), ImageData(url="https://x/1.png")],
    )
    async def test_missing_data_in_later_image_raises(
        self, tmp_path: Path, second: ImageData
    ) -> None:
        """Test that a base64 batch image without data raises instead of writing an empty file."""
        with pytest.raises(ArtifactWriteFailed, match="Image 1 has no base64 data"):
            await save_images(tmp_path, 2, [_b64(PNG_BYTES[0]), second])

        files = list(tmp_path.glob("*.png"))
        assert [f.read_bytes() for f in files] == [PNG_BYTES[0]]

    async def test_missing_destination_raises(self, tmp_path: Path) -> None:
        """Test that a missing destination directory raises ArtifactWriteFailed."""
        with pytest.raises(ArtifactWriteFailed):
            await save_images(tmp_path / "nope", 2, [_b64(PNG_BYTES[0])])

    async def test_response_save_uses_numbered_files(self, tmp_path: Path) -> None:
        """Test that ImageResponse.save writes a batch to numbered files."""
        response = ImageResponse(created=1, data=[_b64(data) for data in PNG_BYTES[:2]])

        await response.save(tmp_path / "out.png")

        assert (tmp_path / "out_0.png").read_bytes() == PNG_BYTES[0]
        assert (tmp_path / "out_1.png").read_bytes() == PNG_BYTES[1]


class TestSaveFromURL:
    """Tests for downloading images by URL."""

    async def test_downloads_every_image(self, tmp_path: Path, serve, session) -> None:
        """Test that URL descriptors are fetched and written in batch order."""

        async def handler(request: web.Request) -> web.Response:
            return web.Response(body=PNG_BYTES[int(request.match_info["n"])])

        app = web.Application()
        app.router.add_get("/v1/img/{n}.png", handler)
        base_url = await serve(app)

        descriptors = [ImageData(url=f"{base_url}/img/{i}.png") for i in range(3)]
        await save_images(tmp_path / "pic.png", 2, descriptors, session=session)

        for i, data in enumerate(PNG_BYTES):
            assert (tmp_path / f"pic_{i}.png").read_bytes() == data

    async def test_own_session_when_none_given(self, tmp_path: Path, serve) -> None:
        """Test that a temporary session is used when the caller passes none."""

        async def handler(request: web.Request) -> web.Response:
            return web.Response(body=PNG_BYTES[0])

        app = web.Application()
        app.router.add_get("/v1/img.png", handler)
        base_url = await serve(app)

        await save_images(tmp_path / "one.png", 1, [ImageData(url=f"{base_url}/img.png")])

        assert (tmp_path / "one.png").read_bytes() == PNG_BYTES[0]

    async def test_failed_download_raises(self, tmp_path: Path, serve, session) -> None:
        """Test that a non-success download status raises ArtifactWriteFailed."""

        async def handler(request: web.Request) -> web.Response:
            return web.Response(status=403)

        app = web.Application()
        app.router.add_get("/v1/img.png", handler)
        base_url = await serve(app)

        with pytest.raises(ArtifactWriteFailed, match="403"):
            await save_images(
                tmp_path, 1, [ImageData(url=f"{base_url}/img.png")], session=session
            )
