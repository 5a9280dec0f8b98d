from __future__ import annotations

import asyncio
import base64
import binascii
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from aiohttp import ClientError, ClientSession
from loguru import logger

from parallai.core.fanout import run_bounded
from parallai.errors import ArtifactWriteFailed
from parallai.utils import generate_unique_filename, is_successful_code

"""
Saving generated images to local files.

Descriptors carry either a URL to fetch or base64-encoded bytes. The first
descriptor decides the mode for the whole batch.
"""

IMAGE_EXTENSION = ".png"


class ImageDescriptor(Protocol):
    url: str | None
    b64_json: str | None


def to_image_path(index: int, path: str | os.PathLike[str], total: int = 1) -> Path:
    """
    Resolve the destination file for the index-th image of a batch.

    A leading "~" is expanded and the path made absolute. A path that ends
    with a separator or not in .png must already exist; if it is a directory
    the image gets a random unique "<hex>.png" name inside it. A file path
    is used as is for a single image; batches get "_<index>" before the
    extension.

    Args:
        index (int): Position of the image in the batch
        path (str | os.PathLike[str]): Destination directory or .png file
        total (int): Number of images in the batch

    Returns:
        Path: Absolute destination file

    Raises:
        FileNotFoundError: If path does not end in .png and does not exist
    """
    raw = os.fspath(path)
    destination = Path(raw).expanduser().absolute()

    if raw.endswith(("/", "\\")) or not destination.name.endswith(IMAGE_EXTENSION):
        if not destination.exists():
            raise FileNotFoundError(f"No such directory: {destination}")
        if destination.is_dir():
            return destination / f"{generate_unique_filename()}{IMAGE_EXTENSION}"

    if total > 1:
        return destination.with_name(f"{destination.stem}_{index}{destination.suffix}")
    return destination


async def _fetch(session: ClientSession, url: str) -> bytes:
    async with session.get(url) as response:
        if not is_successful_code(response.status):
            raise ArtifactWriteFailed(f"GET {url} returned status {response.status}")
        return await response.read()


async def save_images(
    path: str | os.PathLike[str],
    limit: int,
    descriptors: Sequence[ImageDescriptor],
    session: ClientSession | None = None,
    progress: bool = False,
) -> None:
    """
    Write every described image to a local file.

    Mixed batches are not supported: when the first descriptor has a URL all
    images are downloaded, otherwise all are decoded from base64. Errors are
    collected as images finish and the first one is raised after the whole
    batch is done.

    Args:
        path (str | os.PathLike[str]): Destination directory or .png file
        limit (int): Maximum number of images handled at once
        descriptors (Sequence[ImageDescriptor]): Images with url or b64_json set
        session (ClientSession | None): Session for downloads (a temporary one is used if None)
        progress (bool): Show a progress bar

    Raises:
        ArtifactWriteFailed: If any image could not be fetched, decoded or written
    """
    if not descriptors:
        return

    by_url = bool(descriptors[0].url)
    if not by_url and not descriptors[0].b64_json:
        logger.debug("First image carries neither a URL nor base64 data; nothing to save")
        return

    total = len(descriptors)
    errors: list[Exception] = []

    async def _save(index: int, http: ClientSession | None) -> None:
        item = descriptors[index]
        try:
            destination = to_image_path(index, path, total)
            if http is not None:
                if not item.url:
                    raise ArtifactWriteFailed(f"Image {index} has no URL")
                data = await _fetch(http, item.url)
            else:
                if not item.b64_json:
                    raise ArtifactWriteFailed(f"Image {index} has no base64 data")
                data = base64.b64decode(item.b64_json, validate=True)
            await asyncio.to_thread(destination.write_bytes, data)
            logger.debug(f"Saved image {index} to {destination}")
        except (
            OSError,
            ClientError,
            asyncio.TimeoutError,
            binascii.Error,
            ArtifactWriteFailed,
        ) as e:
            errors.append(e)

    async def _run(http: ClientSession | None) -> None:
        await run_bounded(
            total,
            limit,
            lambda i: _save(i, http),
            progress_desc="Saving images" if progress else None,
        )

    if by_url and session is None:
        async with ClientSession() as own_session:
            await _run(own_session)
    else:
        await _run(session if by_url else None)

    if errors:
        logger.warning(f"{len(errors)} / {total} images could not be saved")
        first = errors[0]
        if isinstance(first, ArtifactWriteFailed):
            raise first
        raise ArtifactWriteFailed(f"{type(first).__name__}: {first}") from first

    logger.info(f"Saved {total} images to {Path(os.fspath(path)).expanduser()}")
