from __future__ import annotations

import os
import posixpath
import re
import uuid
from typing import TypeAlias
from urllib.parse import urlsplit, urlunsplit

from loguru import logger
from tqdm import tqdm

from parallai.errors import InvalidBaseURL

JSONValue: TypeAlias = (
    str | int | float | bool | None | dict[str, "JSONValue"] | list["JSONValue"]
)

_HOST_RE = re.compile(r"[A-Za-z0-9._~%!$&'()*+,;=:-]+")


def url_build(base_url: str, *path_parts: str) -> str:
    """
    Join a base URL with path segments.

    Duplicate separators are collapsed, "." and ".." are resolved and the
    segments do not need leading or trailing slashes. The query string and
    fragment of the base URL are kept.

    Args:
        base_url (str): Absolute http(s) URL, e.g. "https://api.openai.com/v1"
        *path_parts (str): Path segments to append

    Returns:
        str: The joined URL

    Raises:
        InvalidBaseURL: If base_url is not an absolute http(s) URL

    Example:
        >>> url_build("https://api.openai.com/v1/", "/models", "gpt-4o")
        'https://api.openai.com/v1/models/gpt-4o'
    """
    try:
        parts = urlsplit(base_url)
        host = parts.hostname
        # Raises ValueError for a non-numeric or out-of-range port
        parts.port
    except ValueError as e:
        raise InvalidBaseURL(f"Invalid base URL: {base_url!r}") from e

    if parts.scheme not in ("http", "https") or not host or not _HOST_RE.fullmatch(host):
        raise InvalidBaseURL(f"Invalid base URL: {base_url!r}")

    joined = "/".join(p for p in (parts.path, *path_parts) if p)
    path = re.sub(r"/+", "/", joined)
    if path:
        path = posixpath.normpath("/" + path.lstrip("/"))

    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def is_successful_code(status: int) -> bool:
    """Different endpoints answer 200, 201, 202, 204 and so on; all of [200, 400) is success."""
    return 200 <= status < 400


def default_parallel_tasks() -> int:
    """Default concurrency limit: twice the number of available processors."""
    return (os.cpu_count() or 1) * 2


def generate_unique_filename() -> str:
    """
    Generate a random, collision-resistant base filename.

    Returns:
        str: 32 lowercase hex characters
    """
    return uuid.uuid4().hex


def setup_logger(logging_level: int | str) -> None:
    """
    Configure logger with clean format.

    Messages are written through tqdm so they do not break progress bars.

    Args:
        logging_level (int | str): Loguru logging level (20=INFO, 10=DEBUG)
    """
    logger.remove()

    level_no = logger.level(logging_level).no if isinstance(logging_level, str) else logging_level

    # Show module info only at DEBUG level (10 or lower)
    if level_no <= 10:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
    else:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        )

    logger.add(
        lambda msg: tqdm.write(msg, end=""),
        format=log_format,
        colorize=True,
        level=logging_level,
    )
