"""Resolves and fetches the model artifact from the deployment base."""

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote
from urllib.parse import urlparse

import httpx

from app.core.config import settings
from app.core.exceptions import AssetFetchError
from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

HTTP_SCHEMES = ("http", "https")


def build_asset_locations(base: str, filename: str, prefix: str = "assets") -> list[str]:
    """Returns the candidate locations of ``filename`` in load order.

    The primary location doubles the assets segment (``assets/assets/<file>``),
    which is where web builds nest bundled assets; the fallback uses a single
    segment.

    Args:
        base: Deployment base, an http(s) URL or a local directory.
        filename: Model file name.
        prefix: Assets segment name.

    Returns:
        ``[primary, fallback]``.
    """
    if not base:
        raise ConfigurationError("Asset base URL is empty")
    if not filename:
        raise ConfigurationError("Model filename is empty")

    root = base if base.endswith("/") else base + "/"
    segment = prefix.strip("/")
    return [
        f"{root}{segment}/{segment}/{filename}",
        f"{root}{segment}/{filename}",
    ]


def _is_http(location: str) -> bool:
    return urlparse(location).scheme in HTTP_SCHEMES


def _local_path(location: str) -> Path:
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(location)


async def _fetch_http(location: str, timeout: float, transport: httpx.AsyncBaseTransport | None) -> bytes:
    async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
        try:
            res = await client.get(location)
            res.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AssetFetchError(f"HTTP {e.response.status_code} for {location}") from e
        except httpx.HTTPError as e:
            raise AssetFetchError(f"Request to {location} failed: {e}") from e
        return res.content


async def _fetch_file(location: str) -> bytes:
    path = _local_path(location)
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise AssetFetchError(f"Cannot read {path}: {e}") from e


async def fetch_asset(
    location: str,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    """Fetches the raw bytes stored at ``location``.

    Raises:
        AssetFetchError: On HTTP errors, unreadable files or an empty payload.
    """
    if _is_http(location):
        content = await _fetch_http(location, timeout or settings.asset_fetch_timeout, transport)
    else:
        content = await _fetch_file(location)

    if not content:
        raise AssetFetchError(f"Empty model payload at {location}")
    logger.debug("Fetched %d bytes from %s", len(content), location)
    return content
