"""Download the generated video from its signed URI."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from services.errors import NetworkError, RemoteError
from services.settings import api_key_headers

logger = logging.getLogger(__name__)


async def download_video(client: httpx.AsyncClient, uri: str, api_key: str, dest: Path) -> Path:
    """
    Fetch uri (with the API key appended) fully into memory and write it to dest.

    Overwrites dest. Raises NetworkError / RemoteError; write failures surface as OSError.
    """
    try:
        response = await client.get(uri, headers=api_key_headers(api_key), follow_redirects=True)
    except httpx.RequestError as exc:
        raise NetworkError(f"Video download failed: {exc}") from exc
    if not response.is_success:
        raise RemoteError(
            f"Video download returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text[:500],
        )

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(response.content)
    logger.info("[video_retriever] Downloaded %d bytes to %s", len(response.content), dest)
    return dest
