"""Upload extracted views to the local reconstruction server and keep the returned asset."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path

import httpx

from services.errors import NetworkError, NoInputError, RemoteError

logger = logging.getLogger(__name__)

IMAGE_FIELD = "images"
IMAGE_GLOB = "*.jpg"
IMAGE_CONTENT_TYPE = "image/jpeg"


def collect_images(views_dir: Path) -> list[Path]:
    return sorted(p for p in views_dir.glob(IMAGE_GLOB) if p.is_file())


async def reconstruct(client: httpx.AsyncClient, views_dir: Path, url: str) -> bytes:
    """
    POST every JPEG in views_dir as one multipart request and return the raw body.

    Raises NoInputError without sending anything if views_dir holds no images.
    """
    image_paths = collect_images(views_dir) if views_dir.is_dir() else []
    if not image_paths:
        raise NoInputError(f"No images found in {views_dir}. Did text-to-view run correctly?")

    logger.info("[reconstruction] Uploading %d images to %s", len(image_paths), url)
    with ExitStack() as stack:
        files = [
            (IMAGE_FIELD, (path.name, stack.enter_context(path.open("rb")), IMAGE_CONTENT_TYPE))
            for path in image_paths
        ]
        try:
            response = await client.post(url, files=files)
        except httpx.RequestError as exc:
            raise NetworkError(
                f"Failed to send request to reconstruction server. Is it running at {url}? ({exc})"
            ) from exc

    if not response.is_success:
        error_body = response.text
        raise RemoteError(
            f"Reconstruction server returned an error: {error_body}",
            status_code=response.status_code,
            body=error_body,
        )
    return response.content


def save_asset(data: bytes, path: Path) -> Path:
    """Write the reconstructed asset, replacing any previous run's file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("[reconstruction] Saved %d bytes to %s", len(data), path)
    return path
