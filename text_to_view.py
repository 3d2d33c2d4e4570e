"""
text-to-view: prompt -> Gemini-optimized prompt -> Veo video -> views/0.jpg..5.jpg

    export GEMINI_API_KEY="..."
    text-to-view a panda meditating
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Sequence

import httpx
from dotenv import find_dotenv, load_dotenv

from models.frames import FrameSet
from models.run import RunPaths
from services.errors import PipelineError, SetupError
from services.frame_extractor import extract_frames
from services.prompt_optimizer import optimize_prompt
from services.settings import Settings, get_work_dir, load_settings
from services.video_job import Sleep, generate_video
from services.video_retriever import download_video

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = httpx.Timeout(120.0, connect=10.0)


def parse_prompt(args: Sequence[str]) -> str:
    """All trailing arguments joined by spaces. Raises SetupError when nothing is left."""
    prompt = " ".join(args).strip()
    if not prompt:
        raise SetupError("Please provide a prompt as a command-line argument.")
    return prompt


async def resolve_prompt(client: httpx.AsyncClient, settings: Settings, user_prompt: str) -> str:
    """Optimized prompt, or user_prompt unchanged if optimization fails for any reason."""
    try:
        return await optimize_prompt(client, settings, user_prompt)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Could not optimize prompt, using original: %s", exc)
        return user_prompt


async def run(
    user_prompt: str,
    settings: Settings,
    paths: RunPaths,
    client: httpx.AsyncClient,
    *,
    sleep: Sleep = asyncio.sleep,
) -> FrameSet:
    prompt = await resolve_prompt(client, settings, user_prompt)

    video_uri = await generate_video(client, settings, prompt, sleep=sleep)
    logger.info("Video is available at: %s", video_uri)

    video_path = await download_video(client, video_uri, settings.api_key, paths.video_path)
    try:
        logger.info("Starting frame extraction...")
        frame_set = extract_frames(video_path, paths.views_dir)
        logger.info("Frame extraction successful!")
    finally:
        video_path.unlink(missing_ok=True)
        logger.info("Cleaned up temporary video file: %s", video_path)
    return frame_set


async def _run_with_client(user_prompt: str, settings: Settings, paths: RunPaths) -> FrameSet:
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        return await run(user_prompt, settings, paths, client)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        user_prompt = parse_prompt(sys.argv[1:] if argv is None else argv)
        settings = load_settings()
        paths = RunPaths(get_work_dir().resolve())
        asyncio.run(_run_with_client(user_prompt, settings, paths))
    except (PipelineError, OSError) as exc:
        logger.error("text-to-view failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
