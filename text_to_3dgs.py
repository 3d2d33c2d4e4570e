"""
text-to-3dgs: run text-to-view, reconstruct a gaussian splat from views/, open it in the viewer.

Expects the reconstruction server to be listening already (RECONSTRUCTION_URL,
default http://localhost:8888/reconstruction).
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

import httpx
from dotenv import find_dotenv, load_dotenv

from models.run import RunPaths
from services.errors import NoInputError, PipelineError
from services.reconstruction import collect_images, reconstruct, save_asset
from services.settings import (
    Settings,
    ViewerSettings,
    get_viewer_settings,
    get_views_command,
    get_work_dir,
    load_settings,
)
from services.tools import ensure_viewer, launch_viewer, run_command
from text_to_view import HTTP_TIMEOUT, parse_prompt

logger = logging.getLogger(__name__)


async def generate_views(views_command: Sequence[str], prompt: str, paths: RunPaths) -> list[Path]:
    """Run the views sub-tool inside the run directory and return the images it left in views/."""
    paths.work_dir.mkdir(parents=True, exist_ok=True)
    env = {**os.environ, "WORK_DIR": str(paths.work_dir)}
    await run_command([*views_command, prompt], cwd=paths.work_dir, env=env)

    images = collect_images(paths.views_dir) if paths.views_dir.is_dir() else []
    if not images:
        raise NoInputError(f"No images found in {paths.views_dir}. Did text-to-view run correctly?")
    return images


async def run(
    prompt: str,
    settings: Settings,
    paths: RunPaths,
    client: httpx.AsyncClient,
    viewer: ViewerSettings,
    *,
    views_command: Sequence[str],
) -> Path:
    logger.info("--- Step 1: Running text-to-view ---")
    images = await generate_views(views_command, prompt, paths)
    logger.info("--- Step 1: text-to-view completed successfully (%d views) ---", len(images))

    logger.info("--- Step 2: Reconstructing 3DGS model from views ---")
    asset = await reconstruct(client, paths.views_dir, settings.reconstruction_url)
    save_asset(asset, paths.output_path)
    logger.info("--- Step 2: Reconstruction successful! Model saved to %s ---", paths.output_path)
    logger.info("The entire pipeline is complete. Your 3DGS model is ready in %s", paths.output_path)

    logger.info("--- Step 3: Launching viewer ---")
    binary = await ensure_viewer(viewer)
    await launch_viewer(binary, paths.output_path)
    return paths.output_path


async def _run_with_client(
    prompt: str,
    settings: Settings,
    paths: RunPaths,
    viewer: ViewerSettings,
    views_command: Sequence[str],
) -> Path:
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        return await run(prompt, settings, paths, client, viewer, views_command=views_command)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        prompt = parse_prompt(sys.argv[1:] if argv is None else argv)
        settings = load_settings(require_api_key=False)
        paths = RunPaths(get_work_dir().resolve())
        viewer = get_viewer_settings()
        asyncio.run(_run_with_client(prompt, settings, paths, viewer, get_views_command()))
    except (PipelineError, OSError) as exc:
        logger.error("text-to-3dgs failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
