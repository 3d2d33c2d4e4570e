"""External commands: the views sub-tool, and building/launching the splat viewer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Sequence

from services.errors import SubprocessError
from services.settings import ViewerSettings

logger = logging.getLogger(__name__)

VIEWER_FLAG = "--with-viewer"


async def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    """Run args to completion, inheriting stdio. Raises SubprocessError on launch failure or non-zero exit."""
    command = [str(a) for a in args]
    logger.info("[tools] Running: %s", " ".join(command))
    try:
        process = await asyncio.create_subprocess_exec(*command, cwd=cwd, env=env)
    except OSError as exc:
        raise SubprocessError(f"Failed to execute {command[0]}: {exc}", command=command) from exc
    returncode = await process.wait()
    if returncode != 0:
        raise SubprocessError(
            f"{command[0]} exited with non-zero status {returncode}",
            command=command,
            returncode=returncode,
        )


async def ensure_viewer(viewer: ViewerSettings) -> Path:
    """Return the viewer binary, building it first if it does not exist yet."""
    if viewer.binary.exists():
        return viewer.binary

    logger.info("[tools] '%s' not found, compiling it first...", viewer.binary.name)
    try:
        await run_command(viewer.build_command, cwd=viewer.source_dir)
    except SubprocessError as exc:
        raise SubprocessError(
            f"Failed to compile viewer: {exc}",
            command=exc.command,
            returncode=exc.returncode,
        ) from exc
    if not viewer.binary.exists():
        raise SubprocessError(
            f"Viewer build succeeded but {viewer.binary} is still missing",
            command=viewer.build_command,
        )
    logger.info("[tools] '%s' compiled successfully.", viewer.binary.name)
    return viewer.binary


async def launch_viewer(binary: Path, asset_path: Path) -> None:
    await run_command([str(binary), str(asset_path), VIEWER_FLAG])
