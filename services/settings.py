"""Environment-driven settings for the text-to-view and text-to-3dgs entry points."""

from __future__ import annotations

import os
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path

from services.errors import SetupError

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_PROMPT_MODEL = "gemini-2.5-flash-preview-05-20"
DEFAULT_VIDEO_MODEL = "veo-2.0-generate-001"
DEFAULT_POLL_INTERVAL_SECONDS = 6.0
DEFAULT_RECONSTRUCTION_URL = "http://localhost:8888/reconstruction"
DEFAULT_VIEWER_DIR = "./tools/brush"
VIEWER_BINARY_RELPATH = "target/release/brush_app"
API_KEY_HEADER = "x-goog-api-key"


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def get_api_key() -> str:
    """GEMINI_API_KEY from env. Raises SetupError when unset or blank."""
    api_key = _env("GEMINI_API_KEY")
    if not api_key:
        raise SetupError("GEMINI_API_KEY environment variable not set")
    return api_key


def api_key_headers(api_key: str) -> dict[str, str]:
    """Credential header for Google APIs, sent instead of a ?key= query parameter."""
    return {API_KEY_HEADER: api_key}


def get_poll_interval() -> float:
    raw = _env("POLL_INTERVAL_SECONDS")
    if not raw:
        return DEFAULT_POLL_INTERVAL_SECONDS
    try:
        interval = float(raw)
    except ValueError as exc:
        raise SetupError(f"POLL_INTERVAL_SECONDS must be a number, got {raw!r}") from exc
    if interval < 0:
        raise SetupError(f"POLL_INTERVAL_SECONDS must not be negative, got {raw!r}")
    return interval


def get_max_polls() -> int | None:
    """POLL_MAX_ATTEMPTS from env; None (unbounded) when unset."""
    raw = _env("POLL_MAX_ATTEMPTS")
    if not raw:
        return None
    try:
        max_polls = int(raw)
    except ValueError as exc:
        raise SetupError(f"POLL_MAX_ATTEMPTS must be an integer, got {raw!r}") from exc
    if max_polls < 1:
        raise SetupError(f"POLL_MAX_ATTEMPTS must be at least 1, got {raw!r}")
    return max_polls


@dataclass(frozen=True)
class ViewerSettings:
    source_dir: Path
    binary: Path

    @property
    def build_command(self) -> list[str]:
        return ["cargo", "build", "--release", "--bin", self.binary.stem]


def get_viewer_settings() -> ViewerSettings:
    source_dir = Path(_env("VIEWER_DIR", DEFAULT_VIEWER_DIR))
    binary = _env("VIEWER_BINARY")
    return ViewerSettings(
        source_dir=source_dir,
        binary=Path(binary) if binary else source_dir / VIEWER_BINARY_RELPATH,
    )


@dataclass(frozen=True)
class Settings:
    api_key: str
    api_base: str = DEFAULT_API_BASE
    prompt_model: str = DEFAULT_PROMPT_MODEL
    video_model: str = DEFAULT_VIDEO_MODEL
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_polls: int | None = None
    reconstruction_url: str = DEFAULT_RECONSTRUCTION_URL


def load_settings(*, require_api_key: bool = True) -> Settings:
    """
    Build Settings from the environment.

    The driver only talks to the local reconstruction server, so it may pass
    require_api_key=False; its views subprocess checks the key itself.
    """
    api_key = get_api_key() if require_api_key else _env("GEMINI_API_KEY")
    return Settings(
        api_key=api_key,
        api_base=_env("GEMINI_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        prompt_model=_env("PROMPT_MODEL", DEFAULT_PROMPT_MODEL),
        video_model=_env("VIDEO_MODEL", DEFAULT_VIDEO_MODEL),
        poll_interval=get_poll_interval(),
        max_polls=get_max_polls(),
        reconstruction_url=_env("RECONSTRUCTION_URL", DEFAULT_RECONSTRUCTION_URL),
    )


def get_work_dir() -> Path:
    """WORK_DIR from env, else the current directory."""
    return Path(_env("WORK_DIR", "."))


def get_views_command() -> list[str]:
    """
    Command that produces views/ for a prompt (the prompt is appended as the last argument).

    VIEWS_COMMAND is split shell-style; defaults to this interpreter running text_to_view.
    """
    raw = _env("VIEWS_COMMAND")
    return shlex.split(raw) if raw else [sys.executable, "-m", "text_to_view"]
