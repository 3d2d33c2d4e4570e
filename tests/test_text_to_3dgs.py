"""Tests for the text-to-3dgs driver: views subprocess, reconstruction upload, viewer launch."""

from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest

import text_to_3dgs
from models import RunPaths
from services.errors import NoInputError, RemoteError, SubprocessError
from services.settings import Settings, ViewerSettings

SETTINGS = Settings(api_key="", reconstruction_url="http://recon.test/reconstruction")
PLY_BYTES = b"ply\nformat binary_little_endian 1.0\nend_header\n"

VIEWS_SCRIPT = """
import os, sys
os.makedirs("views", exist_ok=True)
open("prompt.txt", "w").write(sys.argv[1])
open("work_dir.txt", "w").write(os.environ["WORK_DIR"])
for i in range(6):
    open(os.path.join("views", f"{i}.jpg"), "wb").write(b"jpeg")
"""
NO_VIEWS_SCRIPT = "import sys"
FAILING_SCRIPT = "raise SystemExit(2)"


class _FakeViewer:
    def __init__(self) -> None:
        self.launched: list[tuple[Path, Path]] = []

    async def ensure(self, viewer: ViewerSettings) -> Path:
        return viewer.binary

    async def launch(self, binary: Path, asset_path: Path) -> None:
        self.launched.append((binary, asset_path))


@pytest.fixture
def fake_viewer(monkeypatch: pytest.MonkeyPatch) -> _FakeViewer:
    viewer = _FakeViewer()
    monkeypatch.setattr(text_to_3dgs, "ensure_viewer", viewer.ensure)
    monkeypatch.setattr(text_to_3dgs, "launch_viewer", viewer.launch)
    return viewer


def _reconstruction_server(uploads: list[httpx.Request], status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        uploads.append(request)
        if status != 200:
            return httpx.Response(status, text="reconstruction failed")
        return httpx.Response(200, content=PLY_BYTES)

    return httpx.MockTransport(handler)


def _viewer_settings(tmp_path: Path) -> ViewerSettings:
    return ViewerSettings(source_dir=tmp_path / "brush", binary=tmp_path / "brush" / "brush_app")


@pytest.mark.anyio
async def test_driver_runs_all_stages(tmp_path: Path, fake_viewer: _FakeViewer) -> None:
    paths = RunPaths(tmp_path / "run")
    uploads: list[httpx.Request] = []
    viewer = _viewer_settings(tmp_path)

    async with httpx.AsyncClient(transport=_reconstruction_server(uploads)) as client:
        output = await text_to_3dgs.run(
            "a panda meditating",
            SETTINGS,
            paths,
            client,
            viewer,
            views_command=[sys.executable, "-c", VIEWS_SCRIPT],
        )

    assert output == paths.output_path
    assert output.read_bytes() == PLY_BYTES
    assert (paths.work_dir / "prompt.txt").read_text() == "a panda meditating"
    assert (paths.work_dir / "work_dir.txt").read_text() == str(paths.work_dir)
    assert len(uploads) == 1
    body = uploads[0].content
    assert body.count(b'name="images"') == 6
    assert b'filename="5.jpg"' in body
    assert fake_viewer.launched == [(viewer.binary, paths.output_path)]


@pytest.mark.anyio
async def test_driver_stops_when_views_are_missing(tmp_path: Path, fake_viewer: _FakeViewer) -> None:
    uploads: list[httpx.Request] = []

    async with httpx.AsyncClient(transport=_reconstruction_server(uploads)) as client:
        with pytest.raises(NoInputError):
            await text_to_3dgs.run(
                "a panda",
                SETTINGS,
                RunPaths(tmp_path / "run"),
                client,
                _viewer_settings(tmp_path),
                views_command=[sys.executable, "-c", NO_VIEWS_SCRIPT],
            )

    assert uploads == []
    assert fake_viewer.launched == []


@pytest.mark.anyio
async def test_driver_propagates_views_tool_failure(tmp_path: Path, fake_viewer: _FakeViewer) -> None:
    uploads: list[httpx.Request] = []

    async with httpx.AsyncClient(transport=_reconstruction_server(uploads)) as client:
        with pytest.raises(SubprocessError) as excinfo:
            await text_to_3dgs.run(
                "a panda",
                SETTINGS,
                RunPaths(tmp_path / "run"),
                client,
                _viewer_settings(tmp_path),
                views_command=[sys.executable, "-c", FAILING_SCRIPT],
            )

    assert excinfo.value.returncode == 2
    assert uploads == []


@pytest.mark.anyio
async def test_driver_does_not_launch_viewer_after_reconstruction_error(
    tmp_path: Path, fake_viewer: _FakeViewer
) -> None:
    paths = RunPaths(tmp_path / "run")
    uploads: list[httpx.Request] = []

    async with httpx.AsyncClient(transport=_reconstruction_server(uploads, status=500)) as client:
        with pytest.raises(RemoteError, match="reconstruction failed"):
            await text_to_3dgs.run(
                "a panda",
                SETTINGS,
                paths,
                client,
                _viewer_settings(tmp_path),
                views_command=[sys.executable, "-c", VIEWS_SCRIPT],
            )

    assert not paths.output_path.exists()
    assert fake_viewer.launched == []


def test_main_without_prompt_exits_non_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    assert text_to_3dgs.main([]) == 1
