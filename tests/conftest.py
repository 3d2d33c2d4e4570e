from pathlib import Path
from typing import Callable

import av
import numpy as np
import pytest

CLIP_FPS = 10
CLIP_SIZE = 64
SHADE_STEP = 5


def write_clip(path: Path, *, seconds: float, fps: int = CLIP_FPS) -> Path:
    """Encode a grey ramp clip with PyAV: frame i is filled with shade i * SHADE_STEP."""
    with av.open(str(path), "w") as container:
        stream = container.add_stream("mpeg4", rate=fps)
        stream.width = CLIP_SIZE
        stream.height = CLIP_SIZE
        stream.pix_fmt = "yuv420p"
        for i in range(int(seconds * fps)):
            shade = (i * SHADE_STEP) % 256
            pixels = np.full((CLIP_SIZE, CLIP_SIZE, 3), shade, dtype=np.uint8)
            frame = av.VideoFrame.from_ndarray(pixels, format="rgb24").reformat(format="yuv420p")
            frame.pts = i
            for packet in stream.encode(frame):
                container.mux(packet)
        for packet in stream.encode():
            container.mux(packet)
    return path


@pytest.fixture
def make_clip(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str = "clip.mp4", *, seconds: float = 5) -> Path:
        return write_clip(tmp_path / name, seconds=seconds)

    return _make


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
