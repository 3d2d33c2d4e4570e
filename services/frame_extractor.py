"""Frame extraction: sample the generated clip at fixed timestamps and save JPEG views."""

from __future__ import annotations

import logging
import math
import shutil
from fractions import Fraction
from itertools import islice
from pathlib import Path
from typing import Sequence

import av
from av import VideoFrame

from models.frames import DEFAULT_TIMESTAMPS, ExtractedFrame, FrameSet
from services.errors import DecodeError, OutOfRangeError

logger = logging.getLogger(__name__)

JPEG_FORMAT = "JPEG"


def probe_frame_rate(video_path: Path) -> Fraction:
    """Average frame rate of the first video stream."""
    try:
        with av.open(str(video_path)) as container:
            if not container.streams.video:
                raise DecodeError(f"{video_path} has no video stream")
            stream = container.streams.video[0]
            rate = stream.average_rate or stream.guessed_rate
    except av.error.FFmpegError as exc:
        raise DecodeError(f"Failed to open {video_path}: {exc}") from exc
    if not rate:
        raise DecodeError(f"Could not determine the frame rate of {video_path}")
    return Fraction(rate)


def frame_index_for(timestamp: float, frame_rate: Fraction | float) -> int:
    return int(math.floor(timestamp * float(frame_rate)))


def decode_frame_at(video_path: Path, frame_index: int) -> VideoFrame:
    """
    Decode from the start of a fresh stream up to frame_index.

    Raises OutOfRangeError if the stream ends first.
    """
    try:
        with av.open(str(video_path)) as container:
            frames = container.decode(video=0)
            frame = next(islice(frames, frame_index, None), None)
    except av.error.FFmpegError as exc:
        raise DecodeError(f"Failed to decode frame at position {frame_index}: {exc}") from exc
    if frame is None:
        raise OutOfRangeError(
            f"Frame {frame_index} is past the end of {video_path}; timestamp may be out of video duration."
        )
    return frame


def reset_views_dir(views_dir: Path) -> None:
    if views_dir.exists():
        shutil.rmtree(views_dir)
    views_dir.mkdir(parents=True)


def extract_frames(
    video_path: Path,
    views_dir: Path,
    timestamps: Sequence[float] = DEFAULT_TIMESTAMPS,
) -> FrameSet:
    """
    Write one JPEG per timestamp to views_dir as 0.jpg, 1.jpg, ... in timestamp order.

    views_dir is wiped first, so a run never sees a previous run's frames.
    """
    reset_views_dir(views_dir)
    frame_rate = probe_frame_rate(video_path)
    frame_set = FrameSet(directory=views_dir)

    for i, timestamp in enumerate(timestamps):
        target = frame_index_for(timestamp, frame_rate)
        frame = decode_frame_at(video_path, target)
        output_path = views_dir / f"{i}.jpg"
        frame.to_image().save(output_path, format=JPEG_FORMAT)
        frame_set.frames.append(
            ExtractedFrame(index=i, timestamp=timestamp, frame_index=target, path=output_path)
        )
        logger.info("[frame_extractor] Saved frame at %ss (frame %d) to %s", timestamp, target, output_path)

    return frame_set
