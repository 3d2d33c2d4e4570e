from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ExtractedFrame:
    index: int                 # position in the configured timestamp list
    timestamp: float           # seconds into the clip
    frame_index: int           # floor(timestamp * frame_rate)
    path: Path                 # views/{index}.jpg


@dataclass
class FrameSet:
    directory: Path
    frames: list[ExtractedFrame] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        return [f.path for f in self.frames]


# Seconds into a 5s clip; two views near each of the start, middle and end.
DEFAULT_TIMESTAMPS: tuple[float, ...] = (0.3, 0.7, 2.3, 2.7, 4.3, 4.7)
