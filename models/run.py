from dataclasses import dataclass
from pathlib import Path

VIEWS_DIRNAME = "views"
VIDEO_FILENAME = "video.mp4"
OUTPUT_FILENAME = "output.ply"


@dataclass(frozen=True)
class RunPaths:
    """Filesystem locations owned by one pipeline run, all under work_dir."""

    work_dir: Path

    @property
    def views_dir(self) -> Path:
        return self.work_dir / VIEWS_DIRNAME

    @property
    def video_path(self) -> Path:
        return self.work_dir / VIDEO_FILENAME

    @property
    def output_path(self) -> Path:
        return self.work_dir / OUTPUT_FILENAME
