from .frames import DEFAULT_TIMESTAMPS, ExtractedFrame, FrameSet
from .job import GenerationJob, JobStatus, OperationFailure
from .run import RunPaths

__all__ = [
    "DEFAULT_TIMESTAMPS",
    "ExtractedFrame",
    "FrameSet",
    "GenerationJob",
    "JobStatus",
    "OperationFailure",
    "RunPaths",
]
