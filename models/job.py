from dataclasses import dataclass
from enum import Enum


class JobStatus(str, Enum):
    SUBMITTED = "submitted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class OperationFailure:
    code: int
    message: str


@dataclass
class GenerationJob:
    name: str                              # e.g. models/veo-2.0-generate-001/operations/abc
    status: JobStatus = JobStatus.SUBMITTED
    polls: int = 0
    video_uri: str | None = None
    error: OperationFailure | None = None

    @property
    def done(self) -> bool:
        return self.status in (JobStatus.SUCCEEDED, JobStatus.FAILED)
