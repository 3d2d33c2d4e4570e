"""Error taxonomy for the pipeline. Everything a stage raises derives from PipelineError."""


class PipelineError(Exception):
    """A pipeline stage failed; the run cannot continue."""


class SetupError(PipelineError):
    """Missing credential, argument or configuration."""


class RemoteError(PipelineError):
    """An external service returned a non-success status or an unparseable body."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SubmissionError(RemoteError):
    """The video generation job could not be submitted."""


class PollTimeoutError(RemoteError):
    """The operation was still running after the configured number of polls."""


class OperationError(PipelineError):
    """The long-running operation finished with an explicit error payload."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Operation finished with an error: (Code {code}) {message}")
        self.code = code
        self.message = message


class EmptyResultError(PipelineError):
    """The text-generation service succeeded but produced no text."""


class MissingResultError(PipelineError):
    """The operation succeeded but carried no generated video."""


class NoInputError(PipelineError):
    """No frame images were found to upload."""


class NetworkError(PipelineError):
    """The request never got a response (connection refused, timeout, ...)."""


class DecodeError(PipelineError):
    """The video could not be opened or decoded."""


class OutOfRangeError(DecodeError):
    """A requested timestamp lies beyond the end of the decoded stream."""


class SubprocessError(PipelineError):
    """An external command could not be launched or exited non-zero."""

    def __init__(self, message: str, *, command: list[str] | None = None, returncode: int | None = None) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
