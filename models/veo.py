"""Wire models for the Veo predictLongRunning endpoint and its operations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Instance(BaseModel):
    prompt: str


class VideoParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person_generation: str = Field(default="allow_all", alias="personGeneration")
    aspect_ratio: str = Field(default="16:9", alias="aspectRatio")
    sample_count: int = Field(default=1, alias="sampleCount")
    duration_seconds: int = Field(default=5, alias="durationSeconds")


class PredictRequest(BaseModel):
    instances: list[Instance]
    parameters: VideoParameters = Field(default_factory=VideoParameters)


class LongRunningOperation(BaseModel):
    name: str


class OperationErrorBody(BaseModel):
    code: int = 0
    message: str = ""


class OperationStatus(BaseModel):
    """
    Status of a long-running operation.

    ``response`` stays untyped: it is only interpreted once the
    operation is done and carries no error (see GenerateVideoResponse).
    """

    done: bool | None = None
    error: OperationErrorBody | None = None
    response: Any = None


class Video(BaseModel):
    uri: str = ""


class GeneratedSample(BaseModel):
    video: Video | None = None


class GeneratedSamples(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_samples: list[GeneratedSample] | None = Field(default=None, alias="generatedSamples")


class GenerateVideoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generate_video_response: GeneratedSamples | None = Field(default=None, alias="generateVideoResponse")
