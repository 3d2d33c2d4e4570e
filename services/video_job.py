"""Submit a Veo generation job and poll the long-running operation until it is done."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx
from pydantic import ValidationError

from models.job import GenerationJob, JobStatus, OperationFailure
from models.veo import (
    GenerateVideoResponse,
    Instance,
    LongRunningOperation,
    OperationStatus,
    PredictRequest,
    VideoParameters,
)
from services.errors import (
    MissingResultError,
    NetworkError,
    OperationError,
    PollTimeoutError,
    RemoteError,
    SubmissionError,
)
from services.settings import Settings, api_key_headers

logger = logging.getLogger(__name__)

PREDICT_METHOD = "predictLongRunning"

Sleep = Callable[[float], Awaitable[Any]]


def build_request(prompt: str) -> PredictRequest:
    return PredictRequest(
        instances=[Instance(prompt=prompt)],
        parameters=VideoParameters(
            person_generation="allow_all",
            aspect_ratio="16:9",
            sample_count=1,
            duration_seconds=5,
        ),
    )


async def submit_job(client: httpx.AsyncClient, settings: Settings, prompt: str) -> GenerationJob:
    url = f"{settings.api_base}/models/{settings.video_model}:{PREDICT_METHOD}"
    payload = build_request(prompt).model_dump(by_alias=True)

    logger.info("[video_job] Submitting video generation job...")
    try:
        response = await client.post(url, headers=api_key_headers(settings.api_key), json=payload)
    except httpx.RequestError as exc:
        raise NetworkError(f"Video job submission failed: {exc}") from exc
    if not response.is_success:
        raise SubmissionError(
            f"Video job submission returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text[:500],
        )
    try:
        operation = LongRunningOperation.model_validate_json(response.content)
    except ValidationError as exc:
        raise RemoteError("Video job submission returned no operation name", body=response.text[:500]) from exc

    logger.info("[video_job] Job submitted. Operation name: %s", operation.name)
    return GenerationJob(name=operation.name)


async def fetch_status(client: httpx.AsyncClient, settings: Settings, job: GenerationJob) -> OperationStatus:
    url = f"{settings.api_base}/{job.name}"
    try:
        response = await client.get(url, headers=api_key_headers(settings.api_key))
    except httpx.RequestError as exc:
        raise NetworkError(f"Polling {job.name} failed: {exc}") from exc
    job.polls += 1
    if not response.is_success:
        raise RemoteError(
            f"Polling {job.name} returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text[:500],
        )
    try:
        return OperationStatus.model_validate_json(response.content)
    except ValidationError as exc:
        raise RemoteError(f"Malformed status for {job.name}", body=response.text[:500]) from exc


def extract_video_uri(response: Any) -> str:
    """First generated sample's video URI. Raises MissingResultError when there is none."""
    if response is None:
        raise MissingResultError("Operation is done, but no response field was found.")
    try:
        parsed = GenerateVideoResponse.model_validate(response)
    except ValidationError as exc:
        raise MissingResultError("Operation response did not match the expected shape.") from exc
    samples = parsed.generate_video_response.generated_samples if parsed.generate_video_response else None
    if not samples:
        raise MissingResultError("Response did not contain any generated video samples.")
    video = samples[0].video
    if video is None or not video.uri:
        raise MissingResultError("First generated sample has no video URI.")
    return video.uri


async def poll_job(
    client: httpx.AsyncClient,
    settings: Settings,
    job: GenerationJob,
    *,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """
    Poll until the operation reports done, then return the video URI.

    Polls at least once and never again after done is seen. Unbounded unless
    settings.max_polls is set; cancel the awaiting task to abort.
    """
    job.status = JobStatus.RUNNING
    while True:
        status = await fetch_status(client, settings, job)

        if not status.done:
            if settings.max_polls is not None and job.polls >= settings.max_polls:
                raise PollTimeoutError(f"Operation {job.name} still running after {job.polls} polls")
            logger.info("[video_job] Video not ready yet. Checking again in %g seconds...", settings.poll_interval)
            await sleep(settings.poll_interval)
            continue

        logger.info("[video_job] Video generation complete after %d polls.", job.polls)
        if status.error is not None:
            job.status = JobStatus.FAILED
            job.error = OperationFailure(code=status.error.code, message=status.error.message)
            raise OperationError(status.error.code, status.error.message)

        try:
            job.video_uri = extract_video_uri(status.response)
        except MissingResultError:
            job.status = JobStatus.FAILED
            raise
        job.status = JobStatus.SUCCEEDED
        return job.video_uri


async def generate_video(
    client: httpx.AsyncClient,
    settings: Settings,
    prompt: str,
    *,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """Submit prompt to Veo and wait for the generated video's URI."""
    job = await submit_job(client, settings, prompt)
    return await poll_job(client, settings, job, sleep=sleep)
