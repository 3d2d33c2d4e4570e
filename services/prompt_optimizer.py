"""Prompt alchemy: ask Gemini to rewrite the user's prompt for video generation."""

from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from models.gemini import Content, GenerateContentRequest, GenerationConfig, Part, StreamChunk
from services.errors import EmptyResultError, NetworkError, RemoteError
from services.settings import Settings, api_key_headers

logger = logging.getLogger(__name__)

STREAM_METHOD = "streamGenerateContent"
TEMPERATURE = 1.4
TOP_P = 0.9

META_PROMPT_TEMPLATE = """
You are a master prompt engineer specializing in text-to-video generation.
Your task is to take a user's base prompt and enhance it to be more descriptive, dynamic, and cinematic for the Veo video generation model.
Add details about camera view movement, lighting, tracking, and composition while preserving the core subject.

Your output MUST be only the rewritten prompt text and nothing else.

**User's Base Prompt:**
"{user_prompt}"
"""

_chunks_adapter = TypeAdapter(list[StreamChunk])


def build_meta_prompt(user_prompt: str) -> str:
    return META_PROMPT_TEMPLATE.replace("{user_prompt}", user_prompt)


def build_request(user_prompt: str) -> GenerateContentRequest:
    return GenerateContentRequest(
        contents=[Content(role="user", parts=[Part(text=build_meta_prompt(user_prompt))])],
        generation_config=GenerationConfig(
            response_mime_type="text/plain",
            temperature=TEMPERATURE,
            top_p=TOP_P,
        ),
    )


def parse_stream_response(body: str) -> str:
    """
    Join the streamed partial results into one string.

    The body is a JSON array; each record contributes the text of its first
    candidate's first part, in arrival order. Records without one are skipped.
    """
    try:
        chunks = _chunks_adapter.validate_json(body)
    except ValidationError as exc:
        raise RemoteError(f"Failed to parse Gemini's streaming response: {body[:300]}", body=body) from exc
    return "".join(text for chunk in chunks if (text := chunk.first_text()))


async def optimize_prompt(client: httpx.AsyncClient, settings: Settings, user_prompt: str) -> str:
    """Rewrite user_prompt with Gemini. Raises RemoteError / EmptyResultError / NetworkError."""
    url = f"{settings.api_base}/models/{settings.prompt_model}:{STREAM_METHOD}"
    payload = build_request(user_prompt).model_dump(by_alias=True, exclude_none=True)

    logger.info("[prompt_optimizer] Asking Gemini to optimize prompt...")
    try:
        response = await client.post(url, headers=api_key_headers(settings.api_key), json=payload)
    except httpx.RequestError as exc:
        raise NetworkError(f"Gemini request failed: {exc}") from exc
    if not response.is_success:
        raise RemoteError(
            f"Gemini returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text[:500],
        )

    optimized = parse_stream_response(response.text)
    if not optimized:
        raise EmptyResultError("Gemini did not return an optimized prompt.")
    logger.info("[prompt_optimizer] Successfully optimized prompt: %r", optimized)
    return optimized
