"""Gemini adapter: screenshot solving plus streamed audio answers.

Audio answers are exposed as a plain generator of text chunks so the
audio pipeline can consume a network stream and the non-streaming
fallback the same way.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Sequence

from google import genai
from google.genai import types

from errors import ProviderError
from models import SolutionResult
from prompts import audio_prompt, get_prompt
from response_parser import parse_solution

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


def _chunk_text(chunk: Any) -> str:
    """Pull the first text part out of a Gemini response or stream chunk."""
    candidates = getattr(chunk, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return ""
    return getattr(parts[0], "text", None) or ""


class GeminiAdapter:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client: Optional[Any] = None,
    ) -> None:
        self._model = model or DEFAULT_MODEL
        self._client = client if client is not None else genai.Client(api_key=api_key.strip())

    @property
    def model(self) -> str:
        return self._model

    def solve_from_images(
        self,
        images: Sequence[bytes],
        language: str,
        interview_type: str,
    ) -> SolutionResult:
        prompt = get_prompt(interview_type, language)
        contents: list[Any] = [prompt.system]
        contents.extend(types.Part.from_bytes(data=image, mime_type="image/png") for image in images)

        logger.info("Sending %d screenshot(s) to Gemini model %s", len(images), self._model)
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
            text = _chunk_text(response)
        except Exception as exc:
            logger.error("Gemini request failed: %s", exc)
            raise ProviderError(f"Gemini processing failed: {exc}") from exc

        logger.debug("Raw Gemini response: %s", text)
        return parse_solution(text)

    def stream_from_audio(self, audio: bytes, mime_type: str, language: str) -> Iterator[str]:
        """Yield answer text chunks for a recorded question, in arrival order."""
        contents = self._audio_contents(audio, mime_type, language)
        count = 0
        try:
            for chunk in self._client.models.generate_content_stream(
                model=self._model, contents=contents
            ):
                text = _chunk_text(chunk)
                if text:
                    count += 1
                    yield text
        except Exception as exc:
            logger.error("Gemini audio stream failed after %d chunk(s): %s", count, exc)
            raise ProviderError(f"Gemini audio processing failed: {exc}") from exc
        logger.info("Gemini audio stream finished with %d chunk(s)", count)

    def answer_from_audio(self, audio: bytes, mime_type: str, language: str) -> str:
        contents = self._audio_contents(audio, mime_type, language)
        try:
            response = self._client.models.generate_content(model=self._model, contents=contents)
        except Exception as exc:
            logger.error("Gemini audio request failed: %s", exc)
            raise ProviderError(f"Gemini audio processing failed: {exc}") from exc
        return _chunk_text(response)

    def _audio_contents(self, audio: bytes, mime_type: str, language: str) -> list[Any]:
        return [audio_prompt(language), types.Part.from_bytes(data=audio, mime_type=mime_type)]
