"""OpenAI chat-completions adapter for screenshot solving."""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterator, Optional, Sequence

from openai import OpenAI

from errors import ProviderError, UnsupportedOperation
from models import SolutionResult
from prompts import get_prompt
from response_parser import parse_solution

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"


def _image_part(image: bytes) -> dict[str, Any]:
    encoded = base64.b64encode(image).decode("ascii")
    return {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{encoded}"}}


class OpenAIAdapter:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client: Optional[Any] = None,
    ) -> None:
        self._model = model or DEFAULT_MODEL
        self._client = client if client is not None else OpenAI(api_key=api_key.strip())

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
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": prompt.system},
            {"role": "user", "content": [{"type": "text", "text": prompt.user}]},
        ]
        messages.extend({"role": "user", "content": [_image_part(image)]} for image in images)

        logger.info("Sending %d screenshot(s) to OpenAI model %s", len(images), self._model)
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content or ""
        except Exception as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise ProviderError(f"OpenAI processing failed: {exc}") from exc

        logger.debug("Raw OpenAI response: %s", content)
        return parse_solution(content)

    def stream_from_audio(self, audio: bytes, mime_type: str, language: str) -> Iterator[str]:
        raise UnsupportedOperation("Audio processing is currently only supported with Gemini provider")

    def answer_from_audio(self, audio: bytes, mime_type: str, language: str) -> str:
        raise UnsupportedOperation("Audio processing is currently only supported with Gemini provider")
