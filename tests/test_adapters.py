from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from adapters import create_adapter
from errors import ConfigInvalid, ProviderError, UnsupportedOperation
from gemini_adapter import GeminiAdapter, _chunk_text
from models import AppConfig
from openai_adapter import OpenAIAdapter

VALID_JSON = '{"approach":"A","code":"C","timeComplexity":"O(n)","spaceComplexity":"O(1)"}'


def _openai_response(content: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _gemini_chunk(text) -> SimpleNamespace:  # noqa: ANN001
    part = SimpleNamespace(text=text)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------


def test_openai_sends_one_request_with_every_image() -> None:
    client = MagicMock()
    client.chat.completions.create.return_value = _openai_response(VALID_JSON)
    adapter = OpenAIAdapter("sk-test", model="gpt-4o", client=client)

    result = adapter.solve_from_images([b"one", b"two"], "Python", "algorithmic")

    assert result.code == "C"
    client.chat.completions.create.assert_called_once()
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["response_format"] == {"type": "json_object"}
    image_urls = [
        part["image_url"]["url"]
        for message in kwargs["messages"]
        if isinstance(message["content"], list)
        for part in message["content"]
        if part["type"] == "image_url"
    ]
    assert image_urls == ["data:image/png;base64,b25l", "data:image/png;base64,dHdv"]
    assert "Python" in kwargs["messages"][0]["content"]


def test_openai_wraps_client_errors() -> None:
    client = MagicMock()
    client.chat.completions.create.side_effect = RuntimeError("401 unauthorized")
    adapter = OpenAIAdapter("sk-test", client=client)

    with pytest.raises(ProviderError, match="401 unauthorized"):
        adapter.solve_from_images([b"img"], "Python", "algorithmic")


def test_openai_rejects_audio() -> None:
    adapter = OpenAIAdapter("sk-test", client=MagicMock())

    with pytest.raises(UnsupportedOperation):
        adapter.answer_from_audio(b"wav", "audio/wav", "Python")
    with pytest.raises(UnsupportedOperation):
        adapter.stream_from_audio(b"wav", "audio/wav", "Python")


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------


def test_chunk_text_tolerates_missing_parts() -> None:
    assert _chunk_text(SimpleNamespace(candidates=[])) == ""
    assert _chunk_text(SimpleNamespace()) == ""
    assert _chunk_text(_gemini_chunk(None)) == ""
    assert _chunk_text(_gemini_chunk("hi")) == "hi"


def test_gemini_solves_from_images() -> None:
    client = MagicMock()
    client.models.generate_content.return_value = _gemini_chunk(VALID_JSON)
    adapter = GeminiAdapter("g-key", client=client)

    result = adapter.solve_from_images([b"img"], "Java", "java-microservices")

    assert result.approach == "A"
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert len(kwargs["contents"]) == 2
    assert "Java" in kwargs["contents"][0]


def test_gemini_stream_skips_empty_chunks() -> None:
    client = MagicMock()
    client.models.generate_content_stream.return_value = iter(
        [_gemini_chunk("Hello "), _gemini_chunk(""), SimpleNamespace(candidates=None), _gemini_chunk("world")]
    )
    adapter = GeminiAdapter("g-key", client=client)

    chunks = list(adapter.stream_from_audio(b"wav", "audio/wav", "Python"))

    assert chunks == ["Hello ", "world"]
    client.models.generate_content_stream.assert_called_once()


def test_gemini_stream_failure_becomes_provider_error() -> None:
    def broken():
        yield _gemini_chunk("partial")
        raise RuntimeError("connection reset")

    client = MagicMock()
    client.models.generate_content_stream.return_value = broken()
    adapter = GeminiAdapter("g-key", client=client)
    stream = adapter.stream_from_audio(b"wav", "audio/wav", "Python")

    assert next(stream) == "partial"
    with pytest.raises(ProviderError, match="connection reset"):
        next(stream)


def test_gemini_non_streaming_answer() -> None:
    client = MagicMock()
    client.models.generate_content.return_value = _gemini_chunk("Full answer")
    adapter = GeminiAdapter("g-key", client=client)

    assert adapter.answer_from_audio(b"wav", "audio/wav", "Python") == "Full answer"


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@patch("openai_adapter.OpenAI")
def test_create_adapter_for_openai(mock_openai: MagicMock) -> None:
    adapter = create_adapter(AppConfig(provider="openai", openai_api_key=" sk-test ", model="gpt-4o"))

    assert isinstance(adapter, OpenAIAdapter)
    assert adapter.model == "gpt-4o"
    mock_openai.assert_called_once_with(api_key="sk-test")


@patch("gemini_adapter.genai")
def test_create_adapter_for_gemini(mock_genai: MagicMock) -> None:
    adapter = create_adapter(AppConfig(provider="gemini", gemini_api_key="g-key", model="gemini-2.5-pro"))

    assert isinstance(adapter, GeminiAdapter)
    mock_genai.Client.assert_called_once_with(api_key="g-key")


def test_create_adapter_requires_key() -> None:
    with pytest.raises(ConfigInvalid):
        create_adapter(AppConfig(provider="gemini", openai_api_key="sk-only"))
