from __future__ import annotations

import logging
from pathlib import Path

import pytest

from errors import ConfigInvalid, InvalidState, RecordingFailed, user_message
from log_setup import setup_logging
from models import AppConfig, SolutionResult, StreamingTranscript
from prompts import audio_prompt, get_prompt


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def test_failed_result_shape() -> None:
    result = SolutionResult.failed("timeout")

    assert result.to_dict() == {
        "approach": "Error occurred while processing",
        "code": "Error: timeout",
        "timeComplexity": "N/A",
        "spaceComplexity": "N/A",
        "error": "timeout",
    }


def test_transcript_rejects_appends_after_freeze() -> None:
    transcript = StreamingTranscript()
    transcript.append("a")
    transcript.append("b")

    assert transcript.freeze() == "ab"
    with pytest.raises(InvalidState):
        transcript.append("c")
    assert transcript.text() == "ab"


def test_config_dict_round_trip_uses_camel_case() -> None:
    config = AppConfig(provider="gemini", gemini_api_key="g", audio_device_id="mic-2")

    data = config.to_dict()

    assert data["audioDeviceId"] == "mic-2"
    assert AppConfig.from_dict(data) == config


def test_api_key_for_unknown_provider() -> None:
    with pytest.raises(ConfigInvalid):
        AppConfig(provider="other").api_key


# ---------------------------------------------------------------------------
# Errors and prompts
# ---------------------------------------------------------------------------


def test_user_message_prefers_explicit_text() -> None:
    assert user_message(RecordingFailed("disk full")) == "disk full"
    assert user_message(RecordingFailed()) == "The recording could not be saved."
    assert user_message(ValueError()) == "ValueError"


@pytest.mark.parametrize("interview_type", ["algorithmic", "frontend", "java-microservices"])
def test_prompts_mention_language_and_json_keys(interview_type: str) -> None:
    prompt = get_prompt(interview_type, "Rust")

    assert "Rust" in prompt.system
    for key in ("approach", "code", "timeComplexity", "spaceComplexity"):
        assert f'"{key}"' in prompt.system


def test_unknown_interview_type_prompt() -> None:
    with pytest.raises(ConfigInvalid):
        get_prompt("devops", "Python")


def test_audio_prompt_mentions_language() -> None:
    assert "Kotlin" in audio_prompt("Kotlin")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def test_setup_logging_is_idempotent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "_interview_overlay_configured", False, raising=False)
    monkeypatch.setattr(root, "_interview_overlay_log_file", None, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    before = list(root.handlers)
    old_level = root.level

    try:
        log_file = setup_logging(tmp_path)
        again = setup_logging(tmp_path / "other")
        added = [h for h in root.handlers if h not in before]

        assert log_file is not None and log_file.parent == tmp_path
        assert again == log_file
        assert len(added) == 2
        assert root.level == logging.DEBUG
    finally:
        for handler in [h for h in root.handlers if h not in before]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(old_level)
