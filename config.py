"""JSON-based config store with environment overrides."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from errors import ConfigInvalid
from models import AppConfig, InterviewType, Provider

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".config" / "interview_overlay"
SCREENSHOT_DIR = Path(tempfile.gettempdir()) / "interview_overlay" / "screenshots"
RECORDING_DIR = APP_DIR / "recordings"
LOG_DIR = APP_DIR / "logs"

OPENAI_MODELS = ("gpt-3.5-turbo", "gpt-4", "gpt-4o", "gpt-4o-mini")
GEMINI_MODELS = ("gemini-2.5-flash", "gemini-2.5-pro")
MODELS_BY_PROVIDER = {
    Provider.OPENAI.value: OPENAI_MODELS,
    Provider.GEMINI.value: GEMINI_MODELS,
}
LANGUAGES = ("Python", "JavaScript", "TypeScript", "Java", "C++", "Go")


def validate_config(config: AppConfig) -> None:
    if not config.provider or not config.language or not config.model:
        raise ConfigInvalid("Invalid configuration - missing required fields")
    if config.provider not in MODELS_BY_PROVIDER:
        raise ConfigInvalid(f"Unsupported AI provider: {config.provider}")
    if config.interview_type not in {t.value for t in InterviewType}:
        raise ConfigInvalid(f"Unknown interview type: {config.interview_type}")
    if config.provider == Provider.OPENAI.value and not config.openai_api_key.strip():
        raise ConfigInvalid("OpenAI API key is required when using OpenAI provider")
    if config.provider == Provider.GEMINI.value and not config.gemini_api_key.strip():
        raise ConfigInvalid("Gemini API key is required when using Gemini provider")


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[AppConfig]:
    """Return a config built from environment variables, if the full set is present."""
    env = os.environ if environ is None else environ
    openai_key = env.get("OPENAI_API_KEY", "")
    gemini_key = env.get("GEMINI_API_KEY", "")
    language = env.get("APP_LANGUAGE", "")
    model = env.get("AI_MODEL", "")
    provider = env.get("AI_PROVIDER", "")
    if not ((openai_key or gemini_key) and language and model and provider):
        return None
    return AppConfig(
        provider=provider,
        openai_api_key=openai_key,
        gemini_api_key=gemini_key,
        language=language,
        model=model,
        audio_device_id=env.get("AUDIO_DEVICE_ID") or "default",
        interview_type=env.get("INTERVIEW_TYPE") or InterviewType.ALGORITHMIC.value,
    )


class JsonConfigStore:
    def __init__(
        self,
        path: Path | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._path = path or APP_DIR / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._environ = environ

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[AppConfig]:
        env_config = config_from_env(self._environ)
        if env_config is not None:
            logger.info("Using configuration from environment variables")
            return env_config

        data = self._read_all()
        if not (data.get("provider") and data.get("language") and data.get("model")):
            return None
        return AppConfig.from_dict(data)

    def save(self, config: AppConfig) -> None:
        validate_config(config)
        self._write_all(config.to_dict())
        logger.info("Configuration saved to %s (provider=%s)", self._path, config.provider)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.error("Error loading config from %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=".config-", suffix=".json", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
