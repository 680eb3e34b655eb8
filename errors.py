"""Shared error codes, user-facing messages and the exception hierarchy."""

from __future__ import annotations

CAPABILITY_UNAVAILABLE = "CAPABILITY_UNAVAILABLE"
INVALID_STATE = "INVALID_STATE"
RECORDING_FAILED = "RECORDING_FAILED"
PROVIDER_ERROR = "PROVIDER_ERROR"
UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
CONFIG_INVALID = "CONFIG_INVALID"

ERROR_MESSAGES = {
    CAPABILITY_UNAVAILABLE: "No supported capture tool was found on this system.",
    INVALID_STATE: "That action is not possible right now.",
    RECORDING_FAILED: "The recording could not be saved.",
    PROVIDER_ERROR: "The AI provider returned an unusable response.",
    UNSUPPORTED_OPERATION: "The selected provider does not support this.",
    CONFIG_INVALID: "Configuration is incomplete. Press Ctrl+P to open settings.",
}


class InterviewAssistantError(Exception):
    code = PROVIDER_ERROR

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES[self.code])
        self.message = message or ERROR_MESSAGES[self.code]


class CapabilityUnavailable(InterviewAssistantError):
    code = CAPABILITY_UNAVAILABLE


class InvalidState(InterviewAssistantError):
    code = INVALID_STATE


class RecordingFailed(InterviewAssistantError):
    code = RECORDING_FAILED


class ProviderError(InterviewAssistantError):
    code = PROVIDER_ERROR


class UnsupportedOperation(InterviewAssistantError):
    code = UNSUPPORTED_OPERATION


class ConfigInvalid(InterviewAssistantError):
    code = CONFIG_INVALID


def user_message(exc: BaseException) -> str:
    """Render an exception for the error banner."""
    if isinstance(exc, InterviewAssistantError):
        return exc.message
    return str(exc) or exc.__class__.__name__
