"""Prompt templates per interview type."""

from __future__ import annotations

from dataclasses import dataclass

from errors import ConfigInvalid
from models import InterviewType


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


_JSON_SHAPE = """Return the response as a single JSON object with exactly these keys:
{{
  "approach": "{approach}",
  "code": "{code}",
  "timeComplexity": "{time}",
  "spaceComplexity": "{space}"
}}"""


def _algorithmic(language: str) -> Prompt:
    return Prompt(
        system=(
            "You are an expert coding interview assistant. Read the coding question "
            f"shown in the screenshots and solve it in {language}.\n"
            + _JSON_SHAPE.format(
                approach="How to solve the problem, in plain words the candidate can say out loud",
                code="Complete, optimized solution with comments explaining the logic",
                time="Big O time complexity with a short reason",
                space="Big O space complexity with a short reason",
            )
        ),
        user="Here is a coding interview question. Please analyze and provide a solution.",
    )


def _frontend(language: str) -> Prompt:
    return Prompt(
        system=(
            "You are an expert frontend interview assistant. The screenshots show a "
            "question about HTML, CSS, JavaScript, React or another frontend topic. "
            f"Answer it in {language}.\n"
            + _JSON_SHAPE.format(
                approach="The concepts, best practices and trade-offs behind the answer",
                code="An illustrative code example, or a detailed explanation if no code applies",
                time="Time complexity of the code if relevant, otherwise N/A",
                space="Space complexity of the code if relevant, otherwise N/A",
            )
        ),
        user="Here is a frontend interview question. Please analyze and provide a solution.",
    )


def _java_microservices(language: str) -> Prompt:
    return Prompt(
        system=(
            "You are an expert in Java microservices interviews. The screenshots show a "
            "question about service architecture, Spring Boot, containers, Kubernetes or "
            f"API design. Answer it in {language}.\n"
            + _JSON_SHAPE.format(
                approach="The design patterns and practices that answer the question",
                code="A code or configuration example, or an architectural explanation",
                time="Performance considerations if relevant, otherwise N/A",
                space="Memory and resource considerations if relevant, otherwise N/A",
            )
        ),
        user="Here is a Java microservices interview question. Please analyze and provide a solution.",
    )


_PROMPTS = {
    InterviewType.ALGORITHMIC.value: _algorithmic,
    InterviewType.FRONTEND.value: _frontend,
    InterviewType.JAVA_MICROSERVICES.value: _java_microservices,
}


def get_prompt(interview_type: str, language: str) -> Prompt:
    try:
        factory = _PROMPTS[interview_type]
    except KeyError:
        raise ConfigInvalid(f"Unknown interview type: {interview_type}") from None
    return factory(language)


def audio_prompt(language: str) -> str:
    return (
        "You are an expert coding interview assistant. Listen to the recorded question "
        "and help the candidate answer it.\n"
        "1. Restate the problem extracted from the audio\n"
        "2. Explain the approach step by step\n"
        f"3. Give a complete, working solution in {language}\n"
        "4. State time and space complexity where it applies\n"
        "5. Mention edge cases and possible optimizations\n"
        "Keep the tone conversational, as if explaining the solution live."
    )
