"""
Language model fallback used when no knowledge base rule matches.
"""
import os

from openai import OpenAI
from openai import APITimeoutError

from chatbot.constants import OPENAI_API_TIMEOUT_SECONDS, OPENAI_MODEL, OPENAI_TEMPERATURE
from chatbot.logger import logger

# Initialize OpenAI client - assumes OPENAI_API_KEY is validated at startup
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
client = OpenAI(api_key=OPENAI_API_KEY) if OPENAI_API_KEY else None


class AIServiceError(Exception):
    """The language model could not produce a reply."""


def generate(prompt: str) -> str:
    """Send `prompt` as a single user message and return the reply text."""
    if client is None:
        raise AIServiceError("OpenAI API key is not configured")

    try:
        response = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=OPENAI_TEMPERATURE,
            timeout=OPENAI_API_TIMEOUT_SECONDS,
        )
    except APITimeoutError as e:
        logger.error("OpenAI API timeout (timeout=%ss)", OPENAI_API_TIMEOUT_SECONDS)
        raise AIServiceError("OpenAI API timed out") from e
    except Exception as e:  # noqa: BLE001 - want to catch all OpenAI client errors
        logger.exception("OpenAI error while generating a reply")
        raise AIServiceError(f"OpenAI request failed: {e}") from e

    content = (response.choices[0].message.content or "").strip()
    if not content:
        logger.error("OpenAI returned empty content")
        raise AIServiceError("OpenAI returned empty content")

    return content
