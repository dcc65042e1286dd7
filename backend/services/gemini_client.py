"""Google Gemini API wrapper with error handling."""

import json
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def is_configured() -> bool:
    return bool(settings.gemini_api_key)


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - AI extraction disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def parse_json_response(text: str) -> dict:
    """Parse a model reply, tolerating markdown fences and surrounding prose."""
    text = text.strip()
    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise json.JSONDecodeError("No JSON object found", text, 0)
    parsed = json.loads(text[start:end + 1])
    if not isinstance(parsed, dict):
        raise json.JSONDecodeError("Top-level JSON value is not an object", text, start)
    return parsed


async def generate_json(prompt: str) -> dict | None:
    """Send a prompt to Gemini and parse the JSON response.

    Returns None when no client is configured or the reply is not valid JSON.
    API errors are logged and re-raised so callers can fall back.
    """
    client = get_client()
    if client is None:
        return None

    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=0.1,
                max_output_tokens=4096,
            ),
        )
        return parse_json_response(response.text or "")

    except json.JSONDecodeError as e:
        logger.error("Failed to parse Gemini response as JSON: %s", e)
        return None
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        raise
