# llm_client.py
import logging
from functools import lru_cache
from typing import Optional

from google import genai
from google.genai import types

from config import get_settings
from errors import LLMResponseError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_client() -> genai.Client:
    api_key = get_settings().gemini_api_key
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY is not set in .env or environment variables.")
    return genai.Client(api_key=api_key)


def call_gemini_text(
    system_prompt: str,
    user_prompt: str,
    temperature: Optional[float] = None,
) -> str:
    """
    Call Gemini and return the raw response text.
    The shape of the text is not guaranteed; callers normalize it.
    """
    settings = get_settings()
    if temperature is None:
        temperature = settings.llm_temperature

    full_prompt = f"""
SYSTEM INSTRUCTION:
{system_prompt}

USER INPUT:
{user_prompt}
"""

    logger.info("Sending prompt to %s", settings.gemini_model)
    response = get_client().models.generate_content(
        model=settings.gemini_model,
        contents=full_prompt,
        config=types.GenerateContentConfig(
            temperature=temperature,
        ),
    )

    text = (response.text or "").strip()
    if not text:
        raise LLMResponseError("Gemini returned an empty response.", raw_text=text)

    logger.debug("Raw model response: %s", text)
    return text

