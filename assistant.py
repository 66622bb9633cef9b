"""
Generative-text collaborator used by the AI route.

The provider call is kept behind ``Assistant.reply`` so the route can swap in
any object with the same method. Failures are masked by the route, not here.
"""

import logging
from typing import Dict, List, Optional

from google import genai
from google.genai import types

import config
from errors import ConfigurationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant for FixitHub, a home repair and maintenance platform. "
    "Recommend hiring a professional from the platform for work that is dangerous or needs a license."
)

OFFLINE_MESSAGE = "I'm currently offline. Please configure the AI service and try again later."
FAILURE_MESSAGE = "Sorry, I am currently offline or experiencing high traffic. Please try again later."
EMPTY_REPLY_MESSAGE = "I'm having trouble thinking of a solution right now. Please try again."


class Assistant:
    def __init__(self, api_key: str, model: str = config.GEMINI_MODEL):
        self.client = genai.Client(api_key=api_key)
        self.model = model

    def reply(self, history: List[Dict[str, str]], prompt: str) -> str:
        contents = [
            {"role": turn["role"], "parts": [{"text": turn["text"]}]}
            for turn in history
        ]
        contents.append({"role": "user", "parts": [{"text": prompt}]})
        result = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(system_instruction=SYSTEM_PROMPT),
        )
        return result.text or EMPTY_REPLY_MESSAGE


_assistant: Optional[Assistant] = None


def get_assistant() -> Assistant:
    global _assistant
    if not config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set, AI assistant is offline")
        raise ConfigurationError("AI service is not configured")
    if _assistant is None:
        _assistant = Assistant(config.GEMINI_API_KEY)
    return _assistant


def provide_assistant() -> Optional[Assistant]:
    """FastAPI dependency: the assistant, or None while it is unconfigured."""
    try:
        return get_assistant()
    except ConfigurationError:
        return None
