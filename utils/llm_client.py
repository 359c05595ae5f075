"""
Gemini LLM client used as the text oracle for classification and narratives.
"""
from __future__ import annotations

from typing import Any, Dict

import google.generativeai as genai

from config.settings import settings
from utils.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """Thin wrapper around a Gemini model with a bounded request time."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        generation_config: Dict[str, Any] | None = None,
    ):
        self.api_key = api_key or settings.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is not set; cannot initialize LLM client.")

        genai.configure(api_key=self.api_key)

        self.model_name = model or settings.GEMINI_MODEL
        self.timeout = timeout or settings.ORACLE_TIMEOUT_SECONDS
        self.generation_config = generation_config or {
            "temperature": 0.2,
            "top_p": 0.9,
            "top_k": 40,
        }
        self.model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config=genai.types.GenerationConfig(**self.generation_config),
        )

    def generate(self, prompt: str) -> str:
        """
        Generate raw text from the Gemini model.

        Errors (including the request timeout) propagate to the caller,
        which is expected to fall back to deterministic output.
        """
        logger.debug(f"Calling {self.model_name} with a {len(prompt)} char prompt (timeout {self.timeout}s)")
        response = self.model.generate_content(
            prompt,
            request_options={"timeout": self.timeout},
        )
        return getattr(response, "text", "") or ""
