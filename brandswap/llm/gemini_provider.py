# brandswap/llm/gemini_provider.py
"""
Google Gemini refinement provider.
"""

from __future__ import annotations

import logging
from typing import Optional

from brandswap.llm.base import RefinementConfigError, RefinementProvider, RefinementServiceError
from brandswap.llm.prompts import build_refinement_prompts

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


class GeminiRefinementProvider(RefinementProvider):
    """Gemini-based refinement provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.2,
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key (required).
            model: Model to use, defaults to gemini-1.5-flash.
            temperature: Sampling temperature.

        Raises:
            RefinementConfigError: if no API key is given.
        """
        if not api_key:
            raise RefinementConfigError("GEMINI_API_KEY is not set. Contextual refinement requires a Gemini API key.")

        import google.generativeai as genai

        genai.configure(api_key=api_key)
        self._genai = genai
        self._model = model or DEFAULT_GEMINI_MODEL
        self._temperature = temperature
        logger.info(f"Using Gemini model: {self._model}")

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model

    async def refine_text(
        self,
        document_text: str,
        original_term: str,
        new_term: str,
    ) -> Optional[str]:
        """Refine using Gemini with a JSON response mime type."""
        system_prompt, user_prompt = build_refinement_prompts(document_text, original_term, new_term)

        model = self._genai.GenerativeModel(
            self._model,
            system_instruction=system_prompt,
            generation_config=self._genai.GenerationConfig(
                response_mime_type="application/json",
                temperature=self._temperature,
            ),
        )

        try:
            response = await model.generate_content_async(user_prompt)
            return response.text
        except Exception as e:
            raise RefinementServiceError(f"Gemini API call failed: {e}") from e
