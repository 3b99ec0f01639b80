# brandswap/llm/openai_provider.py
"""
OpenAI refinement provider implementation.
"""

from __future__ import annotations

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from brandswap.llm.base import RefinementConfigError, RefinementProvider, RefinementServiceError
from brandswap.llm.prompts import build_refinement_prompts

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIRefinementProvider(RefinementProvider):
    """OpenAI-based refinement provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.2,
    ):
        if not api_key:
            raise RefinementConfigError("OPENAI_API_KEY is not set. Contextual refinement requires an OpenAI API key.")

        self._model = model or DEFAULT_OPENAI_MODEL
        self._temperature = temperature
        self._client = AsyncOpenAI(api_key=api_key)

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model

    async def refine_text(
        self,
        document_text: str,
        original_term: str,
        new_term: str,
    ) -> Optional[str]:
        """Make a JSON-mode chat completion request."""
        system_prompt, user_prompt = build_refinement_prompts(document_text, original_term, new_term)

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise RefinementServiceError(f"OpenAI API call failed: {e}") from e

        return response.choices[0].message.content

    async def close(self) -> None:
        await self._client.close()
