# brandswap/llm/base.py
"""
Base interface for contextual refinement providers.
Allows swapping between Gemini, OpenAI, or other providers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class RefinementConfigError(Exception):
    """A refinement provider cannot be constructed (e.g. missing API key)."""


class RefinementServiceError(Exception):
    """The refinement service failed or returned nothing usable."""


class MalformedResponseError(RefinementServiceError):
    """The refinement service answered with text that is not JSON, even after repair."""


class RefinementProvider(ABC):
    """Abstract base class for refinement providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name (e.g., 'gemini', 'openai')."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model being used (e.g., 'gemini-1.5-flash')."""
        pass

    @abstractmethod
    async def refine_text(
        self,
        document_text: str,
        original_term: str,
        new_term: str,
    ) -> Optional[str]:
        """
        Ask the model to smooth over a crude replacement.

        Args:
            document_text: The replaced document serialized as JSON
            original_term: The term that was searched for
            new_term: The term it was replaced with

        Returns:
            The raw model response text (may include fences or commentary)

        Raises:
            RefinementServiceError: on transport or service failure
        """
        pass

    async def close(self) -> None:
        """Release client resources. Providers without pooled clients need not override."""
        return None
