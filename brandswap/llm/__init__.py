# brandswap/llm/__init__.py
"""
Refinement provider abstraction layer.

Usage:
    from brandswap.llm import get_refinement_provider

    provider = get_refinement_provider("gemini", api_key="...")
    text = await provider.refine_text(document_json, "Everest", "K2")
"""

from __future__ import annotations

from brandswap.llm.base import (
    MalformedResponseError,
    RefinementConfigError,
    RefinementProvider,
    RefinementServiceError,
)

__all__ = [
    "MalformedResponseError",
    "RefinementConfigError",
    "RefinementProvider",
    "RefinementServiceError",
    "get_refinement_provider",
]


def get_refinement_provider(provider_name: str = "gemini", **kwargs) -> RefinementProvider:
    """
    Factory function to get a refinement provider instance.

    Args:
        provider_name: Provider to use ('gemini' or 'openai')
        **kwargs: Passed to the provider constructor (api_key, model, temperature)

    Raises:
        RefinementConfigError: for an unknown provider or missing credentials
    """
    name = provider_name.lower().strip()

    if name == "gemini":
        from brandswap.llm.gemini_provider import GeminiRefinementProvider

        return GeminiRefinementProvider(**kwargs)

    if name == "openai":
        from brandswap.llm.openai_provider import OpenAIRefinementProvider

        return OpenAIRefinementProvider(**kwargs)

    raise RefinementConfigError(f"Unknown refinement provider: {name}. Available: gemini, openai")
