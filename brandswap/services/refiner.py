"""
Contextual refinement of replaced documents.

The adapter sends a replaced document to a RefinementProvider and folds the
answer back in. Refinement is strictly best-effort: any failure (transport
error, empty answer, non-JSON even after repair, changed root shape) returns
the unrefined document for that entry only.
"""

import asyncio
import json
import logging
import re
from typing import Any

from json_repair import repair_json

from brandswap.llm.base import MalformedResponseError, RefinementProvider, RefinementServiceError
from brandswap.logging_config import log_refinement_call
from brandswap.services.resilience import CircuitBreaker, CircuitOpenError

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```(?:json|javascript)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")


def sanitize_llm_response(raw: str | None) -> str | None:
    """
    Isolate the JSON value in a model response.

    Strips code fences, then drops everything before the first ``{``/``[``
    and after the last ``}``/``]``.
    """
    if not raw:
        return raw

    cleaned = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", raw.strip())).strip()

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if starts:
        cleaned = cleaned[min(starts):]

    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if end != -1:
        cleaned = cleaned[: end + 1]

    return cleaned.strip()


def parse_refined_json(text: str) -> Any:
    """
    Parse sanitized model output, repairing near-JSON once if needed.

    Raises:
        MalformedResponseError: if the text is still not JSON after repair
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Refinement returned invalid JSON. Attempting repair...")

    repaired = repair_json(text)
    try:
        data = json.loads(repaired)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedResponseError(f"Still invalid JSON after repair: {e}") from e

    # repair_json answers "" for input with no salvageable JSON
    if data == "":
        raise MalformedResponseError("Response contained no recoverable JSON")

    logger.info("Refinement JSON repaired successfully")
    return data


class RefinementAdapter:
    """
    Run documents through a refinement provider with validation and fallback.

    Args:
        provider: The model-backed provider
        max_concurrency: Max in-flight provider calls for refine_many()
        breaker: Circuit breaker guarding the provider (one is created if omitted)
    """

    def __init__(
        self,
        provider: RefinementProvider,
        max_concurrency: int = 5,
        breaker: CircuitBreaker | None = None,
    ):
        self.provider = provider
        self.max_concurrency = max(1, max_concurrency)
        self.breaker = breaker or CircuitBreaker(name=f"refinement:{provider.name}")

    async def refine(
        self,
        transformed_doc: Any,
        original_term: str,
        new_term: str,
        entry_uid: str | None = None,
    ) -> Any:
        """Return the refined document, or ``transformed_doc`` if refinement fails."""
        document_text = json.dumps(transformed_doc, indent=2, ensure_ascii=False)

        try:
            with log_refinement_call(self.provider.name, self.provider.model_name, entry_uid):
                raw = await self.breaker.call(self.provider.refine_text, document_text, original_term, new_term)
        except (RefinementServiceError, CircuitOpenError) as e:
            logger.warning(f"Refinement skipped for entry {entry_uid}: {e}. Falling back to simple replacement.")
            return transformed_doc
        except Exception as e:
            logger.error(f"Unexpected refinement failure for entry {entry_uid}: {e}", exc_info=True)
            return transformed_doc

        try:
            refined = self._validate(sanitize_llm_response(raw), transformed_doc)
        except MalformedResponseError as e:
            logger.error(f"Refinement unusable for entry {entry_uid}: {e}. Falling back to simple replacement.")
            return transformed_doc

        logger.info(f"Refinement applied to entry {entry_uid}", extra={"entry_uid": entry_uid})
        return refined

    def _validate(self, sanitized: str | None, transformed_doc: Any) -> Any:
        if not sanitized:
            raise MalformedResponseError("Empty refinement response")

        refined = parse_refined_json(sanitized)
        if type(refined) is not type(transformed_doc):
            raise MalformedResponseError(
                f"Refinement changed the document root from {type(transformed_doc).__name__} "
                f"to {type(refined).__name__}"
            )
        return refined

    async def refine_many(
        self,
        documents: list[Any],
        original_term: str,
        new_term: str,
        entry_uids: list[str | None] | None = None,
    ) -> list[Any]:
        """Refine documents concurrently (bounded), preserving input order."""
        if not documents:
            return []

        uids = entry_uids or [None] * len(documents)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        logger.info(f"Starting contextual refinement for {len(documents)} entries...")

        async def _bounded(doc: Any, uid: str | None) -> Any:
            async with semaphore:
                return await self.refine(doc, original_term, new_term, entry_uid=uid)

        return list(await asyncio.gather(*(_bounded(doc, uid) for doc, uid in zip(documents, uids))))

    async def close(self) -> None:
        await self.provider.close()
