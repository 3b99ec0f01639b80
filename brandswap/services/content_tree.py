"""
Tree walking over JSON-like content documents.

Two independent walkers live here:

- sanitize_document() produces a value-only copy of a record. Record-store
  client objects may carry back-references, so revisited nodes reuse the copy
  already produced for them (cycles become shared substructure).
- apply_replacers() rebuilds a document with every string leaf piped through
  an ordered list of replacer callables. Its output is re-serialized, so a
  revisited node is replaced with CIRCULAR_REFERENCE_MARKER instead.

Both walkers track visited nodes by id() in a map created per top-level call.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any

from brandswap.services.policy import PolicyRuleset

Replacer = Callable[[str], str]

CIRCULAR_REFERENCE_MARKER = "[Circular Reference]"

_SCALAR_TYPES = (str, int, float, bool, type(None))


class _Missing:
    """Marker for an absent key or array slot (distinct from None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


# -----------------------------------------------------------------------------
# Sanitizer
# -----------------------------------------------------------------------------


def sanitize_document(value: Any) -> Any:
    """
    Return a structurally isomorphic, value-only copy of ``value``.

    Mappings become dicts, lists and tuples become lists, scalars are kept.
    Callables are dropped. Any other object contributes its public,
    non-callable attributes as a dict.
    """
    return _sanitize(value, {})


def _sanitize(value: Any, seen: dict[int, Any]) -> Any:
    if isinstance(value, _SCALAR_TYPES):
        return value

    node_id = id(value)
    if node_id in seen:
        return seen[node_id]

    if isinstance(value, (list, tuple)):
        items: list[Any] = []
        seen[node_id] = items
        for item in value:
            if callable(item):
                continue
            items.append(_sanitize(item, seen))
        return items

    if isinstance(value, Mapping):
        members = list(value.items())
    elif hasattr(value, "__dict__"):
        members = [(k, v) for k, v in vars(value).items() if not k.startswith("_")]
    else:
        members = []

    copy: dict[Any, Any] = {}
    seen[node_id] = copy
    for key, member in members:
        if callable(member):
            continue
        copy[key] = _sanitize(member, seen)
    return copy


# -----------------------------------------------------------------------------
# Text replacement
# -----------------------------------------------------------------------------


def apply_replacers(tree: Any, replacers: list[Replacer]) -> Any:
    """
    Rebuild ``tree`` with each string leaf passed through ``replacers`` in order.

    Dict key order and list order are preserved. None and non-string scalars
    pass through unchanged. The input is never mutated.
    """
    return _replace(tree, replacers, set())


def _replace(node: Any, replacers: list[Replacer], seen: set[int]) -> Any:
    if node is None:
        return node
    if isinstance(node, str):
        text = node
        for replacer in replacers:
            text = replacer(text)
        return text
    if isinstance(node, (list, dict)):
        if id(node) in seen:
            return CIRCULAR_REFERENCE_MARKER
        seen.add(id(node))

        if isinstance(node, list):
            return [_replace(item, replacers, seen) for item in node]
        return {key: _replace(child, replacers, seen) for key, child in node.items()}
    return node


def make_term_replacer(term: str, replacement: str, whole_word: bool = False) -> Replacer:
    """Case-insensitive replacer for a literal term. The replacement is inserted verbatim."""
    if not term:
        return lambda text: text

    pattern = re.escape(term)
    if whole_word:
        pattern = rf"\b{pattern}\b"
    regex = re.compile(pattern, re.IGNORECASE)

    def replacer(text: str) -> str:
        return regex.sub(lambda _match: replacement, text)

    return replacer


def build_replacers(ruleset: PolicyRuleset, query: str, replace_with: str) -> list[Replacer]:
    """
    Build the replacer chain for a preview.

    Approved brand terms are applied first (whole-word), then the operator's
    query replacement (anywhere in the text).
    """
    brand_replacers = [
        make_term_replacer(rule.term, rule.replace_with, whole_word=True) for rule in ruleset.approved_terms
    ]

    def brandkit_replacer(text: str) -> str:
        for replacer in brand_replacers:
            text = replacer(text)
        return text

    return [brandkit_replacer, make_term_replacer(query, replace_with)]
