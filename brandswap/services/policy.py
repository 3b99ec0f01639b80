"""
Brand policy ruleset and change classification.

A PolicyRuleset is an immutable snapshot of the approved/banned term lists,
fetched once per preview or apply request.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from brandswap.services.differ import DiffEntry


@dataclass(frozen=True)
class ApprovedTerm:
    """A term that should always be rewritten to its approved form."""

    term: str
    replace_with: str

    def to_dict(self) -> dict[str, str]:
        return {"term": self.term, "replaceWith": self.replace_with}


@dataclass(frozen=True)
class PolicyRuleset:
    approved_terms: tuple[ApprovedTerm, ...] = ()
    banned_terms: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "PolicyRuleset":
        """
        Build a ruleset from the Brandkit wire shape.

        Malformed approved-term entries and blank banned terms are dropped.
        """
        data = data or {}
        approved: list[ApprovedTerm] = []
        for rule in data.get("approvedTerms") or []:
            if not isinstance(rule, Mapping):
                continue
            term = rule.get("term")
            replace_with = rule.get("replaceWith")
            if isinstance(term, str) and term and isinstance(replace_with, str):
                approved.append(ApprovedTerm(term=term, replace_with=replace_with))

        banned = tuple(term for term in data.get("bannedTerms") or [] if isinstance(term, str) and term.strip())
        return cls(approved_terms=tuple(approved), banned_terms=banned)

    def to_dict(self) -> dict[str, Any]:
        return {
            "approvedTerms": [rule.to_dict() for rule in self.approved_terms],
            "bannedTerms": list(self.banned_terms),
        }


class PolicyViolation(Exception):
    """A value contains a banned term and must not be written."""

    def __init__(self, term: str):
        self.term = term
        super().__init__(f"Value contains banned term '{term}'")


def find_banned_term(text: str, ruleset: PolicyRuleset) -> str | None:
    """Return the first banned term contained in ``text`` (case-insensitive), if any."""
    lowered = (text or "").lower()
    for term in ruleset.banned_terms:
        if term.lower() in lowered:
            return term
    return None


def contains_banned_term(text: str, ruleset: PolicyRuleset) -> bool:
    return find_banned_term(text, ruleset) is not None


def ensure_allowed(text: str, ruleset: PolicyRuleset) -> None:
    """Raise PolicyViolation if ``text`` contains a banned term."""
    term = find_banned_term(text, ruleset)
    if term is not None:
        raise PolicyViolation(term)


def classify_changes(entries: Iterable["DiffEntry"], ruleset: PolicyRuleset) -> list["DiffEntry"]:
    """Label each diff entry brandkit-approved unless its new value contains a banned term."""
    return [replace(entry, brandkit_approved=not contains_banned_term(entry.after, ruleset)) for entry in entries]
