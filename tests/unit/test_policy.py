# tests/unit/test_policy.py
"""
Unit tests for the brand policy ruleset and change classification.
"""

import pytest

from brandswap.services.differ import DiffEntry
from brandswap.services.policy import (
    ApprovedTerm,
    PolicyRuleset,
    PolicyViolation,
    classify_changes,
    contains_banned_term,
    ensure_allowed,
    find_banned_term,
)


class TestPolicyRuleset:
    def test_from_dict(self):
        ruleset = PolicyRuleset.from_dict(
            {
                "approvedTerms": [{"term": "acme", "replaceWith": "ACME"}],
                "bannedTerms": ["cheap"],
            }
        )
        assert ruleset.approved_terms == (ApprovedTerm(term="acme", replace_with="ACME"),)
        assert ruleset.banned_terms == ("cheap",)

    def test_from_empty(self):
        assert PolicyRuleset.from_dict(None) == PolicyRuleset()
        assert PolicyRuleset.from_dict({}) == PolicyRuleset()

    def test_malformed_rules_dropped(self):
        ruleset = PolicyRuleset.from_dict(
            {
                "approvedTerms": [
                    {"term": "ok", "replaceWith": "OK"},
                    {"term": "", "replaceWith": "x"},
                    {"term": "no-replacement"},
                    "not-a-rule",
                ],
                "bannedTerms": ["", "  ", 5, "real"],
            }
        )
        assert [rule.term for rule in ruleset.approved_terms] == ["ok"]
        assert ruleset.banned_terms == ("real",)

    def test_round_trip_wire_shape(self):
        data = {"approvedTerms": [{"term": "acme", "replaceWith": "ACME"}], "bannedTerms": ["cheap"]}
        assert PolicyRuleset.from_dict(data).to_dict() == data


class TestBannedTerms:
    def test_case_insensitive(self, ruleset):
        assert find_banned_term("this has fOO in it", ruleset) == "Foo"
        assert contains_banned_term("FOO", ruleset)

    def test_no_match(self, ruleset):
        assert find_banned_term("all clear", ruleset) is None
        assert not contains_banned_term("", ruleset)

    def test_ensure_allowed_raises(self, ruleset):
        with pytest.raises(PolicyViolation) as exc_info:
            ensure_allowed("Foo fighters", ruleset)
        assert exc_info.value.term == "Foo"

    def test_ensure_allowed_passes(self, ruleset):
        ensure_allowed("fine text", ruleset)


class TestClassifyChanges:
    def test_banned_after_value_not_approved(self):
        ruleset = PolicyRuleset.from_dict({"bannedTerms": ["foo"]})
        entries = [
            DiffEntry(field="a", before="x", after="this has Foo in it"),
            DiffEntry(field="b", before="x", after="clean"),
        ]

        classified = classify_changes(entries, ruleset)
        assert [e.brandkit_approved for e in classified] == [False, True]
        assert classified[0].field == "a"

    def test_before_value_ignored(self):
        ruleset = PolicyRuleset.from_dict({"bannedTerms": ["foo"]})
        classified = classify_changes([DiffEntry(field="a", before="foo", after="bar")], ruleset)
        assert classified[0].brandkit_approved is True

    def test_empty_ruleset_approves_everything(self):
        classified = classify_changes([DiffEntry(field="a", before="x", after="anything")], PolicyRuleset())
        assert classified[0].brandkit_approved is True
